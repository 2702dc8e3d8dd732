"""
InMemoryLedger 테스트
"""

import pytest

from ..errors import InsufficientBalance
from ..ledger import InMemoryLedger


@pytest.fixture
def ledger():
    ledger = InMemoryLedger("T0")
    ledger.mint("alice", 1000)
    return ledger


class TestInMemoryLedger:
    """mint / burn / transfer / snapshot 테스트"""

    def test_mint(self, ledger):
        assert ledger.balance_of("alice") == 1000
        assert ledger.balance_of("bob") == 0
        assert ledger.total_supply() == 1000

    def test_negative_mint(self, ledger):
        with pytest.raises(ValueError):
            ledger.mint("alice", -1)

    def test_burn(self, ledger):
        ledger.burn("alice", 400)
        assert ledger.balance_of("alice") == 600
        assert ledger.total_supply() == 600

    def test_burn_more_than_balance(self, ledger):
        with pytest.raises(InsufficientBalance) as excinfo:
            ledger.burn("alice", 1001)
        assert excinfo.value.code == "IB"
        assert ledger.balance_of("alice") == 1000

    def test_transfer(self, ledger):
        ledger.transfer("alice", "bob", 250)
        assert ledger.balance_of("alice") == 750
        assert ledger.balance_of("bob") == 250
        assert ledger.total_supply() == 1000

    def test_transfer_insufficient(self, ledger):
        with pytest.raises(InsufficientBalance):
            ledger.transfer("bob", "alice", 1)

    def test_snapshot_restore(self, ledger):
        snapshot = ledger.snapshot()
        ledger.transfer("alice", "bob", 250)
        ledger.mint("carol", 5)

        ledger.restore(snapshot)

        assert ledger.balance_of("alice") == 1000
        assert ledger.balance_of("bob") == 0
        assert ledger.total_supply() == 1000

    def test_restore_is_reusable(self, ledger):
        snapshot = ledger.snapshot()
        ledger.restore(snapshot)
        ledger.transfer("alice", "bob", 1)
        ledger.restore(snapshot)
        assert ledger.balance_of("bob") == 0


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
