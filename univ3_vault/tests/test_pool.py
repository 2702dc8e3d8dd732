"""
SimulatedPool / PoolPositionAdapter 테스트

Position Adapter 호출 계약(민트 올림, 번 내림, collect 전송)을 검증합니다.
"""

import pytest

from ..constants import Q96
from ..errors import InsufficientBalance, InsufficientLiquidity, InvalidRange, ZeroLiquidity
from ..ledger import InMemoryLedger
from ..math.liquidity_amounts import get_amounts_for_liquidity
from ..math.sqrt_price_math import encode_price_sqrt
from ..math.tick_math import get_sqrt_ratio_at_tick
from ..pool import PoolPositionAdapter, SimulatedPool, check_ticks


OWNER = "vault"
SUPPLY = 10**30


@pytest.fixture
def pool():
    token0 = InMemoryLedger("T0")
    token1 = InMemoryLedger("T1")
    token0.mint(OWNER, SUPPLY)
    token1.mint(OWNER, SUPPLY)
    return SimulatedPool(token0, token1, encode_price_sqrt(1, 1), tick_spacing=60)


@pytest.fixture
def adapter(pool):
    return PoolPositionAdapter(pool, OWNER)


class TestCheckTicks:
    """check_ticks 테스트"""

    def test_valid(self):
        check_ticks(-600, 600, 60)

    def test_unordered(self):
        with pytest.raises(InvalidRange):
            check_ticks(600, 600, 60)
        with pytest.raises(InvalidRange):
            check_ticks(600, -600, 60)

    def test_unaligned(self):
        with pytest.raises(InvalidRange):
            check_ticks(-610, 600, 60)

    def test_out_of_domain(self):
        with pytest.raises(InvalidRange):
            check_ticks(-887280, 600, 60)


class TestSimulatedPool:
    """SimulatedPool 테스트"""

    def test_slot0(self, pool):
        assert pool.slot0() == (Q96, 0)

    def test_set_tick(self, pool):
        pool.set_tick(300)
        assert pool.slot0() == (get_sqrt_ratio_at_tick(300), 300)

    def test_set_sqrt_price(self, pool):
        pool.set_sqrt_price(get_sqrt_ratio_at_tick(-120) + 1)
        assert pool.tick == -120

    def test_mint_rounds_up_and_pulls_tokens(self, adapter, pool):
        liquidity = 10**18 + 1
        expected = get_amounts_for_liquidity(
            Q96, get_sqrt_ratio_at_tick(-600), get_sqrt_ratio_at_tick(600), liquidity, round_up=True
        )

        amounts = adapter.mint(-600, 600, liquidity)

        assert amounts == expected
        assert pool.token0.balance_of(pool.address) == expected[0]
        assert pool.token1.balance_of(pool.address) == expected[1]
        assert adapter.position_liquidity(-600, 600) == liquidity

    def test_mint_zero_liquidity(self, adapter):
        with pytest.raises(ZeroLiquidity):
            adapter.mint(-600, 600, 0)

    def test_mint_insufficient_balance(self, pool):
        adapter = PoolPositionAdapter(pool, "nobody")
        with pytest.raises(InsufficientBalance):
            adapter.mint(-600, 600, 10**18)

    def test_burn_rounds_down_into_owed(self, adapter, pool):
        adapter.mint(-600, 600, 10**18)
        expected = get_amounts_for_liquidity(
            Q96, get_sqrt_ratio_at_tick(-600), get_sqrt_ratio_at_tick(600), 4 * 10**17, round_up=False
        )

        amounts = adapter.burn(-600, 600, 4 * 10**17)

        position = pool.position(OWNER, -600, 600)
        assert amounts == expected
        assert position.liquidity == 6 * 10**17
        assert (position.tokens_owed_0, position.tokens_owed_1) == expected

    def test_burn_more_than_position(self, adapter):
        adapter.mint(-600, 600, 10**18)
        with pytest.raises(InsufficientLiquidity):
            adapter.burn(-600, 600, 10**18 + 1)

    def test_collect_transfers_owed(self, adapter, pool):
        adapter.mint(-600, 600, 10**18)
        owed = adapter.burn(-600, 600, 10**18)
        balance0 = pool.token0.balance_of(OWNER)

        collected = adapter.collect(-600, 600)

        assert collected == owed
        assert pool.token0.balance_of(OWNER) == balance0 + owed[0]
        assert (OWNER, -600, 600) not in pool.positions

    def test_collect_respects_maximum(self, adapter, pool):
        adapter.mint(-600, 600, 10**18)
        pool.accrue_fees(OWNER, -600, 600, 500, 700)
        burned = adapter.burn(-600, 600, 10**17)

        collected = adapter.collect(-600, 600, burned[0], burned[1])

        assert collected == burned
        position = pool.position(OWNER, -600, 600)
        assert (position.tokens_owed_0, position.tokens_owed_1) == (500, 700)

    def test_collect_missing_position(self, adapter):
        assert adapter.collect(-600, 600) == (0, 0)

    def test_accrue_fees_requires_position(self, pool):
        with pytest.raises(InsufficientLiquidity):
            pool.accrue_fees(OWNER, -600, 600, 1, 1)

    def test_snapshot_restore(self, adapter, pool):
        snapshot = adapter.snapshot()
        adapter.mint(-600, 600, 10**18)
        adapter.restore(snapshot)
        assert adapter.position_liquidity(-600, 600) == 0


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
