"""
Ledgers - share / token 잔액 장부

Vault는 share 장부에 대해 mint/burn만, token 장부에 대해 transfer만 호출합니다.
실제 배포에서는 외부 토큰 컨트랙트가 이 역할을 하며,
여기의 인메모리 구현은 테스트와 시뮬레이션용입니다.
"""

from typing import Dict, Protocol

from .errors import InsufficientBalance


class ShareLedger(Protocol):
    """Vault share 장부 인터페이스"""

    def mint(self, account: str, amount: int) -> None: ...

    def burn(self, account: str, amount: int) -> None: ...

    def balance_of(self, account: str) -> int: ...

    def total_supply(self) -> int: ...


class TokenLedger(Protocol):
    """ERC20 토큰 장부 인터페이스"""

    symbol: str

    def transfer(self, sender: str, recipient: str, amount: int) -> None: ...

    def balance_of(self, account: str) -> int: ...


class InMemoryLedger:
    """잔액 dict 기반 장부

    share 장부와 token 장부 인터페이스를 모두 만족합니다.
    snapshot()/restore()로 Vault의 원자적 연산에 참여합니다.

    사용법:
        token0 = InMemoryLedger("T0")
        token0.mint("alice", 10**18)
        token0.transfer("alice", "vault", 10**17)
    """

    def __init__(self, symbol: str = "SHARE"):
        self.symbol = symbol
        self._balances: Dict[str, int] = {}
        self._total_supply = 0

    def balance_of(self, account: str) -> int:
        return self._balances.get(account, 0)

    def total_supply(self) -> int:
        return self._total_supply

    def mint(self, account: str, amount: int) -> None:
        if amount < 0:
            raise ValueError(f"음수 수량은 발행할 수 없습니다: {amount}")
        self._balances[account] = self.balance_of(account) + amount
        self._total_supply += amount

    def burn(self, account: str, amount: int) -> None:
        self._debit(account, amount)
        self._total_supply -= amount

    def transfer(self, sender: str, recipient: str, amount: int) -> None:
        self._debit(sender, amount)
        self._balances[recipient] = self.balance_of(recipient) + amount

    def _debit(self, account: str, amount: int) -> None:
        if amount < 0:
            raise ValueError(f"음수 수량: {amount}")
        balance = self.balance_of(account)
        if balance < amount:
            raise InsufficientBalance(
                f"{self.symbol}: {account} 잔액 부족 (보유 {balance}, 요청 {amount})"
            )
        self._balances[account] = balance - amount

    def snapshot(self):
        return dict(self._balances), self._total_supply

    def restore(self, snapshot) -> None:
        balances, total_supply = snapshot
        self._balances = dict(balances)
        self._total_supply = total_supply
