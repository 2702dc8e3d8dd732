"""
Vault 데이터 타입 정의

VaultState는 Vault가 단독으로 소유하는 가변 상태이고,
Deposit / Withdraw / Rerange 레코드는 각 연산이 만든 불변 이벤트입니다.
모든 숫자 필드는 온체인 정밀도를 위해 int 타입 사용.
"""

from dataclasses import dataclass
from typing import NamedTuple, Union


@dataclass
class VaultState:
    """Vault 상태

    - tick_lower / tick_upper: 활성 가격 범위
    - protocol_fees_0 / protocol_fees_1: 누적 프로토콜 수수료 (sweep 전까지 감소하지 않음)
    - total_shares: 발행된 총 share
    - owner / admin: rerange 권한을 가진 identity
    """
    tick_lower: int
    tick_upper: int
    owner: str
    admin: str
    protocol_fees_0: int = 0
    protocol_fees_1: int = 0
    total_shares: int = 0


@dataclass(frozen=True)
class Deposit:
    caller: str
    beneficiary: str
    shares: int
    amount0: int
    amount1: int


@dataclass(frozen=True)
class Withdraw:
    caller: str
    beneficiary: str
    shares: int
    amount0: int
    amount1: int


@dataclass(frozen=True)
class Rerange:
    tick_lower: int
    tick_upper: int
    amount0: int
    amount1: int


VaultEvent = Union[Deposit, Withdraw, Rerange]


class DepositResult(NamedTuple):
    """deposit 결과"""
    shares: int
    amount0: int  # 실제로 가져온 token0 (desired가 아님)
    amount1: int


class WithdrawResult(NamedTuple):
    """withdraw 결과"""
    amount0: int
    amount1: int


class RerangeResult(NamedTuple):
    """rerange 결과"""
    tick_lower: int
    tick_upper: int
    amount0: int  # 새 범위에 재배치된 token0
    amount1: int
