"""
Uniswap V3 Concentrated Liquidity Vault

단일 집중 유동성 포지션에 예치금을 모으고 share를 발행하며
시장 가격을 따라 포지션을 재배치하는 회계/리밸런싱 엔진.
온체인 수준 정밀도의 Q64.96 고정소수점 수학을 사용합니다.
"""

__version__ = "0.1.0"

from .constants import Q96, MIN_TICK, MAX_TICK, MIN_SQRT_RATIO, MAX_SQRT_RATIO, ZERO_ADDRESS
from .config import VaultConfig
from .errors import (
    VaultError,
    ZeroShares,
    ZeroAddress,
    Unauthorized,
    ZeroLiquidity,
    InvalidRange,
    InsufficientBalance,
    InsufficientLiquidity,
    AdapterMismatch,
    MathError,
    OutOfRange,
    ArithmeticOverflow,
    DivideByZero,
)
from .ledger import InMemoryLedger, ShareLedger, TokenLedger
from .pool import PositionAdapter, PoolPositionAdapter, SimulatedPool
from .types import VaultState, Deposit, Withdraw, Rerange, DepositResult, WithdrawResult, RerangeResult
from .vault import Vault
