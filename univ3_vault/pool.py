"""
Pool - Position Adapter 인터페이스와 인메모리 풀

Vault는 외부 AMM 풀을 PositionAdapter 인터페이스로만 사용합니다.
호출 계약:
    mint    → 실제 소비된 토큰 수량 (유동성에서 올림)
    burn    → 포지션에 적립된 토큰 수량 (내림), 전송은 collect에서
    collect → 적립된(tokens_owed) 토큰을 소유자에게 전송

SimulatedPool은 이 계약을 따르는 테스트/시뮬레이션용 풀입니다.
스왑 라우팅과 틱 크로싱은 구현하지 않고, 스왑 수수료는 accrue_fees로 모사합니다.
"""

import copy
from dataclasses import dataclass
from typing import Dict, Optional, Protocol, Tuple

from .constants import MAX_TICK, MIN_TICK, UINT128_MAX
from .errors import InsufficientLiquidity, InvalidRange, ZeroLiquidity
from .ledger import TokenLedger
from .math.full_math import to_uint128
from .math.liquidity_amounts import get_amounts_for_liquidity
from .math.tick_math import get_sqrt_ratio_at_tick, get_tick_at_sqrt_ratio, is_aligned

PositionKey = Tuple[str, int, int]


class PositionAdapter(Protocol):
    """Vault가 사용하는 풀 인터페이스 (vault identity에 바인딩됨)"""

    tick_spacing: int

    def mint(self, tick_lower: int, tick_upper: int, liquidity: int) -> Tuple[int, int]: ...

    def burn(self, tick_lower: int, tick_upper: int, liquidity: int) -> Tuple[int, int]: ...

    def collect(
        self,
        tick_lower: int,
        tick_upper: int,
        amount0_max: Optional[int] = None,
        amount1_max: Optional[int] = None
    ) -> Tuple[int, int]: ...

    def current_price(self) -> Tuple[int, int]: ...

    def position_liquidity(self, tick_lower: int, tick_upper: int) -> int: ...


@dataclass
class PoolPosition:
    """Position-Indexed State

    - liquidity: 포지션의 유동성
    - tokens_owed_0 / tokens_owed_1: 미수령 토큰 (burn 원금 + 수수료)
    """
    liquidity: int = 0
    tokens_owed_0: int = 0
    tokens_owed_1: int = 0


def check_ticks(tick_lower: int, tick_upper: int, tick_spacing: int) -> None:
    """틱 범위 검증

    Raises:
        InvalidRange: 정렬되지 않았거나, 순서가 틀렸거나, 유효 범위 밖인 경우
    """
    if tick_lower >= tick_upper:
        raise InvalidRange(f"tick_lower >= tick_upper: {tick_lower} >= {tick_upper}")
    if tick_lower < MIN_TICK or tick_upper > MAX_TICK:
        raise InvalidRange(f"틱이 유효 범위를 벗어났습니다: [{tick_lower}, {tick_upper}]")
    if not (is_aligned(tick_lower, tick_spacing) and is_aligned(tick_upper, tick_spacing)):
        raise InvalidRange(
            f"틱이 간격 {tick_spacing}에 정렬되지 않았습니다: [{tick_lower}, {tick_upper}]"
        )


class SimulatedPool:
    """인메모리 집중 유동성 풀

    사용법:
        pool = SimulatedPool(token0, token1, encode_price_sqrt(1, 1), tick_spacing=60)
        adapter = PoolPositionAdapter(pool, owner="vault")
        adapter.mint(-600, 600, 10**18)
    """

    def __init__(
        self,
        token0: TokenLedger,
        token1: TokenLedger,
        sqrt_price_x96: int,
        tick_spacing: int = 60,
        address: str = "pool"
    ):
        if tick_spacing <= 0:
            raise ValueError(f"tick_spacing은 양수여야 합니다: {tick_spacing}")
        self.token0 = token0
        self.token1 = token1
        self.tick_spacing = tick_spacing
        self.address = address
        self.sqrt_price_x96 = sqrt_price_x96
        self.tick = get_tick_at_sqrt_ratio(sqrt_price_x96)
        self.positions: Dict[PositionKey, PoolPosition] = {}

    def slot0(self) -> Tuple[int, int]:
        """(sqrtPriceX96, tick)"""
        return self.sqrt_price_x96, self.tick

    def set_sqrt_price(self, sqrt_price_x96: int) -> None:
        self.tick = get_tick_at_sqrt_ratio(sqrt_price_x96)
        self.sqrt_price_x96 = sqrt_price_x96

    def set_tick(self, tick: int) -> None:
        self.sqrt_price_x96 = get_sqrt_ratio_at_tick(tick)
        self.tick = tick

    def position(self, owner: str, tick_lower: int, tick_upper: int) -> PoolPosition:
        """포지션 조회 (없으면 빈 포지션)"""
        return self.positions.get((owner, tick_lower, tick_upper), PoolPosition())

    def mint(self, owner: str, tick_lower: int, tick_upper: int, liquidity: int) -> Tuple[int, int]:
        """유동성 추가, 필요한 토큰(올림)을 owner에게서 가져옴"""
        check_ticks(tick_lower, tick_upper, self.tick_spacing)
        if liquidity <= 0:
            raise ZeroLiquidity("mint할 유동성이 0입니다")

        amount0, amount1 = self._amounts(tick_lower, tick_upper, liquidity, round_up=True)

        key = (owner, tick_lower, tick_upper)
        new_liquidity = to_uint128(self.position(*key).liquidity + liquidity)

        if amount0 > 0:
            self.token0.transfer(owner, self.address, amount0)
        if amount1 > 0:
            self.token1.transfer(owner, self.address, amount1)
        self.positions.setdefault(key, PoolPosition()).liquidity = new_liquidity

        return amount0, amount1

    def burn(self, owner: str, tick_lower: int, tick_upper: int, liquidity: int) -> Tuple[int, int]:
        """유동성 제거, 반환 수량(내림)은 tokens_owed에 적립"""
        check_ticks(tick_lower, tick_upper, self.tick_spacing)
        position = self.position(owner, tick_lower, tick_upper)
        if liquidity > position.liquidity:
            raise InsufficientLiquidity(
                f"포지션 유동성 부족 (보유 {position.liquidity}, 요청 {liquidity})"
            )
        if liquidity == 0:
            return 0, 0

        amount0, amount1 = self._amounts(tick_lower, tick_upper, liquidity, round_up=False)

        position.liquidity -= liquidity
        position.tokens_owed_0 += amount0
        position.tokens_owed_1 += amount1

        return amount0, amount1

    def collect(
        self,
        owner: str,
        tick_lower: int,
        tick_upper: int,
        amount0_requested: int = UINT128_MAX,
        amount1_requested: int = UINT128_MAX
    ) -> Tuple[int, int]:
        """적립된 토큰을 owner에게 전송"""
        key = (owner, tick_lower, tick_upper)
        position = self.positions.get(key)
        if position is None:
            return 0, 0

        amount0 = min(amount0_requested, position.tokens_owed_0)
        amount1 = min(amount1_requested, position.tokens_owed_1)

        if amount0 > 0:
            position.tokens_owed_0 -= amount0
            self.token0.transfer(self.address, owner, amount0)
        if amount1 > 0:
            position.tokens_owed_1 -= amount1
            self.token1.transfer(self.address, owner, amount1)

        if position == PoolPosition():
            del self.positions[key]

        return amount0, amount1

    def accrue_fees(
        self,
        owner: str,
        tick_lower: int,
        tick_upper: int,
        amount0: int,
        amount1: int
    ) -> None:
        """스왑 수수료 적립 모사: 토큰을 풀에 발행하고 포지션 tokens_owed에 더함"""
        key = (owner, tick_lower, tick_upper)
        if key not in self.positions:
            raise InsufficientLiquidity(f"포지션이 없습니다: {key}")
        self.token0.mint(self.address, amount0)
        self.token1.mint(self.address, amount1)
        position = self.positions[key]
        position.tokens_owed_0 += amount0
        position.tokens_owed_1 += amount1

    def _amounts(self, tick_lower: int, tick_upper: int, liquidity: int, round_up: bool) -> Tuple[int, int]:
        return get_amounts_for_liquidity(
            self.sqrt_price_x96,
            get_sqrt_ratio_at_tick(tick_lower),
            get_sqrt_ratio_at_tick(tick_upper),
            liquidity,
            round_up
        )

    def snapshot(self):
        return copy.deepcopy(self.positions), self.sqrt_price_x96, self.tick

    def restore(self, snapshot) -> None:
        positions, self.sqrt_price_x96, self.tick = snapshot
        self.positions = copy.deepcopy(positions)


class PoolPositionAdapter:
    """SimulatedPool을 vault identity에 바인딩한 PositionAdapter 구현"""

    def __init__(self, pool: SimulatedPool, owner: str):
        self.pool = pool
        self.owner = owner

    @property
    def tick_spacing(self) -> int:
        return self.pool.tick_spacing

    def mint(self, tick_lower: int, tick_upper: int, liquidity: int) -> Tuple[int, int]:
        return self.pool.mint(self.owner, tick_lower, tick_upper, liquidity)

    def burn(self, tick_lower: int, tick_upper: int, liquidity: int) -> Tuple[int, int]:
        return self.pool.burn(self.owner, tick_lower, tick_upper, liquidity)

    def collect(
        self,
        tick_lower: int,
        tick_upper: int,
        amount0_max: Optional[int] = None,
        amount1_max: Optional[int] = None
    ) -> Tuple[int, int]:
        return self.pool.collect(
            self.owner,
            tick_lower,
            tick_upper,
            UINT128_MAX if amount0_max is None else amount0_max,
            UINT128_MAX if amount1_max is None else amount1_max,
        )

    def current_price(self) -> Tuple[int, int]:
        return self.pool.slot0()

    def position_liquidity(self, tick_lower: int, tick_upper: int) -> int:
        return self.pool.position(self.owner, tick_lower, tick_upper).liquidity

    def snapshot(self):
        return self.pool.snapshot()

    def restore(self, snapshot) -> None:
        self.pool.restore(snapshot)
