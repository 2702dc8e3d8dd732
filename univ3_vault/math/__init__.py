"""
Math layer for the vault engine

온체인 수준 정밀도의 수학 함수들:
- full_math: 오버플로우 검사가 있는 mulDiv
- tick_math: Tick ↔ sqrtPriceX96 변환
- sqrt_price_math: 구간별 토큰 수량 곡선
- liquidity_amounts: 토큰 수량 ↔ 유동성 변환
"""

from .full_math import (
    mul_div,
    mul_div_rounding_up,
    div_rounding_up,
    to_uint128,
)
from .tick_math import (
    get_tick_at_sqrt_ratio,
    get_sqrt_ratio_at_tick,
    round_tick_to_spacing,
    floor_tick,
    is_aligned,
    min_usable_tick,
    max_usable_tick,
)
from .sqrt_price_math import (
    get_amount0_delta,
    get_amount1_delta,
    encode_price_sqrt,
)
from .liquidity_amounts import (
    get_liquidity_for_amount0,
    get_liquidity_for_amount1,
    get_liquidity_for_amounts,
    get_amounts_for_liquidity,
)
