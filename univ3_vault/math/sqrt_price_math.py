"""
Sqrt Price Math - 가격 구간별 토큰 수량 곡선

두 sqrtPriceX96 사이에서 주어진 유동성에 대응하는 token0/token1 수량.
민트할 때(호출자가 지불)는 올림, 번할 때(호출자가 수령)는 내림.

References:
- Uniswap V3 Core: contracts/libraries/SqrtPriceMath.sol

핵심 공식:
    Δx = L * (√P_b - √P_a) / (√P_a * √P_b)
    Δy = L * (√P_b - √P_a)
"""

import math

from ..constants import Q96
from ..errors import DivideByZero
from .full_math import mul_div, mul_div_rounding_up, div_rounding_up


def get_amount0_delta(
    sqrt_ratio_a_x96: int,
    sqrt_ratio_b_x96: int,
    liquidity: int,
    round_up: bool
) -> int:
    """유동성에서 amount0 변화량 계산

    Args:
        sqrt_ratio_a_x96: 구간 한쪽 sqrtPriceX96
        sqrt_ratio_b_x96: 구간 다른쪽 sqrtPriceX96
        liquidity: 유동성
        round_up: True면 올림, False면 내림

    Returns:
        amount0 (token0 수량, 최소 단위)

    Raises:
        DivideByZero: 하한 sqrtPrice가 0인 경우
    """
    if sqrt_ratio_a_x96 > sqrt_ratio_b_x96:
        sqrt_ratio_a_x96, sqrt_ratio_b_x96 = sqrt_ratio_b_x96, sqrt_ratio_a_x96

    if sqrt_ratio_a_x96 == 0:
        raise DivideByZero("sqrtPrice 하한이 0입니다")

    numerator1 = liquidity << 96
    numerator2 = sqrt_ratio_b_x96 - sqrt_ratio_a_x96

    if round_up:
        return div_rounding_up(
            mul_div_rounding_up(numerator1, numerator2, sqrt_ratio_b_x96),
            sqrt_ratio_a_x96
        )
    return mul_div(numerator1, numerator2, sqrt_ratio_b_x96) // sqrt_ratio_a_x96


def get_amount1_delta(
    sqrt_ratio_a_x96: int,
    sqrt_ratio_b_x96: int,
    liquidity: int,
    round_up: bool
) -> int:
    """유동성에서 amount1 변화량 계산

    공식: Δy = L * (√P_b - √P_a) / 2^96
    """
    if sqrt_ratio_a_x96 > sqrt_ratio_b_x96:
        sqrt_ratio_a_x96, sqrt_ratio_b_x96 = sqrt_ratio_b_x96, sqrt_ratio_a_x96

    if round_up:
        return mul_div_rounding_up(liquidity, sqrt_ratio_b_x96 - sqrt_ratio_a_x96, Q96)
    return mul_div(liquidity, sqrt_ratio_b_x96 - sqrt_ratio_a_x96, Q96)


def encode_price_sqrt(reserve1: int, reserve0: int) -> int:
    """reserve 비율을 sqrtPriceX96으로 인코딩

    floor(sqrt(reserve1 / reserve0) * 2^96)를 정수 제곱근으로 정확히 계산.

    Example:
        >>> encode_price_sqrt(1, 1) == 2 ** 96
        True
    """
    if reserve0 <= 0 or reserve1 <= 0:
        raise ValueError("reserve는 양수여야 합니다")
    return math.isqrt((reserve1 << 192) // reserve0)
