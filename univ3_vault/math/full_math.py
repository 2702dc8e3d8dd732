"""
Full Math - 확장 정밀도 곱셈/나눗셈

Solidity FullMath.mulDiv는 512비트 중간값을 사용합니다.
Python int는 임의 정밀도이므로 중간값은 그대로 계산하고,
결과가 uint256을 넘는 경우에만 ArithmeticOverflow를 발생시킵니다.
절대 wrap-around 하지 않습니다.

References:
- Uniswap V3 Core: contracts/libraries/FullMath.sol
- Uniswap V3 Core: contracts/libraries/UnsafeMath.sol
- Uniswap V3 Core: contracts/libraries/SafeCast.sol
"""

from ..constants import UINT128_MAX, UINT256_MAX
from ..errors import ArithmeticOverflow, DivideByZero


def _check_uint(value: int, bound: int = UINT256_MAX) -> int:
    if value < 0 or value > bound:
        raise ArithmeticOverflow(f"값이 unsigned 범위를 벗어났습니다: {value}")
    return value


def mul_div(a: int, b: int, denominator: int) -> int:
    """floor(a * b / denominator)

    Args:
        a: 피승수 (uint256)
        b: 승수 (uint256)
        denominator: 제수 (0이 아닌 uint256)

    Returns:
        내림 결과 (uint256)

    Raises:
        DivideByZero: denominator == 0
        ArithmeticOverflow: 입력이 음수이거나 결과가 uint256을 초과
    """
    _check_uint(a)
    _check_uint(b)
    _check_uint(denominator)
    if denominator == 0:
        raise DivideByZero("mul_div: denominator가 0입니다")
    return _check_uint((a * b) // denominator)


def mul_div_rounding_up(a: int, b: int, denominator: int) -> int:
    """ceil(a * b / denominator)"""
    result = mul_div(a, b, denominator)
    if (a * b) % denominator > 0:
        result = _check_uint(result + 1)
    return result


def div_rounding_up(numerator: int, denominator: int) -> int:
    """ceil(numerator / denominator)"""
    _check_uint(numerator)
    if denominator == 0:
        raise DivideByZero("div_rounding_up: denominator가 0입니다")
    result = numerator // denominator
    if numerator % denominator > 0:
        result += 1
    return result


def to_uint128(value: int) -> int:
    """uint128 캐스트 (범위 초과 시 ArithmeticOverflow)"""
    return _check_uint(value, UINT128_MAX)
