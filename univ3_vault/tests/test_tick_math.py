"""
Tick Math 테스트

tick_math.py의 함수들을 테스트합니다.
온체인 값과 비교하여 정확도를 검증합니다.
"""

import pytest

from ..errors import OutOfRange
from ..math.tick_math import (
    get_sqrt_ratio_at_tick,
    get_tick_at_sqrt_ratio,
    round_tick_to_spacing,
    floor_tick,
    is_aligned,
    min_usable_tick,
    max_usable_tick,
)
from ..constants import MIN_TICK, MAX_TICK, MIN_SQRT_RATIO, MAX_SQRT_RATIO, Q96


class TestGetSqrtRatioAtTick:
    """get_sqrt_ratio_at_tick 테스트"""

    def test_min_tick(self):
        """최소 틱에서의 sqrtPrice"""
        assert get_sqrt_ratio_at_tick(MIN_TICK) == MIN_SQRT_RATIO

    def test_max_tick(self):
        """최대 틱에서의 sqrtPrice"""
        assert get_sqrt_ratio_at_tick(MAX_TICK) == MAX_SQRT_RATIO

    def test_tick_0(self):
        """틱 0에서의 sqrtPrice는 정확히 2^96 (price = 1)"""
        assert get_sqrt_ratio_at_tick(0) == Q96

    def test_known_values(self):
        """TickMath.sol 테스트 벡터"""
        assert get_sqrt_ratio_at_tick(MIN_TICK + 1) == 4295343490
        assert get_sqrt_ratio_at_tick(MAX_TICK - 1) == 1461373636630004318706518188784493106690254656249

    def test_sign_symmetry(self):
        """양수 틱과 음수 틱의 곱은 약 2^192"""
        for tick in [1, 60, 600, 50000]:
            product = get_sqrt_ratio_at_tick(tick) * get_sqrt_ratio_at_tick(-tick)
            assert abs(product - Q96 * Q96) / (Q96 * Q96) < 1e-12

    def test_monotonic(self):
        """틱이 증가하면 sqrtPrice도 엄격히 증가"""
        previous = get_sqrt_ratio_at_tick(MIN_TICK)
        for tick in range(MIN_TICK + 1, MAX_TICK + 1, 9973):
            current = get_sqrt_ratio_at_tick(tick)
            assert current > previous
            previous = current

    def test_invalid_tick_too_low(self):
        """유효 범위를 벗어난 틱 (너무 낮음)"""
        with pytest.raises(OutOfRange):
            get_sqrt_ratio_at_tick(MIN_TICK - 1)

    def test_invalid_tick_too_high(self):
        """유효 범위를 벗어난 틱 (너무 높음) - ValueError로도 잡힘"""
        with pytest.raises(ValueError):
            get_sqrt_ratio_at_tick(MAX_TICK + 1)


class TestGetTickAtSqrtRatio:
    """get_tick_at_sqrt_ratio 테스트"""

    def test_min_sqrt_ratio(self):
        """최소 sqrtRatio에서의 틱"""
        assert get_tick_at_sqrt_ratio(MIN_SQRT_RATIO) == MIN_TICK

    def test_max_sqrt_ratio_minus_one(self):
        """MAX_SQRT_RATIO 직전은 MAX_TICK - 1"""
        assert get_tick_at_sqrt_ratio(MAX_SQRT_RATIO - 1) == MAX_TICK - 1

    def test_sqrt_ratio_at_tick_0(self):
        """sqrtPrice 2^96에서의 틱"""
        assert get_tick_at_sqrt_ratio(Q96) == 0

    def test_roundtrip(self):
        """틱 -> sqrtPrice -> 틱 왕복 테스트"""
        for tick in [MIN_TICK, -50000, -1000, -1, 0, 1, 1000, 50000, MAX_TICK - 1]:
            assert get_tick_at_sqrt_ratio(get_sqrt_ratio_at_tick(tick)) == tick

    def test_roundtrip_sweep(self):
        """전체 틱 영역 왕복 (1 이내, 실제로는 정확히 일치)"""
        for tick in range(MIN_TICK, MAX_TICK, 7919):
            result = get_tick_at_sqrt_ratio(get_sqrt_ratio_at_tick(tick))
            assert abs(result - tick) <= 1
            assert result == tick

    def test_between_ticks_resolves_lower(self):
        """두 틱 사이의 가격은 하한 틱으로"""
        for tick in [-887000, -600, -1, 0, 59, 600, 400000]:
            just_below_next = get_sqrt_ratio_at_tick(tick + 1) - 1
            assert get_tick_at_sqrt_ratio(just_below_next) == tick

    def test_invalid_sqrt_ratio_too_low(self):
        """유효 범위를 벗어난 sqrtRatio (너무 낮음)"""
        with pytest.raises(OutOfRange):
            get_tick_at_sqrt_ratio(MIN_SQRT_RATIO - 1)

    def test_invalid_sqrt_ratio_max(self):
        """MAX_SQRT_RATIO 자체는 범위 밖"""
        with pytest.raises(OutOfRange):
            get_tick_at_sqrt_ratio(MAX_SQRT_RATIO)


class TestRoundTickToSpacing:
    """round_tick_to_spacing 테스트

    가장 가까운 유효 틱으로 반올림합니다.
    """

    def test_already_aligned(self):
        """이미 정렬된 틱"""
        assert round_tick_to_spacing(60, 60) == 60
        assert round_tick_to_spacing(-60, 60) == -60
        assert round_tick_to_spacing(0, 60) == 0

    def test_round_nearest(self):
        """가장 가까운 틱으로, 정확히 중간이면 올림"""
        assert round_tick_to_spacing(89, 60) == 60
        assert round_tick_to_spacing(91, 60) == 120
        assert round_tick_to_spacing(90, 60) == 120
        assert round_tick_to_spacing(-31, 60) == -60
        assert round_tick_to_spacing(-30, 60) == 0
        assert round_tick_to_spacing(-15, 10) == -10

    def test_floor_tick(self):
        """음수도 -inf 방향으로 내림"""
        assert floor_tick(59, 60) == 0
        assert floor_tick(-1, 60) == -60
        assert floor_tick(-60, 60) == -60

    def test_is_aligned(self):
        assert is_aligned(-600, 60)
        assert not is_aligned(-610, 60)

    def test_usable_ticks(self):
        """MIN/MAX_TICK 안쪽의 정렬된 경계"""
        assert min_usable_tick(60) == -887220
        assert max_usable_tick(60) == 887220
        assert min_usable_tick(1) == MIN_TICK
        assert max_usable_tick(200) == 887200


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
