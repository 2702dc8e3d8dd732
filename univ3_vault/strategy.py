"""
Range policy for rerange

The new range is a symmetric band of ``tick_width`` ticks on either side of
the current tick, centred on the nearest spacing-aligned tick and clamped to
the usable tick domain.
"""

from typing import Tuple

from .errors import InvalidRange
from .math.tick_math import (
    is_aligned,
    max_usable_tick,
    min_usable_tick,
    round_tick_to_spacing,
)
from .pool import check_ticks


def compute_range(current_tick: int, tick_spacing: int, tick_width: int) -> Tuple[int, int]:
    """Symmetric (tick_lower, tick_upper) band around ``current_tick``

    Raises:
        InvalidRange: width not a positive multiple of the spacing, or the
            resulting bounds not strictly ordered / aligned
    """
    if tick_width <= 0 or not is_aligned(tick_width, tick_spacing):
        raise InvalidRange(
            f"tick_width {tick_width} must be a positive multiple of tick spacing {tick_spacing}"
        )

    center = round_tick_to_spacing(current_tick, tick_spacing)
    tick_lower = max(center - tick_width, min_usable_tick(tick_spacing))
    tick_upper = min(center + tick_width, max_usable_tick(tick_spacing))

    check_ticks(tick_lower, tick_upper, tick_spacing)
    return tick_lower, tick_upper
