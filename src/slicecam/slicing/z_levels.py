"""
Z-level scheduling.

Levels descend from ``top`` in steps of ``stepdown``; the last step is
shortened so the final level lands exactly on ``top - span``.
"""

import math
from typing import List

from slicecam.core.exceptions import SlicingError

# Absorbs float noise in span / stepdown (e.g. 0.3 / 0.1)
_STEP_TOLERANCE = 1e-9


def compute_z_levels(
    top: float,
    span: float,
    stepdown: float,
    at_least_one: bool = False,
) -> List[float]:
    """
    Compute descending cutting levels.

    Args:
        top: Height the cut starts from (not itself a cutting level).
        span: Total depth to remove below ``top``.
        stepdown: Maximum depth per level.
        at_least_one: Return ``[top]`` instead of nothing when ``span`` is 0.

    Returns:
        ``ceil(span / stepdown)`` levels ``top - min(i * stepdown, span)``.

    Example:
        >>> compute_z_levels(50.0, 20.0, 10.0)
        [40.0, 30.0]
        >>> compute_z_levels(50.0, 25.0, 10.0)
        [40.0, 30.0, 25.0]
    """
    if stepdown <= 0:
        raise SlicingError("Stepdown must be positive", details={"stepdown": stepdown})

    if span <= 0:
        return [top] if at_least_one else []

    count = math.ceil(span / stepdown - _STEP_TOLERANCE)
    return [top - min(i * stepdown, span) for i in range(1, count + 1)]
