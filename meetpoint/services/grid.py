# meetpoint/services/grid.py
from typing import List

from meetpoint.models.geo import Coordinate


def build_grid(center: Coordinate, step_deg: float, size: int) -> List[Coordinate]:
    """
    Square lattice of `size x size` candidates centred exactly on `center`.

    Rows run south to north, columns west to east. Spacing is `step_deg` degrees
    on both axes; longitude spacing is not scaled by cos(latitude). `size` must
    be odd so that `center` itself is one of the candidates.
    """
    if size < 1 or size % 2 == 0:
        raise ValueError(f"Grid size must be a positive odd integer, got {size}")
    if step_deg <= 0:
        raise ValueError(f"Grid step must be positive, got {step_deg}")

    half = (size - 1) // 2
    return [
        Coordinate(
            lat=center.lat + (i - half) * step_deg,
            lon=center.lon + (j - half) * step_deg,
        )
        for i in range(size)
        for j in range(size)
    ]
