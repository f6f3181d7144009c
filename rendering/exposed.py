from __future__ import annotations

from typing import List, Optional

from utils.coords import Coords, Rectangle, Resolution


def exposed_regions(resolution: Resolution, offset_x: int, offset_y: int) -> Optional[List[Rectangle]]:
    """
    Rectangles left invalid after shifting a frame's pixels by
    (offset_x, offset_y). Returns None when no pixel survives the shift and
    the whole frame must be rendered again.

    The vertical strip on the leading x edge spans the full height; the
    horizontal strip on the leading y edge only spans the columns the
    vertical strip does not, so the two never overlap.
    """
    width, height = resolution
    if abs(offset_x) >= width or abs(offset_y) >= height:
        return None

    regions: List[Rectangle] = []

    # Columns still holding valid pixels after the vertical strip is taken out
    if offset_x > 0:
        regions.append(Rectangle(Coords(0, 0), Coords(offset_x, height)))
        x0, x1 = offset_x, width
    elif offset_x < 0:
        regions.append(Rectangle(Coords(width + offset_x, 0), Coords(width, height)))
        x0, x1 = 0, width + offset_x
    else:
        x0, x1 = 0, width

    if offset_y > 0:
        regions.append(Rectangle(Coords(x0, 0), Coords(x1, offset_y)))
    elif offset_y < 0:
        regions.append(Rectangle(Coords(x0, height + offset_y), Coords(x1, height)))

    return regions
