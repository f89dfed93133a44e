from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence

from plotkit.errors import PlotDataError
from plotkit.geometry import AxisMapping, Rect
from plotkit.series import RGBA, Hatching, Series


DEFAULT_BAR_SPACE = 20


@dataclass(frozen=True)
class BarRect:
    index: int
    layer: int
    rect: Rect
    color: RGBA
    hatch_pattern: Hatching


def build_bar_rects(
    primary: Series,
    stacks: Sequence[Series],
    *,
    category_centers: Sequence[float],
    bar_width: float,
    origin: float,
    space: float,
    mapping: AxisMapping,
) -> list[BarRect]:
    """Rectangles in draw order: per category index, primary then each stack layer.

    Running totals grow by each layer's signed scaled value measured from the
    zero line, so positive layers only ever rise from the origin and negative
    layers only ever fall from it.
    """
    count = primary.count
    if len(primary.scaled_values) != count:
        raise PlotDataError("series has not been scaled for this layout pass")
    if len(category_centers) < count:
        raise PlotDataError("not enough category markers for series")
    for stack in stacks:
        if len(stack.scaled_values) != count:
            raise PlotDataError(f"stack series {stack.label!r} does not match the series point count")

    half_slot = bar_width * 0.5
    half_space = space * 0.5
    thickness = max(0.0, bar_width - space)
    rects: list[BarRect] = []
    for index in range(count):
        start = category_centers[index] - half_slot + half_space
        extent = primary.scaled_values[index].y - origin
        positive = extent if extent >= 0 else 0.0
        negative = extent if extent < 0 else 0.0
        rects.append(
            BarRect(
                index=index,
                layer=0,
                rect=mapping.to_rect(start, thickness, origin, extent),
                color=primary.color,
                hatch_pattern=primary.hatch_pattern,
            )
        )
        for layer, stack in enumerate(stacks, start=1):
            extent = stack.scaled_values[index].y - origin
            if extent >= 0:
                base = origin + positive
                positive += extent
            else:
                base = origin + negative
                negative += extent
            rects.append(
                BarRect(
                    index=index,
                    layer=layer,
                    rect=mapping.to_rect(start, thickness, base, extent),
                    color=stack.color,
                    hatch_pattern=stack.hatch_pattern,
                )
            )
    return rects
