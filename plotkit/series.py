from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Literal, Sequence

import numpy as np

from plotkit.adapters import coerce_labels, coerce_values
from plotkit.errors import InvalidInputError, PlotDataError

if TYPE_CHECKING:
    from plotkit.scales import ValueScale


RGBA = tuple[int, int, int, int]
Orientation = Literal["vertical", "horizontal"]
Hatching = Literal[
    "none",
    "forward_slash",
    "backward_slash",
    "vertical",
    "horizontal",
    "grid",
    "cross",
    "hollow_circle",
    "filled_circle",
]

ORIENTATIONS: tuple[str, ...] = ("vertical", "horizontal")
HATCH_PATTERNS: tuple[str, ...] = (
    "none",
    "forward_slash",
    "backward_slash",
    "vertical",
    "horizontal",
    "grid",
    "cross",
    "hollow_circle",
    "filled_circle",
)

LIGHT_BLUE: RGBA = (110, 169, 255, 255)
ORANGE: RGBA = (255, 165, 0, 255)


def coerce_color(color: tuple[int, int, int] | tuple[int, int, int, int], alpha: float = 1.0) -> RGBA:
    if len(color) == 3:
        r, g, b = color
        a = int(max(0.0, min(1.0, alpha)) * 255)
        return (r, g, b, a)
    r, g, b, a = color
    out_a = int(max(0.0, min(1.0, alpha)) * a)
    return (r, g, b, out_a)


def validate_orientation(orientation: str) -> Orientation:
    if orientation not in ORIENTATIONS:
        raise ValueError(f"unsupported orientation: {orientation}")
    return orientation  # type: ignore[return-value]


def validate_hatch_pattern(hatch_pattern: str) -> Hatching:
    if hatch_pattern not in HATCH_PATTERNS:
        raise ValueError(f"unsupported hatch pattern: {hatch_pattern}")
    return hatch_pattern  # type: ignore[return-value]


@dataclass(frozen=True)
class Pair:
    x: Any
    y: float


@dataclass
class Series:
    """Ordered (x, y) points plus styling.

    ``scaled_values`` is a derived cache in plot-local pixel space. It is
    replaced wholesale by :meth:`rescale` at the start of every layout pass and
    must not be edited in place.
    """

    values: list[Pair] = field(default_factory=list)
    label: str = ""
    color: RGBA = LIGHT_BLUE
    hatch_pattern: Hatching = "none"
    scaled_values: list[Pair] = field(default_factory=list)

    def __post_init__(self) -> None:
        validate_hatch_pattern(self.hatch_pattern)
        self.values = list(self.values)

    @classmethod
    def from_xy(
        cls,
        x: Any,
        y: Any,
        *,
        data: Any = None,
        label: str = "",
        color: tuple[int, int, int] | tuple[int, int, int, int] = LIGHT_BLUE,
        hatch_pattern: Hatching = "none",
    ) -> "Series":
        y_arr = coerce_values(y, label="y", data=data)
        if x is None and data is None:
            labels: list[Any] = list(range(y_arr.size))
        else:
            labels = coerce_labels(x, label="x", data=data)
        if len(labels) != y_arr.size:
            raise InvalidInputError(f"x and y length mismatch: {len(labels)} != {y_arr.size}")
        return cls(
            values=[Pair(lbl, float(v)) for lbl, v in zip(labels, y_arr.tolist())],
            label=label,
            color=coerce_color(color),
            hatch_pattern=hatch_pattern,
        )

    @classmethod
    def from_values(
        cls,
        values: Sequence[Pair],
        *,
        label: str = "",
        color: tuple[int, int, int] | tuple[int, int, int, int] = LIGHT_BLUE,
        hatch_pattern: Hatching = "none",
    ) -> "Series":
        pairs: list[Pair] = []
        for i, item in enumerate(values):
            if not isinstance(item, Pair):
                raise PlotDataError(f"values[{i}] is not a Pair: {item!r}")
            try:
                y = float(item.y)
            except (TypeError, ValueError) as exc:
                raise PlotDataError(f"values[{i}] has a non-numeric y: {item.y!r}") from exc
            if not math.isfinite(y):
                raise PlotDataError(f"values[{i}] has a non-finite y: {y!r}")
            pairs.append(Pair(item.x, y))
        return cls(values=pairs, label=label, color=coerce_color(color), hatch_pattern=hatch_pattern)

    @property
    def count(self) -> int:
        return len(self.values)

    def __len__(self) -> int:
        return len(self.values)

    def __getitem__(self, index: int) -> Pair:
        return self.values[index]

    def labels(self) -> list[Any]:
        return [p.x for p in self.values]

    def y_array(self) -> np.ndarray:
        return np.asarray([p.y for p in self.values], dtype=np.float64)

    def rescale(self, value_scale: "ValueScale") -> None:
        scaled = value_scale.to_pixels(self.y_array())
        self.scaled_values = [Pair(p.x, float(v)) for p, v in zip(self.values, scaled.tolist())]
