from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
import math
from typing import Any, Iterable, Sequence

import numpy as np


MAX_DIVISIONS = 50
VALUE_MARGIN_RATIO = 0.1


@dataclass(frozen=True)
class ValueExtent:
    minimum: float
    maximum: float

    @property
    def span(self) -> float:
        return self.maximum - self.minimum

    def brackets_zero(self) -> bool:
        return self.minimum <= 0.0 <= self.maximum


@dataclass(frozen=True)
class ValueScale:
    """Data units per pixel along the value axis plus the pixel offset of zero."""

    scale: float
    origin: float
    extent: ValueExtent
    length: float

    @property
    def degenerate(self) -> bool:
        return self.extent.span == 0.0

    def to_pixels(self, values: Any) -> Any:
        inv = 1.0 / self.scale
        return np.asarray(values, dtype=np.float64) * inv + self.origin

    def to_data(self, pixels: Any) -> Any:
        return (np.asarray(pixels, dtype=np.float64) - self.origin) * self.scale


@dataclass(frozen=True)
class LinearTransform:
    sx: float
    tx: float

    def apply(self, values: Any) -> np.ndarray:
        return np.asarray(values, dtype=np.float64) * self.sx + self.tx


def value_extent(primary: np.ndarray, stacks: Iterable[np.ndarray] = ()) -> ValueExtent:
    maximum = 0.0
    minimum = 0.0
    if primary.size:
        maximum = max(maximum, float(np.max(primary)))
        minimum = min(minimum, float(np.min(primary)))
    # Worst-case stack extent, not the per-bar cumulative totals.
    for values in stacks:
        if values.size == 0:
            continue
        top = float(np.max(values))
        bottom = float(np.min(values))
        if top > 0.0:
            maximum += top
        if bottom < 0.0:
            minimum += bottom
    return ValueExtent(minimum=minimum, maximum=maximum)


def build_value_scale(extent: ValueExtent, length: float, *, margin_ratio: float = VALUE_MARGIN_RATIO) -> ValueScale:
    if length <= 0:
        raise ValueError("axis length must be > 0")
    if not 0.0 <= margin_ratio < 1.0:
        raise ValueError("margin_ratio must be in [0, 1)")
    minimum = extent.minimum
    maximum = extent.maximum
    if minimum >= 0.0:
        origin = 0.0
        minimum = 0.0
    else:
        origin = (length / (maximum - minimum)) * (-minimum)
    clamped = ValueExtent(minimum=minimum, maximum=maximum)
    if clamped.span == 0.0:
        return ValueScale(scale=1.0, origin=origin, extent=clamped, length=float(length))
    scale = clamped.span / (length - margin_ratio * length)
    return ValueScale(scale=scale, origin=origin, extent=clamped, length=float(length))


def number_of_digits(value: float) -> int:
    n = abs(int(value))
    count = 0
    while n:
        n //= 10
        count += 1
    return count


def tick_increment(value_scale: ValueScale, *, max_divisions: int = MAX_DIVISIONS) -> float:
    if max_divisions < 2:
        raise ValueError("max_divisions must be >= 2")
    extent = value_scale.extent
    digits = max(number_of_digits(extent.maximum), number_of_digits(extent.minimum))
    if digits > 1 and extent.maximum <= 10.0 ** (digits - 1):
        step = 10.0 ** (digits - 2)
    elif digits > 1:
        step = 10.0 ** (digits - 1)
    else:
        step = 1.0
    increment = step / value_scale.scale
    # floor(length / increment) + 1 ticks fit on the axis; keep that <= max_divisions.
    if value_scale.length / increment >= max_divisions:
        increment = value_scale.length / (max_divisions - 1)
    return increment


def value_ticks(value_scale: ValueScale, increment: float) -> tuple[list[float], list[str]]:
    origin = value_scale.origin
    length = value_scale.length
    if value_scale.degenerate:
        return [origin], [format_tick(0.0)]
    if increment <= 0 or not math.isfinite(increment):
        raise ValueError("tick increment must be a positive finite number")

    positions: list[float] = []
    labels: list[str] = []
    k = 0
    while True:
        pos = origin + k * increment
        if pos > length:
            break
        if pos >= 0.0:
            positions.append(pos)
            labels.append(format_tick(round_half_away(value_scale.scale * (pos - origin))))
        k += 1
    k = 1
    while True:
        pos = origin - k * increment
        if pos <= 0.0:
            break
        positions.append(pos)
        labels.append(format_tick(round_half_away(value_scale.scale * (pos - origin))))
        k += 1
    return positions, labels


def category_slot_width(length: float, count: int) -> int:
    if count <= 0:
        raise ValueError("count must be > 0")
    return int(round_half_away(length / count))


def category_ticks(labels: Sequence[Any], length: float) -> tuple[int, list[float], list[str]]:
    slot = category_slot_width(length, len(labels))
    positions = [float(i * slot) + slot * 0.5 for i in range(len(labels))]
    return slot, positions, [str(lbl) for lbl in labels]


def round_half_away(value: float) -> float:
    return math.copysign(math.floor(abs(value) + 0.5), value)


def build_axis_transform(vmin: float, vmax: float, length: float, *, margin: float = 0.0) -> LinearTransform:
    usable = length - 2.0 * margin
    if usable <= 0:
        raise ValueError("axis length must exceed twice the margin")
    if vmax == vmin:
        raise ValueError("axis range must be non-empty")
    sx = usable / (vmax - vmin)
    return LinearTransform(sx=sx, tx=margin - vmin * sx)


def generate_nice_ticks(
    vmin: float,
    vmax: float,
    target: int,
    *,
    max_ticks: int = MAX_DIVISIONS,
) -> np.ndarray:
    if target <= 0:
        raise ValueError("target must be > 0")
    if vmin == vmax:
        return np.asarray([vmin], dtype=np.float64)

    span = _nice_number(vmax - vmin, round_result=False)
    step = _nice_number(span / max(target - 1, 1), round_result=True)
    tick_min = np.ceil(vmin / step) * step
    tick_max = np.floor(vmax / step) * step
    while (tick_max - tick_min) / step + 1 > max_ticks:
        step = _nice_number(step * 2.0, round_result=True)
        tick_min = np.ceil(vmin / step) * step
        tick_max = np.floor(vmax / step) * step

    ticks = np.arange(tick_min, tick_max + 0.5 * step, step, dtype=np.float64)
    # Snap floating-point drift so values like -4.44e-16 become 0.
    ticks = np.rint(ticks / step) * step
    ticks[np.isclose(ticks, 0.0, rtol=0.0, atol=step * 1e-9)] = 0.0
    return ticks


def format_tick(value: float, *, step: float | None = None) -> str:
    if not np.isfinite(value):
        return str(value)
    if step is not None and np.isfinite(step) and step > 0 and abs(value) <= step * 1e-9:
        value = 0.0
    abs_v = abs(value)
    decimals = _decimals_from_step(step) if step is not None else 6
    if abs_v != 0 and (abs_v >= 1e6 or (step is not None and abs(step) < 1e-4) or abs_v < 1e-6):
        return f"{value:.4e}"

    d = Decimal(str(value))
    quant = Decimal("1").scaleb(-decimals)
    try:
        q = d.quantize(quant)
    except InvalidOperation:
        q = d
    out = format(q, "f")
    # Trim only fractional zeros so 30 and 40 keep theirs.
    if "." in out:
        out = out.rstrip("0").rstrip(".")
    if out == "-0":
        out = "0"
    return out


def format_ticks_for_axis(ticks: np.ndarray) -> list[str]:
    if ticks.size == 0:
        return []
    if ticks.size == 1:
        return [format_tick(float(ticks[0]))]
    step = float(abs(ticks[1] - ticks[0]))
    return [format_tick(float(v), step=step) for v in ticks]


def _nice_number(value: float, *, round_result: bool) -> float:
    exp = np.floor(np.log10(value))
    frac = value / (10**exp)

    if round_result:
        if frac < 1.5:
            nice_frac = 1.0
        elif frac < 3.0:
            nice_frac = 2.0
        elif frac < 7.0:
            nice_frac = 5.0
        else:
            nice_frac = 10.0
    else:
        if frac <= 1.0:
            nice_frac = 1.0
        elif frac <= 2.0:
            nice_frac = 2.0
        elif frac <= 5.0:
            nice_frac = 5.0
        else:
            nice_frac = 10.0

    return float(nice_frac * (10**exp))


def _decimals_from_step(step: float) -> int:
    if step <= 0 or not np.isfinite(step):
        return 6
    d = Decimal(str(step)).normalize()
    exp = d.as_tuple().exponent
    decimals = max(0, -int(exp))
    return min(12, decimals)
