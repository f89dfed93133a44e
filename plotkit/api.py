from __future__ import annotations

from typing import Any

from plotkit.bar_graph import BarGraph
from plotkit.figure import Figure, FigureStyle
from plotkit.histogram import Histogram
from plotkit.renderer import Chart
from plotkit.series import LIGHT_BLUE, Hatching, Orientation


DEFAULT_ASPECT_RATIO = 4.0 / 3.0


def bar_graph(
    x: Any = None,
    y: Any = None,
    *,
    data: Any = None,
    label: str = "",
    color: tuple[int, int, int] | tuple[int, int, int, int] = LIGHT_BLUE,
    hatch_pattern: Hatching = "none",
    orientation: Orientation = "vertical",
    enable_grid: bool = False,
) -> BarGraph:
    graph = BarGraph(enable_grid=enable_grid, orientation=orientation)
    if y is not None:
        graph.add_series(x, y, data=data, label=label, color=color, hatch_pattern=hatch_pattern, orientation=orientation)
    return graph


def histogram(
    data: Any = None,
    *,
    bins: int = 10,
    label: str = "",
    color: tuple[int, int, int] | tuple[int, int, int, int] = LIGHT_BLUE,
    is_normalized: bool = False,
    enable_grid: bool = False,
) -> Histogram:
    hist = Histogram(is_normalized=is_normalized, enable_grid=enable_grid)
    if data is not None:
        hist.add_series(data, bins, label=label, color=color)
    return hist


def figure(
    chart: Chart,
    width: int | None = None,
    height: int | None = None,
    *,
    title: str = "",
    x_label: str = "",
    y_label: str = "",
    aspect_ratio: float = DEFAULT_ASPECT_RATIO,
    style: FigureStyle | None = None,
) -> Figure:
    if aspect_ratio <= 0:
        raise ValueError("aspect_ratio must be > 0")
    if width is None and height is None:
        fig_width = 800
        fig_height = max(1, int(round(fig_width / aspect_ratio)))
    elif width is None:
        if height <= 0:
            raise ValueError("height must be > 0")
        fig_width = max(1, int(round(height * aspect_ratio)))
        fig_height = height
    elif height is None:
        if width <= 0:
            raise ValueError("width must be > 0")
        fig_width = width
        fig_height = max(1, int(round(width / aspect_ratio)))
    else:
        fig_width, fig_height = width, height
    return Figure(
        chart=chart,
        width=fig_width,
        height=fig_height,
        title=title,
        x_label=x_label,
        y_label=y_label,
        style=style if style is not None else FigureStyle(),
    )
