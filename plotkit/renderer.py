from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Literal, Protocol, Sequence

from plotkit.geometry import PlotMarkers, Point, Rect, Size
from plotkit.series import RGBA, Hatching


@dataclass(frozen=True)
class LegendIcon:
    kind: Literal["square", "line"]
    color: RGBA


class Renderer(ABC):
    """Drawing backend. Coordinates are plot-local pixels, origin at bottom-left."""

    @abstractmethod
    def draw_solid_rect(self, rect: Rect, fill_color: RGBA, hatch_pattern: Hatching = "none") -> None:
        raise NotImplementedError

    @abstractmethod
    def draw_polyline(self, points: Sequence[Point], color: RGBA, thickness: int = 1) -> None:
        raise NotImplementedError


class Chart(Protocol):
    enable_grid: bool

    @property
    def legend_labels(self) -> list[tuple[str, LegendIcon]]: ...

    def calculate_scale_and_marker_locations(self, size: Size) -> PlotMarkers: ...

    def draw_data(self, markers: PlotMarkers, size: Size, renderer: Renderer) -> None: ...
