from __future__ import annotations

import argparse
import logging
from pathlib import Path

from plotkit import PlotDataError, bar_graph, figure, histogram
from plotkit.series import HATCH_PATTERNS, ORANGE, ORIENTATIONS


def _parse_color(raw: str) -> tuple[int, int, int, int]:
    text = raw.strip().lstrip("#")
    if len(text) not in {6, 8}:
        raise argparse.ArgumentTypeError(f"color must be RRGGBB or RRGGBBAA, got {raw!r}")
    try:
        parts = [int(text[i : i + 2], 16) for i in range(0, len(text), 2)]
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"invalid hex color: {raw!r}") from exc
    if len(parts) == 3:
        parts.append(255)
    return (parts[0], parts[1], parts[2], parts[3])


def _parse_stack(raw: str) -> list[float]:
    try:
        return [float(v) for v in raw.split(",") if v.strip()]
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"stack values must be comma-separated numbers: {raw!r}") from exc


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="plotkit")
    parser.add_argument("--log-level", default="WARNING", choices=["DEBUG", "INFO", "WARNING", "ERROR"])
    sub = parser.add_subparsers(dest="command", required=True)

    def add_common(p: argparse.ArgumentParser) -> None:
        p.add_argument("--out", type=Path, required=True, help="output PNG path")
        p.add_argument("--width", type=int, default=800)
        p.add_argument("--height", type=int, default=600)
        p.add_argument("--title", default="")
        p.add_argument("--x-label", default="")
        p.add_argument("--y-label", default="")
        p.add_argument("--label", default="")
        p.add_argument("--color", type=_parse_color, default=(110, 169, 255, 255))
        p.add_argument("--grid", action="store_true")

    bar = sub.add_parser("bar", help="render a (stacked) bar chart")
    add_common(bar)
    bar.add_argument("--x", nargs="+", required=True, help="category labels")
    bar.add_argument("--y", nargs="+", type=float, required=True, help="values, one per category")
    bar.add_argument("--stack", type=_parse_stack, action="append", default=[], help="comma-separated stack values")
    bar.add_argument("--hatch", choices=HATCH_PATTERNS, default="none")
    bar.add_argument("--orientation", choices=ORIENTATIONS, default="vertical")

    hist = sub.add_parser("histogram", help="render a histogram")
    add_common(hist)
    hist.add_argument("--values", nargs="+", type=float, required=True)
    hist.add_argument("--bins", type=int, default=10)
    hist.add_argument("--normalized", action="store_true")
    hist.add_argument("--step", action="store_true", help="draw a step outline instead of bars")
    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(level=getattr(logging, args.log_level), format="%(levelname)s %(name)s: %(message)s")

    try:
        if args.command == "bar":
            chart = bar_graph(
                args.x,
                args.y,
                label=args.label,
                color=args.color,
                hatch_pattern=args.hatch,
                orientation=args.orientation,
                enable_grid=args.grid,
            )
            for i, values in enumerate(args.stack):
                chart.add_stack_values(values, label=f"stack {i + 1}", color=_stack_color(i))
        else:
            chart = histogram(is_normalized=args.normalized, enable_grid=args.grid)
            chart.add_series(
                args.values,
                args.bins,
                label=args.label,
                color=args.color,
                histogram_type="step" if args.step else "bar",
            )
        fig = figure(
            chart,
            args.width,
            args.height,
            title=args.title,
            x_label=args.x_label,
            y_label=args.y_label,
        )
        out = fig.save(args.out)
    except PlotDataError as exc:
        parser.error(str(exc))
    print(f"wrote {out}")
    return 0


_STACK_PALETTE = (
    ORANGE,
    (90, 200, 120, 255),
    (230, 90, 110, 255),
    (180, 130, 255, 255),
)


def _stack_color(index: int) -> tuple[int, int, int, int]:
    return _STACK_PALETTE[index % len(_STACK_PALETTE)]


if __name__ == "__main__":
    raise SystemExit(main())
