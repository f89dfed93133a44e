from __future__ import annotations

from collections.abc import Sequence
from typing import Any

import numpy as np

from plotkit.errors import PlotDataError


try:
    import pandas as pd
except Exception:  # pragma: no cover - optional dependency
    pd = None  # type: ignore[assignment]

try:
    import torch
except Exception:  # pragma: no cover - optional dependency
    torch = None  # type: ignore[assignment]


def coerce_values(value: Any, *, label: str = "y", data: Any = None) -> np.ndarray:
    """Resolve ``value`` to a finite 1-D float64 array.

    Accepts sequences (including ``Decimal`` and numeric strings), numpy arrays,
    torch tensors, pandas Series, single-numeric-column DataFrames, or a
    column name when ``data`` is a DataFrame.
    """
    resolved = resolve_column(value, key=label, data=data)
    if resolved is None:
        raise PlotDataError(f"{label} input is required")
    arr = _float_array(_unwrap(resolved, label=label), label=label)
    bad = np.flatnonzero(~np.isfinite(arr))
    if bad.size:
        raise PlotDataError(f"{label} contains non-finite value at index {int(bad[0])}")
    return arr


def coerce_labels(value: Any, *, label: str = "x", data: Any = None) -> list[Any]:
    resolved = resolve_column(value, key=label, data=data)
    if resolved is None:
        raise PlotDataError(f"{label} input is required")
    if isinstance(resolved, (str, bytes, bytearray)):
        raise PlotDataError(f"{label} must be a sequence of labels, not a string")
    if torch is not None and isinstance(resolved, torch.Tensor):
        resolved = resolved.detach().cpu().numpy()
    if pd is not None and isinstance(resolved, (pd.Series, pd.Index)):
        return resolved.tolist()
    if isinstance(resolved, np.ndarray):
        if resolved.ndim != 1:
            raise PlotDataError(f"{label} must be 1-D")
        return resolved.tolist()
    if isinstance(resolved, Sequence):
        return list(resolved)
    raise PlotDataError(f"unsupported {label} input type: {type(resolved)!r}")


def resolve_column(value: Any, *, key: str, data: Any) -> Any:
    if data is None:
        return value
    if pd is None:
        raise PlotDataError("pandas is required when using `data=`")
    if not isinstance(data, pd.DataFrame):
        raise PlotDataError("`data` must be a pandas DataFrame")
    if isinstance(value, str):
        if value not in data.columns:
            raise PlotDataError(f"column not found: {value}")
        return data[value]
    if value is None and key == "x":
        return data.index
    return value


def _unwrap(value: Any, *, label: str) -> Any:
    if torch is not None and isinstance(value, torch.Tensor):
        return value.detach().cpu().to(torch.float64).numpy()
    if pd is not None and isinstance(value, pd.DataFrame):
        numeric = [c for c in value.columns if pd.api.types.is_numeric_dtype(value[c])]
        if len(numeric) != 1:
            raise PlotDataError(f"{label} DataFrame input must contain exactly one numeric column")
        return value[numeric[0]].to_numpy()
    if pd is not None and isinstance(value, (pd.Series, pd.Index)):
        return value.to_numpy()
    if isinstance(value, np.ndarray):
        return value
    if isinstance(value, Sequence) and not isinstance(value, (str, bytes, bytearray)):
        return np.asarray(value, dtype=object)
    raise PlotDataError(f"unsupported {label} input type: {type(value)!r}")


def _float_array(arr: np.ndarray, *, label: str) -> np.ndarray:
    if arr.ndim != 1:
        raise PlotDataError(f"{label} must be 1-D")
    if arr.dtype.kind in {"i", "u", "f", "b"}:
        return arr.astype(np.float64, copy=False)
    return np.fromiter(
        (_to_float(raw, label=label, index=i) for i, raw in enumerate(arr.tolist())),
        dtype=np.float64,
        count=arr.shape[0],
    )


def _to_float(raw: Any, *, label: str, index: int) -> float:
    if raw is None:
        return float("nan")
    try:
        return float(raw)
    except (TypeError, ValueError) as exc:
        raise PlotDataError(f"{label} contains non-numeric value at index {index}: {raw!r}") from exc
