from __future__ import annotations

from typing import Sequence

import numpy as np

from .pareto import pareto_filter


def hypervolume(F: np.ndarray, ref_point: Sequence[float]) -> float:
    """Exact hypervolume dominated by ``F`` and bounded by ``ref_point`` (minimization).

    Two objectives use a sort-and-sweep; more objectives use recursive slicing
    along the last objective, which is exact but only meant for the modest front
    sizes a MOEA/D population produces.
    """
    F = np.asarray(F, dtype=float)
    ref = np.asarray(ref_point, dtype=float)
    if F.ndim != 2:
        raise ValueError("F must be a 2D array.")
    if ref.shape != (F.shape[1],):
        raise ValueError(f"ref_point must have {F.shape[1]} entries, got {ref.shape}.")
    if not np.isfinite(F).all() or not np.isfinite(ref).all():
        raise ValueError("F and ref_point must contain finite numbers")

    pts = F[np.all(F < ref, axis=1)]
    if pts.shape[0] == 0:
        return 0.0
    pts = pareto_filter(pts)
    return float(max(_hv(pts, ref), 0.0))


def _hv(pts: np.ndarray, ref: np.ndarray) -> float:
    if pts.shape[0] == 0:
        return 0.0
    if pts.shape[1] == 1:
        return float(ref[0] - pts[:, 0].min())
    if pts.shape[1] == 2:
        return _hv2d(pts, ref)

    # Slice along the last objective: between consecutive levels the dominated
    # region is the (m-1)-dimensional volume of every point at or below the level.
    order = np.argsort(pts[:, -1], kind="stable")
    sorted_pts = pts[order]
    levels = np.append(sorted_pts[:, -1], ref[-1])
    volume = 0.0
    for k in range(sorted_pts.shape[0]):
        depth = levels[k + 1] - levels[k]
        if depth <= 0.0:
            continue
        active = pareto_filter(sorted_pts[: k + 1, :-1])
        volume += depth * _hv(active, ref[:-1])
    return volume


def _hv2d(pts: np.ndarray, ref: np.ndarray) -> float:
    # For 2D minimization: sort by f1 ascending, keep strictly decreasing f2
    sorted_pts = pts[np.argsort(pts[:, 0], kind="stable")]
    hv = 0.0
    best_f2 = ref[1]
    for x, y in sorted_pts:
        if y < best_f2:
            hv += (ref[0] - x) * (best_f2 - y)
            best_f2 = y
    return hv


__all__ = ["hypervolume"]
