from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional, Sequence

import numpy as np

from luxconv.models.candela import CandelaMatrix
from luxconv.models.tilt import Tilt


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PeakAndBeam:
    peak_candela: float
    peak_plane_index: int
    peak_vertical_index: int
    peak_vertical_angle: float
    beam_angle: float


def apply_tilt(values: np.ndarray, vertical_deg: Sequence[float], tilt: Tilt) -> np.ndarray:
    """Scale every C-plane in place by the tilt multiplier interpolated at each Gamma angle."""
    if tilt.kind != "INCLUDE":
        return values
    per_v = tilt.multipliers_at(vertical_deg)
    if per_v.shape[0] != values.shape[1]:
        raise ValueError("Vertical multiplier length does not match candela matrix")
    values *= per_v[np.newaxis, :]
    logger.debug("Applied TILT=INCLUDE multipliers over %d vertical angles", per_v.shape[0])
    return values


def _interpolate_angle(a1: float, a2: float, c1: float, c2: float, target: float) -> float:
    dc = c2 - c1
    if abs(dc) < 1e-12:
        return float(a1)
    return float(a1 + (target - c1) * (a2 - a1) / dc)


def compute_peak_and_beam(values: np.ndarray, vertical_deg: Sequence[float]) -> PeakAndBeam:
    """
    Global peak plus the 50%-of-peak full width on the C-plane holding the peak.

    Ties resolve to the first occurrence in [H][V] order. The crossings are searched
    outward from the peak and interpolated linearly in the candela domain; a side with
    no crossing falls back to the first/last vertical angle.
    """
    nh, nv = values.shape
    if len(vertical_deg) != nv:
        raise ValueError("Vertical angles count does not match candela matrix")
    if nh == 0 or nv == 0:
        raise ValueError("Candela matrix is empty")

    # argmax scans row-major, so earlier h then earlier v wins on ties
    peak_plane, peak_v = divmod(int(np.argmax(values)), nv)
    peak = float(values[peak_plane, peak_v])
    half = peak * 0.5
    row = values[peak_plane]

    left: Optional[float] = None
    for i in range(peak_v, 0, -1):
        c_now = float(row[i])
        c_prev = float(row[i - 1])
        if c_now >= half and c_prev < half:
            left = _interpolate_angle(vertical_deg[i - 1], vertical_deg[i], c_prev, c_now, half)
            break

    right: Optional[float] = None
    for i in range(peak_v, nv - 1):
        c_now = float(row[i])
        c_next = float(row[i + 1])
        if c_now >= half and c_next < half:
            right = _interpolate_angle(vertical_deg[i], vertical_deg[i + 1], c_now, c_next, half)
            break

    left_angle = left if left is not None else float(vertical_deg[0])
    right_angle = right if right is not None else float(vertical_deg[-1])

    return PeakAndBeam(
        peak_candela=peak,
        peak_plane_index=peak_plane,
        peak_vertical_index=peak_v,
        peak_vertical_angle=float(vertical_deg[peak_v]),
        beam_angle=max(right_angle - left_angle, 0.0),
    )


def build_candela_matrix(values: np.ndarray, vertical_deg: Sequence[float], tilt: Tilt) -> CandelaMatrix:
    """Tilt-correct `values` in place, compute metrics on the result and freeze it."""
    apply_tilt(values, vertical_deg, tilt)
    pb = compute_peak_and_beam(values, vertical_deg)
    values.flags.writeable = False
    return CandelaMatrix(
        values=values,
        peak_candela=pb.peak_candela,
        peak_plane_index=pb.peak_plane_index,
        peak_vertical_index=pb.peak_vertical_index,
        peak_vertical_angle=pb.peak_vertical_angle,
        beam_angle=pb.beam_angle,
    )
