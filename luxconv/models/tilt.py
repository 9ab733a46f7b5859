from __future__ import annotations

from dataclasses import dataclass
from typing import Literal, Optional, Sequence, Tuple

import numpy as np


TiltKind = Literal["NONE", "INCLUDE", "FILE"]


@dataclass(frozen=True)
class Tilt:
    kind: TiltKind = "NONE"
    angles_deg: Tuple[float, ...] = ()
    multipliers: Tuple[float, ...] = ()
    file_name: Optional[str] = None                     # FILE only, never resolved
    lamp_to_luminaire_geometry: Optional[str] = None    # INCLUDE only

    def __post_init__(self) -> None:
        if self.kind == "INCLUDE":
            if not self.angles_deg:
                raise ValueError("Tilt table must not be empty")
            if len(self.angles_deg) != len(self.multipliers):
                raise ValueError("Tilt angles/multipliers length mismatch")

    @classmethod
    def none(cls) -> "Tilt":
        return cls(kind="NONE")

    @classmethod
    def file(cls, name: str) -> "Tilt":
        return cls(kind="FILE", file_name=name)

    @classmethod
    def include(
        cls,
        angles_deg: Sequence[float],
        multipliers: Sequence[float],
        lamp_to_luminaire_geometry: Optional[str] = None,
    ) -> "Tilt":
        return cls(
            kind="INCLUDE",
            angles_deg=tuple(float(a) for a in angles_deg),
            multipliers=tuple(float(m) for m in multipliers),
            lamp_to_luminaire_geometry=lamp_to_luminaire_geometry,
        )

    def multipliers_at(self, angles_deg: Sequence[float]) -> np.ndarray:
        """
        Linear interpolation of the tilt table at each angle, clamped to the first/last
        multiplier outside the table. Assumes ascending table angles.
        Non-INCLUDE tilts give 1.0 everywhere.
        """
        x = np.asarray(angles_deg, dtype=float)
        if self.kind != "INCLUDE":
            return np.ones_like(x)
        xp = np.asarray(self.angles_deg, dtype=float)
        fp = np.asarray(self.multipliers, dtype=float)
        return np.interp(x, xp, fp)
