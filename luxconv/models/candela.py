from __future__ import annotations

from dataclasses import dataclass
from typing import List

import numpy as np


@dataclass(frozen=True)
class CandelaMatrix:
    # Shape: [H][V]; row = C-plane (horizontal angle), column = Gamma (vertical angle).
    # Multiplier and tilt already applied; read-only once built.
    values: np.ndarray
    peak_candela: float
    peak_plane_index: int
    peak_vertical_index: int
    peak_vertical_angle: float
    beam_angle: float

    @property
    def horizontal_count(self) -> int:
        return int(self.values.shape[0])

    @property
    def vertical_count(self) -> int:
        return int(self.values.shape[1])

    def to_rows(self) -> List[List[float]]:
        return [[float(x) for x in row] for row in self.values]
