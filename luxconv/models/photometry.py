from __future__ import annotations

from dataclasses import dataclass
from typing import Dict


PHOTOMETRIC_TYPE_LABELS: Dict[int, str] = {1: "C", 2: "B", 3: "A"}


@dataclass(frozen=True)
class PhotometryHeader:
    num_lamps: int
    lumens_per_lamp: float
    candela_multiplier: float
    num_vertical_angles: int
    num_horizontal_angles: int
    photometric_type: int                # 1=C, 2=B, 3=A; anything else reads as C
    units_type: int                      # 1=feet, 2=meters
    width: float
    length: float
    height: float
    ballast_factor: float = 1.0
    future_use: float = 0.0
    input_watts: float = 0.0
    line_no: int = 0                     # 1-indexed

    @property
    def photometric_type_label(self) -> str:
        return PHOTOMETRIC_TYPE_LABELS.get(self.photometric_type, "C")

    @property
    def total_lumens(self) -> float:
        return self.num_lamps * self.lumens_per_lamp
