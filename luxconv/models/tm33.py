from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime, timezone
from typing import List, Literal, Optional

import numpy as np


Tm33SymmetryType = Literal["None", "Axial", "Bilateral"]


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class Tm33FileInformation:
    creator: str = "luxconv"
    creator_version: str = "1.0"
    created: datetime = field(default_factory=utc_now)
    source_file: str = ""


@dataclass(frozen=True)
class Tm33Measurement:
    length_unit: str = "meter"           # "meter" or "foot"
    angle_unit: str = "degree"
    intensity_unit: str = "candela"
    flux_unit: str = "lumen"
    power_unit: str = "watt"


@dataclass(frozen=True)
class Tm33Header:
    standard: str = "TM-33-18"
    laboratory: str = ""
    report_number: str = ""
    test_date: Optional[date] = None


@dataclass(frozen=True)
class Tm33Luminaire:
    manufacturer: str = ""
    model: str = ""
    catalog_number: str = ""
    input_watts: float = 0.0
    total_lumens: float = 0.0


@dataclass(frozen=True)
class Tm33Photometry:
    type: str                            # "C" / "B" / "A"
    vertical_angles: List[float]         # Gamma
    horizontal_angles: List[float]       # C-planes
    candela: np.ndarray                  # [H][V]
    symmetry: Tm33SymmetryType = "None"

    @property
    def number_of_vertical_angles(self) -> int:
        return len(self.vertical_angles)

    @property
    def number_of_horizontal_angles(self) -> int:
        return len(self.horizontal_angles)


@dataclass(frozen=True)
class Tm33Document:
    file_information: Tm33FileInformation
    measurement: Tm33Measurement
    header: Tm33Header
    luminaire: Tm33Luminaire
    photometry: Tm33Photometry
