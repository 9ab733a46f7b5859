from __future__ import annotations

from dataclasses import dataclass
from typing import List


@dataclass(frozen=True)
class AngleGrid:
    vertical_deg: List[float]            # Gamma, length Nv
    horizontal_deg: List[float]          # C-planes, length Nh
    type: str = "C"                      # "C" / "B" / "A"
