from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Callable, Optional

import numpy as np

from luxconv.models.tm33 import (
    Tm33Document,
    Tm33FileInformation,
    Tm33Header,
    Tm33Luminaire,
    Tm33Measurement,
    Tm33Photometry,
    Tm33SymmetryType,
    utc_now,
)
from luxconv.parser.ies_parser import ParsedIES


@dataclass(frozen=True)
class Tm33Options:
    creator: str = "luxconv"
    creator_version: str = "1.0"
    test_date: Optional[date] = None
    clock: Callable[[], datetime] = utc_now


def symmetry_from_horizontal_count(nh: int) -> Tm33SymmetryType:
    # 1 plane: rotationally symmetric; 2 planes: typically 0-180
    if nh == 1:
        return "Axial"
    if nh == 2:
        return "Bilateral"
    return "None"


def length_unit_from_units_type(units_type: int) -> str:
    return "foot" if units_type == 1 else "meter"


def map_ies_to_tm33(
    parsed: ParsedIES,
    source_file: Optional[str] = None,
    options: Optional[Tm33Options] = None,
) -> Tm33Document:
    if parsed is None:
        raise ValueError("parsed IES result is required")
    opts = options or Tm33Options()
    common = parsed.header
    angles = parsed.angles

    if source_file is None:
        source_file = parsed.source_file or ""

    return Tm33Document(
        file_information=Tm33FileInformation(
            creator=opts.creator,
            creator_version=opts.creator_version,
            created=opts.clock(),
            source_file=source_file,
        ),
        measurement=Tm33Measurement(length_unit=length_unit_from_units_type(parsed.photometry.units_type)),
        header=Tm33Header(
            laboratory=common.test_laboratory,
            report_number=common.test_report,
            test_date=opts.test_date,
        ),
        luminaire=Tm33Luminaire(
            manufacturer=common.manufacturer,
            model=common.luminaire,
            catalog_number=common.catalog_number,
            input_watts=common.input_watts,
            total_lumens=common.total_lumens,
        ),
        photometry=Tm33Photometry(
            type=angles.type,
            vertical_angles=list(angles.vertical_deg),
            horizontal_angles=list(angles.horizontal_deg),
            candela=np.array(parsed.candela.values, dtype=float),
            symmetry=symmetry_from_horizontal_count(len(angles.horizontal_deg)),
        ),
    )
