from __future__ import annotations

import math
import xml.etree.ElementTree as ET
from datetime import datetime, timezone
from decimal import Decimal
from pathlib import Path

from luxconv.models.tm33 import (
    Tm33Document,
    Tm33FileInformation,
    Tm33Header,
    Tm33Luminaire,
    Tm33Measurement,
    Tm33Photometry,
)


_XML_DECLARATION = '<?xml version="1.0" encoding="utf-8"?>\n'
_MAX_FRACTION_DIGITS = 15


def format_number(v: float) -> str:
    """
    Invariant fixed-point text: at most 15 significant digits and 15 fractional digits,
    trailing zeros trimmed, never scientific notation.
    """
    x = float(v)
    if not math.isfinite(x):
        raise ValueError(f"Cannot write non-finite number: {v!r}")
    d = Decimal(format(x, ".15g"))
    exponent = d.as_tuple().exponent
    if isinstance(exponent, int) and exponent < -_MAX_FRACTION_DIGITS:
        d = d.quantize(Decimal(1).scaleb(-_MAX_FRACTION_DIGITS))
    s = format(d, "f")
    if "." in s:
        s = s.rstrip("0").rstrip(".")
    if s in ("-0", ""):
        s = "0"
    return s


def format_timestamp(ts: datetime) -> str:
    if ts.tzinfo is None:
        ts = ts.replace(tzinfo=timezone.utc)
    return ts.astimezone(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")


def _elem(parent: ET.Element, name: str, text: str) -> ET.Element:
    e = ET.SubElement(parent, name)
    e.text = text or ""
    return e


def _write_file_information(root: ET.Element, fi: Tm33FileInformation) -> None:
    el = ET.SubElement(root, "FileInformation")
    _elem(el, "Creator", fi.creator)
    _elem(el, "CreatorVersion", fi.creator_version)
    _elem(el, "Created", format_timestamp(fi.created))
    if fi.source_file.strip():
        _elem(el, "SourceFile", fi.source_file)


def _write_measurement(root: ET.Element, m: Tm33Measurement) -> None:
    el = ET.SubElement(root, "MeasurementUnits")
    _elem(el, "LengthUnit", m.length_unit)
    _elem(el, "AngleUnit", m.angle_unit)
    _elem(el, "IntensityUnit", m.intensity_unit)
    _elem(el, "FluxUnit", m.flux_unit)
    _elem(el, "PowerUnit", m.power_unit)


def _write_test_information(root: ET.Element, h: Tm33Header) -> None:
    el = ET.SubElement(root, "TestInformation")
    if h.laboratory.strip():
        _elem(el, "Laboratory", h.laboratory)
    if h.report_number.strip():
        _elem(el, "ReportNumber", h.report_number)
    if h.test_date is not None:
        _elem(el, "TestDate", h.test_date.strftime("%Y-%m-%d"))


def _write_luminaire(root: ET.Element, lum: Tm33Luminaire) -> None:
    el = ET.SubElement(root, "Luminaire")
    _elem(el, "Manufacturer", lum.manufacturer)
    _elem(el, "Model", lum.model)
    if lum.catalog_number.strip():
        _elem(el, "CatalogNumber", lum.catalog_number)
    _elem(el, "InputWatts", format_number(lum.input_watts))
    _elem(el, "TotalLumens", format_number(lum.total_lumens))


def _write_photometric_data(root: ET.Element, p: Tm33Photometry) -> None:
    el = ET.SubElement(root, "PhotometricData")
    _elem(el, "PhotometricType", p.type)
    _elem(el, "NumberOfVerticalAngles", str(p.number_of_vertical_angles))
    _elem(el, "NumberOfHorizontalAngles", str(p.number_of_horizontal_angles))
    ET.SubElement(el, "Symmetry", {"type": p.symmetry or "None"})

    angles = ET.SubElement(el, "Angles")
    vertical = ET.SubElement(angles, "VerticalAngles")
    for a in p.vertical_angles:
        _elem(vertical, "Angle", format_number(a))
    horizontal = ET.SubElement(angles, "HorizontalAngles")
    for a in p.horizontal_angles:
        _elem(horizontal, "Angle", format_number(a))

    # [H][V]: one HorizontalPlane per C-plane, one Candela per Gamma angle
    nh, nv = p.candela.shape
    values = ET.SubElement(
        el, "CandelaValues", {"horizontalCount": str(nh), "verticalCount": str(nv)}
    )
    for hi in range(nh):
        plane_angle = p.horizontal_angles[hi] if hi < len(p.horizontal_angles) else float(hi)
        plane = ET.SubElement(values, "HorizontalPlane", {"angle": format_number(plane_angle)})
        for vi in range(nv):
            _elem(plane, "Candela", format_number(p.candela[hi, vi]))


def build_tm33_element(doc: Tm33Document) -> ET.Element:
    root = ET.Element("TM33PhotometricData", {"standard": doc.header.standard or "TM-33-18"})
    _write_file_information(root, doc.file_information)
    _write_measurement(root, doc.measurement)
    _write_test_information(root, doc.header)
    _write_luminaire(root, doc.luminaire)
    _write_photometric_data(root, doc.photometry)
    return root


def write_tm33_xml(doc: Tm33Document) -> str:
    if doc is None:
        raise ValueError("TM-33 document is required")
    root = build_tm33_element(doc)
    ET.indent(root, space="  ")
    return _XML_DECLARATION + ET.tostring(root, encoding="unicode") + "\n"


def write_tm33_file(doc: Tm33Document, path: str | Path) -> Path:
    out = Path(path).expanduser()
    out.parent.mkdir(parents=True, exist_ok=True)
    out.write_text(write_tm33_xml(doc), encoding="utf-8")
    return out
