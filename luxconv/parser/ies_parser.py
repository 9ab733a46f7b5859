from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List, Optional, Tuple

import numpy as np

from luxconv.derived.metrics import build_candela_matrix
from luxconv.models.angles import AngleGrid
from luxconv.models.candela import CandelaMatrix
from luxconv.models.header import CommonHeader
from luxconv.models.photometry import PhotometryHeader
from luxconv.models.tilt import Tilt
from luxconv.parser.errors import (
    AngleCountMismatchError,
    EmptyInputError,
    InvalidAngleCountError,
    InvalidHeaderError,
    MissingSectionError,
    ParseError,
)
from luxconv.parser.tilt import classify_tilt, read_tilt_include
from luxconv.parser.tokens import TokenStream, parse_number


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ParsedIES:
    standard_line: str
    keywords: Dict[str, List[str]]
    header: CommonHeader
    tilt: Tilt
    photometry: PhotometryHeader
    angles: AngleGrid
    candela: CandelaMatrix
    source_file: Optional[str] = None


# [KEYWORD] -> CommonHeader field; MORE is handled separately (appended).
_KEYWORD_FIELDS: Dict[str, str] = {
    "MANUFAC": "manufacturer",
    "LUMCAT": "luminaire",
    "CATALOGNUMBER": "catalog_number",
    "LAMPCAT": "lamp",
    "TESTLAB": "test_laboratory",
    "TEST": "test_report",
}

_MIN_HEADER_TOKENS = 10
_FULL_HEADER_TOKENS = 13


def _is_tilt_line(s: str) -> bool:
    return s.upper().startswith("TILT=")


def _parse_keyword_lines(stream: TokenStream) -> Tuple[Dict[str, List[str]], Dict[str, str]]:
    """Consume keyword lines up to (not including) the TILT= line."""
    keywords: Dict[str, List[str]] = {}
    fields: Dict[str, str] = {}
    while not stream.at_end:
        s = stream.peek_line() or ""
        if _is_tilt_line(s):
            break
        stream.next_line()
        if not (s.startswith("[") and "]" in s):
            continue
        end = s.find("]")
        key = s[1:end].strip().upper()
        val = s[end + 1 :].strip()
        if not key:
            continue
        keywords.setdefault(key, []).append(val)
        if key == "MORE":
            prev = fields.get("notes", "")
            fields["notes"] = f"{prev}\n{val}" if prev.strip() else val
        elif key in _KEYWORD_FIELDS:
            fields[_KEYWORD_FIELDS[key]] = val
    return keywords, fields


def _read_tilt(stream: TokenStream) -> Tilt:
    item = stream.next_line()
    if item is None or not _is_tilt_line(item[1]):
        raise MissingSectionError("Missing TILT line", line_no=stream.line_no)
    value = item[1].split("=", 1)[1].strip()
    kind = classify_tilt(value)
    if kind == "INCLUDE":
        return read_tilt_include(stream)
    if kind == "FILE":
        return Tilt.file(value)
    return Tilt.none()


def _data_token_count(tokens: List[str]) -> Optional[int]:
    nv = parse_number(tokens[3])
    nh = parse_number(tokens[4])
    if nv is None or nh is None or nv <= 0 or nh <= 0:
        return None
    return int(nv) + int(nh) + int(nv) * int(nh)


def _takes_continuation_line(stream: TokenStream, tokens: List[str]) -> bool:
    """
    LM-63 lays the record out as 10 values plus a line of ballast factor, future use
    and input watts. Absorb that line only when it fills the record to 13 and the
    lines after it still hold every angle and candela value.
    """
    nxt = stream.peek_line()
    if nxt is None:
        return False
    nxt_tokens = nxt.split()
    if len(tokens) + len(nxt_tokens) != _FULL_HEADER_TOKENS:
        return False
    if not all(parse_number(t) is not None for t in nxt_tokens):
        return False
    needed = _data_token_count(tokens)
    return needed is not None and stream.count_remaining_tokens(offset=1) >= needed


def _read_photometry_record(stream: TokenStream) -> Tuple[List[str], int]:
    """
    The numeric header record is taken line-wise: the next line, plus following whole
    lines while fewer than 10 tokens are held, plus the ballast/watts line when present.
    Lines are never split here, so a short record is not topped up from the angle list.
    """
    if stream.at_end:
        raise MissingSectionError("Missing photometric header numeric line", line_no=stream.line_no)
    line_no = stream.line_no or 0
    tokens: List[str] = []
    while len(tokens) < _MIN_HEADER_TOKENS and not stream.at_end:
        _, s = stream.next_line()  # type: ignore[misc]
        tokens.extend(s.split())
    if len(tokens) < _MIN_HEADER_TOKENS:
        raise InvalidHeaderError(
            f"Photometric header line has fewer than {_MIN_HEADER_TOKENS} numbers ({len(tokens)})",
            line_no=line_no,
        )
    if len(tokens) < _FULL_HEADER_TOKENS and _takes_continuation_line(stream, tokens):
        _, s = stream.next_line()  # type: ignore[misc]
        tokens.extend(s.split())
    return tokens, line_no


def _parse_photometry_header_from_tokens(tokens: List[str], line_no: int) -> PhotometryHeader:
    if len(tokens) < _MIN_HEADER_TOKENS:
        raise InvalidHeaderError("Photometric header line has fewer than 10 numbers", line_no=line_no)

    def as_float(t: str, name: str) -> float:
        v = parse_number(t)
        if v is None:
            raise InvalidHeaderError(f"Non-numeric value for {name}: {t}", line_no=line_no, snippet=t)
        return v

    def as_int(t: str, name: str) -> int:
        v = as_float(t, name)
        if abs(v - round(v)) > 1e-9:
            raise InvalidHeaderError(f"Expected integer for {name}, got {t}", line_no=line_no, snippet=t)
        return int(round(v))

    num_lamps = as_int(tokens[0], "num_lamps")
    lumens_per_lamp = as_float(tokens[1], "lumens_per_lamp")
    candela_multiplier = as_float(tokens[2], "candela_multiplier")
    num_vertical_angles = as_int(tokens[3], "num_vertical_angles")
    num_horizontal_angles = as_int(tokens[4], "num_horizontal_angles")
    photometric_type = as_int(tokens[5], "photometric_type")
    units_type = as_int(tokens[6], "units_type")
    width = as_float(tokens[7], "width")
    length = as_float(tokens[8], "length")
    height = as_float(tokens[9], "height")

    ballast_factor = as_float(tokens[10], "ballast_factor") if len(tokens) > 10 else 1.0
    future_use = as_float(tokens[11], "future_use") if len(tokens) > 11 else 0.0
    if len(tokens) > 12:
        input_watts = as_float(tokens[12], "input_watts")
    else:
        # Some exports drop ballast/future-use but still end the record with input watts.
        input_watts = as_float(tokens[-1], "input_watts")
        logger.debug("Photometric header has %d fields; input watts taken from last field", len(tokens))
    if len(tokens) > _FULL_HEADER_TOKENS:
        logger.debug("Ignoring %d trailing photometric header fields", len(tokens) - _FULL_HEADER_TOKENS)

    if num_vertical_angles <= 0 or num_horizontal_angles <= 0:
        raise InvalidAngleCountError(
            f"Angle counts must be > 0 (Nv={num_vertical_angles}, Nh={num_horizontal_angles})",
            line_no=line_no,
        )
    if num_lamps < 1:
        raise InvalidHeaderError(f"num_lamps must be >= 1, got {num_lamps}", line_no=line_no)

    return PhotometryHeader(
        num_lamps=num_lamps,
        lumens_per_lamp=lumens_per_lamp,
        candela_multiplier=candela_multiplier,
        num_vertical_angles=num_vertical_angles,
        num_horizontal_angles=num_horizontal_angles,
        photometric_type=photometric_type,
        units_type=units_type,
        width=width,
        length=length,
        height=height,
        ballast_factor=ballast_factor,
        future_use=future_use,
        input_watts=input_watts,
        line_no=line_no,
    )


def _read_angles(stream: TokenStream, ph: PhotometryHeader) -> Tuple[List[float], List[float]]:
    vertical = stream.read_floats(
        ph.num_vertical_angles, what="vertical angles", truncated_error=AngleCountMismatchError
    )
    horizontal = stream.read_floats(
        ph.num_horizontal_angles, what="horizontal angles", truncated_error=AngleCountMismatchError
    )
    return vertical, horizontal


def _read_candela_values(stream: TokenStream, ph: PhotometryHeader) -> np.ndarray:
    """
    Candela values come as H rows of V values (outer loop C-planes, inner loop Gamma),
    wrapped arbitrarily. Read one stream of H*V values and reshape to [H][V].
    """
    H = ph.num_horizontal_angles
    V = ph.num_vertical_angles
    flat = stream.read_floats(H * V, what="candela values")
    return np.asarray(flat, dtype=float).reshape(H, V) * ph.candela_multiplier


def parse_ies_text(text: str, source_path: str | Path | None = None) -> ParsedIES:
    filename = str(source_path) if source_path is not None else None
    try:
        if not text.strip():
            raise EmptyInputError("Empty file")

        stream = TokenStream(text)
        first = stream.peek_line() or ""
        if _is_tilt_line(first):
            raise MissingSectionError("Missing IES version line", line_no=stream.line_no)
        _, standard_line = stream.next_line()  # type: ignore[misc]

        keywords, fields = _parse_keyword_lines(stream)
        tilt = _read_tilt(stream)

        tokens, ph_line_no = _read_photometry_record(stream)
        ph = _parse_photometry_header_from_tokens(tokens, line_no=ph_line_no)

        vertical, horizontal = _read_angles(stream, ph)
        values = _read_candela_values(stream, ph)
        candela = build_candela_matrix(values, vertical, tilt)

        header = CommonHeader(
            **fields,
            input_watts=ph.input_watts,
            total_lumens=ph.total_lumens,
        )
        angles = AngleGrid(vertical_deg=vertical, horizontal_deg=horizontal, type=ph.photometric_type_label)

        logger.debug(
            "Parsed IES %s: Nv=%d Nh=%d tilt=%s peak=%g cd",
            filename or "<text>",
            ph.num_vertical_angles,
            ph.num_horizontal_angles,
            tilt.kind,
            candela.peak_candela,
        )
        return ParsedIES(
            standard_line=standard_line,
            keywords=keywords,
            header=header,
            tilt=tilt,
            photometry=ph,
            angles=angles,
            candela=candela,
            source_file=filename,
        )
    except ParseError as e:
        if e.filename is None and filename is not None:
            e.filename = filename
        raise


def parse_ies_file(path: str | Path) -> ParsedIES:
    p = Path(path).expanduser()
    text = p.read_text(encoding="utf-8", errors="replace")
    return parse_ies_text(text, source_path=p.name)
