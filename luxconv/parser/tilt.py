from __future__ import annotations

from luxconv.models.tilt import Tilt, TiltKind
from luxconv.parser.errors import InvalidTiltTableError
from luxconv.parser.tokens import TokenStream, parse_number


def classify_tilt(value: str) -> TiltKind:
    v = value.strip().upper()
    if v == "NONE":
        return "NONE"
    if v == "INCLUDE":
        return "INCLUDE"
    return "FILE"


def read_tilt_include(stream: TokenStream) -> Tilt:
    """
    Read the TILT=INCLUDE payload that follows the TILT line:
    <lamp_to_luminaire_geometry> <n> <n angles> <n multipliers>, wrapped freely across lines.
    """
    geometry = stream.read_tokens(1, what="TILT=INCLUDE lamp-to-luminaire geometry values")[0]

    count_line_no = stream.line_no
    count_tok = stream.read_tokens(1, what="TILT=INCLUDE angle counts")[0]
    n_f = parse_number(count_tok)
    if n_f is None or abs(n_f - round(n_f)) > 1e-9:
        raise InvalidTiltTableError(
            f"Invalid TILT=INCLUDE angle count '{count_tok}'", line_no=count_line_no, snippet=count_tok
        )
    n = int(round(n_f))
    if n <= 0:
        raise InvalidTiltTableError(f"TILT=INCLUDE angle count must be > 0, got {n}", line_no=count_line_no)

    angles_line_no = stream.line_no
    angles = stream.read_floats(n, what="tilt angles", invalid_error=InvalidTiltTableError)
    multipliers = stream.read_floats(n, what="tilt multipliers", invalid_error=InvalidTiltTableError)

    if any(angles[i + 1] < angles[i] for i in range(n - 1)):
        raise InvalidTiltTableError("Tilt angles must be in ascending order", line_no=angles_line_no)

    return Tilt.include(angles, multipliers, lamp_to_luminaire_geometry=geometry)
