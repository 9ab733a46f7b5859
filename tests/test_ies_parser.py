from dataclasses import FrozenInstanceError

import numpy as np
import pytest

from luxconv.parser.errors import (
    AngleCountMismatchError,
    EmptyInputError,
    InvalidAngleCountError,
    InvalidHeaderError,
    InvalidNumberError,
    MissingSectionError,
    ParseError,
    TruncatedInputError,
)
from luxconv.parser.ies_parser import parse_ies_text


SCENARIO_1 = "IESNA:LM-63-2002\n[TEST]ABC\nTILT=NONE\n1 1000 1 2 2 1 2 0 0 0 1 0 100\n0 90\n0 180\n500 100 600 120\n"


def test_parse_basic_scenario():
    doc = parse_ies_text(SCENARIO_1)
    assert doc.standard_line == "IESNA:LM-63-2002"
    assert doc.header.test_report == "ABC"
    assert doc.tilt.kind == "NONE"
    assert doc.photometry.num_vertical_angles == 2
    assert doc.photometry.num_horizontal_angles == 2
    assert doc.angles.vertical_deg == [0.0, 90.0]
    assert doc.angles.horizontal_deg == [0.0, 180.0]
    assert doc.angles.type == "C"
    assert doc.candela.values.shape == (2, 2)
    assert doc.candela.to_rows() == [[500.0, 100.0], [600.0, 120.0]]
    assert doc.candela.peak_candela == 600.0
    assert doc.candela.peak_plane_index == 1
    assert doc.candela.peak_vertical_angle == 0.0
    assert doc.candela.beam_angle == pytest.approx(56.25)


def test_candela_multiplier_applied_once():
    text = SCENARIO_1.replace("1 1000 1 2 2", "1 1000 2 2 2")
    doc = parse_ies_text(text)
    assert doc.photometry.candela_multiplier == 2.0
    assert doc.candela.to_rows() == [[1000.0, 200.0], [1200.0, 240.0]]
    assert doc.candela.peak_candela == 1200.0


def test_candela_table_is_horizontal_major():
    text = """IESNA:LM-63-2002
TILT=NONE
1 16000 2 3 2 1 2 0.45 0.45 0.10 1 0 50
0 45 90
0 180
0 1 2
3 4 5
"""
    doc = parse_ies_text(text)
    # H=2 rows, V=3 cols
    assert doc.candela.to_rows() == [
        [0.0, 2.0, 4.0],
        [6.0, 8.0, 10.0],
    ]
    assert doc.candela.horizontal_count == 2
    assert doc.candela.vertical_count == 3


def test_common_header_keywords_and_derived_totals():
    text = """IESNA:LM-63-2019
[TEST] R-42
[TESTLAB] Photometric Lab
[MANUFAC] Acme
[LUMCAT] XZ-400
[CATALOGNUMBER] XZ-400-840
[LAMPCAT] LED-840
[MORE] first note
[MORE] second note
[ISSUEDATE] 2020-01-01
TILT=NONE
2 1500 1 1 1 1 1 0.5 0.5 0.1 0.95 0 36.5
0
0
100
"""
    doc = parse_ies_text(text)
    h = doc.header
    assert h.manufacturer == "Acme"
    assert h.luminaire == "XZ-400"
    assert h.catalog_number == "XZ-400-840"
    assert h.lamp == "LED-840"
    assert h.test_laboratory == "Photometric Lab"
    assert h.test_report == "R-42"
    assert h.notes == "first note\nsecond note"
    assert h.total_lumens == 3000.0
    assert h.input_watts == 36.5
    assert doc.photometry.ballast_factor == 0.95
    assert doc.photometry.units_type == 1
    assert doc.keywords["ISSUEDATE"] == ["2020-01-01"]


def test_common_header_is_frozen():
    doc = parse_ies_text(SCENARIO_1)
    with pytest.raises(FrozenInstanceError):
        doc.header.total_lumens = 1.0  # type: ignore[misc]


def test_candela_matrix_is_read_only():
    doc = parse_ies_text(SCENARIO_1)
    with pytest.raises(ValueError):
        doc.candela.values[0, 0] = 1.0


def test_ten_token_header_uses_last_token_as_input_watts():
    text = "IESNA:LM-63-2002\nTILT=NONE\n1 1000 1 2 2 1 2 0.5 0.6 0.7\n0 90\n0 180\n500 100 600 120\n"
    doc = parse_ies_text(text)
    assert doc.photometry.input_watts == 0.7
    assert doc.header.input_watts == 0.7
    assert doc.photometry.ballast_factor == 1.0
    assert doc.photometry.future_use == 0.0


def test_header_record_may_wrap_across_lines():
    text = """IESNA:LM-63-2002
TILT=NONE
1 1000 1 3 2
1 2 0.5 0.5 0.1 1 0 40
0
45 90
0 180
10 20
30 40
50 60
"""
    doc = parse_ies_text(text)
    assert doc.photometry.input_watts == 40.0
    assert doc.angles.vertical_deg == [0.0, 45.0, 90.0]
    assert doc.candela.to_rows() == [[10.0, 20.0, 30.0], [40.0, 50.0, 60.0]]


def test_crlf_tabs_and_blank_lines_are_tolerated():
    text = "IESNA:LM-63-2002\r\n\r\n[MANUFAC]\tAcme\r\ntilt=none\r\n1\t1000 1 2 2 1 2 0 0 0 1 0 100\r\n\r\n0 90\r\n0 180\r\n500 100\r\n600 120\r\n"
    doc = parse_ies_text(text)
    assert doc.header.manufacturer == "Acme"
    assert doc.tilt.kind == "NONE"
    assert doc.candela.peak_candela == 600.0


def test_unknown_photometric_type_reads_as_type_c():
    text = SCENARIO_1.replace("1 1000 1 2 2 1 2", "1 1000 1 2 2 7 2")
    doc = parse_ies_text(text)
    assert doc.photometry.photometric_type == 7
    assert doc.angles.type == "C"


@pytest.mark.parametrize("ptype,label", [(1, "C"), (2, "B"), (3, "A")])
def test_photometric_type_label(ptype: int, label: str):
    text = SCENARIO_1.replace("1 1000 1 2 2 1 2", f"1 1000 1 2 2 {ptype} 2")
    assert parse_ies_text(text).angles.type == label


def test_tilt_file_is_recorded_not_resolved():
    text = SCENARIO_1.replace("TILT=NONE", "TILT=lamp_tilt.dat")
    doc = parse_ies_text(text)
    assert doc.tilt.kind == "FILE"
    assert doc.tilt.file_name == "lamp_tilt.dat"
    assert doc.candela.to_rows() == [[500.0, 100.0], [600.0, 120.0]]


def test_tilt_include_scales_vertical_columns():
    text = """IESNA:LM-63-2002
TILT=INCLUDE
1
2
0 90
1 0.5
1 1000 1 2 2 1 2 0 0 0 1 0 100
0 90
0 180
500 100 600 120
"""
    doc = parse_ies_text(text)
    assert doc.tilt.kind == "INCLUDE"
    assert doc.tilt.lamp_to_luminaire_geometry == "1"
    assert doc.tilt.angles_deg == (0.0, 90.0)
    assert doc.tilt.multipliers == (1.0, 0.5)
    assert doc.candela.to_rows() == [[500.0, 50.0], [600.0, 60.0]]


def test_tilt_include_with_unit_table_leaves_matrix_unchanged():
    text = SCENARIO_1.replace("TILT=NONE", "TILT=INCLUDE\n1\n3\n0 90 180\n1 1 1")
    baseline = parse_ies_text(SCENARIO_1)
    doc = parse_ies_text(text)
    np.testing.assert_array_equal(doc.candela.values, baseline.candela.values)
    assert doc.candela.beam_angle == baseline.candela.beam_angle


def test_empty_input_raises():
    with pytest.raises(EmptyInputError):
        parse_ies_text("   \n\t\n")


def test_missing_tilt_line_raises():
    text = "IESNA:LM-63-2002\n[MANUFAC] Acme\n"
    with pytest.raises(MissingSectionError):
        parse_ies_text(text)


def test_missing_version_line_raises():
    with pytest.raises(MissingSectionError):
        parse_ies_text("TILT=NONE\n1 1000 1 2 2 1 2 0 0 0 1 0 100\n")


def test_missing_numeric_header_raises():
    with pytest.raises(MissingSectionError):
        parse_ies_text("IESNA:LM-63-2002\nTILT=NONE\n")


def test_short_numeric_header_raises():
    with pytest.raises(InvalidHeaderError):
        parse_ies_text("IESNA:LM-63-2002\nTILT=NONE\n1 1000 1 2 2 1 2\n")


def test_non_numeric_header_token_raises():
    text = SCENARIO_1.replace("1 1000 1 2 2", "1 1,000 1 2 2")
    with pytest.raises(InvalidHeaderError):
        parse_ies_text(text)


def test_zero_vertical_angles_rejected():
    text = "IESNA:LM-63-2002\nTILT=NONE\n1 1000 1 0 2 1 2 0 0 0 1 0 100\n0 180\n"
    with pytest.raises(InvalidAngleCountError):
        parse_ies_text(text)


def test_zero_lamps_rejected():
    text = SCENARIO_1.replace("\n1 1000 1 2 2", "\n0 1000 1 2 2")
    with pytest.raises(InvalidHeaderError):
        parse_ies_text(text)


def test_angle_list_exhausted_raises_angle_count_mismatch():
    text = "IESNA:LM-63-2002\nTILT=NONE\n1 1000 1 3 2 1 2 0 0 0 1 0 100\n0 45\n"
    with pytest.raises(AngleCountMismatchError):
        parse_ies_text(text)


def test_candela_count_mismatch_raises():
    # Needs H*V = 2*3 = 6 values, but provides only 5
    text = """IESNA:LM-63-2002
TILT=NONE
1 16000 1 3 2 1 2 0.45 0.45 0.10
0 45 90
0 180
0 1 2
3 4
"""
    with pytest.raises(TruncatedInputError) as exc:
        parse_ies_text(text)
    assert not isinstance(exc.value, AngleCountMismatchError)
    assert "Expected 6 candela values" in str(exc.value)


def test_parse_error_carries_source_name():
    with pytest.raises(ParseError) as exc:
        parse_ies_text("IESNA:LM-63-2002\nTILT=NONE\n", source_path="broken.ies")
    assert str(exc.value).startswith("broken.ies: ")


def test_overflowing_candela_value_raises_invalid_number():
    text = SCENARIO_1.replace("500 100 600 120", "500 1e999 600 120")
    with pytest.raises(InvalidNumberError) as exc:
        parse_ies_text(text)
    assert exc.value.snippet == "1e999"


def test_overflowing_header_value_raises_invalid_header():
    text = SCENARIO_1.replace("\n1 1000 1 2 2", "\n1 1e999 1 2 2")
    with pytest.raises(InvalidHeaderError):
        parse_ies_text(text)
