import pytest

from luxconv.parser.errors import InvalidHeaderError, InvalidNumberError, TruncatedInputError
from luxconv.parser.tokens import TokenStream, is_number, parse_number, split_lines


def test_split_lines_normalises_endings_and_drops_blanks():
    lines = split_lines("a\r\n\r\n  b  \rc\n\n")
    assert lines == [(1, "a"), (3, "b"), (4, "c")]


def test_read_tokens_spans_lines():
    s = TokenStream("1 2\n3\n4 5 6\n")
    assert s.read_tokens(4) == ["1", "2", "3", "4"]
    # the partly consumed line is stepped over
    assert s.at_end


def test_read_tokens_leaves_following_lines_untouched():
    s = TokenStream("0 45 90 999\n0 180\n")
    assert s.read_floats(3) == [0.0, 45.0, 90.0]
    assert s.peek_line() == "0 180"
    assert s.read_floats(2) == [0.0, 180.0]


def test_read_tokens_truncated():
    s = TokenStream("1 2\n3\n")
    with pytest.raises(TruncatedInputError) as exc:
        s.read_tokens(5, what="candela values")
    assert "Expected 5 candela values but found 3" in str(exc.value)


def test_read_floats_rejects_bad_token():
    s = TokenStream("1 x 3\n")
    with pytest.raises(InvalidNumberError):
        s.read_floats(3)


def test_read_floats_uses_requested_error_class():
    s = TokenStream("1 x 3\n")
    with pytest.raises(InvalidHeaderError):
        s.read_floats(3, invalid_error=InvalidHeaderError)


def test_line_numbers_track_input():
    s = TokenStream("\nfirst\n\nsecond\n")
    assert s.line_no == 2
    assert s.next_line() == (2, "first")
    assert s.line_no == 4


@pytest.mark.parametrize("tok,expected", [
    ("1", 1.0),
    ("-2.5", -2.5),
    ("+.5", 0.5),
    ("3.", 3.0),
    ("1e3", 1000.0),
    ("2.5E-1", 0.25),
])
def test_parse_number_accepts_invariant_decimals(tok: str, expected: float):
    assert parse_number(tok) == expected


@pytest.mark.parametrize("tok", ["1,5", "1,000", "nan", "inf", "1_000", "", "abc", "0x10"])
def test_parse_number_rejects_other_forms(tok: str):
    assert parse_number(tok) is None
    assert not is_number(tok)


@pytest.mark.parametrize("tok", ["1e999", "-1e999", "9" * 400])
def test_parse_number_rejects_overflow(tok: str):
    assert is_number(tok)
    assert parse_number(tok) is None
