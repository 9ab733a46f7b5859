from __future__ import annotations

import math
import re
from typing import List, Optional, Tuple, Type

from luxconv.parser.errors import InvalidNumberError, ParseError, TruncatedInputError


_NUM_RE = re.compile(r"^[+-]?(\d+(\.\d*)?|\.\d+)([eE][+-]?\d+)?$")


def is_number(tok: str) -> bool:
    return bool(_NUM_RE.match(tok))


def parse_number(tok: str) -> Optional[float]:
    # float() alone would also accept "nan", "inf" and "1_000"
    if not is_number(tok):
        return None
    value = float(tok)
    # "1e999" matches the pattern but overflows to inf
    if not math.isfinite(value):
        return None
    return value


def split_lines(text: str) -> List[Tuple[int, str]]:
    """
    Normalise line endings and drop blank lines.
    Returns (line_no, stripped_text) pairs, line numbers 1-indexed against the input.
    """
    normalised = text.replace("\r\n", "\n").replace("\r", "\n")
    out: List[Tuple[int, str]] = []
    for idx0, ln in enumerate(normalised.split("\n")):
        s = ln.strip()
        if s:
            out.append((idx0 + 1, s))
    return out


class TokenStream:
    """
    Cursor over the non-blank lines of an IES file.

    Numeric blocks in vendor exports wrap at arbitrary widths, so `read_tokens`
    treats the remaining lines as one token pool. A line that is only partly
    consumed is still stepped over; its leftover tokens are dropped.
    """

    def __init__(self, text: str):
        self._lines = split_lines(text)
        self._idx = 0

    def __len__(self) -> int:
        return len(self._lines)

    @property
    def at_end(self) -> bool:
        return self._idx >= len(self._lines)

    @property
    def line_no(self) -> Optional[int]:
        """Input line number under the cursor, or the last line once exhausted."""
        if not self._lines:
            return None
        if self.at_end:
            return self._lines[-1][0]
        return self._lines[self._idx][0]

    def peek_line(self, offset: int = 0) -> Optional[str]:
        idx = self._idx + offset
        if idx >= len(self._lines):
            return None
        return self._lines[idx][1]

    def count_remaining_tokens(self, offset: int = 0) -> int:
        return sum(len(s.split()) for _, s in self._lines[self._idx + offset :])

    def next_line(self) -> Optional[Tuple[int, str]]:
        if self.at_end:
            return None
        item = self._lines[self._idx]
        self._idx += 1
        return item

    def read_tokens(
        self,
        count: int,
        what: str = "values",
        truncated_error: Type[ParseError] = TruncatedInputError,
    ) -> List[str]:
        tokens: List[str] = []
        start_line_no = self.line_no
        while len(tokens) < count and not self.at_end:
            _, s = self._lines[self._idx]
            tokens.extend(s.split()[: count - len(tokens)])
            self._idx += 1
        if len(tokens) < count:
            raise truncated_error(
                f"Expected {count} {what} but found {len(tokens)} before end of input",
                line_no=start_line_no,
            )
        return tokens

    def read_floats(
        self,
        count: int,
        what: str = "values",
        invalid_error: Type[ParseError] = InvalidNumberError,
        truncated_error: Type[ParseError] = TruncatedInputError,
    ) -> List[float]:
        start_line_no = self.line_no
        tokens = self.read_tokens(count, what=what, truncated_error=truncated_error)
        values: List[float] = []
        for i, tok in enumerate(tokens):
            v = parse_number(tok)
            if v is None:
                raise invalid_error(
                    f"Expected numeric value #{i + 1} of {count} {what}, got '{tok}'",
                    line_no=start_line_no,
                    snippet=tok,
                )
            values.append(v)
        return values
