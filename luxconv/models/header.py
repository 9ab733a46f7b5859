from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class CommonHeader:
    manufacturer: str = ""
    luminaire: str = ""
    catalog_number: str = ""
    lamp: str = ""
    test_laboratory: str = ""
    test_report: str = ""
    notes: str = ""                      # [MORE] lines, newline-joined
    # Both derived from the numeric header record, never from keywords.
    input_watts: float = 0.0
    total_lumens: float = 0.0
