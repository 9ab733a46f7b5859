from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from luxconv.export import write_tm33_file, write_tm33_xml
from luxconv.mapping.tm33_mapper import Tm33Options, map_ies_to_tm33
from luxconv.models.tm33 import Tm33Document
from luxconv.parser.ies_parser import ParsedIES, parse_ies_text


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ConversionResult:
    parsed: ParsedIES
    document: Tm33Document
    xml: str
    out_path: Optional[Path] = None


def convert_ies_text(
    text: str,
    source_file: Optional[str] = None,
    options: Optional[Tm33Options] = None,
) -> ConversionResult:
    parsed = parse_ies_text(text, source_path=source_file)
    document = map_ies_to_tm33(parsed, source_file=source_file, options=options)
    xml = write_tm33_xml(document)
    return ConversionResult(parsed=parsed, document=document, xml=xml)


def convert_ies_file(
    path: str | Path,
    out_path: str | Path | None = None,
    options: Optional[Tm33Options] = None,
) -> ConversionResult:
    src = Path(path).expanduser()
    text = src.read_text(encoding="utf-8", errors="replace")
    res = convert_ies_text(text, source_file=src.name, options=options)
    if out_path is None:
        return res

    out = write_tm33_file(res.document, out_path)
    logger.info(
        "Converted %s -> %s (%dx%d candela values)",
        src.name,
        out,
        res.parsed.candela.horizontal_count,
        res.parsed.candela.vertical_count,
    )
    return ConversionResult(parsed=res.parsed, document=res.document, xml=res.xml, out_path=out)
