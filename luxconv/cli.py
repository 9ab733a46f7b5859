from __future__ import annotations

import argparse
import json
import logging
from datetime import date
from pathlib import Path

from luxconv.mapping.tm33_mapper import Tm33Options
from luxconv.parser.errors import ParseError
from luxconv.parser.ies_parser import parse_ies_file
from luxconv.pipeline import convert_ies_file


_DEMO_IES_TEXT = """IESNA:LM-63-2002
[TEST] DEMO-REPORT-001
[TESTLAB] Luxconv Demo Lab
[MANUFAC] Luxconv Demo
[LUMCAT] DEMO-001
TILT=NONE
1 1000 1 5 2 1 2 0.3 0.3 0.1 1 0 25
0 30 60 75 90
0 180
1000 900 500 100 0
1000 850 450 90 0
"""


def _check_input(path: Path) -> bool:
    if not path.exists():
        print(f"[ERROR] File not found: {path}")
        print("        Provide a valid path to a .ies file.")
        return False
    if not path.is_file():
        print(f"[ERROR] Not a file: {path}")
        return False
    return True


def _cmd_demo(args: argparse.Namespace) -> int:
    outpath = Path(args.out).expanduser().resolve()
    outpath.parent.mkdir(parents=True, exist_ok=True)
    outpath.write_text(_DEMO_IES_TEXT, encoding="utf-8")
    print(f"Saved demo IES to: {outpath}")
    return 0


def _cmd_convert(args: argparse.Namespace) -> int:
    ies_path = Path(args.file).expanduser().resolve()
    if not _check_input(ies_path):
        return 2
    out = Path(args.out).expanduser().resolve() if args.out else ies_path.with_suffix(".xml")

    options = Tm33Options(creator=args.creator, test_date=args.test_date)

    try:
        res = convert_ies_file(ies_path, out_path=out, options=options)
    except ParseError as e:
        print(f"[ERROR] {e}")
        return 3

    print(f"Saved TM-33 XML to: {res.out_path}")
    return 0


def _cmd_inspect(args: argparse.Namespace) -> int:
    ies_path = Path(args.file).expanduser().resolve()
    if not _check_input(ies_path):
        return 2
    try:
        doc = parse_ies_file(ies_path)
    except ParseError as e:
        print(f"[ERROR] {e}")
        return 3

    cd = doc.candela
    peak_h = doc.angles.horizontal_deg[cd.peak_plane_index]
    summary = {
        "file": ies_path.name,
        "standard": doc.standard_line,
        "manufacturer": doc.header.manufacturer,
        "luminaire": doc.header.luminaire,
        "tilt": doc.tilt.kind,
        "photometric_type": doc.angles.type,
        "num_vertical_angles": cd.vertical_count,
        "num_horizontal_angles": cd.horizontal_count,
        "total_lumens": doc.header.total_lumens,
        "input_watts": doc.header.input_watts,
        "peak_candela": cd.peak_candela,
        "peak_location_deg": [float(peak_h), cd.peak_vertical_angle],
        "beam_angle_deg": cd.beam_angle,
    }
    if args.json:
        print(json.dumps(summary, indent=2, sort_keys=True))
        return 0

    print("Luxconv Inspect")
    print(f"  File: {ies_path}")
    print(f"  Standard: {doc.standard_line}")
    print(f"  Angles: {cd.vertical_count} vertical x {cd.horizontal_count} horizontal (type {doc.angles.type})")
    print(f"  Tilt: {doc.tilt.kind}")
    print(
        f"  Peak candela: {cd.peak_candela:g} "
        f"at (H,V)=({peak_h:g}°, {cd.peak_vertical_angle:g}°)"
    )
    print(f"  Beam angle (50%): {cd.beam_angle:g}°")
    return 0


def main(argv: list[str] | None = None) -> int:
    p = argparse.ArgumentParser(prog="luxconv")
    p.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    sub = p.add_subparsers(dest="cmd", required=True)

    demo = sub.add_parser("demo", help="Write a small demo .ies file to disk.")
    demo.add_argument("--out", default="data/ies_samples/demo.ies", help="Output .ies path")
    demo.set_defaults(func=_cmd_demo)

    c = sub.add_parser("convert", help="Convert an IES LM-63 file to TM-33 XML.")
    c.add_argument("file", help="Path to .ies file")
    c.add_argument("--out", default=None, help="Output .xml path (default: next to the input)")
    c.add_argument("--creator", default="luxconv", help="Creator written to FileInformation")
    c.add_argument("--test-date", default=None, type=date.fromisoformat, help="Test date for TestInformation (YYYY-MM-DD)")
    c.set_defaults(func=_cmd_convert)

    i = sub.add_parser("inspect", help="Parse an IES file and print peak/beam metrics.")
    i.add_argument("file", help="Path to .ies file")
    i.add_argument("--json", action="store_true", help="Print a JSON summary")
    i.set_defaults(func=_cmd_inspect)

    args = p.parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )
    return int(args.func(args))


if __name__ == "__main__":
    raise SystemExit(main())
