from luxconv.export.tm33_xml import build_tm33_element, format_number, write_tm33_file, write_tm33_xml

__all__ = [
    "build_tm33_element",
    "format_number",
    "write_tm33_file",
    "write_tm33_xml",
]
