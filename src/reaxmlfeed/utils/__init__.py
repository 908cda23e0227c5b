"""
Utility modules for the REAXML feed ingester.

Provides the value coercion and date parsing used by every field extractor.
"""

from reaxmlfeed.utils.coerce import (
    coerce_boolean,
    coerce_int,
    coerce_float,
    coerce_string,
    extract_text,
    get_attribute,
    as_list,
)
from reaxmlfeed.utils.date_parser import (
    parse_rea_date,
    parse_inspection_time,
)

__all__ = [
    "coerce_boolean",
    "coerce_int",
    "coerce_float",
    "coerce_string",
    "extract_text",
    "get_attribute",
    "as_list",
    "parse_rea_date",
    "parse_inspection_time",
]
