from .decimal_math import percentage_difference, ratios, scale_by_percent
from .fixed_point import Amount, format_units, parse_units, to_decimal, trim_decimal_string

__all__ = (
    "Amount",
    "format_units",
    "parse_units",
    "percentage_difference",
    "ratios",
    "scale_by_percent",
    "to_decimal",
    "trim_decimal_string",
)
