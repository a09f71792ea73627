"""
Reporting modules for the Claim Analytics Engine.
"""

from .formatting import format_compact, format_count, format_currency, format_number
from .summary import SummaryFormatter

__all__ = [
    "SummaryFormatter",
    "format_compact",
    "format_count",
    "format_currency",
    "format_number",
]
