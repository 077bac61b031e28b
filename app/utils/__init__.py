"""
Utility package initialization and exports
"""

from .money import clamp, format_minor_units, net_amount, percent_of

__all__ = [
    "clamp",
    "format_minor_units",
    "net_amount",
    "percent_of",
]
