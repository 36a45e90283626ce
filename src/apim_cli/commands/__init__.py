"""CLI commands for the APIM CLI"""

from .count_applications import NO_DELAY_PERIOD, RESULT_TEMPLATE, CountApplications

__all__ = [
    "CountApplications",
    "NO_DELAY_PERIOD",
    "RESULT_TEMPLATE",
]
