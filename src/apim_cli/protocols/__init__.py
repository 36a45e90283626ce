"""
Protocol definitions for APIM CLI component interfaces.

Usage:
    >>> from apim_cli.protocols import ManagementApiClient, RunnableCommand
"""

from .management_protocol import ManagementApiClient, RunnableCommand

__all__ = [
    "ManagementApiClient",
    "RunnableCommand",
]
