"""Management API integration for the APIM CLI"""

from .client import DEFAULT_DELAY_PERIOD, ManagementApi
from .models import Application, LoginToken

__all__ = [
    "DEFAULT_DELAY_PERIOD",
    "ManagementApi",
    "Application",
    "LoginToken",
]
