"""Pydantic models for Management API payloads"""

from pydantic import BaseModel, ConfigDict
from typing import Optional, Union


class LoginToken(BaseModel):
    model_config = ConfigDict(extra="ignore")

    token: str
    token_type: str = "BEARER"


class Application(BaseModel):
    """An application as returned by the listing endpoint.

    Only ``id`` and ``name`` are read; everything else is kept as-is.
    """

    model_config = ConfigDict(extra="allow")

    id: Optional[Union[str, int]] = None
    name: Optional[str] = None
