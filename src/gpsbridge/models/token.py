"""Vendor session token model."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class AuthToken(BaseModel):
    """Opaque token returned by the vendor login.

    Parameters
    ----------
    key : str
        The token value sent with every device-list request.
    raw : dict
        Decoded ``userInfo`` object for access to additional fields.
    """

    model_config = ConfigDict(frozen=True)

    key: str = Field(min_length=1)
    raw: dict[str, Any] = Field(default_factory=dict)
