"""Base model for vendor and platform payloads.

Every boundary model inherits from :class:`BridgeBaseModel` which
provides:

* frozen instances (records never change once built)
* a ``model_validator(mode="before")`` that drops placeholder values
  (``""``, ``"--"``, NaN) so the field default is used
* a ``raw`` dict that captures the original payload
"""

from __future__ import annotations

import math
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, model_validator

# Placeholder strings the vendor uses for "not available".
_SENTINELS = frozenset({"", "--", "NaN", "nan"})


class BridgeBaseModel(BaseModel):
    """Base for payload models parsed at the service boundary."""

    model_config = ConfigDict(
        frozen=True,
        extra="ignore",
        populate_by_name=True,
    )

    raw: dict[str, Any] = Field(default_factory=dict)
    """Original payload dict."""

    @staticmethod
    def _clean_dict(values: dict[str, Any]) -> dict[str, Any]:
        cleaned: dict[str, Any] = {}
        for key, value in values.items():
            if value is None:
                continue
            if isinstance(value, str) and value.strip() in _SENTINELS:
                continue
            if isinstance(value, float) and math.isnan(value):
                continue
            cleaned[key] = value
        return cleaned

    @model_validator(mode="before")
    @classmethod
    def _clean_values(cls, values: Any) -> Any:
        """Strip placeholder values and stash the raw payload."""
        if not isinstance(values, dict):
            return values
        cleaned = BridgeBaseModel._clean_dict(values)
        if "raw" not in values:
            cleaned["raw"] = dict(values)
        return cleaned
