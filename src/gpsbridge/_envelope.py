"""Vendor XML envelope decoding.

The vendor answers every call with an ASP.NET style document whose root
element holds the real payload as a JSON string::

    <?xml version="1.0" encoding="utf-8"?>
    <string xmlns="http://tempuri.org/">{"userInfo": {...}}</string>
"""

from __future__ import annotations

import json
from typing import Any
from xml.etree.ElementTree import ParseError

from defusedxml import DefusedXmlException
from defusedxml.ElementTree import fromstring

from gpsbridge.exceptions import DecodeError


def decode_envelope(xml_payload: str | bytes, *, endpoint: str = "") -> Any:
    """Unwrap the XML envelope and JSON-decode its text node.

    Raises
    ------
    DecodeError
        If the XML does not parse, the root has no text, or the text is
        not JSON.
    """
    if isinstance(xml_payload, str):
        # ElementTree rejects str input that still carries an encoding declaration.
        xml_payload = xml_payload.strip().encode("utf-8")
    if not xml_payload:
        raise DecodeError("Empty envelope", endpoint=endpoint)

    try:
        root = fromstring(xml_payload)
    except (ParseError, DefusedXmlException) as exc:
        raise DecodeError(f"Malformed XML envelope: {exc}", endpoint=endpoint) from exc

    text = (root.text or "").strip()
    if not text:
        raise DecodeError("Envelope has no text payload", endpoint=endpoint)

    try:
        return json.loads(text)
    except json.JSONDecodeError as exc:
        raise DecodeError(f"Envelope payload is not JSON: {text[:64]}", endpoint=endpoint) from exc


def decode_object(xml_payload: str | bytes, *, endpoint: str = "") -> dict[str, Any]:
    """Like :func:`decode_envelope` but require a JSON object."""
    decoded = decode_envelope(xml_payload, endpoint=endpoint)
    if not isinstance(decoded, dict):
        raise DecodeError(
            f"Expected a JSON object, got {type(decoded).__name__}",
            endpoint=endpoint,
        )
    return decoded
