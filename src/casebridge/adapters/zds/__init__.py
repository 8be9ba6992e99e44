"""Public interface for the ZDS (StUF-ZKN over SOAP) adapter."""

from __future__ import annotations

from .envelope import (
    DecodedMessage,
    EnvelopeError,
    WireResponse,
    decode_envelope,
    encode_response,
)
from .schema import CaseMessage, DocumentMessage, IdentificationRequest
from .translator import zds_mapping_registry

__all__ = [
    "CaseMessage",
    "DecodedMessage",
    "DocumentMessage",
    "EnvelopeError",
    "IdentificationRequest",
    "WireResponse",
    "decode_envelope",
    "encode_response",
    "zds_mapping_registry",
]
