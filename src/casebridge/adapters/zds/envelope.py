"""SOAP envelope decoding and response encoding for ZDS messages.

Decoded elements become plain dicts keyed by local name: attributes under
``@name``, mixed text under ``#``, repeated children as lists. Encoding is the
reverse, with empty values dropped.
"""

from __future__ import annotations

import logging
import xml.etree.ElementTree as ET
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Final

from casebridge.domain.model import MessageKind

if TYPE_CHECKING:
    from collections.abc import Mapping

log = logging.getLogger(__name__)

ENVELOPE_ROOT: Final[str] = "SOAP-ENV:Envelope"
SOAP_NAMESPACE: Final[str] = "http://schemas.xmlsoap.org/soap/envelope/"
XML_DECLARATION: Final[str] = '<?xml version="1.0" encoding="utf-8"?>\n'

KIND_BY_ROOT: Final[dict[str, MessageKind]] = {
    "genereerZaakIdentificatie_Di02": MessageKind.CASE_IDENTIFICATION,
    "genereerDocumentIdentificatie_Di02": MessageKind.DOCUMENT_IDENTIFICATION,
    "zakLk01": MessageKind.CASE,
    "edcLk01": MessageKind.DOCUMENT,
}


class EnvelopeError(ValueError):
    """Raised when an inbound document is not a recognisable ZDS envelope."""


@dataclass(frozen=True, slots=True)
class DecodedMessage:
    """The first element inside the SOAP body, as a dict."""

    root: str
    body: dict[str, Any]

    @property
    def detected_kind(self) -> MessageKind | None:
        return KIND_BY_ROOT.get(self.root)


@dataclass(frozen=True, slots=True)
class WireResponse:
    body: str
    status: int


def local_name(tag: str) -> str:
    """Strip ``{namespace}`` or ``prefix:`` from a tag or attribute name."""

    if tag.startswith("{"):
        tag = tag.split("}", 1)[1]
    return tag.rsplit(":", 1)[-1]


def decode_envelope(raw: str | bytes) -> DecodedMessage:
    """Parse ``raw`` and return the message element from the SOAP body.

    Malformed XML raises ``xml.etree.ElementTree.ParseError``.
    """

    root = ET.fromstring(raw)
    message = _message_element(root)
    body = element_to_value(message)
    if not isinstance(body, dict):
        body = {} if body is None else {"#": body}
    decoded = DecodedMessage(root=local_name(message.tag), body=body)
    log.debug("Decoded %s message", decoded.root)
    return decoded


def _message_element(root: ET.Element) -> ET.Element:
    if local_name(root.tag) != "Envelope":
        return root
    for child in root:
        if local_name(child.tag) == "Body":
            for message in child:
                return message
            raise EnvelopeError("SOAP body is empty")
    raise EnvelopeError("SOAP envelope has no body")


def element_to_value(element: ET.Element) -> Any:
    """Convert one element to a string, ``None`` (empty or nil) or dict."""

    attributes = {f"@{local_name(name)}": value for name, value in element.attrib.items()}
    if attributes.get("@nil") == "true":
        return None

    children: dict[str, Any] = {}
    for child in element:
        name = local_name(child.tag)
        value = element_to_value(child)
        if name not in children:
            children[name] = value
            continue
        existing = children[name]
        if isinstance(existing, list):
            existing.append(value)
        else:
            children[name] = [existing, value]

    text = (element.text or "").strip()
    if not attributes and not children:
        return text or None

    value: dict[str, Any] = {**attributes, **children}
    if text:
        value["#"] = text
    return value


def encode_response(payload: Mapping[str, Any], status: int) -> WireResponse:
    """Encode ``payload`` under a ``SOAP-ENV:Envelope`` root, empty tags removed."""

    root = ET.Element(ENVELOPE_ROOT, {"xmlns:SOAP-ENV": SOAP_NAMESPACE})
    _fill(root, _prune(payload) or {})
    body = XML_DECLARATION + ET.tostring(root, encoding="unicode")
    return WireResponse(body=body, status=status)


def _fill(element: ET.Element, value: Any) -> None:
    if not isinstance(value, dict):
        element.text = _text(value)
        return
    for key, item in value.items():
        if key == "#":
            element.text = _text(item)
        elif key.startswith("@"):
            element.set(key[1:], _text(item))
        else:
            items = item if isinstance(item, list) else [item]
            for entry in items:
                _fill(ET.SubElement(element, key), entry)


def _prune(value: Any) -> Any:
    if isinstance(value, dict):
        pruned = {key: _prune(item) for key, item in value.items()}
        kept = {key: item for key, item in pruned.items() if item is not None}
        return kept or None
    if isinstance(value, (list, tuple)):
        kept_items = [item for item in (_prune(entry) for entry in value) if item is not None]
        return kept_items or None
    if value is None or value == "":
        return None
    return value


def _text(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)
