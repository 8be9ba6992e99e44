from __future__ import annotations

import xml.etree.ElementTree as ET

import pytest

from casebridge.adapters.zds import EnvelopeError, decode_envelope, encode_response
from casebridge.adapters.zds.envelope import SOAP_NAMESPACE
from casebridge.domain.model import MessageKind
from tests.helpers.messages import (
    case_identification_request,
    case_update,
    document_identification_request,
    document_update,
)


@pytest.mark.parametrize(
    ("raw", "root", "kind"),
    [
        (case_identification_request(), "genereerZaakIdentificatie_Di02", "case_identification"),
        (
            document_identification_request(),
            "genereerDocumentIdentificatie_Di02",
            "document_identification",
        ),
        (case_update(), "zakLk01", "case"),
        (document_update(), "edcLk01", "document"),
    ],
)
def test_decode_envelope_detects_message_kind(raw: str, root: str, kind: str) -> None:
    decoded = decode_envelope(raw)

    assert decoded.root == root
    assert decoded.detected_kind is MessageKind(kind)


def test_decode_envelope_strips_prefixes_and_keeps_attributes() -> None:
    decoded = decode_envelope(document_update())

    document = decoded.body["object"]
    assert document["@entiteittype"] == "EDC"
    assert document["identificatie"] == "DOC-1"
    assert document["inhoud"] == {
        "@bestandsnaam": "foto.png",
        "@contentType": "image/png",
        "#": "aGVsbG8=",
    }
    assert decoded.body["stuurgegevens"]["zender"] == {
        "organisatie": "0000",
        "applicatie": "DMS",
    }


def test_decode_envelope_treats_nil_as_none() -> None:
    decoded = decode_envelope(case_update())

    assert decoded.body["object"]["toelichting"] is None


def test_decode_envelope_collects_repeated_elements() -> None:
    decoded = decode_envelope(case_update(properties=[("kleur", "blauw"), ("maat", "groot")]))

    elements = decoded.body["object"]["extraElementen"]["extraElement"]
    assert elements == [{"@naam": "kleur", "#": "blauw"}, {"@naam": "maat", "#": "groot"}]


def test_decode_envelope_rejects_empty_body() -> None:
    raw = (
        '<SOAP-ENV:Envelope xmlns:SOAP-ENV="http://schemas.xmlsoap.org/soap/envelope/">'
        "<SOAP-ENV:Body/></SOAP-ENV:Envelope>"
    )

    with pytest.raises(EnvelopeError):
        decode_envelope(raw)


def test_decode_envelope_propagates_parse_errors() -> None:
    with pytest.raises(ET.ParseError):
        decode_envelope("<SOAP-ENV:Envelope>")


def test_encode_response_wraps_error_payload() -> None:
    response = encode_response({"Error": "The case with id Z1 already exists"}, 400)

    assert response.status == 400
    assert response.body.startswith('<?xml version="1.0" encoding="utf-8"?>')
    root = ET.fromstring(response.body)
    assert root.tag == f"{{{SOAP_NAMESPACE}}}Envelope"
    assert root.findtext("Error") == "The case with id Z1 already exists"


def test_encode_response_removes_empty_tags() -> None:
    response = encode_response(
        {
            "Body": {
                "zaak": {"@type": "ZAK", "identificatie": "Z1", "omschrijving": ""},
                "empty": {"nested": None},
                "items": ["a", "", "b"],
            }
        },
        200,
    )

    root = ET.fromstring(response.body)
    zaak = root.find("Body/zaak")
    assert zaak is not None
    assert zaak.get("type") == "ZAK"
    assert zaak.findtext("identificatie") == "Z1"
    assert zaak.find("omschrijving") is None
    assert root.find("Body/empty") is None
    assert [item.text for item in root.findall("Body/items")] == ["a", "b"]
