from __future__ import annotations

from casebridge.domain.model import DocumentDraft


def test_document_fields_leave_out_version_and_type() -> None:
    draft = DocumentDraft(
        identification="DOC-1",
        document_type_description="Foto",
        title="Foto van de stoep",
        version=7,
        attributes={"language": "nld"},
    )

    assert draft.document_fields() == {
        "identification": "DOC-1",
        "title": "Foto van de stoep",
        "language": "nld",
    }
