"""File materialization for document records.

Only documents of a narrow set of case types get their content stored as a
file; everything else keeps the content reference as mapped.
"""

from __future__ import annotations

import base64
import binascii
import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Final
from urllib.parse import urlparse

from casebridge.domain.errors import InvalidContentError
from casebridge.domain.model import StoredFile

if TYPE_CHECKING:
    from collections.abc import Sequence
    from uuid import UUID

    from casebridge.domain.model import DocumentDraft, ObjectRecord
    from casebridge.domain.ports.persistence import FileRepository, ObjectRepository

log = logging.getLogger(__name__)

ID_PLACEHOLDERS: Final[frozenset[str]] = frozenset({"id", "[id]", "{id}"})
DEFAULT_MIME_TYPE: Final[str] = "application/pdf"
DEFAULT_FILE_CASE_TYPES: Final[frozenset[str]] = frozenset({"B333", "B334"})


@dataclass(frozen=True, slots=True)
class DownloadEndpoint:
    """Retrieval URL template: ``{base_url}/api/{segments...}``."""

    base_url: str
    path: tuple[str, ...]

    @classmethod
    def from_template(cls, base_url: str, template: str | Sequence[str]) -> DownloadEndpoint:
        segments = template.strip("/").split("/") if isinstance(template, str) else template
        return cls(base_url=base_url, path=tuple(segment for segment in segments if segment))

    def url_for(self, document_id: str) -> str:
        base = self.base_url.rstrip("/")
        segments = [document_id if segment in ID_PLACEHOLDERS else segment for segment in self.path]
        return f"{base}/api/{'/'.join(segments)}"


def is_inline_content(content: str | None) -> bool:
    """Return whether ``content`` carries data rather than pointing at it."""

    if content is None or not content.strip():
        return False
    parsed = urlparse(content.strip())
    return not (parsed.scheme and parsed.netloc)


def decode_content(content: str, *, identification: str) -> tuple[str, bytes]:
    """Return normalized base64 text and the decoded bytes."""

    normalized = "".join(content.split())
    try:
        decoded = base64.b64decode(normalized, validate=True)
    except binascii.Error as exc:
        raise InvalidContentError(
            f"The content of document {identification} is not valid base64",
            key=identification,
        ) from exc
    return normalized, decoded


@dataclass(slots=True)
class FileMaterializer:
    """Create or update the file behind a document and point the document at it."""

    files: FileRepository
    objects: ObjectRepository
    endpoint: DownloadEndpoint

    def check_content(self, draft: DocumentDraft) -> None:
        """Raise ``InvalidContentError`` early, before the caller writes anything."""
        self._decoded(draft)

    def materialize(self, document: ObjectRecord, draft: DocumentDraft) -> StoredFile:
        identification = draft.identification
        payload = self._decoded(draft)

        document_id = _require_id(document)
        stored = self.files.for_document(document_id)
        bump_version = stored is None or payload is not None
        if stored is None:
            stored = StoredFile(
                document_id=document_id,
                name=draft.title if draft.title is not None else document.get("title"),
                mime_type=draft.format or document.get("format") or DEFAULT_MIME_TYPE,
            )

        if bump_version:
            document.hydrate({"version": next_version(draft.version, document.get("version"))})

        if payload is not None:
            stored.content, decoded = payload
            stored.size = len(decoded)

        self.files.save(stored)
        document.hydrate({"content": self.endpoint.url_for(document.ref)})
        self.objects.save(document)
        log.info(
            "Stored file for document %s (version %s, %s bytes)",
            identification,
            document.get("version"),
            stored.size,
        )
        return stored

    @staticmethod
    def _decoded(draft: DocumentDraft) -> tuple[str, bytes] | None:
        if draft.content is None or not is_inline_content(draft.content):
            return None
        return decode_content(draft.content, identification=draft.identification)


def next_version(draft_version: int | None, stored_version: object) -> int:
    """Version after one content-carrying update: prior + 1, or 1 without a prior."""

    prior = draft_version if draft_version is not None else stored_version
    if prior is None:
        return 1
    return int(str(prior)) + 1


def _require_id(document: ObjectRecord) -> UUID:
    if document.id is None:
        raise ValueError("Files can only be attached to persisted documents")
    return document.id
