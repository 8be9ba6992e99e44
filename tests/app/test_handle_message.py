from __future__ import annotations

import threading
import time
import xml.etree.ElementTree as ET
from typing import TYPE_CHECKING

import pytest
from sqlalchemy import create_engine

from casebridge.adapters.sqlalchemy.unit_of_work import (
    SqlAlchemyGatewayUnitOfWork,
    shutdown,
    startup,
)
from casebridge.adapters.zds import EnvelopeError, decode_envelope
from casebridge.app import handle_message
from casebridge.config import GatewayConfig
from casebridge.domain.model import EntityType
from casebridge.domain.reconciliation import NaturalKeyLocks
from tests.helpers.messages import (
    ENVELOPE,
    case_identification_request,
    case_update,
    document_identification_request,
    document_update,
)

if TYPE_CHECKING:
    from collections.abc import Callable
    from pathlib import Path

    from casebridge.adapters.zds import WireResponse

    type Factory = Callable[[], SqlAlchemyGatewayUnitOfWork]

CONFIG = GatewayConfig(app_url="https://zaken.example.org")


def _handle(factory: Factory, raw: str, kind: str | None = None) -> WireResponse:
    return handle_message(
        raw,
        kind,
        unit_of_work_factory=factory,
        config=CONFIG,
        locks=NaturalKeyLocks(),
    )


def _error_text(response: WireResponse) -> str | None:
    return ET.fromstring(response.body).findtext("Error")


def test_case_registration_replies_with_identification(
    sqlite_unit_of_work: Factory,
) -> None:
    response = _handle(sqlite_unit_of_work, case_identification_request("ZAAK-1"))

    assert response.status == 200
    reply = decode_envelope(response.body)
    assert reply.root == "genereerZaakIdentificatie_Du02"
    assert reply.body["zaak"]["identificatie"] == "ZAAK-1"
    assert reply.body["stuurgegevens"]["crossRefnummer"] == "ZAAK-1"
    assert reply.body["stuurgegevens"]["ontvanger"] == {"applicatie": "DMS"}


def test_duplicate_registration_is_rejected_and_keeps_one_record(
    sqlite_unit_of_work: Factory,
) -> None:
    _handle(sqlite_unit_of_work, case_identification_request("ZAAK-1"))

    response = _handle(sqlite_unit_of_work, case_identification_request("ZAAK-1"))

    assert response.status == 400
    assert _error_text(response) == "The case with id ZAAK-1 already exists"
    with sqlite_unit_of_work() as uow:
        cases = uow.repositories.objects.search(EntityType.CASE, {"identification": "ZAAK-1"})
    assert len(cases) == 1


def test_case_and_document_flow_stores_file(sqlite_unit_of_work: Factory) -> None:
    assert _handle(sqlite_unit_of_work, case_identification_request("ZAAK-1")).status == 200
    case_response = _handle(sqlite_unit_of_work, case_update("ZAAK-1"))
    assert case_response.status == 200
    assert decode_envelope(case_response.body).root == "Bv03Bericht"

    assert _handle(sqlite_unit_of_work, document_identification_request("DOC-1")).status == 200
    response = _handle(sqlite_unit_of_work, document_update("DOC-1"))

    assert response.status == 200
    with sqlite_unit_of_work() as uow:
        objects = uow.repositories.objects
        (case,) = objects.search(EntityType.CASE, {"identification": "ZAAK-1"})
        (case_type,) = objects.search(EntityType.CASE_TYPE, {"identification": "B333"})
        (document,) = objects.search(EntityType.DOCUMENT, {"identification": "DOC-1"})
        (document_type,) = objects.search(EntityType.DOCUMENT_TYPE, {"description": "Foto"})
        links = objects.search(EntityType.CASE_DOCUMENT, {"document": document.ref})
        assert document.id is not None
        stored = uow.repositories.files.for_document(document.id)

    assert case.get("case_type") == case_type.ref
    assert [item["value"] for item in case.get("properties")] == ["blauw"]
    assert case_type.get("document_types") == [document_type.ref]
    assert document.get("document_type") == document_type.ref
    assert document.get("version") == 1
    assert document.get("content") == (
        "https://zaken.example.org/api/documenten/enkelvoudiginformatieobjecten/"
        f"{document.ref}/download"
    )
    assert [link.get("case") for link in links] == [case.ref]
    assert stored is not None
    assert stored.content == "aGVsbG8="
    assert stored.size == 5


def test_file_urls_use_app_url_from_environment(
    sqlite_unit_of_work: Factory,
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    monkeypatch.setenv("CASEBRIDGE_APP_URL", "https://env.example.org")
    config = GatewayConfig()
    for raw in (
        case_identification_request("ZAAK-1"),
        case_update("ZAAK-1"),
        document_identification_request("DOC-1"),
        document_update("DOC-1"),
    ):
        response = handle_message(
            raw, unit_of_work_factory=sqlite_unit_of_work, config=config, locks=NaturalKeyLocks()
        )
        assert response.status == 200

    with sqlite_unit_of_work() as uow:
        (document,) = uow.repositories.objects.search(
            EntityType.DOCUMENT, {"identification": "DOC-1"}
        )
    assert document.get("content").startswith("https://env.example.org/api/")


def test_case_population_without_registration_is_rejected(
    sqlite_unit_of_work: Factory,
) -> None:
    response = _handle(sqlite_unit_of_work, case_update("ZAAK-9"))

    assert response.status == 400
    assert _error_text(response) == "The case with id ZAAK-9 does not exist"
    with sqlite_unit_of_work() as uow:
        case_types = uow.repositories.objects.search(
            EntityType.CASE_TYPE, {"identification": "B333"}
        )
    assert case_types == []


def test_document_for_unknown_case_is_rejected(sqlite_unit_of_work: Factory) -> None:
    response = _handle(sqlite_unit_of_work, document_update(case_identification="ZAAK-9"))

    assert response.status == 400
    assert _error_text(response) == "The case with id ZAAK-9 does not exist"


def test_explicit_kind_overrides_detection(sqlite_unit_of_work: Factory) -> None:
    response = _handle(sqlite_unit_of_work, document_update(), kind="document_response")

    assert response.status == 200
    assert decode_envelope(response.body).root == "Bv03Bericht"


def test_unsupported_message_raises(sqlite_unit_of_work: Factory) -> None:
    raw = ENVELOPE.format(body="<ZKN:zakLv01/>")

    with pytest.raises(EnvelopeError, match="zakLv01"):
        _handle(sqlite_unit_of_work, raw)


def test_concurrent_registrations_create_one_case(tmp_path: Path) -> None:
    engine = create_engine(
        f"sqlite+pysqlite:///{tmp_path / 'cases.db'}",
        connect_args={"check_same_thread": False},
    )
    startup(engine=engine, force=True)
    locks = NaturalKeyLocks()
    statuses: list[int] = []

    class UnitOfWork(SqlAlchemyGatewayUnitOfWork):
        committing = threading.Event()

        def commit(self) -> None:
            # the first commit stalls so the second message arrives while it is pending
            if not self.committing.is_set():
                self.committing.set()
                time.sleep(0.3)
            super().commit()

    def register() -> None:
        response = handle_message(
            case_identification_request("Z1"),
            unit_of_work_factory=UnitOfWork,
            config=CONFIG,
            locks=locks,
        )
        statuses.append(response.status)

    try:
        first = threading.Thread(target=register)
        first.start()
        assert UnitOfWork.committing.wait(5)
        second = threading.Thread(target=register)
        second.start()
        first.join()
        second.join()

        assert sorted(statuses) == [200, 400]
        with UnitOfWork() as uow:
            cases = uow.repositories.objects.search(EntityType.CASE, {"identification": "Z1"})
        assert len(cases) == 1
    finally:
        shutdown()
