"""Gateway behaviour configuration values."""

from __future__ import annotations

import os
from dataclasses import dataclass, field

from casebridge.domain.reconciliation import (
    DEFAULT_FILE_CASE_TYPES,
    DownloadEndpoint,
    LinkPolicy,
    NestedAmbiguityPolicy,
    ReconciliationPolicy,
)

from .env import env_list, require_env_var
from .errors import ConfigurationError

DEFAULT_DOWNLOAD_PATH = "documenten/enkelvoudiginformatieobjecten/{id}/download"
DEFAULT_SENDER = "casebridge"
APP_URL_VAR = "CASEBRIDGE_APP_URL"


@dataclass(frozen=True, slots=True)
class GatewayConfig:
    """Holds settings for reconciliation policies and document files."""

    app_url: str | None = None
    download_path: str = DEFAULT_DOWNLOAD_PATH
    file_case_types: frozenset[str] = DEFAULT_FILE_CASE_TYPES
    policy: ReconciliationPolicy = field(default_factory=ReconciliationPolicy)
    sender: str = DEFAULT_SENDER

    def download_endpoint(self) -> DownloadEndpoint:
        """Retrieval URL template for stored files.

        Raises ``MissingConfigurationError`` when no app URL is configured; only
        documents of the file case types need one.
        """
        app_url = self.app_url if self.app_url is not None else require_env_var(APP_URL_VAR)
        return DownloadEndpoint.from_template(app_url, self.download_path)


def get_gateway_config() -> GatewayConfig:
    app_url = os.getenv(APP_URL_VAR)
    return GatewayConfig(
        app_url=app_url if app_url and app_url.strip() else None,
        download_path=os.getenv("CASEBRIDGE_DOWNLOAD_PATH") or DEFAULT_DOWNLOAD_PATH,
        file_case_types=frozenset(
            env_list("CASEBRIDGE_FILE_CASE_TYPES", sorted(DEFAULT_FILE_CASE_TYPES))
        ),
        policy=ReconciliationPolicy(
            nested_ambiguity=_parse_choice(
                "CASEBRIDGE_NESTED_AMBIGUITY",
                NestedAmbiguityPolicy,
                NestedAmbiguityPolicy.SKIP,
            ),
            link_policy=_parse_choice("CASEBRIDGE_LINK_POLICY", LinkPolicy, LinkPolicy.APPEND),
        ),
        sender=os.getenv("CASEBRIDGE_SENDER") or DEFAULT_SENDER,
    )


def _parse_choice[TChoice: (NestedAmbiguityPolicy, LinkPolicy)](
    name: str,
    choices: type[TChoice],
    default: TChoice,
) -> TChoice:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return choices(raw.strip().lower())
    except ValueError as exc:
        allowed = ", ".join(choice.value for choice in choices)
        raise ConfigurationError(f"Invalid value for {name}: {raw!r} (expected {allowed})") from exc
