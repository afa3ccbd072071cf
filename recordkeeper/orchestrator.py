"""
Composition Root for Record Keeper

Builds one DomainWorkspace per record domain (notes, expenses, wiki):

    storage backend → PersistenceAdapter → RecordStore → FormController

DESIGN DECISION: Each domain picks its backend from settings. If the
remote store is requested but not configured (no credentials, no
spreadsheet id), that domain falls back to local JSON storage so the app
still starts. The fallback is logged, never silent.
"""

from pathlib import Path
from typing import Optional

import structlog

from recordkeeper.audit import AuditLogger
from recordkeeper.config import get_settings
from recordkeeper.forms import FormController
from recordkeeper.models.schema import SCHEMAS, RecordSchema
from recordkeeper.services.persistence import Notifier, PersistenceAdapter
from recordkeeper.services.storage import (
    GoogleSheetsClient,
    GoogleSheetsRecordStorage,
    LocalJsonRecordStorage,
    RecordStorageInterface,
)
from recordkeeper.store import RecordStore
from recordkeeper.validation import RecordValidator


logger = structlog.get_logger(__name__)


class DomainWorkspace:
    """Everything one domain's page needs, wired together."""

    def __init__(
        self,
        schema: RecordSchema,
        storage: RecordStorageInterface,
        notify: Optional[Notifier] = None,
        audit_logger: Optional[AuditLogger] = None,
        uncategorized_label: Optional[str] = None,
    ):
        self.schema = schema
        self.adapter = PersistenceAdapter(storage, audit_logger, notify)
        self.store = RecordStore(schema)
        self.controller = FormController(
            self.store,
            self.adapter,
            RecordValidator(schema, uncategorized_label),
            notify=notify,
            audit_logger=audit_logger,
        )

    def set_notifier(self, notify: Optional[Notifier]) -> None:
        self.adapter.set_notifier(notify)
        self.controller.set_notifier(notify)

    async def load(self) -> int:
        return await self.store.load(self.adapter)


class Workspace:
    """The three domain workspaces of one app session."""

    def __init__(
        self,
        notes: DomainWorkspace,
        expenses: DomainWorkspace,
        wiki: DomainWorkspace,
    ):
        self.notes = notes
        self.expenses = expenses
        self.wiki = wiki

    @property
    def domains(self) -> dict[str, DomainWorkspace]:
        return {
            "notes": self.notes,
            "expenses": self.expenses,
            "wiki": self.wiki,
        }

    def storage_backends(self) -> dict[str, str]:
        """Storage class actually in use per domain, after any local fallback."""
        return {
            name: type(domain.adapter.storage).__name__
            for name, domain in self.domains.items()
        }

    def set_notifier(self, notify: Optional[Notifier]) -> None:
        for domain in self.domains.values():
            domain.set_notifier(notify)

    async def load_all(self) -> dict[str, int]:
        """Load every domain; a failed load leaves that domain empty."""
        counts = {}
        for name, domain in self.domains.items():
            counts[name] = await domain.load()
        return counts


def create_storage(
    schema: RecordSchema,
    backend: str,
    sheets_client: Optional[GoogleSheetsClient] = None,
) -> RecordStorageInterface:
    """
    Build the storage backend for one domain.

    A remote backend without a sheets client falls back to local storage.
    """
    settings = get_settings()

    if backend == "remote" and sheets_client is not None:
        return GoogleSheetsRecordStorage(
            schema,
            sheets_client,
            sheet_name=sheets_client.settings.sheet_name_for(schema.name),
        )

    if backend == "remote":
        logger.warning("remote_storage_unavailable", domain=schema.name, fallback="local")

    local = settings.local_storage
    return LocalJsonRecordStorage(
        schema,
        Path(local.data_dir),
        storage_key=local.key_for(schema.name),
    )


def create_workspace(
    notify: Optional[Notifier] = None,
    use_remote: bool = True,
) -> Workspace:
    """
    Factory function to create all application components.

    Args:
        notify: User-facing failure channel (e.g. st.error)
        use_remote: Whether to try the Google Sheets store at all.
                    Set to False to run fully on local storage.
    """
    settings = get_settings()
    app_settings = settings.app
    audit_logger = AuditLogger()

    sheets_client = None
    wants_remote = use_remote and any(
        app_settings.backend_for(name) == "remote" for name in SCHEMAS
    )
    if wants_remote:
        try:
            sheets_client = GoogleSheetsClient()
        except Exception as e:
            # Remote store not configured - continue on local storage
            logger.warning("remote_storage_not_configured", error=str(e))
            sheets_client = None

    domains = {
        name: DomainWorkspace(
            schema,
            create_storage(schema, app_settings.backend_for(name), sheets_client),
            notify=notify,
            audit_logger=audit_logger,
            uncategorized_label=app_settings.uncategorized_label,
        )
        for name, schema in SCHEMAS.items()
    }
    return Workspace(**domains)
