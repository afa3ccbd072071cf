"""
Audit Logger

DESIGN DECISION: Every significant action on a record domain is logged.
This provides:
1. Traceability of confirmed writes
2. Diagnostics for load and write failures
3. A history of user decisions

The audit logger:
- Never raises into the caller (a logging failure must not break a save)
- Tags every event with its domain so the three stores can be told apart
"""

import logging
from typing import Optional

import structlog

from recordkeeper.models.audit import AuditEvent, AuditEventBuilder, AuditSeverity


# Configure structlog for local logging
structlog.configure(
    processors=[
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
        structlog.processors.JSONRenderer()
    ],
    wrapper_class=structlog.stdlib.BoundLogger,
    context_class=dict,
    logger_factory=structlog.stdlib.LoggerFactory(),
    cache_logger_on_first_use=True,
)


def configure_logging(level: str = "INFO") -> None:
    """Route structlog output through stdlib logging at the given level."""
    logging.basicConfig(
        format="%(message)s",
        level=getattr(logging, level.upper(), logging.INFO),
    )


class AuditLogger:
    """Central audit logging service for the record domains."""

    def __init__(self):
        self._logger = structlog.get_logger("recordkeeper.audit")

    def log(self, event: AuditEvent) -> bool:
        """
        Log an audit event.

        Returns False if the event could not be written.
        """
        log_dict = event.to_log_dict()
        try:
            if event.severity == AuditSeverity.ERROR:
                self._logger.error("audit_event", **log_dict)
            elif event.severity == AuditSeverity.WARNING:
                self._logger.warning("audit_event", **log_dict)
            else:
                self._logger.info("audit_event", **log_dict)
        except Exception:
            return False
        return True

    def log_records_loaded(self, domain: str, count: int) -> None:
        self.log(AuditEventBuilder.records_loaded(domain, count))

    def log_load_failed(self, domain: str, error_message: str) -> None:
        self.log(AuditEventBuilder.load_failed(domain, error_message))

    def log_record_inserted(self, domain: str, record_id: str, title: str) -> None:
        self.log(AuditEventBuilder.record_inserted(domain, record_id, title))

    def log_record_updated(self, domain: str, record_id: str, title: str) -> None:
        self.log(AuditEventBuilder.record_updated(domain, record_id, title))

    def log_record_deleted(self, domain: str, record_id: str) -> None:
        self.log(AuditEventBuilder.record_deleted(domain, record_id))

    def log_write_failed(
        self,
        domain: str,
        operation: str,
        error_message: str,
        record_id: Optional[str] = None,
    ) -> None:
        self.log(
            AuditEventBuilder.write_failed(domain, operation, error_message, record_id)
        )

    def log_validation_failed(self, domain: str, issues: list[dict]) -> None:
        self.log(AuditEventBuilder.validation_failed(domain, issues))

    def log_delete_declined(self, domain: str, record_id: str) -> None:
        self.log(AuditEventBuilder.delete_declined(domain, record_id))
