"""Audit logging package."""

from recordkeeper.audit.logger import AuditLogger, configure_logging

__all__ = ["AuditLogger", "configure_logging"]
