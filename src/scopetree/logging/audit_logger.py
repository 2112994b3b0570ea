"""
Structured audit logging for scope decisions.

Design principles:
- Authorization decisions are audit records, not debug prints
- Never log raw grant sets in full, only sizes and the scopes involved
- Rejected hierarchies are logged with the offending key and prefix
- Structured JSON format for automated analysis
"""

import functools
import logging
from enum import Enum
from typing import Any, Optional

import structlog

from scopetree import config


class AbuseClass(str, Enum):
    """Abuse classification for audit events."""
    BENIGN = "BENIGN"
    MALFORMED = "MALFORMED"
    ESCALATION_ATTEMPT = "ESCALATION_ATTEMPT"


def _sanitize_for_log(value: Any, max_length: Optional[int] = None) -> str:
    """
    Sanitize value for safe logging.
    Prevents log injection and limits size.
    """
    if value is None:
        return "<none>"

    if max_length is None:
        max_length = config.LOG_MAX_FIELD_LENGTH

    s = str(value)
    # Newlines and control chars would break line-oriented log parsing
    s = "".join(c if c.isprintable() and c not in "\n\r\t" else "?" for c in s)

    if len(s) > max_length:
        return s[:max_length] + "...<truncated>"
    return s


class AuditLogger:
    """
    Structured audit logger for scope validation and authorization.

    Output is one JSON object per line, suitable for SIEM ingestion.
    """

    def __init__(self) -> None:
        renderer = (
            structlog.dev.ConsoleRenderer()
            if config.LOG_FORMAT == "console"
            else structlog.processors.JSONRenderer()
        )
        structlog.configure(
            processors=[
                structlog.stdlib.add_log_level,
                structlog.processors.TimeStamper(fmt="iso"),
                renderer,
            ],
            wrapper_class=structlog.make_filtering_bound_logger(
                logging.getLevelName(config.LOG_LEVEL)
            ),
            context_class=dict,
            logger_factory=structlog.PrintLoggerFactory(),
            cache_logger_on_first_use=True,
        )
        self._logger = structlog.get_logger("scopetree")

    def _log(
        self,
        level: str,
        event: str,
        abuse_class: AbuseClass = AbuseClass.BENIGN,
        **kwargs: Any,
    ) -> None:
        """Internal logging with abuse classification."""
        sanitized = {
            k: _sanitize_for_log(v) if isinstance(v, str) else v
            for k, v in kwargs.items()
        }

        log_method = getattr(self._logger, level)
        log_method(
            event,
            abuse_class=abuse_class.value,
            **sanitized,
        )

    # ─── Grammar Events ──────────────────────────────────────────────────

    def log_scope_parsed(self, tree: str, scope: str) -> None:
        """Log a wire string accepted by a grammar."""
        self._log(
            "debug",
            "scope.parsed",
            tree=tree,
            scope=scope,
        )

    def log_hierarchy_rejected(
        self,
        tree: str,
        key: Any,
        path: list[str],
        reason: str = "",
        route: Optional[str] = None,
    ) -> None:
        """Log a path rejected by a grammar: malformed or probing input."""
        self._log(
            "warning",
            "scope.hierarchy_rejected",
            abuse_class=AbuseClass.MALFORMED,
            tree=tree,
            key=str(key),
            path=".".join(path),
            reason=reason or None,
            route=route,
        )

    # ─── Authorization Events ────────────────────────────────────────────

    def log_authorization_success(
        self,
        required_scopes: list[str],
        matched_scopes: list[str],
        mode: str,
    ) -> None:
        """Log successful scope check."""
        self._log(
            "info",
            "authz.success",
            required_scopes=required_scopes,
            matched_scopes=matched_scopes,
            mode=mode,
        )

    def log_authorization_failure(
        self,
        required_scopes: list[str],
        granted_count: int,
        missing_scopes: list[str],
        mode: str,
    ) -> None:
        """Log scope check failure: potential privilege escalation."""
        self._log(
            "warning",
            "authz.failure",
            abuse_class=AbuseClass.ESCALATION_ATTEMPT,
            required_scopes=required_scopes,
            granted_count=granted_count,
            missing_scopes=missing_scopes,
            mode=mode,
        )


# Singleton instance
@functools.lru_cache(maxsize=1)
def get_audit_logger() -> AuditLogger:
    """Get singleton audit logger instance."""
    return AuditLogger()
