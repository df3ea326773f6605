# accounting/services/store.py

"""
======================================================
PATH: accounting/services/store.py
======================================================
LEDGER STORE HANDLE

An explicitly constructed handle over one Django database alias.
Registries and the voucher engine receive it in their constructor;
nothing in the services reaches for a process-wide connection.

Responsibilities:
- atomic(): the single transaction boundary for a unit of work
- objects(Model): manager bound to this alias
- statement timeout propagation (PostgreSQL only)
- storage_errors(): turn unclassified DatabaseError into UnexpectedLedgerError
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Callable, Iterator

from django.conf import settings
from django.db import DEFAULT_DB_ALIAS, DatabaseError, IntegrityError, connections, transaction

from accounting.services.exceptions import AccountingServiceError, UnexpectedLedgerError

logger = logging.getLogger(__name__)


class LedgerStore:
    def __init__(self, using: str = DEFAULT_DB_ALIAS, *, statement_timeout_ms: int | None = None):
        self.using = using
        self.statement_timeout_ms = statement_timeout_ms or None

    @classmethod
    def from_settings(cls, using: str = DEFAULT_DB_ALIAS) -> "LedgerStore":
        return cls(
            using,
            statement_timeout_ms=getattr(settings, "LEDGER_STATEMENT_TIMEOUT_MS", 0),
        )

    def __repr__(self):
        return f"LedgerStore(using={self.using!r}, statement_timeout_ms={self.statement_timeout_ms!r})"

    def with_timeout(self, statement_timeout_ms: int | None) -> "LedgerStore":
        """Same alias, different per-transaction deadline."""
        return LedgerStore(self.using, statement_timeout_ms=statement_timeout_ms)

    def objects(self, model):
        return model._default_manager.db_manager(self.using)

    @contextmanager
    def atomic(self) -> Iterator[None]:
        with transaction.atomic(using=self.using):
            self._apply_statement_timeout()
            yield

    def _apply_statement_timeout(self) -> None:
        if not self.statement_timeout_ms:
            return

        connection = connections[self.using]
        if connection.vendor != "postgresql":
            logger.debug(
                "Statement timeout not enforced on this backend",
                extra={"vendor": connection.vendor, "using": self.using},
            )
            return

        with connection.cursor() as cursor:
            # SET LOCAL does not accept bind parameters
            cursor.execute(f"SET LOCAL statement_timeout = {int(self.statement_timeout_ms)}")


@contextmanager
def storage_errors(
    action: str,
    *,
    on_integrity_error: Callable[[IntegrityError], None] | None = None,
    **context,
) -> Iterator[None]:
    """
    Wrap a unit of work so that only domain errors and UnexpectedLedgerError
    escape.

    on_integrity_error gets a chance to re-classify a constraint violation
    (e.g. a unique-number race) by raising a domain error. It runs after
    the failed transaction has been rolled back.
    """
    try:
        yield
    except AccountingServiceError as exc:
        logger.info(f"Rejected while {action}", extra={**context, "error_code": exc.code})
        raise
    except IntegrityError as exc:
        if on_integrity_error is not None:
            try:
                on_integrity_error(exc)
            except AccountingServiceError as reclassified:
                logger.info(f"Rejected while {action}", extra={**context, "error_code": reclassified.code})
                raise
            except DatabaseError:
                logger.exception(f"Re-classifying integrity failure failed while {action}", extra=context)
                raise UnexpectedLedgerError() from exc
        logger.exception(f"Integrity failure while {action}", extra=context)
        raise UnexpectedLedgerError() from exc
    except DatabaseError as exc:
        logger.exception(f"Unexpected storage failure while {action}", extra=context)
        raise UnexpectedLedgerError() from exc
