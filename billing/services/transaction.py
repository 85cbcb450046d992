"""Transaction boundary for multi-row billing operations.

A callback receives one Session and runs inside one database transaction at
the requested isolation level. Every read and write of the callback goes
through that session, so the whole unit of work commits or rolls back as one.
"""

import logging
from typing import Callable, TypeVar

from sqlalchemy.exc import DBAPIError, IntegrityError
from sqlalchemy.orm import Session, sessionmaker

logger = logging.getLogger(__name__)

T = TypeVar("T")

SERIALIZABLE = "SERIALIZABLE"

# serialization_failure, deadlock_detected
RETRYABLE_SQLSTATES = {"40001", "40P01"}

UNIQUE_VIOLATION_SQLSTATE = "23505"
SQLITE_UNIQUE_VIOLATION = "UNIQUE constraint failed"


def is_retryable_conflict(error: DBAPIError) -> bool:
    """Tell whether a database error comes from a concurrent transaction.

    A unique-constraint violation means a concurrent run inserted the same
    row first; retrying sees that row and skips it. Other integrity errors
    (foreign key, NOT NULL, CHECK) fail the same way on every attempt.
    """
    orig = getattr(error, "orig", None)
    sqlstate = getattr(orig, "pgcode", None) or getattr(orig, "sqlstate", None)
    if isinstance(error, IntegrityError):
        return sqlstate == UNIQUE_VIOLATION_SQLSTATE or SQLITE_UNIQUE_VIOLATION in str(orig)
    return sqlstate in RETRYABLE_SQLSTATES


class TransactionManager:
    """Runs callbacks inside a single transaction, retrying on conflicts."""

    def __init__(self, session_factory: sessionmaker[Session], max_retries: int = 0):
        """Initialize with a session factory.

        Args:
            session_factory: Factory producing sessions bound to the engine
            max_retries: Extra attempts after a serialization conflict
        """
        self.session_factory = session_factory
        self.max_retries = max_retries

    def run(self, callback: Callable[[Session], T], isolation_level: str | None = SERIALIZABLE) -> T:
        """Execute callback(session) in one transaction and commit.

        Args:
            callback: Unit of work; must use only the session it receives
            isolation_level: Isolation level for this transaction (None keeps default)

        Returns:
            The callback's return value, after commit

        Raises:
            Whatever the callback raises, after rollback. Conflicts are
            re-raised once max_retries is exhausted.
        """
        attempt = 0
        while True:
            try:
                with self.session_factory() as session:
                    with session.begin():
                        if isolation_level:
                            session.connection(execution_options={"isolation_level": isolation_level})
                        return callback(session)
            except DBAPIError as e:
                if attempt >= self.max_retries or not is_retryable_conflict(e):
                    raise
                attempt += 1
                logger.warning(
                    "Transaction conflict, retrying (%d/%d): %s",
                    attempt,
                    self.max_retries,
                    e.__class__.__name__,
                )


__all__ = ["TransactionManager", "SERIALIZABLE", "is_retryable_conflict"]
