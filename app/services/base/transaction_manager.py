"""
Transaction manager utilities for service layer operations.
"""

from contextlib import contextmanager
from dataclasses import dataclass, field
from datetime import datetime
from typing import Iterator, Optional
from uuid import uuid4

from sqlalchemy.orm import Session

from app.config.logging import get_logger
from app.utils.datetime_utils import utcnow


@dataclass
class TransactionContext:
    """Context information for a transaction."""

    transaction_id: str = field(default_factory=lambda: str(uuid4()))
    started_at: datetime = field(default_factory=utcnow)
    committed: bool = False
    rolled_back: bool = False
    completed_at: Optional[datetime] = None
    error: Optional[Exception] = None

    @property
    def duration_ms(self) -> Optional[float]:
        """Get transaction duration in milliseconds."""
        if self.completed_at:
            delta = self.completed_at - self.started_at
            return delta.total_seconds() * 1000
        return None


class TransactionManager:
    """
    Commit/rollback bracket around a unit of work on one session.

    Everything executed inside ``start()`` is committed together or rolled
    back together; the exception that caused a rollback is re-raised.
    """

    def __init__(self, db_session: Session):
        self.db = db_session
        self._logger = get_logger(self.__class__.__name__)

    @contextmanager
    def start(
        self,
        auto_commit: bool = True,
        isolation_level: Optional[str] = None,
    ) -> Iterator[TransactionContext]:
        """
        Start a new transaction.

        Args:
            auto_commit: Automatically commit on success
            isolation_level: Transaction isolation level

        Yields:
            TransactionContext instance

        Example:
            with transaction_manager.start() as ctx:
                # perform operations
                # automatic commit on success, rollback on exception
        """
        ctx = TransactionContext()

        if isolation_level:
            self.db.connection(execution_options={"isolation_level": isolation_level})

        self._logger.debug(
            f"Transaction started: {ctx.transaction_id}",
            extra={"transaction_id": ctx.transaction_id, "isolation_level": isolation_level},
        )

        try:
            yield ctx

            if auto_commit and not ctx.rolled_back:
                self.commit(ctx)

        except Exception as exc:
            ctx.error = exc
            if not ctx.rolled_back:
                self.rollback(ctx)
            raise

        finally:
            ctx.completed_at = utcnow()
            self._logger.debug(
                f"Transaction completed: {ctx.transaction_id} "
                f"({'committed' if ctx.committed else 'rolled back'}) "
                f"in {ctx.duration_ms:.2f}ms",
                extra={"transaction_id": ctx.transaction_id},
            )

    def commit(self, ctx: TransactionContext) -> None:
        """Commit the current transaction; a failed commit is rolled back and re-raised."""
        try:
            self.db.commit()
            ctx.committed = True
        except Exception as e:
            self._logger.error(f"Commit failed: {e}", exc_info=True)
            self.rollback(ctx)
            raise

    def rollback(self, ctx: TransactionContext) -> None:
        """Rollback the current transaction, logging rollback errors."""
        try:
            self.db.rollback()
        except Exception as e:
            # Rollback errors must not mask the original error
            self._logger.warning(f"Rollback failed: {e}")
        ctx.rolled_back = True
