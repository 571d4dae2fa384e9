# ABOUTME: Recorded compensating actions for multi-step store operations.
# ABOUTME: Undo actions run newest-first if the operation fails, and are dropped on success.

import logging
from collections.abc import Callable
from dataclasses import dataclass
from types import TracebackType

logger = logging.getLogger(__name__)


@dataclass
class UndoAction:
    """One compensating step, e.g. deleting a file that was just created."""

    description: str
    action: Callable[[], None]


class UndoLog:
    """Two-phase commit helper for operations that touch several files.

    Each step that leaves something behind records how to take it back.
    Used as a context manager: leaving the block normally commits (the
    recorded actions are discarded); leaving it with an exception rolls back
    by running the actions newest-first. Rollback is best effort: an OSError
    from an undo action is logged and the original exception still
    propagates.

    Example:
        with UndoLog() as undo:
            shutil.copyfile(source, dest)
            undo.record(f"delete {dest}", dest.unlink)
            index.save(index_path)
    """

    def __init__(self) -> None:
        self._actions: list[UndoAction] = []
        self.rollback_failures: list[tuple[UndoAction, OSError]] = []

    @property
    def pending(self) -> list[UndoAction]:
        """Actions that would run if the operation failed now."""
        return list(self._actions)

    def record(self, description: str, action: Callable[[], None]) -> None:
        self._actions.append(UndoAction(description, action))

    def commit(self) -> None:
        """Keep all changes; nothing will be undone."""
        self._actions.clear()

    def rollback(self) -> None:
        """Run recorded actions newest-first, collecting their OSErrors."""
        while self._actions:
            undo = self._actions.pop()
            logger.info("Rolling back: %s", undo.description)
            try:
                undo.action()
            except OSError as exc:
                logger.warning("Rollback step failed (%s): %s", undo.description, exc)
                self.rollback_failures.append((undo, exc))

    def __enter__(self) -> "UndoLog":
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        if exc_type is None:
            self.commit()
        else:
            self.rollback()
