"""Abstract base class for feedback persistence backends.

Defines the contract for storing customer feedback records.  Implementations
may keep records in process memory, in a SQLite table, or as a single JSON
blob in a remote key-value store.  The adapter pattern allows the backend to
be swapped without touching the ingestion or reporting services.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Sequence

from feedpulse.models.feedback import FeedbackRecord, Sentiment


class IFeedbackStore(ABC):
    """Contract for feedback persistence.

    All operations are async to support network-backed stores.  Ids are
    assigned by the store: one more than the highest id ever handed out,
    or 1 for a fresh (or cleared) store.  Ids are never reused after a
    delete.  Implementations raise
    :class:`~feedpulse.utils.errors.BackendUnavailableError` when the
    backing service cannot be reached.
    """

    @abstractmethod
    async def initialize(self) -> None:
        """Prepare the backend (create tables, verify connectivity).  Idempotent."""

    @abstractmethod
    async def list_all(self) -> list[FeedbackRecord]:
        """Return every record, ordered by ascending id.

        Returns an empty list, never ``None``, when the store is empty.
        """

    @abstractmethod
    async def insert(
        self,
        text: str,
        sentiment: Sentiment | None = None,
        confidence: float | None = None,
    ) -> FeedbackRecord:
        """Persist a new record and return it with its assigned id.

        Parameters
        ----------
        text:
            Non-empty feedback text.
        sentiment:
            Classifier label, or ``None`` when unclassified.
        confidence:
            Classifier confidence in [0, 1], or ``None``.
        """

    @abstractmethod
    async def delete_by_id(self, record_id: int) -> bool:
        """Remove the record with *record_id*.

        Returns
        -------
        bool
            ``True`` if a record was removed, ``False`` if none had that id.
        """

    @abstractmethod
    async def clear_all(self) -> None:
        """Remove every record and reset id assignment."""

    @abstractmethod
    async def replace_all(self, records: Sequence[FeedbackRecord]) -> None:
        """Overwrite the whole collection with *records* (ids preserved)."""

    @abstractmethod
    def get_provider_name(self) -> str:
        """Return a human-readable identifier for this store."""
