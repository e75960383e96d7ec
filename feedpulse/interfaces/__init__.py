"""Public interface definitions for feedpulse storage backends.

Concrete adapters live in ``feedpulse/providers/store/`` and are selected
at startup by ``build_feedback_store``:

    IFeedbackStore  →  MemoryFeedbackStore, SQLiteFeedbackStore,
                       RedisRestFeedbackStore, FallbackFeedbackStore
"""

from feedpulse.interfaces.feedback_store import IFeedbackStore

__all__ = ["IFeedbackStore"]
