"""Feedback store backends.

MemoryFeedbackStore keeps records in process memory; SQLiteFeedbackStore
persists them to ``data/feedback.db``; RedisRestFeedbackStore keeps them as
a JSON blob in Upstash Redis.  FallbackFeedbackStore puts a network or disk
backend in front of a memory tier that serves requests while the backend
is unreachable.
"""

from feedpulse.providers.store.factory import build_feedback_store
from feedpulse.providers.store.fallback_store import FallbackFeedbackStore
from feedpulse.providers.store.memory_store import MemoryFeedbackStore
from feedpulse.providers.store.redis_rest_store import RedisRestFeedbackStore
from feedpulse.providers.store.sqlite_store import SQLiteFeedbackStore

__all__ = [
    "FallbackFeedbackStore",
    "MemoryFeedbackStore",
    "RedisRestFeedbackStore",
    "SQLiteFeedbackStore",
    "build_feedback_store",
]
