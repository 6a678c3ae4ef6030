"""Feed-to-device synchronization."""

from podsync.sync.orchestrator import (
    SubscriptionResult,
    SyncOptions,
    SyncOrchestrator,
    SyncReport,
)

__all__ = ["SubscriptionResult", "SyncOptions", "SyncOrchestrator", "SyncReport"]
