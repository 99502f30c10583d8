from .states import (
    ACTIVE_STATUSES,
    ItemStatus,
    InvalidStatus,
    Method,
    OrderStatus,
    Stage,
    stage_of,
)
from .transitions import TransitionResult, next_status, check_weighable, weighed_status
from .classifier import BranchQueues, classify_branch
from .notifications import NotificationDraft, confirmation_for, notification_for

__all__ = [
    "ACTIVE_STATUSES",
    "ItemStatus",
    "InvalidStatus",
    "Method",
    "OrderStatus",
    "Stage",
    "stage_of",
    "TransitionResult",
    "next_status",
    "check_weighable",
    "weighed_status",
    "BranchQueues",
    "classify_branch",
    "NotificationDraft",
    "confirmation_for",
    "notification_for",
]
