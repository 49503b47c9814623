"""Event selection and reconciliation."""

from calmirror.sync.gateway import CalendarGateway, CalendarNotFoundError
from calmirror.sync.policy import exclusion_reason, is_excluded
from calmirror.sync.reconciler import reconcile
from calmirror.sync.window import compute_window

__all__ = [
    "CalendarGateway",
    "CalendarNotFoundError",
    "compute_window",
    "exclusion_reason",
    "is_excluded",
    "reconcile",
]
