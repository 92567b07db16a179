"""Quote lifecycle state machine."""

from .lifecycle import (
    TRANSITIONS,
    Trigger,
    apply_ledger_change,
    approve,
    ensure_quote,
    mark_invoiced,
    next_status,
    require_reviewer,
)

__all__ = [
    'TRANSITIONS',
    'Trigger',
    'apply_ledger_change',
    'approve',
    'ensure_quote',
    'mark_invoiced',
    'next_status',
    'require_reviewer',
]
