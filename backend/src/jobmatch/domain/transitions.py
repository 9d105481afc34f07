"""
Application Status Transitions
Closed transition table for application review states
"""
from typing import Dict, FrozenSet

from .enums import ApplicationStatus


TERMINAL_STATUSES: FrozenSet[ApplicationStatus] = frozenset({
    ApplicationStatus.HIRED,
    ApplicationStatus.REJECTED,
    ApplicationStatus.WITHDRAWN,
})

ACTIVE_STATUSES: FrozenSet[ApplicationStatus] = frozenset(
    status for status in ApplicationStatus if status not in TERMINAL_STATUSES
)

# Transitions reachable through a generic status change.
# WITHDRAWN is never a target here; only the withdraw use-case sets it.
TRANSITIONS: Dict[ApplicationStatus, FrozenSet[ApplicationStatus]] = {
    ApplicationStatus.PENDING: frozenset({ApplicationStatus.REVIEWING, ApplicationStatus.REJECTED}),
    ApplicationStatus.REVIEWING: frozenset({ApplicationStatus.INTERVIEWED, ApplicationStatus.REJECTED}),
    ApplicationStatus.INTERVIEWED: frozenset({ApplicationStatus.OFFERED, ApplicationStatus.REJECTED}),
    ApplicationStatus.OFFERED: frozenset({ApplicationStatus.HIRED, ApplicationStatus.REJECTED}),
    ApplicationStatus.HIRED: frozenset(),
    ApplicationStatus.REJECTED: frozenset(),
    ApplicationStatus.WITHDRAWN: frozenset(),
}


def is_terminal(status: ApplicationStatus) -> bool:
    """Check if no further transition is possible from status"""
    return status in TERMINAL_STATUSES


def can_transition(current: ApplicationStatus, requested: ApplicationStatus) -> bool:
    """Check if a generic status change from current to requested is allowed"""
    return requested in TRANSITIONS[current]


def can_withdraw(current: ApplicationStatus) -> bool:
    """Check if the withdraw use-case may move an application out of current"""
    return current in ACTIVE_STATUSES


def allowed_sources(requested: ApplicationStatus) -> FrozenSet[ApplicationStatus]:
    """All statuses from which a generic change to requested is allowed"""
    return frozenset(
        current for current, targets in TRANSITIONS.items() if requested in targets
    )
