from ..models.request import PENDING, APPROVED, REJECTED

ALLOWED_STATUS = {PENDING, APPROVED, REJECTED}
REVIEW_OUTCOMES = {APPROVED, REJECTED}

TRANSITIONS: dict[str, set[str]] = {
    PENDING: {APPROVED, REJECTED},
    APPROVED: set(),
    REJECTED: set(),
}


def can_transition(old: str, new: str) -> bool:
    return new in TRANSITIONS.get(old, set())


def is_terminal(status: str) -> bool:
    return status in ALLOWED_STATUS and not TRANSITIONS.get(status)
