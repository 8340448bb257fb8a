"""
Application Status Lifecycle

Pure helpers for the admissions pipeline status:
- membership checks for the closed status set
- display labels and badge keys
- linear progress percentage for the UI
- the transition table enforced by the repository

Nothing here performs I/O. Lookups accept raw strings as well as
ApplicationStatus members and never raise for unknown input.
"""

import enum
from dataclasses import dataclass


class ApplicationStatus(str, enum.Enum):
    """Status of a study-abroad application."""

    DRAFT = "draft"
    SUBMITTED = "submitted"
    SCREENING = "screening"
    CONDITIONAL_OFFER = "conditional_offer"
    UNCONDITIONAL_OFFER = "unconditional_offer"
    CAS_LOA = "cas_loa"
    VISA = "visa"
    ENROLLED = "enrolled"
    WITHDRAWN = "withdrawn"
    REJECTED = "rejected"
    DEFERRED = "deferred"


STATUS_LABELS: dict[ApplicationStatus, str] = {
    ApplicationStatus.DRAFT: "Draft",
    ApplicationStatus.SUBMITTED: "Submitted",
    ApplicationStatus.SCREENING: "Under Review",
    ApplicationStatus.CONDITIONAL_OFFER: "Conditional Offer",
    ApplicationStatus.UNCONDITIONAL_OFFER: "Unconditional Offer",
    ApplicationStatus.CAS_LOA: "CAS / LOA Issued",
    ApplicationStatus.VISA: "Visa Stage",
    ApplicationStatus.ENROLLED: "Enrolled",
    ApplicationStatus.WITHDRAWN: "Withdrawn",
    ApplicationStatus.REJECTED: "Rejected",
    ApplicationStatus.DEFERRED: "Deferred",
}

# Terminal failures deliberately report 0, same as a fresh draft.
STATUS_PROGRESS: dict[ApplicationStatus, int] = {
    ApplicationStatus.DRAFT: 0,
    ApplicationStatus.SUBMITTED: 15,
    ApplicationStatus.SCREENING: 30,
    ApplicationStatus.CONDITIONAL_OFFER: 50,
    ApplicationStatus.UNCONDITIONAL_OFFER: 65,
    ApplicationStatus.CAS_LOA: 75,
    ApplicationStatus.VISA: 85,
    ApplicationStatus.ENROLLED: 100,
    ApplicationStatus.WITHDRAWN: 0,
    ApplicationStatus.REJECTED: 0,
    ApplicationStatus.DEFERRED: 0,
}

UNKNOWN_BADGE = "unknown"

STATUS_BADGES: dict[ApplicationStatus, str] = {
    ApplicationStatus.DRAFT: "draft",
    ApplicationStatus.SUBMITTED: "submitted",
    ApplicationStatus.SCREENING: "screening",
    ApplicationStatus.CONDITIONAL_OFFER: "conditional",
    ApplicationStatus.UNCONDITIONAL_OFFER: "unconditional",
    ApplicationStatus.CAS_LOA: "unconditional",
    ApplicationStatus.VISA: "submitted",
    ApplicationStatus.ENROLLED: "enrolled",
    ApplicationStatus.WITHDRAWN: "withdrawn",
    ApplicationStatus.REJECTED: "withdrawn",
    ApplicationStatus.DEFERRED: "deferred",
}

# Statuses a university reviewer may pick; draft and deferred are not offered.
REVIEW_STATUS_OPTIONS: tuple[ApplicationStatus, ...] = (
    ApplicationStatus.SUBMITTED,
    ApplicationStatus.SCREENING,
    ApplicationStatus.CONDITIONAL_OFFER,
    ApplicationStatus.UNCONDITIONAL_OFFER,
    ApplicationStatus.CAS_LOA,
    ApplicationStatus.VISA,
    ApplicationStatus.ENROLLED,
    ApplicationStatus.WITHDRAWN,
    ApplicationStatus.REJECTED,
)

TERMINAL_STATUSES = frozenset(
    {
        ApplicationStatus.ENROLLED,
        ApplicationStatus.WITHDRAWN,
        ApplicationStatus.REJECTED,
        ApplicationStatus.DEFERRED,
    }
)

_EXIT_STATUSES = {ApplicationStatus.WITHDRAWN, ApplicationStatus.DEFERRED}

VALID_STATUS_TRANSITIONS: dict[ApplicationStatus, set[ApplicationStatus]] = {
    ApplicationStatus.DRAFT: {
        ApplicationStatus.SUBMITTED,
        ApplicationStatus.WITHDRAWN,
    },
    ApplicationStatus.SUBMITTED: {
        ApplicationStatus.SCREENING,
        ApplicationStatus.REJECTED,
        *_EXIT_STATUSES,
    },
    ApplicationStatus.SCREENING: {
        ApplicationStatus.CONDITIONAL_OFFER,
        ApplicationStatus.UNCONDITIONAL_OFFER,
        ApplicationStatus.REJECTED,
        *_EXIT_STATUSES,
    },
    ApplicationStatus.CONDITIONAL_OFFER: {
        ApplicationStatus.UNCONDITIONAL_OFFER,  # conditions met
        ApplicationStatus.REJECTED,  # conditions not met
        *_EXIT_STATUSES,
    },
    ApplicationStatus.UNCONDITIONAL_OFFER: {
        ApplicationStatus.CAS_LOA,
        *_EXIT_STATUSES,
    },
    ApplicationStatus.CAS_LOA: {
        ApplicationStatus.VISA,
        *_EXIT_STATUSES,
    },
    ApplicationStatus.VISA: {
        ApplicationStatus.ENROLLED,
        ApplicationStatus.REJECTED,  # visa refused
        *_EXIT_STATUSES,
    },
    # Terminal states - no transitions allowed
    ApplicationStatus.ENROLLED: set(),
    ApplicationStatus.WITHDRAWN: set(),
    ApplicationStatus.REJECTED: set(),
    ApplicationStatus.DEFERRED: set(),
}


@dataclass(frozen=True)
class KnownStatus:
    status: ApplicationStatus


@dataclass(frozen=True)
class UnknownStatus:
    raw: str


StatusVariant = KnownStatus | UnknownStatus


class InvalidStatusTransitionError(ValueError):
    """Raised when a status change is not allowed by VALID_STATUS_TRANSITIONS."""

    def __init__(
        self,
        current_status: ApplicationStatus,
        new_status: ApplicationStatus,
    ):
        self.current_status = current_status
        self.new_status = new_status
        valid_transitions = sorted(s.value for s in allowed_transitions(current_status))
        super().__init__(
            f"Invalid status transition: {current_status.value} -> {new_status.value}. "
            f"Valid transitions: {valid_transitions}"
        )


def parse_status(value: str | ApplicationStatus) -> StatusVariant:
    """Classify a raw status value as known or unknown."""
    if isinstance(value, ApplicationStatus):
        return KnownStatus(value)
    try:
        return KnownStatus(ApplicationStatus(value))
    except ValueError:
        return UnknownStatus(str(value))


def is_application_status(value: str) -> bool:
    return isinstance(parse_status(value), KnownStatus)


def is_review_status_option(value: str) -> bool:
    variant = parse_status(value)
    return isinstance(variant, KnownStatus) and variant.status in REVIEW_STATUS_OPTIONS


def get_status_label(status: str | ApplicationStatus) -> str:
    """Display label for a status; unknown values are returned unchanged."""
    variant = parse_status(status)
    if isinstance(variant, KnownStatus):
        return STATUS_LABELS[variant.status]
    return variant.raw


def get_status_progress(status: str | ApplicationStatus) -> int:
    """Progress percentage (0-100) for a status; unknown values yield 0."""
    variant = parse_status(status)
    if isinstance(variant, KnownStatus):
        return STATUS_PROGRESS[variant.status]
    return 0


def get_status_badge(status: str | ApplicationStatus) -> str:
    variant = parse_status(status)
    if isinstance(variant, KnownStatus):
        return STATUS_BADGES[variant.status]
    return UNKNOWN_BADGE


def is_terminal(status: ApplicationStatus) -> bool:
    return status in TERMINAL_STATUSES


def allowed_transitions(status: ApplicationStatus) -> set[ApplicationStatus]:
    return VALID_STATUS_TRANSITIONS.get(status, set())


def can_transition(current: ApplicationStatus, new: ApplicationStatus) -> bool:
    """Re-setting the current status is always allowed (no-op)."""
    return new == current or new in allowed_transitions(current)


def validate_transition(current: ApplicationStatus, new: ApplicationStatus) -> None:
    """
    Raises:
        InvalidStatusTransitionError: If current -> new is not allowed
    """
    if not can_transition(current, new):
        raise InvalidStatusTransitionError(current, new)
