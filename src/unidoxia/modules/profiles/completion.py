"""
Profile Completion

Percentage of a user's profile that has been filled in.

Five basic fields always count. When role data is supplied, students add five
and agents add four role-specific fields. Every field weighs the same:

    completion = round_half_up(completed / total * 100)

Agents count phone and country twice (once as basic fields and again as
agent fields). Basic fields must be non-blank strings; agent fields only need
to be truthy, so a whitespace-only phone counts for the agent half but not the
basic half.
"""

from collections.abc import Mapping
from dataclasses import dataclass, field
from decimal import ROUND_HALF_UP, Decimal
from typing import Any

BASIC_FIELDS = ("full_name", "email", "phone", "country", "avatar_url")
STUDENT_FIELDS = ("date_of_birth", "nationality", "passport_number", "address", "education_history")
AGENT_FIELDS = ("company_name", "verification_document_url")
# Taken from the base profile, not the agent record
AGENT_PROFILE_FIELDS = ("phone", "country")

ROLE_STUDENT = "student"
ROLE_AGENT = "agent"


@dataclass(frozen=True)
class ProfileCompletion:
    percentage: int
    completed_fields: int
    total_fields: int
    missing_fields: list[str] = field(default_factory=list)


def _has_text(value: Any) -> bool:
    return isinstance(value, str) and value.strip() != ""


def _is_filled(value: Any) -> bool:
    """Non-blank string, non-empty mapping or sequence, otherwise truthy."""
    if isinstance(value, str):
        return value.strip() != ""
    if isinstance(value, (Mapping, list, tuple)):
        return len(value) > 0
    return bool(value)


def _percentage(completed: int, total: int) -> int:
    if total == 0:
        return 0
    ratio = Decimal(completed) * 100 / Decimal(total)
    return int(ratio.quantize(Decimal(1), rounding=ROUND_HALF_UP))


def calculate_profile_completion(
    profile: Mapping[str, Any],
    role: str | None = None,
    role_data: Mapping[str, Any] | None = None,
) -> ProfileCompletion:
    """
    Args:
        profile: Base profile fields (full_name, email, phone, country, avatar_url)
        role: 'student' or 'agent'; anything else adds no role fields
        role_data: The student or agent record. Role fields only count when
            this is provided (an empty mapping counts as provided).

    Returns:
        ProfileCompletion with the rounded percentage and the missing field names
    """
    checks: list[tuple[str, bool]] = [
        (name, _has_text(profile.get(name))) for name in BASIC_FIELDS
    ]

    if role == ROLE_STUDENT and role_data is not None:
        checks += [
            (f"student.{name}", _is_filled(role_data.get(name))) for name in STUDENT_FIELDS
        ]
    elif role == ROLE_AGENT and role_data is not None:
        checks += [(f"agent.{name}", bool(role_data.get(name))) for name in AGENT_FIELDS]
        checks += [(f"agent.{name}", bool(profile.get(name))) for name in AGENT_PROFILE_FIELDS]

    completed = sum(1 for _, done in checks if done)
    return ProfileCompletion(
        percentage=_percentage(completed, len(checks)),
        completed_fields=completed,
        total_fields=len(checks),
        missing_fields=[name for name, done in checks if not done],
    )
