"""
Application Categorization

Tags an application by study level, entry route, destination geography and
a heuristic risk band. Used by reviewers to triage their queue.
"""

import enum
from dataclasses import dataclass
from datetime import UTC, datetime

# Base score before status, agent, document and activity adjustments
BASE_RISK_SCORE = 30
HIGH_RISK_THRESHOLD = 70
MEDIUM_RISK_THRESHOLD = 40


class LevelTag(str, enum.Enum):
    UG = "UG"
    PG = "PG"
    PHD = "PhD"


class RouteTag(str, enum.Enum):
    DIRECT = "Direct"
    FOUNDATION = "Foundation"
    TOP_UP = "Top-up"


class GeographyTag(str, enum.Enum):
    UK = "UK"
    EU = "EU"
    CANADA = "Canada"
    US = "US"
    AUSTRALIA = "Australia"


class RiskBand(str, enum.Enum):
    LOW = "Low"
    MEDIUM = "Medium"
    HIGH = "High"


EU_COUNTRIES = frozenset(
    {
        "austria",
        "belgium",
        "bulgaria",
        "croatia",
        "cyprus",
        "czech republic",
        "czechia",
        "denmark",
        "estonia",
        "finland",
        "france",
        "germany",
        "greece",
        "hungary",
        "ireland",
        "italy",
        "latvia",
        "lithuania",
        "luxembourg",
        "malta",
        "netherlands",
        "poland",
        "portugal",
        "romania",
        "slovakia",
        "slovenia",
        "spain",
        "sweden",
    }
)

_UK_NAMES = {"uk", "england", "scotland", "wales", "northern ireland"}


@dataclass(frozen=True)
class CategorizationInput:
    program_level: str | None = None
    program_name: str | None = None
    university_country: str | None = None
    student_nationality: str | None = None
    student_current_country: str | None = None
    status: str | None = None
    created_at: datetime | None = None
    last_updated_at: datetime | None = None
    last_document_at: datetime | None = None
    documents_count: int | None = None
    agent_id: str | None = None


@dataclass(frozen=True)
class ApplicationCategorization:
    level: LevelTag
    route: RouteTag
    geography: GeographyTag
    risk_band: RiskBand
    risk_score: int

    @property
    def tags(self) -> list[str]:
        return [self.level.value, self.route.value, self.geography.value, self.risk_band.value]


def _normalize(value: str | None) -> str:
    return value.strip().lower() if value else ""


def infer_level(program_level: str | None) -> LevelTag:
    level = _normalize(program_level)

    if "phd" in level or "doctor" in level:
        return LevelTag.PHD
    # "undergraduate" contains "graduate"
    if "undergraduate" in level:
        return LevelTag.UG
    if "master" in level or "post" in level or "graduate" in level:
        return LevelTag.PG
    return LevelTag.UG


def infer_route(program_level: str | None, program_name: str | None) -> RouteTag:
    source = f"{_normalize(program_level)} {_normalize(program_name)}"

    if any(word in source for word in ("foundation", "pathway", "preparatory")):
        return RouteTag.FOUNDATION
    if any(word in source for word in ("top-up", "top up", "topup")):
        return RouteTag.TOP_UP
    return RouteTag.DIRECT


def geography_from_country(country: str | None) -> GeographyTag | None:
    value = _normalize(country)
    if not value:
        return None

    if "united kingdom" in value or value in _UK_NAMES:
        return GeographyTag.UK
    if "united states" in value or value in {"usa", "us"}:
        return GeographyTag.US
    if "canada" in value:
        return GeographyTag.CANADA
    if "australia" in value:
        return GeographyTag.AUSTRALIA
    if value in EU_COUNTRIES:
        return GeographyTag.EU
    return None


def infer_geography(
    university_country: str | None,
    student_nationality: str | None,
    student_current_country: str | None,
) -> GeographyTag:
    """First recognised country wins, university first; defaults to EU."""
    for country in (university_country, student_nationality, student_current_country):
        geography = geography_from_country(country)
        if geography is not None:
            return geography
    return GeographyTag.EU


def _calendar_days_between(earlier: datetime, later: datetime) -> int:
    if earlier.tzinfo is None:
        earlier = earlier.replace(tzinfo=UTC)
    if later.tzinfo is None:
        later = later.replace(tzinfo=UTC)
    return (later.astimezone(UTC).date() - earlier.astimezone(UTC).date()).days


def compute_risk_score(data: CategorizationInput, now: datetime | None = None) -> int:
    """
    Heuristic risk score clamped to 0-100.

    Adjusts the base score by pipeline stage, agent involvement, uploaded
    documents and days since the last activity.
    """
    status = _normalize(data.status)
    score = BASE_RISK_SCORE

    if status in {"withdrawn", "rejected"}:
        score += 40
    if status in {"draft", "submitted", "screening"}:
        score += 15
    if status in {"conditional_offer", "unconditional_offer"}:
        score -= 10
    if status in {"cas_loa", "visa", "enrolled"}:
        score -= 20

    if not data.agent_id:
        score += 5
    if not data.documents_count:
        score += 10

    activity = data.last_document_at or data.last_updated_at or data.created_at
    if activity is not None:
        days = _calendar_days_between(activity, now or datetime.now(UTC))
        if days > 90:
            score += 30
        elif days > 60:
            score += 20
        elif days > 30:
            score += 10

    return max(0, min(100, score))


def risk_band_for(score: int) -> RiskBand:
    if score >= HIGH_RISK_THRESHOLD:
        return RiskBand.HIGH
    if score >= MEDIUM_RISK_THRESHOLD:
        return RiskBand.MEDIUM
    return RiskBand.LOW


def categorize_application(
    data: CategorizationInput,
    now: datetime | None = None,
) -> ApplicationCategorization:
    score = compute_risk_score(data, now=now)
    return ApplicationCategorization(
        level=infer_level(data.program_level),
        route=infer_route(data.program_level, data.program_name),
        geography=infer_geography(
            data.university_country,
            data.student_nationality,
            data.student_current_country,
        ),
        risk_band=risk_band_for(score),
        risk_score=score,
    )
