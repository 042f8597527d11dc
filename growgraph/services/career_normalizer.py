# growgraph/services/career_normalizer.py
from collections.abc import Mapping
from typing import Any
from growgraph.models.career import CareerDetail, Requirements


def _as_str(value: Any) -> str:
    return value if isinstance(value, str) else ""


def _as_str_list(value: Any) -> list[str]:
    # Non-string items are dropped silently; order of the rest is kept.
    if not isinstance(value, (list, tuple)):
        return []
    return [item for item in value if isinstance(item, str)]


def normalize_career_detail(raw: Any) -> CareerDetail:
    """
    Coerces a career-detail payload of unknown shape into a `CareerDetail`.

    Every field is handled on its own, so one malformed field never costs the
    others. Missing or mistyped values fall back to empty strings and lists;
    `timeToReach` is passed through only when it is an object.
    """
    if not isinstance(raw, Mapping):
        return CareerDetail()

    requirements = raw.get("requirements")
    if not isinstance(requirements, Mapping):
        requirements = {}

    time_to_reach = raw.get("timeToReach")
    if isinstance(time_to_reach, Mapping):
        time_to_reach = {str(stage): value for stage, value in time_to_reach.items()}
    else:
        time_to_reach = None

    return CareerDetail(
        title=_as_str(raw.get("title")),
        average_salary=_as_str(raw.get("averageSalary")),
        requirements=Requirements(
            education=_as_str_list(requirements.get("education")),
            certifications=_as_str_list(requirements.get("certifications")),
            experience=_as_str_list(requirements.get("experience")),
        ),
        description=_as_str(raw.get("description")),
        related_companies=_as_str_list(raw.get("relatedCompanies")),
        role_models=_as_str_list(raw.get("roleModels")),
        time_to_reach=time_to_reach,
    )


def fallback_career_detail(title: str, description: str) -> CareerDetail:
    """A detail record carrying only a title and an explanatory description."""
    return CareerDetail(title=title, description=description)
