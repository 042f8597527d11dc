# growgraph/models/career.py
from typing import Any
from pydantic import BaseModel, ConfigDict, Field, field_validator

MBTI_TYPES = {
    "ISTJ", "ISFJ", "INFJ", "INTJ",
    "ISTP", "ISFP", "INFP", "INTP",
    "ESTP", "ESFP", "ENFP", "ENTP",
    "ESTJ", "ESFJ", "ENFJ", "ENTJ",
}

class Requirements(BaseModel):
    education: list[str] = Field(default_factory=list)
    certifications: list[str] = Field(default_factory=list)
    experience: list[str] = Field(default_factory=list)

class CareerDetail(BaseModel):
    """Career information shown before a suggestion is committed to the map."""
    model_config = ConfigDict(populate_by_name=True)

    title: str = ""
    average_salary: str = Field(default="", alias="averageSalary")
    requirements: Requirements = Field(default_factory=Requirements)
    description: str = ""
    related_companies: list[str] = Field(default_factory=list, alias="relatedCompanies")
    role_models: list[str] = Field(default_factory=list, alias="roleModels")
    # Keys are the career stages (신입, 주니어, 시니어, 리드); passed through as received.
    time_to_reach: dict[str, Any] | None = Field(default=None, alias="timeToReach")

class UserProfile(BaseModel):
    """Answers from the onboarding form. Forwarded to the map generator untouched."""
    model_config = ConfigDict(populate_by_name=True, extra="allow")

    hobby: str = ""
    mbti: str = ""
    salary: str = ""
    career_aim: str = Field(default="", alias="careerAim")
    role_model: str = Field(default="", alias="roleModel")
    desired_job_path: str = Field(default="", alias="desiredJobPath")

    @field_validator("mbti")
    @classmethod
    def _check_mbti(cls, value: str) -> str:
        value = value.strip().upper()
        if value and value not in MBTI_TYPES:
            raise ValueError(f"'{value}' is not an MBTI type.")
        return value
