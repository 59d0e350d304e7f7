from __future__ import annotations

import re
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

_EMAIL_RE = re.compile(r"^[A-Za-z0-9._%+-]+@[A-Za-z0-9.-]+\.[A-Za-z]{2,}$")


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class PersonalInfo(CamelModel):
    full_name: str = Field(default="", max_length=200)
    email: str = Field(default="", max_length=320)
    phone: str = Field(default="", max_length=40)
    address: str | None = Field(default=None, max_length=500)
    summary: str | None = Field(default=None, max_length=5000)


class EducationEntry(CamelModel):
    institution: str = Field(default="", max_length=300)
    degree: str = Field(default="", max_length=200)
    field: str = Field(default="", max_length=200)
    start_date: str = Field(default="", max_length=40)
    end_date: str | None = Field(default=None, max_length=40)
    description: str | None = Field(default=None, max_length=5000)


class ExperienceEntry(CamelModel):
    company: str = Field(default="", max_length=300)
    position: str = Field(default="", max_length=200)
    start_date: str = Field(default="", max_length=40)
    end_date: str | None = Field(default=None, max_length=40)
    description: str | None = Field(default=None, max_length=10000)
    current: bool | None = None


class CVContent(CamelModel):
    personal_info: PersonalInfo = Field(default_factory=PersonalInfo)
    education: list[EducationEntry] = Field(default_factory=list, max_length=50)
    experience: list[ExperienceEntry] = Field(default_factory=list, max_length=50)
    skills: list[str] = Field(default_factory=list, max_length=200)


class CVDocument(CVContent):
    title: str = Field(min_length=1, max_length=200)

    @field_validator("personal_info")
    @classmethod
    def _validate_email(cls, value: PersonalInfo) -> PersonalInfo:
        if not _EMAIL_RE.match(value.email.strip()):
            raise ValueError("personalInfo.email must be a valid email address")
        return value

    def content(self) -> CVContent:
        return CVContent(
            personal_info=self.personal_info,
            education=self.education,
            experience=self.experience,
            skills=self.skills,
        )


class CVOut(CamelModel):
    id: str
    user_id: str
    title: str
    personal_info: PersonalInfo
    education: list[EducationEntry]
    experience: list[ExperienceEntry]
    skills: list[str]
    is_paid: bool
    created_at: str
    updated_at: str


def cv_to_wire(record: dict[str, Any]) -> dict[str, Any]:
    return CVOut.model_validate(record).model_dump(by_alias=True)
