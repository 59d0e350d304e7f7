from __future__ import annotations

from pydantic import Field

from cvbuilder.schemas.cv import CamelModel, CVContent, EducationEntry, ExperienceEntry, PersonalInfo

MAX_SCORE = 100

SUMMARY_FULL_CREDIT_CHARS = 50
SUMMARY_MIN_FORMATTING_CHARS = 30
PHONE_MIN_CHARS = 10
EDUCATION_DESCRIPTION_MIN_CHARS = 20
EXPERIENCE_DESCRIPTION_BONUS_AVG_CHARS = 100

_OVERALL_MESSAGES: tuple[tuple[int, str], ...] = (
    (50, "Your CV needs significant improvement. Focus on completing all sections with detailed information."),
    (70, "Your CV is on the right track. Address the suggestions below to improve your ATS score."),
    (85, "Good CV! A few improvements will make it excellent for ATS systems."),
)
_TOP_MESSAGE = "Excellent CV! Your CV is well-optimized for ATS systems."


class ATSBreakdown(CamelModel):
    personal_info: int = Field(default=0, ge=0, le=20)
    education: int = Field(default=0, ge=0, le=20)
    experience: int = Field(default=0, ge=0, le=30)
    skills: int = Field(default=0, ge=0, le=20)
    formatting: int = Field(default=0, ge=0, le=10)

    def total(self) -> int:
        return self.personal_info + self.education + self.experience + self.skills + self.formatting


class ATSScoreResult(CamelModel):
    score: int = Field(ge=0, le=MAX_SCORE)
    suggestions: list[str] = Field(default_factory=list)
    breakdown: ATSBreakdown


def _present(value: str | None) -> bool:
    return bool(value)


def _score_personal_info(info: PersonalInfo, suggestions: list[str]) -> int:
    points = 0
    if _present(info.full_name):
        points += 5
    else:
        suggestions.append("Add your full name to improve ATS compatibility")

    if _present(info.email) and "@" in info.email:
        points += 5
    else:
        suggestions.append("Add a valid email address")

    if _present(info.phone) and len(info.phone) >= PHONE_MIN_CHARS:
        points += 5
    else:
        suggestions.append("Add a complete phone number")

    summary = info.summary or ""
    if len(summary) >= SUMMARY_FULL_CREDIT_CHARS:
        points += 5
    elif summary:
        points += 2
        suggestions.append("Expand your professional summary to at least 50 characters for better impact")
    else:
        suggestions.append("Add a professional summary to highlight your key qualifications")
    return points


def _score_education(entries: list[EducationEntry], suggestions: list[str]) -> int:
    if not entries:
        suggestions.append("Add at least one education entry")
        return 0

    points = 10
    with_description = sum(
        1 for entry in entries if entry.description and len(entry.description) > EDUCATION_DESCRIPTION_MIN_CHARS
    )
    with_complete_dates = sum(1 for entry in entries if entry.start_date and entry.end_date)

    if with_description > 0:
        points += 5
    else:
        suggestions.append("Add descriptions to your education entries to provide context")

    if with_complete_dates == len(entries):
        points += 5
    else:
        suggestions.append("Ensure all education entries have complete date ranges")
    return points


def _score_experience(entries: list[ExperienceEntry], suggestions: list[str]) -> int:
    count = len(entries)
    points = 0
    if count == 0:
        suggestions.append("Add work experience to strengthen your CV")
    elif count == 1:
        points += 10
        suggestions.append("Add more work experience entries to showcase your career progression")
    else:
        points += 15

    described = [entry.description for entry in entries if entry.description]
    total_description_chars = sum(len(text) for text in described)

    if count > 0 and len(described) == count:
        points += 10
    elif described:
        points += 5
        suggestions.append("Add detailed descriptions to all work experience entries")
    elif count > 0:
        suggestions.append(
            "Add descriptions to your work experience to highlight your achievements and responsibilities"
        )

    # Averaged over every entry, described or not.
    average_chars = total_description_chars / count if count else 0
    if average_chars >= EXPERIENCE_DESCRIPTION_BONUS_AVG_CHARS:
        points += 5
    elif count > 0 and described:
        suggestions.append("Expand work experience descriptions to at least 100 characters each for better detail")
    return points


def _score_skills(skills: list[str], suggestions: list[str]) -> int:
    count = len(skills)
    if count == 0:
        suggestions.append("Add relevant skills to improve ATS matching")
        return 0
    if count < 5:
        suggestions.append("Add more skills (aim for at least 5-10) to improve keyword matching")
        return 10
    if count < 10:
        suggestions.append("Consider adding a few more skills to reach 10+ for optimal ATS performance")
        return 15
    return 20


def _score_formatting(info: PersonalInfo, suggestions: list[str]) -> int:
    points = 10
    issues: list[str] = []

    # Independent of the summary tier in _score_personal_info; both can apply.
    if info.summary and len(info.summary) < SUMMARY_MIN_FORMATTING_CHARS:
        points -= 2
        issues.append("summary is too brief")

    if not info.address:
        points -= 2
        issues.append("missing address/location")

    if issues:
        suggestions.append(f"Formatting improvements: {', '.join(issues)}")
    return points


def overall_message(score: int) -> str:
    for upper_bound, message in _OVERALL_MESSAGES:
        if score < upper_bound:
            return message
    return _TOP_MESSAGE


def score_cv(cv: CVContent) -> ATSScoreResult:
    """Score a CV for ATS compatibility.

    Five independent sections are scored in field order; each appends its own
    suggestions. The total is capped at 100 and an overall message for the
    score bracket is placed first in the suggestion list.
    """
    suggestions: list[str] = []
    breakdown = ATSBreakdown(
        personal_info=_score_personal_info(cv.personal_info, suggestions),
        education=_score_education(cv.education, suggestions),
        experience=_score_experience(cv.experience, suggestions),
        skills=_score_skills(cv.skills, suggestions),
        formatting=_score_formatting(cv.personal_info, suggestions),
    )
    score = min(MAX_SCORE, breakdown.total())
    return ATSScoreResult(
        score=score,
        suggestions=[overall_message(score), *suggestions],
        breakdown=breakdown,
    )
