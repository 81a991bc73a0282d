"""Domain models for resume parsing.

Includes the structured resume extracted by an AI provider, the options
controlling a parse request, and the result records returned by parsers
and batch processing.
"""

from dataclasses import asdict, dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, List, Mapping, Optional

from .common import AnnotatedResult, ResumeText


def _pick(data: Mapping[str, Any], *keys: str) -> Any:
    """Returns the first value present under any of the given keys."""
    for key in keys:
        if key in data and data[key] is not None:
            return data[key]
    return None


def _clean_list(value: Any) -> List[str]:
    if not isinstance(value, list):
        return []
    return [str(item) for item in value if item]


def _clean_str(value: Any) -> str:
    return value if isinstance(value, str) else ""


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


@dataclass
class Resume:
    """Structured information extracted from resume text."""
    skills: List[str] = field(default_factory=list)
    experience: str = ""
    education: str = ""
    summary: str = ""
    years_of_experience: float = 0
    current_role: str = ""
    location: str = ""
    salary_expectation: Optional[float] = None
    languages: List[str] = field(default_factory=list)
    certifications: List[str] = field(default_factory=list)
    projects: List[str] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Resume":
        """Validates and cleans a provider's JSON payload.

        Accepts both camelCase (as requested in the prompts) and snake_case
        keys. Fields with an unexpected type fall back to empty defaults.
        """
        if not isinstance(data, Mapping):
            return cls()

        years = _pick(data, "yearsOfExperience", "years_of_experience")
        salary = _pick(data, "salaryExpectation", "salary_expectation")
        return cls(
            skills=_clean_list(data.get("skills")),
            experience=_clean_str(data.get("experience")),
            education=_clean_str(data.get("education")),
            summary=_clean_str(data.get("summary")),
            years_of_experience=years if _is_number(years) else 0,
            current_role=_clean_str(_pick(data, "currentRole", "current_role")),
            location=_clean_str(data.get("location")),
            salary_expectation=salary if _is_number(salary) else None,
            languages=_clean_list(data.get("languages")),
            certifications=_clean_list(data.get("certifications")),
            projects=_clean_list(data.get("projects")),
        )


def calculate_confidence(resume: Resume, original_text: str) -> float:
    """Scores how much meaningful data was extracted, between 0.0 and 1.0."""
    if not original_text:
        return 0.0

    confidence = 0.0
    if resume.skills:
        confidence += 0.3
    if len(resume.experience) > 10:
        confidence += 0.2
    if len(resume.education) > 5:
        confidence += 0.2
    if len(resume.summary) > 10:
        confidence += 0.2
    if resume.current_role:
        confidence += 0.1

    # Penalize extractions that are tiny relative to the input
    extracted_length = len(" ".join([
        " ".join(resume.skills),
        resume.experience,
        resume.education,
        resume.summary,
    ]))
    if extracted_length / len(original_text) < 0.1:
        confidence *= 0.5

    return min(round(confidence, 4), 1.0)


@dataclass
class ResumeParsingOptions:
    """Options controlling a single parse request."""
    include_confidence: bool = True
    include_raw_response: bool = False
    language: str = "en"
    model: Optional[str] = None
    temperature: float = 0.1
    max_tokens: Optional[int] = None  # None: the provider adapter's default


@dataclass
class ResumeParsingResult:
    """Outcome of a parse request against one provider."""
    success: bool
    provider: str
    processing_time_ms: float
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    data: Optional[Resume] = None
    error: Optional[str] = None
    confidence: Optional[float] = None
    raw_response: Optional[Any] = None

    def to_dict(self) -> Dict[str, Any]:
        """JSON-friendly representation (raw response omitted)."""
        return {
            "success": self.success,
            "provider": self.provider,
            "processing_time_ms": round(self.processing_time_ms, 2),
            "timestamp": self.timestamp.isoformat(),
            "data": None if self.data is None else asdict(self.data),
            "error": self.error,
            "confidence": self.confidence,
        }


@dataclass
class ResumeDocument:
    """A resume submitted as part of a batch."""
    id: str
    text: ResumeText


@dataclass
class BatchItemResult:
    """Outcome of one document in a batch."""
    id: str
    success: bool
    result: Optional[AnnotatedResult] = None
    error: Optional[str] = None
