"""Core data types shared by the normalizer, engine and protocol client"""

from dataclasses import dataclass, field
from typing import List, Optional, Tuple

# Question types
INFO = "info"
TEXT_FIELD = "text_field"
SINGLE_SELECT = "single_select"

# Answer sources
SOURCE_CACHED = "cached"
SOURCE_GENERATED = "generated"
SOURCE_USER_EDITED = "user_edited"
SOURCE_USER_INPUT_REQUIRED = "user_input_required"

# Application status values reported by the interview endpoint
STATUS_SCREENING_QUESTIONS = "SCREENING_QUESTIONS"
STATUS_REVIEW = "REVIEW"
STATUS_COMPLETED = "COMPLETED"

# Job outcome statuses
JOB_APPLIED = "APPLIED"
JOB_SKIPPED = "SKIPPED"
JOB_UNAVAILABLE = "UNAVAILABLE"
JOB_FAILED = "FAILED"


@dataclass(frozen=True)
class SelectOption:
    value: str
    label: str


@dataclass(frozen=True)
class ParsedQuestion:
    id: str
    type: str
    text: str
    required: bool = False
    order: int = 0
    group: int = 0
    min_length: Optional[int] = None
    max_length: Optional[int] = None
    options: Tuple[SelectOption, ...] = ()
    html_content: Optional[str] = None

    @property
    def option_labels(self):
        return [opt.label for opt in self.options]


@dataclass(frozen=True)
class Answer:
    question_id: str
    values: Tuple[str, ...]
    confidence: float
    source: str

    def __post_init__(self):
        if not self.values:
            raise ValueError("Answer.values must hold at least one value")
        if not 0.0 <= self.confidence <= 1.0:
            raise ValueError(f"confidence {self.confidence} outside [0, 1]")

    @property
    def value(self):
        return self.values[0]

    @classmethod
    def single(cls, question_id, value, confidence, source):
        return cls(question_id, (value,), confidence, source)


@dataclass
class ApplicationState:
    """Per-job protocol state. Only the protocol client mutates it."""

    listing_key: str
    application_id: Optional[str] = None
    current_group: int = 0
    total_groups: int = 0
    total_questions: int = 0
    status: str = STATUS_SCREENING_QUESTIONS
    processed_groups: List[int] = field(default_factory=list)


@dataclass
class CacheRecord:
    id: str
    question_text: str
    answer_text: str
    usage_count: int = 1
    last_used_at: str = ""
    category: str = "general"
    keywords: List[str] = field(default_factory=list)
    # Only populated on search results
    similarity_score: Optional[float] = None


@dataclass(frozen=True)
class CandidateContext:
    profile_text: str = ""
    job_title: str = ""
    company: str = ""
    job_description: str = ""


@dataclass(frozen=True)
class Job:
    job_id: str
    url: str
    listing_key: str
    title: str = ""
    company: str = ""
    description: str = ""


@dataclass
class JobResult:
    job_id: str
    status: str
    reason: str = ""
    reason_code: str = ""
    groups_submitted: int = 0
    questions_answered: int = 0

    @property
    def success(self):
        return self.status == JOB_APPLIED

    @property
    def applied(self):
        return self.status == JOB_APPLIED

    @property
    def skipped(self):
        return self.status == JOB_SKIPPED

    @property
    def error(self):
        """Failure reason, or None for every non-failure outcome"""
        return self.reason if self.status == JOB_FAILED else None
