"""
Model response parsing with deterministic fallbacks

Every parse returns a ``ParseOutcome`` so callers (and tests) can tell a
model-derived value from a substituted default. Malformed model output never
aborts the application flow.
"""
import json
import logging
import math
import re
from dataclasses import dataclass
from typing import Any, Dict, Generic, List, Optional, TypeVar

from pydantic import BaseModel, Field, ValidationError, field_validator

from talenthub.schemas import QuestionDB

logger = logging.getLogger(__name__)

T = TypeVar('T')

DEFAULT_SCORE = 50
QUESTION_COUNT = 6
QUESTION_TYPES = ('technical', 'behavioral', 'problem_solving', 'motivation', 'gap', 'general')

# Type slots every interview must cover, in order
REQUIRED_QUESTION_SLOTS = ('technical', 'technical', 'behavioral', 'problem_solving', 'motivation', 'gap')

FALLBACK_QUESTIONS = (
    {'question': 'What technical skills do you bring to this position?', 'type': 'technical'},
    {'question': 'Walk us through a tool or technology from this listing that you have used in practice.', 'type': 'technical'},
    {'question': 'Tell us about a time you had to deliver under a tight deadline.', 'type': 'behavioral'},
    {'question': 'Describe a challenging problem you solved recently and how you approached it.', 'type': 'problem_solving'},
    {'question': 'Why are you interested in this opportunity?', 'type': 'motivation'},
    {'question': 'Which area of this role is newest to you, and how would you close that gap?', 'type': 'gap'},
)

_FENCE_RE = re.compile(r'```(?:json)?\s*\n?', re.IGNORECASE)


@dataclass(frozen=True)
class ParseOutcome(Generic[T]):
    value: T
    used_fallback: bool = False

    @classmethod
    def parsed(cls, value: T) -> 'ParseOutcome[T]':
        return cls(value=value, used_fallback=False)

    @classmethod
    def fallback(cls, value: T) -> 'ParseOutcome[T]':
        return cls(value=value, used_fallback=True)


def _clamp_score(value: Any) -> int:
    if isinstance(value, bool) or value is None:
        return DEFAULT_SCORE
    try:
        number = float(value)
    except (TypeError, ValueError, OverflowError):
        return DEFAULT_SCORE
    if not math.isfinite(number):
        return DEFAULT_SCORE
    score = int(round(number))
    return max(0, min(score, 100))


def _string_list(value: Any) -> List[str]:
    if not isinstance(value, list):
        return []
    return [str(item).strip() for item in value if item is not None and str(item).strip()]


class MatchBreakdownResult(BaseModel):
    skills: int = DEFAULT_SCORE
    experience: int = DEFAULT_SCORE
    level: int = DEFAULT_SCORE
    overall: int = DEFAULT_SCORE

    @field_validator('skills', 'experience', 'level', 'overall', mode='before')
    @classmethod
    def clamp(cls, value):
        return _clamp_score(value)


class AnalysisResult(BaseModel):
    match_score: int = DEFAULT_SCORE
    match_breakdown: MatchBreakdownResult = Field(default_factory=MatchBreakdownResult)
    profile_summary: str = ""
    strengths: List[str] = Field(default_factory=list)
    weaknesses: List[str] = Field(default_factory=list)

    @field_validator('match_score', mode='before')
    @classmethod
    def clamp_match_score(cls, value):
        return _clamp_score(value)

    @field_validator('match_breakdown', mode='before')
    @classmethod
    def breakdown_object(cls, value):
        return value if isinstance(value, dict) else {}

    @field_validator('profile_summary', mode='before')
    @classmethod
    def summary_text(cls, value):
        return str(value).strip() if value is not None else ""

    @field_validator('strengths', 'weaknesses', mode='before')
    @classmethod
    def string_lists(cls, value):
        return _string_list(value)


def default_analysis() -> AnalysisResult:
    return AnalysisResult()


def strip_code_fences(raw: Optional[str]) -> str:
    """Remove ```json / ``` wrappers models add despite instructions"""
    if not raw:
        return ""
    return _FENCE_RE.sub('', raw).replace('```', '').strip()


def _load_json(raw: Optional[str]) -> Any:
    return json.loads(strip_code_fences(raw))


def parse_analysis(raw: Optional[str]) -> ParseOutcome[AnalysisResult]:
    try:
        payload = _load_json(raw)
    except (json.JSONDecodeError, TypeError) as e:
        logger.warning(f"Analysis response was not JSON, using defaults: {e}")
        return ParseOutcome.fallback(default_analysis())

    if not isinstance(payload, dict):
        logger.warning("Analysis response was not a JSON object, using defaults")
        return ParseOutcome.fallback(default_analysis())

    try:
        return ParseOutcome.parsed(AnalysisResult.model_validate(payload))
    except ValidationError as e:
        logger.warning(f"Analysis response failed validation, using defaults: {e}")
        return ParseOutcome.fallback(default_analysis())


def fallback_questions() -> List[QuestionDB]:
    return normalize_questions([dict(q) for q in FALLBACK_QUESTIONS])


def normalize_question_type(value: Any) -> str:
    if not value:
        return 'general'
    normalized = re.sub(r'[\s\-]+', '_', str(value).strip().lower())
    return normalized if normalized in QUESTION_TYPES else 'general'


def _complete_question_list(questions: List[Dict]) -> List[Dict]:
    """Trim to the interview length, filling missing type slots from the fallback set"""
    questions = questions[:QUESTION_COUNT]
    if len(questions) == QUESTION_COUNT:
        return questions

    remaining = list(REQUIRED_QUESTION_SLOTS)
    for question in questions:
        question_type = normalize_question_type(question.get('type'))
        if question_type in remaining:
            remaining.remove(question_type)

    spare = [dict(q) for q in FALLBACK_QUESTIONS]
    fillers = []
    for slot in remaining:
        match = next(q for q in spare if q['type'] == slot)
        spare.remove(match)
        fillers.append(match)

    return (questions + fillers)[:QUESTION_COUNT]


def normalize_questions(questions: List[Dict]) -> List[QuestionDB]:
    """
    Give every question the stored shape

    Ids follow position (1..6), types default to ``general`` and the answer,
    score and feedback fields start empty. Entries without question text
    borrow the fallback question of the same slot.
    """
    normalized: List[QuestionDB] = []
    for index, question in enumerate(_complete_question_list(questions)):
        text = str(question.get('question') or '').strip()
        question_type = normalize_question_type(question.get('type'))
        if not text:
            text = FALLBACK_QUESTIONS[index]['question']
            question_type = FALLBACK_QUESTIONS[index]['type']
        normalized.append({
            'id': index + 1,
            'question': text,
            'type': question_type,
            'answer': '',
            'score': 0,
            'feedback': '',
        })
    return normalized


def parse_questions(raw: Optional[str]) -> ParseOutcome[List[QuestionDB]]:
    try:
        payload = _load_json(raw)
    except (json.JSONDecodeError, TypeError) as e:
        logger.warning(f"Question response was not JSON, using fallback set: {e}")
        return ParseOutcome.fallback(fallback_questions())

    # Some models wrap the array as {"questions": [...]}
    if isinstance(payload, dict) and isinstance(payload.get('questions'), list):
        payload = payload['questions']

    entries = [q for q in payload if isinstance(q, dict)] if isinstance(payload, list) else []
    if not entries:
        logger.warning("Question response held no usable questions, using fallback set")
        return ParseOutcome.fallback(fallback_questions())

    return ParseOutcome.parsed(normalize_questions(entries))
