"""Result models returned by the mentor service.

Field names match the JSON schema the models are asked to answer with, so
``to_dict()`` output can be handed to a browser client unchanged and fed
back through ``from_dict()`` without loss.

``from_dict`` follows JSON-unmarshal rules rather than being lenient about
types: a missing key or ``null`` takes the zero value, unknown keys are
ignored, and a value of the wrong type raises ``ValueError``.
"""

from __future__ import annotations

import math
from dataclasses import asdict, dataclass, field

SCORE_RANGE = (0, 100)

ISSUE_TYPES = ("bug", "performance", "style", "logic", "parsing")
SEVERITIES = ("low", "medium", "high", "critical")


def _require_mapping(data, what: str) -> dict:
    if not isinstance(data, dict):
        raise ValueError(f"{what} must be a JSON object, got {type(data).__name__}")
    return data


def _text(data: dict, key: str) -> str:
    value = data.get(key)
    if value is None:
        return ""
    if not isinstance(value, str):
        raise ValueError(f"{key!r} must be a string, got {type(value).__name__}")
    return value


def _number(data: dict, key: str) -> int | None:
    value = data.get(key)
    if value is None:
        return None
    # bool is an int subclass; JSON true/false is not a number.
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValueError(f"{key!r} must be a number, got {type(value).__name__}")
    if isinstance(value, float) and not math.isfinite(value):
        raise ValueError(f"{key!r} is out of range: {value}")
    return int(round(value))


def clamp_score(score: int) -> int:
    low, high = SCORE_RANGE
    return min(max(score, low), high)


def _flag(data: dict, key: str) -> bool:
    value = data.get(key)
    if value is None:
        return False
    if not isinstance(value, bool):
        raise ValueError(f"{key!r} must be a boolean, got {type(value).__name__}")
    return value


def _items(data: dict, key: str) -> list:
    value = data.get(key)
    if value is None:
        return []
    if not isinstance(value, list):
        raise ValueError(f"{key!r} must be an array, got {type(value).__name__}")
    return value


@dataclass
class CodeIssue:
    """A single problem the reviewer found in the candidate's code."""

    type: str  # one of ISSUE_TYPES
    severity: str  # one of SEVERITIES
    description: str
    solution: str
    line_number: int | None = None

    @classmethod
    def from_dict(cls, data) -> CodeIssue:
        data = _require_mapping(data, "issue")
        return cls(
            type=_text(data, "type"),
            severity=_text(data, "severity"),
            description=_text(data, "description"),
            solution=_text(data, "solution"),
            line_number=_number(data, "line_number"),
        )


@dataclass
class CodeSuggestion:
    """An improvement that is not a defect: optimization, idiom, alternative."""

    category: str
    priority: str
    description: str
    example: str = ""

    @classmethod
    def from_dict(cls, data) -> CodeSuggestion:
        data = _require_mapping(data, "suggestion")
        return cls(
            category=_text(data, "category"),
            priority=_text(data, "priority"),
            description=_text(data, "description"),
            example=_text(data, "example"),
        )


@dataclass
class ComplexityAnalysis:
    time_complexity: str = ""
    space_complexity: str = ""
    can_optimize: bool = False
    optimized_approach: str = ""

    @classmethod
    def from_dict(cls, data) -> ComplexityAnalysis:
        data = _require_mapping(data, "complexity")
        return cls(
            time_complexity=_text(data, "time_complexity"),
            space_complexity=_text(data, "space_complexity"),
            can_optimize=_flag(data, "can_optimize"),
            optimized_approach=_text(data, "optimized_approach"),
        )


@dataclass
class ReviewResult:
    """A complete code review, always fully populated.

    Built fresh for every request and handed to the caller; never persisted.
    """

    overall_score: int = 0  # 0-100
    issues: list[CodeIssue] = field(default_factory=list)
    suggestions: list[CodeSuggestion] = field(default_factory=list)
    interviewer_feedback: str = ""
    follow_up_questions: list[str] = field(default_factory=list)
    complexity: ComplexityAnalysis = field(default_factory=ComplexityAnalysis)
    readability_score: int = 0  # 0-100
    test_coverage: str = ""

    @classmethod
    def from_dict(cls, data) -> ReviewResult:
        data = _require_mapping(data, "review")
        questions = _items(data, "follow_up_questions")
        for question in questions:
            if not isinstance(question, str):
                raise ValueError(f"follow-up questions must be strings, got {type(question).__name__}")
        complexity = data.get("complexity")
        return cls(
            overall_score=clamp_score(_number(data, "overall_score") or 0),
            issues=[CodeIssue.from_dict(i) for i in _items(data, "issues")],
            suggestions=[CodeSuggestion.from_dict(s) for s in _items(data, "suggestions")],
            interviewer_feedback=_text(data, "interviewer_feedback"),
            follow_up_questions=list(questions),
            complexity=ComplexityAnalysis() if complexity is None else ComplexityAnalysis.from_dict(complexity),
            readability_score=clamp_score(_number(data, "readability_score") or 0),
            test_coverage=_text(data, "test_coverage"),
        )

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass
class Challenge:
    """The coding challenge a candidate is working on."""

    title: str
    description: str = ""


@dataclass
class ChatMessage:
    role: str  # "user" | "assistant"
    content: str
    timestamp: str = ""


@dataclass
class ChatResponse:
    """Reply from the mentor chat, with follow-up chips for the UI."""

    message: str
    success: bool
    timestamp: str
    error: str = ""
    context: str = ""
    suggestions: list[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        return asdict(self)
