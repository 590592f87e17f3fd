"""Tolerant extraction of structured results from free-form model replies.

Models are told to answer with a single JSON object (or array) and nothing
else, but they still wrap it in markdown fences, surround it with prose, or
run out of tokens halfway through an object. A malformed reply is an
expected case here, not an exceptional one: nothing in this module raises,
and every entry point returns a usable, fully populated value.

The object path is a chain of small strategies, each usable on its own:

    strip_code_fences → locate_json_object → is_balanced
        balanced   → parse_review → is_hollow     (full parse + validation gate)
        unbalanced → recover_partial_review       (reply cut off mid-object)
        no object / parse error / hollow → fallback_review

The functions are pure and hold no state, so they are safe to call from any
number of request threads at once.
"""

from __future__ import annotations

import json
import logging
import math
import re

from codementor_core.models import CodeIssue, CodeSuggestion, ComplexityAnalysis, ReviewResult, clamp_score

logger = logging.getLogger(__name__)

_LOG_FRAGMENT_CHARS = 200
_FEEDBACK_ECHO_CHARS = 500

# Only the outermost fence is stripped; fences inside string values
# (code examples in "solution" or "example") must survive.
_OPENING_FENCE = re.compile(r"^```[\w+-]*\s*")
_CLOSING_FENCE = re.compile(r"\s*```$")
# "Here is my review:\n```json" - the fence opening the JSON that follows.
_DANGLING_FENCE = re.compile(r"\s*```[\w+-]*\s*$")

_ISSUES_ARRAY = re.compile(r'"issues"\s*:\s*\[')
_OBJECT_BOUNDARY = re.compile(r"\}\s*,\s*\{")
_FEEDBACK_STRING = re.compile(r'"interviewer_feedback"\s*:\s*("(?:[^"\\]|\\.)*")')

DEFAULT_FOLLOW_UP_QUESTIONS = (
    "Can you explain your algorithm step by step?",
    "What's the time complexity of your solution?",
    "How would you handle edge cases?",
)

DEFAULT_INTERVIEW_QUESTIONS = (
    "What's the time complexity of your solution?",
    "How would you handle edge cases?",
    "Can you optimize this further?",
)

DEFAULT_TEXT_REPLY = "I'm here to help! Could you rephrase your question?"

_EMPTY_REPLY_FEEDBACK = "AI provided an empty or malformed response. Please try again."
_TRUNCATED_FEEDBACK = (
    "The AI review was cut off before it finished, so only part of it could be recovered. "
    "Let's go over the rest together - can you walk me through your approach?"
)
_RETRY_SOLUTION = "Try running the AI review again, or check your code for syntax issues."


def _log_failure(reason: str, fragment: str) -> None:
    logger.warning("AI response extraction: %s. Fragment: %s", reason, fragment[:_LOG_FRAGMENT_CHARS])


# ---------------------------------------------------------------------- #
# Strategies                                                               #
# ---------------------------------------------------------------------- #


def strip_code_fences(text: str) -> str:
    """Trim whitespace and remove a fence at the very start and end of the text.

    The opening fence may carry a language tag (```json, ```go).
    """
    cleaned = _OPENING_FENCE.sub("", text.strip())
    cleaned = _CLOSING_FENCE.sub("", cleaned)
    return cleaned.strip()


def locate_json_object(text: str) -> str | None:
    """Return the span from the first ``{`` to the last ``}``, inclusive.

    Returns None when the text has no ``{`` at all. A ``{`` with no ``}``
    after it is what a reply cut off by the token limit looks like, so the
    rest of the text from the ``{`` onwards is returned as the candidate and
    left for the balance check to reject.
    """
    start = text.find("{")
    if start == -1:
        return None
    end = text.rfind("}")
    if end < start:
        return text[start:]
    return text[start : end + 1]


def is_balanced(candidate: str) -> bool:
    return candidate.count("{") == candidate.count("}")


def parse_review(candidate: str) -> ReviewResult:
    """Parse a JSON candidate into a ReviewResult.

    Raises ValueError when the candidate is not valid JSON or does not fit
    the review schema.
    """
    try:
        data = json.loads(candidate)
    except RecursionError as e:
        raise ValueError("JSON nested too deeply") from e
    return ReviewResult.from_dict(data)


def is_hollow(review: ReviewResult) -> bool:
    """True when every signal field is at its zero value.

    A syntactically valid object with no score and no feedback is treated
    as a placeholder the model emitted instead of a review.
    """
    return review.overall_score == 0 and review.readability_score == 0 and review.interviewer_feedback == ""


def lift_score(text: str, key: str) -> int | None:
    """Pull a numeric score straight out of text that may not parse as JSON.

    The result is clamped to 0..100; a number too large to represent is
    treated as absent.
    """
    match = re.search(rf'"{re.escape(key)}"\s*:\s*(-?\d+(?:\.\d+)?)', text)
    if match is None:
        return None
    value = float(match.group(1))
    if not math.isfinite(value):
        return None
    return clamp_score(int(round(value)))


def _lift_feedback(text: str) -> str | None:
    match = _FEEDBACK_STRING.search(text)
    if match is None:
        return None
    try:
        return json.loads(match.group(1)) or None
    except ValueError:
        return None


def _parse_issue_array(fragment: str) -> list | None:
    try:
        data = json.loads(f"[{fragment}]")
    except (ValueError, RecursionError):
        return None
    return data if isinstance(data, list) else None


def recover_issues(text: str) -> list[CodeIssue]:
    """Salvage the complete elements of a (possibly truncated) ``issues`` array.

    If the array closes properly it is decoded as-is. Otherwise the tail of
    the text is treated as the array body: when it does not end on a closing
    brace, or does not parse, it is split on ``},{`` and the last, incomplete
    element is dropped before re-closing the array. Elements that do not fit
    the issue schema are skipped.
    """
    match = _ISSUES_ARRAY.search(text)
    if match is None:
        return []

    array_start = match.end() - 1
    try:
        elements, _ = json.JSONDecoder().raw_decode(text, array_start)
    except (ValueError, RecursionError):
        elements = None

    if not isinstance(elements, list):
        fragment = text[match.end() :].strip().rstrip("]").rstrip().rstrip(",")
        elements = _parse_issue_array(fragment) if fragment.endswith("}") else None
        if elements is None:
            pieces = _OBJECT_BOUNDARY.split(fragment)
            if len(pieces) < 2:
                return []
            elements = _parse_issue_array("},{".join(pieces[:-1]) + "}") or []

    issues = []
    for element in elements:
        try:
            issues.append(CodeIssue.from_dict(element))
        except ValueError as e:
            logger.debug("Skipping unusable issue in partial response: %s", e)
    return issues


def _preamble(raw: str) -> str:
    """Free text the model wrote before its JSON, minus any fence marker."""
    head, brace, _ = raw.partition("{")
    if not brace:
        return ""
    return strip_code_fences(_DANGLING_FENCE.sub("", head))


def recover_partial_review(raw: str, candidate: str) -> ReviewResult:
    """Build the best review possible from a reply that was cut off mid-object."""
    issues = recover_issues(candidate)
    if not issues:
        preamble = _preamble(raw)
        issues = [
            CodeIssue(
                type="parsing",
                severity="medium",
                description=preamble or "AI response parsing issue: the response was incomplete.",
                solution="Try running the AI review again; the response was cut off before it finished.",
            )
        ]

    return ReviewResult(
        overall_score=lift_score(raw, "overall_score") or 0,
        issues=issues,
        suggestions=[
            CodeSuggestion(
                category="troubleshooting",
                priority="medium",
                description="The review was incomplete. Run it again to get full suggestions.",
            )
        ],
        interviewer_feedback=_lift_feedback(candidate) or _TRUNCATED_FEEDBACK,
        follow_up_questions=list(DEFAULT_FOLLOW_UP_QUESTIONS),
        complexity=ComplexityAnalysis(
            time_complexity="Unable to analyze",
            space_complexity="Unable to analyze",
            can_optimize=False,
            optimized_approach="Rerun the review to get a complexity analysis",
        ),
        readability_score=lift_score(raw, "readability_score") or 0,
        test_coverage="Unable to assess: the AI response was incomplete",
    )


def fallback_review(reason: str, raw: str) -> ReviewResult:
    """The canonical review returned when nothing structured can be recovered.

    The score is a neutral 50: zero is reserved for results produced before
    any model was called (no API key, provider unavailable).
    """
    echo = raw.strip()
    if len(echo) > _FEEDBACK_ECHO_CHARS:
        echo = echo[:_FEEDBACK_ECHO_CHARS] + "..."
    if not echo:
        echo = _EMPTY_REPLY_FEEDBACK

    return ReviewResult(
        overall_score=50,
        issues=[
            CodeIssue(
                type="parsing",
                severity="medium",
                description=f"AI response parsing issue: {reason}",
                solution=_RETRY_SOLUTION,
            )
        ],
        suggestions=[
            CodeSuggestion(
                category="troubleshooting",
                priority="medium",
                description="If this keeps happening, try simplifying your code or breaking it into smaller functions.",
            )
        ],
        interviewer_feedback=(
            f"I'm having trouble analyzing your code automatically. {echo} "
            "Let's focus on the core logic - can you walk me through your approach?"
        ),
        follow_up_questions=list(DEFAULT_FOLLOW_UP_QUESTIONS),
        complexity=ComplexityAnalysis(
            time_complexity="Unable to analyze",
            space_complexity="Unable to analyze",
            can_optimize=False,
            optimized_approach="Rerun analysis after fixing any syntax issues",
        ),
        readability_score=50,
        test_coverage="Unable to assess due to parsing error",
    )


# ---------------------------------------------------------------------- #
# Entry points                                                             #
# ---------------------------------------------------------------------- #


def extract_review(raw: str | None) -> ReviewResult:
    """Turn a raw model reply into a ReviewResult. Never raises."""
    raw = raw or ""
    text = strip_code_fences(raw)

    candidate = locate_json_object(text)
    if candidate is None:
        _log_failure("No JSON found in AI response", text)
        return fallback_review("No JSON found in AI response", raw)

    if not is_balanced(candidate):
        _log_failure("Incomplete JSON response (mismatched braces)", candidate)
        return recover_partial_review(raw, candidate)

    try:
        review = parse_review(candidate)
    except ValueError as e:
        _log_failure(f"JSON parsing error ({e})", candidate)
        return fallback_review("JSON parsing error", raw)

    if is_hollow(review):
        _log_failure("Incomplete AI response (all key fields empty)", candidate)
        return fallback_review("Incomplete AI response", raw)

    return review


def extract_questions(raw: str | None) -> list[str]:
    """Turn a raw model reply into a list of question strings. Never raises.

    All-or-nothing: anything other than a non-empty JSON array of strings
    between the first ``[`` and the last ``]`` yields the default questions.
    """
    text = raw or ""
    start = text.find("[")
    end = text.rfind("]")
    if start == -1 or end < start:
        _log_failure("No JSON array found in AI response", text)
        return list(DEFAULT_INTERVIEW_QUESTIONS)

    candidate = text[start : end + 1]
    try:
        data = json.loads(candidate)
    except (ValueError, RecursionError) as e:
        _log_failure(f"JSON array parsing error ({e})", candidate)
        return list(DEFAULT_INTERVIEW_QUESTIONS)

    if not isinstance(data, list) or not data or not all(isinstance(q, str) for q in data):
        _log_failure("JSON array is empty or not a list of strings", candidate)
        return list(DEFAULT_INTERVIEW_QUESTIONS)

    return data


def extract_text(raw: str | None, fallback: str = DEFAULT_TEXT_REPLY) -> str:
    """Clean a plain-text reply. Never parses JSON, never raises.

    Strips at most one pair of bare triple-backtick markers at the very
    start and end; language tags are left alone.
    """
    cleaned = (raw or "").strip()
    cleaned = cleaned.removeprefix("```").removesuffix("```").strip()
    if not cleaned:
        _log_failure("Empty plain-text response", raw or "")
        return fallback
    return cleaned
