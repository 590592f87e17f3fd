"""Prompt builders for the mentor service.

The extractor does not depend on how these are worded, only on the reply
format they ask for: one JSON object for reviews, one JSON array for
questions, plain text for hints and chat.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Sequence

from codementor_core.utils.code import display_name

if TYPE_CHECKING:
    from codementor_core.models import ChatMessage, Challenge

CHAT_HISTORY_LIMIT = 5
MAX_SUGGESTIONS = 3

HINT_LEVELS = {
    1: "a subtle nudge in the right direction",
    2: "a more direct hint about the approach",
    3: "a specific suggestion about implementation",
    4: "a detailed explanation with partial code example",
}

_REVIEW_SCHEMA = """{
  "overall_score": integer (0..100),
  "issues": [
    {
      "type": "bug|performance|style|logic",
      "severity": "low|medium|high|critical",
      "line_number": integer,
      "description": string,
      "solution": string
    }
  ],
  "suggestions": [
    {
      "category": "optimization|best_practice|alternative",
      "priority": "low|medium|high",
      "description": string,
      "example": string
    }
  ],
  "interviewer_feedback": string,
  "follow_up_questions": [string],
  "complexity": {
    "time_complexity": string,
    "space_complexity": string,
    "can_optimize": boolean,
    "optimized_approach": string
  },
  "readability_score": integer (0..100),
  "test_coverage": string
}"""


def _title(challenge: Challenge | None) -> str:
    return challenge.title if challenge is not None else "Free-form practice"


def build_review_prompt(code: str, challenge: Challenge | None, context: str = "", language: str = "go") -> str:
    lang = display_name(language)
    return f"""You are a senior {lang} interviewer. Respond ONLY with a single JSON object. \
Do NOT include markdown or code fences. All numeric fields must be JSON numbers, not strings.

SCHEMA:
{_REVIEW_SCHEMA}

CHALLENGE: {_title(challenge)}
CONTEXT: {context}

CODE ({lang}):
BEGIN_CODE
{code}
END_CODE

Focus on: (1) correctness and edge cases, (2) {lang} idioms, (3) performance, (4) readability, \
(5) interviewer follow-ups."""


def build_question_prompt(
    code: str, challenge: Challenge | None, user_progress: str = "", language: str = "go"
) -> str:
    lang = display_name(language)
    return f"""You are a technical interviewer. Respond ONLY with a JSON array of strings. \
No markdown, no prose outside the array.

CHALLENGE: {_title(challenge)}
USER PROGRESS: {user_progress}

CODE ({lang}):
BEGIN_CODE
{code}
END_CODE

Generate 3-5 follow-up questions that probe: deeper understanding, edge cases, optimizations, \
{lang}-specific concepts, and trade-offs."""


def build_hint_prompt(code: str, challenge: Challenge | None, hint_level: int = 1, context: str = "") -> str:
    """Build a hint prompt; levels outside 1..4 are clamped."""
    level = min(max(hint_level, 1), len(HINT_LEVELS))
    # A caller-supplied context (e.g. "Gin routing: add a /health endpoint")
    # is more specific than the challenge title.
    challenge_info = context or _title(challenge)
    return f"""You are a helpful coding mentor. Return only the hint text as plain text. No JSON, no code fences.

CHALLENGE CONTEXT: {challenge_info}
CURRENT CODE:
{code}

Provide {HINT_LEVELS[level]} (level {level}/{len(HINT_LEVELS)}). Be encouraging and educational, \
not just giving the answer.

Important: Use the CHALLENGE CONTEXT above to understand what specific challenge the student is working on. \
If it mentions a specific framework or library, provide hints specific to it.

Return only the hint text."""


def _history_section(history: Sequence[ChatMessage]) -> str:
    if not history:
        return ""
    lines = ["", "Conversation History:"]
    for msg in list(history)[-CHAT_HISTORY_LIMIT:]:
        role = "Mentor" if msg.role == "assistant" else "User"
        lines.append(f"{role}: {msg.content}")
    return "\n".join(lines) + "\n"


def build_chat_prompt(
    message: str,
    challenge: Challenge | None = None,
    history: Sequence[ChatMessage] = (),
    code_context: str = "",
    language: str = "go",
) -> str:
    lang = display_name(language)
    challenge_line = f"Current Challenge: {challenge.title}" if challenge is not None else ""

    has_code = bool(code_context.strip())
    code_section = f"\nUser's Current Code:\n```{language}\n{code_context}\n```" if has_code else ""

    if has_code:
        code_awareness = """
- I can see the user's current code above, so refer to it directly when relevant
- Point out specific parts of their code when giving feedback
- Suggest improvements to their existing code rather than asking them to paste it"""
    else:
        code_awareness = """
- The user hasn't written any code yet, or I can't see their current code
- If they ask about their code, let them know I can see their code in the editor, \
but if they prefer, they can paste it here"""

    return f"""You are a friendly and knowledgeable {lang} programming mentor. \
You're helping a student learn {lang} through hands-on coding challenges.

CONTEXT:
{challenge_line}{code_section}{_history_section(history)}

STUDENT'S QUESTION: {message}

INSTRUCTIONS:
- Be encouraging and supportive
- Give clear, practical explanations with examples when helpful
- If discussing code, provide {lang} code snippets when relevant
- When showing code examples, use triple backticks with "{language}" directly after (not on separate line)
- Keep responses concise but thorough (aim for 2-3 paragraphs)
- If the student is struggling, break down concepts into smaller steps
- Relate answers back to the current challenge when possible
- If asked about non-programming topics, gently redirect to programming{code_awareness}

Respond naturally as a helpful mentor would in a conversation."""


def follow_up_suggestions(message: str) -> list[str]:
    """Suggest up to three follow-up chips based on what the student asked."""
    lowered = message.lower()
    suggestions: list[str] = []

    if "explain" in lowered or "what" in lowered:
        suggestions += ["Can you show me an example?", "How would I implement this?"]
    if "error" in lowered or "problem" in lowered:
        suggestions += ["How can I debug this?", "What's the best practice here?"]
    if "optimize" in lowered or "performance" in lowered:
        suggestions += ["What's the time complexity?", "Are there other approaches?"]

    if not suggestions:
        suggestions = ["Can you explain this more?", "Show me best practices", "Help with the current challenge"]

    return suggestions[:MAX_SUGGESTIONS]


def context_description(challenge: Challenge | None, language: str = "go") -> str:
    if challenge is None:
        return f"General {display_name(language)} programming discussion"
    return f"Working on: {challenge.title}"
