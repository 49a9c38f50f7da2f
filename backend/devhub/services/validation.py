"""
DevHub Backend — Record Validation
====================================

What:  Business-rule checks on incoming records, run before any store call.
Why:   The schemas only describe shapes. Required-ness ("present and not
       blank") and ranges live here, so a bad record is rejected as a
       ValidationError (400) that names the offending field.
How:   One function per record type; each raises on the first problem found.
"""

from typing import Any

from devhub.exceptions import ValidationError
from devhub.schemas.learning_note import LearningNote
from devhub.schemas.portfolio import PortfolioLink
from devhub.schemas.snippet import CodeSnippet

MIN_DIFFICULTY = 1
MAX_DIFFICULTY = 5


def require_text(value: Any, field: str) -> None:
    """Reject None, empty and whitespace-only strings."""
    if value is None or not str(value).strip():
        raise ValidationError(message=f"{field} is required", field=field)


def require_value(value: Any, field: str) -> None:
    if value is None:
        raise ValidationError(message=f"{field} is required", field=field)


def validate_portfolio_link(link: PortfolioLink) -> None:
    require_text(link.title, "title")
    require_text(link.url, "url")
    require_value(link.order, "order")


def validate_snippet(snippet: CodeSnippet) -> None:
    require_text(snippet.title, "title")
    require_text(snippet.code, "code")
    require_text(snippet.language, "language")


def validate_learning_note(note: LearningNote) -> None:
    require_text(note.title, "title")
    require_text(note.content, "content")
    level = note.difficulty_level
    if level is not None and not MIN_DIFFICULTY <= level <= MAX_DIFFICULTY:
        raise ValidationError(
            message=(
                f"difficultyLevel must be between {MIN_DIFFICULTY} and {MAX_DIFFICULTY}, got {level}"
            ),
            field="difficultyLevel",
            context={"min": MIN_DIFFICULTY, "max": MAX_DIFFICULTY, "value": level},
        )
