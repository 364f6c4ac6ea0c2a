"""
Validation utilities.

Shared validation utilities for run options supplied by the caller.
"""

from typing import Any

from shared.errors import ValidationError

MIN_CHAPTERS = 1
MAX_CHAPTERS = 3


def validate_concept(
    concept: Any,
    max_length: int = 2000
) -> str:
    """
    Validate a video concept.

    Args:
        concept: Concept text to validate
        max_length: Maximum length in characters (default: 2000)

    Returns:
        Concept with surrounding whitespace removed

    Raises:
        ValidationError: If concept is invalid
    """
    if concept is None:
        raise ValidationError("Concept is required")

    if not isinstance(concept, str):
        raise ValidationError("Concept must be a string")

    concept = concept.strip()
    if not concept:
        raise ValidationError("Concept is required")

    if len(concept) > max_length:
        raise ValidationError(
            f"Concept must be at most {max_length} characters long "
            f"(current: {len(concept)})"
        )

    return concept


def validate_chapter_count(chapters: Any) -> int:
    """
    Validate the requested number of chapters.

    Raises:
        ValidationError: If the count is not an integer between 1 and 3
    """
    if isinstance(chapters, bool) or not isinstance(chapters, int):
        raise ValidationError("Chapters must be a number between 1 and 3")

    if chapters < MIN_CHAPTERS or chapters > MAX_CHAPTERS:
        raise ValidationError(
            f"Chapters must be a number between {MIN_CHAPTERS} and {MAX_CHAPTERS}"
        )

    return chapters


def validate_max_retries(retries: Any) -> int:
    """
    Validate the per-chapter retry budget.

    Raises:
        ValidationError: If retries is not a non-negative integer
    """
    if isinstance(retries, bool) or not isinstance(retries, int) or retries < 0:
        raise ValidationError("Retries must be a non-negative number")
    return retries


def validate_timeout(timeout: Any) -> float:
    """
    Validate a timeout in seconds.

    Raises:
        ValidationError: If timeout is not a positive number
    """
    if isinstance(timeout, bool) or not isinstance(timeout, (int, float)) or timeout <= 0:
        raise ValidationError("Timeout must be a positive number of seconds")
    return float(timeout)
