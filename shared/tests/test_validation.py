"""
Tests for validation utilities.
"""

import pytest
from shared.validation import (
    validate_chapter_count,
    validate_concept,
    validate_max_retries,
    validate_timeout,
)
from shared.errors import ValidationError


def test_validate_concept_valid():
    """Test validation of valid concept."""
    assert validate_concept("  derivatives in calculus  ") == "derivatives in calculus"


def test_validate_concept_empty():
    """Test validation fails for empty or whitespace concept."""
    for value in ("", "   \n\t", None):
        with pytest.raises(ValidationError) as exc_info:
            validate_concept(value)
        assert "required" in str(exc_info.value).lower()


def test_validate_concept_not_string():
    with pytest.raises(ValidationError):
        validate_concept(42)


def test_validate_concept_too_long():
    """Test validation fails for concept that's too long."""
    with pytest.raises(ValidationError) as exc_info:
        validate_concept("A" * 120, max_length=100)

    assert "at most 100" in str(exc_info.value)


@pytest.mark.parametrize("count", [1, 2, 3])
def test_validate_chapter_count_valid(count):
    assert validate_chapter_count(count) == count


@pytest.mark.parametrize("count", [0, 4, -1, "2", 2.0, True])
def test_validate_chapter_count_invalid(count):
    with pytest.raises(ValidationError) as exc_info:
        validate_chapter_count(count)

    assert "between 1 and 3" in str(exc_info.value)


def test_validate_max_retries():
    """Zero retries is a legal budget; negatives are not."""
    assert validate_max_retries(0) == 0
    assert validate_max_retries(5) == 5

    for value in (-1, "2", False):
        with pytest.raises(ValidationError):
            validate_max_retries(value)


def test_validate_timeout():
    assert validate_timeout(60) == 60.0
    assert isinstance(validate_timeout(1), float)
    assert validate_timeout(0.5) == 0.5

    for value in (0, -3, "60", None, True):
        with pytest.raises(ValidationError):
            validate_timeout(value)
