"""
Video generation models.

Outline, generated scene source, per-chapter and whole-run results.
"""

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from shared.errors import ValidationError
from shared.validation import (
    validate_chapter_count,
    validate_concept,
    validate_max_retries,
    validate_timeout,
)


class ChapterSpec(BaseModel):
    """One chapter of the outline: a title and how to visualize it."""

    model_config = ConfigDict(frozen=True)

    title: str = Field(..., min_length=1, description="Title of the chapter")
    explanation: str = Field(..., min_length=1, description="Detailed explanation of the chapter content")


class Outline(BaseModel):
    """Video title plus ordered chapter specifications."""

    model_config = ConfigDict(frozen=True)

    title: str = Field(..., description="Title of the entire video")
    chapters: List[ChapterSpec] = Field(..., min_length=1, description="Ordered chapters")

    def select(self, count: int) -> List[ChapterSpec]:
        """
        Return the first `count` chapters, in outline order.

        Args:
            count: Requested number of chapters

        Returns:
            Prefix of length min(count, len(chapters))
        """
        return list(self.chapters[:max(0, min(count, len(self.chapters)))])


class SceneCode(BaseModel):
    """Generated scene source with its declared entry (scene class) name."""

    model_config = ConfigDict(frozen=True)

    code: str = Field(..., min_length=1, description="Complete scene source")
    scene_name: Optional[str] = Field(None, description="Name of the Scene class to render")

    @field_validator("scene_name")
    @classmethod
    def normalize_scene_name(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return None
        v = v.strip()
        return v or None


class Attempt(BaseModel):
    """State of one generate-or-fix + render cycle."""

    number: int
    code: str = ""
    error: Optional[str] = None


class ChapterResult(BaseModel):
    """Outcome of one chapter, created once when its retry loop ends."""

    model_config = ConfigDict(frozen=True)

    chapter_index: int
    chapter_title: str
    video_file: Optional[str] = None
    success: bool
    error: Optional[str] = None
    attempts: int = 0


class VideoGenerationResult(BaseModel):
    """Single return value of a whole run."""

    success: bool
    output_path: Optional[str] = None
    chapters: List[ChapterResult] = Field(default_factory=list)
    error: Optional[str] = None
    title: Optional[str] = None


class RunConfig(BaseModel):
    """Immutable options for one run, threaded through every stage."""

    model_config = ConfigDict(frozen=True)

    concept: str
    output_path: str = "output.mp4"
    chapter_count: int = 3
    max_retries: int = 2
    render_timeout: float = 60.0

    @field_validator("concept", mode="before")
    @classmethod
    def check_concept(cls, v):
        return validate_concept(v)

    @field_validator("output_path")
    @classmethod
    def check_output_path(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValidationError("Output path is required")
        return v.strip()

    @field_validator("chapter_count", mode="before")
    @classmethod
    def check_chapter_count(cls, v):
        return validate_chapter_count(v)

    @field_validator("max_retries", mode="before")
    @classmethod
    def check_max_retries(cls, v):
        return validate_max_retries(v)

    @field_validator("render_timeout", mode="before")
    @classmethod
    def check_render_timeout(cls, v):
        return validate_timeout(v)
