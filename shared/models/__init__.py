"""
Data models for the video generation pipeline.

This module exports all Pydantic models used across pipeline modules.
"""

from .video import (
    Attempt,
    ChapterResult,
    ChapterSpec,
    Outline,
    RunConfig,
    SceneCode,
    VideoGenerationResult,
)

__all__ = [
    # Outline models
    "ChapterSpec",
    "Outline",
    # Generation models
    "SceneCode",
    "Attempt",
    # Result models
    "ChapterResult",
    "VideoGenerationResult",
    # Run configuration
    "RunConfig",
]
