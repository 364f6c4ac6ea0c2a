"""
Generative Service Module.

Outline, scene-code and code-fix requests against an OpenAI-compatible backend.
"""

from modules.generative_service.client import GenerativeServiceClient, strip_code_fences
from modules.generative_service.prompts import MAX_OUTLINE_CHAPTERS
from shared.errors import GenerationError

__all__ = [
    "GenerativeServiceClient",
    "strip_code_fences",
    "MAX_OUTLINE_CHAPTERS",
    "GenerationError",
]
