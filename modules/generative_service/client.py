"""
OpenAI tool-calling client for outline, scene code and code-fix requests.

Every request forces a single function call and parses its arguments into a
strongly-shaped result. Failures are raised as GenerationError and are not
retried here; repair policy lives in the chapter generator.
"""

import json
import re
from typing import Any, Dict, List, Optional

from openai import AsyncOpenAI, OpenAIError
from pydantic import ValidationError as PydanticValidationError

from shared.config import Settings, settings as default_settings
from shared.errors import GenerationError, ValidationError
from shared.logging import get_logger
from shared.models import Outline, SceneCode

from modules.generative_service.prompts import (
    CODE_SYSTEM_PROMPT,
    CODE_TOOL,
    CODE_TOOLS,
    CODE_USER_TEMPLATE,
    FIX_SYSTEM_PROMPT,
    FIX_TOOL,
    FIX_TOOLS,
    FIX_USER_TEMPLATE,
    MAX_OUTLINE_CHAPTERS,
    OUTLINE_SYSTEM_PROMPT,
    OUTLINE_TOOL,
    OUTLINE_TOOLS,
    OUTLINE_USER_TEMPLATE,
)

logger = get_logger("generative_service")

_FENCE_PATTERN = re.compile(r"^```[A-Za-z0-9_+-]*[ \t]*\n(.*?)\n?```$", re.DOTALL)


def strip_code_fences(code: str) -> str:
    """
    Remove a surrounding markdown code fence, if any.

    Args:
        code: Source text as returned by the model

    Returns:
        Source text without the fence
    """
    stripped = code.strip()
    match = _FENCE_PATTERN.match(stripped)
    if match:
        return match.group(1).strip() + "\n"
    return code


class GenerativeServiceClient:
    """Client for the structured-generation backend."""

    def __init__(
        self,
        config: Optional[Settings] = None,
        client: Optional[AsyncOpenAI] = None
    ) -> None:
        self.config = config or default_settings
        self._client = client

    @property
    def client(self) -> AsyncOpenAI:
        if self._client is None:
            try:
                self._client = AsyncOpenAI(
                    api_key=self.config.openai_api_key,
                    base_url=self.config.openai_base_url,
                    timeout=self.config.openai_timeout,
                    max_retries=self.config.openai_max_retries,
                )
            except OpenAIError as e:
                raise GenerationError(f"Failed to create OpenAI client: {str(e)}") from e
        return self._client

    async def produce_outline(self, concept: str) -> Outline:
        """
        Generate a video outline for a concept.

        Args:
            concept: Non-empty concept text

        Returns:
            Outline with at most MAX_OUTLINE_CHAPTERS chapters

        Raises:
            ValidationError: If concept is empty
            GenerationError: If no usable outline is returned
        """
        if not concept or not concept.strip():
            raise ValidationError("Concept is required")

        arguments = await self._call_tool(
            OUTLINE_SYSTEM_PROMPT,
            OUTLINE_USER_TEMPLATE.format(concept=concept),
            OUTLINE_TOOLS,
            OUTLINE_TOOL,
        )

        chapters = arguments.get("chapters")
        if not isinstance(chapters, list):
            raise GenerationError("Outline payload has no chapter list")
        if len(chapters) > MAX_OUTLINE_CHAPTERS:
            logger.info(
                f"Outline returned {len(chapters)} chapters, keeping first {MAX_OUTLINE_CHAPTERS}"
            )
            chapters = chapters[:MAX_OUTLINE_CHAPTERS]

        try:
            outline = Outline(title=arguments.get("title"), chapters=chapters)
        except PydanticValidationError as e:
            raise GenerationError(f"Outline payload failed validation: {str(e)}") from e

        logger.info(
            f"Outline generated: {outline.title}",
            extra={"chapters": len(outline.chapters)}
        )
        return outline

    async def produce_chapter_code(self, chapter_title: str, explanation: str) -> SceneCode:
        """
        Generate scene code for one chapter.

        Raises:
            GenerationError: If no usable code is returned
        """
        arguments = await self._call_tool(
            CODE_SYSTEM_PROMPT,
            CODE_USER_TEMPLATE.format(title=chapter_title, explanation=explanation),
            CODE_TOOLS,
            CODE_TOOL,
        )
        scene = self._scene_from_arguments(arguments)
        logger.debug(f'Generated Manim code for chapter "{chapter_title}":\n{scene.code}')
        return scene

    async def produce_fixed_code(self, error_text: str, current_code: str) -> SceneCode:
        """
        Ask for a repaired version of code that failed.

        Args:
            error_text: Failure text of the attempt that produced current_code
            current_code: Source of that same attempt

        Raises:
            GenerationError: If no usable code is returned
        """
        arguments = await self._call_tool(
            FIX_SYSTEM_PROMPT,
            FIX_USER_TEMPLATE.format(error=error_text, code=current_code),
            FIX_TOOLS,
            FIX_TOOL,
        )
        scene = self._scene_from_arguments(arguments)
        logger.debug(f"Fixed Manim code:\n{scene.code}")
        return scene

    def _scene_from_arguments(self, arguments: Dict[str, Any]) -> SceneCode:
        code = arguments.get("code")
        if not isinstance(code, str) or not code.strip():
            raise GenerationError("Code payload is empty")
        try:
            return SceneCode(code=strip_code_fences(code), scene_name=arguments.get("scene_name"))
        except PydanticValidationError as e:
            raise GenerationError(f"Code payload failed validation: {str(e)}") from e

    async def _call_tool(
        self,
        system_prompt: str,
        user_prompt: str,
        tools: List[dict],
        tool_name: str
    ) -> Dict[str, Any]:
        """
        Issue one forced tool call and return its parsed arguments.
        """
        try:
            response = await self.client.chat.completions.create(
                model=self.config.openai_model,
                messages=[
                    {"role": "system", "content": system_prompt},
                    {"role": "user", "content": user_prompt},
                ],
                tools=tools,
                tool_choice={"type": "function", "function": {"name": tool_name}},
                temperature=self.config.openai_temperature,
            )
        except OpenAIError as e:
            logger.error(f"Generative service request failed: {str(e)}", extra={"tool": tool_name})
            raise GenerationError(f"Generative service request failed: {str(e)}") from e

        usage = getattr(response, "usage", None)
        if usage is not None:
            logger.debug(
                "Generative service usage",
                extra={
                    "tool": tool_name,
                    "prompt_tokens": getattr(usage, "prompt_tokens", None),
                    "completion_tokens": getattr(usage, "completion_tokens", None),
                }
            )

        if not response.choices:
            raise GenerationError("Generative service returned no choices")

        tool_calls = response.choices[0].message.tool_calls
        if not tool_calls:
            raise GenerationError("Failed to get function call response from generative service")

        tool_call = tool_calls[0]
        if tool_call.type != "function" or tool_call.function.name != tool_name:
            raise GenerationError(f"Generative service did not call {tool_name}")

        try:
            arguments = json.loads(tool_call.function.arguments)
        except (TypeError, json.JSONDecodeError) as e:
            raise GenerationError(f"Malformed function arguments: {str(e)}") from e

        if not isinstance(arguments, dict):
            raise GenerationError("Function arguments are not a JSON object")

        return arguments
