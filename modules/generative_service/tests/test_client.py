"""
Unit tests for the generative service client.
"""

import json
import pytest
from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

from openai import OpenAIError

from modules.generative_service.client import GenerativeServiceClient, strip_code_fences
from modules.generative_service.prompts import (
    CODE_TOOL,
    FIX_TOOL,
    MAX_OUTLINE_CHAPTERS,
    OUTLINE_TOOL,
)
from shared.config import Settings
from shared.errors import GenerationError, ValidationError
from shared.models import Outline, SceneCode


def make_response(name, arguments, tool_type="function"):
    """Build a chat completion response carrying one tool call."""
    if not isinstance(arguments, str):
        arguments = json.dumps(arguments)
    tool_call = SimpleNamespace(
        type=tool_type,
        function=SimpleNamespace(name=name, arguments=arguments),
    )
    message = SimpleNamespace(content=None, tool_calls=[tool_call])
    return SimpleNamespace(
        choices=[SimpleNamespace(message=message)],
        usage=SimpleNamespace(prompt_tokens=10, completion_tokens=20),
    )


@pytest.fixture
def openai_client():
    client = MagicMock()
    client.chat.completions.create = AsyncMock()
    return client


@pytest.fixture
def service(openai_client):
    config = Settings(openai_api_key="sk-test", openai_model="test-model", openai_temperature=0.7)
    return GenerativeServiceClient(config=config, client=openai_client)


def outline_payload(count):
    return {
        "title": "Understanding Derivatives",
        "chapters": [
            {"title": f"Chapter {i}", "explanation": f"Explain part {i}"}
            for i in range(1, count + 1)
        ],
    }


class TestProduceOutline:
    """Test outline requests."""

    @pytest.mark.asyncio
    async def test_outline_success(self, service, openai_client):
        openai_client.chat.completions.create.return_value = make_response(
            OUTLINE_TOOL, outline_payload(2)
        )

        outline = await service.produce_outline("derivatives")

        assert isinstance(outline, Outline)
        assert outline.title == "Understanding Derivatives"
        assert [c.title for c in outline.chapters] == ["Chapter 1", "Chapter 2"]

    @pytest.mark.asyncio
    async def test_outline_request_shape(self, service, openai_client):
        openai_client.chat.completions.create.return_value = make_response(
            OUTLINE_TOOL, outline_payload(1)
        )

        await service.produce_outline("derivatives")

        kwargs = openai_client.chat.completions.create.call_args.kwargs
        assert kwargs["model"] == "test-model"
        assert kwargs["temperature"] == 0.7
        assert kwargs["tool_choice"] == {"type": "function", "function": {"name": OUTLINE_TOOL}}
        assert kwargs["messages"][0]["role"] == "system"
        assert "derivatives" in kwargs["messages"][1]["content"]

    @pytest.mark.asyncio
    async def test_outline_capped_by_service_policy(self, service, openai_client):
        openai_client.chat.completions.create.return_value = make_response(
            OUTLINE_TOOL, outline_payload(5)
        )

        outline = await service.produce_outline("derivatives")

        assert len(outline.chapters) == MAX_OUTLINE_CHAPTERS

    @pytest.mark.asyncio
    async def test_outline_without_chapters_fails(self, service, openai_client):
        openai_client.chat.completions.create.return_value = make_response(
            OUTLINE_TOOL, {"title": "Empty", "chapters": []}
        )

        with pytest.raises(GenerationError):
            await service.produce_outline("derivatives")

    @pytest.mark.asyncio
    async def test_outline_missing_explanation_fails(self, service, openai_client):
        openai_client.chat.completions.create.return_value = make_response(
            OUTLINE_TOOL, {"title": "T", "chapters": [{"title": "only a title"}]}
        )

        with pytest.raises(GenerationError):
            await service.produce_outline("derivatives")

    @pytest.mark.asyncio
    async def test_empty_concept_rejected(self, service, openai_client):
        with pytest.raises(ValidationError):
            await service.produce_outline("   ")

        openai_client.chat.completions.create.assert_not_called()


class TestUnusablePayloads:
    """Every unusable response is a GenerationError."""

    @pytest.mark.asyncio
    async def test_no_tool_call(self, service, openai_client):
        message = SimpleNamespace(content="Sure! Here is the code", tool_calls=None)
        openai_client.chat.completions.create.return_value = SimpleNamespace(
            choices=[SimpleNamespace(message=message)], usage=None
        )

        with pytest.raises(GenerationError) as exc_info:
            await service.produce_chapter_code("Intro", "Explain")

        assert "function call" in str(exc_info.value)

    @pytest.mark.asyncio
    async def test_no_choices(self, service, openai_client):
        openai_client.chat.completions.create.return_value = SimpleNamespace(choices=[], usage=None)

        with pytest.raises(GenerationError):
            await service.produce_outline("derivatives")

    @pytest.mark.asyncio
    async def test_malformed_json(self, service, openai_client):
        openai_client.chat.completions.create.return_value = make_response(
            CODE_TOOL, '{"code": "class A(Scene):'
        )

        with pytest.raises(GenerationError) as exc_info:
            await service.produce_chapter_code("Intro", "Explain")

        assert "Malformed" in str(exc_info.value)

    @pytest.mark.asyncio
    async def test_wrong_tool(self, service, openai_client):
        openai_client.chat.completions.create.return_value = make_response(
            OUTLINE_TOOL, {"code": "x"}
        )

        with pytest.raises(GenerationError):
            await service.produce_chapter_code("Intro", "Explain")

    @pytest.mark.asyncio
    async def test_empty_code(self, service, openai_client):
        openai_client.chat.completions.create.return_value = make_response(
            CODE_TOOL, {"code": "   ", "scene_name": "A"}
        )

        with pytest.raises(GenerationError):
            await service.produce_chapter_code("Intro", "Explain")

    @pytest.mark.asyncio
    async def test_sdk_error_wrapped(self, service, openai_client):
        openai_client.chat.completions.create.side_effect = OpenAIError("connection reset")

        with pytest.raises(GenerationError) as exc_info:
            await service.produce_fixed_code("err", "code")

        assert "connection reset" in str(exc_info.value)


class TestSceneCode:
    """Test code and fix requests."""

    @pytest.mark.asyncio
    async def test_chapter_code_returns_scene_name(self, service, openai_client):
        code = "from manim import *\n\nclass Intro(Scene):\n    def construct(self):\n        pass\n"
        openai_client.chat.completions.create.return_value = make_response(
            CODE_TOOL, {"code": code, "scene_name": "Intro"}
        )

        scene = await service.produce_chapter_code("Intro", "Explain")

        assert isinstance(scene, SceneCode)
        assert scene.code == code
        assert scene.scene_name == "Intro"
        user_prompt = openai_client.chat.completions.create.call_args.kwargs["messages"][1]["content"]
        assert "Chapter Title: Intro" in user_prompt
        assert "Explain" in user_prompt

    @pytest.mark.asyncio
    async def test_fix_prompt_keeps_error_and_code_distinct(self, service, openai_client):
        openai_client.chat.completions.create.return_value = make_response(
            FIX_TOOL, {"code": "class Fixed(Scene): pass", "scene_name": "Fixed"}
        )

        scene = await service.produce_fixed_code("NameError: name 'Circl' is not defined", "Circl()")

        assert scene.scene_name == "Fixed"
        kwargs = openai_client.chat.completions.create.call_args.kwargs
        user_prompt = kwargs["messages"][1]["content"]
        assert "Error:\nNameError: name 'Circl' is not defined" in user_prompt
        assert "Current Code:\nCircl()" in user_prompt
        assert kwargs["tool_choice"]["function"]["name"] == FIX_TOOL

    @pytest.mark.asyncio
    async def test_missing_scene_name_allowed(self, service, openai_client):
        openai_client.chat.completions.create.return_value = make_response(
            CODE_TOOL, {"code": "class A(Scene): pass"}
        )

        scene = await service.produce_chapter_code("Intro", "Explain")

        assert scene.scene_name is None


class TestStripCodeFences:
    def test_fenced_python(self):
        assert strip_code_fences("```python\nprint(1)\n```") == "print(1)\n"

    def test_bare_fence(self):
        assert strip_code_fences("```\nprint(1)\n```\n") == "print(1)\n"

    def test_unfenced_untouched(self):
        assert strip_code_fences("print(1)\n") == "print(1)\n"
