"""
Per-chapter generate -> render -> repair loop.

Attempt 0 asks the generative service for fresh scene code. Every later
attempt asks it to fix the previous attempt's source using that attempt's
own failure text. Generation and render failures both consume one attempt.
The loop stops at the first successful render or after max_retries + 1
attempts.
"""

from typing import Optional

from shared.errors import GenerationError, RenderError
from shared.logging import get_logger
from shared.models import Attempt, ChapterResult, ChapterSpec, RunConfig

logger = get_logger("chapter_generator")


def failure_text(error: Exception) -> str:
    """
    Text handed to the next fix request for a failed attempt.

    Renderer diagnostics are passed verbatim when present; otherwise the
    error message is used.
    """
    diagnostics = getattr(error, "diagnostics", None)
    if diagnostics:
        return diagnostics
    return str(error)


async def generate_chapter(
    chapter: ChapterSpec,
    chapter_index: int,
    config: RunConfig,
    service,
    renderer
) -> ChapterResult:
    """
    Produce a rendered video for one chapter.

    Args:
        chapter: Chapter title and explanation
        chapter_index: 0-based position in the outline
        config: Run configuration (retry budget, render timeout)
        service: Generative service client
        renderer: Renderer adapter

    Returns:
        ChapterResult, successful with a video path or failed with the last
        failure text
    """
    chapter_number = chapter_index + 1
    max_attempts = config.max_retries + 1
    previous: Optional[Attempt] = None

    logger.info(f"Processing chapter {chapter_number}: {chapter.title}")
    logger.debug(f"Chapter explanation: {chapter.explanation}")

    for number in range(max_attempts):
        # A failed generation carries forward the source it was asked to fix.
        attempt = Attempt(number=number, code=previous.code if previous else "")

        try:
            if previous is not None:
                logger.info(
                    f"Attempting to fix Manim code for chapter {chapter_number} "
                    f"(attempt {number + 1}/{max_attempts})..."
                )
                scene = await service.produce_fixed_code(previous.error, previous.code)
            else:
                scene = await service.produce_chapter_code(chapter.title, chapter.explanation)
            attempt.code = scene.code

            video_file = await renderer.render(scene, chapter_number, timeout=config.render_timeout)

        except (GenerationError, RenderError) as e:
            attempt.error = failure_text(e)
            logger.error(
                f"Chapter {chapter_number} attempt {number + 1}/{max_attempts} failed: {str(e)}",
                extra={"error_type": type(e).__name__}
            )
            previous = attempt
            continue

        logger.info(f"Video file created for chapter {chapter_number}: {video_file}")
        return ChapterResult(
            chapter_index=chapter_index,
            chapter_title=chapter.title,
            video_file=video_file,
            success=True,
            attempts=number + 1,
        )

    logger.error(
        f"Failed to generate video for chapter {chapter_number} after {max_attempts} attempts"
    )
    return ChapterResult(
        chapter_index=chapter_index,
        chapter_title=chapter.title,
        video_file=None,
        success=False,
        error=previous.error if previous else "Unknown error",
        attempts=max_attempts,
    )
