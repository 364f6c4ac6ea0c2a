"""
Command line entry point for concept-to-video runs.
"""

import asyncio
import sys
from typing import Optional

import click

from shared.config import settings, validate_config
from shared.errors import ConfigError, ValidationError
from shared.logging import configure_logging, get_logger
from shared.models import RunConfig, VideoGenerationResult
from shared.validation import MAX_CHAPTERS, MIN_CHAPTERS

from pipeline.orchestrator import VideoPipeline

logger = get_logger("cli")


def print_summary(result: VideoGenerationResult) -> None:
    """Print a per-chapter summary of a run."""
    if result.title:
        click.echo(f"Title: {result.title}")
    for chapter in result.chapters:
        status = "ok" if chapter.success else "failed"
        line = (
            f"  [{status}] chapter {chapter.chapter_index + 1}: {chapter.chapter_title} "
            f"({chapter.attempts} attempt{'s' if chapter.attempts != 1 else ''})"
        )
        click.echo(line)
    if result.success:
        click.echo(f"Video generated successfully: {result.output_path}")
    else:
        click.echo(f"Video generation failed: {result.error}", err=True)


@click.command(name="concept-video")
@click.option("--concept", "-c", required=True, help="The concept/topic for the video")
@click.option("--output", "-o", default="output.mp4", show_default=True, help="Output video file path")
@click.option(
    "--chapters", "-n",
    type=click.IntRange(MIN_CHAPTERS, MAX_CHAPTERS),
    default=MAX_CHAPTERS,
    show_default=True,
    help="Number of chapters",
)
@click.option(
    "--retries", "-r",
    type=click.IntRange(min=0),
    default=None,
    help="Maximum number of retries for failed chapters (default: MAX_RETRIES)",
)
@click.option(
    "--timeout",
    type=click.FloatRange(min=0, min_open=True),
    default=None,
    help="Render timeout in seconds (default: MANIM_TIMEOUT)",
)
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose logging")
@click.option("--json", "as_json", is_flag=True, help="Output results as JSON")
def main(
    concept: str,
    output: str,
    chapters: int,
    retries: Optional[int],
    timeout: Optional[float],
    verbose: bool,
    as_json: bool
) -> None:
    """AI-powered explanatory video generator using Manim and FFmpeg."""
    configure_logging("DEBUG" if verbose else settings.log_level)

    try:
        validate_config()
        run_config = RunConfig(
            concept=concept,
            output_path=output,
            chapter_count=chapters,
            max_retries=retries if retries is not None else settings.max_retries,
            render_timeout=timeout if timeout is not None else settings.manim_timeout,
        )
    except (ConfigError, ValidationError) as e:
        click.echo(f"Error: {e.message}", err=True)
        sys.exit(1)

    logger.info("Starting video generation...")
    logger.info(
        "Run options",
        extra={
            "output": run_config.output_path,
            "chapters": run_config.chapter_count,
            "max_retries": run_config.max_retries,
        }
    )

    result = asyncio.run(VideoPipeline().run(run_config))

    if as_json:
        click.echo(result.model_dump_json(indent=2))
    else:
        print_summary(result)

    sys.exit(0 if result.success else 1)


if __name__ == "__main__":
    main()
