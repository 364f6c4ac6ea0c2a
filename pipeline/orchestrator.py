"""
Pipeline orchestration logic.

Executes outline -> chapters -> combine sequentially, aggregates per-chapter
results and cleans up intermediate chapter videos.
"""

import os
import time
import uuid
from typing import List, Optional

from shared.config import Settings, settings as default_settings
from shared.errors import MuxError, PipelineError, ValidationError
from shared.logging import get_logger, set_run_id
from shared.models import ChapterResult, RunConfig, VideoGenerationResult

from modules.chapter_generator import generate_chapter
from modules.generative_service import GenerativeServiceClient
from modules.muxer import FFmpegMuxer
from modules.renderer import ManimRenderer

logger = get_logger(__name__)

NO_SUCCESSFUL_CHAPTERS = "no successful chapters"


def cleanup_files(files: List[str]) -> None:
    """
    Delete intermediate files, best effort.

    Failures are logged and never raised.

    Args:
        files: Paths to delete
    """
    for path in files:
        try:
            os.unlink(path)
            logger.debug(f"Deleted intermediate video file: {path}")
        except OSError as e:
            logger.warning(f"Error deleting intermediate video file {path}: {str(e)}")


class VideoPipeline:
    """Concept -> outline -> chapter videos -> combined video."""

    def __init__(
        self,
        config: Optional[Settings] = None,
        service: Optional[GenerativeServiceClient] = None,
        renderer: Optional[ManimRenderer] = None,
        muxer: Optional[FFmpegMuxer] = None
    ) -> None:
        self.config = config or default_settings
        self.service = service or GenerativeServiceClient(self.config)
        self.renderer = renderer or ManimRenderer(self.config)
        self.muxer = muxer or FFmpegMuxer(self.config)

    def resolve_output_path(self, output_path: str) -> str:
        """Absolute paths are kept; relative ones go under OUTPUT_DIR."""
        if os.path.isabs(output_path):
            return output_path
        return os.path.join(self.config.output_dir, output_path)

    async def run(self, run_config: RunConfig) -> VideoGenerationResult:
        """
        Execute the video generation pipeline.

        Always returns a complete result; failures are reported through
        `success`/`error` rather than raised.

        Args:
            run_config: Options for this run

        Returns:
            VideoGenerationResult
        """
        run_id = uuid.uuid4().hex[:8]
        set_run_id(run_id)
        start_time = time.time()

        chapter_results: List[ChapterResult] = []
        try:
            result = await self._execute(run_config, chapter_results)
        except Exception as e:
            logger.error("Pipeline execution failed", exc_info=e)
            result = VideoGenerationResult(
                success=False,
                chapters=list(chapter_results),
                error=f"Pipeline execution failed: {str(e)}",
            )

        logger.info(
            "Pipeline finished",
            extra={
                "success": result.success,
                "chapters": len(result.chapters),
                "elapsed": round(time.time() - start_time, 2),
            }
        )
        return result

    async def _execute(
        self,
        run_config: RunConfig,
        chapter_results: List[ChapterResult]
    ) -> VideoGenerationResult:
        logger.info(f"Generating video for concept: {run_config.concept}")

        # Stage 1: Output directory
        output_path = self.resolve_output_path(run_config.output_path)
        output_dir = os.path.dirname(output_path)
        if output_dir:
            os.makedirs(output_dir, exist_ok=True)

        # Stage 2: Outline (fatal on failure, never retried)
        try:
            outline = await self.service.produce_outline(run_config.concept)
        except PipelineError as e:
            logger.error(f"Outline generation failed: {str(e)}")
            return VideoGenerationResult(
                success=False,
                chapters=[],
                error=f"Outline generation failed: {str(e)}",
            )

        logger.info(f"Video outline generated: {outline.title}")
        logger.debug(f"Chapters: {len(outline.chapters)}")

        # Stage 3: Chapters, strictly in outline order
        selected = outline.select(run_config.chapter_count)
        for index, chapter in enumerate(selected):
            result = await generate_chapter(
                chapter,
                index,
                run_config,
                service=self.service,
                renderer=self.renderer,
            )
            chapter_results.append(result)

        video_files = [r.video_file for r in chapter_results if r.success and r.video_file]

        if not video_files:
            logger.warning("No video files were generated")
            return VideoGenerationResult(
                success=False,
                chapters=list(chapter_results),
                error=NO_SUCCESSFUL_CHAPTERS,
                title=outline.title,
            )

        # Stage 4: Combine successful chapters in chapter order
        try:
            await self.muxer.combine(video_files, output_path)
        except (MuxError, ValidationError) as e:
            diagnostics = getattr(e, "diagnostics", None)
            logger.error(
                f"Error combining videos: {str(e)}",
                extra={"diagnostics": diagnostics} if diagnostics else None
            )
            # Intermediate videos are kept for diagnosis.
            return VideoGenerationResult(
                success=False,
                chapters=list(chapter_results),
                error=str(e),
                title=outline.title,
            )

        # Stage 5: Cleanup
        cleanup_files(video_files)

        logger.info(f"Video generation complete: {output_path}")
        return VideoGenerationResult(
            success=True,
            output_path=output_path,
            chapters=list(chapter_results),
            title=outline.title,
        )


async def generate_video(
    run_config: RunConfig,
    pipeline: Optional[VideoPipeline] = None
) -> VideoGenerationResult:
    """
    Generate a complete video for a concept.

    Args:
        run_config: Options for this run
        pipeline: Pipeline to use (default: one built from settings)

    Returns:
        VideoGenerationResult
    """
    pipeline = pipeline or VideoPipeline()
    return await pipeline.run(run_config)
