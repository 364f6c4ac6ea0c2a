"""
Manim rendering adapter.

Persist scene source to a scratch file, run Manim with the draft profile
and caching disabled, and locate the produced video by naming convention.
"""

import asyncio
import os
import signal
import time
from typing import Optional, Union

from shared.config import Settings, settings as default_settings
from shared.errors import RenderExecutionError, RenderTimeoutError
from shared.logging import get_logger
from shared.models import SceneCode

from modules.renderer.scene_names import expected_video_path, module_name, resolve_scene_name

logger = get_logger("renderer")

# Draft profile: low quality, no cache. Every chapter uses the same profile
# so their videos can be concatenated without re-encoding.
QUALITY_FLAG = "-ql"


def _decode(output: Optional[bytes]) -> str:
    if not output:
        return ""
    return output.decode("utf-8", errors="replace")


def _kill_process_group(proc) -> None:
    """Kill the renderer together with the LaTeX and ffmpeg children it spawned."""
    try:
        if hasattr(os, "killpg"):
            os.killpg(proc.pid, signal.SIGKILL)
        else:
            proc.kill()
    except ProcessLookupError:
        pass


class ManimRenderer:
    """Render scene source into a chapter video."""

    def __init__(self, config: Optional[Settings] = None) -> None:
        self.config = config or default_settings
        self.binary = self.config.manim_binary
        self.scratch_dir = self.config.scratch_dir
        self.media_dir = self.config.media_dir

    def build_command(self, source_path: str, scene_name: str) -> list:
        return [
            self.binary,
            QUALITY_FLAG,
            "--disable_caching",
            "--media_dir", self.media_dir,
            source_path,
            scene_name,
        ]

    async def render(
        self,
        scene: Union[SceneCode, str],
        chapter_number: int,
        timeout: Optional[float] = None
    ) -> str:
        """
        Render scene source into a video file.

        Args:
            scene: Generated scene (or bare source text)
            chapter_number: 1-based chapter number
            timeout: Wall-clock limit in seconds (default: MANIM_TIMEOUT)

        Returns:
            Path to the rendered video

        Raises:
            SourceFormatError: If no entry name can be derived from the source
            RenderTimeoutError: If Manim exceeds the timeout
            RenderExecutionError: If Manim fails or produces no video
        """
        if isinstance(scene, str):
            scene = SceneCode(code=scene)
        timeout = timeout if timeout is not None else self.config.manim_timeout

        scene_name = resolve_scene_name(scene)
        video_path = expected_video_path(self.media_dir, chapter_number, scene_name)

        source_path = os.path.join(self.scratch_dir, f"{module_name(chapter_number)}.py")

        start_time = time.time()
        try:
            os.makedirs(self.scratch_dir, exist_ok=True)
            with open(source_path, "w", encoding="utf-8") as f:
                f.write(scene.code)

            # A stale video from an earlier attempt must not pass for this one.
            if os.path.exists(video_path):
                os.unlink(video_path)

            logger.info(
                f"Compiling Manim video for chapter {chapter_number}...",
                extra={"scene": scene_name}
            )
            await self._run(source_path, scene_name, chapter_number, timeout)

            if not os.path.isfile(video_path):
                raise RenderExecutionError(
                    f"Video file not found at expected path: {video_path}"
                )

            logger.info(
                f"Manim execution successful for chapter {chapter_number}: {video_path}",
                extra={"render_time": round(time.time() - start_time, 2)}
            )
            return video_path

        except OSError as e:
            raise RenderExecutionError(
                f"Manim execution failed for chapter {chapter_number}: {str(e)}"
            ) from e

        finally:
            if os.path.exists(source_path):
                try:
                    os.unlink(source_path)
                    logger.debug(f"Deleted scratch source: {source_path}")
                except OSError as e:
                    logger.warning(f"Failed to delete scratch source: {str(e)}")

    async def _run(self, source_path: str, scene_name: str, chapter_number: int, timeout: float) -> None:
        cmd = self.build_command(source_path, scene_name)
        logger.debug(f"Running: {' '.join(cmd)}")

        try:
            proc = await asyncio.create_subprocess_exec(
                *cmd,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
                start_new_session=True,
            )
        except FileNotFoundError as e:
            raise RenderExecutionError(
                f"Manim executable not found: {self.binary}", diagnostics=str(e)
            ) from e

        try:
            stdout, stderr = await asyncio.wait_for(proc.communicate(), timeout=timeout)
        except asyncio.TimeoutError:
            _kill_process_group(proc)
            await proc.wait()
            raise RenderTimeoutError(
                f"Manim execution timed out for chapter {chapter_number} after {timeout:g}s"
            )

        stdout_text = _decode(stdout)
        stderr_text = _decode(stderr)
        if stdout_text:
            logger.debug(f"Manim stdout:\n{stdout_text}")
        if stderr_text:
            logger.debug(f"Manim stderr:\n{stderr_text}")

        if proc.returncode != 0:
            raise RenderExecutionError(
                f"Manim execution failed for chapter {chapter_number} (exit code {proc.returncode})",
                diagnostics=stderr_text or stdout_text or None,
            )
