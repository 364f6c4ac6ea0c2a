"""
FFmpeg concat adapter.

Concatenate chapter videos in order with the concat demuxer and stream copy.
"""

import asyncio
import os
import tempfile
from typing import List, Optional

from shared.config import Settings, settings as default_settings
from shared.errors import MissingArtifactError, MuxExecutionError, ValidationError
from shared.logging import get_logger

logger = get_logger("muxer")


def build_manifest(video_files: List[str]) -> str:
    """
    Build an ffmpeg concat manifest.

    Args:
        video_files: Ordered video paths

    Returns:
        Manifest text, one `file '<path>'` line per input
    """
    lines = []
    for path in video_files:
        escaped = os.path.abspath(path).replace("'", "'\\''")
        lines.append(f"file '{escaped}'")
    return "\n".join(lines) + "\n"


class FFmpegMuxer:
    """Concatenate media files into one output without re-encoding."""

    def __init__(self, config: Optional[Settings] = None) -> None:
        self.config = config or default_settings
        self.binary = self.config.ffmpeg_binary
        self.timeout = self.config.mux_timeout

    def build_command(self, manifest_path: str, output_path: str) -> list:
        return [
            self.binary,
            "-y",
            "-f", "concat",
            "-safe", "0",
            "-i", manifest_path,
            "-c", "copy",
            output_path,
        ]

    async def combine(self, video_files: List[str], output_path: str) -> str:
        """
        Combine video files into a single output, in the given order.

        Args:
            video_files: Ordered, non-empty list of existing video paths
            output_path: Destination file

        Returns:
            output_path

        Raises:
            ValidationError: If no video files are given
            MissingArtifactError: If an input does not exist
            MuxExecutionError: If ffmpeg fails
        """
        if not video_files:
            raise ValidationError("No video files to combine")

        for path in video_files:
            if not os.path.isfile(path):
                raise MissingArtifactError(f"Video file not found: {path}", path=path)

        logger.info(f"Combining {len(video_files)} video files into {output_path}")

        manifest_file = tempfile.NamedTemporaryFile(
            mode="w", delete=False, suffix=".txt", prefix="concat_", encoding="utf-8"
        )
        try:
            manifest_file.write(build_manifest(video_files))
            manifest_file.close()

            await self._run(self.build_command(manifest_file.name, output_path))

            if not os.path.isfile(output_path):
                raise MuxExecutionError(f"FFmpeg produced no output at {output_path}")

            logger.info(f"Final video created: {output_path}")
            return output_path

        finally:
            manifest_file.close()
            if os.path.exists(manifest_file.name):
                try:
                    os.unlink(manifest_file.name)
                    logger.debug(f"Deleted concat manifest: {manifest_file.name}")
                except OSError as e:
                    logger.warning(f"Failed to delete concat manifest: {str(e)}")

    async def _run(self, cmd: list) -> None:
        logger.debug(f"Running: {' '.join(cmd)}")
        try:
            proc = await asyncio.create_subprocess_exec(
                *cmd,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
            )
        except FileNotFoundError as e:
            raise MuxExecutionError(
                f"FFmpeg executable not found: {self.binary}", diagnostics=str(e)
            ) from e

        try:
            stdout, stderr = await asyncio.wait_for(proc.communicate(), timeout=self.timeout)
        except asyncio.TimeoutError:
            try:
                proc.kill()
            except ProcessLookupError:
                pass
            await proc.wait()
            raise MuxExecutionError(f"FFmpeg timed out after {self.timeout}s")

        stderr_text = stderr.decode("utf-8", errors="replace") if stderr else ""
        if stderr_text:
            logger.debug(f"FFmpeg stderr:\n{stderr_text}")

        if proc.returncode != 0:
            raise MuxExecutionError(
                f"FFmpeg concat failed (exit code {proc.returncode})",
                diagnostics=stderr_text or None,
            )
