"""
Muxer Module.

Concatenate chapter videos into the final output file.
"""

from modules.muxer.concat import FFmpegMuxer, build_manifest
from shared.errors import MissingArtifactError, MuxError, MuxExecutionError

__all__ = [
    "FFmpegMuxer",
    "build_manifest",
    "MuxError",
    "MissingArtifactError",
    "MuxExecutionError",
]
