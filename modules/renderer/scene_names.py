"""
Scene entry-name resolution and output path conventions.
"""

import os
import re
from typing import Optional

from shared.errors import SourceFormatError
from shared.models import SceneCode

# Manim's default video directory for the -ql draft profile.
QUALITY_DIR = "480p15"

_SCENE_CLASS_PATTERN = re.compile(
    r"^class\s+([A-Za-z_]\w*)\s*\([^)]*Scene[^)]*\)\s*:",
    re.MULTILINE
)


def extract_scene_name(code: str) -> Optional[str]:
    """
    Find the first top-level Scene subclass declared in source.

    Args:
        code: Scene source text

    Returns:
        Class name or None if not found
    """
    match = _SCENE_CLASS_PATTERN.search(code or "")
    return match.group(1) if match else None


def declares_class(code: str, name: str) -> bool:
    """Return True if `code` declares a top-level class called `name`."""
    pattern = re.compile(rf"^class\s+{re.escape(name)}\s*[(:]", re.MULTILINE)
    return bool(pattern.search(code or ""))


def resolve_scene_name(scene: SceneCode) -> str:
    """
    Resolve the entry name to render.

    The explicit scene_name wins when the source actually declares it;
    otherwise the first Scene subclass in the source is used.

    Raises:
        SourceFormatError: If no entry name can be derived
    """
    if scene.scene_name and declares_class(scene.code, scene.scene_name):
        return scene.scene_name

    name = extract_scene_name(scene.code)
    if name is None:
        raise SourceFormatError("Could not extract class name from Manim code")
    return name


def module_name(chapter_number: int) -> str:
    """Scratch module (file stem) used for a chapter's source."""
    return f"chapter_{chapter_number}"


def expected_video_path(media_dir: str, chapter_number: int, scene_name: str) -> str:
    """
    Path the renderer writes a chapter video to.

    Args:
        media_dir: Renderer media root
        chapter_number: 1-based chapter number
        scene_name: Rendered Scene class name

    Returns:
        <media_dir>/videos/chapter_<n>/480p15/<scene_name>.mp4
    """
    return os.path.join(
        media_dir, "videos", module_name(chapter_number), QUALITY_DIR, f"{scene_name}.mp4"
    )
