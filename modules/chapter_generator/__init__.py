"""
Chapter Generator Module.

Bounded generate -> render -> repair loop for a single chapter.
"""

from modules.chapter_generator.generator import failure_text, generate_chapter

__all__ = [
    "generate_chapter",
    "failure_text",
]
