"""
Error handling.

Custom exception classes for consistent error handling across the pipeline.
"""

from typing import Optional


class PipelineError(Exception):
    """Base exception for all pipeline errors."""

    def __init__(
        self,
        message: str,
        run_id: Optional[str] = None,
        code: Optional[str] = None
    ):
        """
        Initialize pipeline error.

        Args:
            message: Error message
            run_id: Optional run ID associated with the error
            code: Optional error code for categorization
        """
        self.message = message
        self.run_id = run_id
        self.code = code
        super().__init__(self.message)


class ConfigError(PipelineError):
    """Configuration errors (missing env vars, invalid settings)."""
    pass


class ValidationError(PipelineError):
    """Input validation errors."""
    pass


class GenerationError(PipelineError):
    """Generative service returned no usable structured payload."""
    pass


class RenderError(PipelineError):
    """Base class for failures of a single render attempt."""
    pass


class SourceFormatError(RenderError):
    """Scene entry name cannot be derived from generated source."""
    pass


class RenderTimeoutError(RenderError):
    """Renderer exceeded its wall-clock timeout."""
    pass


class RenderExecutionError(RenderError):
    """Renderer exited with a failure."""

    def __init__(
        self,
        message: str,
        diagnostics: Optional[str] = None,
        run_id: Optional[str] = None,
        code: Optional[str] = None
    ):
        """
        Initialize render execution error.

        Args:
            message: Error message
            diagnostics: Diagnostic text emitted by the renderer, verbatim
            run_id: Optional run ID associated with the error
            code: Optional error code for categorization
        """
        self.diagnostics = diagnostics
        super().__init__(message, run_id, code)


class MuxError(PipelineError):
    """Base class for video concatenation failures."""
    pass


class MissingArtifactError(MuxError):
    """An input media file does not exist at mux time."""

    def __init__(
        self,
        message: str,
        path: Optional[str] = None,
        run_id: Optional[str] = None,
        code: Optional[str] = None
    ):
        self.path = path
        super().__init__(message, run_id, code)


class MuxExecutionError(MuxError):
    """Muxer exited with a failure."""

    def __init__(
        self,
        message: str,
        diagnostics: Optional[str] = None,
        run_id: Optional[str] = None,
        code: Optional[str] = None
    ):
        self.diagnostics = diagnostics
        super().__init__(message, run_id, code)


__all__ = [
    "PipelineError",
    "ConfigError",
    "ValidationError",
    "GenerationError",
    "RenderError",
    "SourceFormatError",
    "RenderTimeoutError",
    "RenderExecutionError",
    "MuxError",
    "MissingArtifactError",
    "MuxExecutionError",
]
