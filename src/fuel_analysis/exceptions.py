"""
Exceptions raised by the fuel analysis pipeline.

Every error carries the name of the pipeline stage it came from once the
orchestrator has seen it, so the final message says where the run stopped.
"""

from typing import Optional


class PipelineError(Exception):
    """Base class for pipeline failures."""

    def __init__(self, message: str, stage: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.stage = stage

    def __str__(self) -> str:
        if self.stage:
            return f"[{self.stage}] {self.message}"
        return self.message


class DataLoadError(PipelineError):
    """The input CSV is missing, unreadable, or has malformed columns."""


class ValidationError(PipelineError):
    """Data or model state that the next statistical step cannot accept."""


class PlotWriteError(PipelineError, IOError):
    """A plot directory or image file could not be written."""
