"""
Errors raised by the pronunciation stage.

Collaborator failures (segmentation, context building, prediction) are not
wrapped; they propagate unchanged.
"""
from typing import Optional


class MalformedTranscriptionError(ValueError):
    """A word transcription cannot be split into syllables."""

    def __init__(self, message: str, *, transcription: str, syllable_index: Optional[int] = None):
        self.transcription = transcription
        self.syllable_index = syllable_index
        if syllable_index is not None:
            message = f"{message} (syllable {syllable_index} of {transcription!r})"
        else:
            message = f"{message} ({transcription!r})"
        super().__init__(message)
