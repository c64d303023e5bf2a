"""
Exceptions raised by handtrack.

Every failure surfaces as a subclass of `HandtrackError`; the underlying
library exception is chained as `__cause__`.
"""

from __future__ import annotations


class HandtrackError(RuntimeError):
    """Base class for all handtrack failures."""


class ModelIOError(HandtrackError):
    """The model artifact or its cache directory could not be read or written."""


class ModelDownloadError(HandtrackError):
    """Fetching the model artifact from the network failed."""


class GraphDecodeError(HandtrackError):
    """The model bytes are not a valid serialized frozen graph."""


class MissingOperationError(HandtrackError):
    """The loaded graph lacks an operation the detector needs."""

    def __init__(self, name: str) -> None:
        super().__init__(
            f"Graph has no operation named {name!r}; the model file is not a compatible hand detector."
        )
        self.name = name


class InferenceError(HandtrackError):
    """The TensorFlow runtime failed to create a session or run the graph."""


class ImageDecodeError(HandtrackError):
    """An image file could not be decoded."""


class ImageShapeError(HandtrackError, ValueError):
    """Image dimensions disagree with its pixel data."""


class CandidateCountError(HandtrackError, ValueError):
    """The model output holds fewer candidates than requested."""
