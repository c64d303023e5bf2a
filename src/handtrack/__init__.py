from .detect import HandDetector, detect, load_model_and_detect
from .errors import (
    CandidateCountError,
    GraphDecodeError,
    HandtrackError,
    ImageDecodeError,
    ImageShapeError,
    InferenceError,
    MissingOperationError,
    ModelDownloadError,
    ModelIOError,
)
from .image import Image
from .model import Model, load_graph
from .model_assets import BytesSource, CachedDownloadSource, GraphSource, PathSource
from .postprocess import detection_boxes
from .session import Session, create_session
from .types import DetectionBox, DetectionOptions, Pixel, Point, Rectangle

__all__ = [
    "HandDetector",
    "detect",
    "load_model_and_detect",
    "detection_boxes",
    "load_graph",
    "create_session",
    "Model",
    "Session",
    "Image",
    "Pixel",
    "Point",
    "Rectangle",
    "DetectionBox",
    "DetectionOptions",
    "GraphSource",
    "BytesSource",
    "PathSource",
    "CachedDownloadSource",
    "HandtrackError",
    "ModelIOError",
    "ModelDownloadError",
    "GraphDecodeError",
    "MissingOperationError",
    "InferenceError",
    "ImageDecodeError",
    "ImageShapeError",
    "CandidateCountError",
]
