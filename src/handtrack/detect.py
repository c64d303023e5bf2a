from __future__ import annotations

import logging
from typing import List, Optional

from .drawing import draw_detections
from .image import Image
from .model import GraphInput, Model, load_graph
from .model_assets import CachedDownloadSource
from .postprocess import detection_boxes
from .session import BOXES_NAME, INPUT_NAME, SCORES_NAME, Session, run
from .types import DetectionBox, DetectionOptions

log = logging.getLogger(__name__)


def detect(model: Model, image: Image, opts: Optional[DetectionOptions] = None) -> List[DetectionBox]:
    """
    Run the hand detector on `image` using an already loaded `model`.

    A fresh session is opened for this call and closed before returning.
    """
    opts = opts or DetectionOptions()
    model.require(INPUT_NAME, BOXES_NAME, SCORES_NAME)

    input_tensor = image.tensor()
    with Session.from_model(model) as session:
        outputs = run(session, input_tensor, (BOXES_NAME, SCORES_NAME))

    boxes = detection_boxes(
        outputs[SCORES_NAME],
        outputs[BOXES_NAME],
        score_threshold=opts.score_threshold,
        max_hands=opts.max_hands,
        height=image.height,
        width=image.width,
    )
    log.debug("Kept %d of %d candidates", len(boxes), opts.max_hands)
    return boxes


def load_model_and_detect(
    image: Image,
    opts: Optional[DetectionOptions] = None,
    source: Optional[GraphInput] = None,
) -> List[DetectionBox]:
    """
    Load the model and run detection on a single image.

    `source` defaults to the cached download of the hand detector graph. For
    image streams, load the Model once and call `detect()` instead.
    """
    model = load_graph(source if source is not None else CachedDownloadSource())
    return detect(model, image, opts)


class HandDetector:
    """
    Hand detector keeping one loaded Model across calls.

    Each `detect()` call still runs in its own session.
    """

    def __init__(
        self,
        model: Optional[Model] = None,
        source: Optional[GraphInput] = None,
        options: Optional[DetectionOptions] = None,
    ) -> None:
        if model is not None and source is not None:
            raise ValueError("Pass either a model or a source, not both")
        if model is None:
            model = load_graph(source if source is not None else CachedDownloadSource())
        model.require(INPUT_NAME, BOXES_NAME, SCORES_NAME)
        self._model: Optional[Model] = model
        self.options = options or DetectionOptions()

    @property
    def model(self) -> Model:
        if self._model is None:
            raise RuntimeError("HandDetector is closed")
        return self._model

    def close(self) -> None:
        self._model = None

    def __enter__(self) -> "HandDetector":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def detect(self, image: Image) -> List[DetectionBox]:
        return detect(self.model, image, self.options)

    def detect_frame(self, frame_bgr) -> List[DetectionBox]:
        """Detect hands in a BGR frame as returned by OpenCV."""
        return self.detect(Image.from_array(frame_bgr, bgr=True))

    def draw(self, frame_bgr, boxes: List[DetectionBox]):
        return draw_detections(frame_bgr, boxes)
