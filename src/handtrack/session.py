from __future__ import annotations

import logging
from typing import Dict, Mapping, Optional, Sequence

import numpy as np

from .errors import InferenceError
from .model import Model, _tf

log = logging.getLogger(__name__)

# Operation names a compatible hand detector graph exposes.
INPUT_NAME = "image_tensor"
BOXES_NAME = "detection_boxes"
SCORES_NAME = "detection_scores"


class Session:
    """
    A TensorFlow session bound to one Model.

    Holds a reference to the Model so the graph outlives the session. Use it
    as a context manager; the underlying session is closed on exit.
    """

    def __init__(self, model: Model, session) -> None:
        self._model = model
        self._session = session

    @property
    def model(self) -> Model:
        return self._model

    @classmethod
    def from_model(cls, model: Model) -> "Session":
        tf = _tf()
        try:
            tf_session = tf.compat.v1.Session(graph=model.graph)
        except (ValueError, tf.errors.OpError) as e:
            raise InferenceError(f"Could not create session: {e}") from e
        log.debug("Session created")
        return cls(model, tf_session)

    @property
    def closed(self) -> bool:
        return self._session is None

    def close(self) -> None:
        if self._session is not None:
            self._session.close()
            self._session = None
            log.debug("Session closed")

    def __enter__(self) -> "Session":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def run(self, feeds: Mapping[str, np.ndarray], fetch_names: Sequence[str]) -> Dict[str, np.ndarray]:
        """
        Feed arrays to named operations and fetch named outputs.

        Names refer to operations; their first output tensor is used.
        """
        if self._session is None:
            raise InferenceError("Session is closed")

        tf = _tf()
        feed_dict = {self._model.operation(name).outputs[0]: value for name, value in feeds.items()}
        fetches = [self._model.operation(name).outputs[0] for name in fetch_names]
        try:
            values = self._session.run(fetches, feed_dict=feed_dict)
        except (ValueError, TypeError, tf.errors.OpError) as e:
            raise InferenceError(f"Inference failed: {e}") from e
        return dict(zip(fetch_names, values))


def create_session(model: Model) -> Session:
    return Session.from_model(model)


def run(
    session: Session,
    input_tensor: np.ndarray,
    requested_output_names: Optional[Sequence[str]] = None,
) -> Dict[str, np.ndarray]:
    """Run the detector graph on one image tensor fed to `image_tensor`."""
    if requested_output_names is None:
        requested_output_names = (BOXES_NAME, SCORES_NAME)
    return session.run({INPUT_NAME: input_tensor}, requested_output_names)
