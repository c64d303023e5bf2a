"""Pytest configuration and fixtures."""

from pathlib import Path

import numpy as np
import pytest


@pytest.fixture
def sample_frame():
    """Random 100x200 RGB frame."""
    rng = np.random.default_rng(0)
    return rng.integers(0, 255, (100, 200, 3), dtype=np.uint8)


@pytest.fixture
def data_dir():
    return Path(__file__).parent / "data"


def build_graph_bytes(
    boxes,
    scores,
    include=("image_tensor", "detection_boxes", "detection_scores"),
    fail_on_run=False,
):
    """
    Serialize a tiny frozen graph that mimics the hand detector's interface.

    Outputs are constants scaled by the batch size (always 1) so the image
    feed is part of the computation. With `fail_on_run`, fetching
    `detection_scores` fails inside the runtime (division by zero caught by
    `check_numerics`).
    """
    tf = pytest.importorskip("tensorflow")

    graph = tf.Graph()
    with graph.as_default():
        image = tf.compat.v1.placeholder(tf.uint8, shape=[1, None, None, 3], name="image_tensor")
        one = tf.cast(tf.shape(image)[0], tf.float32)
        if "detection_boxes" in include:
            tf.multiply(tf.constant(boxes, dtype=tf.float32), one, name="detection_boxes")
        if "detection_scores" in include:
            scores_t = tf.constant(scores, dtype=tf.float32) * one
            if fail_on_run:
                scores_t = tf.debugging.check_numerics(scores_t / tf.zeros_like(scores_t), "scores")
            tf.identity(scores_t, name="detection_scores")
    return graph.as_graph_def().SerializeToString()


@pytest.fixture
def graph_bytes():
    """Detector graph with one confident box and one weak candidate."""
    return build_graph_bytes(
        boxes=[[[0.1, 0.2, 0.3, 0.4], [0.0, 0.0, 0.0, 0.0]]],
        scores=[[0.9, 0.5]],
    )


@pytest.fixture
def make_graph_bytes():
    return build_graph_bytes
