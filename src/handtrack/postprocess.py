"""
Turn raw detector outputs into pixel-space boxes.
"""

from __future__ import annotations

from typing import List, Sequence, Union

import numpy as np

from .errors import CandidateCountError
from .types import DetectionBox, Point, Rectangle
from .utils import to_pixel

ArrayLike = Union[Sequence[float], np.ndarray]


def detection_boxes(
    scores: ArrayLike,
    boxes: ArrayLike,
    score_threshold: float,
    max_hands: int,
    height: int,
    width: int,
) -> List[DetectionBox]:
    """
    Keep the first `max_hands` candidates whose score is strictly above `score_threshold`.

    `boxes` holds four normalized values per candidate in (top, left, bottom,
    right) order; `scores` holds one value per candidate in the same order.
    Both may have any shape and are flattened. Candidates are not re-sorted and
    overlapping boxes are all kept.

    Raises:
        CandidateCountError: the arrays hold fewer than `max_hands` candidates.
    """
    if max_hands < 0:
        raise ValueError(f"max_hands must be >= 0, got {max_hands}")
    if height < 0 or width < 0:
        raise ValueError(f"Image size must be non-negative, got {width}x{height}")

    # Scores and threshold are compared in the runtime's float32 precision.
    scores = np.asarray(scores, dtype=np.float32).reshape(-1)
    threshold = np.float32(score_threshold)
    boxes = np.asarray(boxes).reshape(-1)
    if scores.size < max_hands:
        raise CandidateCountError(f"Requested {max_hands} candidates but scores holds only {scores.size}")
    if boxes.size < 4 * max_hands:
        raise CandidateCountError(
            f"Requested {max_hands} candidates but boxes holds only {boxes.size} values ({boxes.size // 4} boxes)"
        )

    detected: List[DetectionBox] = []
    for i in range(max_hands):
        if not scores[i] > threshold:
            continue
        score = float(scores[i])

        top, left, bottom, right = boxes[4 * i : 4 * i + 4]
        top = to_pixel(top, height)
        left = to_pixel(left, width)
        bottom = to_pixel(bottom, height)
        right = to_pixel(right, width)

        # Normalize inverted boxes so lt <= rb on both axes.
        lt = Point(x=min(left, right), y=min(top, bottom))
        rb = Point(x=max(left, right), y=max(top, bottom))
        detected.append(DetectionBox(rect=Rectangle(lt=lt, rb=rb), score=score))

    return detected
