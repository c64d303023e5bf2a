from __future__ import annotations

from typing import Iterable, Tuple

import cv2

from .types import DetectionBox
from .utils import clamp_int


def draw_detections(
    frame,
    boxes: Iterable[DetectionBox],
    color: Tuple[int, int, int] = (0, 255, 0),
    thickness: int = 2,
    show_score: bool = True,
):
    """Draw boxes (and their scores) onto `frame` in place and return it."""
    for det in boxes:
        x0, y0, x1, y1 = det.rect.as_tuple()
        cv2.rectangle(frame, (x0, y0), (x1, y1), color, thickness)
        if show_score:
            draw_text(frame, f"hand {det.score:.2f}", (x0, clamp_int(y0 - 8, 12, frame.shape[0] - 1)))
    return frame


def draw_text(frame, text: str, org: Tuple[int, int], color=(255, 255, 255), scale=0.6, thickness=2):
    cv2.putText(frame, text, org, cv2.FONT_HERSHEY_SIMPLEX, scale, (0, 0, 0), thickness + 2, cv2.LINE_AA)
    cv2.putText(frame, text, org, cv2.FONT_HERSHEY_SIMPLEX, scale, color, thickness, cv2.LINE_AA)
    return frame
