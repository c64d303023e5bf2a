from __future__ import annotations

import numbers
from dataclasses import dataclass
from typing import Any, Dict, Mapping, Tuple

import numpy as np


Box2 = Tuple[int, int, int, int]  # (x_min, y_min, x_max, y_max)

DEFAULT_MAX_HANDS = 2
DEFAULT_SCORE_THRESHOLD = 0.7


@dataclass(frozen=True)
class Pixel:
    """A single RGB pixel with its position in the image."""

    r: int
    g: int
    b: int
    x: int
    y: int


@dataclass(frozen=True)
class Point:
    x: int
    y: int


@dataclass(frozen=True)
class Rectangle:
    """Rectangular area given by its top-left and bottom-right corners."""

    lt: Point
    rb: Point

    @property
    def width(self) -> int:
        return self.rb.x - self.lt.x

    @property
    def height(self) -> int:
        return self.rb.y - self.lt.y

    def as_tuple(self) -> Box2:
        return (self.lt.x, self.lt.y, self.rb.x, self.rb.y)


@dataclass(frozen=True)
class DetectionBox:
    """A detected hand: its location in pixels and the model's score."""

    rect: Rectangle
    score: float

    def to_dict(self) -> Dict[str, Any]:
        x0, y0, x1, y1 = self.rect.as_tuple()
        return {"x0": x0, "y0": y0, "x1": x1, "y1": y1, "score": self.score}


@dataclass(frozen=True)
class DetectionOptions:
    """
    Detection configuration.

    `max_hands` caps how many model candidates are examined; `score_threshold`
    is the exclusive lower bound a candidate score must exceed.
    """

    max_hands: int = DEFAULT_MAX_HANDS
    score_threshold: float = DEFAULT_SCORE_THRESHOLD

    def __post_init__(self) -> None:
        if isinstance(self.max_hands, (bool, np.bool_)) or not isinstance(self.max_hands, numbers.Integral):
            raise ValueError(f"max_hands must be an int, got {self.max_hands!r}")
        object.__setattr__(self, "max_hands", int(self.max_hands))
        if self.max_hands < 0:
            raise ValueError(f"max_hands must be >= 0, got {self.max_hands}")

    @classmethod
    def from_dict(cls, d: Mapping[str, Any]) -> "DetectionOptions":
        return cls(
            max_hands=int(d.get("max_hands", DEFAULT_MAX_HANDS)),
            score_threshold=float(d.get("score_threshold", DEFAULT_SCORE_THRESHOLD)),
        )
