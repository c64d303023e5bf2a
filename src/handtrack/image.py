from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Iterator, Sequence, Union

import cv2
import numpy as np

from .errors import ImageDecodeError, ImageShapeError
from .types import Pixel


@dataclass(frozen=True, eq=False)
class Image:
    """
    A single RGB frame.

    `data` is a `uint8` array of shape `(height, width, 3)` laid out row-major,
    so the pixel scan order is the order the detector tensor expects.
    """

    width: int
    height: int
    data: np.ndarray

    def __post_init__(self) -> None:
        expected = (self.height, self.width, 3)
        if self.data.dtype != np.uint8 or self.data.shape != expected:
            raise ImageShapeError(
                f"Image data must be uint8 with shape {expected}, got {self.data.dtype} {self.data.shape}"
            )

    @classmethod
    def from_array(cls, array: np.ndarray, bgr: bool = False) -> "Image":
        """
        Wrap an `HxWx3` uint8 array.

        Pass `bgr=True` for frames coming straight from OpenCV.
        """
        array = np.asarray(array)
        if array.ndim != 3 or array.shape[2] != 3:
            raise ImageShapeError(f"Expected an HxWx3 array, got shape {array.shape}")
        if array.dtype != np.uint8:
            raise ImageShapeError(f"Expected a uint8 array, got {array.dtype}")
        if bgr:
            array = cv2.cvtColor(array, cv2.COLOR_BGR2RGB)
        h, w = array.shape[:2]
        return cls(width=w, height=h, data=np.ascontiguousarray(array))

    @classmethod
    def from_pixels(cls, width: int, height: int, pixels: Sequence[Pixel]) -> "Image":
        """Build an image from pixels given in row-major scan order."""
        if len(pixels) != width * height:
            raise ImageShapeError(
                f"Expected {width * height} pixels for a {width}x{height} image, got {len(pixels)}"
            )
        flat = np.fromiter(
            (channel for p in pixels for channel in (p.r, p.g, p.b)),
            dtype=np.uint8,
            count=width * height * 3,
        )
        return cls(width=width, height=height, data=flat.reshape(height, width, 3))

    @classmethod
    def from_file(cls, path: Union[str, os.PathLike]) -> "Image":
        frame_bgr = cv2.imread(os.fspath(path), cv2.IMREAD_COLOR)
        if frame_bgr is None:
            raise ImageDecodeError(f"Could not read image: {path}")
        return cls.from_array(frame_bgr, bgr=True)

    def pixels(self) -> Iterator[Pixel]:
        for y in range(self.height):
            row = self.data[y]
            for x in range(self.width):
                r, g, b = row[x]
                yield Pixel(r=int(r), g=int(g), b=int(b), x=x, y=y)

    def tensor(self) -> np.ndarray:
        """Model input: uint8 array of shape `[1, height, width, 3]`."""
        return self.data.reshape(1, self.height, self.width, 3)
