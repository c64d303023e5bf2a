"""
Where the frozen inference graph comes from.

A `GraphSource` is anything with `resolve() -> bytes`. The default,
`CachedDownloadSource`, reads `~/.handtrack-rs/frozen_inference_graph.pb`
and downloads it first when missing.
"""

from __future__ import annotations

import http.client
import logging
import os
import ssl
import tempfile
import urllib.request
from pathlib import Path
from typing import Optional, Protocol, Union, runtime_checkable

import certifi

from .errors import ModelDownloadError, ModelIOError

log = logging.getLogger(__name__)

# Folder in the home directory holding the cached graph.
DOWNLOAD_FOLDER = ".handtrack-rs"
DOWNLOAD_URL = (
    "https://raw.githubusercontent.com/victordibia/handtracking/master/hand_inference_graph/frozen_inference_graph.pb"
)
DOWNLOAD_NAME = "frozen_inference_graph.pb"

PathLike = Union[str, os.PathLike]


@runtime_checkable
class GraphSource(Protocol):
    def resolve(self) -> bytes:
        ...


class BytesSource:
    """Graph bytes already in memory (embedded in the application, for example)."""

    def __init__(self, data: bytes) -> None:
        self._data = bytes(data)

    def resolve(self) -> bytes:
        return self._data


class PathSource:
    def __init__(self, path: PathLike) -> None:
        self.path = Path(path)

    def resolve(self) -> bytes:
        return read_graph_file(self.path)


class CachedDownloadSource:
    """
    Graph cached under the home directory, fetched from `url` on first use.

    There is no retry, checksum or resume: a failed download raises and leaves
    no partial file behind.
    """

    def __init__(
        self,
        cache_dir: Optional[PathLike] = None,
        *,
        url: str = DOWNLOAD_URL,
        file_name: str = DOWNLOAD_NAME,
        timeout_s: int = 60,
    ) -> None:
        self.cache_dir = Path(cache_dir) if cache_dir is not None else default_cache_dir()
        self.url = url
        self.file_name = file_name
        self.timeout_s = timeout_s

    @property
    def path(self) -> Path:
        return self.cache_dir / self.file_name

    def resolve(self) -> bytes:
        ensure_frozen_graph(self.path, url=self.url, timeout_s=self.timeout_s)
        return read_graph_file(self.path)


def default_cache_dir() -> Path:
    try:
        home = Path.home()
    except RuntimeError as e:
        raise ModelIOError("Cannot determine the home directory") from e
    return home / DOWNLOAD_FOLDER


def frozen_graph_path(cache_dir: Optional[PathLike] = None) -> Path:
    base = Path(cache_dir) if cache_dir is not None else default_cache_dir()
    return base / DOWNLOAD_NAME


def read_graph_file(path: PathLike) -> bytes:
    try:
        with open(path, "rb") as f:
            return f.read()
    except OSError as e:
        raise ModelIOError(f"Could not read model file: {path}") from e


def ensure_frozen_graph(model_path: PathLike, *, url: str = DOWNLOAD_URL, timeout_s: int = 60) -> Path:
    """
    Ensure the frozen graph exists at `model_path`, downloading it if missing.

    The download is written to a temporary file next to `model_path` and
    renamed into place only once complete.
    """

    model_path = Path(model_path)
    if model_path.exists():
        return model_path

    try:
        model_path.parent.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise ModelIOError(f"Could not create cache directory: {model_path.parent}") from e

    log.info("Downloading frozen graph from %s", url)
    ctx = ssl.create_default_context(cafile=certifi.where())
    try:
        with urllib.request.urlopen(url, context=ctx, timeout=timeout_s) as r:
            payload = r.read()
    except (OSError, ValueError, http.client.HTTPException) as e:
        raise ModelDownloadError(f"Could not download model from {url}: {e}") from e

    tmp_name = None
    try:
        fd, tmp_name = tempfile.mkstemp(prefix=f".{model_path.name}.", suffix=".part", dir=model_path.parent)
        with os.fdopen(fd, "wb") as f:
            f.write(payload)
        os.replace(tmp_name, model_path)
    except OSError as e:
        # Clean up partial downloads.
        if tmp_name is not None and os.path.exists(tmp_name):
            os.remove(tmp_name)
        raise ModelIOError(f"Could not write model file: {model_path}") from e

    log.info("Frozen graph downloaded to %s (%d bytes)", model_path, len(payload))
    return model_path
