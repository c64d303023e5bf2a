from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Optional, Union

from .errors import GraphDecodeError, MissingOperationError, ModelIOError
from .model_assets import DOWNLOAD_URL, CachedDownloadSource, GraphSource, PathLike, read_graph_file

log = logging.getLogger(__name__)

GraphInput = Union[bytes, bytearray, str, os.PathLike, GraphSource]


def _tf():
    import tensorflow as tf  # type: ignore

    return tf


class Model:
    """
    A frozen TensorFlow graph held in memory.

    The graph is owned by this object and never modified after import, so one
    Model can back any number of sessions.
    """

    def __init__(self, graph) -> None:
        self._graph = graph

    def __repr__(self) -> str:
        return f"Model(operations={len(self._graph.get_operations())})"

    @property
    def graph(self):
        return self._graph

    @classmethod
    def from_bytes(cls, data: bytes) -> "Model":
        if not data:
            raise ModelIOError("Model bytes are empty")

        from google.protobuf.message import DecodeError

        tf = _tf()
        graph_def = tf.compat.v1.GraphDef()
        try:
            graph_def.ParseFromString(bytes(data))
        except DecodeError as e:
            raise GraphDecodeError(f"Model bytes are not a serialized GraphDef: {e}") from e

        graph = tf.Graph()
        try:
            with graph.as_default():
                tf.compat.v1.import_graph_def(graph_def, name="")
        except (ValueError, TypeError, tf.errors.OpError) as e:
            raise GraphDecodeError(f"Could not import graph: {e}") from e

        model = cls(graph)
        log.info("Loaded frozen graph with %d operations", len(graph.get_operations()))
        return model

    @classmethod
    def from_path(cls, graph_path: PathLike) -> "Model":
        return cls.from_bytes(read_graph_file(graph_path))

    @classmethod
    def from_source(cls, source: GraphSource) -> "Model":
        return cls.from_bytes(source.resolve())

    @classmethod
    def from_frozen_graph(cls, cache_dir: Optional[PathLike] = None, *, url: str = DOWNLOAD_URL) -> "Model":
        """Load the default hand detector, downloading it into the cache on first use."""
        return cls.from_source(CachedDownloadSource(cache_dir, url=url))

    def operation(self, name: str):
        try:
            return self._graph.get_operation_by_name(name)
        except (KeyError, ValueError) as e:
            raise MissingOperationError(name) from e

    def require(self, *names: str) -> None:
        for name in names:
            self.operation(name)


def load_graph(source: GraphInput) -> Model:
    """
    Load a Model from raw bytes, a file path, or a `GraphSource`.
    """
    if isinstance(source, (bytes, bytearray)):
        return Model.from_bytes(bytes(source))
    if isinstance(source, (str, os.PathLike)):
        return Model.from_path(Path(source))
    if isinstance(source, GraphSource):
        return Model.from_source(source)
    raise TypeError(f"Unsupported graph source: {type(source).__name__}")
