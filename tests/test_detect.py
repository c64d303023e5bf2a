"""End-to-end detection tests against a synthetic detector graph."""

import numpy as np
import pytest

pytest.importorskip("tensorflow")

from handtrack.detect import HandDetector, detect, load_model_and_detect  # noqa: E402
from handtrack.errors import InferenceError, MissingOperationError  # noqa: E402
from handtrack.image import Image  # noqa: E402
from handtrack.model import load_graph  # noqa: E402
from handtrack.session import Session  # noqa: E402
from handtrack.types import DetectionOptions, Point  # noqa: E402


@pytest.fixture
def image(sample_frame):
    return Image.from_array(sample_frame)


@pytest.fixture
def opened_sessions(monkeypatch):
    """Record every Session created while the test runs."""
    sessions = []
    from_model = Session.from_model.__func__

    def _from_model(cls, model):
        session = from_model(cls, model)
        sessions.append(session)
        return session

    monkeypatch.setattr(Session, "from_model", classmethod(_from_model))
    return sessions


class TestDetect:
    def test_detect_with_loaded_model(self, graph_bytes, image):
        boxes = detect(load_graph(graph_bytes), image, DetectionOptions(max_hands=2, score_threshold=0.7))

        assert len(boxes) == 1
        assert boxes[0].rect.lt == Point(40, 10)
        assert boxes[0].rect.rb == Point(80, 30)
        assert boxes[0].score == pytest.approx(0.9)

    def test_model_reused_across_calls(self, graph_bytes, image):
        model = load_graph(graph_bytes)
        opts = DetectionOptions(max_hands=2, score_threshold=0.4)

        first = detect(model, image, opts)
        second = detect(model, image, opts)

        assert first == second
        assert len(first) == 2

    def test_load_model_and_detect(self, tmp_path, graph_bytes, image):
        path = tmp_path / "frozen_inference_graph.pb"
        path.write_bytes(graph_bytes)

        boxes = load_model_and_detect(image, DetectionOptions(max_hands=1, score_threshold=0.7), source=path)

        assert [b.rect.as_tuple() for b in boxes] == [(40, 10, 80, 30)]

    def test_incompatible_graph(self, image, make_graph_bytes):
        graph = make_graph_bytes(
            boxes=[[[0.1, 0.1, 0.2, 0.2]]], scores=[[0.9]], include=("image_tensor", "detection_boxes")
        )

        with pytest.raises(MissingOperationError):
            detect(load_graph(graph), image)

    def test_max_hands_beyond_candidates(self, graph_bytes, image):
        with pytest.raises(ValueError):
            detect(load_graph(graph_bytes), image, DetectionOptions(max_hands=5, score_threshold=0.1))

    def test_session_closed_after_success(self, graph_bytes, image, opened_sessions):
        detect(load_graph(graph_bytes), image)

        assert len(opened_sessions) == 1
        assert opened_sessions[0].closed

    def test_session_closed_when_runtime_fails(self, image, make_graph_bytes, opened_sessions):
        graph = make_graph_bytes(boxes=[[[0.1, 0.1, 0.2, 0.2]]], scores=[[0.9]], fail_on_run=True)

        with pytest.raises(InferenceError):
            detect(load_graph(graph), image, DetectionOptions(max_hands=1))

        assert len(opened_sessions) == 1
        assert opened_sessions[0].closed

    def test_session_closed_when_run_raises(self, graph_bytes, image, opened_sessions, monkeypatch):
        def _fail(self, feeds, fetch_names):
            raise InferenceError("runtime went away")

        monkeypatch.setattr(Session, "run", _fail)

        with pytest.raises(InferenceError, match="runtime went away"):
            detect(load_graph(graph_bytes), image)

        assert len(opened_sessions) == 1
        assert opened_sessions[0].closed

    def test_session_closed_when_postprocess_fails(self, graph_bytes, image, opened_sessions):
        with pytest.raises(ValueError):
            detect(load_graph(graph_bytes), image, DetectionOptions(max_hands=5))

        assert opened_sessions[0].closed


class TestHandDetector:
    def test_detect_frame_and_draw(self, graph_bytes, sample_frame):
        with HandDetector(source=graph_bytes) as detector:
            frame = np.zeros_like(sample_frame)
            boxes = detector.detect_frame(frame)
            out = detector.draw(frame, boxes)

        assert len(boxes) == 1
        assert out[10, 40].any()

    def test_rejects_model_and_source(self, graph_bytes):
        model = load_graph(graph_bytes)
        with pytest.raises(ValueError):
            HandDetector(model=model, source=graph_bytes)

    def test_closed_detector(self, graph_bytes, image):
        detector = HandDetector(model=load_graph(graph_bytes))
        detector.close()

        with pytest.raises(RuntimeError):
            detector.detect(image)


# Real-model scenarios. The sample images are not shipped; see tests/data/README.md.
SINGLE_HAND = "single_hand.jpeg"
MULTI_HAND = "multi_hand.jpeg"
PIXEL_TOLERANCE = 10


def _load_sample(data_dir, name):
    path = data_dir / name
    if not path.exists():
        pytest.skip(f"sample image {name} not available")
    return Image.from_file(path)


def _assert_near(box, expected):
    for got, want in zip(box.rect.as_tuple(), expected):
        assert abs(got - want) <= PIXEL_TOLERANCE, (box.rect.as_tuple(), expected)


def test_real_model_single_hand(data_dir):
    """Runs the published hand detector; needs network access on first run."""
    image = _load_sample(data_dir, SINGLE_HAND)

    boxes = load_model_and_detect(image, DetectionOptions(max_hands=1, score_threshold=0.7))

    assert len(boxes) == 1
    _assert_near(boxes[0], (221, 65, 368, 235))


def test_real_model_two_hands(data_dir):
    image = _load_sample(data_dir, MULTI_HAND)

    boxes = load_model_and_detect(image, DetectionOptions(max_hands=2, score_threshold=0.7))

    assert len(boxes) == 2
    _assert_near(boxes[0], (292, 177, 375, 302))
    _assert_near(boxes[1], (38, 188, 122, 294))
