import io

import pytest
from PIL import Image


def make_jpeg(width: int = 64, height: int = 48, color: tuple = (200, 60, 30)) -> bytes:
    """Create a real JPEG image."""
    img = Image.new("RGB", (width, height), color)
    buf = io.BytesIO()
    img.save(buf, format="JPEG")
    return buf.getvalue()


class RecordingEngine:
    """Substitute transform engine that records its calls."""

    def __init__(self, payload: bytes = b"\xff\xd8transformed", error: Exception | None = None):
        self.payload = payload
        self.error = error
        self.calls = []

    def transform(self, source_path, operation, width, height):
        self.calls.append((source_path, operation, width, height))
        if self.error is not None:
            raise self.error
        return io.BytesIO(self.payload)


@pytest.fixture
def jpeg_bytes():
    return make_jpeg()


@pytest.fixture
def source_dir(tmp_path):
    path = tmp_path / "master"
    path.mkdir()
    return path


@pytest.fixture
def cache_dir(tmp_path):
    path = tmp_path / "public"
    path.mkdir()
    return path


@pytest.fixture
def master_jpeg(source_dir, jpeg_bytes):
    """A valid JPEG named test.jpg in the master repository."""
    path = source_dir / "test.jpg"
    path.write_bytes(jpeg_bytes)
    return path


@pytest.fixture
def recording_engine():
    return RecordingEngine()


@pytest.fixture
def engine_factory():
    """Build substitute engines with a custom payload or error."""
    return RecordingEngine


@pytest.fixture
def jpeg_factory():
    return make_jpeg
