"""Shared pytest fixtures for voice ingest tests."""

import pytest

from voice_ingest.audio.formats import SILK_MARKER
from voice_ingest.audio.processor import AudioProcessor
from voice_ingest.config.settings import Settings

from fakes import FakeConverter, FakeDecoder, FakeTranscriber


@pytest.fixture
def work_dir(tmp_path):
    """Directory that receives the pipeline's temporary files."""
    path = tmp_path / "work"
    path.mkdir()
    return path


@pytest.fixture
def input_dir(tmp_path):
    path = tmp_path / "input"
    path.mkdir()
    return path


@pytest.fixture
def silk_file(input_dir):
    """A file carrying the SILK header behind the QQ framing byte."""
    path = input_dir / "voice.amr"
    path.write_bytes(b"\x02" + SILK_MARKER + b"\x00" * 64)
    return path


@pytest.fixture
def fake_transcriber():
    return FakeTranscriber()


@pytest.fixture
def fake_converter():
    return FakeConverter()


@pytest.fixture
def fake_decoder():
    return FakeDecoder()


@pytest.fixture
def processor(fake_transcriber, fake_converter, fake_decoder, work_dir):
    return AudioProcessor(
        transcriber=fake_transcriber,
        converter=fake_converter,
        decoder=fake_decoder,
        temp_dir=work_dir,
    )


@pytest.fixture
def test_settings(work_dir):
    """Settings that never read a config file."""
    return Settings(
        environment="test",
        log_format="text",
        provider="groq",
        temp_dir=work_dir,
    )


@pytest.fixture
def app(test_settings, processor):
    """FastAPI app wired to the fake pipeline."""
    from voice_ingest.dependencies import get_audio_processor, get_settings
    from voice_ingest.main import create_app

    application = create_app(settings=test_settings)
    application.dependency_overrides[get_audio_processor] = lambda: processor
    application.dependency_overrides[get_settings] = lambda: test_settings
    return application


@pytest.fixture
def test_client(app):
    """Return FastAPI test client."""
    from fastapi.testclient import TestClient

    return TestClient(app)
