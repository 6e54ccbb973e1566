"""Shared fixtures."""

import pytest

from ..application.ports.inference_session import LoadedModel
from ..exceptions import OCRError
from .fakes import FakeOCR, FakeSession, make_model


@pytest.fixture
def fake_session() -> FakeSession:
    return FakeSession()


@pytest.fixture
def fake_model(fake_session) -> LoadedModel:
    return make_model(fake_session)


@pytest.fixture
def failing_ocr() -> FakeOCR:
    return FakeOCR(error=OCRError("engine crashed", engine="Fake"))
