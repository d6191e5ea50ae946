"""Shared pytest fixtures for subfetch tests."""

from pathlib import Path
from typing import Optional

import pytest

from subfetch.config import AcquisitionConfig, Config
from subfetch.core.evaluator import Evaluator
from subfetch.core.parser import parse_filename
from subfetch.core.provider import SubtitleProvider
from subfetch.exceptions import ProviderError
from subfetch.models.local import LocalMedia
from subfetch.models.media import Metadata, Movie
from subfetch.models.subtitle import OnlineSubtitle

SRT_CONTENT = b"1\n00:00:01,000 --> 00:00:02,500\nHello there.\n"


class FakeProvider(SubtitleProvider):
    """In-memory provider recording every call."""

    name = "fake"

    def __init__(self, results=None, search_errors=None, download_errors=None):
        self.results = results or {}  # video filename -> candidates
        self.search_errors = search_errors or {}  # video filename -> exception
        self.download_errors = download_errors or {}  # link -> exception
        self.search_calls = []
        self.download_calls = []
        self.closed = False

    async def search(self, item):
        self.search_calls.append(item)
        if error := self.search_errors.get(item.path.name):
            raise error
        return list(self.results.get(item.path.name, []))

    async def download(self, subtitle):
        self.download_calls.append(subtitle)
        if error := self.download_errors.get(subtitle.link):
            raise error
        return SRT_CONTENT + subtitle.link.encode()

    async def close(self):
        self.closed = True


class GroupScoreEvaluator(Evaluator):
    """Scores a candidate by the release group of its media."""

    def __init__(self, scores):
        self.scores = scores

    def evaluate(self, reference, candidate) -> Optional[float]:
        return self.scores.get(candidate.meta.group)


@pytest.fixture
def config():
    """Create a default configuration for testing."""
    return Config(languages=["en"], acquisition=AcquisitionConfig(score=60))


@pytest.fixture
def make_media(tmp_path):
    """Create a video file and return it as LocalMedia."""

    def _make(filename: str = "The.Matrix.1999.1080p.BluRay.x264-GROUP.mkv", directory: Path = None):
        directory = directory or tmp_path
        directory.mkdir(parents=True, exist_ok=True)
        path = directory / filename
        path.write_bytes(b"\x1aE\xdf\xa3")
        return LocalMedia.from_path(path, parse_filename(filename))

    return _make


@pytest.fixture
def make_candidate():
    """Create an online subtitle candidate made for a release group."""

    def _make(
        group: str,
        language: str = "en",
        hearing_impaired: bool = False,
        name: str = "The Matrix",
        year: int = 1999,
    ) -> OnlineSubtitle:
        return OnlineSubtitle(
            link=f"https://subs.example/{language}/{group}",
            for_media=Movie(name=name, year=year, meta=Metadata(group=group)),
            language=language,
            hearing_impaired=hearing_impaired,
            provider="fake",
        )

    return _make


@pytest.fixture
def fake_provider():
    """Create a provider factory."""

    def _make(**kwargs) -> FakeProvider:
        return FakeProvider(**kwargs)

    return _make


@pytest.fixture
def group_evaluator():
    """Create an evaluator scoring candidates by release group."""

    def _make(scores) -> GroupScoreEvaluator:
        return GroupScoreEvaluator(scores)

    return _make


@pytest.fixture
def provider_error():
    """Create a provider error."""
    return ProviderError("service unavailable", provider="fake")
