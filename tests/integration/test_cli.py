"""Integration tests for the command-line interface."""

import pytest
from click.testing import CliRunner

from subfetch.cli import cli
from subfetch.core.provider import SubtitleProvider
from subfetch.exceptions import ProviderError
from subfetch.models.subtitle import OnlineSubtitle


class LibraryProvider(SubtitleProvider):
    """Provider offering an English and a Danish subtitle for every movie."""

    name = "library"

    def __init__(self, fail: bool = False):
        self.fail = fail

    async def search(self, item):
        if self.fail:
            raise ProviderError("library offline", provider=self.name)
        return [
            OnlineSubtitle(
                link=f"library://{lang}/{item.path.name}",
                for_media=item.media,
                language=lang,
                provider=self.name,
            )
            for lang in ("en", "da")
        ]

    async def download(self, subtitle):
        return f"1\n00:00:01,000 --> 00:00:02,000\n{subtitle.language}\n".encode()


@pytest.fixture
def library(tmp_path):
    media = tmp_path / "media"
    media.mkdir()
    (media / "Alien.1979.1080p.BluRay.x264-GRP.mkv").write_bytes(b"video")
    (media / "Brazil.1985.720p.mkv").write_bytes(b"video")
    (media / "Brazil.1985.720p.en.srt").write_text("1")
    return media


@pytest.fixture
def config_file(tmp_path):
    def _make(**extra):
        lines = [
            "languages: [en]",
            f"provider: {__name__}:LibraryProvider",
            "logging:",
            "  level: warning",
        ]
        for key, value in extra.items():
            lines.append(f"{key}: {value}")
        path = tmp_path / "config.yaml"
        path.write_text("\n".join(lines) + "\n")
        return str(path)

    return _make


class TestMissingCommand:
    def test_lists_missing(self, library, config_file):
        result = CliRunner().invoke(cli, ["-c", config_file(), "missing", str(library)], obj={})

        assert result.exit_code == 0
        assert "Alien (1979) - English" in result.output
        assert "Brazil" not in result.output
        assert "1 of 2 item(s) missing subtitles" in result.output

    def test_invalid_language_rejected(self, library, config_file):
        result = CliRunner().invoke(
            cli, ["-c", config_file(), "missing", str(library), "-l", "e"], obj={}
        )

        assert result.exit_code == 2
        assert "not a language tag" in result.output


class TestDownloadCommand:
    """Test end-to-end subtitle downloads."""

    def test_download(self, library, config_file):
        result = CliRunner().invoke(
            cli, ["-c", config_file(), "download", str(library), "-l", "en", "-l", "da"], obj={}
        )

        assert result.exit_code == 0, result.output
        assert (library / "Alien.1979.1080p.BluRay.x264-GRP.en.srt").exists()
        assert (library / "Alien.1979.1080p.BluRay.x264-GRP.da.srt").exists()
        assert (library / "Brazil.1985.720p.da.srt").read_text().endswith("da\n")
        assert "Downloaded:   3" in result.output

    def test_dry_run(self, library, config_file):
        result = CliRunner().invoke(
            cli, ["-c", config_file(), "download", "--dry", str(library)], obj={}
        )

        assert result.exit_code == 0, result.output
        assert "Would download English" in result.output
        assert sorted(p.name for p in library.glob("*.srt")) == ["Brazil.1985.720p.en.srt"]

    def test_strict_failure(self, library, config_file):
        config = config_file(provider_options="{fail: true}")

        result = CliRunner().invoke(cli, ["-c", config, "download", "--strict", str(library)], obj={})

        assert result.exit_code == 1
        assert "library offline" in result.output

    def test_lenient_failure(self, library, config_file):
        config = config_file(provider_options="{fail: true}")

        result = CliRunner().invoke(cli, ["-c", config, "download", str(library)], obj={})

        assert result.exit_code == 1
        assert "Failed:       1" in result.output

    def test_no_provider(self, library, tmp_path):
        path = tmp_path / "empty.yaml"
        path.write_text("languages: [en]\n")

        result = CliRunner().invoke(cli, ["-c", str(path), "download", str(library)], obj={})

        assert result.exit_code == 1
        assert "No subtitle provider configured" in result.output

    def test_invalid_language_rejected(self, library, config_file):
        result = CliRunner().invoke(
            cli, ["-c", config_file(), "download", str(library), "-l", "english"], obj={}
        )

        assert result.exit_code == 2
        assert "not a language tag" in result.output
        assert sorted(p.name for p in library.glob("*.srt")) == ["Brazil.1985.720p.en.srt"]


class TestInfoCommand:
    def test_info(self, config_file):
        result = CliRunner().invoke(
            cli, ["-c", config_file(), "info", "Fargo.S02E07.720p.HDTV.x264-KILLERS.mkv"], obj={}
        )

        assert result.exit_code == 0
        assert "Fargo S02E07" in result.output
        assert "720p hdtv x264 -KILLERS" in result.output

    def test_info_unparseable(self, config_file):
        result = CliRunner().invoke(cli, ["-c", config_file(), "info", "holiday.mkv"], obj={})

        assert result.exit_code == 1
