"""Unit tests for media models."""

import pytest

from subfetch.exceptions import MediaMergeError, MediaParseError
from subfetch.models.media import Episode, Metadata, Movie, is_video, merge
from subfetch.models.subtitle import OnlineSubtitle, RatedSubtitle


class TestMovie:
    def test_str(self):
        assert str(Movie(name="Alien", year=1979)) == "Alien (1979)"

    @pytest.mark.parametrize("year", [1899, 2100, 79, "1979"])
    def test_invalid_year(self, year):
        with pytest.raises(MediaParseError):
            Movie(name="Alien", year=year)


class TestEpisode:
    def test_str(self):
        episode = Episode(show="Fargo", season=2, episode=7)
        assert str(episode) == "Fargo S02E07"


class TestMerge:
    """Test merging canonical information into local media."""

    def test_movie_takes_other_name(self):
        local = Movie(name="Amelie", year=2001, meta=Metadata(group="GRP"))
        scraped = Movie(name="Le Fabuleux Destin d'Amélie Poulain", year=2001)

        merged = merge(local, scraped)

        assert merged.name == "Le Fabuleux Destin d'Amélie Poulain"
        assert merged.meta.group == "GRP"
        assert local.name == "Amelie"
        assert scraped.meta == Metadata()

    def test_movie_year_conflict(self):
        with pytest.raises(MediaMergeError, match="year"):
            merge(Movie(name="Dune", year=1984), Movie(name="Dune", year=2021))

    def test_episode_fills_title(self):
        local = Episode(show="fargo", season=1, episode=1)
        other = Episode(show="Fargo", season=1, episode=1, title="The Crocodile's Dilemma")

        merged = merge(local, other)

        assert merged.show == "Fargo"
        assert merged.title == "The Crocodile's Dilemma"

    def test_episode_number_conflict(self):
        with pytest.raises(MediaMergeError):
            merge(
                Episode(show="Fargo", season=1, episode=1),
                Episode(show="Fargo", season=1, episode=2),
            )

    def test_different_variants(self):
        with pytest.raises(MediaMergeError, match="not same media type"):
            merge(Movie(name="Fargo", year=1996), Episode(show="Fargo", season=1, episode=1))

    def test_subtitle_not_supported(self):
        movie = Movie(name="Fargo", year=1996)
        sub = OnlineSubtitle(link="x", for_media=movie, language="en")
        with pytest.raises(MediaMergeError, match="subtitles"):
            merge(movie, sub)


class TestSubtitle:
    def test_language_normalized(self):
        sub = OnlineSubtitle(link="x", for_media=Movie(name="Alien", year=1979), language="ENG")
        assert sub.language == "en"
        assert sub.is_lang("eng")
        assert str(sub) == "English"
        assert not is_video(sub)

    def test_meta_from_media(self):
        movie = Movie(name="Alien", year=1979, meta=Metadata(quality="720p"))
        sub = OnlineSubtitle(link="x", for_media=movie)
        assert sub.meta.quality == "720p"
        assert sub.language == "und"

    def test_unscored_distinct_from_zero(self):
        sub = OnlineSubtitle(link="x", for_media=Movie(name="Alien", year=1979))
        assert RatedSubtitle(sub, None).format_score() == "N/A"
        assert RatedSubtitle(sub, 0.0).format_score() == "0%"
        assert not RatedSubtitle(sub, None).scored
        assert RatedSubtitle(sub, 0.0).scored
