"""Unit tests for the TMDB scraper."""

import httpx
import pytest
from tenacity import wait_none

from subfetch.exceptions import TMDBError
from subfetch.metadata.tmdb import TMDBScraper
from subfetch.models.media import Episode, Metadata, Movie
from subfetch.models.subtitle import OnlineSubtitle


def make_scraper(handler):
    client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return TMDBScraper("test-key", client=client)


@pytest.fixture(autouse=True)
def no_retry_wait(monkeypatch):
    monkeypatch.setattr(TMDBScraper._get.retry, "wait", wait_none())


class TestTMDBScraper:
    """Test movie lookup and merging."""

    @pytest.mark.asyncio
    async def test_scrape_movie(self):
        requests = []

        def handler(request):
            requests.append(request)
            return httpx.Response(
                200,
                json={
                    "results": [
                        {
                            "title": "Amelie",
                            "original_title": "Le Fabuleux Destin d'Amélie Poulain",
                            "release_date": "2001-04-25",
                        }
                    ]
                },
            )

        scraper = make_scraper(handler)
        local = Movie(name="Amelie", year=2001, meta=Metadata(group="GRP"))

        scraped = await scraper.scrape(local)
        await scraper.close()

        assert scraped.name == "Le Fabuleux Destin d'Amélie Poulain"
        assert scraped.year == 2001
        assert scraped.meta.group == "GRP"
        assert requests[0].url.path == "/3/search/movie"
        assert requests[0].url.params["query"] == "Amelie"
        assert requests[0].url.params["year"] == "2001"
        assert requests[0].url.params["api_key"] == "test-key"

    @pytest.mark.asyncio
    async def test_scrape_subtitle_uses_media(self):
        def handler(request):
            return httpx.Response(
                200, json={"results": [{"original_title": "Alien", "release_date": "1979-05-25"}]}
            )

        scraper = make_scraper(handler)
        sub = OnlineSubtitle(link="x", for_media=Movie(name="alien", year=1979))

        assert await scraper.scrape(sub) == Movie(name="Alien", year=1979)

    @pytest.mark.asyncio
    async def test_year_mismatch(self):
        def handler(request):
            return httpx.Response(
                200, json={"results": [{"original_title": "Dune", "release_date": "1984-12-14"}]}
            )

        scraper = make_scraper(handler)

        with pytest.raises(TMDBError, match="year does not match"):
            await scraper.scrape(Movie(name="Dune", year=2021))

    @pytest.mark.asyncio
    async def test_no_results(self):
        scraper = make_scraper(lambda request: httpx.Response(200, json={"results": []}))

        with pytest.raises(TMDBError, match="could not find"):
            await scraper.scrape(Movie(name="Unknown", year=2000))

    @pytest.mark.asyncio
    async def test_http_error(self):
        scraper = make_scraper(lambda request: httpx.Response(401, json={}))

        with pytest.raises(TMDBError, match="search error"):
            await scraper.scrape(Movie(name="Alien", year=1979))

    @pytest.mark.asyncio
    async def test_transport_error_retried(self):
        calls = []

        def handler(request):
            calls.append(request)
            if len(calls) < 3:
                raise httpx.ConnectError("connection refused")
            return httpx.Response(
                200, json={"results": [{"original_title": "Alien", "release_date": "1979-05-25"}]}
            )

        scraper = make_scraper(handler)

        scraped = await scraper.scrape(Movie(name="Alien", year=1979))

        assert scraped.name == "Alien"
        assert len(calls) == 3

    @pytest.mark.asyncio
    async def test_episode_not_supported(self):
        scraper = make_scraper(lambda request: httpx.Response(500))

        with pytest.raises(TMDBError, match="not supported"):
            await scraper.scrape(Episode(show="Fargo", season=1, episode=1))
