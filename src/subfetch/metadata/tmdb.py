"""TheMovieDB scraper with retry logic."""

from datetime import date
from typing import Optional

import httpx
import structlog
from tenacity import (
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from subfetch.exceptions import MediaMergeError, TMDBError
from subfetch.models.media import Movie, Video, merge
from subfetch.models.subtitle import LocalSubtitle, OnlineSubtitle

logger = structlog.get_logger(__name__)


class TMDBScraper:
    """Look up canonical movie information on themoviedb.org."""

    BASE_URL = "https://api.themoviedb.org/3"

    def __init__(self, api_key: str, client: Optional[httpx.AsyncClient] = None):
        """Initialize TMDB scraper.

        Args:
            api_key: TMDB API key
            client: Optional HTTP client (a new one is created if omitted)
        """
        self.api_key = api_key
        self.client = client or httpx.AsyncClient(timeout=10.0)

    async def close(self):
        """Close HTTP client."""
        await self.client.aclose()

    async def scrape(self, media) -> Video:
        """Look up a media item and merge the canonical information into it.

        Subtitles are scraped through the media they belong to.

        Args:
            media: Movie, or a subtitle of a movie

        Returns:
            New media value with the canonical title

        Raises:
            TMDBError: If the media is not supported, not found, or the
                API failed
        """
        if isinstance(media, (LocalSubtitle, OnlineSubtitle)):
            return await self.scrape(media.for_media)

        if not isinstance(media, Movie):
            raise TMDBError("tmdb: media not supported")

        found = await self.search_movie(media)

        try:
            return merge(media, found)
        except MediaMergeError as e:
            raise TMDBError(f"tmdb: {e}") from e

    async def search_movie(self, movie: Movie) -> Movie:
        """Search a movie by name and year.

        Args:
            movie: Locally parsed movie

        Returns:
            Movie built from the first search result

        Raises:
            TMDBError: If nothing was found or the response is unusable
        """
        try:
            data = await self._get(
                "/search/movie", {"query": movie.name, "year": movie.year}
            )
        except httpx.HTTPError as e:
            logger.error("TMDB search error", query=movie.name, error=str(e))
            raise TMDBError(f"TMDB search error: {e}") from e

        results = data.get("results", [])
        logger.info(
            "Searched TMDB for movie",
            query=movie.name,
            year=movie.year,
            result_count=len(results),
        )

        if not results:
            raise TMDBError("could not find media on tmdb")

        first = results[0]
        try:
            year = date.fromisoformat(first["release_date"]).year
        except (KeyError, TypeError, ValueError) as e:
            raise TMDBError(f"tmdb returned invalid release date: {e}") from e

        return Movie(
            name=first.get("original_title") or first.get("title") or movie.name,
            year=year,
        )

    @retry(
        stop=stop_after_attempt(3),
        wait=wait_exponential(min=1, max=10),
        retry=retry_if_exception_type(httpx.TransportError),
        reraise=True,
    )
    async def _get(self, path: str, params: dict) -> dict:
        response = await self.client.get(
            f"{self.BASE_URL}{path}",
            params={"api_key": self.api_key, **params},
        )
        response.raise_for_status()
        return response.json()
