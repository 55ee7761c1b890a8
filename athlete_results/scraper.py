from types import TracebackType

import httpx
import structlog

from .config import DEFAULT_USER_AGENT
from .exceptions import NetworkError

logger = structlog.get_logger(__name__)


class Scraper:
    """Best-effort async page fetcher.

    Usage:
        async with Scraper() as scraper:
            html = await scraper.get("https://example.com/profile")

    A failed fetch never raises: it is logged and reported as an empty page,
    so one unreachable site does not stop the others from being scraped.
    """

    def __init__(
        self,
        user_agent: str = DEFAULT_USER_AGENT,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        """Initializes the Scraper.

        Args:
            user_agent: User-Agent header sent with every request.
            transport: Optional httpx transport, used by tests to fake responses.
        """
        self.user_agent = user_agent
        self.transport = transport
        self._client: httpx.AsyncClient | None = None

    async def __aenter__(self) -> "Scraper":
        self._client = httpx.AsyncClient(
            transport=self.transport,
            follow_redirects=True,
            headers={"User-Agent": self.user_agent},
        )
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        if self._client:
            await self._client.aclose()
            self._client = None

    async def get(self, url: str) -> str:
        """Fetches a page once, without retries.

        Args:
            url: Target URL.

        Returns:
            The response body, or an empty string for a malformed URL, a
            transport error or a non-2xx status.
        """
        if self._client is None:
            raise RuntimeError("Scraper must be used as an async context manager")

        logger.info("fetching_url", url=url)
        try:
            response = await self._client.get(url)
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            error = NetworkError(f"Request failed: {e}", url=url)
            logger.warning("fetch_failed", **error.to_dict())
            return ""

        if not response.is_success:
            error = NetworkError(
                f"Unexpected status {response.status_code}",
                url=url,
                status_code=response.status_code,
            )
            logger.warning("fetch_failed", **error.to_dict())
            return ""

        return response.text
