"""HTTP fetching of recipe pages."""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence

import httpx

from recipe_clipper.utils.exceptions import FetchError

logger = logging.getLogger(__name__)

USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/127.0.0.0 Safari/537.36"
)

# A 404 body at least this long that mentions recipe vocabulary is treated as
# a bot-protection response that still carries the page.
MIN_RECIPE_BODY_CHARS = 5_000
RECIPE_KEYWORDS = re.compile(
    r"recipe|ingredient|instructions|directions|servings|prep\s*time|cook\s*time",
    re.IGNORECASE,
)

# Failures for which trying another header set is pointless
_TERMINAL_STATUSES = {429, 503}
# Status used for failures that say nothing about why the site refused us
_GENERIC_FETCH_STATUS = 502


@dataclass(frozen=True)
class FetchStrategy:
    """A named set of request headers to try."""

    name: str
    headers: Dict[str, str] = field(default_factory=dict)


DEFAULT_STRATEGIES: tuple[FetchStrategy, ...] = (
    FetchStrategy(
        "browser",
        {
            "User-Agent": USER_AGENT,
            "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,image/avif,image/webp,*/*;q=0.8",
            "Accept-Language": "en-US,en;q=0.9",
            "Cache-Control": "no-cache",
            "Pragma": "no-cache",
            "Referer": "https://www.google.com/",
            "Sec-Fetch-Dest": "document",
            "Sec-Fetch-Mode": "navigate",
            "Sec-Fetch-Site": "cross-site",
            "Upgrade-Insecure-Requests": "1",
        },
    ),
    FetchStrategy("simple", {"User-Agent": USER_AGENT}),
)


def looks_like_recipe_page(body: str) -> bool:
    """
    Heuristic for 404 responses that are really bot-protection pages.

    Some recipe sites answer automated clients with a 404 status while still
    sending the full page. A body is accepted when it is long enough to be a
    real page and mentions recipe vocabulary. This is a guess, not a proof:
    it can accept a large genuine 404 page that links to other recipes, and
    it rejects protected pages that hide their content.
    """
    if not body:
        return False
    return len(body) >= MIN_RECIPE_BODY_CHARS and RECIPE_KEYWORDS.search(body) is not None


def _describe(exc: Exception) -> str:
    return str(exc) or type(exc).__name__


def _pick_error(errors: Sequence[FetchError]) -> FetchError:
    """
    Choose the failure to report once every strategy has failed.

    A specific refusal (403, 429, timeout) beats a later generic 502, so a
    site that denied the browser headers and then 404ed the bare request
    still reports access denied.
    """
    for error in reversed(errors):
        if error.status_code != _GENERIC_FETCH_STATUS:
            return error
    return errors[-1]


class PageFetcher:
    """Fetches raw HTML, trying each strategy in order."""

    def __init__(
        self,
        timeout: float = 20.0,
        retries: int = 1,
        strategies: Sequence[FetchStrategy] = DEFAULT_STRATEGIES,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        if not strategies:
            raise ValueError("At least one fetch strategy is required")
        self.timeout = timeout
        self.retries = retries
        self.strategies = tuple(strategies)
        self._transport = transport

    async def fetch(self, url: str) -> str:
        """
        Fetch ``url`` and return its HTML body.

        Raises:
            FetchError: When every strategy fails; see ``_pick_error``
        """
        errors: List[FetchError] = []

        for strategy in self.strategies:
            logger.info(f"Fetching recipe page with '{strategy.name}' headers: {url}")
            try:
                html = await self._fetch_with(strategy, url)
                logger.info(
                    "Recipe page fetched",
                    extra={"strategy": strategy.name, "html_chars": len(html)},
                )
                return html
            except FetchError as e:
                errors.append(e)
                logger.warning(
                    f"Fetch strategy '{strategy.name}' failed: {e.message}",
                    extra={"strategy": strategy.name, "status_code": e.status_code},
                )
                if e.status_code in _TERMINAL_STATUSES:
                    break

        raise _pick_error(errors)

    def _build_transport(self) -> httpx.AsyncBaseTransport:
        if self._transport is not None:
            return self._transport
        return httpx.AsyncHTTPTransport(retries=self.retries)

    async def _fetch_with(self, strategy: FetchStrategy, url: str) -> str:
        try:
            async with httpx.AsyncClient(
                timeout=self.timeout,
                headers=strategy.headers,
                follow_redirects=True,
                transport=self._build_transport(),
            ) as client:
                response = await client.get(url)
        except httpx.TimeoutException as e:
            raise FetchError(
                f"Failed to reach recipe site: request timed out ({_describe(e)})",
                status_code=503,
            ) from e
        except httpx.HTTPError as e:
            raise FetchError(
                f"Failed to reach recipe site: {_describe(e)}",
                status_code=502,
            ) from e

        return self._check_response(response)

    def _check_response(self, response: httpx.Response) -> str:
        status = response.status_code
        body = response.text

        if status == 404:
            if looks_like_recipe_page(body):
                logger.warning(
                    "Got 404 but body looks like a recipe page, continuing",
                    extra={"html_chars": len(body)},
                )
            else:
                raise FetchError("Recipe page not found (404)", status_code=502)
        elif status == 403:
            raise FetchError("Access denied by recipe site (403)", status_code=403)
        elif status == 429:
            raise FetchError(
                "Recipe site rate limited the request (429). Please try again later.",
                status_code=429,
            )
        elif not response.is_success:
            raise FetchError(f"Recipe site returned HTTP {status}", status_code=502)

        if not body or not body.strip():
            raise FetchError("Recipe site returned an empty page", status_code=502)

        return body
