"""Link-header pagination for registry list endpoints.

List endpoints (``/v2/_catalog``, ``/v2/<name>/tags/list``) return one page
per request and point to the next one out-of-band::

    Link: </v2/_catalog?last=nginx&n=100>; rel="next"

A page without a ``rel="next"`` link is the last one. The JSON body of each
page is turned into the caller's shape by a ``decode`` callable.

## Example

```python
paginator = Paginator(client)

# All pages, or an exception (partial results are discarded)
pages = paginator.fetch_all(url, TagList.from_json)
tags = [tag for page in pages for tag in page.tags]

# Streaming, one page at a time
for page in paginator.iter_pages(url, TagList.from_json):
    ...
```
"""

import logging
from collections.abc import Callable, Iterator
from threading import Event
from typing import Any, TypeVar

import httpx

from registry_client.errors.exceptions import NetworkError, ProtocolViolationError
from registry_client.hooks import LogfCallback, quiet

logger = logging.getLogger(__name__)

T = TypeVar("T")


def next_page_url(response: httpx.Response, url: str | httpx.URL) -> str | None:
    """Return the absolute ``rel="next"`` URL of a page, or None on the last page.

    Relative links are resolved against ``url``, the URL the page was finally
    served from (``response.url`` after any redirects).
    """
    link = response.links.get("next")
    if not link or not link.get("url"):
        return None
    return str(httpx.URL(url).join(link["url"]))


class Paginator:
    """Fetch paginated JSON through an ``httpx.Client``.

    Errors raised by the client's transport stack propagate unchanged.

    Args:
        client: Client whose transport is the registry transport stack
        headers: Extra headers sent with every page request
        logf: Hook invoked before each page request
        cancel_event: When set, pagination stops before the next page
    """

    def __init__(
        self,
        client: httpx.Client,
        *,
        headers: dict[str, str] | None = None,
        logf: LogfCallback = quiet,
        cancel_event: Event | None = None,
    ) -> None:
        self._client = client
        self.headers = headers or {"Accept": "application/json"}
        self.logf = logf
        self.cancel_event = cancel_event

    def fetch_page(self, url: str, decode: Callable[[Any], T]) -> tuple[T, str | None]:
        """Fetch and decode a single page.

        Args:
            url: Absolute page URL
            decode: Callable turning the JSON document into the page shape

        Returns:
            Tuple of (decoded page, next page URL or None)

        Raises:
            ProtocolViolationError: The body is not JSON or does not decode
            RegistryError: Any failure raised by the transport stack
        """
        self.logf("registry.page url=%s", url)
        response = self._client.get(url, headers=self.headers)

        try:
            data = response.json()
        except ValueError as e:
            raise ProtocolViolationError(
                f"Undecodable JSON page from {url}: {e}",
                status_code=response.status_code,
                response=response,
            ) from e

        try:
            page = decode(data)
        except (KeyError, TypeError, ValueError) as e:
            raise ProtocolViolationError(
                f"Unexpected page shape from {url}: {e}",
                status_code=response.status_code,
                response=response,
            ) from e

        return page, next_page_url(response, response.url)

    def iter_pages(self, url: str, decode: Callable[[Any], T]) -> Iterator[T]:
        """Yield decoded pages until a page has no next link.

        Raises:
            ProtocolViolationError: A next link points to a page already
                fetched in this iteration
            NetworkError: ``cancel_event`` was set between two pages
        """
        seen: set[str] = set()
        next_url: str | None = str(httpx.URL(url))

        while next_url is not None:
            if self.cancel_event is not None and self.cancel_event.is_set():
                raise NetworkError(f"Pagination cancelled before {next_url}")
            if next_url in seen:
                raise ProtocolViolationError(f"Pagination cycle: {next_url} was already fetched")
            seen.add(next_url)

            page, next_url = self.fetch_page(next_url, decode)
            logger.debug(f"Fetched page {len(seen)} from {url}, more={next_url is not None}")
            yield page

    def fetch_all(self, url: str, decode: Callable[[Any], T]) -> list[T]:
        """Fetch every page, in order.

        Nothing is returned if any page fails; the exception propagates.
        """
        return list(self.iter_pages(url, decode))
