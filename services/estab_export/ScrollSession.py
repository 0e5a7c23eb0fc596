"""Scan/scroll pagination over a search client.

A session opens one server-side cursor, advances it page by page and
terminates on the first empty page or when the backend stops handing out a
cursor. It cannot be restarted: a new run needs a new session.
"""

from enum import Enum
from typing import AsyncGenerator

from shared.clients.search.SearchClientInterface import SearchClientInterface
from shared.clients.search.models.Hit import Hit
from shared.clients.search.models.Scroll import ScrollPage
from shared.helper.HelperConfig import HelperConfig
from shared.models.errors import TransportError


class ScrollState(str, Enum):
    NEW = "new"
    OPENED = "opened"
    ADVANCING = "advancing"
    EXHAUSTED = "exhausted"
    CLOSED = "closed"


class ScrollSession:
    """Owns the cursor of one scan/scroll query."""

    def __init__(
        self,
        helper_config: HelperConfig,
        client: SearchClientInterface,
        query: dict,
        indices: list[str],
        timeout: str,
        size: int,
    ) -> None:
        self.logging = helper_config.get_logger()
        self._client = client
        self._query = query
        self._indices = indices
        self._timeout = timeout
        self._size = size

        self._scroll_id: str | None = None
        self._state = ScrollState.NEW
        self._pages = 0
        self._hits_seen = 0
        self._total: int | None = None

    ##########################################
    ################ GETTER ##################
    ##########################################

    def get_state(self) -> ScrollState:
        return self._state

    def get_hits_seen(self) -> int:
        return self._hits_seen

    ##########################################
    ############### PROTOCOL #################
    ##########################################

    async def open(self) -> ScrollPage:
        """Send the scan request and return the first page.

        Returns:
            ScrollPage: The first page. It may already be empty.

        Raises:
            TransportError: If the request fails.
            RuntimeError: If the session was opened before.
        """
        if self._state != ScrollState.NEW:
            raise RuntimeError(f"Scroll session cannot be reopened (state: {self._state.value}).")
        self.logging.info(
            "Opening scroll on %s (indices: %s, page size: %d, ttl: %s)",
            self._client.get_engine_name(), " ".join(self._indices) or "all", self._size, self._timeout,
        )
        page = await self._client.do_scan(self._query, self._indices, self._timeout, self._size)
        self._total = page.total
        self._state = ScrollState.OPENED
        return self._accept(page)

    async def advance(self) -> ScrollPage | None:
        """Fetch the next page.

        Returns:
            ScrollPage | None: The next page, or None once the scroll is exhausted.
            An exhausted or closed session never sends another request.

        Raises:
            TransportError: If the request fails, including an expired cursor.
            RuntimeError: If the session was never opened.
        """
        if self._state == ScrollState.NEW:
            raise RuntimeError("Scroll session is not open. Call open() first.")
        if self._state in (ScrollState.EXHAUSTED, ScrollState.CLOSED):
            return None
        if self._scroll_id is None:
            self._state = ScrollState.EXHAUSTED
            return None

        self._state = ScrollState.ADVANCING
        page = await self._client.do_scroll(self._scroll_id, self._timeout)
        self._state = ScrollState.OPENED
        page = self._accept(page)
        return None if page.is_empty() else page

    async def iter_hits(self) -> AsyncGenerator[Hit, None]:
        """Yield every hit of the query, page after page, in backend order."""
        page: ScrollPage | None = await self.open()
        while page is not None:
            for hit in page.hits:
                yield hit
            page = await self.advance()

    async def close(self) -> None:
        """Release the server-side cursor, if one is held."""
        if self._state == ScrollState.CLOSED:
            return
        scroll_id, self._scroll_id = self._scroll_id, None
        self._state = ScrollState.CLOSED
        if scroll_id is None:
            return
        try:
            resp = await self._client.do_clear_scroll(scroll_id)
        except TransportError as e:
            self.logging.warning("Could not release scroll cursor: %s", e)
            return
        if resp.status_code >= 300:
            self.logging.warning("Could not release scroll cursor (status %d): %s", resp.status_code, resp.text)
        else:
            self.logging.debug("Released scroll cursor.")

    ##########################################
    ############### HELPERS ##################
    ##########################################

    def _accept(self, page: ScrollPage) -> ScrollPage:
        """Record a page, track the latest cursor and detect exhaustion."""
        self._pages += 1
        if page.scroll_id is not None:
            self._scroll_id = page.scroll_id
        if page.is_empty():
            self._state = ScrollState.EXHAUSTED
            self.logging.info("Scroll exhausted after %d pages, %d hits.", self._pages, self._hits_seen)
            return page

        self._hits_seen += len(page.hits)
        self.logging.info(
            "Fetched page %d from %s (%d hits), total hits so far: %d of %s",
            self._pages, self._client.get_engine_name(), len(page.hits), self._hits_seen,
            self._total if self._total is not None else "?",
        )
        if page.scroll_id is None:
            # no cursor to continue with: this was the last page
            self._state = ScrollState.EXHAUSTED
        return page
