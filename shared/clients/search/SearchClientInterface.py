from abc import abstractmethod

import httpx
from shared.clients.ClientInterface import ClientInterface
from shared.clients.search.models.Scroll import ScrollPage
from shared.models.errors import TransportError

from shared.helper.HelperConfig import HelperConfig


class SearchClientInterface(ClientInterface):
    def __init__(self, helper_config: HelperConfig):
        super().__init__(helper_config=helper_config)

    ##########################################
    ################ GETTER ##################
    ##########################################

    ################ GENERAL ##################
    def _get_client_type(self) -> str:
        """
        Returns the type of the client. E.g. "search"
        """
        return "search"

    ################ ENDPOINTS ##################
    @abstractmethod
    def _get_endpoint_scan(self, indices: list[str]) -> str:
        """
        Returns the endpoint path that opens a scroll over the given collections.

        Args:
            indices (list[str]): Collections to search. Empty means all collections.

        Returns:
            str: The endpoint path for scan requests (e.g. "/logs-a,logs-b/_search")
        """
        pass

    @abstractmethod
    def _get_endpoint_scroll(self) -> str:
        """
        Returns the endpoint path for scroll requests and cursor release.

        Returns:
            str: The endpoint path for scroll requests (e.g. "/_search/scroll")
        """
        pass

    ########### PAYLOAD BUILDER ##############
    @abstractmethod
    def get_scan_params(self, timeout: str, size: int) -> dict:
        """
        Returns the URL parameters for the initial scan request.

        Args:
            timeout (str): Scroll time-to-live, e.g. "10m".
            size (int): Number of hits per page.

        Returns:
            dict: The query parameters.
        """
        pass

    @abstractmethod
    def get_scroll_payload(self, scroll_id: str, timeout: str) -> dict:
        """
        Returns the payload for a scroll request.

        Args:
            scroll_id (str): Cursor returned by the previous page.
            timeout (str): Scroll time-to-live to renew the cursor with.

        Returns:
            dict: The payload for the scroll request.
        """
        pass

    @abstractmethod
    def get_clear_scroll_payload(self, scroll_id: str) -> dict:
        """
        Returns the payload that releases a server-side cursor.

        Args:
            scroll_id (str): Cursor to release.

        Returns:
            dict: The payload for the clear request.
        """
        pass

    ########### RESPONSE PARSER ##############
    @abstractmethod
    def extract_scroll_page(self, raw_response: dict) -> ScrollPage:
        """
        Extracts hits, next cursor and totals from a raw scan or scroll response.

        Args:
            raw_response (dict): The raw JSON response.

        Returns:
            ScrollPage: The parsed page.

        Raises:
            TransportError: If the response does not have the expected shape.
        """
        pass

    ##########################################
    ############### REQUESTS #################
    ##########################################

    async def do_scan(self, query: dict, indices: list[str], timeout: str, size: int) -> ScrollPage:
        """Open a scroll for a query and return its first page.

        Args:
            query (dict): The query document, sent as request body.
            indices (list[str]): Collections to search. Empty means all collections.
            timeout (str): Scroll time-to-live, e.g. "10m".
            size (int): Number of hits per page.

        Returns:
            ScrollPage: The first page, carrying the cursor for do_scroll().
        """
        resp = await self.do_request(
            method="POST",
            json=query,
            params=self.get_scan_params(timeout, size),
            endpoint=self._get_endpoint_scan(indices),
            raise_on_error=True,
        )
        return self.extract_scroll_page(self.decode_json(resp))

    async def do_scroll(self, scroll_id: str, timeout: str) -> ScrollPage:
        """Fetch the next page of an open scroll.

        An expired cursor comes back as a non-2xx status and is raised as a
        TransportError like any other failed request.

        Args:
            scroll_id (str): Cursor returned by the previous page.
            timeout (str): Scroll time-to-live to renew the cursor with.

        Returns:
            ScrollPage: The next page. An empty page means the scroll is exhausted.
        """
        resp = await self.do_request(
            method="POST",
            json=self.get_scroll_payload(scroll_id, timeout),
            endpoint=self._get_endpoint_scroll(),
            raise_on_error=True,
        )
        return self.extract_scroll_page(self.decode_json(resp))

    async def do_clear_scroll(self, scroll_id: str) -> httpx.Response:
        """Release a server-side cursor.

        Args:
            scroll_id (str): Cursor to release.

        Returns:
            httpx.Response: The raw response. Not raised on a non-2xx status.
        """
        return await self.do_request(
            method="DELETE",
            json=self.get_clear_scroll_payload(scroll_id),
            endpoint=self._get_endpoint_scroll(),
        )

    def _require_key(self, raw_response: dict, key: str) -> object:
        if key not in raw_response:
            raise TransportError(f"Malformed response from {self.get_engine_name()}: missing '{key}'")
        return raw_response[key]
