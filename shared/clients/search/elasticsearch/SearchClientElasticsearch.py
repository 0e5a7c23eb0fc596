from pydantic import ValidationError

from shared.helper.HelperConfig import HelperConfig
from shared.clients.search.SearchClientInterface import SearchClientInterface
from shared.clients.search.models.Scroll import ScrollPage
from shared.models.config import EnvConfig
from shared.models.errors import TransportError


class SearchClientElasticsearch(SearchClientInterface):
    def __init__(self, helper_config: HelperConfig, host: str | None = None, port: str | None = None):
        super().__init__(helper_config=helper_config)
        self._scheme = self.get_config_val("SCHEME", default="http", val_type="string")
        self._host = host or self.get_config_val("HOST", default="localhost", val_type="string")
        self._port = str(port or self.get_config_val("PORT", default="9200", val_type="string"))

    ##########################################
    ################ GETTER ##################
    ##########################################

    ################ GENERAL ##################
    def _get_engine_name(self) -> str:
        return "Elasticsearch"

    ################ CONFIG ##################
    def _get_required_config(self) -> list[EnvConfig]:
        return [
            EnvConfig(env_key="SCHEME", val_type="string", default="http"),
            EnvConfig(env_key="HOST", val_type="string", default="localhost"),
            EnvConfig(env_key="PORT", val_type="string", default="9200"),
        ]

    ################ ENDPOINTS ##################
    def _get_base_url(self) -> str:
        return f"{self._scheme}://{self._host}:{self._port}"

    def _get_endpoint_healthcheck(self) -> str:
        return "/"

    def _get_endpoint_scan(self, indices: list[str]) -> str:
        if not indices:
            return "/_search"
        return f"/{','.join(indices)}/_search"

    def _get_endpoint_scroll(self) -> str:
        return "/_search/scroll"

    ##########################################
    ########### PAYLOAD BUILDER ##############
    ##########################################

    def get_scan_params(self, timeout: str, size: int) -> dict:
        return {"scroll": timeout, "size": size}

    def get_scroll_payload(self, scroll_id: str, timeout: str) -> dict:
        return {"scroll": timeout, "scroll_id": scroll_id}

    def get_clear_scroll_payload(self, scroll_id: str) -> dict:
        return {"scroll_id": [scroll_id]}

    ##########################################
    ########### RESPONSE PARSER ##############
    ##########################################

    def extract_scroll_page(self, raw_response: dict) -> ScrollPage:
        hits = self._require_key(raw_response, "hits")
        if not isinstance(hits, dict):
            raise TransportError("Malformed response from elasticsearch: 'hits' is not an object")

        # 7.x reports {"value": n, "relation": "eq"}, older versions a plain number
        total = hits.get("total")
        if isinstance(total, dict):
            total = total.get("value")

        try:
            return ScrollPage(
                hits=hits.get("hits", []),
                scroll_id=raw_response.get("_scroll_id"),
                total=total,
                took=raw_response.get("took", 0),
            )
        except ValidationError as e:
            raise TransportError(f"Malformed response from elasticsearch: {e}") from e
