import httpx
import pytest

from shared.clients.search.SearchClientManager import SearchClientManager
from shared.clients.search.elasticsearch.SearchClientElasticsearch import SearchClientElasticsearch
from shared.models.errors import TransportError


def test_base_url_from_env(helper_config, monkeypatch):
    monkeypatch.setenv("SEARCH_ELASTICSEARCH_HOST", "es.internal")
    monkeypatch.setenv("SEARCH_ELASTICSEARCH_PORT", "9201")
    monkeypatch.setenv("SEARCH_ELASTICSEARCH_SCHEME", "https")
    client = SearchClientElasticsearch(helper_config=helper_config)
    assert client._get_base_url() == "https://es.internal:9201"


def test_flags_override_env(helper_config, monkeypatch):
    monkeypatch.setenv("SEARCH_ELASTICSEARCH_HOST", "es.internal")
    client = SearchClientElasticsearch(helper_config=helper_config, host="other", port="9300")
    assert client._get_base_url() == "http://other:9300"


def test_defaults(helper_config):
    client = SearchClientElasticsearch(helper_config=helper_config)
    assert client._get_base_url() == "http://localhost:9200"
    assert client.timeout == 30.0
    assert client.get_engine_name() == "elasticsearch"
    assert client._get_endpoint_scan(["a", "b"]) == "/a,b/_search"
    assert client._get_endpoint_scan([]) == "/_search"


def test_payloads(helper_config):
    client = SearchClientElasticsearch(helper_config=helper_config)
    assert client.get_scan_params("10m", 500) == {"scroll": "10m", "size": 500}
    assert client.get_scroll_payload("abc", "10m") == {"scroll": "10m", "scroll_id": "abc"}
    assert client.get_clear_scroll_payload("abc") == {"scroll_id": ["abc"]}


def test_extract_scroll_page_handles_both_total_formats(helper_config):
    client = SearchClientElasticsearch(helper_config=helper_config)
    hit = {"_index": "docs", "_id": "1", "_score": None, "fields": {"a": [1]}}

    page = client.extract_scroll_page({"_scroll_id": "c", "hits": {"total": {"value": 9}, "hits": [hit]}})
    assert page.total == 9
    assert page.scroll_id == "c"
    assert page.hits[0].id == "1"
    assert page.hits[0].type == ""

    assert client.extract_scroll_page({"hits": {"total": 4, "hits": []}}).total == 4


@pytest.mark.parametrize("body", [
    {"took": 1},
    {"hits": []},
    {"hits": {"hits": [{"_index": "docs"}]}},
])
def test_extract_scroll_page_rejects_malformed_responses(helper_config, body):
    client = SearchClientElasticsearch(helper_config=helper_config)
    with pytest.raises(TransportError):
        client.extract_scroll_page(body)


@pytest.mark.asyncio
async def test_non_json_body_is_a_transport_error(helper_config):
    client = SearchClientElasticsearch(helper_config=helper_config)
    await client.boot(transport=httpx.MockTransport(lambda request: httpx.Response(200, text="<html>")))
    try:
        with pytest.raises(TransportError):
            await client.do_scroll("abc", "1m")
    finally:
        await client.close()


@pytest.mark.asyncio
async def test_connection_failure_is_a_transport_error(helper_config):
    def refuse(request):
        raise httpx.ConnectError("connection refused", request=request)

    client = SearchClientElasticsearch(helper_config=helper_config)
    await client.boot(transport=httpx.MockTransport(refuse))
    try:
        with pytest.raises(TransportError):
            await client.do_healthcheck()
    finally:
        await client.close()


@pytest.mark.asyncio
async def test_unparsable_url_is_a_transport_error(helper_config):
    client = SearchClientElasticsearch(helper_config=helper_config, host="localhost", port="abc")
    await client.boot(transport=httpx.MockTransport(lambda request: httpx.Response(200, json={})))
    try:
        with pytest.raises(TransportError):
            await client.do_healthcheck()
    finally:
        await client.close()


@pytest.mark.asyncio
async def test_request_before_boot_fails(helper_config):
    client = SearchClientElasticsearch(helper_config=helper_config)
    with pytest.raises(Exception, match="not initialised"):
        await client.do_scan({}, [], "1m", 10)


def test_manager_picks_engine_from_env(helper_config, monkeypatch):
    monkeypatch.setenv("SEARCH_ENGINE", "ElasticSearch")
    client = SearchClientManager(helper_config=helper_config, host="h", port="1").get_client()
    assert isinstance(client, SearchClientElasticsearch)
    assert client._get_base_url() == "http://h:1"


def test_manager_rejects_unknown_engine(helper_config, monkeypatch):
    monkeypatch.setenv("SEARCH_ENGINE", "solr")
    with pytest.raises(ValueError, match="Unsupported Search engine"):
        SearchClientManager(helper_config=helper_config)
