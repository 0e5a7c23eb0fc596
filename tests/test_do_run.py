import io

import pytest

from conftest import FakeElasticsearch, make_hit
from services.estab_export.StreamWriter import StreamWriter
from services.estab_export.estab_export import build_client, do_run
from shared.models.config import ExportConfig
from shared.models.errors import ConfigurationError


@pytest.mark.asyncio
async def test_do_run_checks_health_then_exports(helper_config):
    backend = FakeElasticsearch([[make_hit(1, tags=["a", "b"])], [make_hit(2, tags=[])]])
    config = ExportConfig(fields=["_id", "tags"], header=True)
    client = build_client(helper_config, config)
    out = io.BytesIO()
    with StreamWriter(out) as writer:
        emitted = await do_run(helper_config, config, client, writer, transport=backend.transport())

    assert emitted == 2
    assert out.getvalue() == b"_id\ttags\n1\ta|b\n2\t\n"
    assert backend.requests[0].method == "GET"
    assert backend.requests[0].url.path == "/"
    assert client._client is None


def test_build_client_rejects_unknown_engine(helper_config, monkeypatch):
    monkeypatch.setenv("SEARCH_ENGINE", "nope")
    with pytest.raises(ConfigurationError):
        build_client(helper_config, ExportConfig())


def test_build_client_rejects_bad_timeout(helper_config, monkeypatch):
    monkeypatch.setenv("SEARCH_TIMEOUT", "soon")
    with pytest.raises(ConfigurationError):
        build_client(helper_config, ExportConfig())
