"""Tests for the REST API (run without Redis)."""

import pytest
from fastapi.testclient import TestClient

from api.main import app


@pytest.fixture
def client():
    # no context manager: lifespan stays off, so caching is disabled
    return TestClient(app)


class TestHealth:
    def test_health(self, client):
        response = client.get("/health")
        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "ok"
        assert body["cache_enabled"] is False
        assert body["redis_connected"] is False

    def test_cache_stats_without_redis(self, client):
        body = client.get("/cache/stats").json()
        assert body["enabled"] is False
        assert body["connected"] is False
        assert body["keys_count"] is None


class TestCompressEndpoint:
    def test_defaults(self, client):
        response = client.post("/compress", json={"html": "<div><!-- c --></div>"})
        assert response.status_code == 200
        assert response.json() == {"text": "<div></div>"}

    def test_options(self, client):
        response = client.post("/compress", json={
            "html": '<div class="a">\n  <p>x</p>\n</div>',
            "remove_quotes": True,
            "remove_intertag_spaces": True,
        })
        assert response.json()["text"] == "<div class=a><p>x</p></div>"

    def test_presets(self, client):
        response = client.post("/compress", json={
            "html": "<div>  <?php echo  1; ?>  </div>",
            "preserve_presets": ["php"],
            "remove_intertag_spaces": True,
        })
        assert response.json()["text"] == "<div><?php echo  1; ?></div>"

    def test_unknown_preset(self, client):
        response = client.post("/compress", json={"html": "<p>x</p>", "preserve_presets": ["jsp"]})
        assert response.status_code == 422

    def test_invalid_pattern(self, client):
        response = client.post("/compress", json={"html": "<p>x</p>", "preserve_patterns": ["[bad"]})
        assert response.status_code == 422
        assert "Invalid regex pattern" in response.json()["detail"]

    def test_invalid_surrounding_setting(self, client):
        response = client.post("/compress", json={"html": "<p>x</p>", "remove_surrounding_spaces": ","})
        assert response.status_code == 422

    def test_missing_html(self, client):
        assert client.post("/compress", json={}).status_code == 422


class TestStatsEndpoint:
    def test_stats(self, client):
        html = "<div>    <pre>a  b</pre>    </div>"
        body = client.post("/compress/stats", json={"html": html}).json()
        assert body["text"] == "<div> <pre>a  b</pre> </div>"
        assert body["original_length"] == len(html)
        assert body["compressed_length"] == len(body["text"])
        assert body["preserved_size"] == 4
        assert body["original_metrics"]["filesize"] == len(html)
        assert body["compressed_metrics"]["filesize"] == len(body["text"])

    def test_empty_document(self, client):
        body = client.post("/compress/stats", json={"html": ""}).json()
        assert body["text"] == ""
        assert body["ratio"] == 1.0
        assert body["original_metrics"] is None


class TestBatchEndpoint:
    def test_batch(self, client):
        response = client.post("/compress/batch", json={
            "items": [
                {"id": "a", "html": "<p>  one  </p>"},
                {"id": "b", "html": "<p>two</p>"},
            ],
        })
        assert response.status_code == 200
        body = response.json()
        assert [item["id"] for item in body["items"]] == ["a", "b"]
        assert body["items"][0]["text"] == "<p> one </p>"
        assert body["items"][1]["text"] == "<p>two</p>"
        assert body["total_original_length"] == 24
        assert body["total_compressed_length"] == 22

    def test_batch_invalid_pattern(self, client):
        response = client.post("/compress/batch", json={
            "items": [{"id": "a", "html": "<p>x</p>"}],
            "preserve_patterns": ["(bad"],
        })
        assert response.status_code == 422


class TestXmlEndpoint:
    def test_xml(self, client):
        response = client.post("/compress/xml", json={"xml": "<a>\n  <!-- c -->\n  <b/>\n</a>"})
        assert response.status_code == 200
        assert response.json()["text"] == "<a><b/></a>"

    def test_xml_keep_comments(self, client):
        response = client.post("/compress/xml", json={
            "xml": "<a>\n  <!-- c -->\n</a>",
            "remove_comments": False,
        })
        assert response.json()["text"] == "<a><!-- c --></a>"
