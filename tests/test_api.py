import pytest
import requests
from fastapi.testclient import TestClient

from app import upstream
from app.app import app

UPSTREAM = "https://vishalpainjane-shl-assignment.hf.space/recommend"


@pytest.fixture
def client():
    """FastAPI test client."""
    return TestClient(app)


@pytest.fixture
def upstream_calls(monkeypatch):
    """Record upstream GETs; set .response or .error to control the outcome."""

    class Recorder:
        def __init__(self):
            self.urls = []
            self.response = None
            self.error = None

        def get(self, url, timeout=None):
            self.urls.append(url)
            if self.error is not None:
                raise self.error
            return self.response

    recorder = Recorder()
    monkeypatch.setattr(upstream, "UPSTREAM_URL", UPSTREAM)
    monkeypatch.setattr(upstream.requests, "get", recorder.get)
    return recorder


class TestUpstreamUrl:
    """Test upstream URL construction."""

    def test_space_encoded_as_percent_20(self):
        assert upstream.build_url("java developer", UPSTREAM) == (
            f"{UPSTREAM}?query=java%20developer&max_results=5"
        )

    def test_reserved_characters_encoded(self):
        """Test that &, / and = cannot leak into the upstream query string."""
        assert upstream.encode_query("a&b=c/d") == "a%26b%3Dc%2Fd"

    def test_uri_component_safe_characters_kept(self):
        assert upstream.encode_query("it's (fun)!*~-_.") == "it's%20(fun)!*~-_."

    def test_unicode_encoded_as_utf8(self):
        assert upstream.encode_query("café") == "caf%C3%A9"


class TestRecommendEndpoint:
    """Test POST /api/recommend."""

    def test_forwards_query_and_relays_results(self, client, upstream_calls, make_response, java_test):
        upstream_calls.response = make_response(200, {"recommendations": [java_test]})

        response = client.post("/api/recommend", json={"query": "java developer"})

        assert upstream_calls.urls == [f"{UPSTREAM}?query=java%20developer&max_results=5"]
        assert response.status_code == 200
        assert response.json() == {"results": [java_test]}

    def test_results_keep_upstream_order_and_fields(self, client, upstream_calls, make_response, sample_results):
        extra = dict(sample_results[0], score=0.93)
        upstream_calls.response = make_response(200, {"recommendations": [extra, *sample_results[1:]]})

        response = client.post("/api/recommend", json={"query": "python"})

        assert response.json()["results"] == [extra, *sample_results[1:]]

    def test_missing_recommendations_key_yields_empty_results(self, client, upstream_calls, make_response):
        upstream_calls.response = make_response(200, {"message": "nothing"})

        response = client.post("/api/recommend", json={"query": "python"})

        assert response.status_code == 200
        assert response.json() == {"results": []}

    def test_empty_query_is_forwarded(self, client, upstream_calls, make_response):
        upstream_calls.response = make_response(200, {"recommendations": []})

        response = client.post("/api/recommend", json={"query": ""})

        assert response.status_code == 200
        assert upstream_calls.urls == [f"{UPSTREAM}?query=&max_results=5"]

    def test_health(self, client):
        assert client.get("/health").json() == {"status": "ok"}


class TestRecommendValidation:
    """Test the 400 path."""

    @pytest.mark.parametrize("body", [{}, {"query": None}, {"query": 5}, {"query": ["java"]}, ["java"]])
    def test_rejects_missing_or_non_string_query(self, client, upstream_calls, body):
        response = client.post("/api/recommend", json=body)

        assert response.status_code == 400
        assert response.json() == {"error": "Query parameter is required and must be a string"}
        assert upstream_calls.urls == []


class TestRecommendErrorHandling:
    """Test upstream and unexpected failures."""

    def test_upstream_status_is_relayed(self, client, upstream_calls, make_response):
        upstream_calls.response = make_response(503, {"detail": "down"})

        response = client.post("/api/recommend", json={"query": "java"})

        assert response.status_code == 503
        assert response.json() == {
            "error": "Failed to fetch recommendations",
            "details": "API returned status 503",
        }
        assert len(upstream_calls.urls) == 1

    def test_upstream_not_found_is_relayed(self, client, upstream_calls, make_response):
        upstream_calls.response = make_response(404, None)

        response = client.post("/api/recommend", json={"query": "java"})

        assert response.status_code == 404
        assert response.json()["details"] == "API returned status 404"

    def test_network_error_returns_500(self, client, upstream_calls):
        upstream_calls.error = requests.ConnectionError("connection refused")

        response = client.post("/api/recommend", json={"query": "java"})

        assert response.status_code == 500
        assert response.json() == {
            "error": "Failed to process request",
            "details": "connection refused",
        }
        assert len(upstream_calls.urls) == 1

    def test_malformed_upstream_body_returns_500(self, client, upstream_calls, make_response):
        upstream_calls.response = make_response(200, json_error=ValueError("Expecting value"))

        response = client.post("/api/recommend", json={"query": "java"})

        assert response.status_code == 500
        assert response.json()["details"] == "Expecting value"

    def test_non_object_upstream_body_returns_500(self, client, upstream_calls, make_response):
        upstream_calls.response = make_response(200, ["not", "an", "object"])

        response = client.post("/api/recommend", json={"query": "java"})

        assert response.status_code == 500
        assert response.json()["error"] == "Failed to process request"

    def test_malformed_request_body_returns_500(self, client, upstream_calls):
        response = client.post(
            "/api/recommend",
            content=b"{not json",
            headers={"Content-Type": "application/json"},
        )

        assert response.status_code == 500
        body = response.json()
        assert body["error"] == "Failed to process request"
        assert "Traceback" not in body["details"]
        assert upstream_calls.urls == []

    def test_exception_without_message_reports_unknown_error(self, client, upstream_calls):
        upstream_calls.error = requests.Timeout()

        response = client.post("/api/recommend", json={"query": "java"})

        assert response.status_code == 500
        assert response.json()["details"] == "Unknown error"


class TestOpenApi:
    """Test the published schema."""

    def test_request_body_documented(self, client):
        operation = client.get("/openapi.json").json()["paths"]["/api/recommend"]["post"]
        schema = operation["requestBody"]["content"]["application/json"]["schema"]

        assert schema["properties"]["query"]["type"] == "string"
        assert schema["required"] == ["query"]
