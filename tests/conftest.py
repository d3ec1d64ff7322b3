"""Shared fixtures: canned HTTP responses for the upstream service and the proxy."""

import pytest


class FakeResponse:
    """Minimal stand-in for requests.Response."""

    def __init__(self, status_code=200, payload=None, json_error=None):
        self.status_code = status_code
        self._payload = payload
        self._json_error = json_error

    @property
    def ok(self):
        return self.status_code < 400

    def json(self):
        if self._json_error is not None:
            raise self._json_error
        return self._payload


@pytest.fixture
def make_response():
    """Factory for FakeResponse objects."""
    return FakeResponse


@pytest.fixture
def java_test():
    """Single recommendation with no description and no downloads."""
    return {
        "name": "Java Test",
        "test_types": "Knowledge & Skills",
        "remote_testing": "Yes",
        "url": "https://www.shl.com/products/product-catalog/view/java-8-new/",
    }


@pytest.fixture
def sample_results():
    """Three recommendations in upstream order; two share a remote_testing value."""
    return [
        {"name": "Python (New)", "test_types": "K", "remote_testing": "Yes"},
        {"name": "Automata - Fix", "test_types": "S", "remote_testing": "No"},
        {
            "name": "Core Java",
            "remote_testing": "Yes",
            "description": "Multi-choice test of Java knowledge.",
            "downloads": [
                {"title": "Product Fact Sheet", "url": "https://example.com/f.pdf", "language": "English"},
            ],
        },
    ]
