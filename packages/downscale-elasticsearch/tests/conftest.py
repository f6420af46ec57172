"""Shared fixtures for Elasticsearch adapter tests."""

import json

import httpx
import pytest
from httpx import Request, Response


class MockTransport(httpx.AsyncBaseTransport):
    """Mock transport returning canned responses and recording requests."""

    def __init__(self, responses: dict[str, dict]):
        """
        Initialize with mapping of paths to response data.

        Args:
            responses: Dict mapping URL paths to response data.
                       Each value may have 'status_code' and 'json' keys.
        """
        self._responses = responses
        self.requests: list[Request] = []

    async def handle_async_request(self, request: Request) -> Response:
        """Handle an async request by returning mocked response."""
        self.requests.append(request)
        path = request.url.path
        if path in self._responses:
            resp_data = self._responses[path]
            return Response(
                status_code=resp_data.get("status_code", 200),
                json=resp_data.get("json", {}),
                request=request,
            )
        # Return 404 for unknown paths
        return Response(status_code=404, request=request)

    def bodies(self, path: str) -> list[dict]:
        """JSON bodies of every recorded request to path."""
        return [
            json.loads(request.content)
            for request in self.requests
            if request.url.path == path and request.content
        ]


@pytest.fixture
def nodes_response_v7():
    """Sample nodes info response from a 7.x cluster."""
    return {
        "nodes": {
            "a1": {"name": "master-0", "version": "7.4.0", "roles": ["master"]},
            "b2": {"name": "master-1", "version": "7.4.0", "roles": ["master"]},
            "c3": {"name": "data-0", "version": "7.4.0", "roles": ["data", "ingest"]},
        }
    }


@pytest.fixture
def nodes_response_mixed():
    """Sample nodes info response in the middle of a 6.x to 7.x upgrade."""
    return {
        "nodes": {
            "a1": {"name": "master-0", "version": "6.8.0", "roles": ["master"]},
            "b2": {"name": "master-1", "version": "7.4.0", "roles": ["master"]},
        }
    }


@pytest.fixture
def acknowledged():
    return {"json": {"acknowledged": True}}


@pytest.fixture
def mock_transport():
    """Factory building a MockTransport from a path to response mapping."""
    return MockTransport
