"""Tests for app.services.replicate — the provider HTTP client.

Provider traffic is served by httpx.MockTransport; nothing leaves the process.
"""

from __future__ import annotations

import json

import httpx
import pytest

from app.exceptions import PollTransportError, ProviderRejectedError
from app.services.orchestration.job_types import JobRequest, JobState
from app.services.replicate import ReplicateClient, split_model_identifier

BASE = "https://api.replicate.test/v1"


def make_client(handler, **kwargs) -> ReplicateClient:
    transport = httpx.MockTransport(handler)
    return ReplicateClient(
        "r8_secret",
        base_url=BASE,
        client=httpx.AsyncClient(transport=transport),
        **kwargs,
    )


class TestSplitModelIdentifier:
    @pytest.mark.parametrize(
        "model, expected",
        [
            ("datalab-to/ocr", ("datalab-to/ocr", None)),
            ("methexis-inc/img2prompt:50ad", ("methexis-inc/img2prompt", "50ad")),
            ("50adaf2d", (None, "50adaf2d")),
        ],
    )
    def test_split(self, model, expected):
        assert split_model_identifier(model) == expected


class TestCreate:
    async def test_model_path_uses_model_route(self):
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["url"] = str(request.url)
            seen["body"] = json.loads(request.content)
            seen["headers"] = request.headers
            return httpx.Response(201, json={"id": "p1", "status": "starting"})

        client = make_client(handler)
        created = await client.create(JobRequest(model="datalab-to/ocr", input={"image": "img"}))

        assert created.id == "p1"
        assert created.status is JobState.STARTING
        assert seen["url"] == f"{BASE}/models/datalab-to/ocr/predictions"
        assert seen["body"] == {"input": {"image": "img"}}
        assert seen["headers"]["authorization"] == "Bearer r8_secret"
        assert "prefer" not in seen["headers"]

    async def test_versioned_model_uses_predictions_route_and_wait_hint(self):
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["url"] = str(request.url)
            seen["body"] = json.loads(request.content)
            seen["prefer"] = request.headers.get("prefer")
            return httpx.Response(201, json={"id": "p1", "status": "succeeded", "output": "done"})

        client = make_client(handler, wait_sec=30)
        created = await client.create(JobRequest(model="owner/name:abc123", input={"image": "img"}), prefer_wait=True)

        assert created.output == "done"
        assert seen["url"] == f"{BASE}/predictions"
        assert seen["body"] == {"version": "abc123", "input": {"image": "img"}}
        assert seen["prefer"] == "wait=30"

    async def test_rejection_carries_status_and_body(self):
        client = make_client(lambda request: httpx.Response(422, text='{"detail": "invalid version"}'))
        with pytest.raises(ProviderRejectedError) as exc_info:
            await client.create(JobRequest(model="o/m"))
        assert exc_info.value.status_code == 422
        assert "invalid version" in exc_info.value.body

    async def test_network_error_is_a_rejection(self):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("refused", request=request)

        with pytest.raises(ProviderRejectedError) as exc_info:
            await make_client(handler).create(JobRequest(model="o/m"))
        assert exc_info.value.status_code is None

    async def test_creation_is_not_retried(self):
        calls = []

        def handler(request: httpx.Request) -> httpx.Response:
            calls.append(request)
            return httpx.Response(503, text="overloaded")

        with pytest.raises(ProviderRejectedError):
            await make_client(handler, get_attempts=3).create(JobRequest(model="o/m"))
        assert len(calls) == 1


class TestGet:
    async def test_canceled_spelling_is_normalized(self):
        client = make_client(lambda request: httpx.Response(200, json={"id": "p1", "status": "canceled"}))
        current = await client.get("p1")
        assert current.status is JobState.CANCELLED

    async def test_non_2xx_raises_transport_error(self):
        client = make_client(lambda request: httpx.Response(404, text="not found"), get_attempts=1)
        with pytest.raises(PollTransportError) as exc_info:
            await client.get("p1")
        assert "404" in exc_info.value.details

    async def test_unknown_status_is_malformed(self):
        client = make_client(lambda request: httpx.Response(200, json={"id": "p1", "status": "queued-ish"}))
        with pytest.raises(PollTransportError):
            await client.get("p1")

    async def test_non_json_body_is_malformed(self):
        client = make_client(lambda request: httpx.Response(200, text="<html>"))
        with pytest.raises(PollTransportError):
            await client.get("p1")

    async def test_transient_error_is_retried(self):
        responses = [httpx.Response(502, text="bad gateway"), httpx.Response(200, json={"id": "p1", "status": "processing"})]

        def handler(request: httpx.Request) -> httpx.Response:
            return responses.pop(0)

        current = await make_client(handler, get_attempts=2).get("p1")
        assert current.status is JobState.PROCESSING
        assert responses == []

    async def test_client_error_is_not_retried(self):
        calls = []

        def handler(request: httpx.Request) -> httpx.Response:
            calls.append(request)
            return httpx.Response(401, text="unauthenticated")

        with pytest.raises(PollTransportError):
            await make_client(handler, get_attempts=3).get("p1")
        assert len(calls) == 1


class TestCancel:
    async def test_cancel_posts_to_cancel_route(self):
        seen = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append((request.method, str(request.url)))
            return httpx.Response(200, json={"id": "p1", "status": "canceled"})

        await make_client(handler).cancel("p1")
        assert seen == [("POST", f"{BASE}/predictions/p1/cancel")]


def test_token_required():
    with pytest.raises(ValueError):
        ReplicateClient("")
