"""
Tests for the runtime operations client, against httpx.MockTransport stub servers.
"""

import asyncio
import json

import httpx
import pytest

from operations_codegen.client import (
    ClientResponse,
    OperationsClient,
    ResponseError,
    SubscriptionState,
    drop_unset,
    split_messages,
)

BASE_URL = "http://api.test"


def make_client(handler, **kwargs) -> OperationsClient:
    http_client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return OperationsClient(BASE_URL, http_client=http_client, **kwargs)


def json_handler(payload, status_code=200, requests=None):
    def handler(request):
        if requests is not None:
            requests.append(request)
        return httpx.Response(status_code, json=payload)

    return handler


def stream_handler(*chunks, forever=False, requests=None):
    async def body():
        for chunk in chunks:
            yield chunk.encode()
        if forever:
            await asyncio.sleep(3600)

    def handler(request):
        if requests is not None:
            requests.append(request)
        return httpx.Response(200, content=body())

    return handler


class TestQueryAndMutate:
    @pytest.mark.asyncio
    async def test_query_request(self):
        requests = []
        client = make_client(json_handler({"data": {"id": "1"}}, requests=requests), client_request_context={"ip": "1.2.3.4"})
        response = await client.query("users/get", {"id": "1"})

        assert response == ClientResponse(data={"id": "1"})
        [request] = requests
        assert request.method == "POST"
        assert str(request.url) == "http://api.test/operations/users/get"
        assert json.loads(request.content) == {"input": {"id": "1"}, "meta": {"clientRequestContext": {"ip": "1.2.3.4"}}}
        await client.aclose()

    @pytest.mark.asyncio
    async def test_input_omitted_when_none(self):
        requests = []
        client = make_client(json_handler({"data": {}}, requests=requests))
        await client.query("ping")
        assert json.loads(requests[0].content) == {"meta": {"clientRequestContext": None}}

    @pytest.mark.asyncio
    async def test_subscribe_once_param(self):
        requests = []
        client = make_client(json_handler({"data": {}}, requests=requests))
        await client.query("users/changes", subscribe_once=True)
        assert requests[0].url.params["wg_subscribe_once"] == ""

    @pytest.mark.asyncio
    async def test_mutate(self):
        requests = []
        client = make_client(json_handler({"data": {"id": "1"}}, requests=requests))
        response = await client.mutate("users/update", {"id": "1", "name": "Jens", "bio": "Founder"})
        assert response.data["id"] == "1"
        assert response.error is None
        assert requests[0].url.path == "/operations/users/update"
        assert "wg_subscribe_once" not in requests[0].url.params

    @pytest.mark.asyncio
    async def test_base_url_trailing_slash(self):
        requests = []
        http_client = httpx.AsyncClient(transport=httpx.MockTransport(json_handler({"data": {}}, requests=requests)))
        client = OperationsClient(BASE_URL + "/", http_client=http_client)
        await client.query("a")
        assert str(requests[0].url) == "http://api.test/operations/a"

    @pytest.mark.asyncio
    async def test_map_data(self):
        client = make_client(json_handler({"data": {"id": "7"}}))
        response = (await client.query("users/get")).map_data(lambda d: int(d["id"]))
        assert response.data == 7


class TestErrors:
    @pytest.mark.asyncio
    async def test_non_2xx(self):
        client = make_client(lambda request: httpx.Response(500, text="internal error"))
        response = await client.query("users/get")
        assert response.data is None
        assert response.error.status_code == 500
        assert "500" in response.error.message

    @pytest.mark.asyncio
    async def test_graphql_errors(self):
        errors = [{"message": "not found", "path": ["user"]}]
        client = make_client(json_handler({"data": None, "errors": errors}))
        response = await client.query("users/get")
        assert response.error == ResponseError("not found", 200, errors)

    @pytest.mark.asyncio
    async def test_error_payload(self):
        client = make_client(json_handler({"error": {"message": "unauthorized"}}, status_code=401))
        response = await client.query("users/get")
        assert response.error.message == "unauthorized"
        assert response.error.status_code == 401

    @pytest.mark.asyncio
    async def test_malformed_body(self):
        client = make_client(lambda request: httpx.Response(200, text="not json"))
        response = await client.query("users/get")
        assert response.error.message == "invalid JSON response"

    @pytest.mark.asyncio
    async def test_network_error(self):
        def handler(request):
            raise httpx.ConnectError("connection refused", request=request)

        client = make_client(handler)
        response = await client.query("users/get")
        assert response.data is None
        assert response.error.status_code is None
        assert "connection refused" in response.error.message

    @pytest.mark.asyncio
    async def test_abort_in_flight(self):
        async def handler(request):
            await asyncio.sleep(10)
            return httpx.Response(200, json={"data": {}})

        client = make_client(handler)
        abort = asyncio.Event()
        asyncio.get_running_loop().call_later(0.05, abort.set)
        response = await asyncio.wait_for(client.query("slow", abort_signal=abort), timeout=5)
        assert response.error.message == "aborted"

    @pytest.mark.asyncio
    async def test_already_aborted(self):
        requests = []
        client = make_client(json_handler({"data": {}}, requests=requests))
        abort = asyncio.Event()
        abort.set()
        response = await client.mutate("users/update", {"id": "1"}, abort_signal=abort)
        assert response.error.message == "aborted"
        assert requests == []

    @pytest.mark.asyncio
    async def test_abort_signal_not_set(self):
        client = make_client(json_handler({"data": {"ok": True}}))
        response = await client.query("users/get", abort_signal=asyncio.Event())
        assert response.data == {"ok": True}


class TestWithHeaders:
    @pytest.mark.asyncio
    async def test_headers_merged(self):
        requests = []
        client = make_client(json_handler({"data": {}}, requests=requests), extra_headers={"X-App": "a"})
        authed = client.with_headers({"Authorization": "Bearer t"})
        await authed.query("users/get")
        await client.query("users/get")

        assert requests[0].headers["X-App"] == "a"
        assert requests[0].headers["Authorization"] == "Bearer t"
        assert "Authorization" not in requests[1].headers
        assert authed.http_client is client.http_client
        assert authed.base_url == client.base_url

    @pytest.mark.asyncio
    async def test_registry_not_shared(self):
        client = make_client(stream_handler('{"data": {}}\n\n', forever=True))
        other = client.with_headers({"X": "1"})
        subscription = await other.subscribe("users/changes")
        assert other.open_subscriptions == [subscription]
        assert client.open_subscriptions == []
        await other.cancel_subscriptions()

    @pytest.mark.asyncio
    async def test_shared_pool_not_closed_by_derived_client(self):
        client = make_client(json_handler({"data": {}}))
        await client.with_headers({"X": "1"}).aclose()
        assert not client.http_client.is_closed


class TestSubscribe:
    @pytest.mark.asyncio
    async def test_stream_messages(self):
        requests = []
        client = make_client(
            stream_handler('{"data": {"n": 1}}\n\n{"da', 'ta": {"n": 2}}\n\n', '{"data": {"n": 3}}', requests=requests)
        )
        subscription = await client.subscribe("users/changes", {"id": "1"})
        events = [event async for event in subscription]

        assert [e.data["n"] for e in events] == [1, 2, 3]
        assert subscription.state is SubscriptionState.COMPLETED
        assert await subscription.next() is None
        assert client.open_subscriptions == []
        assert "wg_live" not in requests[0].url.params

    @pytest.mark.asyncio
    async def test_live_query_param(self):
        requests = []
        client = make_client(stream_handler('{"data": {}}\n\n', requests=requests))
        subscription = await client.subscribe("users/get", live_query=True)
        await subscription.next()
        assert requests[0].url.params["wg_live"] == ""

    @pytest.mark.asyncio
    async def test_invalid_message(self):
        client = make_client(stream_handler("nope\n\n", '{"data": {"n": 1}}\n\n'))
        subscription = await client.subscribe("users/changes")
        first = await subscription.next()
        second = await subscription.next()
        assert first.error.message == "invalid JSON message"
        assert second.data == {"n": 1}

    @pytest.mark.asyncio
    async def test_stream_error_status(self):
        client = make_client(lambda request: httpx.Response(403, json={"error": "forbidden"}))
        subscription = await client.subscribe("users/changes")
        event = await subscription.next()
        assert event.error == ResponseError("forbidden", 403)
        assert await subscription.next() is None

    @pytest.mark.asyncio
    async def test_subscribe_once_matches_query(self):
        requests = []
        client = make_client(json_handler({"data": {"changed": True}}, requests=requests))
        direct = await client.query("users/changes", subscribe_once=True)
        subscription = await client.subscribe("users/changes", subscribe_once=True)

        events = [event async for event in subscription]
        assert events == [direct]
        assert requests[1].url.params["wg_subscribe_once"] == ""
        assert subscription.state is SubscriptionState.COMPLETED

    @pytest.mark.asyncio
    async def test_on_event(self):
        client = make_client(stream_handler('{"data": {"n": 1}}\n\n{"data": {"n": 2}}\n\n'))
        received = []
        subscription = await client.subscribe("users/changes", on_event=received.append)
        assert [e.data["n"] for e in received] == [1, 2]
        assert subscription.state is SubscriptionState.COMPLETED

    @pytest.mark.asyncio
    async def test_async_on_event(self):
        client = make_client(stream_handler('{"data": {"n": 1}}\n\n'))
        received = []

        async def on_event(event):
            received.append(event.data)

        await client.subscribe("users/changes", on_event=on_event)
        assert received == [{"n": 1}]

    @pytest.mark.asyncio
    async def test_failing_on_event_closes_subscription(self):
        client = make_client(stream_handler('{"data": {"n": 1}}\n\n', forever=True))

        def on_event(event):
            raise RuntimeError("handler failed")

        with pytest.raises(RuntimeError, match="handler failed"):
            await client.subscribe("users/changes", on_event=on_event)
        assert client.open_subscriptions == []

    @pytest.mark.asyncio
    async def test_crlf_separated_messages(self):
        client = make_client(stream_handler('{"data": {"n": 1}}\r\n\r', '\n{"data": {"n": 2}}\r\n\r\n'))
        subscription = await client.subscribe("users/changes")
        events = [event async for event in subscription]
        assert [e.data["n"] for e in events] == [1, 2]

    @pytest.mark.asyncio
    async def test_abort_signal_cancels(self):
        client = make_client(stream_handler('{"data": {"n": 1}}\n\n', forever=True))
        abort = asyncio.Event()
        subscription = await client.subscribe("users/changes", abort_signal=abort)
        assert (await subscription.next()).data == {"n": 1}

        abort.set()
        assert await asyncio.wait_for(subscription.next(), timeout=5) is None
        assert subscription.state is SubscriptionState.CANCELED


class TestCancelSubscriptions:
    @pytest.mark.asyncio
    async def test_no_open_subscriptions(self):
        client = make_client(json_handler({}))
        await client.cancel_subscriptions()

    @pytest.mark.asyncio
    async def test_cancel_open_subscriptions(self):
        client = make_client(stream_handler('{"data": {"n": 1}}\n\n', forever=True))
        first = await client.subscribe("users/changes")
        second = await client.subscribe("users/changes")
        delivered = await first.next()

        await client.cancel_subscriptions()

        assert delivered.data == {"n": 1}
        assert await first.next() is None
        assert await second.next() is None
        assert first.state is SubscriptionState.CANCELED
        assert second.state is SubscriptionState.CANCELED
        assert client.open_subscriptions == []

        later = await client.subscribe("users/changes")
        assert (await later.next()).data == {"n": 1}
        assert later.state is SubscriptionState.STREAMING
        await client.aclose()

    @pytest.mark.asyncio
    async def test_aclose_cancels_subscriptions(self):
        http_client = httpx.AsyncClient(transport=httpx.MockTransport(stream_handler("", forever=True)))
        async with OperationsClient(BASE_URL, http_client=http_client) as client:
            subscription = await client.subscribe("users/changes")
        assert subscription.state is SubscriptionState.CANCELED


class TestHelpers:
    @pytest.mark.asyncio
    async def test_split_messages_crlf(self):
        async def chunks():
            for chunk in ["a\r\n", "\r\nb\r", "\n\r\nc"]:
                yield chunk

        assert [m async for m in split_messages(chunks())] == ["a", "b", "c"]

    def test_drop_unset(self):
        value = {"id": "1", "bio": None, "address": {"zip": None, "city": "Berlin"}, "tags": [{"x": None}, None]}
        assert drop_unset(value) == {"id": "1", "address": {"city": "Berlin"}, "tags": [{}, None]}
