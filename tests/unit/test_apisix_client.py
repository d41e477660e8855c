"""Tests for the APISIX admin API client using httpx.MockTransport."""

from __future__ import annotations

import json
from collections.abc import Callable

import httpx
import pytest

from adc.cluster.apisix import ApisixCluster
from adc.cluster.base import ClusterError
from adc.models.resources import Route, Service, Upstream, resource_id

_SERVER = "http://apisix.test:9180"

Handler = Callable[[httpx.Request], httpx.Response]


def _make_cluster(handler: Handler, token: str = "secret") -> tuple[ApisixCluster, list[httpx.Request]]:
    seen: list[httpx.Request] = []

    def record(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return handler(request)

    return ApisixCluster(_SERVER, token=token, transport=httpx.MockTransport(record)), seen


def _echo_put(request: httpx.Request) -> httpx.Response:
    body = json.loads(request.content)
    return httpx.Response(
        200,
        json={"key": f"/apisix{request.url.path}", "value": {**body, "create_time": 1, "update_time": 2}},
    )


class TestList:
    def test_unwraps_values_and_drops_server_fields(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(
                200,
                json={
                    "total": 1,
                    "list": [
                        {
                            "key": "/apisix/services/svc-a",
                            "value": {
                                "id": "svc-a",
                                "name": "svc-a",
                                "upstream": {"type": "roundrobin", "nodes": [{"host": "a", "port": 80, "weight": 1}]},
                                "create_time": 1700000000,
                                "update_time": 1700000001,
                            },
                        }
                    ],
                },
            )

        cluster, seen = _make_cluster(handler)

        services = cluster.services.list()

        assert services == [
            Service(name="svc-a", id="svc-a", upstream=Upstream(nodes=[{"host": "a", "port": 80, "weight": 1}]))
        ]
        assert seen[0].method == "GET"
        assert seen[0].url.path == "/apisix/admin/services"
        assert seen[0].headers["X-API-KEY"] == "secret"

    def test_empty_collection(self) -> None:
        cluster, _ = _make_cluster(lambda request: httpx.Response(200, json={"total": 0, "list": []}))
        assert cluster.routes.list() == []

    def test_unknown_fields_are_dropped(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(
                200,
                json={"list": [{"value": {"id": "1", "name": "r1", "uris": ["/a"], "filter_func": "x"}}]},
            )

        cluster, _ = _make_cluster(handler)
        assert cluster.routes.list() == [Route(name="r1", id="1", uris=["/a"])]

    def test_singular_uri_and_host_are_folded(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(
                200,
                json={
                    "list": [
                        {"value": {"id": "1", "name": "r1", "uri": "/get", "host": "a.example.com", "remote_addrs": []}}
                    ]
                },
            )

        cluster, _ = _make_cluster(handler)
        assert cluster.routes.list() == [Route(name="r1", id="1", uris=["/get"], hosts=["a.example.com"])]

    def test_nameless_objects_are_skipped(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(
                200,
                json={"list": [{"value": {"id": "2", "uris": ["/a"]}}, {"value": {"id": "3", "name": "r3"}}]},
            )

        cluster, _ = _make_cluster(handler)
        assert cluster.routes.list() == [Route(name="r3", id="3")]

    def test_nameless_write_response(self) -> None:
        cluster, _ = _make_cluster(lambda request: httpx.Response(200, json={"value": {"id": "r1"}}))
        with pytest.raises(ClusterError, match="unexpected routes object"):
            cluster.routes.create(Route(name="r1"))


class TestWrite:
    def test_create_puts_by_derived_id(self) -> None:
        cluster, seen = _make_cluster(_echo_put)

        created = cluster.routes.create(Route(name="r1", uris=["/get"]))

        assert seen[0].method == "PUT"
        assert seen[0].url.path == "/apisix/admin/routes/r1"
        assert json.loads(seen[0].content) == {"name": "r1", "id": "r1", "uris": ["/get"]}
        assert created == Route(name="r1", id="r1", uris=["/get"])

    def test_update_keeps_existing_id(self) -> None:
        cluster, seen = _make_cluster(_echo_put)

        cluster.services.update(Service(name="svc-a", id="00042", description="new"))

        assert seen[0].url.path == "/apisix/admin/services/00042"

    def test_delete_uses_stored_id(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            if request.method == "GET":
                return httpx.Response(
                    200,
                    json={"list": [{"value": {"id": "1", "name": "legacy"}}, {"value": {"id": "2", "name": "other"}}]},
                )
            return httpx.Response(200, json={"deleted": "1"})

        cluster, seen = _make_cluster(handler)

        cluster.services.delete("legacy")

        assert seen[-1].method == "DELETE"
        assert seen[-1].url.path == "/apisix/admin/services/1"

    def test_delete_falls_back_to_derived_id(self) -> None:
        cluster, seen = _make_cluster(lambda request: httpx.Response(200, json={"list": []}))

        cluster.services.delete("my service")

        assert seen[-1].method == "DELETE"
        assert seen[-1].url.path == f"/apisix/admin/services/{resource_id('my service')}"


class TestErrors:
    def test_non_2xx_carries_status_and_message(self) -> None:
        cluster, _ = _make_cluster(
            lambda request: httpx.Response(400, json={"error_msg": "invalid configuration: property \"uris\""})
        )

        with pytest.raises(ClusterError, match="invalid configuration") as exc_info:
            cluster.routes.create(Route(name="r1"))

        assert exc_info.value.status_code == 400

    def test_not_found_on_delete(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            if request.method == "GET":
                return httpx.Response(200, json={"list": []})
            return httpx.Response(404, text="not found")

        cluster, _ = _make_cluster(handler)
        with pytest.raises(ClusterError) as exc_info:
            cluster.routes.delete("r1")
        assert exc_info.value.status_code == 404

    def test_transport_error(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        cluster, _ = _make_cluster(handler)
        with pytest.raises(ClusterError, match="failed") as exc_info:
            cluster.ping()
        assert isinstance(exc_info.value.__cause__, httpx.ConnectError)
        assert exc_info.value.status_code is None

    def test_timeout(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ReadTimeout("slow", request=request)

        cluster, _ = _make_cluster(handler)
        with pytest.raises(ClusterError, match="timed out"):
            cluster.services.list()


def test_no_token_sends_no_key_header() -> None:
    cluster, seen = _make_cluster(lambda request: httpx.Response(200, json={"list": []}), token="")
    cluster.ping()
    assert "X-API-KEY" not in seen[0].headers


def test_empty_server_rejected() -> None:
    with pytest.raises(ValueError, match="must not be empty"):
        ApisixCluster("")
