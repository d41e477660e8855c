"""APISIX admin API client.

Talks to ``/apisix/admin/{services,routes}`` with ``httpx``. Resources adc
creates are stored under ids derived from their names (see ``resource_id``),
so create and update are both a ``PUT`` by id. Delete looks up the stored id
by name first, since objects created elsewhere carry their own ids.
Failures are raised as ClusterError; nothing is retried.
"""

from __future__ import annotations

from typing import Any, Generic

import httpx
import structlog

from adc.cluster.base import ClusterError, R
from adc.models.resources import Route, Service, resource_id

_log = structlog.get_logger(component="cluster.apisix")

_ADMIN_PREFIX = "/apisix/admin"

# Fields APISIX adds to stored objects that are not part of the resource.
_SERVER_MANAGED_FIELDS = frozenset({"create_time", "update_time"})

# APISIX accepts either form; adc models only the list.
_SINGULAR_FIELDS = (("uri", "uris"), ("host", "hosts"))


class ApisixResourceClient(Generic[R]):
    """ResourceClient for one APISIX admin collection (e.g. ``services``).

    Remote objects are decoded leniently: fields adc does not manage are
    dropped, singular ``uri``/``host`` are folded into ``uris``/``hosts``, and
    objects without a name are skipped since adc cannot match them.
    """

    def __init__(self, http: httpx.Client, collection: str, resource_type: type[R]) -> None:
        self._http = http
        self._collection = collection
        self._type = resource_type

    def list(self) -> list[R]:
        values = []
        for data in self._stored_objects():
            if not data.get("name"):
                _log.warning(
                    "remote_object_skipped",
                    collection=self._collection,
                    id=data.get("id"),
                    reason="no name",
                )
                continue
            values.append(self._decode(data))
        return values

    def create(self, value: R) -> R:
        return self._put(value)

    def update(self, value: R) -> R:
        return self._put(value)

    def delete(self, name: str) -> None:
        self._request("DELETE", f"{_ADMIN_PREFIX}/{self._collection}/{self._id_for(name)}")

    def _id_for(self, name: str) -> str:
        """Return the stored id of the object called *name*, else the derived id."""
        for data in self._stored_objects():
            if data.get("name") == name and data.get("id"):
                return str(data["id"])
        return resource_id(name)

    def _stored_objects(self) -> list[dict[str, Any]]:
        body = self._request("GET", f"{_ADMIN_PREFIX}/{self._collection}")
        items = body.get("list") or []
        return [item["value"] for item in items if isinstance(item, dict) and isinstance(item.get("value"), dict)]

    def _put(self, value: R) -> R:
        rid = value.id or resource_id(value.name)
        payload = value.with_id(rid).to_dict()
        body = self._request("PUT", f"{_ADMIN_PREFIX}/{self._collection}/{rid}", json=payload)
        stored = body.get("value")
        if not isinstance(stored, dict):
            return value.with_id(rid)
        return self._decode(stored)

    def _decode(self, data: dict[str, Any]) -> R:
        cleaned = {k: v for k, v in data.items() if k not in _SERVER_MANAGED_FIELDS}
        for singular, plural in _SINGULAR_FIELDS:
            if singular in cleaned:
                value = cleaned.pop(singular)
                if value and not cleaned.get(plural):
                    cleaned[plural] = [value]
        try:
            return self._type.from_dict(cleaned, strict=False)
        except (TypeError, ValueError) as exc:
            raise ClusterError(f"unexpected {self._collection} object from admin API: {exc}") from exc

    def _request(self, method: str, path: str, json: dict[str, Any] | None = None) -> dict[str, Any]:
        try:
            response = self._http.request(method, path, json=json)
        except httpx.TimeoutException as exc:
            raise ClusterError(f"{method} {path} timed out") from exc
        except httpx.HTTPError as exc:
            raise ClusterError(f"{method} {path} failed: {exc}") from exc

        if not response.is_success:
            raise ClusterError(
                f"{method} {path} returned {response.status_code}: {_error_message(response)}",
                status_code=response.status_code,
            )
        _log.debug("admin_api_request", method=method, path=path, status_code=response.status_code)
        if not response.content:
            return {}
        try:
            body = response.json()
        except ValueError as exc:
            raise ClusterError(f"{method} {path} returned invalid JSON") from exc
        return body if isinstance(body, dict) else {}


class ApisixCluster:
    """Cluster backed by the APISIX admin API.

    Args:
        server:  Admin API base URL, e.g. ``http://127.0.0.1:9180``.
        token:   Admin key sent as ``X-API-KEY``; omitted when empty.
        timeout: Per-request timeout in seconds.
        transport: Optional httpx transport (tests use ``httpx.MockTransport``).
    """

    def __init__(
        self,
        server: str,
        token: str = "",
        timeout: float = 10.0,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        if not server:
            raise ValueError("APISIX admin server must not be empty")
        headers = {"X-API-KEY": token} if token else {}
        self._http = httpx.Client(
            base_url=server.rstrip("/"),
            headers=headers,
            timeout=timeout,
            transport=transport,
        )
        self._services = ApisixResourceClient(self._http, "services", Service)
        self._routes = ApisixResourceClient(self._http, "routes", Route)

    @property
    def services(self) -> ApisixResourceClient[Service]:
        return self._services

    @property
    def routes(self) -> ApisixResourceClient[Route]:
        return self._routes

    def ping(self) -> None:
        """Raise ClusterError unless the admin API answers an authenticated request."""
        self._routes.list()

    def close(self) -> None:
        self._http.close()

    def __enter__(self) -> ApisixCluster:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()


def _error_message(response: httpx.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        return response.text[:200]
    if isinstance(body, dict) and "error_msg" in body:
        return str(body["error_msg"])
    return response.text[:200]
