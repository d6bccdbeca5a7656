"""Tests for restfluent.testing — the in-process reference host."""

import pytest

from restfluent.errors import HTTPError
from restfluent.http.request import Request
from restfluent.routing.registry import RouteRegistry
from restfluent.testing import LocalHost, error_response


def _serve(routes: RouteRegistry) -> LocalHost:
    host = LocalHost()
    routes.register_routes(host)
    return host


class TestMatching:
    @pytest.mark.anyio
    async def test_path_params_from_named_groups(self) -> None:
        routes = RouteRegistry()
        routes.get("/product/{id:int}/{slug?}").handler(lambda r: {"data": dict(r.path_params)})
        host = _serve(routes)

        with_slug = await host.get("/v1/product/7/red-shoes")
        without_slug = await host.get("/v1/product/7")

        assert with_slug.body == {"id": "7", "slug": "red-shoes"}
        assert without_slug.body == {"id": "7"}

    @pytest.mark.anyio
    async def test_typed_param_rejects_mismatch(self) -> None:
        routes = RouteRegistry()
        routes.get("/product/{id:int}").handler(lambda r: "ok")
        response = await _serve(routes).get("/v1/product/abc")
        assert response.status == 404
        assert response.body["code"] == "rest_no_route"

    @pytest.mark.anyio
    async def test_method_not_allowed(self) -> None:
        routes = RouteRegistry()
        routes.get("/items").handler(lambda r: [])
        routes.post("/items").handler(lambda r: "made", 201)
        response = await _serve(routes).delete("/v1/items")
        assert response.status == 405
        assert response.header("Allow") == "GET, POST"

    @pytest.mark.anyio
    async def test_prefix_from_group(self) -> None:
        routes = RouteRegistry()
        with routes.grouped(prefix="/admin/v1/"):
            routes.get("/stats").handler(lambda r: {"data": 1})
        host = _serve(routes)
        assert (await host.get("/admin/v1/stats")).body == 1
        assert (await host.get("/v1/stats")).status == 404

    @pytest.mark.anyio
    async def test_query_string_parsed(self) -> None:
        routes = RouteRegistry()
        routes.get("/search").handler(lambda r: {"data": r.param("q")})
        assert (await _serve(routes).get("/v1/search?q=boots")).body == "boots"

    def test_registrations_recorded(self) -> None:
        routes = RouteRegistry()
        routes.get("/a/{id:int}")
        host = _serve(routes)
        [registration] = host.registrations
        assert registration.prefix == "v1"
        assert registration.path == "/v1/a/(?P<id>[0-9]+)"
        assert len(host) == 1


class TestPermissions:
    @pytest.mark.anyio
    async def test_denied(self) -> None:
        called: list[Request] = []
        routes = RouteRegistry()
        routes.get("/secret").permissions(lambda r: False).handler(lambda r: called.append(r))
        response = await _serve(routes).get("/v1/secret")
        assert response.status == 403
        assert response.body["code"] == "rest_forbidden"
        assert called == []

    @pytest.mark.anyio
    async def test_predicate_returns_error(self) -> None:
        routes = RouteRegistry()
        routes.get("/secret").permissions(
            lambda r: HTTPError(status=401, detail="log in", code="rest_not_logged_in")
        )
        response = await _serve(routes).get("/v1/secret")
        assert response.status == 401
        assert response.body["code"] == "rest_not_logged_in"

    @pytest.mark.anyio
    async def test_group_permission_runs_before_middleware(self) -> None:
        log: list[str] = []

        async def record(request: Request, next):  # noqa: A002
            log.append("middleware")
            return await next(request)

        routes = RouteRegistry()
        with routes.grouped(permissions=lambda r: r.headers.get("x-token") == "ok", middleware=[record]):
            routes.get("/admin").handler(lambda r: "hi")
        host = _serve(routes)

        denied = await host.get("/v1/admin")
        allowed = await host.get("/v1/admin", headers={"X-Token": "ok"})

        assert denied.status == 403
        assert allowed.status == 200
        assert log == ["middleware"]


class TestErrors:
    @pytest.mark.anyio
    async def test_missing_handler_is_500(self) -> None:
        routes = RouteRegistry()
        routes.get("/todo")
        response = await _serve(routes).get("/v1/todo")
        assert response.status == 500
        assert response.body == {
            "code": "missing_callback",
            "message": "Route missing callback",
            "data": {"status": 500},
        }

    @pytest.mark.anyio
    async def test_returned_error_value(self) -> None:
        routes = RouteRegistry()
        routes.get("/conflict").handler(lambda r: HTTPError(status=409, detail="exists"))
        response = await _serve(routes).get("/v1/conflict")
        assert response.status == 409
        assert response.body["message"] == "exists"

    @pytest.mark.anyio
    async def test_raised_http_error(self) -> None:
        def handler(request: Request) -> None:
            raise HTTPError(status=422, detail="bad sku")

        routes = RouteRegistry()
        routes.post("/items").handler(handler)
        response = await _serve(routes).post("/v1/items", body={"sku": ""})
        assert response.status == 422

    @pytest.mark.anyio
    async def test_other_exceptions_propagate(self) -> None:
        def handler(request: Request) -> None:
            msg = "db down"
            raise RuntimeError(msg)

        routes = RouteRegistry()
        routes.get("/x").handler(handler)
        with pytest.raises(RuntimeError, match="db down"):
            await _serve(routes).get("/v1/x")

    def test_error_response_headers(self) -> None:
        response = error_response(HTTPError(status=503, headers=(("Retry-After", "5"),)))
        assert response.header("Content-Type") == "application/json"
        assert response.header("Retry-After") == "5"


class TestEndToEnd:
    @pytest.mark.anyio
    async def test_envelope_and_headers(self) -> None:
        routes = RouteRegistry()
        (
            routes.post("/orders")
            .headers({"Cache-Control": "no-store"})
            .handler(lambda r: {"data": {"id": 1, **r.body}, "headers": {"Location": "/v1/orders/1"}}, 201)
            .formatter()
        )
        response = await _serve(routes).post("/v1/orders", body={"sku": "A1"})
        assert response.status == 201
        assert response.body == {"data": {"id": 1, "sku": "A1"}, "status": 201, "success": True}
        assert response.headers_dict == {
            "Cache-Control": "no-store",
            "Location": "/v1/orders/1",
            "Content-Type": "application/json",
        }
