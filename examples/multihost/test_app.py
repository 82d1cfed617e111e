"""Tests for the multihost example."""

import json

from hostmux.testing import TestClient


class TestMultihostApp:
    """Drive every host through the shared app's ASGI entry point."""

    async def test_site_a(self, example_app) -> None:
        async with TestClient(example_app, host="a.example") as client:
            response = await client.get("/")
            assert response.status == 200
            assert response.text == "Hello from a"

    async def test_site_a_through_portal(self, example_app) -> None:
        async with TestClient(example_app, host="g1.example") as client:
            root = await client.get("/1/")
            hi = await client.get("/1/hi")
            assert (root.status, root.text) == (200, "Hello from a")
            assert (hi.status, hi.text) == (200, "Hi from a")

    async def test_portal_index(self, example_app) -> None:
        async with TestClient(example_app, host="g2.example") as client:
            response = await client.get("/")
            assert json.loads(response.text) == {
                "sites": {"a.example": "/1/", "b.example": "/2/"}
            }

    async def test_site_b_does_not_see_portal(self, example_app) -> None:
        async with TestClient(example_app, host="b.example") as client:
            response = await client.get("/")
            assert response.text == "Hello from b"

    async def test_site_b_post_echo(self, example_app) -> None:
        async with TestClient(example_app) as client:
            direct = await client.post("/echo", host="b.example", body=b"ping")
            mounted = await client.post("/2/echo", host="g1.example", body=b"ping")

        assert json.loads(direct.text) == {"host": "b.example", "body": "ping"}
        assert json.loads(mounted.text) == {"host": "g1.example", "body": "ping"}

    async def test_unknown_host(self, example_app) -> None:
        async with TestClient(example_app, host="evil.example") as client:
            response = await client.get("/")
            assert response.status == 404
            assert response.text == "Unknown host"

    async def test_not_found_on_site(self, example_app) -> None:
        async with TestClient(example_app, host="a.example") as client:
            response = await client.get("/unknown")
            assert response.status == 404
            assert response.text == "No known route"

    async def test_host_header_with_port(self, example_app) -> None:
        async with TestClient(example_app, host="A.Example:8000") as client:
            response = await client.get("/hi")
            assert response.text == "Hi from a"
