"""Tests for the HTTP API."""

import inspect

import pytest
from fastapi.testclient import TestClient

from py_voronoi.api.main import app, build_diagram, relax, render, shade
from py_voronoi.config import settings
from py_voronoi.core.noise import fbm, value_noise


BOX = {"left": 0, "right": 100, "top": 0, "bottom": 100}


class TestAPIEndpoints:
    """Test the stateless endpoints."""

    def setup_method(self):
        """Set up test client."""
        self.client = TestClient(app)

    def test_root(self):
        response = self.client.get("/")
        assert response.status_code == 200
        assert response.json()["status"] == "running"

    def test_health(self):
        response = self.client.get("/health")
        assert response.status_code == 200
        assert response.json() == {"status": "healthy"}

    def test_diagram_two_sites(self):
        response = self.client.post("/diagram", json={
            "sites": [{"x": 25, "y": 50}, {"x": 75, "y": 50}],
            "box": BOX,
        })
        assert response.status_code == 200
        data = response.json()

        assert len(data["cells"]) == 2
        assert len(data["edges"]) == 7
        left = data["cells"][0]
        assert left["index"] == 0
        assert max(p["x"] for p in left["polygon"]) <= 50 + 1e-4
        assert left["area"] == pytest.approx(5000.0)
        assert left["centroid"]["x"] == pytest.approx(25.0)

    def test_diagram_empty(self):
        response = self.client.post("/diagram", json={"sites": [], "box": BOX})
        assert response.status_code == 200
        assert response.json() == {"cells": [], "edges": []}

    def test_diagram_degenerate_box(self):
        response = self.client.post("/diagram", json={
            "sites": [{"x": 1, "y": 1}],
            "box": {"left": 0, "right": 0, "top": 0, "bottom": 10},
        })
        assert response.status_code == 200
        cell = response.json()["cells"][0]
        assert cell["polygon"] == []
        assert cell["centroid"] is None

    def test_too_many_sites(self):
        sites = [{"x": i % 100, "y": i // 100} for i in range(settings.max_sites + 1)]
        response = self.client.post("/diagram", json={"sites": sites, "box": BOX})
        assert response.status_code == 400

    def test_invalid_payload(self):
        response = self.client.post("/diagram", json={"sites": [{"x": "left"}]})
        assert response.status_code == 422

    def test_relax(self):
        response = self.client.post("/relax", json={
            "sites": [{"x": 50, "y": 50, "is_pointer": True}, {"x": 10, "y": 10}],
            "box": BOX,
            "steps": 3,
        })
        assert response.status_code == 200
        data = response.json()
        assert data["moved"] is True
        assert 1 <= data["steps_applied"] <= 3
        assert data["sites"][0] == {"x": 50, "y": 50, "is_pointer": True}
        assert data["sites"][1] != {"x": 10, "y": 10, "is_pointer": False}

    def test_relax_converged(self):
        response = self.client.post("/relax", json={
            "sites": [{"x": 50, "y": 50}],
            "box": BOX,
            "steps": 5,
        })
        data = response.json()
        assert data["moved"] is False
        assert data["steps_applied"] == 1

    def test_shade_cell_id(self):
        response = self.client.post("/shade", json={
            "sites": [{"x": 25, "y": 50}, {"x": 75, "y": 50}],
            "box": BOX,
            "shading": {"mode": "cellId", "base_hue": 0, "spread": 110},
        })
        assert response.status_code == 200
        data = response.json()
        assert data["mode"] == "cellId"
        assert [c["value"] for c in data["cells"]] == pytest.approx([0.0, 1 / 11])
        assert data["cells"][0]["color"] == "hsl(0 70% 55%)"
        assert len(data["palette"]) == 8

    def test_shade_unknown_mode(self):
        response = self.client.post("/shade", json={
            "sites": [{"x": 25, "y": 50}],
            "box": BOX,
            "shading": {"mode": "plasma"},
        })
        assert response.status_code == 422

    def test_render_png(self):
        response = self.client.post("/render", json={
            "sites": [{"x": 50, "y": 50, "is_pointer": True}, {"x": 20, "y": 30}, {"x": 80, "y": 70}],
            "box": BOX,
            "shading": {"mode": "spiral"},
            "time": 1.0,
        })
        assert response.status_code == 200
        assert response.headers["content-type"] == "image/png"
        assert response.content.startswith(b"\x89PNG")

    def test_render_degenerate_box(self):
        response = self.client.post("/render", json={
            "sites": [{"x": 1, "y": 1}],
            "box": {"left": 10, "right": 0, "top": 0, "bottom": 10},
        })
        assert response.status_code == 400

    def test_render_oversized_box(self):
        size = settings.max_canvas_size + 1
        response = self.client.post("/render", json={
            "sites": [{"x": 1, "y": 1}],
            "box": {"left": 0, "right": size, "top": 0, "bottom": 10},
        })
        assert response.status_code == 400
        assert "Canvas too large" in response.json()["detail"]

    def test_render_with_background(self):
        response = self.client.post("/render", json={
            "sites": [{"x": 20, "y": 30}, {"x": 80, "y": 70}],
            "box": BOX,
            "shading": {"mode": "off"},
            "show_background": True,
            "time": 2.0,
        })
        assert response.status_code == 200
        assert response.content.startswith(b"\x89PNG")

    def test_shade_time_scaled_by_speed(self):
        payload = {
            "sites": [{"x": 25, "y": 50}, {"x": 75, "y": 50}],
            "box": BOX,
            "shading": {"mode": "noise", "speed": 0.5},
            "time": 4.0,
        }
        slow = self.client.post("/shade", json=payload).json()
        payload["shading"]["speed"] = 1.0
        payload["time"] = 2.0
        same = self.client.post("/shade", json=payload).json()
        assert [c["value"] for c in slow["cells"]] == pytest.approx(
            [c["value"] for c in same["cells"]]
        )

    @pytest.mark.parametrize("endpoint", [build_diagram, relax, shade, render])
    def test_heavy_endpoints_run_in_threadpool(self, endpoint):
        assert not inspect.iscoroutinefunction(endpoint)

    def test_noise(self):
        response = self.client.get("/noise", params={"x": 10.25, "y": 99.5, "octaves": 3})
        assert response.status_code == 200
        data = response.json()
        assert data["value_noise"] == pytest.approx(value_noise(10.25, 99.5))
        assert data["fbm"] == pytest.approx(fbm(10.25, 99.5, 3))

    def test_noise_requires_coordinates(self):
        response = self.client.get("/noise", params={"x": 1.0})
        assert response.status_code == 422
