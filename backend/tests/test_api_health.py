"""Tests for the health endpoint and debug-only routes."""

from fastapi import FastAPI
from fastapi.testclient import TestClient

from analyst_chat.api import context
from analyst_chat.services.context_loader import get_context_loader


def test_health_returns_ok(client):
    response = client.get("/api/health")
    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "ok"
    assert "app" in data


def test_context_diagnostics_hidden_without_debug(client):
    assert client.get("/api/context/files").status_code == 404


def test_context_diagnostics_route(context_loader):
    app = FastAPI()
    app.include_router(context.router, prefix="/api/context")
    app.dependency_overrides[get_context_loader] = lambda: context_loader

    with TestClient(app) as c:
        data = c.get("/api/context/files").json()

    assert data["dataDirExists"] is True
    assert data["results"]["3103.xlsx"] == {"success": False, "error": "File not found"}
