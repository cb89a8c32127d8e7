# tests/test_health.py
from fastapi import status


def test_health_reports_ok(client) -> None:
    response = client.get("/health")
    assert response.status_code == status.HTTP_200_OK
    assert response.json() == {"success": True, "status": "ok"}


def test_root_describes_api(client) -> None:
    response = client.get("/")
    assert response.status_code == status.HTTP_200_OK
    body = response.json()
    assert body["success"] is True
    assert body["docs"] == "/docs"


def test_unknown_route_uses_error_envelope(client) -> None:
    response = client.get("/api/v1/does-not-exist")
    assert response.status_code == status.HTTP_404_NOT_FOUND
    body = response.json()
    assert body["success"] is False
    assert body["error"] == "NotFoundError"
    assert "/api/v1/does-not-exist" in body["message"]
