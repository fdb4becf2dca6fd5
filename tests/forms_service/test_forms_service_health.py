from fastapi.testclient import TestClient
from src.forms_service.app import create_app


def test_health_endpoint_returns_ok(fake_storage):
    app = create_app(storage_factory=lambda access_token: fake_storage)
    client = TestClient(app)

    response = client.get("/health")

    assert response.status_code == 200
    assert response.json() == {"status": "ok"}
    assert fake_storage.calls == []
