import pytest

pytestmark = pytest.mark.django_db


def test_openapi_schema_is_generated(api_client):
    response = api_client.get("/api/schema/", {"format": "json"})

    assert response.status_code == 200
    paths = response.json()["paths"]
    assert "/dashboard/products/{product_id}/" in paths
    assert "/reviews/comments/" in paths
    assert "/products/items/{id}/media/" in paths
    assert "/products/brand-verifications/{id}/process/" in paths


def test_health_check(api_client):
    response = api_client.get("/health/")

    assert response.status_code == 200
    assert response.data["status"] == "healthy"
    assert response.data["database"] == "connected"
