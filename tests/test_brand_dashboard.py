import pytest

from dashboard.services import BrandDashboard
from product_management.models import Product
from users.models import User

pytestmark = pytest.mark.django_db

BRAND_URL = "/dashboard/brand/"
BRAND_PRODUCTS_URL = "/dashboard/brand/products/"


def test_brand_summary(client_for, brand_user, brand, product, subcategory, make_review, user, other_user):
    quiet = Product.objects.create(name="Turntable", brand=brand, category=subcategory)
    make_review(9, author=user)
    make_review(6, author=other_user)

    response = client_for(brand_user).get(BRAND_URL)

    assert response.status_code == 200
    assert response.data["brand"]["brand_name"] == "Acme"
    assert response.data["stats"] == {
        "total_products": 2,
        "total_reviews": 2,
        "average_rating": "7.5",
        "unique_reviewers": 2,
    }
    products = {p["product_id"]: p for p in response.data["recent_products"]}
    assert products[product.id]["review_count"] == 2
    assert products[product.id]["average_rating"] == "7.5"
    assert products[quiet.id]["review_count"] == 0
    assert products[quiet.id]["average_rating"] == "0.0"
    assert {r["product_name"] for r in response.data["recent_reviews"]} == {"Wireless Headphones"}


def test_new_products_show_up_after_cache_fill(brand_user, brand, product, subcategory):
    assert BrandDashboard.for_owner(brand_user)["stats"]["total_products"] == 1

    Product.objects.create(name="Speaker", brand=brand, category=subcategory)

    assert BrandDashboard.for_owner(brand_user)["stats"]["total_products"] == 2


def test_brand_dashboard_requires_brand_account(auth_client, api_client, db):
    assert auth_client.get(BRAND_URL).status_code == 403
    assert api_client.get(BRAND_URL).status_code == 401


def test_brand_account_without_brand(client_for, make_user):
    account = make_user(user_type=User.BRAND)

    assert client_for(account).get(BRAND_URL).status_code == 404


def test_brand_products_filtering(client_for, brand_user, brand, product, subcategory, make_review):
    Product.objects.create(name="Turntable", brand=brand, category=subcategory)
    make_review(9)

    client = client_for(brand_user)

    response = client.get(BRAND_PRODUCTS_URL)
    assert response.status_code == 200
    assert response.data["count"] == 2

    rated = client.get(BRAND_PRODUCTS_URL, {"min_rating": 8})
    assert [p["product_id"] for p in rated.data["results"]] == [product.id]

    reviewed = client.get(BRAND_PRODUCTS_URL, {"min_reviews": 1})
    assert reviewed.data["count"] == 1
