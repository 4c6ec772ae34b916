import pytest
from django.db import DatabaseError
from rest_framework.exceptions import NotFound

from dashboard.exceptions import DashboardUnavailable
from dashboard.services import ProductDashboard

pytestmark = pytest.mark.django_db


def dashboard_url(product_id):
    return f"/dashboard/products/{product_id}/"


def test_product_without_reviews_has_zeroed_statistics(product):
    dashboard = ProductDashboard.for_product(product.id)
    stats = dashboard["rating_statistics"]

    assert stats["total_reviews"] == 0
    assert stats["average_rating"] == "0.0"
    assert stats["min_rating"] == 0
    assert stats["max_rating"] == 0
    assert stats["recommendation_percentage"] == 0
    assert stats["quality_breakdown"] == {"excellent": 0, "good": 0, "average": 0, "poor": 0}
    assert len(stats["rating_distribution"]) == 10
    assert all(entry["count"] == 0 for entry in stats["rating_distribution"])
    assert dashboard["category_ratings"] == []
    assert dashboard["reviews"] == []


def test_quality_bands_and_recommendation(product, make_review):
    for rating in (10, 10, 7, 3):
        make_review(rating)

    stats = ProductDashboard.for_product(product.id)["rating_statistics"]

    assert stats["total_reviews"] == 4
    assert stats["quality_breakdown"] == {"excellent": 2, "good": 1, "average": 0, "poor": 1}
    assert stats["recommendation_percentage"] == 75
    assert stats["average_rating"] == "7.5"
    assert stats["min_rating"] == 3
    assert stats["max_rating"] == 10


def test_band_boundaries(product, make_review):
    for rating in (8, 6, 4, 1):
        make_review(rating)

    stats = ProductDashboard.for_product(product.id)["rating_statistics"]

    assert stats["quality_breakdown"] == {"excellent": 1, "good": 1, "average": 1, "poor": 1}


def test_recommendation_rounds_half_up(product, make_review):
    make_review(8)
    for _ in range(7):
        make_review(2)

    stats = ProductDashboard.for_product(product.id)["rating_statistics"]

    # 1 / 8 = 12.5 %
    assert stats["recommendation_percentage"] == 13


def test_distribution_is_dense_and_descending(product, make_review):
    for rating in (9, 9, 2):
        make_review(rating)

    distribution = ProductDashboard.for_product(product.id)["rating_statistics"]["rating_distribution"]

    assert [entry["rating"] for entry in distribution] == list(range(10, 0, -1))
    counts = {entry["rating"]: entry["count"] for entry in distribution}
    assert counts[9] == 2
    assert counts[2] == 1
    assert sum(counts.values()) == 3


def test_average_is_formatted_to_one_decimal(product, make_review):
    for rating in (1, 2, 2):
        make_review(rating)

    stats = ProductDashboard.for_product(product.id)["rating_statistics"]

    assert stats["average_rating"] == "1.7"


def test_category_averages_ordered_by_score(product, make_review):
    make_review(8, categories={"durability": 4, "aesthetics": 9, "build_quality": 7})
    make_review(6, categories={"durability": 5, "aesthetics": 8})

    category_ratings = ProductDashboard.for_product(product.id)["category_ratings"]

    assert category_ratings == [
        {"category": "aesthetics", "average_score": "8.5", "rating_count": 2},
        {"category": "build_quality", "average_score": "7.0", "rating_count": 1},
        {"category": "durability", "average_score": "4.5", "rating_count": 2},
    ]


def test_reviews_carry_ratings_and_comment_tree(product, review, other_user, user, make_review, make_comment):
    newer = make_review(5)
    top = make_comment(review, other_user, "Is the battery good?")
    make_comment(review, user, "Yes, about 30 hours.", parent=top)

    reviews = ProductDashboard.for_product(product.id)["reviews"]

    assert [entry["review_id"] for entry in reviews] == [newer.id, review.id]
    detailed = next(entry for entry in reviews if entry["review_id"] == review.id)
    assert detailed["username"] == "alice"
    assert detailed["user_verified"] is True
    assert detailed["comments_count"] == 2
    assert [r["category"] for r in detailed["category_ratings"]] == ["build_quality", "value_for_money"]
    assert len(detailed["comments"]) == 1
    assert detailed["comments"][0]["comment_id"] == top.id
    assert detailed["comments"][0]["replies_count"] == 1
    assert detailed["comments"][0]["replies"][0]["content"] == "Yes, about 30 hours."


def test_product_details_split_category_and_subcategory(product, brand, category, subcategory):
    details = ProductDashboard.for_product(product.id)["product"]

    assert details["product_id"] == product.id
    assert details["product_name"] == "Wireless Headphones"
    assert details["category_id"] == category.id
    assert details["subcategory_id"] == subcategory.id
    assert details["subcategory_name"] == "Headphones"
    assert details["brand_name"] == "Acme"
    assert details["brand_verified"] is False


def test_product_without_brand(product):
    product.brand = None
    product.save()

    details = ProductDashboard.for_product(product.id)["product"]

    assert details["brand_id"] is None
    assert details["brand_name"] is None


def test_unknown_product_raises_not_found(db):
    with pytest.raises(NotFound):
        ProductDashboard.for_product(999999)


def test_dashboard_endpoint_is_public(api_client, product, make_review):
    make_review(9)

    response = api_client.get(dashboard_url(product.id))

    assert response.status_code == 200
    assert set(response.data) == {"product", "rating_statistics", "category_ratings", "reviews"}
    assert response.data["rating_statistics"]["total_reviews"] == 1


def test_dashboard_endpoint_unknown_product(api_client, db):
    response = api_client.get(dashboard_url(424242))

    assert response.status_code == 404


def test_failing_subquery_fails_whole_dashboard(api_client, product, make_review, monkeypatch):
    make_review(9)

    def broken(product_id):
        raise DatabaseError("connection lost")

    monkeypatch.setattr(ProductDashboard, "_category_ratings", staticmethod(broken))

    with pytest.raises(DashboardUnavailable):
        ProductDashboard.for_product(product.id)

    response = api_client.get(dashboard_url(product.id))
    assert response.status_code == 500
    assert "product" not in response.data
