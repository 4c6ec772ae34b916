import pytest
from django.db import IntegrityError

from review_rating.exceptions import Conflict
from review_rating.models import CategoryRating, Comment, Review
from review_rating.services import ReviewPatch, ReviewService

pytestmark = pytest.mark.django_db

REVIEWS_URL = "/reviews/"


def review_payload(product, **overrides):
    payload = {
        "product_id": product.id,
        "title": "Solid headphones",
        "content": "Great sound, average battery.",
        "rating": 8,
        "category_ratings": {"value_for_money": 7, "build_quality": 9},
    }
    payload.update(overrides)
    return payload


def test_create_review_with_category_ratings(auth_client, product):
    response = auth_client.post(REVIEWS_URL, review_payload(product), format="json")

    assert response.status_code == 201
    assert response.data["rating"] == 8
    assert response.data["username"] == "alice"
    assert [r["category"] for r in response.data["category_ratings"]] == ["build_quality", "value_for_money"]
    assert response.data["average_category_rating"] == "8.0"
    assert response.data["comments_count"] == 0
    assert CategoryRating.objects.filter(review_id=response.data["review_id"]).count() == 2


def test_review_without_category_ratings(auth_client, product):
    payload = review_payload(product)
    del payload["category_ratings"]

    response = auth_client.post(REVIEWS_URL, payload, format="json")

    assert response.status_code == 201
    assert response.data["category_ratings"] == []
    assert response.data["average_category_rating"] is None


def test_second_review_of_same_product_conflicts(auth_client, product):
    assert auth_client.post(REVIEWS_URL, review_payload(product), format="json").status_code == 201

    response = auth_client.post(REVIEWS_URL, review_payload(product, title="Again"), format="json")

    assert response.status_code == 409
    assert Review.objects.count() == 1


@pytest.mark.parametrize("overrides", [
    {"rating": 0},
    {"rating": 11},
    {"category_ratings": {"durability": 12}},
    {"category_ratings": {"sound": 5}},
    {"title": ""},
])
def test_invalid_review_input(auth_client, product, overrides):
    response = auth_client.post(REVIEWS_URL, review_payload(product, **overrides), format="json")

    assert response.status_code == 400
    assert Review.objects.count() == 0


def test_review_of_unknown_product(auth_client, product):
    response = auth_client.post(REVIEWS_URL, review_payload(product, product_id=987654), format="json")

    assert response.status_code == 404


def test_create_requires_authentication(api_client, product):
    response = api_client.post(REVIEWS_URL, review_payload(product), format="json")

    assert response.status_code == 401


def test_failed_rating_insert_leaves_no_review(user, product, monkeypatch):
    def broken_bulk_create(*args, **kwargs):
        raise IntegrityError("boom")

    monkeypatch.setattr(CategoryRating.objects, "bulk_create", broken_bulk_create)

    with pytest.raises(IntegrityError):
        ReviewService.create_review(user, product.id, "t", "c", 7, {"durability": 5})

    assert Review.objects.count() == 0


def test_duplicate_review_in_service_raises_conflict(user, review, product):
    with pytest.raises(Conflict):
        ReviewService.create_review(user, product.id, "t", "c", 7)


def test_list_reviews_of_product_newest_first(api_client, product, review, make_review, make_comment, other_user):
    newer = make_review(3)
    make_comment(review, other_user)

    response = api_client.get(REVIEWS_URL, {"product_id": product.id})

    assert response.status_code == 200
    assert [r["review_id"] for r in response.data] == [newer.id, review.id]
    assert response.data[1]["comments_count"] == 1


def test_list_requires_product_id(api_client, db):
    assert api_client.get(REVIEWS_URL).status_code == 400
    assert api_client.get(REVIEWS_URL, {"product_id": 987654}).status_code == 404


def test_retrieve_review(api_client, review):
    response = api_client.get(f"{REVIEWS_URL}{review.id}/")

    assert response.status_code == 200
    assert response.data["title"] == review.title
    assert api_client.get(f"{REVIEWS_URL}987654/").status_code == 404


def test_patch_changes_only_supplied_fields(auth_client, review):
    response = auth_client.patch(
        f"{REVIEWS_URL}{review.id}/",
        {"title": "Changed my mind", "category_ratings": {"build_quality": 4, "durability": 6}},
        format="json",
    )

    assert response.status_code == 200
    review.refresh_from_db()
    assert review.title == "Changed my mind"
    assert review.rating == 8
    assert review.content == "Review body"
    scores = dict(review.category_ratings.values_list("category", "score"))
    assert scores == {"build_quality": 4, "value_for_money": 7, "durability": 6}


def test_patch_refreshes_updated_at(user, review):
    before = review.updated_at

    updated = ReviewService.update_review(review.id, user, ReviewPatch.from_data({"rating": 9}))

    assert updated.rating == 9
    assert updated.updated_at >= before


def test_empty_patch_is_rejected(auth_client, review):
    response = auth_client.patch(f"{REVIEWS_URL}{review.id}/", {}, format="json")

    assert response.status_code == 400


def test_patch_with_only_empty_category_ratings_is_rejected(auth_client, review):
    response = auth_client.patch(f"{REVIEWS_URL}{review.id}/", {"category_ratings": {}}, format="json")

    assert response.status_code == 400
    review.refresh_from_db()
    assert review.category_ratings.count() == 2


def test_review_patch_keeps_present_fields_only():
    patch = ReviewPatch.from_data({"rating": 5, "category_ratings": {"durability": 3}})

    assert patch.changes == {"rating": 5}
    assert patch.category_ratings == {"durability": 3}
    assert not patch.is_empty()
    assert ReviewPatch.from_data({}).is_empty()


def test_other_users_review_is_not_found(client_for, other_user, review):
    client = client_for(other_user)

    not_owned = client.patch(f"{REVIEWS_URL}{review.id}/", {"rating": 1}, format="json")
    missing = client.patch(f"{REVIEWS_URL}987654/", {"rating": 1}, format="json")
    delete_not_owned = client.delete(f"{REVIEWS_URL}{review.id}/")

    assert not_owned.status_code == missing.status_code == delete_not_owned.status_code == 404
    review.refresh_from_db()
    assert review.rating == 8


def test_delete_returns_review_and_cascades(auth_client, review, other_user, make_comment):
    make_comment(review, other_user)

    response = auth_client.delete(f"{REVIEWS_URL}{review.id}/")

    assert response.status_code == 200
    assert response.data["review"]["review_id"] == review.id
    assert len(response.data["review"]["category_ratings"]) == 2
    assert not Review.objects.filter(pk=review.id).exists()
    assert CategoryRating.objects.count() == 0
    assert Comment.objects.count() == 0


def test_rating_categories(api_client, db):
    response = api_client.get(f"{REVIEWS_URL}categories/")

    assert response.status_code == 200
    assert [c["category"] for c in response.data] == [
        "value_for_money", "build_quality", "functionality", "durability",
        "ease_of_use", "aesthetics", "compatibility",
    ]


def test_my_reviews(auth_client, api_client, review, make_review):
    make_review(5)

    response = auth_client.get(f"{REVIEWS_URL}mine/")

    assert response.status_code == 200
    assert [r["review_id"] for r in response.data] == [review.id]
    assert response.data[0]["product_name"] == "Wireless Headphones"
    assert api_client.get(f"{REVIEWS_URL}mine/").status_code == 401
