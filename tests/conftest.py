import pytest
from django.core.cache import cache
from django.utils import timezone
from rest_framework.test import APIClient

from product_management.models import Brand, Category, Product
from review_rating.models import CategoryRating, Comment, Review
from users.models import User

PASSWORD = "Str0ng-Passw0rd!"


@pytest.fixture(autouse=True)
def clear_cache():
    # throttle counters and cached id lists live in the cache
    cache.clear()
    yield
    cache.clear()


@pytest.fixture
def api_client():
    return APIClient()


@pytest.fixture
def make_user(db):
    counter = {"n": 0}

    def _make_user(**kwargs):
        counter["n"] += 1
        n = counter["n"]
        kwargs.setdefault("email", f"user{n}@example.com")
        kwargs.setdefault("username", f"user{n}")
        return User.objects.create_user(password=PASSWORD, **kwargs)

    return _make_user


@pytest.fixture
def user(make_user):
    return make_user(email="alice@example.com", username="alice", is_verified=True)


@pytest.fixture
def other_user(make_user):
    return make_user(email="bob@example.com", username="bob")


@pytest.fixture
def staff_user(make_user):
    return make_user(email="staff@example.com", username="staff", is_staff=True)


@pytest.fixture
def brand_user(make_user):
    return make_user(email="acme@example.com", username="acme", user_type=User.BRAND)


@pytest.fixture
def auth_client(user):
    client = APIClient()
    client.force_authenticate(user=user)
    return client


@pytest.fixture
def client_for():
    def _client_for(account):
        client = APIClient()
        client.force_authenticate(user=account)
        return client

    return _client_for


@pytest.fixture
def brand(brand_user):
    return Brand.objects.create(
        name="Acme", email="hello@acme.test", website="https://acme.test", owner=brand_user
    )


@pytest.fixture
def category(db):
    return Category.objects.create(name="Audio")


@pytest.fixture
def subcategory(category):
    return Category.objects.create(name="Headphones", parent=category)


@pytest.fixture
def product(brand, subcategory):
    return Product.objects.create(
        name="Wireless Headphones",
        description="Over-ear noise-cancelling headphones.",
        brand=brand,
        category=subcategory,
    )


@pytest.fixture
def make_review(make_user, product):
    def _make_review(rating, author=None, target=None, categories=None, **kwargs):
        review = Review.objects.create(
            product=target or product,
            user=author or make_user(),
            title=kwargs.pop("title", f"Rated {rating}"),
            content=kwargs.pop("content", "Review body"),
            rating=rating,
            **kwargs,
        )
        for category_name, score in (categories or {}).items():
            CategoryRating.objects.create(review=review, category=category_name, score=score)
        return review

    return _make_review


@pytest.fixture
def review(make_review, user):
    return make_review(8, author=user, categories={"build_quality": 9, "value_for_money": 7})


@pytest.fixture
def make_comment():
    def _make_comment(review, author, content="A comment", parent=None):
        now = timezone.now()
        return Comment.objects.create(
            review=review,
            user=author,
            parent_comment=parent,
            content=content,
            created_at=now,
            updated_at=now,
        )

    return _make_comment
