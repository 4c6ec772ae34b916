from datetime import timedelta
from io import StringIO

import pytest
from django.core.management import call_command
from django.core.management.base import CommandError
from django.utils import timezone

from review_rating.models import Review

pytestmark = pytest.mark.django_db


def backdate(review, days):
    Review.objects.filter(pk=review.pk).update(created_at=timezone.now() - timedelta(days=days))


def test_legacy_ratings_are_doubled(make_review):
    legacy = make_review(4)
    already_scaled = make_review(9)
    recent = make_review(3)
    backdate(legacy, 30)
    backdate(already_scaled, 30)

    cutoff = (timezone.now() - timedelta(days=1)).date().isoformat()
    out = StringIO()
    call_command("rescale_ratings", before=cutoff, stdout=out)

    legacy.refresh_from_db()
    already_scaled.refresh_from_db()
    recent.refresh_from_db()
    assert legacy.rating == 8
    assert already_scaled.rating == 9
    assert recent.rating == 3
    assert "Rescaled 1 review(s)." in out.getvalue()


def test_dry_run_writes_nothing(make_review):
    legacy = make_review(2)
    backdate(legacy, 30)

    call_command("rescale_ratings", before=timezone.now().isoformat(), dry_run=True, stdout=StringIO())

    legacy.refresh_from_db()
    assert legacy.rating == 2


def test_invalid_cutoff(db):
    with pytest.raises(CommandError):
        call_command("rescale_ratings", before="yesterday", stdout=StringIO())


def test_running_twice_rescales_once(make_review):
    legacy = make_review(2)
    backdate(legacy, 30)
    cutoff = (timezone.now() - timedelta(days=1)).date().isoformat()

    call_command("rescale_ratings", before=cutoff, stdout=StringIO())
    out = StringIO()
    call_command("rescale_ratings", before=cutoff, stdout=out)

    legacy.refresh_from_db()
    assert legacy.rating == 4
    assert legacy.rescaled_at is not None
    assert "0 review(s)" in out.getvalue()
