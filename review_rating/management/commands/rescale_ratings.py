from datetime import datetime, time

from django.core.management.base import BaseCommand, CommandError
from django.db import transaction
from django.db.models import F
from django.utils.dateparse import parse_datetime, parse_date
from django.utils import timezone

from review_rating.models import Review, MAX_SCORE


def parse_cutoff(value):
    moment = parse_datetime(value)
    if moment is None:
        day = parse_date(value)
        if day is None:
            raise CommandError(f"Invalid --before value '{value}'. Use YYYY-MM-DD or an ISO datetime.")
        moment = datetime.combine(day, time.min)
    if timezone.is_naive(moment):
        moment = timezone.make_aware(moment)
    return moment


class Command(BaseCommand):
    help = (
        "Move overall review ratings recorded on the legacy 1-5 scale onto the 1-10 scale "
        "by multiplying them with --factor. Only reviews created before --before are touched, "
        "and each review is rescaled at most once."
    )

    def add_arguments(self, parser):
        parser.add_argument('--before', required=True, help="Cutover date; older reviews use the legacy scale.")
        parser.add_argument('--factor', type=int, default=2, help="Multiplier applied to legacy ratings.")
        parser.add_argument('--dry-run', action='store_true', help="Report what would change without writing.")

    def handle(self, *args, **options):
        factor = options['factor']
        if factor < 1:
            raise CommandError("--factor must be a positive integer.")
        cutoff = parse_cutoff(options['before'])

        legacy = Review.objects.filter(
            created_at__lt=cutoff,
            rescaled_at__isnull=True,
            rating__lte=MAX_SCORE // factor,
        )
        count = legacy.count()
        self.stdout.write(f"{count} review(s) created before {cutoff.isoformat()} will be rescaled by x{factor}.")

        if options['dry_run'] or not count:
            return

        with transaction.atomic():
            # auto_now is bypassed by queryset updates, updated_at keeps its value
            updated = legacy.update(rating=F('rating') * factor, rescaled_at=timezone.now())

        self.stdout.write(self.style.SUCCESS(f"Rescaled {updated} review(s)."))
