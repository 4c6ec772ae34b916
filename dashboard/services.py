import logging

from django.db import DatabaseError
from django.db.models import Avg, Count, Max, Min, Prefetch, Q
from rest_framework.exceptions import NotFound

from product_management.models import Brand, Product
from review_rating.models import CategoryRating, Review, MIN_SCORE, MAX_SCORE
from review_rating.serializers import ReviewWithProductSerializer
from review_rating.services import review_queryset, top_level_comments_queryset
from utils.formatting import as_int, one_decimal, round_half_up
from .dsh_cache import get_brand_product_ids
from .exceptions import DashboardUnavailable
from .serializers import (
    DashboardProductSerializer,
    DashboardReviewSerializer,
    BrandSummarySerializer,
    BrandProductSerializer,
)

logger = logging.getLogger("rest_framework")


# Bands are half-open except the top one: excellent [8, 10], good [6, 8),
# average [4, 6), poor [0, 4).
QUALITY_BANDS = {
    'excellent': Q(rating__gte=8),
    'good': Q(rating__gte=6, rating__lt=8),
    'average': Q(rating__gte=4, rating__lt=6),
    'poor': Q(rating__lt=4),
}


class ProductDashboard:

    @staticmethod
    def for_product(product_id):
        """
        Build the full dashboard of a product: product details, rating
        statistics, per-category averages and every review with its category
        ratings and comment tree.

        Raises NotFound for an unknown product. Any database failure aborts
        the whole computation with a 500; no partial dashboard is returned.
        """
        try:
            product = (
                Product.objects
                       .select_related('brand', 'category', 'category__parent')
                       .filter(pk=product_id)
                       .first()
            )
            if product is None:
                raise NotFound(f"Product with ID {product_id} not found")

            reviews = Review.objects.filter(product_id=product.pk)

            return {
                'product': DashboardProductSerializer(product).data,
                'rating_statistics': ProductDashboard._rating_statistics(reviews),
                'category_ratings': ProductDashboard._category_ratings(product.pk),
                'reviews': ProductDashboard._reviews(product.pk),
            }
        except DatabaseError:
            logger.exception("Failed to compute dashboard for product %s", product_id)
            raise DashboardUnavailable()

    @staticmethod
    def _rating_statistics(reviews):
        stats = reviews.aggregate(
            total_reviews=Count('id'),
            average_rating=Avg('rating'),
            min_rating=Min('rating'),
            max_rating=Max('rating'),
            **{band: Count('id', filter=condition) for band, condition in QUALITY_BANDS.items()},
        )
        total = as_int(stats['total_reviews'])
        breakdown = {band: as_int(stats[band]) for band in QUALITY_BANDS}

        counts = dict(
            reviews.order_by()
                   .values_list('rating')
                   .annotate(count=Count('id'))
        )
        distribution = [
            {'rating': rating, 'count': as_int(counts.get(rating))}
            for rating in range(MAX_SCORE, MIN_SCORE - 1, -1)
        ]

        recommended = breakdown['excellent'] + breakdown['good']
        recommendation = round_half_up(recommended * 100 / total) if total else 0

        return {
            'total_reviews': total,
            'average_rating': one_decimal(stats['average_rating']),
            'min_rating': as_int(stats['min_rating']),
            'max_rating': as_int(stats['max_rating']),
            'recommendation_percentage': recommendation,
            'rating_distribution': distribution,
            'quality_breakdown': breakdown,
        }

    @staticmethod
    def _category_ratings(product_id):
        rows = (
            CategoryRating.objects
                          .filter(review__product_id=product_id)
                          .values('category')
                          .annotate(average_score=Avg('score'), rating_count=Count('id'))
                          .order_by('-average_score', 'category')
        )
        return [
            {
                'category': row['category'],
                'average_score': one_decimal(row['average_score']),
                'rating_count': as_int(row['rating_count']),
            }
            for row in rows
        ]

    @staticmethod
    def _reviews(product_id):
        reviews = (
            review_queryset()
            .filter(product_id=product_id)
            .prefetch_related(
                Prefetch('comments', queryset=top_level_comments_queryset(), to_attr='comment_tree')
            )
        )
        return DashboardReviewSerializer(reviews, many=True).data


class BrandDashboard:
    RECENT_PRODUCTS = 10
    RECENT_REVIEWS = 5

    @staticmethod
    def brand_of(user):
        brand = Brand.objects.filter(owner=user).first()
        if brand is None:
            raise NotFound("No brand is registered for this account")
        return brand

    @staticmethod
    def products_queryset(brand):
        return (
            Product.objects
                   .filter(id__in=get_brand_product_ids(brand))
                   .select_related('category')
                   .annotate(
                       review_count=Count('reviews'),
                       average_rating=Avg('reviews__rating'),
                   )
                   .order_by('-created_at', '-id')
        )

    @staticmethod
    def for_owner(user):
        """
        Summary for a brand account: its brand, aggregate review statistics
        across its products, the latest products and the latest reviews.
        """
        brand = BrandDashboard.brand_of(user)
        product_ids = get_brand_product_ids(brand)

        stats = Review.objects.filter(product_id__in=product_ids).aggregate(
            total_reviews=Count('id'),
            average_rating=Avg('rating'),
            unique_reviewers=Count('user', distinct=True),
        )
        recent_products = BrandDashboard.products_queryset(brand)[:BrandDashboard.RECENT_PRODUCTS]
        recent_reviews = (
            review_queryset()
            .filter(product_id__in=product_ids)
            .select_related('product')[:BrandDashboard.RECENT_REVIEWS]
        )

        return {
            'brand': BrandSummarySerializer(brand).data,
            'stats': {
                'total_products': len(product_ids),
                'total_reviews': as_int(stats['total_reviews']),
                'average_rating': one_decimal(stats['average_rating']),
                'unique_reviewers': as_int(stats['unique_reviewers']),
            },
            'recent_products': BrandProductSerializer(recent_products, many=True).data,
            'recent_reviews': ReviewWithProductSerializer(recent_reviews, many=True).data,
        }
