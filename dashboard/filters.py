from django_filters.rest_framework import FilterSet, NumberFilter
from product_management.models import Product


class BrandProductFilter(FilterSet):
    """
    Filters over the annotated brand product list (`review_count`,
    `average_rating`).
    """
    min_rating = NumberFilter(field_name='average_rating', lookup_expr='gte')
    max_rating = NumberFilter(field_name='average_rating', lookup_expr='lte')
    min_reviews = NumberFilter(field_name='review_count', lookup_expr='gte')
    category = NumberFilter(field_name='category_id')

    class Meta:
        model = Product
        fields = ['min_rating', 'max_rating', 'min_reviews', 'category']
