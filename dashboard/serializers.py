from rest_framework import serializers

from drf_spectacular.utils import extend_schema_field
from drf_spectacular.types import OpenApiTypes

from product_management.models import Brand, Product
from review_rating.serializers import ReviewSerializer, ThreadedCommentSerializer
from utils.formatting import one_decimal


class DashboardProductSerializer(serializers.ModelSerializer):
    """
    Flat product view used at the top of the product dashboard. A product
    filed under a subcategory reports the parent as its category.
    """
    product_id = serializers.IntegerField(source='id', read_only=True)
    product_name = serializers.CharField(source='name', read_only=True)
    category_id = serializers.SerializerMethodField()
    category_name = serializers.SerializerMethodField()
    subcategory_id = serializers.SerializerMethodField()
    subcategory_name = serializers.SerializerMethodField()
    brand_id = serializers.IntegerField(read_only=True, allow_null=True)
    brand_name = serializers.CharField(source='brand.name', read_only=True, default=None)
    brand_email = serializers.CharField(source='brand.email', read_only=True, default=None)
    brand_verified = serializers.BooleanField(source='brand.is_verified', read_only=True, default=None)
    brand_website = serializers.CharField(source='brand.website', read_only=True, default=None)
    brand_created_at = serializers.DateTimeField(source='brand.created_at', read_only=True, default=None)

    class Meta:
        model = Product
        fields = (
            'product_id', 'product_name', 'description',
            'category_id', 'category_name', 'subcategory_id', 'subcategory_name',
            'brand_id', 'brand_name', 'brand_email', 'brand_verified', 'brand_website', 'brand_created_at',
            'created_at', 'updated_at',
        )
        read_only_fields = fields

    @staticmethod
    def _top_category(obj):
        return obj.category.parent or obj.category

    @staticmethod
    def _subcategory(obj):
        return obj.category if obj.category.parent_id else None

    def get_category_id(self, obj) -> int:
        return self._top_category(obj).id

    def get_category_name(self, obj) -> str:
        return self._top_category(obj).name

    def get_subcategory_id(self, obj) -> int | None:
        sub = self._subcategory(obj)
        return sub.id if sub else None

    def get_subcategory_name(self, obj) -> str | None:
        sub = self._subcategory(obj)
        return sub.name if sub else None


class DashboardReviewSerializer(ReviewSerializer):
    comments = ThreadedCommentSerializer(source='comment_tree', many=True, read_only=True)

    class Meta(ReviewSerializer.Meta):
        fields = ReviewSerializer.Meta.fields + ('comments',)
        read_only_fields = fields


class BrandSummarySerializer(serializers.ModelSerializer):
    brand_id = serializers.IntegerField(source='id', read_only=True)
    brand_name = serializers.CharField(source='name', read_only=True)

    class Meta:
        model = Brand
        fields = ('brand_id', 'brand_name', 'email', 'website', 'is_verified', 'created_at')
        read_only_fields = fields


class BrandProductSerializer(serializers.ModelSerializer):
    product_id = serializers.IntegerField(source='id', read_only=True)
    product_name = serializers.CharField(source='name', read_only=True)
    category_name = serializers.CharField(source='category.name', read_only=True)
    review_count = serializers.IntegerField(read_only=True)
    average_rating = serializers.SerializerMethodField()

    class Meta:
        model = Product
        fields = ('product_id', 'product_name', 'category_name', 'review_count', 'average_rating', 'created_at')
        read_only_fields = fields

    @extend_schema_field(OpenApiTypes.STR)
    def get_average_rating(self, obj):
        return one_decimal(getattr(obj, 'average_rating', None))
