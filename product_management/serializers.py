from typing import List

from django.db.models import Q
from rest_framework import serializers
from rest_framework.exceptions import PermissionDenied

from drf_spectacular.utils import extend_schema_field
from drf_spectacular.types import OpenApiTypes

from review_rating.exceptions import Conflict
from utils.formatting import one_decimal
from utils.image_opt import process_uploaded_file, validate_uploaded_file
from .models import Brand, BrandVerificationRequest, Category, Product, ProductMedia


# ---------------------------
# Category Serializers
# ---------------------------

class SimpleCategorySerializer(serializers.ModelSerializer):
    category_id = serializers.IntegerField(source='id', read_only=True)
    category_name = serializers.CharField(source='name')

    class Meta:
        model = Category
        fields = ["category_id", "category_name", "slug", "description", "is_active", "parent"]
        read_only_fields = ["slug"]


class CategorySerializer(SimpleCategorySerializer):
    subcategories = serializers.SerializerMethodField()

    class Meta(SimpleCategorySerializer.Meta):
        fields = SimpleCategorySerializer.Meta.fields + ["subcategories"]

    def get_subcategories(self, obj: Category) -> List[dict]:
        children = [child for child in obj.children.all() if child.is_active]
        return SimpleCategorySerializer(children, many=True).data


class CategoryWriteSerializer(SimpleCategorySerializer):
    parent = serializers.PrimaryKeyRelatedField(
        queryset=Category.objects.all(), required=False, allow_null=True
    )

    class Meta(SimpleCategorySerializer.Meta):
        validators = []

    def validate_parent(self, parent):
        # Only two levels: categories and their subcategories.
        if parent is not None and parent.parent_id is not None:
            raise serializers.ValidationError("Subcategories cannot have subcategories of their own.")
        if parent is not None and self.instance is not None and parent.pk == self.instance.pk:
            raise serializers.ValidationError("A category cannot be its own parent.")
        return parent

    def validate(self, attrs):
        name = attrs.get('name', getattr(self.instance, 'name', None))
        parent = attrs.get('parent', getattr(self.instance, 'parent', None))

        siblings = Category.objects.filter(parent=parent, name__iexact=name)
        if self.instance is not None:
            siblings = siblings.exclude(pk=self.instance.pk)
        if siblings.exists():
            raise Conflict(f"A category named '{name}' already exists at this level.")
        return attrs


# ---------------------------
# Brand Serializer
# ---------------------------

class BrandSerializer(serializers.ModelSerializer):
    brand_id = serializers.IntegerField(source='id', read_only=True)
    brand_name = serializers.CharField(source='name', max_length=150)
    owner_id = serializers.IntegerField(read_only=True)

    class Meta:
        model = Brand
        fields = ['brand_id', 'brand_name', 'email', 'website', 'is_verified', 'owner_id', 'created_at']
        read_only_fields = ['created_at']

    def validate_brand_name(self, value):
        duplicates = Brand.objects.filter(name__iexact=value)
        if self.instance is not None:
            duplicates = duplicates.exclude(pk=self.instance.pk)
        if duplicates.exists():
            raise Conflict(f"A brand named '{value}' already exists.")
        return value

    def validate(self, attrs):
        request = self.context.get('request')
        user = getattr(request, 'user', None)
        if user is not None and not user.is_staff:
            # verification is granted by staff only
            attrs.pop('is_verified', None)
            if self.instance is None and hasattr(user, 'brand'):
                raise Conflict("This account already owns a brand.")
        return attrs


# ---------------------------
# Brand Verification Serializers
# ---------------------------

NEXT_STEPS = {
    BrandVerificationRequest.PENDING: "Your verification is under review. We'll notify you once it's processed.",
    BrandVerificationRequest.REJECTED: "Your verification was rejected. Please review the notes and resubmit "
                                       "with additional information.",
}
NOT_SUBMITTED = 'not_submitted'


class BrandVerificationSubmitSerializer(serializers.ModelSerializer):
    class Meta:
        model = BrandVerificationRequest
        fields = ['business_registration', 'website', 'social_media', 'additional_info']
        # one pending request per brand is checked in the view
        validators = []


class BrandVerificationSerializer(serializers.ModelSerializer):
    verification_id = serializers.IntegerField(source='id', read_only=True)
    brand_id = serializers.IntegerField(read_only=True)
    brand_name = serializers.CharField(source='brand.name', read_only=True)
    reviewed_by = serializers.IntegerField(source='reviewed_by_id', read_only=True, allow_null=True)
    product_count = serializers.IntegerField(read_only=True, default=None)

    class Meta:
        model = BrandVerificationRequest
        fields = [
            'verification_id', 'brand_id', 'brand_name', 'status', 'business_registration',
            'website', 'social_media', 'additional_info', 'notes', 'reviewed_by',
            'submitted_at', 'reviewed_at', 'product_count'
        ]
        read_only_fields = fields


class BrandVerificationProcessSerializer(serializers.Serializer):
    status = serializers.ChoiceField(
        choices=[BrandVerificationRequest.APPROVED, BrandVerificationRequest.REJECTED]
    )
    notes = serializers.CharField(required=False, allow_blank=True, default='')


class BrandVerificationStatusSerializer(serializers.ModelSerializer):
    """
    Verification state of a brand, derived from its latest request.
    """
    brand_id = serializers.IntegerField(source='id', read_only=True)
    brand_name = serializers.CharField(source='name', read_only=True)
    verification_status = serializers.SerializerMethodField()
    submitted_at = serializers.DateTimeField(source='latest_verification.submitted_at', default=None)
    reviewed_at = serializers.DateTimeField(source='latest_verification.reviewed_at', default=None)
    notes = serializers.CharField(source='latest_verification.notes', default=None)
    next_steps = serializers.SerializerMethodField()

    class Meta:
        model = Brand
        fields = [
            'brand_id', 'brand_name', 'is_verified', 'verification_status',
            'submitted_at', 'reviewed_at', 'notes', 'next_steps'
        ]
        read_only_fields = fields

    def get_verification_status(self, obj: Brand) -> str:
        latest = obj.latest_verification
        return latest.status if latest else NOT_SUBMITTED

    def get_next_steps(self, obj: Brand) -> str:
        if obj.is_verified:
            return "Your brand is verified! You have full access to all features."
        return NEXT_STEPS.get(
            self.get_verification_status(obj),
            "Submit your verification documents to get your brand verified and unlock additional features."
        )


# ---------------------------
# Product Media Serializers
# ---------------------------

class ProductMediaSerializer(serializers.ModelSerializer):
    """
    Read-only serializer for displaying product media.
    """
    media_id = serializers.IntegerField(source='id', read_only=True)
    product_id = serializers.IntegerField(read_only=True)
    uploaded_by = serializers.IntegerField(source='uploaded_by_id', read_only=True)
    file_url = serializers.CharField(read_only=True, allow_null=True)

    class Meta:
        model = ProductMedia
        fields = [
            'media_id', 'product_id', 'file_url', 'file_name', 'content_type',
            'size', 'tags', 'uploaded_by', 'uploaded_at'
        ]
        read_only_fields = fields


class ProductMediaUploadSerializer(serializers.Serializer):
    file = serializers.FileField()
    file_name = serializers.CharField(max_length=255, required=False)
    tags = serializers.ListField(
        child=serializers.CharField(max_length=50), required=False, default=list
    )

    def validate_file(self, file):
        validate_uploaded_file(file)
        return file

    def create(self, validated_data):
        upload = validated_data['file']
        stored = process_uploaded_file(upload)
        return ProductMedia.objects.create(
            product=validated_data['product'],
            uploaded_by=validated_data['uploaded_by'],
            file=stored,
            file_name=validated_data.get('file_name') or upload.name,
            content_type=getattr(stored, 'content_type', None) or 'application/octet-stream',
            size=stored.size,
            tags=validated_data.get('tags', []),
        )


class ProductMediaUpdateSerializer(serializers.ModelSerializer):
    tags = serializers.ListField(child=serializers.CharField(max_length=50), required=False)

    class Meta:
        model = ProductMedia
        fields = ['file_name', 'tags']


# ---------------------------
# Product Write Serializer
# ---------------------------

class ProductWriteSerializer(serializers.ModelSerializer):
    product_id = serializers.IntegerField(source='id', read_only=True)
    product_name = serializers.CharField(source='name', max_length=150)
    category = serializers.PrimaryKeyRelatedField(queryset=Category.objects.filter(is_active=True))
    brand = serializers.PrimaryKeyRelatedField(
        queryset=Brand.objects.all(), required=False, allow_null=True
    )

    class Meta:
        model = Product
        fields = ['product_id', 'product_name', 'description', 'category', 'brand']
        # duplicates are checked in validate()
        validators = []

    def validate_brand(self, brand):
        user = self.context['request'].user
        if not user.is_staff and (brand is None or brand.owner_id != user.id):
            raise PermissionDenied("You can only list products under your own brand.")
        return brand

    def validate(self, attrs):
        user = self.context['request'].user
        if self.instance is None and 'brand' not in attrs and not user.is_staff:
            attrs['brand'] = user.brand

        brand = attrs.get('brand', getattr(self.instance, 'brand', None))
        name = attrs.get('name', getattr(self.instance, 'name', None))
        if brand is not None:
            duplicates = Product.objects.filter(Q(brand=brand) & Q(name__iexact=name))
            if self.instance is not None:
                duplicates = duplicates.exclude(pk=self.instance.pk)
            if duplicates.exists():
                raise Conflict(f"{brand.name} already has a product named '{name}'.")
        return attrs


# ---------------------------
# Product Read Serializers
# ---------------------------

class ProductListSerializer(serializers.ModelSerializer):
    product_id = serializers.IntegerField(source='id', read_only=True)
    product_name = serializers.CharField(source='name', read_only=True)
    brand_id = serializers.IntegerField(read_only=True, allow_null=True)
    brand_name = serializers.CharField(source='brand.name', read_only=True, default=None)
    category_id = serializers.IntegerField(read_only=True)
    category_name = serializers.CharField(source='category.name', read_only=True)

    class Meta:
        model = Product
        fields = [
            'product_id', 'product_name', 'description', 'brand_id', 'brand_name',
            'category_id', 'category_name', 'created_at', 'updated_at'
        ]


class ProductRetrieveSerializer(ProductListSerializer):
    """
    Serializer for returning product details with media, a category
    breadcrumb and review statistics.
    """
    media = ProductMediaSerializer(many=True, read_only=True)
    category_breadcrumb = serializers.SerializerMethodField()
    review_count = serializers.IntegerField(read_only=True, default=0)
    average_rating = serializers.SerializerMethodField()

    class Meta(ProductListSerializer.Meta):
        fields = ProductListSerializer.Meta.fields + [
            'category_breadcrumb', 'media', 'review_count', 'average_rating'
        ]

    def get_category_breadcrumb(self, obj: Product) -> str:
        """
        Builds full breadcrumb path for the category.
        """
        parts = []
        category = obj.category
        while category:
            parts.append(category.name)
            category = category.parent
        return " > ".join(reversed(parts))

    @extend_schema_field(OpenApiTypes.STR)
    def get_average_rating(self, obj):
        return one_decimal(getattr(obj, 'average_rating', None))
