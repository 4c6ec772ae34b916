from django.db import transaction
from django.db.models import Avg, Count, Prefetch
from django.shortcuts import get_object_or_404
from django.utils import timezone
from django.utils.decorators import method_decorator
from django.views.decorators.cache import cache_page

from rest_framework import viewsets, mixins, status
from rest_framework.decorators import action
from rest_framework.exceptions import APIException, NotFound
from rest_framework.filters import OrderingFilter
from rest_framework.parsers import MultiPartParser, FormParser
from rest_framework.permissions import IsAdminUser, IsAuthenticated, AllowAny
from rest_framework.response import Response
from rest_framework.throttling import AnonRateThrottle, UserRateThrottle
from django_filters.rest_framework import DjangoFilterBackend

from drf_spectacular.utils import (
    extend_schema, extend_schema_view, OpenApiParameter, OpenApiExample, OpenApiTypes
)
import logging

from .models import Brand, BrandVerificationRequest, Category, Product, ProductMedia
from .serializers import (
    BrandSerializer,
    BrandVerificationSerializer,
    BrandVerificationSubmitSerializer,
    BrandVerificationProcessSerializer,
    BrandVerificationStatusSerializer,
    CategorySerializer,
    CategoryWriteSerializer,
    SimpleCategorySerializer,
    ProductWriteSerializer,
    ProductListSerializer,
    ProductRetrieveSerializer,
    ProductMediaSerializer,
    ProductMediaUploadSerializer,
    ProductMediaUpdateSerializer,
)
from .filters import ProductFilter
from .pagination import ProductPagination
from .permissions import BrandPermission, CanManageProduct
from users.authentication import JWTAuthentication
from users.throttles import IPRateThrottle
from users.permissions import IsBrandAccount, IsStaffOrReadOnly
from review_rating.exceptions import Conflict

logger = logging.getLogger("rest_framework")

PRODUCT_LIST_CACHE_PREFIX = "product_management:product_list"


def delete_stored_file(media):
    """
    Remove a media file from blob storage. A storage failure is logged and
    does not block removing the metadata row.
    """
    try:
        media.file.delete(save=False)
    except Exception as e:
        logger.warning("Failed to delete file for ProductMedia ID %s: %s", media.id, e)


# -------------------------------------------------
# Brands
# -------------------------------------------------
@extend_schema_view(
    list=extend_schema(summary="List Brands", description="Public list of brands ordered by name."),
    retrieve=extend_schema(summary="Retrieve Brand"),
    create=extend_schema(
        summary="Create Brand",
        description="Staff can create any brand. A brand account can create its own brand once and "
                    "becomes its owner. Brand names are unique (409 on duplicate)."
    ),
    update=extend_schema(summary="Update Brand", description="Allowed for staff and the owning brand account."),
    partial_update=extend_schema(summary="Partial Update Brand"),
    destroy=extend_schema(summary="Delete Brand", description="Staff only. Products keep existing without a brand."),
)
class BrandViewSet(viewsets.ModelViewSet):
    queryset = Brand.objects.all()
    serializer_class = BrandSerializer
    authentication_classes = [JWTAuthentication]
    permission_classes = [BrandPermission]
    throttle_classes = [IPRateThrottle, AnonRateThrottle, UserRateThrottle]

    def perform_create(self, serializer):
        user = self.request.user
        owner = None if user.is_staff else user
        brand = serializer.save(owner=owner)
        logger.info("Brand %s created by user %s", brand.pk, user.pk)


# -------------------------------------------------
# Brand verification
# -------------------------------------------------
@extend_schema_view(
    list=extend_schema(
        summary="List Verification Requests",
        description="Staff only. Pending requests by default, oldest first. Pass `status` to list "
                    "approved or rejected requests instead.",
        parameters=[
            OpenApiParameter(name="status", type=OpenApiTypes.STR, location=OpenApiParameter.QUERY,
                             enum=["pending", "approved", "rejected"]),
        ],
        responses=BrandVerificationSerializer(many=True),
    ),
    create=extend_schema(
        summary="Submit Brand Verification",
        description="Brand accounts submit verification documents for their brand. A brand has at "
                    "most one pending request, and verified brands cannot resubmit (409).",
        request=BrandVerificationSubmitSerializer,
        responses={201: BrandVerificationSerializer},
    ),
)
class BrandVerificationViewSet(mixins.ListModelMixin, viewsets.GenericViewSet):
    authentication_classes = [JWTAuthentication]
    throttle_classes = [IPRateThrottle, AnonRateThrottle, UserRateThrottle]
    lookup_value_regex = r"[0-9]+"

    def get_permissions(self):
        if self.action in ('create', 'verification_status'):
            return [IsBrandAccount()]
        return [IsAdminUser()]

    def get_serializer_class(self):
        if self.action == 'create':
            return BrandVerificationSubmitSerializer
        if self.action == 'process':
            return BrandVerificationProcessSerializer
        return BrandVerificationSerializer

    def get_queryset(self):
        if getattr(self, "swagger_fake_view", False):
            return BrandVerificationRequest.objects.none()
        queryset = BrandVerificationRequest.objects.select_related('brand')
        if self.action == 'list':
            wanted = self.request.query_params.get('status', BrandVerificationRequest.PENDING)
            queryset = queryset.filter(status=wanted).annotate(product_count=Count('brand__products'))
        return queryset

    def own_brand(self):
        brand = Brand.objects.filter(owner=self.request.user).first()
        if brand is None:
            raise NotFound("You have not registered a brand yet.")
        return brand

    def create(self, request, *args, **kwargs):
        brand = self.own_brand()
        serializer = BrandVerificationSubmitSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        with transaction.atomic():
            brand = Brand.objects.select_for_update().get(pk=brand.pk)
            if brand.is_verified:
                raise Conflict("This brand is already verified.")
            if brand.verification_requests.filter(status=BrandVerificationRequest.PENDING).exists():
                raise Conflict("A verification request for this brand is already pending.")

            verification = serializer.save(brand=brand)
            if verification.website:
                Brand.objects.filter(pk=brand.pk).update(website=verification.website)

        logger.info("Brand %s submitted verification request %s", brand.pk, verification.pk)
        return Response(BrandVerificationSerializer(verification).data, status=status.HTTP_201_CREATED)

    @extend_schema(
        summary="Brand Verification Status",
        description="Verification state of the requesting account's brand with the next steps to take.",
        responses=BrandVerificationStatusSerializer,
    )
    @action(detail=False, methods=['get'], url_path='status')
    def verification_status(self, request):
        return Response(BrandVerificationStatusSerializer(self.own_brand()).data)

    @extend_schema(
        summary="Process Brand Verification",
        description="Staff only. Approve or reject a pending request. Approval marks the brand as "
                    "verified, rejection clears the flag. Processed requests cannot be processed again (409).",
        request=BrandVerificationProcessSerializer,
        responses=BrandVerificationSerializer,
    )
    @action(detail=True, methods=['post'])
    def process(self, request, pk=None):
        serializer = BrandVerificationProcessSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        decision = serializer.validated_data['status']

        with transaction.atomic():
            verification = get_object_or_404(
                BrandVerificationRequest.objects.select_for_update().select_related('brand'), pk=pk
            )
            if verification.status != BrandVerificationRequest.PENDING:
                raise Conflict(f"This verification request was already {verification.status}.")

            verification.status = decision
            verification.notes = serializer.validated_data['notes']
            verification.reviewed_by = request.user
            verification.reviewed_at = timezone.now()
            verification.save()

            verification.brand.is_verified = decision == BrandVerificationRequest.APPROVED
            verification.brand.save(update_fields=['is_verified'])

        logger.info("Verification request %s %s by user %s", verification.pk, decision, request.user.pk)
        return Response({
            "message": f"Brand verification {decision} successfully",
            "verification": BrandVerificationSerializer(verification).data,
        })


# -------------------------------------------------
# Categories
# -------------------------------------------------
@extend_schema_view(
    list=extend_schema(
        summary="List Categories",
        description="Top-level active categories, each with its active subcategories."
    ),
    retrieve=extend_schema(summary="Retrieve Category"),
    create=extend_schema(
        summary="Create Category",
        description="Staff only. Pass `parent` to create a subcategory. Names are unique among siblings.",
        request=CategoryWriteSerializer,
        examples=[
            OpenApiExample(
                name="Create Subcategory Example",
                value={"category_name": "Headphones", "description": "Wired and wireless", "parent": 1},
                request_only=True,
            )
        ]
    ),
    update=extend_schema(summary="Update Category", request=CategoryWriteSerializer),
    partial_update=extend_schema(summary="Partial Update Category", request=CategoryWriteSerializer),
    destroy=extend_schema(
        summary="Delete Category",
        description="Staff only. Categories that still hold products cannot be deleted."
    ),
)
class CategoryViewSet(viewsets.ModelViewSet):
    authentication_classes = [JWTAuthentication]
    permission_classes = [IsStaffOrReadOnly]

    def get_queryset(self):
        queryset = Category.objects.prefetch_related('children')
        if self.action == 'list':
            return queryset.filter(parent__isnull=True, is_active=True)
        return queryset

    def get_serializer_class(self):
        if self.action in ('create', 'update', 'partial_update'):
            return CategoryWriteSerializer
        return CategorySerializer

    def perform_destroy(self, instance):
        if Product.objects.filter(category__in=instance.get_descendants(include_self=True)).exists():
            raise Conflict("This category still holds products.")
        instance.delete()

    @extend_schema(
        summary="List Subcategories",
        description="Active subcategories of a category.",
        responses=SimpleCategorySerializer(many=True),
    )
    @action(detail=True, methods=['get'])
    def subcategories(self, request, pk=None):
        category = self.get_object()
        children = category.children.filter(is_active=True)
        return Response(SimpleCategorySerializer(children, many=True).data)


# -------------------------------------------------
# Product CRUD viewSet
# -------------------------------------------------
@extend_schema_view(
    list=extend_schema(
        summary="List Products",
        description=(
            "Retrieve a paginated list of products. Supports filtering by category (a top-level category "
            "includes its subcategories), brand and a case-insensitive name search, and ordering by name "
            "or creation date."
        ),
        parameters=[
            OpenApiParameter(name="category", type=OpenApiTypes.INT, location=OpenApiParameter.QUERY,
                             description="Category or subcategory ID."),
            OpenApiParameter(name="brand", type=OpenApiTypes.INT, location=OpenApiParameter.QUERY,
                             description="Brand ID."),
            OpenApiParameter(name="search", type=OpenApiTypes.STR, location=OpenApiParameter.QUERY,
                             description="Substring of the product name."),
        ]
    ),
    retrieve=extend_schema(
        summary="Retrieve Product",
        description="Product details with its media, a category breadcrumb, the number of reviews "
                    "and the average rating."
    ),
    create=extend_schema(
        summary="Create Product",
        description="Brand accounts create products under their own brand; staff may pick any brand.",
        request=ProductWriteSerializer,
        responses={201: ProductWriteSerializer},
    ),
    update=extend_schema(summary="Update Product", request=ProductWriteSerializer, responses=ProductWriteSerializer),
    partial_update=extend_schema(
        summary="Partial Update Product",
        description="Partially update a product (allowed for the owning brand account or an admin)."
    ),
    destroy=extend_schema(
        summary="Delete Product",
        description="Delete a product along with its reviews and media files in an atomic transaction."
    )
)
class ProductViewSet(viewsets.ModelViewSet):
    """
    API endpoint for managing products.

    GET requests are public. Writes require JWT authentication; only the
    brand account owning the product's brand or an admin can modify.
    The list view is cached for 2 minutes and invalidated on product changes.
    """

    authentication_classes = [JWTAuthentication]
    permission_classes = [CanManageProduct]
    filter_backends = [DjangoFilterBackend, OrderingFilter]
    filterset_class = ProductFilter
    pagination_class = ProductPagination

    ordering_fields = ['name', 'created_at']
    ordering = ['-created_at', '-id']

    throttle_classes = [IPRateThrottle, AnonRateThrottle, UserRateThrottle]

    def get_serializer_class(self):
        if self.action == 'list':
            return ProductListSerializer
        if self.action == 'retrieve':
            return ProductRetrieveSerializer
        return ProductWriteSerializer

    def get_queryset(self):
        queryset = Product.objects.select_related('brand', 'category', 'category__parent')
        if self.action == 'retrieve':
            queryset = queryset.annotate(
                review_count=Count('reviews'),
                average_rating=Avg('reviews__rating'),
            ).prefetch_related(
                Prefetch('media', queryset=ProductMedia.objects.order_by('-uploaded_at', '-id'))
            )
        return queryset

    @method_decorator(cache_page(60 * 2, key_prefix=PRODUCT_LIST_CACHE_PREFIX), name="list")
    def list(self, request, *args, **kwargs):
        return super().list(request, *args, **kwargs)

    def perform_destroy(self, instance):
        try:
            with transaction.atomic():
                for media in instance.media.all():
                    delete_stored_file(media)
                instance.delete()
        except Exception as e:
            logger.exception("Error occurred during deletion of product %s: %s", instance.pk, e)
            raise APIException("An error occurred while deleting the product. Please try again later.")

    @extend_schema(
        methods=['GET'],
        summary="List Product Media",
        description="Media uploaded for this product, newest first. Public.",
        responses=ProductMediaSerializer(many=True),
    )
    @extend_schema(
        methods=['POST'],
        summary="Upload Product Media",
        description="Upload an image (jpeg, png, gif or webp, up to 10 MB) for this product as "
                    "multipart/form-data under the key `file`, with optional `file_name` and `tags`.",
        request={'multipart/form-data': ProductMediaUploadSerializer},
        responses={201: ProductMediaSerializer},
    )
    @action(
        detail=True,
        methods=['get', 'post'],
        permission_classes=[AllowAny],
        parser_classes=[MultiPartParser, FormParser],
    )
    def media(self, request, pk=None):
        product = get_object_or_404(Product, pk=pk)

        if request.method == 'GET':
            media = product.media.select_related('uploaded_by')
            return Response(ProductMediaSerializer(media, many=True).data)

        if not (request.user and request.user.is_authenticated):
            self.permission_denied(request, message="Authentication is required to upload media.")

        serializer = ProductMediaUploadSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        media = serializer.save(product=product, uploaded_by=request.user)
        logger.info("User %s uploaded media %s for product %s", request.user.pk, media.pk, product.pk)
        return Response(ProductMediaSerializer(media).data, status=status.HTTP_201_CREATED)


# -------------------------------------------------
# Media owned by the uploader
# -------------------------------------------------
@extend_schema_view(
    retrieve=extend_schema(summary="Retrieve Media", responses=ProductMediaSerializer),
    partial_update=extend_schema(
        summary="Update Media",
        description="Rename or retag your upload. Media of other users is reported as not found.",
        request=ProductMediaUpdateSerializer,
        responses=ProductMediaSerializer,
    ),
    update=extend_schema(summary="Update Media", request=ProductMediaUpdateSerializer, responses=ProductMediaSerializer),
    destroy=extend_schema(summary="Delete Media", description="Delete your upload and its stored file."),
)
class ProductMediaViewSet(mixins.RetrieveModelMixin,
                          mixins.UpdateModelMixin,
                          mixins.DestroyModelMixin,
                          viewsets.GenericViewSet):
    authentication_classes = [JWTAuthentication]
    permission_classes = [IsAuthenticated]
    serializer_class = ProductMediaUpdateSerializer

    def get_queryset(self):
        if getattr(self, "swagger_fake_view", False):
            return ProductMedia.objects.none()
        return ProductMedia.objects.filter(uploaded_by=self.request.user)

    def retrieve(self, request, *args, **kwargs):
        return Response(ProductMediaSerializer(self.get_object()).data)

    def update(self, request, *args, **kwargs):
        partial = kwargs.pop('partial', False)
        media = self.get_object()
        serializer = ProductMediaUpdateSerializer(media, data=request.data, partial=partial)
        serializer.is_valid(raise_exception=True)
        serializer.save()
        return Response(ProductMediaSerializer(media).data)

    def perform_destroy(self, instance):
        delete_stored_file(instance)
        instance.delete()
