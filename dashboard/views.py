from rest_framework import generics, filters
from rest_framework.permissions import AllowAny
from rest_framework.pagination import PageNumberPagination
from rest_framework.views import APIView
from rest_framework.response import Response
from django_filters.rest_framework import DjangoFilterBackend

from drf_spectacular.utils import extend_schema, OpenApiParameter, OpenApiResponse
from drf_spectacular.types import OpenApiTypes

from product_management.models import Product
from users.authentication import JWTAuthentication
from users.permissions import IsBrandAccount
from .filters import BrandProductFilter
from .serializers import BrandProductSerializer
from .services import ProductDashboard, BrandDashboard


@extend_schema(
    tags=['Dashboard'],
    parameters=[
        OpenApiParameter('product_id', OpenApiTypes.INT, OpenApiParameter.PATH),
    ],
    responses={
        200: OpenApiResponse(
            response=OpenApiTypes.OBJECT,
            description="`product`, `rating_statistics` (totals, one-decimal average, min/max, "
                        "recommendation percentage, dense 10..1 distribution, quality bands), "
                        "`category_ratings` and `reviews` with their comment trees."
        ),
        404: OpenApiResponse(description="Product not found."),
        500: OpenApiResponse(description="The dashboard could not be computed."),
    },
    description="Aggregated rating dashboard of a product. Public."
)
class ProductDashboardView(APIView):
    """
    GET /dashboard/products/<product_id>/
    """
    authentication_classes = []
    permission_classes = [AllowAny]

    def get(self, request, product_id):
        return Response(ProductDashboard.for_product(product_id))


@extend_schema(
    tags=['Dashboard'],
    responses={200: OpenApiTypes.OBJECT},
    description="Summary of the current brand account: brand details, review statistics across its "
                "products, the latest products and the latest reviews."
)
class BrandDashboardView(APIView):
    """
    GET /dashboard/brand/
    """
    authentication_classes = [JWTAuthentication]
    permission_classes = [IsBrandAccount]

    def get(self, request):
        return Response(BrandDashboard.for_owner(request.user))


class BrandProductPagination(PageNumberPagination):
    page_size = 15
    page_size_query_param = 'page_size'
    max_page_size = 30


@extend_schema(
    tags=['Dashboard'],
    responses={200: BrandProductSerializer(many=True)},
    description="List the current brand's products with review count and average rating, paginated."
)
class BrandProductListView(generics.ListAPIView):
    """
    GET /dashboard/brand/products/
    """
    queryset = Product.objects.none()
    serializer_class = BrandProductSerializer
    authentication_classes = [JWTAuthentication]
    permission_classes = [IsBrandAccount]
    pagination_class = BrandProductPagination
    filter_backends = [filters.OrderingFilter, DjangoFilterBackend]
    ordering_fields = ['created_at', 'review_count', 'average_rating']
    filterset_class = BrandProductFilter

    def get_queryset(self):
        if getattr(self, "swagger_fake_view", False):
            return Product.objects.none()
        brand = BrandDashboard.brand_of(self.request.user)
        return BrandDashboard.products_queryset(brand)
