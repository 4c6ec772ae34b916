from rest_framework import status, viewsets
from rest_framework.decorators import action
from rest_framework.exceptions import ValidationError
from rest_framework.permissions import IsAuthenticatedOrReadOnly, IsAuthenticated, AllowAny
from rest_framework.response import Response
from rest_framework.throttling import AnonRateThrottle, UserRateThrottle

from drf_spectacular.utils import (
    extend_schema, extend_schema_view, OpenApiParameter, OpenApiExample, OpenApiTypes
)

from users.authentication import JWTAuthentication
from users.throttles import IPRateThrottle
from .serializers import (
    CommentSerializer,
    ThreadedCommentSerializer,
    CommentCreateSerializer,
    CommentUpdateSerializer,
    ReviewSerializer,
    ReviewWithProductSerializer,
    ReviewCreateSerializer,
    ReviewUpdateSerializer,
    RatingCategorySerializer,
)
from .services import CommentService, ReviewService, ReviewPatch


def positive_int_param(request, name, required=True):
    """
    Read a positive integer query parameter, raising a 400 when it is
    malformed (or missing and required).
    """
    raw = request.query_params.get(name)
    if raw in (None, ''):
        if required:
            raise ValidationError({name: "This query parameter is required."})
        return None
    try:
        value = int(raw)
    except (TypeError, ValueError):
        raise ValidationError({name: "A valid integer is required."})
    if value < 1:
        raise ValidationError({name: "Ensure this value is greater than or equal to 1."})
    return value


# -------------------------------------------------
# Reviews
# -------------------------------------------------
@extend_schema_view(
    list=extend_schema(
        summary="List Reviews",
        description="Retrieve every review of a product, newest first. Each review carries its author, "
                    "category ratings, comment count and the mean of its category scores. "
                    "Safe access without authentication.",
        parameters=[
            OpenApiParameter(
                name="product_id",
                type=OpenApiTypes.INT,
                location=OpenApiParameter.QUERY,
                required=True,
                description="Product whose reviews are listed."
            )
        ],
        responses=ReviewSerializer(many=True),
    ),
    retrieve=extend_schema(
        summary="Retrieve Review",
        description="Retrieve a single review by its ID.",
        responses=ReviewSerializer,
    ),
    create=extend_schema(
        summary="Create Review",
        description="Submit a review for a product together with optional per-category scores (1-10). "
                    "A user may review each product once; a second attempt returns 409.",
        request=ReviewCreateSerializer,
        responses={201: ReviewSerializer},
        examples=[
            OpenApiExample(
                name="Create Review Example",
                value={
                    "product_id": 1,
                    "title": "Solid headphones",
                    "content": "Great sound, average battery.",
                    "rating": 8,
                    "category_ratings": {"build_quality": 9, "value_for_money": 7}
                },
                request_only=True,
            )
        ]
    ),
    partial_update=extend_schema(
        summary="Update Review",
        description="Update only the supplied fields of your review. Category scores are upserted. "
                    "Reviews of other users are reported as not found.",
        request=ReviewUpdateSerializer,
        responses=ReviewSerializer,
    ),
    update=extend_schema(
        summary="Update Review",
        description="Same as PATCH: only the supplied fields are changed.",
        request=ReviewUpdateSerializer,
        responses=ReviewSerializer,
    ),
    destroy=extend_schema(
        summary="Delete Review",
        description="Delete your review with its category ratings and comments. Returns the deleted review.",
        responses=ReviewSerializer,
    ),
)
class ReviewViewSet(viewsets.ViewSet):
    lookup_value_regex = r"[0-9]+"
    authentication_classes = [JWTAuthentication]
    permission_classes = [IsAuthenticatedOrReadOnly]
    throttle_classes = [IPRateThrottle, AnonRateThrottle, UserRateThrottle]

    def list(self, request):
        product_id = positive_int_param(request, 'product_id')
        reviews = ReviewService.list_for_product(product_id)
        return Response(ReviewSerializer(reviews, many=True).data)

    def retrieve(self, request, pk=None):
        review = ReviewService.get_review(pk)
        return Response(ReviewSerializer(review).data)

    def create(self, request):
        serializer = ReviewCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        review = ReviewService.create_review(
            user=request.user,
            product_id=data['product_id'],
            title=data['title'],
            content=data['content'],
            rating=data['rating'],
            category_ratings=data.get('category_ratings'),
        )
        return Response(ReviewSerializer(review).data, status=status.HTTP_201_CREATED)

    def partial_update(self, request, pk=None):
        serializer = ReviewUpdateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        review = ReviewService.update_review(pk, request.user, ReviewPatch.from_data(serializer.validated_data))
        return Response(ReviewSerializer(review).data)

    def update(self, request, pk=None):
        return self.partial_update(request, pk)

    def destroy(self, request, pk=None):
        review = ReviewService.delete_review(pk, request.user)
        return Response(
            {"message": "Review deleted successfully", "review": ReviewSerializer(review).data},
            status=status.HTTP_200_OK
        )

    @extend_schema(
        summary="List My Reviews",
        description="Every review written by the current user, newest first, with the product name.",
        responses=ReviewWithProductSerializer(many=True),
    )
    @action(detail=False, methods=['get'], permission_classes=[IsAuthenticated])
    def mine(self, request):
        reviews = ReviewService.list_for_user(request.user)
        return Response(ReviewWithProductSerializer(reviews, many=True).data)

    @extend_schema(
        summary="List Rating Categories",
        description="The categories a review can be scored on, with display labels.",
        responses=RatingCategorySerializer(many=True),
    )
    @action(detail=False, methods=['get'], permission_classes=[AllowAny])
    def categories(self, request):
        return Response(RatingCategorySerializer(ReviewService.rating_categories(), many=True).data)


# -------------------------------------------------
# Comments
# -------------------------------------------------
@extend_schema_view(
    list=extend_schema(
        summary="List Comments",
        description=(
            "With `review_id`: the comment tree of a review. Top-level comments are returned oldest first, "
            "each with `replies_count` and its direct replies (also oldest first).\n\n"
            "With `parent_id`: the direct replies of a comment."
        ),
        parameters=[
            OpenApiParameter(
                name="review_id",
                type=OpenApiTypes.INT,
                location=OpenApiParameter.QUERY,
                description="Review whose comment tree is returned."
            ),
            OpenApiParameter(
                name="parent_id",
                type=OpenApiTypes.INT,
                location=OpenApiParameter.QUERY,
                description="Comment whose replies are returned."
            ),
        ],
        responses=ThreadedCommentSerializer(many=True),
    ),
    retrieve=extend_schema(
        summary="Retrieve Comment",
        responses=CommentSerializer,
    ),
    create=extend_schema(
        summary="Create Comment",
        description="Comment on a review, or reply to a top-level comment of the same review "
                    "by passing `parent_comment_id`.",
        request=CommentCreateSerializer,
        responses={201: CommentSerializer},
    ),
    partial_update=extend_schema(
        summary="Update Comment",
        description="Change the content of your comment. Comments of other users are reported as not found.",
        request=CommentUpdateSerializer,
        responses=CommentSerializer,
    ),
    update=extend_schema(
        summary="Update Comment",
        request=CommentUpdateSerializer,
        responses=CommentSerializer,
    ),
    destroy=extend_schema(
        summary="Delete Comment",
        description="Delete your comment; its replies are deleted with it. Returns the deleted comment.",
        responses=CommentSerializer,
    ),
)
class CommentViewSet(viewsets.ViewSet):
    lookup_value_regex = r"[0-9]+"
    authentication_classes = [JWTAuthentication]
    permission_classes = [IsAuthenticatedOrReadOnly]
    throttle_classes = [IPRateThrottle, AnonRateThrottle, UserRateThrottle]

    def list(self, request):
        review_id = positive_int_param(request, 'review_id', required=False)
        parent_id = positive_int_param(request, 'parent_id', required=False)

        if review_id is not None:
            comments = CommentService.get_comments_by_review(review_id)
            return Response(ThreadedCommentSerializer(comments, many=True).data)
        if parent_id is not None:
            replies = CommentService.get_replies_of(parent_id)
            return Response(CommentSerializer(replies, many=True).data)

        raise ValidationError({"detail": "Either review_id or parent_id is required."})

    def retrieve(self, request, pk=None):
        return Response(CommentSerializer(CommentService.get_comment(pk)).data)

    def create(self, request):
        serializer = CommentCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        comment = CommentService.create_comment(
            user=request.user,
            review_id=data['review_id'],
            content=data['content'],
            parent_comment_id=data.get('parent_comment_id'),
        )
        return Response(CommentSerializer(comment).data, status=status.HTTP_201_CREATED)

    def partial_update(self, request, pk=None):
        serializer = CommentUpdateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        comment = CommentService.update_comment(pk, request.user, serializer.validated_data['content'])
        return Response(CommentSerializer(comment).data)

    def update(self, request, pk=None):
        return self.partial_update(request, pk)

    def destroy(self, request, pk=None):
        comment = CommentService.delete_comment(pk, request.user)
        return Response(
            {"message": "Comment deleted successfully", "comment": CommentSerializer(comment).data},
            status=status.HTTP_200_OK
        )
