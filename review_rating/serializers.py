from rest_framework import serializers

from utils.formatting import one_decimal
from .models import CategoryRating, Comment, RatingCategory, Review, MIN_SCORE, MAX_SCORE
from .services import ReviewPatch


# -------------------------------------------------
# Comments
# -------------------------------------------------

class CommentSerializer(serializers.ModelSerializer):
    comment_id = serializers.IntegerField(source='id', read_only=True)
    review_id = serializers.IntegerField(read_only=True)
    user_id = serializers.IntegerField(read_only=True)
    parent_comment_id = serializers.IntegerField(read_only=True, allow_null=True)
    username = serializers.CharField(source='user.username', read_only=True)
    avatar_url = serializers.CharField(source='user.avatar_url', read_only=True, allow_null=True)
    user_verified = serializers.BooleanField(source='user.is_verified', read_only=True)

    class Meta:
        model = Comment
        fields = (
            'comment_id', 'review_id', 'user_id', 'parent_comment_id', 'content',
            'created_at', 'updated_at', 'username', 'avatar_url', 'user_verified',
        )
        read_only_fields = fields


class ThreadedCommentSerializer(CommentSerializer):
    """
    A top-level comment with its direct replies. Expects instances coming from
    `top_level_comments_queryset()`.
    """
    replies_count = serializers.IntegerField(read_only=True)
    replies = CommentSerializer(source='reply_list', many=True, read_only=True)

    class Meta(CommentSerializer.Meta):
        fields = CommentSerializer.Meta.fields + ('replies_count', 'replies')
        read_only_fields = fields


class CommentCreateSerializer(serializers.Serializer):
    review_id = serializers.IntegerField(min_value=1)
    content = serializers.CharField(trim_whitespace=True)
    parent_comment_id = serializers.IntegerField(min_value=1, required=False, allow_null=True)


class CommentUpdateSerializer(serializers.Serializer):
    content = serializers.CharField(trim_whitespace=True)


# -------------------------------------------------
# Reviews
# -------------------------------------------------

class CategoryRatingSerializer(serializers.ModelSerializer):
    rating_id = serializers.IntegerField(source='id', read_only=True)
    label = serializers.CharField(source='get_category_display', read_only=True)

    class Meta:
        model = CategoryRating
        fields = ('rating_id', 'category', 'label', 'score', 'created_at')
        read_only_fields = fields


class ReviewSerializer(serializers.ModelSerializer):
    review_id = serializers.IntegerField(source='id', read_only=True)
    product_id = serializers.IntegerField(read_only=True)
    user_id = serializers.IntegerField(read_only=True)
    username = serializers.CharField(source='user.username', read_only=True)
    avatar_url = serializers.CharField(source='user.avatar_url', read_only=True, allow_null=True)
    user_verified = serializers.BooleanField(source='user.is_verified', read_only=True)
    comments_count = serializers.SerializerMethodField()
    category_ratings = CategoryRatingSerializer(many=True, read_only=True)
    average_category_rating = serializers.SerializerMethodField()

    class Meta:
        model = Review
        fields = (
            'review_id', 'product_id', 'user_id', 'title', 'content', 'rating',
            'created_at', 'updated_at', 'username', 'avatar_url', 'user_verified',
            'comments_count', 'category_ratings', 'average_category_rating',
        )
        read_only_fields = fields

    def get_comments_count(self, obj) -> int:
        count = getattr(obj, 'comments_count', None)
        if count is None:
            count = obj.comments.count()
        return int(count)

    def get_average_category_rating(self, obj) -> str | None:
        scores = [rating.score for rating in obj.category_ratings.all()]
        if not scores:
            return None
        return one_decimal(sum(scores) / len(scores))


class CategoryScoresField(serializers.DictField):
    """
    A mapping of rating category to score, e.g. {"durability": 8}.
    """

    def __init__(self, **kwargs):
        kwargs.setdefault('child', serializers.IntegerField(min_value=MIN_SCORE, max_value=MAX_SCORE))
        super().__init__(**kwargs)

    def to_internal_value(self, data):
        value = super().to_internal_value(data)
        unknown = sorted(set(value) - set(RatingCategory.values))
        if unknown:
            raise serializers.ValidationError(
                f"Unknown rating categories: {', '.join(unknown)}. "
                f"Valid categories are: {', '.join(RatingCategory.values)}."
            )
        return value


class ReviewCreateSerializer(serializers.Serializer):
    product_id = serializers.IntegerField(min_value=1)
    title = serializers.CharField(max_length=200)
    content = serializers.CharField()
    rating = serializers.IntegerField(min_value=MIN_SCORE, max_value=MAX_SCORE)
    category_ratings = CategoryScoresField(required=False)


class ReviewUpdateSerializer(serializers.Serializer):
    title = serializers.CharField(max_length=200, required=False)
    content = serializers.CharField(required=False)
    rating = serializers.IntegerField(min_value=MIN_SCORE, max_value=MAX_SCORE, required=False)
    category_ratings = CategoryScoresField(required=False)

    def validate(self, attrs):
        if ReviewPatch.from_data(attrs).is_empty():
            raise serializers.ValidationError("No fields to update.")
        return attrs


class RatingCategorySerializer(serializers.Serializer):
    category = serializers.CharField()
    label = serializers.CharField()


class ReviewWithProductSerializer(ReviewSerializer):
    """Review listed outside its product page, so it names the product."""
    product_name = serializers.CharField(source='product.name', read_only=True)

    class Meta(ReviewSerializer.Meta):
        fields = ReviewSerializer.Meta.fields + ('product_name',)
        read_only_fields = fields
