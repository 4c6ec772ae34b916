from django.conf import settings
from django.db import models
from django.core.validators import MinValueValidator, MaxValueValidator

from product_management.models import Product

MIN_SCORE = 1
MAX_SCORE = 10

score_validators = [MinValueValidator(MIN_SCORE), MaxValueValidator(MAX_SCORE)]


class RatingCategory(models.TextChoices):
    VALUE_FOR_MONEY = 'value_for_money', 'Value for money'
    BUILD_QUALITY = 'build_quality', 'Build quality'
    FUNCTIONALITY = 'functionality', 'Functionality'
    DURABILITY = 'durability', 'Durability'
    EASE_OF_USE = 'ease_of_use', 'Ease of use'
    AESTHETICS = 'aesthetics', 'Aesthetics'
    COMPATIBILITY = 'compatibility', 'Compatibility'


class Review(models.Model):

    product = models.ForeignKey(
        Product,
        on_delete=models.CASCADE,
        related_name='reviews'
    )
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name='reviews'
    )
    title = models.CharField(max_length=200)
    content = models.TextField()
    rating = models.PositiveSmallIntegerField(validators=score_validators)
    # set once the rating has been moved from the legacy 1-5 scale
    rescaled_at = models.DateTimeField(null=True, blank=True, editable=False)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        # Enforce one review per product per user.
        constraints = [
            models.UniqueConstraint(fields=['product', 'user'], name='unique_product_review')
        ]
        indexes = [
            models.Index(fields=['product', 'created_at'], name='review_product_created_idx'),
        ]

    def __str__(self):
        return f"Review by {self.user.username} on {self.product.name}"


class CategoryRating(models.Model):
    review = models.ForeignKey(
        Review,
        on_delete=models.CASCADE,
        related_name='category_ratings'
    )
    category = models.CharField(max_length=30, choices=RatingCategory.choices)
    score = models.PositiveSmallIntegerField(validators=score_validators)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        constraints = [
            models.UniqueConstraint(fields=['review', 'category'], name='unique_review_category')
        ]

    def __str__(self):
        return f"{self.category}={self.score} for review {self.review_id}"


class Comment(models.Model):
    """
    A comment on a review. Comments with a parent are replies; only one
    level of replies is ever assembled.
    """
    review = models.ForeignKey(
        Review,
        on_delete=models.CASCADE,
        related_name='comments'
    )
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name='comments'
    )
    parent_comment = models.ForeignKey(
        'self',
        on_delete=models.CASCADE,
        null=True,
        blank=True,
        related_name='replies'
    )
    content = models.TextField()
    created_at = models.DateTimeField()
    updated_at = models.DateTimeField()

    class Meta:
        indexes = [
            models.Index(fields=['review', 'parent_comment', 'created_at'], name='comment_review_parent_idx'),
        ]

    def __str__(self):
        return f"Comment {self.id} on review {self.review_id}"
