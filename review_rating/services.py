import logging
from dataclasses import dataclass, field

from django.db import IntegrityError, transaction
from django.db.models import Count, Prefetch
from django.utils import timezone
from rest_framework.exceptions import NotFound

from product_management.models import Product
from .exceptions import Conflict, InvalidRelation
from .models import CategoryRating, Comment, RatingCategory, Review

logger = logging.getLogger("rest_framework")


# -------------------------------------------------
# Querysets shared by the services and the dashboard
# -------------------------------------------------

def comment_queryset():
    return Comment.objects.select_related('user').order_by('created_at', 'id')


def top_level_comments_queryset():
    """
    Top-level comments (no parent) with their direct replies prefetched into
    `reply_list`. Replies of replies are never loaded.
    """
    return (
        comment_queryset()
        .filter(parent_comment__isnull=True)
        .annotate(replies_count=Count('replies'))
        .prefetch_related(
            Prefetch('replies', queryset=comment_queryset(), to_attr='reply_list')
        )
    )


def review_queryset():
    return (
        Review.objects
              .select_related('user')
              .annotate(comments_count=Count('comments', distinct=True))
              .prefetch_related(
                  Prefetch('category_ratings', queryset=CategoryRating.objects.order_by('category'))
              )
              .order_by('-created_at', '-id')
    )


# -------------------------------------------------
# Threaded comments
# -------------------------------------------------

class CommentService:

    @staticmethod
    def get_comments_by_review(review_id):
        """
        Return the two-level comment tree of a review: top-level comments in
        creation order, each carrying its direct replies in `reply_list`.
        """
        return list(top_level_comments_queryset().filter(review_id=review_id))

    @staticmethod
    def get_replies_of(comment_id):
        return list(comment_queryset().filter(parent_comment_id=comment_id))

    @staticmethod
    def get_comment(comment_id):
        comment = comment_queryset().filter(pk=comment_id).first()
        if comment is None:
            raise NotFound(f"Comment with ID {comment_id} not found")
        return comment

    @staticmethod
    @transaction.atomic
    def create_comment(user, review_id, content, parent_comment_id=None):
        if not Review.objects.filter(pk=review_id).exists():
            raise NotFound(f"Review with ID {review_id} not found")

        if parent_comment_id is not None:
            parent = (
                Comment.objects.filter(pk=parent_comment_id)
                       .values('review_id', 'parent_comment_id')
                       .first()
            )
            if parent is None:
                raise NotFound(f"Parent comment with ID {parent_comment_id} not found")
            if parent['review_id'] != int(review_id):
                raise InvalidRelation("Parent comment does not belong to the specified review")
            if parent['parent_comment_id'] is not None:
                raise InvalidRelation("Replies can only be attached to top-level comments")

        now = timezone.now()
        comment = Comment.objects.create(
            review_id=review_id,
            user=user,
            parent_comment_id=parent_comment_id,
            content=content,
            created_at=now,
            updated_at=now,
        )
        logger.info("User %s commented on review %s (comment %s)", user.pk, review_id, comment.pk)
        return comment

    @staticmethod
    def update_comment(comment_id, user, content):
        # Missing and not-owned comments are indistinguishable to the caller.
        updated = (
            Comment.objects.filter(pk=comment_id, user=user)
                   .update(content=content, updated_at=timezone.now())
        )
        if not updated:
            logger.info("Comment %s not found or not owned by user %s", comment_id, user.pk)
            raise NotFound(f"Comment with ID {comment_id} not found or you don't have permission to update it")

        comment = comment_queryset().filter(pk=comment_id).first()
        if comment is None:
            raise NotFound(f"Comment with ID {comment_id} not found")
        return comment

    @staticmethod
    def delete_comment(comment_id, user):
        """
        Delete a comment owned by `user`. Its replies are removed by the
        database cascade. The returned instance still carries its data.
        """
        comment = comment_queryset().filter(pk=comment_id, user=user).first()
        if comment is None:
            logger.info("Comment %s not found or not owned by user %s", comment_id, user.pk)
            raise NotFound(f"Comment with ID {comment_id} not found or you don't have permission to delete it")

        Comment.objects.filter(pk=comment.pk).delete()
        return comment


# -------------------------------------------------
# Reviews and category ratings
# -------------------------------------------------

PATCHABLE_REVIEW_FIELDS = ('title', 'content', 'rating')


@dataclass(frozen=True)
class ReviewPatch:
    """
    The subset of review fields present in an update request, plus the
    category scores to upsert.
    """
    changes: dict = field(default_factory=dict)
    category_ratings: dict = field(default_factory=dict)

    @classmethod
    def from_data(cls, data):
        changes = {name: data[name] for name in PATCHABLE_REVIEW_FIELDS if name in data}
        return cls(changes=changes, category_ratings=dict(data.get('category_ratings') or {}))

    def is_empty(self):
        return not self.changes and not self.category_ratings


class ReviewService:

    @staticmethod
    def rating_categories():
        return [{'category': value, 'label': label} for value, label in RatingCategory.choices]

    @staticmethod
    def list_for_product(product_id):
        if not Product.objects.filter(pk=product_id).exists():
            raise NotFound(f"Product with ID {product_id} not found")
        return list(review_queryset().filter(product_id=product_id))

    @staticmethod
    def list_for_user(user):
        return list(review_queryset().select_related('product').filter(user=user))

    @staticmethod
    def get_review(review_id):
        review = review_queryset().filter(pk=review_id).first()
        if review is None:
            raise NotFound(f"Review with ID {review_id} not found")
        return review

    @staticmethod
    @transaction.atomic
    def create_review(user, product_id, title, content, rating, category_ratings=None):
        """
        Create a review together with its category ratings. Both are written
        in one transaction so a failing rating leaves no review behind.
        """
        if not Product.objects.filter(pk=product_id).exists():
            raise NotFound(f"Product with ID {product_id} not found")

        if Review.objects.filter(user=user, product_id=product_id).exists():
            raise Conflict("You have already reviewed this product")

        try:
            with transaction.atomic():
                review = Review.objects.create(
                    product_id=product_id,
                    user=user,
                    title=title,
                    content=content,
                    rating=rating,
                )
        except IntegrityError:
            # a concurrent request won the unique (product, user) race
            raise Conflict("You have already reviewed this product")

        CategoryRating.objects.bulk_create([
            CategoryRating(review=review, category=category, score=score)
            for category, score in (category_ratings or {}).items()
        ])

        logger.info("User %s reviewed product %s (review %s)", user.pk, product_id, review.pk)
        return ReviewService.get_review(review.pk)

    @staticmethod
    @transaction.atomic
    def update_review(review_id, user, patch):
        locked = Review.objects.select_for_update().filter(pk=review_id, user=user).exists()
        if not locked:
            logger.info("Review %s not found or not owned by user %s", review_id, user.pk)
            raise NotFound(f"Review with ID {review_id} not found or you don't have permission to update it")

        # `updated_at` is auto_now, which queryset updates bypass
        Review.objects.filter(pk=review_id).update(**patch.changes, updated_at=timezone.now())

        for category, score in patch.category_ratings.items():
            CategoryRating.objects.update_or_create(
                review_id=review_id,
                category=category,
                defaults={'score': score},
            )

        return ReviewService.get_review(review_id)

    @staticmethod
    def delete_review(review_id, user):
        """
        Delete a review owned by `user`; category ratings and comments go with
        it. Returns the review as it was, category ratings included.
        """
        review = review_queryset().filter(pk=review_id, user=user).first()
        if review is None:
            logger.info("Review %s not found or not owned by user %s", review_id, user.pk)
            raise NotFound(f"Review with ID {review_id} not found or you don't have permission to delete it")

        Review.objects.filter(pk=review.pk).delete()
        return review
