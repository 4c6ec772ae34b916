from django.contrib import admin

from .models import CategoryRating, Comment, Review


class CategoryRatingInline(admin.TabularInline):
    model = CategoryRating
    extra = 0
    fields = ('category', 'score')


@admin.register(Review)
class ReviewAdmin(admin.ModelAdmin):
    list_display = ('id', 'product', 'user', 'rating', 'created_at')
    list_filter = ('rating', 'created_at')
    search_fields = ('title', 'content', 'product__name', 'user__email')
    ordering = ('-created_at',)
    inlines = [CategoryRatingInline]


@admin.register(Comment)
class CommentAdmin(admin.ModelAdmin):
    list_display = ('id', 'review', 'user', 'parent_comment', 'created_at')
    search_fields = ('content', 'user__email')
    raw_id_fields = ('review', 'parent_comment')
