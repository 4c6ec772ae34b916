from django.contrib import admin
from mptt.admin import DraggableMPTTAdmin

from .models import Brand, BrandVerificationRequest, Category, Product, ProductMedia


class ProductMediaInline(admin.TabularInline):
    model = ProductMedia
    extra = 0
    fields = ('file', 'file_name', 'content_type', 'size', 'tags', 'uploaded_by')
    readonly_fields = ('content_type', 'size')


@admin.register(Product)
class ProductAdmin(admin.ModelAdmin):
    list_display = ('id', 'name', 'brand', 'category', 'created_at')
    list_filter = ('brand', 'category', 'created_at')
    search_fields = ('name', 'description', 'brand__name')
    ordering = ('-created_at',)
    inlines = [ProductMediaInline]


@admin.register(Brand)
class BrandAdmin(admin.ModelAdmin):
    list_display = ('id', 'name', 'email', 'owner', 'is_verified', 'created_at')
    list_filter = ('is_verified',)
    search_fields = ('name', 'email', 'owner__email')
    list_editable = ('is_verified',)


@admin.register(Category)
class CategoryAdmin(DraggableMPTTAdmin):
    mptt_indent_field = "name"
    list_display = ('tree_actions', 'indented_title', 'slug', 'is_active')
    search_fields = ('name',)


@admin.register(ProductMedia)
class ProductMediaAdmin(admin.ModelAdmin):
    list_display = ('file_name', 'product', 'uploaded_by', 'content_type', 'size', 'uploaded_at')
    search_fields = ('file_name', 'product__name')


@admin.register(BrandVerificationRequest)
class BrandVerificationRequestAdmin(admin.ModelAdmin):
    list_display = ('id', 'brand', 'status', 'submitted_at', 'reviewed_by', 'reviewed_at')
    list_filter = ('status',)
    search_fields = ('brand__name', 'business_registration')
    readonly_fields = ('submitted_at',)
