from django.conf import settings
from django.db import models
from django.utils.functional import cached_property
from mptt.models import MPTTModel, TreeForeignKey
from utils.slug_utils import unique_slugify


class Category(MPTTModel):
    """
    Product category. Categories without a parent are top-level categories,
    categories with a parent are their subcategories.
    """
    name = models.CharField(max_length=100)
    slug = models.SlugField(unique=True, db_index=True)
    description = models.TextField(blank=True, default='')
    is_active = models.BooleanField(default=True)
    parent = TreeForeignKey(
        'self',
        on_delete=models.CASCADE,
        null=True,
        blank=True,
        related_name='children',
        verbose_name="Parent Category",
    )
    created_at = models.DateTimeField(auto_now_add=True)

    def save(self, *args, **kwargs):

        if not self.pk:
            self.slug = unique_slugify(self.name)[:50]

        super().save(*args, **kwargs)

    class MPTTMeta:
        order_insertion_by = ['name']

    class Meta:
        verbose_name_plural = 'Categories'
        constraints = [
            models.UniqueConstraint(fields=['parent', 'name'], name='unique_category_name_per_parent')
        ]

    def __str__(self):
        return self.name


class Brand(models.Model):
    name = models.CharField(max_length=150, unique=True)
    email = models.EmailField(blank=True, default='')
    website = models.URLField(blank=True, default='')
    is_verified = models.BooleanField(default=False)
    owner = models.OneToOneField(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='brand',
        help_text="Brand account allowed to manage this brand's products"
    )
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ['name']

    def __str__(self):
        return self.name

    @cached_property
    def latest_verification(self):
        return self.verification_requests.order_by('-submitted_at', '-id').first()


class Product(models.Model):
    name = models.CharField(max_length=150, db_index=True)
    description = models.TextField(blank=True, default='')
    brand = models.ForeignKey(
        Brand,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='products'
    )
    category = models.ForeignKey(
        Category,
        on_delete=models.PROTECT,
        related_name='products'
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        constraints = [
            models.UniqueConstraint(fields=['brand', 'name'], name='unique_product_name_per_brand')
        ]

    def is_managed_by(self, user):
        if user.is_staff:
            return True
        return bool(user.is_brand and self.brand_id and self.brand.owner_id == user.id)

    def __str__(self):
        return self.name


class ProductMedia(models.Model):
    """
    Metadata for a file uploaded against a product. The file itself lives in
    the configured blob storage (Cloudinary outside of tests).
    """
    product = models.ForeignKey(
        Product, on_delete=models.CASCADE, related_name='media'
    )
    uploaded_by = models.ForeignKey(
        settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name='uploaded_media'
    )
    file = models.ImageField(upload_to="product_media/")
    file_name = models.CharField(max_length=255)
    content_type = models.CharField(max_length=100)
    size = models.PositiveIntegerField(help_text="File size in bytes")
    tags = models.JSONField(default=list, blank=True)
    uploaded_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ['-uploaded_at', '-id']

    @property
    def file_url(self):
        try:
            return self.file.url
        except ValueError:
            return None

    def __str__(self):
        return f"Media {self.file_name} for {self.product.name}"


class BrandVerificationRequest(models.Model):
    """
    Verification documents a brand account submits for review. Staff approve
    or reject a pending request, which sets `Brand.is_verified`.
    """
    PENDING = 'pending'
    APPROVED = 'approved'
    REJECTED = 'rejected'
    STATUS_CHOICES = [
        (PENDING, 'Pending'),
        (APPROVED, 'Approved'),
        (REJECTED, 'Rejected'),
    ]

    brand = models.ForeignKey(
        Brand, on_delete=models.CASCADE, related_name='verification_requests'
    )
    status = models.CharField(max_length=10, choices=STATUS_CHOICES, default=PENDING, db_index=True)
    business_registration = models.CharField(max_length=100, blank=True, default='')
    website = models.URLField(blank=True, default='')
    social_media = models.CharField(max_length=255, blank=True, default='')
    additional_info = models.TextField(blank=True, default='')
    notes = models.TextField(blank=True, default='', help_text="Reviewer notes shown to the brand")
    reviewed_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='reviewed_verifications'
    )
    submitted_at = models.DateTimeField(auto_now_add=True)
    reviewed_at = models.DateTimeField(null=True, blank=True)

    class Meta:
        ordering = ['submitted_at', 'id']
        constraints = [
            models.UniqueConstraint(
                fields=['brand'],
                condition=models.Q(status='pending'),
                name='one_pending_verification_per_brand',
            )
        ]

    def __str__(self):
        return f"Verification of {self.brand.name} ({self.status})"
