from django.db.models.signals import post_save, post_delete, pre_save
from django.dispatch import receiver

from product_management.models import Product
from .dsh_cache import invalidate_brand_products


@receiver(pre_save, sender=Product)
def _remember_previous_brand(sender, instance, **kwargs):
    if instance.pk is None:
        instance._previous_brand_id = None
        return
    instance._previous_brand_id = (
        Product.objects.filter(pk=instance.pk).values_list('brand_id', flat=True).first()
    )


@receiver([post_save, post_delete], sender=Product)
def invalidate_brand_products_cache(sender, instance, **kwargs):
    """
    Invalidate the cached product list of the brand(s) a product belongs to
    (or belonged to before this save).
    """
    invalidate_brand_products(instance.brand_id)
    previous = getattr(instance, '_previous_brand_id', None)
    if previous != instance.brand_id:
        invalidate_brand_products(previous)
