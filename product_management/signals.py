from django.db.models.signals import post_save, post_delete
from django.dispatch import receiver
from .models import Brand, Category, Product
from django.core.cache import caches
import logging

logger = logging.getLogger("rest_framework")

PRODUCT_LIST_KEY_PATTERNS = (
    "views.decorators.cache.cache_page.product_management:product_list*",
    "views.decorators.cache.cache_header.product_management:product_list*",
)


@receiver([post_save, post_delete], sender=Product)
@receiver([post_save, post_delete], sender=Brand)
@receiver([post_save, post_delete], sender=Category)
def invalidate_product_list_cache(sender, instance, **kwargs):
    """
    Invalidate product list cache keys. The list shows brand and category
    names, so changes to those invalidate it as well.
    """
    cache = caches['default']
    if not hasattr(cache, 'delete_pattern'):
        # backends without pattern deletion (local memory in tests)
        cache.clear()
        return
    try:
        for pattern in PRODUCT_LIST_KEY_PATTERNS:
            cache.delete_pattern(pattern)
        logger.info("Product list cache invalidated.")
    except Exception as e:
        logger.warning("Cache invalidation error: %s", e)
