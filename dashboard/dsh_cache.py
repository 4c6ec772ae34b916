from django.core.cache import cache

from product_management.models import Product

CACHE_VERSION = 1
CACHE_TTL = 30 * 60  # 30 minutes


def _cache_key_brand_products(brand_id):
    return f"brand_products:v{CACHE_VERSION}:brand:{brand_id}"


def get_brand_product_ids(brand):
    """
    Returns the list of product IDs of `brand` from cache (or recomputes and caches).
    Only the ID list is cached; every statistic is derived per request.
    """
    key = _cache_key_brand_products(brand.id)
    ids = cache.get(key)
    if ids is None:
        ids = list(
            Product.objects
                   .filter(brand=brand)
                   .values_list('id', flat=True)
        )
        cache.set(key, ids, CACHE_TTL)
    return ids


def invalidate_brand_products(brand_id):
    if brand_id is not None:
        cache.delete(_cache_key_brand_products(brand_id))
