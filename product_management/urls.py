from django.urls import path, include
from rest_framework.routers import DefaultRouter
from .views import (
    BrandViewSet,
    BrandVerificationViewSet,
    CategoryViewSet,
    ProductViewSet,
    ProductMediaViewSet,
)

router = DefaultRouter()
router.register(r'brands', BrandViewSet, basename='brands')
router.register(r'brand-verifications', BrandVerificationViewSet, basename='brand-verifications')
router.register(r'categories', CategoryViewSet, basename='categories')
router.register(r'items', ProductViewSet, basename='items')
router.register(r'media', ProductMediaViewSet, basename='media')

urlpatterns = [
    path('', include(router.urls)),
]
