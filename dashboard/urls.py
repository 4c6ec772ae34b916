from django.urls import path
from .views import ProductDashboardView, BrandDashboardView, BrandProductListView

urlpatterns = [
    path('products/<int:product_id>/', ProductDashboardView.as_view(), name='product-dashboard'),
    path('brand/', BrandDashboardView.as_view(), name='brand-dashboard'),
    path('brand/products/', BrandProductListView.as_view(), name='brand-products'),
]
