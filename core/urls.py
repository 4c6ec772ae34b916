from django.contrib import admin
from django.urls import path, include
from django.conf import settings

from drf_spectacular.views import SpectacularAPIView, SpectacularRedocView, SpectacularSwaggerView

from .views import HealthCheckView

urlpatterns = [
    path('admin/', admin.site.urls),

    path('health/', HealthCheckView.as_view(), name='health'),

    # user authentication
    path('users/', include('users.urls')),

    # brands, categories, products and media
    path('products/', include('product_management.urls')),

    # reviews, category ratings and comments
    path('reviews/', include('review_rating.urls')),

    # product and brand dashboards
    path('dashboard/', include('dashboard.urls')),

    path('api/schema/', SpectacularAPIView.as_view(), name='schema'),
    path('api/schema/swagger-ui/', SpectacularSwaggerView.as_view(url_name='schema'), name='swagger-ui'),
    path('api/schema/redoc/', SpectacularRedocView.as_view(url_name='schema'), name='redoc'),
]

if settings.DEBUG and "debug_toolbar" in settings.INSTALLED_APPS:
    import debug_toolbar
    urlpatterns += [path("__debug__/", include(debug_toolbar.urls))]
