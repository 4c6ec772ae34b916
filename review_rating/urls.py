from django.urls import path, include
from rest_framework.routers import SimpleRouter
from .views import ReviewViewSet, CommentViewSet

router = SimpleRouter()
router.register(r'comments', CommentViewSet, basename='comments')
router.register(r'', ReviewViewSet, basename='reviews')

urlpatterns = [
    path('', include(router.urls)),
]
