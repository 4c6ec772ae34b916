from django.urls import path
from .views import (
    RegisterView,
    LoginUser,
    LogoutUser,
    RefreshAccessTokenView,
    ProfileView,
)

urlpatterns = [
    path('auth/register/', RegisterView.as_view(), name='register'),
    path('auth/login/', LoginUser.as_view(), name='login'),
    path('auth/logout/', LogoutUser.as_view(), name='logout'),

    path('token/refresh/', RefreshAccessTokenView.as_view(), name='token_refresh'),

    path('profile/', ProfileView.as_view(), name='profile'),
]
