"""
Auth URLs - /api/auth/
"""
from django.urls import path
from rest_framework_simplejwt.views import TokenRefreshView

from .views import (
    GoogleCallbackView,
    GoogleLoginView,
    LoginView,
    LogoutView,
    ProfileView,
    SignupView,
)

urlpatterns = [
    path('signup/', SignupView.as_view(), name='auth-signup'),
    path('login/', LoginView.as_view(), name='auth-login'),
    path('logout/', LogoutView.as_view(), name='auth-logout'),
    path('token/refresh/', TokenRefreshView.as_view(), name='token_refresh'),
    path('profile/', ProfileView.as_view(), name='auth-profile'),
    path('google/', GoogleLoginView.as_view(), name='auth-google'),
    path('google/callback/', GoogleCallbackView.as_view(), name='auth-google-callback'),
]
