from django.urls import path
from rest_framework_simplejwt.views import TokenRefreshView
from .views import SignUpView, SignInView, SignOutView, SessionView

urlpatterns = [
    path('signup/', SignUpView.as_view(), name='sign-up'),
    path('signin/', SignInView.as_view(), name='sign-in'),
    path('signout/', SignOutView.as_view(), name='sign-out'),
    path('refresh/', TokenRefreshView.as_view(), name='token-refresh'),
    path('session/', SessionView.as_view(), name='session'),
]
