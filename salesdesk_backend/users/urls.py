# users/urls.py

from django.urls import include, path
from rest_framework.routers import DefaultRouter

from .views import LoginView, LogoutView, MeView, RegisterView, UserAdminViewSet

app_name = "users"

router = DefaultRouter()
router.register(r"users", UserAdminViewSet, basename="users")

urlpatterns = [
    # ---------------- PUBLIC AUTH ----------------
    path("register/", RegisterView.as_view(), name="register"),
    path("login/", LoginView.as_view(), name="login"),
    # ---------------- AUTHENTICATED ----------------
    path("logout/", LogoutView.as_view(), name="logout"),
    path("me/", MeView.as_view(), name="me"),
    # ---------------- ADMIN ----------------
    path("", include(router.urls)),
]
