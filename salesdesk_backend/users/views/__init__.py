from .auth import LoginView, LogoutView, RegisterView
from .me import MeView
from .users import UserAdminViewSet

__all__ = [
    "RegisterView",
    "LoginView",
    "LogoutView",
    "MeView",
    "UserAdminViewSet",
]
