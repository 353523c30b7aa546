"""Auth collaborators: static credentials, admin session and login flow."""

from formdesk.auth.credentials import AdminUser, CredentialDirectory
from formdesk.auth.login import LoginResult, login
from formdesk.auth.session import Session, SessionManager

__all__ = [
    "AdminUser",
    "CredentialDirectory",
    "LoginResult",
    "Session",
    "SessionManager",
    "login",
]
