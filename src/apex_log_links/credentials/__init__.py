"""Session credential lookup."""

from apex_log_links.credentials.resolver import CredentialResolver, CredentialSource
from apex_log_links.credentials.sources import (
    CookieJarCredentialSource,
    StaticCredentialSource,
    load_cookie_file,
)

__all__ = [
    "CookieJarCredentialSource",
    "CredentialResolver",
    "CredentialSource",
    "StaticCredentialSource",
    "load_cookie_file",
]
