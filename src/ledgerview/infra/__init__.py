"""Store backends and HTTP plumbing."""

from .auth_client import AuthClient
from .http import ApiClient
from .http_store import RestTransactionStore
from .local_store import SQLModelTransactionStore, ensure_default_categories

__all__ = [
    "ApiClient",
    "AuthClient",
    "RestTransactionStore",
    "SQLModelTransactionStore",
    "ensure_default_categories",
]
