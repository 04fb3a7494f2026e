"""Application context for dependency injection."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .config import BaseConfig
from .controller import Notifier, TransactionListController
from .domain.store import TransactionStore
from .infra.auth_client import AuthClient
from .infra.database import bootstrap_database
from .infra.http import ApiClient
from .infra.http_store import RestTransactionStore
from .infra.local_store import SQLModelTransactionStore, ensure_default_categories
from .session import AuthSession


@dataclass
class AppContext:
    """Configuration, session and store for one application run."""

    config: BaseConfig
    session: AuthSession
    store: TransactionStore
    auth: Optional[AuthClient] = None

    @property
    def requires_login(self) -> bool:
        return self.auth is not None

    def create_controller(self, notifier: Optional[Notifier] = None) -> TransactionListController:
        """Start a new list view session with default filters."""

        return TransactionListController(self.store, notifier=notifier)


def create_app_context(config: Optional[BaseConfig] = None) -> AppContext:
    """Create and initialize the application context."""

    if config is None:
        config = BaseConfig()

    if config.STORE_BACKEND == "local":
        _, session_factory = bootstrap_database(config)
        store = SQLModelTransactionStore(session_factory)
        ensure_default_categories(store)
        return AppContext(config=config, session=AuthSession(), store=store)

    session = AuthSession.load(config.token_path)
    api = ApiClient(config.API_BASE_URL, session, timeout=config.REQUEST_TIMEOUT)
    return AppContext(
        config=config,
        session=session,
        store=RestTransactionStore(api),
        auth=AuthClient(api),
    )
