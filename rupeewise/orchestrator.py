"""
Main Orchestrator for RupeeWise

This module ties together all the components:
1. Record store (in-memory source of truth)
2. Persistence (local JSON files, loaded on boot, saved on change)
3. Activity logging (one structured line per change)
4. Advice (store snapshot → Gemini → Markdown text)

DESIGN DECISION: The orchestrator is the only place that knows about
all of them. The store never imports persistence or logging; they
subscribe to it here.
"""

from typing import Optional

import structlog

from rupeewise.activity import ActivityLogger, configure_logging
from rupeewise.agents import FinancialAdvisorAgent
from rupeewise.aggregation import current_month, month_label
from rupeewise.config import get_settings
from rupeewise.services.persistence import PersistenceAdapter
from rupeewise.services.storage import (
    InMemoryStorage,
    KeyValueStorageInterface,
    LocalFileStorage,
    StorageError,
)
from rupeewise.store import RecordStore


logger = structlog.get_logger(__name__)


class AdviceFlow:
    """
    Orchestrates a request for financial advice.

    Flow:
    1. Snapshot the store (advice never sees later edits)
    2. Label the period (defaults to the current month)
    3. Ask the advisor, which always answers with some text
    """

    def __init__(self, advisor: Optional[FinancialAdvisorAgent] = None):
        self._advisor = advisor or FinancialAdvisorAgent()

    async def request_advice(
        self,
        store: RecordStore,
        period_label: Optional[str] = None,
    ) -> str:
        snapshot = store.snapshot()
        label = period_label or month_label(current_month())

        logger.info(
            "advice_requested",
            period=label,
            transactions=len(snapshot.transactions),
            debts=len(snapshot.debts),
        )
        return await self._advisor.analyze(
            snapshot.transactions,
            snapshot.debts,
            label,
        )


def _default_storage() -> KeyValueStorageInterface:
    """
    Local file storage in the configured data directory.

    Raises:
        StorageError: If the directory cannot be created
    """
    storage = LocalFileStorage(get_settings().storage.data_dir)
    storage.ensure_directory()
    return storage


def create_app_components(
    use_storage: bool = True,
    storage: Optional[KeyValueStorageInterface] = None,
    advisor: Optional[FinancialAdvisorAgent] = None,
) -> tuple[RecordStore, PersistenceAdapter, AdviceFlow]:
    """
    Factory function to create all application components.

    Args:
        use_storage: Whether to persist to the local data directory.
                    Set to False for testing without files.
        storage: Explicit storage backend (overrides use_storage).
        advisor: Explicit advisor (tests pass one with a stub model).

    Returns:
        (store, persistence, advice_flow)
    """
    settings = get_settings()
    configure_logging(settings.app.log_level)

    if storage is None:
        if use_storage:
            try:
                storage = _default_storage()
            except StorageError as e:
                # Data directory unusable - continue without persistence
                logger.warning(
                    "storage_unavailable",
                    error=str(e),
                    fallback="memory",
                )
                storage = InMemoryStorage()
        else:
            storage = InMemoryStorage()

    store = RecordStore()

    persistence = PersistenceAdapter(storage, key_prefix=settings.storage.key_prefix)
    persistence.load(store)

    # Subscribe after loading so the boot load is not written straight back
    persistence.attach(store)
    ActivityLogger().attach(store)

    advice_flow = AdviceFlow(advisor)

    logger.info(
        "app_components_created",
        storage=type(storage).__name__,
        transactions=len(store.transactions),
        debts=len(store.debts),
        budgets=len(store.budgets),
    )
    return store, persistence, advice_flow
