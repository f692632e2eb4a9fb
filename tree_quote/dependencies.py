"""
Dependency wiring and logging bootstrap.

A presentation shell calls create_quote_service() once at startup and
passes its own confirmation dialog.
"""
import logging
from pathlib import Path
from typing import Callable, Optional, Union

from tree_quote.config import settings
from tree_quote.infrastructure.key_value_store import JsonFileKeyValueStore, KeyValueStore
from tree_quote.infrastructure.quote_store import QuoteStore
from tree_quote.services.application.quote_service import (
    CallbackConfirmer,
    Confirmer,
    QuoteService,
)

logger = logging.getLogger(__name__)


def configure_logging(level: Optional[str] = None) -> None:
    """
    Configure root logging.

    Args:
        level: Level name; defaults to settings.log_level
    """
    level_name = (level or settings.log_level).upper()
    logging.basicConfig(
        level=getattr(logging, level_name, logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )


def get_key_value_store(path: Optional[Union[str, Path]] = None) -> KeyValueStore:
    """
    Dependency factory for the durable key-value store.

    Args:
        path: JSON file location (defaults to settings.store_path)

    Returns:
        JsonFileKeyValueStore instance
    """
    return JsonFileKeyValueStore(path or settings.store_path)


def get_quote_store(kv_store: Optional[KeyValueStore] = None) -> QuoteStore:
    """
    Dependency factory for QuoteStore.

    Args:
        kv_store: Backing slots (defaults to the JSON file store)

    Returns:
        QuoteStore instance
    """
    return QuoteStore(kv_store if kv_store is not None else get_key_value_store())


def create_quote_service(
    confirm: Union[Confirmer, Callable[[str], bool]],
    kv_store: Optional[KeyValueStore] = None,
) -> QuoteService:
    """
    Build a ready-to-use QuoteService.

    Args:
        confirm: Confirmer, or a callable taking the prompt and returning
            True to proceed
        kv_store: Backing slots (defaults to the JSON file store)

    Returns:
        QuoteService instance
    """
    confirmer = confirm if hasattr(confirm, "confirm") else CallbackConfirmer(confirm)
    store = get_quote_store(kv_store)

    configure_logging()
    logger.info(f"Starting {settings.app_name} v{settings.app_version}")
    logger.info(f"Log level: {settings.log_level}")

    return QuoteService(store=store, confirmer=confirmer)
