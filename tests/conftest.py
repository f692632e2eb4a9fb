"""
Shared pytest fixtures for all tests.

This module provides common fixtures including:
- Sample tree measurements
- Sample pricing configurations
- In-memory key-value store and quote store
- Mock confirmation prompt
"""
import pytest
from datetime import datetime, timezone
from unittest.mock import MagicMock

from tree_quote.domain.models import TreeItem, PricingConfig
from tree_quote.infrastructure.key_value_store import InMemoryKeyValueStore
from tree_quote.infrastructure.quote_store import QuoteStore
from tree_quote.services.application.quote_service import Confirmer, QuoteService


# ============================================================
# Sample Data Fixtures
# ============================================================

@pytest.fixture
def sample_trees() -> list[TreeItem]:
    """Two trees: 10ft x 6ft and 5ft x 8ft."""
    return [
        TreeItem(circumference=10, height=6, notes="oak by the fence"),
        TreeItem(circumference=5, height=8),
    ]


@pytest.fixture
def default_config() -> PricingConfig:
    """Configuration a fresh store loads."""
    return PricingConfig()


@pytest.fixture
def full_config() -> PricingConfig:
    """Configuration with starting fee, discount and tax all switched on."""
    return PricingConfig(
        starting_fee=20,
        price_per_cubic_foot=8,
        tax_rate=5,
        show_tax=True,
        default_discount_percent=10,
        show_discount=True,
    )


@pytest.fixture
def fixed_now() -> datetime:
    return datetime(2024, 1, 15, 10, 30, tzinfo=timezone.utc)


# ============================================================
# Store Fixtures
# ============================================================

@pytest.fixture
def kv_store() -> InMemoryKeyValueStore:
    """Empty in-memory key-value store."""
    return InMemoryKeyValueStore()


@pytest.fixture
def quote_store(kv_store, fixed_now) -> QuoteStore:
    """Quote store over the in-memory slots with a fixed clock."""
    return QuoteStore(kv_store, clock=lambda: fixed_now)


# ============================================================
# Service Fixtures
# ============================================================

@pytest.fixture
def mock_confirmer():
    """Confirmation prompt that answers yes."""
    confirmer = MagicMock(spec=Confirmer)
    confirmer.confirm.return_value = True
    return confirmer


@pytest.fixture
def quote_service(quote_store, mock_confirmer) -> QuoteService:
    return QuoteService(store=quote_store, confirmer=mock_confirmer)
