"""Pytest configuration and shared fixtures."""

import os
import pytest

# Load env vars
from dotenv import load_dotenv
load_dotenv()

from services.discovery.config import DiscoveryConfig


# =============================================================================
# SAFETY CHECK: Paid provider APIs are only hit on request
# =============================================================================

ONLINE_FLAG = "DISCOVERY_ONLINE_TESTS"


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line("markers", "integration: mark test as integration test (hits external services)")
    config.addinivalue_line("markers", "online: mark test as online test (hits external APIs)")


def pytest_collection_modifyitems(config, items):
    """Skip online tests unless explicitly enabled - every call costs credits."""
    if os.getenv(ONLINE_FLAG) == "1":
        return
    skip_online = pytest.mark.skip(reason=f"set {ONLINE_FLAG}=1 to run tests against real APIs")
    for item in items:
        if "online" in item.keywords:
            item.add_marker(skip_online)


# =============================================================================
# Fixtures
# =============================================================================

@pytest.fixture
def fast_config() -> DiscoveryConfig:
    """Default tunables without pauses between searches or batch items."""
    return DiscoveryConfig(search_pause=0, batch_delay=0)
