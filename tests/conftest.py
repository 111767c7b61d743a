"""Pytest configuration and fixtures."""

import os
from datetime import datetime, timezone

import pytest

from component_library.core import MEGABYTE, get_settings
from component_library.storage import ComponentStore, MemoryBackend, StoreLimits
from component_library.upload import ComponentUploader
from component_library.validation import validate_document


# ============================================================================
# Pytest Hooks
# ============================================================================

def pytest_configure(config):
    """Configure pytest with environment variables."""
    os.environ['CL_LOG_LEVEL'] = 'DEBUG'
    os.environ['CL_STORAGE_KEY'] = 'component-library.test'
    get_settings.cache_clear()


# ============================================================================
# Core Fixtures
# ============================================================================

FIXED_TIME = datetime(2023, 10, 1, 10, 0, 0, tzinfo=timezone.utc)


@pytest.fixture
def settings():
    """Test settings."""
    return get_settings()


@pytest.fixture
def clock():
    """Deterministic clock for uploadedAt stamps."""
    return lambda: FIXED_TIME


@pytest.fixture
def backend():
    """Empty in-memory persistence slot."""
    return MemoryBackend()


@pytest.fixture
def limits():
    """Default quotas: 1MB per item, 10MB total."""
    return StoreLimits(max_item_bytes=1 * MEGABYTE, max_total_bytes=10 * MEGABYTE)


@pytest.fixture
def store(backend, limits, clock):
    """Store over the in-memory backend."""
    return ComponentStore(backend, limits, clock=clock)


@pytest.fixture
def uploader(store):
    """Uploader bound to the test store."""
    return ComponentUploader(store)


# ============================================================================
# Data Fixtures
# ============================================================================

@pytest.fixture
def custom_alert_json():
    """Minimal valid component JSON."""
    return '{"metadata":{"type":"custom-alert","name":"Custom Alert"},"ui":{"template":{"tag":"div"}}}'


@pytest.fixture
def button_dict():
    """Fully populated component document."""
    return {
        "metadata": {
            "type": "custom-button",
            "name": "Custom Button",
            "category": "custom",
            "description": "A custom button component",
        },
        "ui": {
            "template": {
                "tag": "button",
                "classes": ["rx-comp", "rx-custom-button"],
                "attributes": {"type": "button"},
                "text": "Click me",
                "cssVariables": {"bg-color": "#007bff", "text-color": "#ffffff"},
                "css": ".rx-custom-button { background: var(--bg-color); }",
                "cssVariablesLibrary": {"bg-color": "#0056b3"},
                "cssLibrary": ".rx-lib .rx-custom-button { padding: 4px; }",
            },
            "icon": {"mode": "emoji", "value": "🔘", "position": "start"},
        },
        "integration": {
            "canvasIntegration": {"resizable": True, "defaultWidth": 120, "defaultHeight": 40}
        },
    }


@pytest.fixture
def make_component():
    """Factory for normalized components with a given type."""

    def _make(component_type: str, name: str | None = None, **template):
        data = {
            "metadata": {"type": component_type, "name": name or component_type.title()},
            "ui": {"template": {"tag": "div", **template}},
        }
        result = validate_document(data)
        assert result.is_valid, result.error_messages
        return result.normalized_component

    return _make
