"""Tests for component id derivation."""

import pytest
from hypothesis import given, strategies as st

from component_library.storage import derive_component_id, slugify


@pytest.mark.unit
@pytest.mark.parametrize(
    "text,expected",
    [
        ("custom-alert", "custom-alert"),
        ("Custom Alert", "custom-alert"),
        ("  My__Widget!! ", "my-widget"),
        ("rx.card.v2", "rx-card-v2"),
        ("日本", ""),
    ],
)
def test_slugify(text, expected):
    """Test slug normalization."""
    assert slugify(text) == expected


@pytest.mark.unit
def test_derive_id_from_type():
    """Test id is the slug when free."""
    assert derive_component_id("custom-alert", set()) == "custom-alert"
    assert derive_component_id("日本", set()) == "component"


@pytest.mark.unit
def test_derive_id_collision_is_deterministic():
    """Test a taken slug gets a stable hash suffix."""
    first = derive_component_id("Custom Alert", {"custom-alert"})
    second = derive_component_id("Custom Alert", {"custom-alert"})

    assert first == second
    assert first.startswith("custom-alert-")
    assert len(first) == len("custom-alert-") + 8


@pytest.mark.unit
def test_derive_id_counter_fallback():
    """Test counter suffix when the hashed id is also taken."""
    hashed = derive_component_id("Custom Alert", {"custom-alert"})

    assert derive_component_id("Custom Alert", {"custom-alert", hashed}) == f"{hashed}-2"
    assert derive_component_id("Custom Alert", {"custom-alert", hashed, f"{hashed}-2"}) == f"{hashed}-3"


@given(st.text(max_size=20), st.sets(st.text(max_size=12), max_size=5))
def test_derive_id_never_collides(component_type, existing):
    """Property test: derived id is never already taken."""
    assert derive_component_id(component_type, existing) not in existing
