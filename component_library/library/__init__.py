"""Listing helpers for stored components."""

from .catalog import (
    category_display_name,
    group_by_category,
    list_categories,
    base_css_class,
    collect_component_css,
    format_size_kb,
)

__all__ = [
    "category_display_name",
    "group_by_category",
    "list_categories",
    "base_css_class",
    "collect_component_css",
    "format_size_kb",
]
