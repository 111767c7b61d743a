"""Library Catalog - grouping and styling data for the library listing."""

from typing import Iterable

from ..models.component import DEFAULT_CATEGORY, ComponentDocument
from ..models.stored import StoredComponent

BASE_CLASS_PREFIX = "rx-"
GENERIC_CLASS = "rx-comp"


def category_display_name(category: str) -> str:
    """
    Human-readable category name.

    Examples:
        >>> category_display_name("form-controls")
        'Form Controls'
    """
    words = category.replace("_", " ").replace("-", " ").split()
    return " ".join(word.capitalize() for word in words) or category


def group_by_category(entries: Iterable[StoredComponent]) -> dict[str, list[StoredComponent]]:
    """
    Group entries by ``metadata.category`` in first-seen order.

    The ``custom`` group always exists so there is somewhere to upload to.
    """
    groups: dict[str, list[StoredComponent]] = {}
    for entry in entries:
        groups.setdefault(entry.component.metadata.category, []).append(entry)
    groups.setdefault(DEFAULT_CATEGORY, [])
    return groups


def list_categories(entries: Iterable[StoredComponent]) -> list[str]:
    return list(group_by_category(entries))


def base_css_class(component: ComponentDocument) -> str:
    """First ``rx-*`` class other than ``rx-comp``, else ``rx-<replaces or type>``."""
    for cls in component.ui.template.classes or []:
        if cls.startswith(BASE_CLASS_PREFIX) and cls != GENERIC_CLASS:
            return cls
    replaces = (component.metadata.model_extra or {}).get("replaces")
    if isinstance(replaces, str) and replaces:
        return f"{BASE_CLASS_PREFIX}{replaces}"
    return f"{BASE_CLASS_PREFIX}{component.metadata.type}"


def collect_component_css(components: Iterable[ComponentDocument | StoredComponent]) -> dict[str, str]:
    """
    Map each component's base class to its CSS, first one winning.

    Components without CSS are skipped.
    """
    registered: dict[str, str] = {}
    for item in components:
        component = item.component if isinstance(item, StoredComponent) else item
        css = component.ui.template.css
        if not css or not css.strip():
            continue
        name = base_css_class(component)
        if name not in registered:
            registered[name] = css
    return registered


def format_size_kb(size_bytes: int) -> str:
    """
    Examples:
        >>> format_size_kb(1536)
        '2KB'
    """
    return f"{max(1, round(size_bytes / 1024))}KB"


__all__ = [
    "category_display_name",
    "group_by_category",
    "list_categories",
    "base_css_class",
    "collect_component_css",
    "format_size_kb",
]
