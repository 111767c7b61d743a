"""Component Document Models.

Typed shape of an uploaded component definition. Keys the library does not
interpret (``integration``, ``interactions``, ``ui.styles`` ...) are kept as
extra fields so a stored document serializes back exactly as uploaded.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, model_validator

DEFAULT_CATEGORY = "custom"


class _Document(BaseModel):
    """Base for document sections: camelCase on the wire, unknown keys kept."""

    model_config = ConfigDict(extra="allow")


class ComponentMetadata(_Document):
    """Identity of a component; `type` is the uniqueness key."""

    type: str = Field(..., min_length=1)
    name: str = Field(..., min_length=1)
    category: str = Field(default=DEFAULT_CATEGORY)
    description: str | None = None

    @model_validator(mode="before")
    @classmethod
    def default_category(cls, data: Any) -> Any:
        # Filling the key here marks it as set, so it survives exclude_unset dumps.
        if isinstance(data, dict):
            category = data.get("category")
            if category is None or (isinstance(category, str) and not category.strip()):
                data = {**data, "category": DEFAULT_CATEGORY}
        return data


class ComponentTemplate(_Document):
    """Markup template. Values are opaque data and are never evaluated."""

    tag: str = Field(..., min_length=1)
    classes: list[str] | None = None
    attributes: dict[str, str] | None = None
    text: str | None = None
    css_variables: dict[str, str] | None = Field(default=None, alias="cssVariables")
    css: str | None = None
    css_variables_library: dict[str, str] | None = Field(default=None, alias="cssVariablesLibrary")
    css_library: str | None = Field(default=None, alias="cssLibrary")


class ComponentUI(_Document):
    """UI section of a component."""

    template: ComponentTemplate


class ComponentDocument(_Document):
    """Normalized, validated component definition."""

    metadata: ComponentMetadata
    ui: ComponentUI

    @property
    def component_type(self) -> str:
        return self.metadata.type

    def to_json_dict(self) -> dict[str, Any]:
        """Wire representation: aliases, only keys that were provided (plus category)."""
        return self.model_dump(mode="json", by_alias=True, exclude_unset=True)


__all__ = [
    "DEFAULT_CATEGORY",
    "ComponentMetadata",
    "ComponentTemplate",
    "ComponentUI",
    "ComponentDocument",
]
