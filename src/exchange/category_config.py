"""Category configuration for exchange matching.

Loads the marketplace category taxonomy (fields, required fields,
subcategory overrides) from config/categories.yaml. The registry is
passed into engine components rather than looked up globally.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any

import yaml

from src.common.config import PROJECT_ROOT
from src.common.errors import CategoryConfigError

logger = logging.getLogger(__name__)

DEFAULT_CATEGORY_ICON = "📦"

FIELD_TYPES = ("select", "number", "text", "toggle", "multi-select", "year-picker")


@dataclass
class FieldOption:
    """A selectable value of an enum field."""

    value: str
    label: str


@dataclass
class CategoryField:
    """One attribute a listing in a category can carry (brand, storage, ...)."""

    id: str
    label: str
    type: str = "text"
    options: list[FieldOption] = field(default_factory=list)
    unit: str | None = None
    is_required: bool = False
    order: float = 0
    hidden_for_subcategories: list[str] = field(default_factory=list)

    def option_label(self, value: Any) -> str | None:
        for option in self.options:
            if option.value == str(value):
                return option.label
        return None

    def is_hidden_for(self, subcategory_id: str | None) -> bool:
        return bool(subcategory_id) and subcategory_id in self.hidden_for_subcategories

    @classmethod
    def from_dict(cls, data: dict) -> CategoryField:
        if not data.get("id"):
            raise CategoryConfigError(f"Field without id: {data!r}")
        field_type = data.get("type", "text")
        if field_type not in FIELD_TYPES:
            raise CategoryConfigError(
                f"Field {data['id']!r} has unknown type {field_type!r}"
            )
        return cls(
            id=data["id"],
            label=data.get("label", data["id"]),
            type=field_type,
            options=[
                FieldOption(value=str(o["value"]), label=str(o.get("label", o["value"])))
                for o in data.get("options") or []
            ],
            unit=data.get("unit"),
            is_required=bool(data.get("is_required", False)),
            order=data.get("order", 0),
            hidden_for_subcategories=list(data.get("hidden_for_subcategories") or []),
        )


@dataclass
class SubcategoryOverride:
    """Subcategory-specific changes to a category's field set."""

    required_fields: list[str] | None = None
    extra_fields: list[CategoryField] = field(default_factory=list)
    # field id -> partial field attributes (options, label, unit, type)
    field_overrides: dict[str, dict[str, Any]] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: dict) -> SubcategoryOverride:
        required = data.get("required_fields")
        return cls(
            required_fields=list(required) if required is not None else None,
            extra_fields=[CategoryField.from_dict(f) for f in data.get("extra_fields") or []],
            field_overrides=dict(data.get("field_overrides") or {}),
        )


@dataclass
class CategoryConfig:
    """A marketplace category and its attribute schema."""

    id: str
    name: str
    icon: str = DEFAULT_CATEGORY_ICON
    fields: list[CategoryField] = field(default_factory=list)
    required_fields: list[str] = field(default_factory=list)
    subcategories: dict[str, str] = field(default_factory=dict)  # id -> name
    subcategory_overrides: dict[str, SubcategoryOverride] = field(default_factory=dict)

    def override_for(self, subcategory_id: str | None) -> SubcategoryOverride | None:
        if not subcategory_id:
            return None
        return self.subcategory_overrides.get(subcategory_id)

    def required_field_ids(self, subcategory_id: str | None = None) -> list[str]:
        """Required field ids, using the subcategory override when it sets one."""
        override = self.override_for(subcategory_id)
        if override and override.required_fields is not None:
            return list(override.required_fields)
        return list(self.required_fields)

    def effective_fields(self, subcategory_id: str | None = None) -> list[CategoryField]:
        """Resolved fields for a category + subcategory.

        Drops fields hidden for the subcategory, merges field overrides
        (e.g. silver karat options) and appends the subcategory's extra
        fields, sorted by display order.
        """
        fields = [f for f in self.fields if not f.is_hidden_for(subcategory_id)]

        override = self.override_for(subcategory_id)
        if override:
            merged: list[CategoryField] = []
            for f in fields:
                changes = override.field_overrides.get(f.id)
                if changes:
                    changes = dict(changes)
                    if "options" in changes:
                        changes["options"] = [
                            FieldOption(value=str(o["value"]), label=str(o.get("label", o["value"])))
                            for o in changes["options"] or []
                        ]
                    f = replace(f, **changes)
                merged.append(f)
            fields = merged + list(override.extra_fields)

        return sorted(fields, key=lambda f: f.order)

    def get_field(self, field_id: str, subcategory_id: str | None = None) -> CategoryField | None:
        for f in self.effective_fields(subcategory_id):
            if f.id == field_id:
                return f
        return None

    @classmethod
    def from_dict(cls, data: dict) -> CategoryConfig:
        if not data.get("id"):
            raise CategoryConfigError(f"Category without id: {data!r}")
        subcategories = {
            s["id"]: s.get("name", s["id"]) for s in data.get("subcategories") or []
        }
        return cls(
            id=data["id"],
            name=data.get("name", data["id"]),
            icon=data.get("icon", DEFAULT_CATEGORY_ICON),
            fields=[CategoryField.from_dict(f) for f in data.get("fields") or []],
            required_fields=list(data.get("required_fields") or []),
            subcategories=subcategories,
            subcategory_overrides={
                sub_id: SubcategoryOverride.from_dict(o or {})
                for sub_id, o in (data.get("subcategory_overrides") or {}).items()
            },
        )


class CategoryRegistry:
    """Read-only lookup of category configs by id.

    Usage:
        categories = CategoryRegistry.from_yaml("config/categories.yaml")
        categories.icon_for("phones")  # -> "📱"
    """

    def __init__(self, categories: list[CategoryConfig] | None = None) -> None:
        self._categories: dict[str, CategoryConfig] = {}
        for config in categories or []:
            if config.id in self._categories:
                raise CategoryConfigError(f"Duplicate category id: {config.id!r}")
            self._categories[config.id] = config

    def __contains__(self, category_id: object) -> bool:
        return category_id in self._categories

    def __len__(self) -> int:
        return len(self._categories)

    def __iter__(self):
        return iter(self._categories.values())

    def get(self, category_id: str | None) -> CategoryConfig | None:
        if not category_id:
            return None
        return self._categories.get(category_id)

    def icon_for(self, category_id: str | None) -> str:
        config = self.get(category_id)
        return config.icon if config else DEFAULT_CATEGORY_ICON

    def name_for(self, category_id: str | None) -> str:
        config = self.get(category_id)
        return config.name if config else ""

    @classmethod
    def from_yaml(cls, path: str | Path) -> CategoryRegistry:
        """Load the category taxonomy from a YAML file.

        Args:
            path: Path to YAML file (absolute or relative to project root).

        Returns:
            CategoryRegistry instance.

        Raises:
            CategoryConfigError: if the file is missing or malformed.
        """
        p = Path(path)
        if not p.is_absolute():
            p = PROJECT_ROOT / p
        if not p.exists():
            raise CategoryConfigError(f"Category config not found: {p}")

        with open(p, encoding="utf-8") as f:
            try:
                data = yaml.safe_load(f) or {}
            except yaml.YAMLError as e:
                raise CategoryConfigError(f"Invalid YAML in {p}: {e}") from e

        entries = data.get("categories") if isinstance(data, dict) else None
        if not isinstance(entries, list):
            raise CategoryConfigError(f"{p}: expected a top-level 'categories' list")

        registry = cls([CategoryConfig.from_dict(entry) for entry in entries])
        logger.info("Loaded %d categories from %s", len(registry), p)
        return registry


def category_icon(categories: CategoryRegistry | None, category_id: str | None) -> str:
    """Display icon for a category, tolerating a missing registry."""
    if categories is None:
        return DEFAULT_CATEGORY_ICON
    return categories.icon_for(category_id)
