"""Wanted-item parsing and title generation.

A listing in exchange mode stores what its owner wants in return under
``category_fields["exchange_wanted"]``::

    {"category_id": "phones", "subcategory_id": "mobile",
     "fields": {"brand": "apple", "storage": "256"}, "title": "آيفون — 256GB"}

Parsing fails soft: anything malformed means "no wanted item".
"""

from __future__ import annotations

import logging
from typing import Any, Mapping

from src.common.models import WANTED_ITEM_KEY

from .category_config import CategoryField, CategoryRegistry
from .models import WantedItem

logger = logging.getLogger(__name__)

TITLE_SEPARATOR = " — "
MULTI_VALUE_SEPARATOR = "، "


def is_empty_value(value: Any) -> bool:
    """True for values that count as "not filled in"."""
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    if isinstance(value, (list, tuple, set, dict)):
        return len(value) == 0
    return False


def non_empty_fields(fields: Mapping[str, Any] | None) -> dict[str, Any]:
    if not isinstance(fields, Mapping):
        return {}
    return {k: v for k, v in fields.items() if not is_empty_value(v)}


def _format_number(value: Any) -> str:
    try:
        number = float(value)
    except (TypeError, ValueError):
        return str(value)
    if number.is_integer():
        return f"{int(number):,}"
    return f"{number:,}"


def resolve_field_label(field: CategoryField, value: Any) -> str | None:
    """Resolve a field value to its display label.

    Select fields map value → option label; toggles show the field label
    when on; multi-selects join their option labels; numbers with a unit
    get thousands separators (``45,000 كم``).
    """
    if is_empty_value(value):
        return None

    if field.type == "select" and field.options:
        return field.option_label(value) or str(value)

    if field.type == "toggle":
        return field.label if value else None

    if field.type == "multi-select" and isinstance(value, (list, tuple)):
        return MULTI_VALUE_SEPARATOR.join(
            field.option_label(v) or str(v) for v in value
        )

    if field.type == "number" and field.unit:
        return f"{_format_number(value)} {field.unit}"

    return str(value)


def generate_wanted_title(
    category_id: str,
    fields: Mapping[str, Any],
    subcategory_id: str | None = None,
    categories: CategoryRegistry | None = None,
) -> str:
    """Build a human-readable label for a wanted item.

    Joins the display labels of the category's required fields (subcategory
    override applied, hidden fields skipped) with an em-dash. Falls back to
    the category name when nothing resolves, and to "" for an unknown
    category.
    """
    config = categories.get(category_id) if categories else None
    if config is None:
        return ""

    fields = fields or {}
    parts: list[str] = []
    for field_id in config.required_field_ids(subcategory_id):
        field = config.get_field(field_id, subcategory_id)
        if field is None:
            continue
        label = resolve_field_label(field, fields.get(field_id))
        if label:
            parts.append(label)

    if not parts:
        return config.name
    return TITLE_SEPARATOR.join(parts)


def _checked_fields(
    fields: dict[str, Any],
    category_id: str,
    subcategory_id: str | None,
    categories: CategoryRegistry | None,
) -> dict[str, Any]:
    """Log keys outside the category schema. They are kept and still scored."""
    config = categories.get(category_id) if categories else None
    if config is None:
        if categories is not None:
            logger.debug("Wanted item references unknown category %r", category_id)
        return fields
    known = {f.id for f in config.effective_fields(subcategory_id)}
    unknown = sorted(set(fields) - known)
    if unknown:
        logger.debug("Wanted fields outside the %s schema: %s", category_id, unknown)
    return fields


def parse_wanted_item(
    attributes: Mapping[str, Any] | None,
    categories: CategoryRegistry | None = None,
) -> WantedItem | None:
    """Decode the structured wanted item from a listing's attribute bag.

    Args:
        attributes: The listing's ``category_fields`` map.
        categories: When given, used for the generated title. Categories
            and field keys missing from it are logged but kept, so the
            scorer still compares them.

    Returns:
        WantedItem, or None when the bag carries no usable wanted item.
    """
    if not isinstance(attributes, Mapping):
        return None
    raw = attributes.get(WANTED_ITEM_KEY)
    if not isinstance(raw, Mapping):
        return None

    category_id = raw.get("category_id")
    if not isinstance(category_id, str) or not category_id.strip():
        return None
    category_id = category_id.strip()

    subcategory_id = raw.get("subcategory_id")
    if not isinstance(subcategory_id, str) or not subcategory_id.strip():
        subcategory_id = None

    fields = _checked_fields(
        non_empty_fields(raw.get("fields")), category_id, subcategory_id, categories
    )

    title = raw.get("title")
    if not isinstance(title, str) or not title.strip():
        title = generate_wanted_title(category_id, fields, subcategory_id, categories)

    return WantedItem(
        category_id=category_id,
        subcategory_id=subcategory_id,
        fields=fields,
        title=title,
    )


def build_wanted_payload(
    category_id: str,
    fields: Mapping[str, Any],
    subcategory_id: str | None = None,
    categories: CategoryRegistry | None = None,
) -> dict:
    """Build the ``exchange_wanted`` payload a listing form would store.

    Empty values are dropped and the title is always regenerated, so the
    stored label never drifts from the fields.
    """
    cleaned = _checked_fields(
        non_empty_fields(fields), category_id, subcategory_id, categories
    )
    item = WantedItem(
        category_id=category_id,
        subcategory_id=subcategory_id or None,
        fields=cleaned,
        title=generate_wanted_title(category_id, cleaned, subcategory_id, categories),
    )
    return item.to_payload()
