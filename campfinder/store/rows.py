from __future__ import annotations

from typing import Any

from ..recommendations.models import AmenityGroup, Camp, CampCategory

# Rows without a status are never treated as published.
UNKNOWN_STATUS = "unknown"


def _category(raw: dict[str, Any]) -> CampCategory:
    return CampCategory(id=str(raw["id"]), name=raw.get("name") or "", slug=raw.get("slug") or "")


def _categories(row: dict[str, Any]) -> list[CampCategory]:
    # Nested select shape: [{"camp_categories": {"id", "name", "slug"}}]
    assignments = row.get("camp_category_assignments")
    if assignments:
        return [
            _category(a["camp_categories"])
            for a in assignments
            if a and a.get("camp_categories")
        ]
    flat = row.get("categories")
    if flat:
        return [_category(c) for c in flat if c and c.get("id")]
    # Older rows only carry the single enum column.
    single = row.get("category")
    if single:
        return [CampCategory(id=single, name=single.title(), slug=single)]
    return []


def _amenities(raw: Any) -> list[AmenityGroup]:
    if not isinstance(raw, list):
        return []
    groups: list[AmenityGroup] = []
    for entry in raw:
        if isinstance(entry, dict):
            items = entry.get("items") or []
            groups.append(AmenityGroup(
                category=entry.get("category"),
                items=[str(i) for i in items if i is not None],
            ))
    return groups


def _date_part(value: Any) -> str | None:
    if not value:
        return None
    return str(value)[:10]


def camp_from_row(row: dict[str, Any]) -> Camp:
    """Map a ``camps`` row (optionally with nested relations) onto ``Camp``."""
    organisation = row.get("organisations") or {}
    return Camp(
        id=str(row["id"]),
        name=row.get("name") or "",
        description=row.get("description"),
        age_min=row.get("age_min"),
        age_max=row.get("age_max"),
        price=row.get("price") or 0.0,
        early_bird_price=row.get("early_bird_price"),
        early_bird_deadline=_date_part(row.get("early_bird_deadline")),
        capacity=row.get("capacity"),
        enrolled_count=row.get("enrolled_count"),
        start_date=_date_part(row.get("start_date")),
        end_date=_date_part(row.get("end_date")),
        featured=bool(row.get("featured")),
        categories=_categories(row),
        amenities=_amenities(row.get("amenities")),
        location=row.get("location"),
        status=row.get("status") or UNKNOWN_STATUS,
        created_at=row.get("created_at"),
        organisation_name=organisation.get("name"),
    )
