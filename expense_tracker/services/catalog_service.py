# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

"""Categories and funding sources share one shape and one set of operations."""

from __future__ import annotations

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from expense_tracker.infrastructure.db.models import Category, Expense, Source
from expense_tracker.shared.errors import DuplicateNameError, EntityInUseError, NotFoundError
from expense_tracker.shared.logging import logger

CatalogModel = type[Category] | type[Source]

_ENTITY_NAMES: dict[type, str] = {Category: "category", Source: "source"}
_EXPENSE_FK = {Category: Expense.category_id, Source: Expense.source_id}

DEFAULT_CATEGORIES = (
    ("Makanan", "#EF4444", "🍔"),
    ("Transportasi", "#F59E0B", "🚗"),
    ("Belanja", "#8B5CF6", "🛒"),
    ("Hiburan", "#06B6D4", "🎬"),
    ("Kesehatan", "#10B981", "🏥"),
    ("Lainnya", "#6B7280", "📦"),
)

DEFAULT_SOURCES = (
    ("Dompet", "#84CC16", "👛"),
    ("Bank", "#3B82F6", "🏦"),
    ("E-Wallet", "#F59E0B", "📱"),
    ("Kartu Kredit", "#EF4444", "💳"),
)


def entity_name(model: CatalogModel) -> str:
    return _ENTITY_NAMES[model]


def serialize_item(row: Category | Source) -> dict:
    return {
        "id": row.id,
        "name": row.name,
        "color": row.color,
        "icon": row.icon,
        "created_at": row.created_at.isoformat() if row.created_at else None,
    }


def _get_or_404(db: Session, model: CatalogModel, item_id: int) -> Category | Source:
    row = db.get(model, item_id)
    if row is None:
        raise NotFoundError(entity_name(model), item_id)
    return row


def _ensure_unique_name(
    db: Session, model: CatalogModel, name: str, exclude_id: int | None = None
) -> None:
    stmt = select(model.id).where(func.lower(model.name) == name.lower())
    if exclude_id is not None:
        stmt = stmt.where(model.id != exclude_id)
    if db.scalar(stmt) is not None:
        raise DuplicateNameError(entity_name(model), name)


def list_items(db: Session, model: CatalogModel) -> list[dict]:
    rows = db.scalars(select(model).order_by(model.name.asc())).all()
    return [serialize_item(r) for r in rows]


def create_item(
    db: Session, model: CatalogModel, *, name: str, color: str | None, icon: str | None
) -> dict:
    _ensure_unique_name(db, model, name)
    row = model(name=name, color=color, icon=icon)
    db.add(row)
    db.flush()
    logger.info(f"{entity_name(model)}.create: ok (id={row.id}, name={name})")
    return serialize_item(row)


def update_item(
    db: Session,
    model: CatalogModel,
    item_id: int,
    *,
    name: str,
    color: str | None,
    icon: str | None,
) -> dict:
    row = _get_or_404(db, model, item_id)
    _ensure_unique_name(db, model, name, exclude_id=item_id)
    row.name = name
    row.color = color
    row.icon = icon
    db.flush()
    logger.info(f"{entity_name(model)}.update: ok (id={item_id})")
    return serialize_item(row)


def delete_item(db: Session, model: CatalogModel, item_id: int) -> None:
    row = _get_or_404(db, model, item_id)
    in_use = db.scalar(select(func.count(Expense.id)).where(_EXPENSE_FK[model] == item_id))
    if in_use:
        logger.info(f"{entity_name(model)}.delete: in_use (id={item_id}, expenses={in_use})")
        raise EntityInUseError(entity_name(model), item_id)
    db.delete(row)
    db.flush()
    logger.info(f"{entity_name(model)}.delete: ok (id={item_id})")


def seed_defaults(db: Session) -> dict[str, int]:
    """Insert the default categories and sources into tables that are still empty."""

    created: dict[str, int] = {}
    for model, defaults in ((Category, DEFAULT_CATEGORIES), (Source, DEFAULT_SOURCES)):
        if db.scalar(select(func.count(model.id))):
            created[entity_name(model)] = 0
            continue
        db.add_all(model(name=name, color=color, icon=icon) for name, color, icon in defaults)
        created[entity_name(model)] = len(defaults)
    db.flush()
    return created


__all__ = [
    "DEFAULT_CATEGORIES",
    "DEFAULT_SOURCES",
    "create_item",
    "delete_item",
    "entity_name",
    "list_items",
    "seed_defaults",
    "serialize_item",
    "update_item",
]
