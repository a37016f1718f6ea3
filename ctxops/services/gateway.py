"""Generic create/read/update/delete access per entity table.

The gateway owns no business rules. Services receive one per request, bound
to the request's SQLAlchemy session, and group multi-step changes inside
:meth:`PersistenceGateway.atomic`.
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Any, Generic, Iterator, Mapping, TypeVar

from sqlalchemy import select
from sqlalchemy.orm import Session

from ctxops import models
from ctxops.errors import NotFoundError

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT")


class Repository(Generic[ModelT]):
    def __init__(self, session: Session, model: type[ModelT], label: str):
        self.session = session
        self.model = model
        self.label = label

    def get(self, record_id: int, *, lock: bool = False) -> ModelT | None:
        if lock:
            stmt = (
                select(self.model)
                .where(self.model.id == record_id)
                .with_for_update()
                .execution_options(populate_existing=True)
            )
            return self.session.execute(stmt).scalar_one_or_none()
        return self.session.get(self.model, record_id)

    def require(self, record_id: int, *, lock: bool = False) -> ModelT:
        record = self.get(record_id, lock=lock)
        if record is None:
            raise NotFoundError(self.label, record_id)
        return record

    def list(self, *criteria, order_by=None) -> list[ModelT]:
        stmt = select(self.model)
        if criteria:
            stmt = stmt.where(*criteria)
        stmt = stmt.order_by(order_by if order_by is not None else self.model.id)
        return list(self.session.execute(stmt).scalars())

    def first(self, *criteria, lock: bool = False) -> ModelT | None:
        stmt = select(self.model).where(*criteria).order_by(self.model.id).limit(1)
        if lock:
            stmt = stmt.with_for_update().execution_options(populate_existing=True)
        return self.session.execute(stmt).scalar_one_or_none()

    def create(self, **values: Any) -> ModelT:
        record = self.model(**values)
        self.session.add(record)
        self.session.flush()
        return record

    def update(self, record_id: int, changes: Mapping[str, Any]) -> ModelT:
        record = self.require(record_id)
        for attr, value in changes.items():
            setattr(record, attr, value)
        self.session.flush()
        return record

    def delete(self, record_id: int) -> bool:
        record = self.get(record_id)
        if record is None:
            return False
        self.session.delete(record)
        self.session.flush()
        return True


class PersistenceGateway:
    TABLES = {
        "users": (models.User, "User"),
        "machinery": (models.Machinery, "Machinery"),
        "machinery_services": (models.MachineryService, "Machinery service"),
        "purchases": (models.Purchase, "Purchase"),
        "purchase_items": (models.PurchaseItem, "Purchase item"),
        "inventory": (models.InventoryItem, "Inventory item"),
        "warehouses": (models.Warehouse, "Warehouse"),
        "transfers": (models.InventoryTransfer, "Inventory transfer"),
        "transfer_items": (models.TransferItem, "Transfer item"),
        "sales": (models.Sale, "Sale"),
        "sale_items": (models.SaleItem, "Sale item"),
        "documents": (models.Document, "Document"),
        "projects": (models.Project, "Project"),
        "tasks": (models.Task, "Task"),
        "item_usage": (models.ItemUsage, "Item usage"),
        "timesheets": (models.Timesheet, "Timesheet"),
    }

    def __init__(self, session: Session):
        self.session = session
        for name, (model, label) in self.TABLES.items():
            setattr(self, name, Repository(session, model, label))

    @contextmanager
    def atomic(self) -> Iterator[None]:
        """Commit everything done inside the block, or roll all of it back."""

        try:
            yield
            self.session.commit()
        except Exception:
            logger.info("Rolling back transaction after error")
            self.session.rollback()
            raise

    def commit(self) -> None:
        try:
            self.session.commit()
        except Exception:
            self.session.rollback()
            raise
