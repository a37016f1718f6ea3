"""Service wiring.

The application registers a factory at start-up; each request builds one
:class:`Services` bundle bound to its own SQLAlchemy session.
"""

from __future__ import annotations

from typing import Callable

from flask import Flask, current_app
from sqlalchemy.orm import Session

from ctxops.services.consumption import SaleRecorder, UsageRecorder
from ctxops.services.gateway import PersistenceGateway
from ctxops.services.ledger import InventoryLedger
from ctxops.services.purchasing import PurchaseService
from ctxops.services.stock_transfer import TransferEngine

EXTENSION_KEY = "ctxops.services"


class Services:
    def __init__(self, session: Session, *, strict_references: bool = True):
        self.gateway = PersistenceGateway(session)
        self.ledger = InventoryLedger(self.gateway)
        self.transfers = TransferEngine(
            self.gateway, self.ledger, strict=strict_references
        )
        self.sales = SaleRecorder(self.gateway, self.ledger, strict=strict_references)
        self.usage = UsageRecorder(self.gateway, self.ledger, strict=strict_references)
        self.purchases = PurchaseService(self.gateway)


def init_services(app: Flask, session_getter: Callable[[], Session]) -> None:
    def factory() -> Services:
        return Services(
            session_getter(),
            strict_references=bool(app.config.get("STRICT_INVENTORY_REFERENCES", True)),
        )

    app.extensions[EXTENSION_KEY] = factory


def get_services() -> Services:
    return current_app.extensions[EXTENSION_KEY]()
