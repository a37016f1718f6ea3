"""Sale fulfilment and item usage, both of which consume inventory."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Mapping, Sequence

from ctxops.errors import InventoryLineError, ValidationError
from ctxops.models import ItemUsage, Sale, SaleItem
from ctxops.services.gateway import PersistenceGateway
from ctxops.services.ledger import InventoryLedger

logger = logging.getLogger(__name__)


@dataclass
class SaleResult:
    sale: Sale
    lines: list[SaleItem]
    skipped_lines: list[int] = field(default_factory=list)

    def to_dict(self) -> dict[str, object]:
        payload = self.sale.to_dict()
        payload["items"] = [line.to_dict() for line in self.lines]
        if self.skipped_lines:
            payload["skippedLines"] = list(self.skipped_lines)
        return payload


@dataclass
class UsageResult:
    usage: ItemUsage
    skipped: bool = False

    def to_dict(self) -> dict[str, object]:
        payload = self.usage.to_dict()
        if self.skipped:
            payload["skippedLines"] = [0]
        return payload


class _ConsumptionRecorder:
    def __init__(
        self,
        gateway: PersistenceGateway,
        ledger: InventoryLedger,
        *,
        strict: bool = True,
    ):
        self.gateway = gateway
        self.ledger = ledger
        self.strict = strict

    def _consume(self, index: int, inventory_id: int, quantity: float, context: str) -> bool:
        if self.gateway.inventory.get(inventory_id, lock=True) is None:
            if self.strict:
                raise InventoryLineError(index, inventory_id)
            logger.warning(
                "%s line %s: inventory item %s not found, skipping deduction",
                context,
                index,
                inventory_id,
            )
            return False
        self.ledger.adjust_quantity(inventory_id, -quantity)
        return True


class SaleRecorder(_ConsumptionRecorder):
    def list_sales(self) -> list[Sale]:
        return self.gateway.sales.list(order_by=Sale.sale_date.desc())

    def get_sale(self, sale_id: int) -> Sale:
        return self.gateway.sales.require(sale_id)

    def sale_lines(self, sale_id: int) -> list[SaleItem]:
        return list(self.get_sale(sale_id).items)

    def record(
        self,
        header: Mapping[str, Any],
        lines: Sequence[Mapping[str, Any]],
    ) -> SaleResult:
        if not lines:
            raise ValidationError("items: A sale needs at least one line.")

        with self.gateway.atomic():
            if header.get("warehouse_id") is not None:
                self.gateway.warehouses.require(header["warehouse_id"])
            self.ledger.lock_items(line["inventory_id"] for line in lines)
            sale = self.gateway.sales.create(**header)

            persisted: list[SaleItem] = []
            skipped: list[int] = []
            for index, line in enumerate(lines):
                persisted.append(self.gateway.sale_items.create(sale_id=sale.id, **line))
                if not self._consume(
                    index, line["inventory_id"], line["quantity"], f"Sale {sale.invoice_no}"
                ):
                    skipped.append(index)

        logger.info("Recorded sale %s with %s lines", sale.invoice_no, len(persisted))
        return SaleResult(sale=sale, lines=persisted, skipped_lines=skipped)

    def update_delivery(self, sale_id: int, changes: Mapping[str, Any]) -> Sale:
        """Apply a delivery status and/or date change; nothing else on a sale moves."""

        changes = {
            attr: value
            for attr, value in changes.items()
            if attr in ("delivery_status", "delivery_date")
        }
        if not changes:
            raise ValidationError("deliveryStatus or deliveryDate is required.")
        status = changes.get("delivery_status", Sale.DELIVERY_STATUSES[0])
        if status not in Sale.DELIVERY_STATUSES:
            allowed = ", ".join(Sale.DELIVERY_STATUSES)
            raise ValidationError(f"deliveryStatus: Expected one of {allowed}.")

        with self.gateway.atomic():
            sale = self.gateway.sales.update(sale_id, changes)

        logger.info("Sale %s delivery now %s", sale.invoice_no, sale.delivery_status)
        return sale


class UsageRecorder(_ConsumptionRecorder):
    def list_usage(self, inventory_id: int | None = None) -> list[ItemUsage]:
        if inventory_id is None:
            return self.gateway.item_usage.list(order_by=ItemUsage.usage_date.desc())
        return self.gateway.item_usage.list(
            ItemUsage.inventory_id == inventory_id,
            order_by=ItemUsage.usage_date.desc(),
        )

    def record(self, values: Mapping[str, Any]) -> UsageResult:
        with self.gateway.atomic():
            if values.get("project_id") is not None:
                self.gateway.projects.require(values["project_id"])
            if values.get("task_id") is not None:
                self.gateway.tasks.require(values["task_id"])
            usage = self.gateway.item_usage.create(**values)
            consumed = self._consume(
                0, usage.inventory_id, usage.quantity, f"Usage {usage.id}"
            )

        logger.info(
            "Recorded usage %s of inventory %s (quantity %s)",
            usage.id,
            usage.inventory_id,
            usage.quantity,
        )
        return UsageResult(usage=usage, skipped=not consumed)
