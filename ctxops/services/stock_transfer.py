from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime

from sqlalchemy import select

from ctxops.errors import InventoryLineError, LineWarehouseError, ValidationError
from ctxops.models import InventoryItem, InventoryTransfer, TransferItem
from ctxops.services.gateway import PersistenceGateway
from ctxops.services.ledger import InventoryLedger

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TransferLineRequest:
    inventory_id: int
    quantity: float


@dataclass(frozen=True)
class TransferHeader:
    from_warehouse_id: int
    to_warehouse_id: int
    transfer_date: datetime
    reference: str | None = None
    notes: str | None = None


@dataclass
class TransferResult:
    transfer: InventoryTransfer
    lines: list[TransferItem]
    skipped_lines: list[int] = field(default_factory=list)

    def to_dict(self) -> dict[str, object]:
        payload = self.transfer.to_dict()
        payload["items"] = [line.to_dict() for line in self.lines]
        if self.skipped_lines:
            payload["skippedLines"] = list(self.skipped_lines)
        return payload


def destination_product_id(source_product_id: str, to_warehouse_id: int) -> str:
    return f"{source_product_id}-{to_warehouse_id}"


class TransferEngine:
    """Move inventory lines from one warehouse to another in one transaction."""

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

    def list_transfers(self) -> list[InventoryTransfer]:
        return self.gateway.transfers.list(order_by=InventoryTransfer.transfer_date.desc())

    def transfer_lines(self, transfer_id: int) -> list[TransferItem]:
        transfer = self.gateway.transfers.require(transfer_id)
        return list(transfer.items)

    def execute(
        self,
        header: TransferHeader,
        lines: list[TransferLineRequest],
    ) -> TransferResult:
        if header.from_warehouse_id == header.to_warehouse_id:
            raise ValidationError("Transfer warehouses must be different.")
        if not lines:
            raise ValidationError("items: Select at least one line to transfer.")

        with self.gateway.atomic():
            self.gateway.warehouses.require(header.from_warehouse_id)
            self.gateway.warehouses.require(header.to_warehouse_id)
            self._lock_touched_rows(header, lines)

            transfer = self.gateway.transfers.create(
                from_warehouse_id=header.from_warehouse_id,
                to_warehouse_id=header.to_warehouse_id,
                transfer_date=header.transfer_date,
                reference=header.reference,
                notes=header.notes,
            )

            persisted: list[TransferItem] = []
            skipped: list[int] = []
            for index, line in enumerate(lines):
                moved = self._move_line(transfer, index, line)
                if not moved:
                    skipped.append(index)
                persisted.append(
                    self.gateway.transfer_items.create(
                        transfer_id=transfer.id,
                        inventory_id=line.inventory_id,
                        quantity=line.quantity,
                    )
                )

        logger.info(
            "Transfer %s from warehouse %s to %s: %s lines, %s skipped",
            transfer.id,
            header.from_warehouse_id,
            header.to_warehouse_id,
            len(persisted),
            len(skipped),
        )
        return TransferResult(transfer=transfer, lines=persisted, skipped_lines=skipped)

    def _lock_touched_rows(
        self,
        header: TransferHeader,
        lines: list[TransferLineRequest],
    ) -> None:
        source_ids = {line.inventory_id for line in lines}
        names = select(InventoryItem.item_name).where(
            InventoryItem.id.in_(source_ids),
            InventoryItem.warehouse_id == header.from_warehouse_id,
        )
        destination_ids = self.gateway.session.execute(
            select(InventoryItem.id).where(
                InventoryItem.item_name.in_(names),
                InventoryItem.warehouse_id == header.to_warehouse_id,
            )
        ).scalars()
        self.ledger.lock_items(source_ids | set(destination_ids))

    def _move_line(
        self,
        transfer: InventoryTransfer,
        index: int,
        line: TransferLineRequest,
    ) -> bool:
        source = self.gateway.inventory.get(line.inventory_id, lock=True)
        if source is None:
            if self.strict:
                raise InventoryLineError(index, line.inventory_id)
            logger.warning(
                "Transfer %s line %s: inventory item %s not found, skipping",
                transfer.id,
                index,
                line.inventory_id,
            )
            return False

        if source.warehouse_id != transfer.from_warehouse_id:
            if self.strict:
                raise LineWarehouseError(
                    index, source.id, source.warehouse_id, transfer.from_warehouse_id
                )
            logger.warning(
                "Transfer %s line %s: inventory item %s is in warehouse %s, not %s, skipping",
                transfer.id,
                index,
                source.id,
                source.warehouse_id,
                transfer.from_warehouse_id,
            )
            return False

        self.ledger.adjust_quantity(source.id, -line.quantity)

        destination = self.ledger.find_by_name(
            source.item_name, transfer.to_warehouse_id, lock=True
        )
        if destination is not None:
            self.ledger.adjust_quantity(destination.id, line.quantity)
        else:
            self._create_destination(source, transfer.to_warehouse_id, line.quantity)
        return True

    def _create_destination(
        self,
        source: InventoryItem,
        to_warehouse_id: int,
        quantity: float,
    ) -> InventoryItem:
        created = self.gateway.inventory.create(
            product_id=destination_product_id(source.product_id, to_warehouse_id),
            category=source.category,
            item_name=source.item_name,
            description=source.description,
            quantity=quantity,
            unit=source.unit,
            unit_price=source.unit_price,
            min_stock=source.min_stock,
            max_stock=source.max_stock,
            warehouse_id=to_warehouse_id,
        )
        logger.info(
            "Created inventory %s (%s) in warehouse %s with quantity %s",
            created.id,
            created.product_id,
            to_warehouse_id,
            quantity,
        )
        return created
