from __future__ import annotations

from sqlalchemy import func, select

from ctxops.derived import PURCHASE_INCOMPLETE
from ctxops.models import InventoryTransfer, Machinery, Purchase, Sale
from ctxops.services.gateway import PersistenceGateway
from ctxops.services.ledger import InventoryLedger

PREVIEW_LIMIT = 5


def _count(session, stmt) -> int:
    return int(session.execute(stmt).scalar() or 0)


def dashboard_stats(gateway: PersistenceGateway, ledger: InventoryLedger) -> dict[str, object]:
    session = gateway.session

    total_machinery = _count(session, select(func.count(Machinery.id)))
    pending_purchases = _count(
        session,
        select(func.count(Purchase.id)).where(
            Purchase.purchase_status == PURCHASE_INCOMPLETE
        ),
    )
    pending_deliveries = _count(
        session,
        select(func.count(Sale.id)).where(
            Sale.delivery_required.is_(True),
            Sale.delivery_status == "pending",
        ),
    )
    low_stock = ledger.list_low_stock()

    recent_transfers = session.execute(
        select(InventoryTransfer)
        .order_by(InventoryTransfer.transfer_date.desc(), InventoryTransfer.id.desc())
        .limit(PREVIEW_LIMIT)
    ).scalars()

    return {
        "totalMachinery": total_machinery,
        "pendingPurchases": pending_purchases,
        "lowStockItems": len(low_stock),
        "lowStockPreview": [item.to_dict() for item in low_stock[:PREVIEW_LIMIT]],
        "pendingDeliveries": pending_deliveries,
        "recentTransfers": [transfer.to_dict() for transfer in recent_transfers],
    }
