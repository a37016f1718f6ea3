"""Exception types shared by the services and the JSON API."""

from __future__ import annotations


class CtxOpsError(Exception):
    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def to_dict(self) -> dict[str, object]:
        return {"error": self.message}


class ValidationError(CtxOpsError):
    """Malformed or missing fields in a request body."""

    status_code = 400


class NotFoundError(CtxOpsError):
    """A referenced record does not exist."""

    status_code = 404

    def __init__(self, entity: str, identifier: object, message: str | None = None):
        super().__init__(message or f"{entity} not found")
        self.entity = entity
        self.identifier = identifier


class InventoryLineError(NotFoundError):
    """A transfer, sale or usage line points at a missing inventory item."""

    def __init__(self, line: int, inventory_id: int):
        super().__init__(
            "Inventory item",
            inventory_id,
            f"Line {line}: inventory item {inventory_id} not found",
        )
        self.line = line
        self.inventory_id = inventory_id

    def to_dict(self) -> dict[str, object]:
        payload = super().to_dict()
        payload["line"] = self.line
        payload["inventoryId"] = self.inventory_id
        return payload


class LineWarehouseError(ValidationError):
    """A transfer line points at an item stocked outside the source warehouse."""

    def __init__(self, line: int, inventory_id: int, warehouse_id: int, expected_warehouse_id: int):
        super().__init__(
            f"Line {line}: inventory item {inventory_id} is in warehouse "
            f"{warehouse_id}, not {expected_warehouse_id}"
        )
        self.line = line
        self.inventory_id = inventory_id
        self.warehouse_id = warehouse_id

    def to_dict(self) -> dict[str, object]:
        payload = super().to_dict()
        payload["line"] = self.line
        payload["inventoryId"] = self.inventory_id
        return payload
