from __future__ import annotations

from ctxops.models import Document, Purchase, Sale, Task
from ctxops.validation import (
    Field,
    parse_bool,
    parse_datetime,
    parse_int,
    parse_number,
    parse_positive_number,
    parse_required_text,
    parse_text,
)

MACHINERY_FIELDS = (
    Field("name", "name", parse_required_text, required=True),
    Field("category", "category", parse_required_text, required=True),
    Field("model", "model", parse_text),
    Field("brand", "brand", parse_text),
    Field("serialNo", "serial_no", parse_text),
    Field("purchaseDate", "purchase_date", parse_datetime),
    Field("notes", "notes", parse_text),
)

MACHINERY_SERVICE_FIELDS = (
    Field("serviceDate", "service_date", parse_datetime, required=True),
    Field("serviceType", "service_type", parse_required_text, required=True),
    Field("cost", "cost", parse_number),
    Field("vendor", "vendor", parse_text),
    Field("notes", "notes", parse_text),
)

# purchaseStatus is derived and deliberately absent.
PURCHASE_FIELDS = (
    Field("invoiceNo", "invoice_no", parse_required_text, required=True),
    Field("purchaseType", "purchase_type", parse_text, required=True, choices=Purchase.TYPES),
    Field("purchaseDate", "purchase_date", parse_datetime, required=True),
    Field("sellerName", "seller_name", parse_required_text, required=True),
    Field("sellerLocation", "seller_location", parse_text),
    Field("totalAmount", "total_amount", parse_number, required=True),
    Field("transportFees", "transport_fees", parse_number, default=0.0),
    Field("handlingFees", "handling_fees", parse_number, default=0.0),
    Field("commissionFees", "commission_fees", parse_number, default=0.0),
    Field(
        "itemPickupStatus",
        "item_pickup_status",
        parse_text,
        default="not",
        choices=Purchase.TRACKING_VALUES,
        nullable=False,
    ),
    Field(
        "receiptStatus",
        "receipt_status",
        parse_text,
        default="not",
        choices=Purchase.TRACKING_VALUES,
        nullable=False,
    ),
    Field(
        "paymentStatus",
        "payment_status",
        parse_text,
        default="not",
        choices=Purchase.TRACKING_VALUES,
        nullable=False,
    ),
)

PURCHASE_ITEM_FIELDS = (
    Field("category", "category", parse_text),
    Field("itemName", "item_name", parse_required_text, required=True),
    Field("model", "model", parse_text),
    Field("brand", "brand", parse_text),
    Field("color", "color", parse_text),
    Field("serialNo", "serial_no", parse_text),
    Field("quantity", "quantity", parse_number, required=True),
    Field("unit", "unit", parse_required_text, required=True),
    Field("unitPrice", "unit_price", parse_number, required=True),
    Field("vat", "vat", parse_number, default=15.0),
    Field("totalPrice", "total_price", parse_number, required=True),
)

INVENTORY_FIELDS = (
    Field("productId", "product_id", parse_required_text, required=True),
    Field("category", "category", parse_required_text, required=True),
    Field("itemName", "item_name", parse_required_text, required=True),
    Field("description", "description", parse_text),
    Field("quantity", "quantity", parse_number, required=True),
    Field("unit", "unit", parse_required_text, required=True),
    Field("unitPrice", "unit_price", parse_number, required=True),
    Field("minStock", "min_stock", parse_number),
    Field("maxStock", "max_stock", parse_number),
    Field("warehouseId", "warehouse_id", parse_int, required=True),
)

WAREHOUSE_FIELDS = (
    Field("name", "name", parse_required_text, required=True),
    Field("location", "location", parse_text),
)

TRANSFER_FIELDS = (
    Field("fromWarehouseId", "from_warehouse_id", parse_int, required=True),
    Field("toWarehouseId", "to_warehouse_id", parse_int, required=True),
    Field("transferDate", "transfer_date", parse_datetime, required=True),
    Field("reference", "reference", parse_text),
    Field("notes", "notes", parse_text),
)

TRANSFER_ITEM_FIELDS = (
    Field("inventoryId", "inventory_id", parse_int, required=True),
    Field("quantity", "quantity", parse_positive_number, required=True),
)

SALE_FIELDS = (
    Field("invoiceNo", "invoice_no", parse_required_text, required=True),
    Field("saleDate", "sale_date", parse_datetime, required=True),
    Field("customerName", "customer_name", parse_required_text, required=True),
    Field("customerContact", "customer_contact", parse_text),
    Field("customerLocation", "customer_location", parse_text),
    Field("salesperson", "salesperson", parse_text),
    Field("subtotal", "subtotal", parse_number, required=True),
    Field("discount", "discount", parse_number, default=0.0),
    Field("vat", "vat", parse_number, default=15.0),
    Field("totalAmount", "total_amount", parse_number, required=True),
    Field(
        "paymentStatus",
        "payment_status",
        parse_text,
        required=True,
        choices=Sale.PAYMENT_STATUSES,
    ),
    Field("paymentMethod", "payment_method", parse_text, choices=Sale.PAYMENT_METHODS),
    Field("bankName", "bank_name", parse_text),
    Field("accountNo", "account_no", parse_text),
    Field("deliveryRequired", "delivery_required", parse_bool, default=False),
    Field("deliveryDate", "delivery_date", parse_datetime),
    Field(
        "deliveryStatus",
        "delivery_status",
        parse_text,
        default="pending",
        choices=Sale.DELIVERY_STATUSES,
        nullable=False,
    ),
    Field("warehouseId", "warehouse_id", parse_int),
)

# Delivery tracking is the only part of a recorded sale that changes later.
SALE_DELIVERY_FIELDS = (
    Field(
        "deliveryStatus",
        "delivery_status",
        parse_text,
        choices=Sale.DELIVERY_STATUSES,
        nullable=False,
    ),
    Field("deliveryDate", "delivery_date", parse_datetime),
)

SALE_ITEM_FIELDS = (
    Field("inventoryId", "inventory_id", parse_int, required=True),
    Field("quantity", "quantity", parse_positive_number, required=True),
    Field("unitPrice", "unit_price", parse_number, required=True),
    Field("discount", "discount", parse_number, default=0.0),
    Field("totalPrice", "total_price", parse_number, required=True),
)

DOCUMENT_FIELDS = (
    Field(
        "documentType",
        "document_type",
        parse_text,
        required=True,
        choices=Document.TYPES,
    ),
    Field("relatedId", "related_id", parse_int),
    Field("relatedType", "related_type", parse_text),
    Field("fileName", "file_name", parse_required_text, required=True),
    Field("filePath", "file_path", parse_required_text, required=True),
)

PROJECT_FIELDS = (
    Field("name", "name", parse_required_text, required=True),
    Field("location", "location", parse_text),
    Field("startDate", "start_date", parse_datetime),
    Field("endDate", "end_date", parse_datetime),
    Field(
        "status", "status", parse_text, default="pending", choices=Task.STATUSES, nullable=False
    ),
)

TASK_FIELDS = (
    Field("title", "title", parse_required_text, required=True),
    Field("description", "description", parse_text),
    Field("assignedTo", "assigned_to", parse_int),
    Field("dueDate", "due_date", parse_datetime),
    Field(
        "status", "status", parse_text, default="pending", choices=Task.STATUSES, nullable=False
    ),
    Field(
        "priority",
        "priority",
        parse_text,
        default="normal",
        choices=Task.PRIORITIES,
        nullable=False,
    ),
)

TASK_STATUS_FIELDS = (
    Field("status", "status", parse_text, required=True, choices=Task.STATUSES),
)

ITEM_USAGE_FIELDS = (
    Field("inventoryId", "inventory_id", parse_int, required=True),
    Field("projectId", "project_id", parse_int),
    Field("taskId", "task_id", parse_int),
    Field("quantity", "quantity", parse_positive_number, required=True),
    Field("usageDate", "usage_date", parse_datetime, required=True),
)

TIMESHEET_FIELDS = (
    Field("projectId", "project_id", parse_int),
    Field("taskId", "task_id", parse_int),
    Field("workDate", "work_date", parse_datetime, required=True),
    Field("hours", "hours", parse_positive_number, required=True),
    Field("description", "description", parse_text),
)

CREDENTIAL_FIELDS = (
    Field("username", "username", parse_required_text, required=True),
    Field("password", "password", parse_required_text, required=True),
)
