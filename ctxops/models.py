from datetime import date, datetime

from flask_login import UserMixin
from werkzeug.security import check_password_hash, generate_password_hash

from ctxops.derived import derive_purchase_status, is_low_stock
from ctxops.extensions import db


def _camel_case(name: str) -> str:
    head, *rest = name.split("_")
    return head + "".join(part.capitalize() for part in rest)


def _json_value(value):
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    return value


class SerializerMixin:
    """Render mapped columns as a camelCase JSON-ready dict."""

    __json_exclude__ = ()

    def to_dict(self) -> dict[str, object]:
        payload = {}
        for column in self.__table__.columns:
            if column.key in self.__json_exclude__:
                continue
            payload[_camel_case(column.key)] = _json_value(getattr(self, column.key))
        return payload


class User(UserMixin, SerializerMixin, db.Model):
    __tablename__ = "users"
    __json_exclude__ = ("password_hash",)

    id = db.Column(db.Integer, primary_key=True)
    username = db.Column(db.String(255), unique=True, nullable=False)
    password_hash = db.Column(db.String(255), nullable=False)
    role = db.Column(db.String(32), nullable=False, default="user")
    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)

    def set_password(self, password: str) -> None:
        self.password_hash = generate_password_hash(password)

    def check_password(self, password: str) -> bool:
        return check_password_hash(self.password_hash, password)

    def __repr__(self) -> str:  # pragma: no cover - debug helper
        return f"<User {self.username}>"


class Machinery(SerializerMixin, db.Model):
    __tablename__ = "machinery"

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String, nullable=False)
    category = db.Column(db.String, nullable=False)
    model = db.Column(db.String)
    brand = db.Column(db.String)
    serial_no = db.Column(db.String)
    purchase_date = db.Column(db.DateTime)
    notes = db.Column(db.Text)

    services = db.relationship(
        "MachineryService",
        back_populates="machinery",
        cascade="all, delete-orphan",
        order_by="MachineryService.service_date",
    )


class MachineryService(SerializerMixin, db.Model):
    __tablename__ = "machinery_service"

    id = db.Column(db.Integer, primary_key=True)
    machinery_id = db.Column(db.Integer, db.ForeignKey("machinery.id"), nullable=False)
    service_date = db.Column(db.DateTime, nullable=False)
    service_type = db.Column(db.String, nullable=False)
    cost = db.Column(db.Float)
    vendor = db.Column(db.String)
    notes = db.Column(db.Text)

    machinery = db.relationship("Machinery", back_populates="services")


class Purchase(SerializerMixin, db.Model):
    __tablename__ = "purchases"

    TYPES = ("LOCAL", "IMPORTED", "WITHOUT_RECEIPT")
    TRACKING_VALUES = ("fully", "partially", "not")
    TRACKING_FIELDS = ("item_pickup_status", "receipt_status", "payment_status")

    id = db.Column(db.Integer, primary_key=True)
    invoice_no = db.Column(db.String, unique=True, nullable=False)
    purchase_type = db.Column(db.String, nullable=False)
    purchase_date = db.Column(db.DateTime, nullable=False)
    seller_name = db.Column(db.String, nullable=False)
    seller_location = db.Column(db.String)
    total_amount = db.Column(db.Float, nullable=False)
    transport_fees = db.Column(db.Float, default=0)
    handling_fees = db.Column(db.Float, default=0)
    commission_fees = db.Column(db.Float, default=0)
    item_pickup_status = db.Column(db.String, nullable=False, default="not")
    receipt_status = db.Column(db.String, nullable=False, default="not")
    payment_status = db.Column(db.String, nullable=False, default="not")
    purchase_status = db.Column(db.String, nullable=False, default="incomplete")

    items = db.relationship(
        "PurchaseItem",
        back_populates="purchase",
        cascade="all, delete-orphan",
        order_by="PurchaseItem.id",
    )

    def refresh_purchase_status(self) -> str:
        self.purchase_status = derive_purchase_status(
            self.item_pickup_status or "not",
            self.receipt_status or "not",
            self.payment_status or "not",
        )
        return self.purchase_status


class PurchaseItem(SerializerMixin, db.Model):
    __tablename__ = "purchase_items"

    id = db.Column(db.Integer, primary_key=True)
    purchase_id = db.Column(db.Integer, db.ForeignKey("purchases.id"), nullable=False)
    category = db.Column(db.String)
    item_name = db.Column(db.String, nullable=False)
    model = db.Column(db.String)
    brand = db.Column(db.String)
    color = db.Column(db.String)
    serial_no = db.Column(db.String)
    quantity = db.Column(db.Float, nullable=False)
    unit = db.Column(db.String, nullable=False)
    unit_price = db.Column(db.Float, nullable=False)
    vat = db.Column(db.Float, default=15)
    total_price = db.Column(db.Float, nullable=False)

    purchase = db.relationship("Purchase", back_populates="items")


class Warehouse(SerializerMixin, db.Model):
    __tablename__ = "warehouses"

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String, nullable=False)
    location = db.Column(db.String)


class InventoryItem(SerializerMixin, db.Model):
    __tablename__ = "inventory"

    id = db.Column(db.Integer, primary_key=True)
    product_id = db.Column(db.String, unique=True, nullable=False)
    category = db.Column(db.String, nullable=False)
    item_name = db.Column(db.String, nullable=False, index=True)
    description = db.Column(db.Text)
    quantity = db.Column(db.Float, nullable=False)
    unit = db.Column(db.String, nullable=False)
    unit_price = db.Column(db.Float, nullable=False)
    min_stock = db.Column(db.Float)
    max_stock = db.Column(db.Float)
    warehouse_id = db.Column(db.Integer, db.ForeignKey("warehouses.id"), nullable=False)

    warehouse = db.relationship("Warehouse", backref="inventory_items")

    @property
    def low_stock(self) -> bool:
        return is_low_stock(self.quantity, self.min_stock)

    def to_dict(self) -> dict[str, object]:
        payload = super().to_dict()
        payload["lowStock"] = self.low_stock
        return payload


class InventoryTransfer(SerializerMixin, db.Model):
    __tablename__ = "inventory_transfers"

    id = db.Column(db.Integer, primary_key=True)
    from_warehouse_id = db.Column(
        db.Integer, db.ForeignKey("warehouses.id"), nullable=False
    )
    to_warehouse_id = db.Column(db.Integer, db.ForeignKey("warehouses.id"), nullable=False)
    transfer_date = db.Column(db.DateTime, nullable=False)
    reference = db.Column(db.String)
    notes = db.Column(db.Text)

    items = db.relationship(
        "TransferItem",
        back_populates="transfer",
        cascade="all, delete-orphan",
        order_by="TransferItem.id",
    )


class TransferItem(SerializerMixin, db.Model):
    __tablename__ = "transfer_items"

    id = db.Column(db.Integer, primary_key=True)
    transfer_id = db.Column(
        db.Integer, db.ForeignKey("inventory_transfers.id"), nullable=False
    )
    # Source inventory row; not a foreign key so skipped lines can still be kept.
    inventory_id = db.Column(db.Integer, nullable=False, index=True)
    quantity = db.Column(db.Float, nullable=False)

    transfer = db.relationship("InventoryTransfer", back_populates="items")


class Sale(SerializerMixin, db.Model):
    __tablename__ = "sales"

    PAYMENT_STATUSES = ("paid", "partial", "credit")
    PAYMENT_METHODS = ("cash", "bank_transfer", "direct_deposit", "cheque")
    DELIVERY_STATUSES = ("pending", "completed")

    id = db.Column(db.Integer, primary_key=True)
    invoice_no = db.Column(db.String, unique=True, nullable=False)
    sale_date = db.Column(db.DateTime, nullable=False)
    customer_name = db.Column(db.String, nullable=False)
    customer_contact = db.Column(db.String)
    customer_location = db.Column(db.String)
    salesperson = db.Column(db.String)
    subtotal = db.Column(db.Float, nullable=False)
    discount = db.Column(db.Float, default=0)
    vat = db.Column(db.Float, default=15)
    total_amount = db.Column(db.Float, nullable=False)
    payment_status = db.Column(db.String, nullable=False)
    payment_method = db.Column(db.String)
    bank_name = db.Column(db.String)
    account_no = db.Column(db.String)
    delivery_required = db.Column(db.Boolean, default=False)
    delivery_date = db.Column(db.DateTime)
    delivery_status = db.Column(db.String, default="pending")
    warehouse_id = db.Column(db.Integer, db.ForeignKey("warehouses.id"))

    items = db.relationship(
        "SaleItem",
        back_populates="sale",
        cascade="all, delete-orphan",
        order_by="SaleItem.id",
    )


class SaleItem(SerializerMixin, db.Model):
    __tablename__ = "sale_items"

    id = db.Column(db.Integer, primary_key=True)
    sale_id = db.Column(db.Integer, db.ForeignKey("sales.id"), nullable=False)
    inventory_id = db.Column(db.Integer, nullable=False, index=True)
    quantity = db.Column(db.Float, nullable=False)
    unit_price = db.Column(db.Float, nullable=False)
    discount = db.Column(db.Float, default=0)
    total_price = db.Column(db.Float, nullable=False)

    sale = db.relationship("Sale", back_populates="items")


class Document(SerializerMixin, db.Model):
    __tablename__ = "documents"

    TYPES = ("PURCHASE_RECEIPT", "BANK_RECEIPT", "SERVICE_REPORT", "PROJECT_DOCUMENT")

    id = db.Column(db.Integer, primary_key=True)
    document_type = db.Column(db.String, nullable=False)
    related_id = db.Column(db.Integer)
    related_type = db.Column(db.String)
    file_name = db.Column(db.String, nullable=False)
    file_path = db.Column(db.String, nullable=False)
    upload_date = db.Column(db.DateTime, nullable=False, default=datetime.utcnow)
    uploaded_by = db.Column(db.Integer, db.ForeignKey("users.id"), nullable=False)


class Project(SerializerMixin, db.Model):
    __tablename__ = "projects"

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String, nullable=False)
    location = db.Column(db.String)
    start_date = db.Column(db.DateTime)
    end_date = db.Column(db.DateTime)
    status = db.Column(db.String, nullable=False, default="pending")

    tasks = db.relationship(
        "Task", back_populates="project", cascade="all, delete-orphan", order_by="Task.id"
    )


class Task(SerializerMixin, db.Model):
    __tablename__ = "tasks"

    STATUSES = ("pending", "in_progress", "completed")
    PRIORITIES = ("low", "normal", "medium", "high", "urgent")

    id = db.Column(db.Integer, primary_key=True)
    project_id = db.Column(db.Integer, db.ForeignKey("projects.id"), nullable=False)
    title = db.Column(db.String, nullable=False)
    description = db.Column(db.Text)
    assigned_to = db.Column(db.Integer, db.ForeignKey("users.id"))
    due_date = db.Column(db.DateTime)
    status = db.Column(db.String, nullable=False, default="pending")
    priority = db.Column(db.String, default="normal")

    project = db.relationship("Project", back_populates="tasks")


class ItemUsage(SerializerMixin, db.Model):
    __tablename__ = "item_usage"

    id = db.Column(db.Integer, primary_key=True)
    inventory_id = db.Column(db.Integer, nullable=False, index=True)
    project_id = db.Column(db.Integer, db.ForeignKey("projects.id"))
    task_id = db.Column(db.Integer, db.ForeignKey("tasks.id"))
    quantity = db.Column(db.Float, nullable=False)
    usage_date = db.Column(db.DateTime, nullable=False)
    recorded_by = db.Column(db.Integer, db.ForeignKey("users.id"), nullable=False)


class Timesheet(SerializerMixin, db.Model):
    __tablename__ = "timesheet"

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey("users.id"), nullable=False)
    project_id = db.Column(db.Integer, db.ForeignKey("projects.id"))
    task_id = db.Column(db.Integer, db.ForeignKey("tasks.id"))
    work_date = db.Column(db.DateTime, nullable=False)
    hours = db.Column(db.Float, nullable=False)
    description = db.Column(db.Text)
