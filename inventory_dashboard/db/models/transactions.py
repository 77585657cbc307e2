"""ORM models for sales and purchases (header + line items)."""

from datetime import datetime
from decimal import Decimal

from sqlalchemy import DateTime, ForeignKey, Integer, Numeric, String
from sqlalchemy.orm import Mapped, mapped_column

from inventory_dashboard.db.base import Base

STATUS_DRAFT = "DRAFT"
STATUS_COMPLETED = "COMPLETED"
STATUS_CANCELLED = "CANCELLED"


class SalesHeader(Base):
    """Sale header."""

    __tablename__ = "SalesHeaders"

    sale_id: Mapped[int] = mapped_column("SaleID", primary_key=True, autoincrement=True)
    customer_id: Mapped[int] = mapped_column("CustomerID", ForeignKey("Customers.CustomerID"), nullable=False)
    warehouse_id: Mapped[int] = mapped_column("WarehouseID", ForeignKey("Warehouses.WarehouseID"), nullable=False)
    sale_date: Mapped[datetime] = mapped_column("SaleDate", DateTime, nullable=False)
    invoice_number: Mapped[str | None] = mapped_column("InvoiceNumber", String(50), nullable=True)
    status: Mapped[str] = mapped_column("Status", String(20), nullable=False, default=STATUS_COMPLETED)


class SalesItem(Base):
    """Sale line. LineTotal = Quantity * UnitPrice (computed by the backend)."""

    __tablename__ = "SalesItems"

    sale_item_id: Mapped[int] = mapped_column("SaleItemID", primary_key=True, autoincrement=True)
    sale_id: Mapped[int] = mapped_column("SaleID", ForeignKey("SalesHeaders.SaleID"), nullable=False)
    product_id: Mapped[int] = mapped_column("ProductID", ForeignKey("Products.ProductID"), nullable=False)
    quantity: Mapped[int] = mapped_column("Quantity", Integer, nullable=False)
    unit_price: Mapped[Decimal] = mapped_column("UnitPrice", Numeric(10, 2), nullable=False)
    line_total: Mapped[Decimal] = mapped_column("LineTotal", Numeric(12, 2), nullable=False)


class PurchaseHeader(Base):
    """Purchase header."""

    __tablename__ = "PurchaseHeaders"

    purchase_id: Mapped[int] = mapped_column("PurchaseID", primary_key=True, autoincrement=True)
    warehouse_id: Mapped[int | None] = mapped_column("WarehouseID", ForeignKey("Warehouses.WarehouseID"), nullable=True)
    purchase_date: Mapped[datetime] = mapped_column("PurchaseDate", DateTime, nullable=False)
    reference_number: Mapped[str | None] = mapped_column("ReferenceNumber", String(50), nullable=True)
    status: Mapped[str] = mapped_column("Status", String(20), nullable=False, default=STATUS_COMPLETED)


class PurchaseItem(Base):
    """Purchase line. LineTotal = Quantity * UnitCost (computed by the backend)."""

    __tablename__ = "PurchaseItems"

    purchase_item_id: Mapped[int] = mapped_column("PurchaseItemID", primary_key=True, autoincrement=True)
    purchase_id: Mapped[int] = mapped_column("PurchaseID", ForeignKey("PurchaseHeaders.PurchaseID"), nullable=False)
    product_id: Mapped[int] = mapped_column("ProductID", ForeignKey("Products.ProductID"), nullable=False)
    quantity: Mapped[int] = mapped_column("Quantity", Integer, nullable=False)
    unit_cost: Mapped[Decimal] = mapped_column("UnitCost", Numeric(10, 2), nullable=False)
    line_total: Mapped[Decimal] = mapped_column("LineTotal", Numeric(12, 2), nullable=False)
