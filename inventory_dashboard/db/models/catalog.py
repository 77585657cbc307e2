"""ORM models for master data: Category, Product, Warehouse, ProductStock, Customer."""

from decimal import Decimal

from sqlalchemy import Boolean, ForeignKey, Integer, Numeric, String
from sqlalchemy.orm import Mapped, mapped_column

from inventory_dashboard.db.base import Base


class Category(Base):
    """Product category."""

    __tablename__ = "Categories"

    category_id: Mapped[int] = mapped_column("CategoryID", primary_key=True, autoincrement=True)
    category_name: Mapped[str] = mapped_column("CategoryName", String(100), unique=True, nullable=False)
    description: Mapped[str | None] = mapped_column("Description", String(500), nullable=True)


class Product(Base):
    """Product. CurrentStock is the total across warehouses (maintained by the backend)."""

    __tablename__ = "Products"

    product_id: Mapped[int] = mapped_column("ProductID", primary_key=True, autoincrement=True)
    product_code: Mapped[str] = mapped_column("ProductCode", String(50), unique=True, nullable=False)
    product_name: Mapped[str] = mapped_column("ProductName", String(200), nullable=False)
    category_id: Mapped[int] = mapped_column("CategoryID", ForeignKey("Categories.CategoryID"), nullable=False)
    unit: Mapped[str | None] = mapped_column("Unit", String(20), nullable=True, default="pieces")
    cost_price: Mapped[Decimal] = mapped_column("CostPrice", Numeric(10, 2), nullable=False)
    selling_price: Mapped[Decimal] = mapped_column("SellingPrice", Numeric(10, 2), nullable=False)
    current_stock: Mapped[int] = mapped_column("CurrentStock", Integer, nullable=False, default=0)
    reorder_level: Mapped[int] = mapped_column("ReorderLevel", Integer, nullable=False, default=10)
    is_active: Mapped[bool] = mapped_column("IsActive", Boolean, nullable=False, default=True)


class Warehouse(Base):
    """Warehouse."""

    __tablename__ = "Warehouses"

    warehouse_id: Mapped[int] = mapped_column("WarehouseID", primary_key=True, autoincrement=True)
    warehouse_name: Mapped[str] = mapped_column("WarehouseName", String(200), unique=True, nullable=False)
    city: Mapped[str | None] = mapped_column("City", String(100), nullable=True)
    is_active: Mapped[bool] = mapped_column("IsActive", Boolean, nullable=False, default=True)


class ProductStock(Base):
    """Per-warehouse on-hand quantity."""

    __tablename__ = "ProductStocks"

    product_id: Mapped[int] = mapped_column("ProductID", ForeignKey("Products.ProductID"), primary_key=True)
    warehouse_id: Mapped[int] = mapped_column("WarehouseID", ForeignKey("Warehouses.WarehouseID"), primary_key=True)
    on_hand_qty: Mapped[int] = mapped_column("OnHandQty", Integer, nullable=False, default=0)
    reserved_qty: Mapped[int] = mapped_column("ReservedQty", Integer, nullable=False, default=0)


class Customer(Base):
    """Customer."""

    __tablename__ = "Customers"

    customer_id: Mapped[int] = mapped_column("CustomerID", primary_key=True, autoincrement=True)
    customer_name: Mapped[str] = mapped_column("CustomerName", String(200), nullable=False)
    email: Mapped[str | None] = mapped_column("Email", String(100), nullable=True)
    is_active: Mapped[bool] = mapped_column("IsActive", Boolean, nullable=False, default=True)
