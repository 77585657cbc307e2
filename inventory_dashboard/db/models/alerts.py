"""ORM model for inventory alerts (raised by backend triggers on stock changes)."""

from datetime import datetime

from sqlalchemy import Boolean, DateTime, ForeignKey, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from inventory_dashboard.db.base import Base

ALERT_LOW_STOCK = "LOW_STOCK"
ALERT_OUT_OF_STOCK = "OUT_OF_STOCK"


class InventoryAlert(Base):
    """Inventory alert row."""

    __tablename__ = "InventoryAlerts"

    alert_id: Mapped[int] = mapped_column("AlertID", primary_key=True, autoincrement=True)
    product_id: Mapped[int] = mapped_column("ProductID", ForeignKey("Products.ProductID"), nullable=False)
    warehouse_id: Mapped[int | None] = mapped_column("WarehouseID", ForeignKey("Warehouses.WarehouseID"), nullable=True)
    alert_type: Mapped[str] = mapped_column("AlertType", String(20), nullable=False)
    message: Mapped[str] = mapped_column("Message", String(500), nullable=False, default="")
    current_stock: Mapped[int] = mapped_column("CurrentStock", Integer, nullable=False, default=0)
    reorder_level: Mapped[int] = mapped_column("ReorderLevel", Integer, nullable=False, default=0)
    is_resolved: Mapped[bool] = mapped_column("IsResolved", Boolean, nullable=False, default=False)
    resolved_at: Mapped[datetime | None] = mapped_column("ResolvedAt", DateTime, nullable=True)
    resolved_by_user_id: Mapped[int | None] = mapped_column("ResolvedByUserID", Integer, nullable=True)
    created_at: Mapped[datetime] = mapped_column("CreatedAt", DateTime, nullable=False, default=datetime.now)
