from datetime import datetime, timezone

from sqlalchemy import CheckConstraint, Column, DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.orm import relationship

from estoque.models.base import Base


class Movement(Base):
    __tablename__ = "movements"
    __table_args__ = (
        CheckConstraint("quantity > 0", name="ck_movements_quantity_positive"),
        CheckConstraint("movement_type IN ('entrada', 'saida')", name="ck_movements_type"),
    )

    id = Column(Integer, primary_key=True, index=True)
    # No ON DELETE action: the store refuses to delete a product that has history
    product_id = Column(Integer, ForeignKey("products.id"), nullable=False, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)

    # "entrada" or "saida"
    movement_type = Column(String(20), nullable=False)
    quantity = Column(Integer, nullable=False)

    # Balance snapshot taken when the movement was computed
    balance_before = Column(Integer, nullable=False)
    balance_after = Column(Integer, nullable=False)

    reason = Column(String(255), nullable=False)
    notes = Column(Text, nullable=True)

    created_at = Column(DateTime(timezone=True), nullable=False, index=True, default=lambda: datetime.now(timezone.utc))

    product = relationship("Product")
    user = relationship("User")
