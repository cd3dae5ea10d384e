"""Stock item model for kitchen inventory."""

from sqlalchemy import Column, Date, Float, Integer, String

from backoffice.database import Base
from backoffice.models.mixins import TimestampMixin


class StockItem(Base, TimestampMixin):
    """An inventory line held in its native unit.

    ``total_cost`` is the batch cost as entered by the user (e.g. 200 for
    20 kg); ``price_per_base_unit`` is derived from it and normalized to the
    unit family's base unit (g, ml or ea).
    """

    __tablename__ = "stock_items"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), nullable=False, unique=True)
    category = Column(String(100), nullable=True)
    quantity = Column(Float, nullable=False, default=0.0)
    unit = Column(String(20), nullable=False)  # normalized key: g, kg, ml, l, ea
    unit_base = Column(String(20), nullable=False)  # g, ml or ea
    total_cost = Column(Float, nullable=False, default=0.0)
    price_per_base_unit = Column(Float, nullable=False, default=0.0)
    reorder_threshold = Column(Float, nullable=True)  # in base units
    expiry = Column(Date, nullable=True)
