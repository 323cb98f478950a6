"""Product catalog model"""

from sqlalchemy import Column, String, Integer, Numeric, Boolean, Index, CheckConstraint, Text, JSON
import enum

from .base import Base, TimestampedModel, UUIDModel, SerializableModel

class ProductCategory(str, enum.Enum):
    T_SHIRTS = "t-shirts"
    MUGS = "mugs"
    ACCESSORIES = "accessories"
    COMBOS = "combos"
    HOODIES = "hoodies"
    CAPS = "caps"
    POSTERS = "posters"

class Product(Base, TimestampedModel, UUIDModel, SerializableModel):
    """Merchandise item"""

    __tablename__ = "products"

    name = Column(String(200), nullable=False)
    description = Column(Text, nullable=False, default="")
    category = Column(String(30), nullable=False, index=True)
    show_name = Column(String(200), nullable=False, default="")

    # Pricing
    price = Column(Numeric(10, 2), nullable=False)
    mrp = Column(Numeric(10, 2), nullable=False)
    discount = Column(Integer, nullable=False, default=0)  # percent off mrp

    # Inventory
    sizes = Column(JSON, nullable=False, default=lambda: ["S", "M", "L", "XL"])
    quantity = Column(Integer, nullable=False, default=0)
    sku = Column(String(50), unique=True, nullable=True)

    images = Column(JSON, nullable=False, default=list)
    tags = Column(JSON, nullable=False, default=list)

    # Merchandising flags
    is_active = Column(Boolean, nullable=False, default=True)
    featured = Column(Boolean, nullable=False, default=False)
    is_best_seller = Column(Boolean, nullable=False, default=False)
    is_new_arrival = Column(Boolean, nullable=False, default=True)
    sales_count = Column(Integer, nullable=False, default=0)

    __table_args__ = (
        CheckConstraint("price >= 0", name="check_non_negative_price"),
        CheckConstraint("quantity >= 0", name="check_non_negative_quantity"),
        Index("idx_products_active_category", "is_active", "category"),
    )

    @property
    def in_stock(self) -> bool:
        return self.quantity > 0
