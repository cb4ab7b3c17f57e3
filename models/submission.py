# models/submission.py
from sqlalchemy import (
    Column,
    String,
    Text,
    Integer,
    Float,
    Numeric,
    DateTime,
    ForeignKey,
    CheckConstraint,
    Index,
    text,
)
from sqlalchemy.orm import relationship

from models.base import Base, TimeStampMixin, new_uuid, utcnow


def _money(nullable: bool = True) -> Column:
    return Column(Numeric(14, 2, asdecimal=False), nullable=nullable)


# =========================
# submissions
# =========================
class Submission(TimeStampMixin, Base):
    """
    Self-reported seller result waiting for / having received admin review.

    - created by the owner in status 'pending'
    - approved/rejected/deleted by an admin
    - approved_at is set iff status == 'approved'
    """

    __tablename__ = "submissions"

    id = Column(String(36), primary_key=True, default=new_uuid)

    user_id = Column(
        String(64),
        ForeignKey("profiles.id", ondelete="CASCADE"),
        nullable=False,
    )

    # required money fields + derived profit
    revenue = _money(nullable=False)
    cost = _money(nullable=False)
    profit = _money(nullable=False)

    # product / context
    product_name = Column(Text, nullable=True)
    product_category = Column(Text, nullable=True)
    product_brand = Column(Text, nullable=True)
    product_sku = Column(Text, nullable=True)
    marketplace = Column(String(32), nullable=False, server_default=text("'amazon_us'"))
    reporting_period = Column(String(32), nullable=False, server_default=text("'monthly'"))
    currency = Column(String(8), nullable=False, server_default=text("'USD'"))

    # extended financials
    cogs = _money()
    amazon_fees = _money()
    units_sold = Column(Integer, nullable=True)
    average_selling_price = _money()

    # ppc
    ppc_spend = _money()
    ppc_sales = _money()
    total_clicks = Column(Integer, nullable=True)
    total_impressions = Column(Integer, nullable=True)
    acos = Column(Float, nullable=True)           # percent
    tacos = Column(Float, nullable=True)          # percent
    profit_margin = Column(Float, nullable=True)  # percent

    # performance
    conversion_rate = Column(Float, nullable=True)
    sessions = Column(Integer, nullable=True)
    page_views = Column(Integer, nullable=True)
    bsr = Column(Integer, nullable=True)
    reviews_count = Column(Integer, nullable=False, default=0, server_default=text("0"))
    average_rating = Column(Float, nullable=True)
    inventory_value = _money()
    return_rate = Column(Float, nullable=True)

    # workflow
    status = Column(String(16), nullable=False, default="pending", server_default=text("'pending'"))
    date = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    note = Column(Text, nullable=True)
    proof_url = Column(Text, nullable=True)
    approved_at = Column(DateTime(timezone=True), nullable=True)

    profile = relationship("Profile", back_populates="submissions")

    __table_args__ = (
        CheckConstraint(
            "status IN ('pending','approved','rejected')",
            name="status_valid",
        ),
        CheckConstraint("revenue >= 0", name="revenue_non_negative"),
        CheckConstraint("cost >= 0", name="cost_non_negative"),
        CheckConstraint("profit >= 0", name="profit_non_negative"),
        Index("ix_submissions_status_created", "status", "created_at"),
        Index("ix_submissions_user", "user_id"),
    )
