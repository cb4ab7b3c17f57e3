# models/profile.py
from sqlalchemy import Column, String, Text, CheckConstraint, Index, text
from sqlalchemy.orm import relationship

from models.base import Base, TimeStampMixin


# ========== profiles ==========
class Profile(TimeStampMixin, Base):
    """
    Application-level user record, 1:1 with an identity-provider account.

    - id is the identity id (no local sequence)
    - role is changed only through the admin role endpoint
    """

    __tablename__ = "profiles"

    id = Column(String(64), primary_key=True)
    name = Column(Text, nullable=False, server_default=text("''"))
    discord = Column(Text, nullable=False, server_default=text("''"))
    avatar_url = Column(Text, nullable=True)
    role = Column(String(16), nullable=False, default="user", server_default=text("'user'"))

    submissions = relationship("Submission", back_populates="profile", passive_deletes=True)

    __table_args__ = (
        CheckConstraint("role IN ('user','admin')", name="role_valid"),
        Index("ix_profiles_role", "role"),
    )
