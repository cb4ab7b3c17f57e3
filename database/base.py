# database/base.py
# Base/metadata come from models.base; importing models registers every table
from models import Base, metadata  # noqa: F401
import models.profile  # noqa: F401
import models.submission  # noqa: F401


def create_all(engine) -> None:
    """Create tables directly (local sqlite / tests). Production uses alembic."""
    Base.metadata.create_all(bind=engine)
