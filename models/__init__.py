from models.base import Base, metadata  # noqa: F401
from models.profile import Profile  # noqa: F401
from models.submission import Submission  # noqa: F401
