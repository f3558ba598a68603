"""Database utilities and models."""

from fittrainer.db.base import Base
from fittrainer.db import models  # noqa: F401  (imported for side effects)

__all__ = ["Base"]
