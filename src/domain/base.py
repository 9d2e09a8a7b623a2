"""Base class for persisted domain entities"""

from datetime import datetime, timezone
from sqlmodel import SQLModel


def utc_now() -> datetime:
    """Timezone-aware current UTC time"""
    return datetime.now(timezone.utc)


class BaseModel(SQLModel):
    """
    Common base for all table models

    Keeps every entity on the same SQLModel metadata so that
    ``SQLModel.metadata.create_all`` builds the full schema.
    """
    pass
