from datetime import datetime

from sqlalchemy import JSON, Column, DateTime, Integer, String


class RecordMixin:
    """Columns every bridgeable resource table carries."""

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    url = Column(String, unique=True, index=True, nullable=False)
    # Owning library; NULL means the record belongs to the core
    library = Column(String, index=True, nullable=True)
    # Fields added by libraries that have no column of their own
    extra = Column(JSON, nullable=False, default=dict)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)
