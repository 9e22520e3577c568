# FILE: medicare/models/document.py
from datetime import datetime

from sqlalchemy import JSON, Column, DateTime, Index, Integer, String

from medicare.db.base import Base


class Document(Base):
    """
    One EMR document (patient, prescription, treatment, ...).

    The body lives in `data` exactly as the client sees it (camelCase keys);
    `patient_id` is copied out of it so per-patient lookups stay indexed.
    """

    __tablename__ = "documents"

    pk = Column(Integer, primary_key=True, autoincrement=True)
    id = Column(String(36), nullable=False, unique=True, index=True)
    collection = Column(String(32), nullable=False, index=True)
    patient_id = Column(String(36), nullable=True, index=True)

    data = Column(JSON, nullable=False, default=dict)

    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)
    updated_at = Column(DateTime,
                        nullable=False,
                        default=datetime.utcnow,
                        onupdate=datetime.utcnow)

    __table_args__ = (Index("ix_documents_collection_created",
                            "collection", "created_at"), )
