# FILE: medicare/db/base.py
from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    """Every table of the document store inherits from this."""
    pass


# Import all models so metadata is complete for create_all()
from medicare.models import document  # noqa: F401,E402
