# carlot/models/base.py

from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    """
    Shared declarative base for every ORM model.
    Alembic autogenerate reads Base.metadata.
    """
    pass
