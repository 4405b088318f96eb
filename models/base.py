"""
Declarative base shared by every ORM model.

All tables register on a single ``MetaData`` so that ``Base.metadata`` is
the complete schema, both for ``create_all`` in development and tests and
for Alembic's autogenerate comparisons.
"""

from sqlalchemy import BigInteger, Column, MetaData
from sqlalchemy.orm import declarative_base

# Constraint names are part of the schema: the chat foreign key is named
# explicitly on the model, everything else follows this convention.
NAMING_CONVENTION = {
    "pk": "%(table_name)s_pkey",
    "fk": "fk_%(table_name)s_%(column_0_name)s",
    "uq": "uq_%(table_name)s_%(column_0_name)s",
    "ix": "ix_%(table_name)s_%(column_0_name)s",
}

Base = declarative_base(metadata=MetaData(naming_convention=NAMING_CONVENTION))


def platform_id_column(**kwargs) -> Column:
    """
    Build a column for an identifier assigned by the messaging platform.

    Identifiers are 64-bit, may be negative (group chats), and are never
    generated by the database, so autoincrement is always disabled.
    """
    kwargs.setdefault("autoincrement", False)
    return Column(BigInteger, **kwargs)
