"""
Provides the Chat model for the roster schema.

A chat is a messaging destination (group, supergroup or channel) the roster
has observed. Its identifier comes from the messaging platform.

Attributes
----------
id : sqlalchemy.Column
    Platform chat identifier, primary key.
name : sqlalchemy.Column
    Display title of the chat. Never null, may be empty.

Relationships
-------------
users : sqlalchemy.orm.relationship
    One-to-many relationship with the chat-scoped `User` model. Deletes and
    id updates are propagated by the ``fk_chat`` constraint in the database.
"""

from sqlalchemy import Column, Text
from sqlalchemy.orm import relationship

from .base import Base, platform_id_column


class Chat(Base):
    """
    Represents a chat tracked by the roster.

    :ivar id: Platform chat identifier.
    :type id: int
    :ivar name: Chat title.
    :type name: str
    """

    __tablename__ = "tg_chat"

    id = platform_id_column(primary_key=True)
    name = Column(Text, nullable=False)

    # Relationships
    users = relationship(
        "User",
        back_populates="chat",
        cascade="all, delete-orphan",
        passive_deletes=True,
        passive_updates=True,
        order_by="User.id",
    )

    def __repr__(self) -> str:
        return f"<Chat id={self.id} name={self.name!r}>"
