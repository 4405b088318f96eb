"""
Provides the chat-scoped User model for the roster schema.

A user row records one participant of one chat. The same platform user id
appears once per chat it was seen in, which is why the primary key is the
pair (``id``, ``chat_id``) rather than ``id`` alone.

Attributes
----------
id : sqlalchemy.Column
    Platform user identifier. Unique only together with ``chat_id``.
chat_id : sqlalchemy.Column
    Identifier of the chat this record belongs to.
username : sqlalchemy.Column
    The optional public handle of the user.
name : sqlalchemy.Column
    The user's full display name.

Relationships
-------------
chat : sqlalchemy.orm.relationship
    Many-to-one relationship with the `Chat` model.
"""

from sqlalchemy import Column, ForeignKeyConstraint, PrimaryKeyConstraint, Text
from sqlalchemy.orm import relationship

from .base import Base, platform_id_column


class User(Base):
    """
    Represents a participant of a chat.

    :ivar id: Platform user identifier.
    :type id: int
    :ivar chat_id: Identifier of the owning chat.
    :type chat_id: int
    :ivar username: Optional username.
    :type username: str | None
    :ivar name: Full display name.
    :type name: str
    """

    __tablename__ = "tg_user"
    __table_args__ = (
        PrimaryKeyConstraint("id", "chat_id"),
        ForeignKeyConstraint(
            ["chat_id"],
            ["tg_chat.id"],
            name="fk_chat",
            ondelete="CASCADE",
            onupdate="CASCADE",
        ),
    )

    id = platform_id_column()
    chat_id = platform_id_column()
    username = Column(Text, nullable=True)
    name = Column(Text, nullable=False)

    # Relationships
    chat = relationship("Chat", back_populates="users")

    def __repr__(self) -> str:
        return f"<User id={self.id} chat_id={self.chat_id} username={self.username!r}>"
