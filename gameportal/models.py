import enum
import uuid
from datetime import datetime, timezone
from decimal import Decimal
from typing import Optional, List

from sqlalchemy import String, Text, Boolean, ForeignKey, DateTime, Enum, Index, Integer, Numeric, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from gameportal.database import Base


def _new_id() -> str:
    return str(uuid.uuid4())


def utcnow() -> datetime:
    """Naive UTC timestamp for TIMESTAMP WITHOUT TIME ZONE columns."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


class ReactionType(str, enum.Enum):
    """A user's opinion of a game. There is no stored neutral value."""
    LIKE = "like"
    DISLIKE = "dislike"


class Category(Base):
    """Game category (genre)."""
    __tablename__ = "categories"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_new_id)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    icon: Mapped[Optional[str]] = mapped_column(String(512), nullable=True)

    created_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow, onupdate=utcnow)

    game_categories: Mapped[List["GameCategory"]] = relationship(
        back_populates="category", cascade="all, delete-orphan", passive_deletes=True
    )


class Game(Base):
    """A listed game."""
    __tablename__ = "games"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_new_id)
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    rating: Mapped[Decimal] = mapped_column(Numeric(2, 1), default=Decimal("0"), nullable=False)

    icon: Mapped[Optional[str]] = mapped_column(String(512), nullable=True)
    video: Mapped[Optional[str]] = mapped_column(String(512), nullable=True)
    url: Mapped[Optional[str]] = mapped_column(String(512), nullable=True)

    publish_status: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    is_trending: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    play_count: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    published_at: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)

    created_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow, onupdate=utcnow)

    # Relationships
    game_categories: Mapped[List["GameCategory"]] = relationship(
        back_populates="game", cascade="all, delete-orphan", passive_deletes=True
    )
    reactions: Mapped[List["GameReaction"]] = relationship(
        back_populates="game", cascade="all, delete-orphan", passive_deletes=True
    )

    __table_args__ = (
        Index("idx_game_publish_status", "publish_status"),
        Index("idx_game_published_at", "published_at"),
    )

    @property
    def categories(self) -> List["Category"]:
        """Linked categories; requires game_categories to be loaded."""
        return [gc.category for gc in self.game_categories if gc.category is not None]


class GameCategory(Base):
    """Game-Category association."""
    __tablename__ = "game_categories"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_new_id)
    game_id: Mapped[str] = mapped_column(ForeignKey("games.id", ondelete="CASCADE"), nullable=False)
    category_id: Mapped[str] = mapped_column(ForeignKey("categories.id", ondelete="CASCADE"), nullable=False)

    game: Mapped["Game"] = relationship(back_populates="game_categories")
    category: Mapped["Category"] = relationship(back_populates="game_categories")

    __table_args__ = (
        Index("idx_game_category", "game_id", "category_id", unique=True),
    )


class GameReaction(Base):
    """One user's current like/dislike on one game.

    ``user_id`` is an opaque caller-supplied identifier, not a foreign key.
    The (user_id, game_id) pair is unique at the database level.
    """
    __tablename__ = "game_reactions"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_new_id)
    user_id: Mapped[str] = mapped_column(String(255), nullable=False)
    game_id: Mapped[str] = mapped_column(ForeignKey("games.id", ondelete="CASCADE"), nullable=False)

    reaction_type: Mapped[ReactionType] = mapped_column(
        Enum(
            ReactionType,
            name="reaction_type",
            values_callable=lambda kinds: [k.value for k in kinds],
            native_enum=False,
            create_constraint=True,
            length=10,
        ),
        nullable=False,
    )

    created_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow, onupdate=utcnow)

    game: Mapped["Game"] = relationship(back_populates="reactions")

    __table_args__ = (
        UniqueConstraint("user_id", "game_id", name="uq_game_reactions_user_game"),
        Index("idx_game_reaction_game_type", "game_id", "reaction_type"),
    )


class Page(Base):
    """Static informational page (about, privacy policy, ...)."""
    __tablename__ = "pages"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_new_id)
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    slug: Mapped[str] = mapped_column(String(255), unique=True, nullable=False, index=True)
    html_content: Mapped[str] = mapped_column(Text, nullable=False)
    publish_status: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)

    created_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow, onupdate=utcnow)


class Admin(Base):
    """Administrator account. Holds the hash of its single live bearer token."""
    __tablename__ = "admins"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_new_id)
    username: Mapped[str] = mapped_column(String(255), unique=True, nullable=False, index=True)
    current_token_hash: Mapped[Optional[str]] = mapped_column(String(64), nullable=True)

    created_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow, onupdate=utcnow)
