from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Optional, List

from pydantic import BaseModel, ConfigDict, Field

from gameportal.models import ReactionType


# ============== Category Schemas ==============

class CategoryBase(BaseModel):
    name: str = Field(min_length=1, max_length=255)
    icon: Optional[str] = None


class CategoryCreate(CategoryBase):
    pass


class CategoryUpdate(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1, max_length=255)
    icon: Optional[str] = None


class CategoryResponse(CategoryBase):
    id: str
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


# ============== Game Schemas ==============

class GameBase(BaseModel):
    title: str = Field(min_length=1, max_length=255)
    description: str = Field(min_length=1)
    rating: Decimal = Field(default=Decimal("0"), ge=0, le=Decimal("9.9"), decimal_places=1)
    icon: Optional[str] = None
    video: Optional[str] = None
    url: Optional[str] = None
    publish_status: bool = False
    is_trending: bool = False


class GameCreate(GameBase):
    category_ids: List[str] = []


class GameUpdate(BaseModel):
    title: Optional[str] = Field(default=None, min_length=1, max_length=255)
    description: Optional[str] = Field(default=None, min_length=1)
    rating: Optional[Decimal] = Field(default=None, ge=0, le=Decimal("9.9"), decimal_places=1)
    icon: Optional[str] = None
    video: Optional[str] = None
    url: Optional[str] = None
    publish_status: Optional[bool] = None
    is_trending: Optional[bool] = None
    # None leaves links untouched; a list (even empty) replaces them
    category_ids: Optional[List[str]] = None


class GameResponse(GameBase):
    id: str
    play_count: int
    published_at: Optional[datetime] = None
    created_at: datetime
    updated_at: datetime
    categories: List[CategoryResponse] = []

    model_config = ConfigDict(from_attributes=True)


class GameSortField(str, Enum):
    TITLE = "title"
    RATING = "rating"
    PUBLISH_STATUS = "publish_status"
    IS_TRENDING = "is_trending"
    CREATED_AT = "created_at"
    PUBLISHED_AT = "published_at"


class SortOrder(str, Enum):
    ASC = "ASC"
    DESC = "DESC"


class GameListResponse(BaseModel):
    data: List[GameResponse]
    total: int
    page: int
    limit: int


class PlayCountResponse(BaseModel):
    id: str
    play_count: int


# ============== Reaction Schemas ==============

class ReactionOutcome(str, Enum):
    CREATED = "created"
    UNCHANGED = "unchanged"
    UPDATED = "updated"
    REMOVED = "removed"
    NOTHING_TO_REMOVE = "nothing_to_remove"


class ReactionResponse(BaseModel):
    message: str
    outcome: ReactionOutcome
    reaction_type: Optional[ReactionType] = None


class ReactionStatsResponse(BaseModel):
    like_count: int
    dislike_count: int
    user_reaction: Optional[ReactionType] = None


# ============== Page Schemas ==============

class PageBase(BaseModel):
    title: str = Field(min_length=1, max_length=255)
    slug: str = Field(min_length=1, max_length=255, pattern=r"^[a-z0-9]+(?:-[a-z0-9]+)*$")
    html_content: str
    publish_status: bool = False


class PageCreate(PageBase):
    pass


class PageUpdate(BaseModel):
    title: Optional[str] = Field(default=None, min_length=1, max_length=255)
    slug: Optional[str] = Field(default=None, min_length=1, max_length=255, pattern=r"^[a-z0-9]+(?:-[a-z0-9]+)*$")
    html_content: Optional[str] = None
    publish_status: Optional[bool] = None


class PageResponse(PageBase):
    id: str
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


# ============== Admin Schemas ==============

class AdminResponse(BaseModel):
    id: str
    username: str
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)
