"""Course and lesson schema definitions."""

from datetime import datetime
from typing import Literal, Optional

from pydantic import Field

from learnhub.schemas.base import ApiModel

CourseStatus = Literal["draft", "published", "archived"]

CourseCategory = Literal[
    "Programming",
    "Design",
    "Data Science",
    "Business",
    "Marketing",
    "AI & Machine Learning",
    "Cryptocurrency",
]

ContentType = Literal["video", "pdf", "presentation", "quiz", "assignment", "ai_generated"]


class CourseCreate(ApiModel):
    title: str = Field(min_length=1)
    description: str
    category: CourseCategory
    teacher_id: Optional[int] = Field(
        default=None,
        description="Owning teacher; defaults to the caller.",
    )
    price: float = Field(default=0, ge=0)
    is_free: bool = True
    thumbnail_url: Optional[str] = None
    status: CourseStatus = "draft"


class CourseUpdate(ApiModel):
    title: Optional[str] = Field(default=None, min_length=1)
    description: Optional[str] = None
    category: Optional[CourseCategory] = None
    price: Optional[float] = Field(default=None, ge=0)
    is_free: Optional[bool] = None
    thumbnail_url: Optional[str] = None
    status: Optional[CourseStatus] = None


class Course(ApiModel):
    id: int
    title: str
    description: str
    category: str
    teacher_id: int
    price: float
    is_free: bool
    thumbnail_url: Optional[str] = None
    status: CourseStatus
    created_at: datetime
    updated_at: datetime


class LessonCreate(ApiModel):
    title: str = Field(min_length=1)
    course_id: int
    content_type: ContentType
    content_url: str
    order: int


class LessonUpdate(ApiModel):
    title: Optional[str] = Field(default=None, min_length=1)
    content_type: Optional[ContentType] = None
    content_url: Optional[str] = None
    order: Optional[int] = None


class Lesson(ApiModel):
    id: int
    title: str
    course_id: int
    content_type: str
    content_url: str
    order: int
    created_at: datetime
