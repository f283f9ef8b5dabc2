from datetime import date
from enum import Enum
from typing import Generic, Optional, TypeVar

from pydantic import BaseModel, ConfigDict, Field

T = TypeVar("T")


class IssueStatus(str, Enum):
    OPEN = "open"
    IN_PROGRESS = "in_progress"
    RESOLVED = "resolved"
    CLOSED = "closed"

class IssuePriority(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"

class MilestoneStatus(str, Enum):
    OPEN = "open"
    CLOSED = "closed"


# Users and sessions

class UserCredentials(BaseModel):
    username: str = Field(min_length=1)
    password: str = Field(min_length=1)

class UserResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    username: str

class RegisterResponse(BaseModel):
    message: str
    user_id: int

class LoginResponse(BaseModel):
    message: str
    user: UserResponse
    session_token: str

class ProfileResponse(BaseModel):
    message: str
    user: UserResponse

class MessageResponse(BaseModel):
    message: str


# Issues
# Unknown keys (including the legacy "labels" and "milestone") are dropped.

class IssueCreate(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True, extra="ignore")

    title: str = Field(min_length=1, max_length=200)
    description: Optional[str] = None
    status: IssueStatus
    priority: IssuePriority
    assignee: Optional[str] = None
    creator: str = Field(min_length=1)

class IssueUpdate(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True, extra="ignore")

    title: Optional[str] = Field(None, min_length=1, max_length=200)
    description: Optional[str] = None
    status: Optional[IssueStatus] = None
    priority: Optional[IssuePriority] = None
    assignee: Optional[str] = None

class IssueResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    title: str
    description: Optional[str] = None
    status: IssueStatus
    priority: IssuePriority
    assignee: Optional[str] = None
    creator: str
    created_at: str
    updated_at: Optional[str] = None


# Labels

class LabelCreate(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True, extra="ignore")

    name: str = Field(min_length=1, max_length=50)
    color: str = Field(min_length=1)
    description: Optional[str] = Field(None, max_length=200)

class LabelUpdate(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True, extra="ignore")

    name: Optional[str] = Field(None, min_length=1, max_length=50)
    color: Optional[str] = None
    description: Optional[str] = Field(None, max_length=200)

class LabelResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    color: str
    description: Optional[str] = None


# Comments

class CommentCreate(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True, extra="ignore")

    content: str = Field(min_length=1)
    author: str = Field(min_length=1)

class CommentUpdate(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True, extra="ignore")

    content: Optional[str] = Field(None, min_length=1)
    author: Optional[str] = Field(None, min_length=1)

class CommentResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    issue_id: str
    content: str
    author: str
    created_at: str
    updated_at: Optional[str] = None


# Milestones

class MilestoneCreate(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True, extra="ignore")

    title: str = Field(min_length=1, max_length=100)
    description: Optional[str] = None
    due_date: Optional[date] = None
    status: MilestoneStatus

class MilestoneUpdate(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True, extra="ignore")

    title: Optional[str] = Field(None, min_length=1, max_length=100)
    description: Optional[str] = None
    due_date: Optional[date] = None
    status: Optional[MilestoneStatus] = None

class MilestoneResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    title: str
    description: Optional[str] = None
    due_date: Optional[date] = None
    status: MilestoneStatus
    created_at: str
    updated_at: Optional[str] = None


# Pagination

class Pagination(BaseModel):
    total: int
    page: int
    per_page: int

class Page(BaseModel, Generic[T]):
    data: list[T]
    pagination: Pagination
