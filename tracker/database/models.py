from sqlalchemy import CheckConstraint, Column, Float, Integer, String, Text
from tracker.database.config import Base, SessionBase
from tracker.schemas import IssuePriority, IssueStatus, MilestoneStatus


def _in_check(column: str, enum_cls) -> str:
    values = ", ".join(f"'{member.value}'" for member in enum_cls)
    return f"{column} IN ({values})"


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, autoincrement=True)
    username = Column(String, unique=True, nullable=False)
    password = Column(String, nullable=False)
    created_at = Column(String, nullable=False)
    updated_at = Column(String)


class Issue(Base):
    __tablename__ = "issues"
    __table_args__ = (
        CheckConstraint(_in_check("status", IssueStatus), name="ck_issues_status"),
        CheckConstraint(_in_check("priority", IssuePriority), name="ck_issues_priority"),
    )

    id = Column(String, primary_key=True, index=True)
    title = Column(String(200), nullable=False)
    description = Column(Text)
    status = Column(String, nullable=False)
    priority = Column(String, nullable=False)
    assignee = Column(String)
    creator = Column(String, nullable=False)
    created_at = Column(String, nullable=False)
    updated_at = Column(String)


class Label(Base):
    __tablename__ = "labels"
    __table_args__ = (
        CheckConstraint(
            "color GLOB '#[0-9A-F][0-9A-F][0-9A-F][0-9A-F][0-9A-F][0-9A-F]'",
            name="ck_labels_color",
        ),
    )

    id = Column(String, primary_key=True, index=True)
    name = Column(String(50), nullable=False)
    color = Column(String(7), nullable=False)
    description = Column(String(200))


class Comment(Base):
    __tablename__ = "comments"

    id = Column(String, primary_key=True, index=True)
    # No foreign key: comments outlive their issue
    issue_id = Column(String, nullable=False, index=True)
    content = Column(Text, nullable=False)
    author = Column(String, nullable=False)
    created_at = Column(String, nullable=False)
    updated_at = Column(String)


class Milestone(Base):
    __tablename__ = "milestones"
    __table_args__ = (
        CheckConstraint(_in_check("status", MilestoneStatus), name="ck_milestones_status"),
    )

    id = Column(String, primary_key=True, index=True)
    title = Column(String(100), nullable=False)
    description = Column(Text)
    due_date = Column(String)
    status = Column(String, nullable=False)
    created_at = Column(String, nullable=False)
    updated_at = Column(String)


class StoredSession(SessionBase):
    __tablename__ = "sessions"

    token = Column(String, primary_key=True)
    user_id = Column(Integer, nullable=False)
    username = Column(String, nullable=False)
    expires_at = Column(Float, nullable=False, index=True)
