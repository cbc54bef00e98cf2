"""Task model."""

from sqlalchemy import Boolean, Column, Enum, ForeignKey, Integer, String, Text
from sqlalchemy.orm import relationship

from src.database import Base
from src.models.enums import TaskStatus
from src.models.mixins import TimestampMixin


class Task(Base, TimestampMixin):
    """A unit of work owned by exactly one user."""

    __tablename__ = "tasks"

    id = Column(Integer, primary_key=True, index=True)
    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    status = Column(
        Enum(
            TaskStatus,
            name="taskstatus",
            values_callable=lambda x: [e.value for e in x],
        ),
        default=TaskStatus.TODO,
        nullable=False,
    )
    is_archived = Column(Boolean, default=False, nullable=False)
    user_id = Column(
        Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )

    # Relationships
    owner = relationship("User", back_populates="tasks")
