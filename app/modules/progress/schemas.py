from pydantic import BaseModel
from typing import Optional, Dict, Any
from datetime import datetime
from enum import Enum


class Difficulty(str, Enum):
    BEGINNER = "Beginner"
    INTERMEDIATE = "Intermediate"


class EnrollmentStatus(str, Enum):
    ENROLLED = "enrolled"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"


class PathStatus(str, Enum):
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"


class AttemptCreate(BaseModel):
    question_id: int
    query: str
    is_correct: bool
    points_earned: int = 0
    industry: str
    difficulty: Difficulty


class Attempt(BaseModel):
    """A logged submission. feedback and output_data are not persisted."""
    question_id: int
    query: str
    is_correct: bool
    feedback: str = ""
    output_data: list = []
    points_earned: int = 0
    timestamp: int  # epoch milliseconds


class ModuleProgressEvent(BaseModel):
    course_id: int
    xp: int = 0


class XpEvent(BaseModel):
    xp: int
    challenge_id: int


class EnrollmentCreate(BaseModel):
    course_id: int


class EnrollmentStatusUpdate(BaseModel):
    status: Optional[EnrollmentStatus] = None


class Enrollment(BaseModel):
    id: Optional[int] = None
    user_id: str
    course_id: int
    status: str
    enrolled_at: Optional[datetime] = None
    last_accessed: Optional[datetime] = None
    completed_at: Optional[datetime] = None
    course: Optional[Dict[str, Any]] = None


class PathEnrollmentCreate(BaseModel):
    path_id: int


class PathStatusUpdate(BaseModel):
    status: PathStatus


class Certificate(BaseModel):
    id: str
    user_id: str
    course_title: str
    certificate_url: str
    issued_at: datetime


class LeaderboardEntry(BaseModel):
    rank: int
    name: str
    xp: int
    avatar: str
    is_user: bool = False
