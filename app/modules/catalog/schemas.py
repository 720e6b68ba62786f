from pydantic import BaseModel, ConfigDict
from typing import Optional, List, Dict, Any
from datetime import datetime


class ChallengeContent(BaseModel):
    """Challenge body as stored in challenge_json. Extra keys (schema, options, ...) are kept."""
    model_config = ConfigDict(extra="allow")

    title: str
    topic: str


class CourseModule(BaseModel):
    id: Optional[int] = None
    course_id: Optional[int] = None
    sequence_order: int = 0
    title: str
    skill_focus: Optional[str] = None
    task_description: Optional[str] = None
    expected_outcome: Optional[str] = None
    estimated_time: Optional[str] = None
    challenge_json: Optional[Dict[str, Any]] = None


class CourseModuleCreate(BaseModel):
    sequence_order: Optional[int] = None
    title: str
    skill_focus: Optional[str] = None
    task_description: Optional[str] = None
    expected_outcome: Optional[str] = None
    estimated_time: Optional[str] = None
    challenge_json: Optional[Dict[str, Any]] = None


class CourseModuleUpdate(BaseModel):
    sequence_order: Optional[int] = None
    title: Optional[str] = None
    skill_focus: Optional[str] = None
    task_description: Optional[str] = None
    expected_outcome: Optional[str] = None
    estimated_time: Optional[str] = None
    challenge_json: Optional[Dict[str, Any]] = None


class Course(BaseModel):
    id: int
    title: str
    industry: Optional[str] = None
    target_role: Optional[str] = None
    skill_level: Optional[str] = None
    main_context: Optional[str] = None
    status: str = "draft"
    created_at: Optional[datetime] = None
    modules: List[CourseModule] = []


class CourseCreate(BaseModel):
    title: str
    industry: Optional[str] = None
    target_role: Optional[str] = None
    skill_level: Optional[str] = None
    main_context: Optional[str] = None


class CourseUpdate(BaseModel):
    title: Optional[str] = None
    industry: Optional[str] = None
    target_role: Optional[str] = None
    skill_level: Optional[str] = None
    main_context: Optional[str] = None


class CourseStatusUpdate(BaseModel):
    status: str  # draft | outline_ready | generating | published


class SavedChallenge(BaseModel):
    id: int
    title: str
    topic: Optional[str] = None
    difficulty: Optional[str] = None
    industry: Optional[str] = None
    challenge_json: Dict[str, Any]
    created_at: Optional[datetime] = None
    is_published: bool = True


class SavedChallengeCreate(BaseModel):
    challenge: ChallengeContent
    industry: str
    difficulty: str


class InventoryEntry(BaseModel):
    topic: str
    industry: str
    difficulty: str
    challenge: ChallengeContent


class LearningPath(BaseModel):
    id: int
    title: str
    description: Optional[str] = None
    target_role: Optional[str] = None
    industry: Optional[str] = None
    is_published: bool = False
    created_at: Optional[datetime] = None
    courses: List[Course] = []


class LearningPathCreate(BaseModel):
    title: str
    description: Optional[str] = None
    target_role: Optional[str] = None
    industry: Optional[str] = None
    is_published: bool = False


class LearningPathUpdate(BaseModel):
    title: Optional[str] = None
    description: Optional[str] = None
    target_role: Optional[str] = None
    industry: Optional[str] = None
    is_published: Optional[bool] = None


class PathCourseAdd(BaseModel):
    course_id: int
    sequence_order: int


class CatalogMenuResponse(BaseModel):
    featured_courses: List[Course]
    more_courses: List[Course]
    coming_soon: bool
    challenges: List[SavedChallenge]


class CourseOverview(BaseModel):
    course_id: int
    title: str
    lesson_count: int
    total_points: int
    skills: List[CourseModule]
    more_modules: int
    lesson_limit: Optional[int] = None  # None = unlimited


class TrackSkill(BaseModel):
    id: int
    topic: str
    description: str


class TrackOverview(BaseModel):
    difficulty: str
    challenge_count: int
    total_points: int
    skills: List[TrackSkill]
    more_modules: int
