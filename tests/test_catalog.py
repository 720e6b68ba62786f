import asyncio

import pytest

from app.modules.billing.schemas import PlanPermission
from app.modules.catalog.menu import CatalogMenu
from app.modules.catalog.overview import course_overview, is_lesson_locked, lesson_limit, track_overview
from app.modules.catalog.schemas import (
    ChallengeContent, Course, CourseCreate, CourseModuleCreate, CourseUpdate,
    LearningPathCreate, SavedChallenge
)
from app.modules.catalog.service import CatalogService, LearningPathService
from fakes import FakeSupabase, api_error


def _course(course_id, status="published", modules=None, created_at="2026-01-01T00:00:00+00:00"):
    return {
        "id": course_id,
        "title": f"Course {course_id}",
        "status": status,
        "created_at": created_at,
        "modules": modules or [],
    }


def _module(module_id, order):
    return {"id": module_id, "course_id": 1, "sequence_order": order, "title": f"Module {order}"}


# --- service ---

def test_course_modules_sorted_by_sequence() -> None:
    db = FakeSupabase(tables={"courses": [_course(1, modules=[_module(11, 3), _module(12, 1), _module(13, 2)])]})

    course = CatalogService(db).fetch_course_by_id(1)

    assert [m.sequence_order for m in course.modules] == [1, 2, 3]


def test_published_courses_filter_and_newest_first() -> None:
    db = FakeSupabase(tables={"courses": [
        _course(1, created_at="2026-01-01T00:00:00+00:00"),
        _course(2, status="draft"),
        _course(3, created_at="2026-03-01T00:00:00+00:00"),
    ]})

    courses = CatalogService(db).fetch_published_courses()

    assert [c.id for c in courses] == [3, 1]


def test_fetch_courses_failure_returns_empty_list() -> None:
    db = FakeSupabase(fail={"courses": api_error("500")})

    assert CatalogService(db).fetch_courses() == []


def test_missing_course_returns_none() -> None:
    assert CatalogService(FakeSupabase(tables={"courses": []})).fetch_course_by_id(9) is None


def test_create_course_draft_and_modules() -> None:
    db = FakeSupabase(tables={"courses": [], "course_modules": []})
    service = CatalogService(db)

    course = service.create_course_draft(CourseCreate(title="Window Functions", industry="Finance"))
    assert course.status == "draft"

    assert service.create_course_modules(course.id, [
        CourseModuleCreate(title="ROW_NUMBER"),
        CourseModuleCreate(title="RANK", sequence_order=5),
    ])
    rows = db.tables["course_modules"]
    assert [(r["title"], r["sequence_order"], r["course_id"]) for r in rows] == [
        ("ROW_NUMBER", 1, course.id),
        ("RANK", 5, course.id),
    ]


def test_update_course_details_ignores_unset_fields() -> None:
    db = FakeSupabase(tables={"courses": [_course(1)]})

    assert CatalogService(db).update_course_details(1, CourseUpdate(title="Renamed"))

    row = db.tables["courses"][0]
    assert row["title"] == "Renamed"
    assert row["status"] == "published"


def test_toggle_challenge_publish_flips_flag() -> None:
    db = FakeSupabase(tables={"saved_challenges": [
        {"id": 5, "title": "Churn", "challenge_json": {}, "is_published": True},
    ]})

    assert CatalogService(db).toggle_challenge_publish(5, True)
    assert db.tables["saved_challenges"][0]["is_published"] is False


def test_save_admin_challenge_stores_content() -> None:
    db = FakeSupabase(tables={"saved_challenges": []})
    challenge = ChallengeContent(title="Top customers", topic="GROUP BY", schema_sql="CREATE TABLE t (id int);")

    assert CatalogService(db).save_admin_challenge(challenge, "Retail", "Beginner")

    row = db.tables["saved_challenges"][0]
    assert row["title"] == "Top customers"
    assert row["is_published"] is True
    assert row["challenge_json"]["schema_sql"] == "CREATE TABLE t (id int);"


def test_inventory_duplicate_counts_as_saved() -> None:
    db = FakeSupabase(
        tables={"challenges_inventory": []},
        unique={"challenges_inventory": ("topic", "industry", "difficulty")},
    )
    service = CatalogService(db)
    challenge = ChallengeContent(title="Joins", topic="INNER JOIN")

    assert service.save_challenge_to_inventory("INNER JOIN", "Retail", "Beginner", challenge)
    assert service.save_challenge_to_inventory("INNER JOIN", "Retail", "Beginner", challenge)

    assert len(db.tables["challenges_inventory"]) == 1
    assert service.fetch_challenge_from_inventory("INNER JOIN", "Retail", "Beginner")["title"] == "Joins"


def test_inventory_unique_violation_race_is_ignored() -> None:
    db = FakeSupabase(
        tables={"challenges_inventory": [{"topic": "t", "industry": "i", "difficulty": "d", "challenge_json": {}}]},
        unique={"challenges_inventory": ("topic", "industry", "difficulty")},
    )
    service = CatalogService(db)
    # another writer inserted between the lookup and the insert
    service.fetch_challenge_from_inventory = lambda *args: None

    assert service.save_challenge_to_inventory("t", "i", "d", ChallengeContent(title="x", topic="t")) is True


def test_inventory_miss_returns_none() -> None:
    db = FakeSupabase(tables={"challenges_inventory": []})

    assert CatalogService(db).fetch_challenge_from_inventory("a", "b", "c") is None


def test_learning_path_courses_flattened_in_order() -> None:
    db = FakeSupabase(tables={"learning_paths": [{
        "id": 1,
        "title": "Analyst Track",
        "is_published": True,
        "courses": [
            {"sequence_order": 2, "course": _course(20)},
            {"sequence_order": 1, "course": _course(10)},
            {"sequence_order": 3, "course": None},
        ],
    }]})

    paths = LearningPathService(db).fetch_published_learning_paths()

    assert [c.id for c in paths[0].courses] == [10, 20]


def test_learning_path_membership() -> None:
    db = FakeSupabase(tables={"learning_paths": [], "learning_path_courses": []})
    service = LearningPathService(db)

    path = service.create_learning_path(LearningPathCreate(title="Engineer Track"))
    assert service.add_course_to_path(path.id, 7, 1)
    assert service.add_course_to_path(path.id, 8, 2)
    assert service.remove_course_from_path(path.id, 7)

    assert [r["course_id"] for r in db.tables["learning_path_courses"]] == [8]


# --- menu ---

class _Catalog:
    def __init__(self, courses, challenges=None):
        self.courses = courses
        self.challenges = challenges or []
        self.calls = 0

    def fetch_published_courses(self):
        self.calls += 1
        return self.courses

    def fetch_published_challenges(self):
        return self.challenges


def _courses(n):
    return [Course(id=i, title=f"Course {i}") for i in range(1, n + 1)]


@pytest.mark.asyncio
async def test_menu_splits_featured_and_more() -> None:
    menu = CatalogMenu(_Catalog(_courses(7)))

    await menu.load()

    assert [c.id for c in menu.featured_courses] == [1, 2]
    assert [c.id for c in menu.more_courses] == [3, 4, 5]
    assert menu.coming_soon is False


@pytest.mark.asyncio
async def test_menu_coming_soon_with_fewer_than_three_courses() -> None:
    menu = CatalogMenu(_Catalog(_courses(2)))

    await menu.load()
    response = menu.to_response()

    assert response.coming_soon is True
    assert response.more_courses == []


@pytest.mark.asyncio
async def test_menu_loads_once() -> None:
    catalog = _Catalog(_courses(3))
    menu = CatalogMenu(catalog)

    await menu.load()
    await menu.load()

    assert catalog.calls == 1


@pytest.mark.asyncio
async def test_disposed_menu_drops_results() -> None:
    catalog = _Catalog(_courses(3), [SavedChallenge(id=1, title="c", challenge_json={})])
    menu = CatalogMenu(catalog)

    task = asyncio.create_task(menu.load())
    await asyncio.sleep(0)
    menu.dispose()
    await task

    assert menu.courses == []
    assert menu.challenges == []
    assert menu.loaded is False


# --- overview ---

def test_course_overview_totals_and_skills() -> None:
    modules = [_module(i, i) for i in range(1, 11)]
    course = Course(**_course(1, modules=modules))

    overview = course_overview(course, PlanPermission(tier="basic", course_lesson_limit=3))

    assert overview.lesson_count == 10
    assert overview.total_points == 1000
    assert len(overview.skills) == 8
    assert overview.more_modules == 2
    assert overview.lesson_limit == 3


def test_lesson_lock_by_plan_permission() -> None:
    limited = PlanPermission(tier="free", course_lesson_limit=2)
    unlimited = PlanPermission(tier="pro", course_lesson_limit=-1)

    assert is_lesson_locked(1, limited) is False
    assert is_lesson_locked(2, limited) is True
    assert is_lesson_locked(50, unlimited) is False
    assert is_lesson_locked(0, None) is True
    assert lesson_limit(unlimited) is None
    assert lesson_limit(None) == 0


def test_track_overview() -> None:
    overview = track_overview("Beginner")

    assert overview.difficulty == "beginner"
    assert overview.challenge_count == 20
    assert overview.total_points == 2000
    assert len(overview.skills) == 8
    assert overview.more_modules == 12
    assert track_overview("expert") is None
