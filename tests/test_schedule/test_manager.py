"""Tests for reading plans."""

from datetime import date, timedelta

import pytest

from bookkeeper.db.schemas import BookAddRequest, ProgressUpdate
from bookkeeper.errors import NotFoundError, ValidationError
from bookkeeper.reading.progress import ProgressTracker
from bookkeeper.schedule.manager import PlanManager, project_plan
from bookkeeper.schedule.schemas import ReadingPlanRequest

OWNER = "auth0|reader-1"
OTHER_OWNER = "auth0|reader-2"
DAY_1 = date(2025, 3, 1)
TITLE = "The Name of the Wind"


class TestProjectPlan:
    """Tests for the finish date projection."""

    def test_even_division(self):
        """Test 300 pages at 30 a day takes 10 days."""
        projection = project_plan(300, 0, 30, today=DAY_1)

        assert projection.pages_remaining == 300
        assert projection.estimated_days == 10
        assert projection.end_date == date(2025, 3, 11)

    def test_rounds_up(self):
        """Test a partial final day counts as a full day."""
        projection = project_plan(300, 0, 40, today=DAY_1)
        assert projection.estimated_days == 8

    def test_accounts_for_pages_read(self):
        projection = project_plan(300, 120, 30, today=DAY_1)

        assert projection.pages_remaining == 180
        assert projection.estimated_days == 6

    @pytest.mark.parametrize("pages_read", [300, 310])
    def test_finished_book(self, pages_read):
        """Test nothing left to read means zero days, ending today."""
        projection = project_plan(300, pages_read, 30, today=DAY_1)

        assert projection.pages_remaining == 300 - pages_read
        assert projection.estimated_days == 0
        assert projection.end_date == DAY_1

    @pytest.mark.parametrize("pages_per_day", [0, -3])
    def test_rejects_non_positive_pace(self, pages_per_day):
        with pytest.raises(ValidationError):
            project_plan(300, 0, pages_per_day, today=DAY_1)

    def test_end_date_is_start_plus_days(self):
        """Test the end date always lands estimated_days after today."""
        for pages_per_day in range(1, 50, 7):
            projection = project_plan(257, 13, pages_per_day, today=DAY_1)
            assert projection.end_date == DAY_1 + timedelta(days=projection.estimated_days)


class TestPlanManager:
    """Tests for creating and listing plans."""

    def test_create_plan(self, plan_manager: PlanManager, created_book):
        """Test creating a plan stores the projection."""
        plan, created = plan_manager.create_or_update_plan(
            OWNER, ReadingPlanRequest(book_title=TITLE, pages_per_day=30), today=DAY_1
        )

        assert created is True
        assert plan.user_id == OWNER
        assert plan.book_title == TITLE
        assert plan.total_pages == 300
        assert plan.pages_remaining == 300
        assert plan.pages_per_day == 30
        assert plan.estimated_days == 10
        assert plan.start_date == DAY_1
        assert plan.end_date == date(2025, 3, 11)

    def test_replace_plan_in_place(self, plan_manager: PlanManager, created_book):
        """Test a second request for the same book updates the same plan."""
        first, _ = plan_manager.create_or_update_plan(
            OWNER, ReadingPlanRequest(book_title=TITLE, pages_per_day=30), today=DAY_1
        )
        second, created = plan_manager.create_or_update_plan(
            OWNER, ReadingPlanRequest(book_title=TITLE, pages_per_day=50), today=DAY_1
        )

        assert created is False
        assert second.id == first.id
        assert second.pages_per_day == 50
        assert second.estimated_days == 6
        assert second.updated_at is not None
        assert len(plan_manager.list_plans(OWNER, today=DAY_1)) == 1

    def test_plan_uses_current_progress(
        self, plan_manager: PlanManager, tracker: ProgressTracker, created_book
    ):
        """Test the projection starts from the pages already read."""
        tracker.update_progress(
            OWNER, ProgressUpdate(book_title=TITLE, current_page=150), today=DAY_1
        )
        plan, _ = plan_manager.create_or_update_plan(
            OWNER, ReadingPlanRequest(book_title=TITLE, pages_per_day=25), today=DAY_1
        )

        assert plan.pages_read == 150
        assert plan.pages_remaining == 150
        assert plan.estimated_days == 6

    def test_plan_for_finished_book(self, plan_manager: PlanManager, tracker: ProgressTracker):
        tracker.add_book(
            OWNER, BookAddRequest(book_title="Done", total_pages=100, pages_read=100)
        )
        plan, _ = plan_manager.create_or_update_plan(
            OWNER, ReadingPlanRequest(book_title="Done", pages_per_day=10), today=DAY_1
        )

        assert plan.estimated_days == 0
        assert plan.end_date == DAY_1

    def test_plan_for_missing_book(self, plan_manager: PlanManager):
        """Test a plan needs an existing book."""
        with pytest.raises(NotFoundError):
            plan_manager.create_or_update_plan(
                OWNER, ReadingPlanRequest(book_title="Missing", pages_per_day=10)
            )

    def test_plan_for_other_owners_book(self, plan_manager: PlanManager, created_book):
        with pytest.raises(NotFoundError):
            plan_manager.create_or_update_plan(
                OTHER_OWNER, ReadingPlanRequest(book_title=TITLE, pages_per_day=10)
            )

    def test_request_rejects_zero_pace(self):
        with pytest.raises(ValueError):
            ReadingPlanRequest(book_title=TITLE, pages_per_day=0)

    def test_get_plan(self, plan_manager: PlanManager, created_book):
        plan_manager.create_or_update_plan(
            OWNER, ReadingPlanRequest(book_title=TITLE, pages_per_day=30), today=DAY_1
        )
        plan = plan_manager.get_plan(OWNER, TITLE, today=DAY_1)

        assert plan.pages_per_day == 30

    def test_get_plan_missing(self, plan_manager: PlanManager, created_book):
        with pytest.raises(NotFoundError, match="No reading plan"):
            plan_manager.get_plan(OWNER, TITLE)

    def test_list_plans_recomputes(
        self, plan_manager: PlanManager, tracker: ProgressTracker, created_book
    ):
        """Test listed plans reflect progress made after the plan was saved."""
        plan_manager.create_or_update_plan(
            OWNER, ReadingPlanRequest(book_title=TITLE, pages_per_day=30), today=DAY_1
        )
        tracker.update_progress(
            OWNER, ProgressUpdate(book_title=TITLE, current_page=90), today=DAY_1
        )

        later = DAY_1 + timedelta(days=3)
        [plan] = plan_manager.list_plans(OWNER, today=later)

        assert plan.pages_remaining == 210
        assert plan.estimated_days == 7
        assert plan.end_date == later + timedelta(days=7)
        assert plan.start_date == DAY_1

    def test_list_plans_scoped_to_owner(
        self, plan_manager: PlanManager, tracker: ProgressTracker, created_book
    ):
        tracker.add_book(OTHER_OWNER, BookAddRequest(book_title=TITLE, total_pages=200))
        plan_manager.create_or_update_plan(
            OTHER_OWNER, ReadingPlanRequest(book_title=TITLE, pages_per_day=20)
        )

        assert plan_manager.list_plans(OWNER) == []
        assert len(plan_manager.list_plans(OTHER_OWNER)) == 1
