"""Tests for the habit view-model."""

from datetime import date, datetime, timezone

import pytest
import pytest_asyncio

from modules.habits.exceptions import HabitNotFoundError, InvalidHabitError
from modules.habits.models import Habit
from modules.habits.viewmodel import HabitViewModel
from shared.exceptions import BackendError, DecodingError

MONDAY = date(2025, 1, 6)
TUESDAY = date(2025, 1, 7)


@pytest.fixture
def vm(identity, fake_db):
    return HabitViewModel(identity, fake_db)


@pytest_asyncio.fixture
async def loaded(vm):
    await vm.load_for_user()
    return vm


class TestLoading:
    @pytest.mark.asyncio
    async def test_refresh_orders_by_start_date(self, vm, fake_db, test_user_id):
        for habit_id, start in (("b", "2025-02-01T00:00:00Z"), ("a", "2025-01-01T00:00:00Z")):
            fake_db.seed("habits", {
                "id": habit_id, "user_id": test_user_id, "title": habit_id,
                "interval": [1], "start_date": start, "completed_dates": [],
            })
        await vm.load_for_user()
        assert [h.id for h in vm.habits] == ["a", "b"]

    @pytest.mark.asyncio
    async def test_one_bad_row_aborts_fetch(self, vm, fake_db, test_user_id):
        fake_db.seed("habits", {"id": "bad", "user_id": test_user_id, "title": "x", "interval": [9]})
        with pytest.raises(DecodingError):
            await vm.load_for_user()
        assert not vm.is_loaded


class TestQueries:
    @pytest.mark.asyncio
    async def test_habits_due_on(self, loaded):
        weekdays = await loaded.add_habit("Run", interval=[1, 3, 5])
        await loaded.add_habit("Rest", interval=[0, 6])

        assert loaded.habits_due_on(MONDAY) == [weekdays]
        assert loaded.habits_due_on(TUESDAY) == []

    @pytest.mark.asyncio
    async def test_due_exactly_when_weekday_in_interval(self, loaded):
        habit = await loaded.add_habit("Stretch", interval=[2, 4])
        for offset in range(7):
            day = date(2025, 1, 5 + offset)  # Sunday through Saturday
            assert (habit in loaded.habits_due_on(day)) == (offset in (2, 4))


class TestMutations:
    @pytest.mark.asyncio
    async def test_add_habit_writes_document(self, loaded, fake_db):
        habit = await loaded.add_habit("Read", interval=[1], description="20 pages")

        row = fake_db.rows("habits", id=habit.id)[0]
        assert row["title"] == "Read"
        assert row["interval"] == [1]
        assert row["completed_dates"] == []

    @pytest.mark.asyncio
    async def test_add_habit_validation(self, loaded, fake_db):
        with pytest.raises(InvalidHabitError):
            await loaded.add_habit("  ")
        with pytest.raises(InvalidHabitError) as exc_info:
            await loaded.add_habit("Run", interval=[7])
        assert exc_info.value.details["field"] == "interval"
        assert fake_db.writes("habits") == []

    @pytest.mark.asyncio
    async def test_edit_habit(self, loaded, fake_db):
        habit = await loaded.add_habit("Run", interval=[1])

        edited = await loaded.edit_habit(habit, title="Jog", interval=[2, 2, 0])

        assert edited.id == habit.id
        assert edited.interval == [0, 2]
        assert loaded.habits == [edited]
        assert fake_db.rows("habits", id=habit.id)[0]["title"] == "Jog"

    @pytest.mark.asyncio
    async def test_complete_habit_toggles_and_replaces_document(self, loaded, fake_db):
        habit = await loaded.add_habit("Read", interval=[1])
        moment = datetime(2025, 1, 6, 8, tzinfo=timezone.utc)

        done = await loaded.complete_habit(habit, moment)
        assert done.is_completed_on(MONDAY)
        assert len(fake_db.rows("habits", id=habit.id)[0]["completed_dates"]) == 1

        undone = await loaded.complete_habit(done, moment)
        assert undone.completed_dates == []
        assert fake_db.rows("habits", id=habit.id)[0]["completed_dates"] == []
        assert fake_db.writes("habits")[-1].action == "upsert"

    @pytest.mark.asyncio
    async def test_delete_habit(self, loaded, fake_db):
        habit = await loaded.add_habit("Read")
        await loaded.delete_habit(habit)
        assert loaded.habits == []
        assert fake_db.rows("habits") == []

    @pytest.mark.asyncio
    async def test_unknown_habit(self, loaded):
        with pytest.raises(HabitNotFoundError):
            await loaded.complete_habit(Habit(title="ghost"))

    @pytest.mark.asyncio
    async def test_failed_completion_reconciles(self, loaded, fake_db):
        habit = await loaded.add_habit("Read", interval=[1])
        fake_db.fail("habits", "upsert")

        with pytest.raises(BackendError):
            await loaded.complete_habit(habit, datetime(2025, 1, 6, tzinfo=timezone.utc))

        assert loaded.get_habit(habit.id).completed_dates == []
