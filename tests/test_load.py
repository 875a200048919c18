"""Tests for the daily load distributor and heat-map levels."""

from datetime import timedelta
from io import StringIO

import pytest

from caplane.logger import reset_logger, setup_logger
from caplane.models import Status
from caplane.scheduler import (
    CapacityConfig,
    CapacityModel,
    DailyLoadDistributor,
    LoadLevel,
    LoadThresholds,
    SchedulingEngine,
    classify_load,
)
from caplane.scheduler.load import DONE_COLOR_CLASS, OPEN_COLOR_CLASS
from tests.conftest import MONDAY, SATURDAY, make_task


@pytest.fixture
def distributor(weekdays_only: CapacityConfig) -> DailyLoadDistributor:
    return DailyLoadDistributor(CapacityModel(weekdays_only))


def _loads(load_map, key):  # type: ignore[no-untyped-def]
    return {entry.id: entry.load for entry in load_map[key].tasks}


class TestSingleDay:
    def test_posts_everything_on_start_day(self, distributor: DailyLoadDistributor) -> None:
        load_map = distributor.distribute([make_task("a", 300, "2024-01-01", "2024-01-01")])
        assert list(load_map) == ["2024-01-01"]
        assert load_map["2024-01-01"].total == pytest.approx(300)

    def test_posts_even_beyond_capacity(self, distributor: DailyLoadDistributor) -> None:
        load_map = distributor.distribute([make_task("a", 600, "2024-01-01", "2024-01-01")])
        assert load_map["2024-01-01"].total == pytest.approx(600)

    def test_posts_on_a_day_off(self, distributor: DailyLoadDistributor) -> None:
        load_map = distributor.distribute([make_task("a", 60, SATURDAY, SATURDAY)])
        assert load_map["2024-01-06"].total == pytest.approx(60)

    def test_due_before_start_treated_as_single_day(
        self, distributor: DailyLoadDistributor
    ) -> None:
        load_map = distributor.distribute([make_task("a", 60, "2024-01-03", "2024-01-01")])
        assert list(load_map) == ["2024-01-03"]


class TestMultiDay:
    def test_fills_headroom_in_date_order(self, distributor: DailyLoadDistributor) -> None:
        load_map = distributor.distribute([make_task("a", 600, "2024-01-01", "2024-01-03")])
        assert load_map["2024-01-01"].total == pytest.approx(420)
        assert load_map["2024-01-02"].total == pytest.approx(180)
        assert "2024-01-03" not in load_map

    def test_skips_days_off(self, distributor: DailyLoadDistributor) -> None:
        load_map = distributor.distribute([make_task("a", 840, "2024-01-05", "2024-01-08")])
        assert sorted(load_map) == ["2024-01-05", "2024-01-08"]
        assert load_map["2024-01-05"].total == pytest.approx(420)
        assert load_map["2024-01-08"].total == pytest.approx(420)

    def test_shorter_tasks_claim_headroom_first(
        self, distributor: DailyLoadDistributor
    ) -> None:
        """Overflow of the longer task is spread in proportion to capacity."""
        tasks = [
            make_task("b", 600, "2024-01-01", "2024-01-02"),
            make_task("a", 300, "2024-01-01", "2024-01-02"),
        ]
        load_map = distributor.distribute(tasks)

        assert _loads(load_map, "2024-01-01") == pytest.approx({"a": 300, "b": 150})
        assert _loads(load_map, "2024-01-02") == pytest.approx({"b": 450})
        assert load_map["2024-01-01"].total == pytest.approx(450)
        assert load_map["2024-01-02"].total == pytest.approx(450)

    def test_entries_merge_per_task(self, distributor: DailyLoadDistributor) -> None:
        tasks = [
            make_task("a", 300, "2024-01-01", "2024-01-02"),
            make_task("b", 600, "2024-01-01", "2024-01-02"),
        ]
        load_map = distributor.distribute(tasks)
        ids = [entry.id for entry in load_map["2024-01-01"].tasks]
        assert ids == ["a", "b"]

    def test_tiny_leftover_is_dropped(self, weekdays_only: CapacityConfig) -> None:
        distributor = DailyLoadDistributor(CapacityModel(weekdays_only))
        tasks = [
            make_task("a", 419.95, "2024-01-01", "2024-01-01"),
            make_task("b", 420.1, "2024-01-01", "2024-01-02"),
        ]
        load_map = distributor.distribute(tasks)
        # b fills Monday's last 0.05 and all of Tuesday; its 0.05 leftover vanishes
        assert load_map["2024-01-02"].total == pytest.approx(420)
        assert load_map["2024-01-01"].total == pytest.approx(420)

    def test_range_without_capacity_posts_nothing(
        self, distributor: DailyLoadDistributor
    ) -> None:
        output_stream = StringIO()
        setup_logger(1, stream=output_stream)
        try:
            load_map = distributor.distribute([make_task("a", 120, SATURDAY, "2024-01-07")])
            assert load_map == {}
            assert "no working days" in output_stream.getvalue()
        finally:
            reset_logger()


class TestConservation:
    def test_total_posted_equals_remaining_work(self, distributor: DailyLoadDistributor) -> None:
        tasks = [
            make_task("a", 60, "2024-01-01", "2024-01-05"),
            make_task("b", 2000, "2024-01-01", "2024-01-03"),
            make_task("c", 300, "2024-01-02", "2024-01-02"),
            make_task("d", 900, "2024-01-04", "2024-01-09", spent=300 * 60),
        ]
        load_map = distributor.distribute(tasks)
        total = sum(day.total for day in load_map.values())
        assert total == pytest.approx(sum(t.remaining_minutes for t in tasks))

    def test_fits_within_capacity_when_not_oversubscribed(
        self, distributor: DailyLoadDistributor
    ) -> None:
        tasks = [
            make_task("a", 400, "2024-01-01", "2024-01-05"),
            make_task("b", 800, "2024-01-01", "2024-01-05"),
            make_task("c", 200, "2024-01-03", "2024-01-04"),
        ]
        load_map = distributor.distribute(tasks)
        for day in load_map.values():
            assert day.total <= 420 + 1e-6

    def test_skips_tasks_without_remaining_work(self, distributor: DailyLoadDistributor) -> None:
        tasks = [
            make_task("a", 60, "2024-01-01", "2024-01-01", spent=3600),
            make_task("b", 0, "2024-01-01", "2024-01-01"),
            make_task("c", 60),
        ]
        assert distributor.distribute(tasks) == {}


class TestColorClass:
    def test_done_tasks_are_green(self, distributor: DailyLoadDistributor) -> None:
        tasks = [
            make_task("a", 60, "2024-01-01", "2024-01-01", status=Status.DONE),
            make_task("b", 60, "2024-01-01", "2024-01-01"),
        ]
        entries = {e.id: e for e in distributor.distribute(tasks)["2024-01-01"].tasks}
        assert entries["a"].color_class == DONE_COLOR_CLASS
        assert entries["b"].color_class == OPEN_COLOR_CLASS
        assert entries["a"].title == "A"


class TestClassifyLoad:
    @pytest.mark.parametrize(
        ("minutes", "expected"),
        [
            (0, LoadLevel.HEALTHY),
            (300, LoadLevel.HEALTHY),
            (350, LoadLevel.HEALTHY),
            (358, LoadLevel.NEAR_CAPACITY),
            (420, LoadLevel.NEAR_CAPACITY),
            (421, LoadLevel.OVERLOADED),
        ],
    )
    def test_thresholds(self, minutes: float, expected: LoadLevel) -> None:
        assert classify_load(minutes, 7) == expected

    def test_day_off(self) -> None:
        assert classify_load(0, 0) == LoadLevel.OFF
        assert classify_load(10, 0) == LoadLevel.OVERLOADED

    def test_custom_thresholds(self) -> None:
        thresholds = LoadThresholds(overloaded=1.2, near_capacity=0.5)
        assert classify_load(240, 7, thresholds) == LoadLevel.NEAR_CAPACITY
        assert classify_load(480, 7, thresholds) == LoadLevel.NEAR_CAPACITY
        assert classify_load(510, 7, thresholds) == LoadLevel.OVERLOADED


class TestEngineLoad:
    def test_engine_levels(self, weekdays_only: CapacityConfig) -> None:
        tasks = [
            make_task("a", 400, "2024-01-01", "2024-01-01"),
            make_task("b", 60, SATURDAY, SATURDAY),
        ]
        engine = SchedulingEngine(tasks, weekdays_only)
        assert engine.load_level(MONDAY) == LoadLevel.NEAR_CAPACITY
        assert engine.load_level(MONDAY + timedelta(days=1)) == LoadLevel.HEALTHY
        assert engine.load_level(SATURDAY) == LoadLevel.OVERLOADED
        assert engine.load_level(SATURDAY + timedelta(days=1)) == LoadLevel.OFF
        assert engine.day_load(MONDAY + timedelta(days=1)).total == 0

    def test_load_map_computed_once(self, weekdays_only: CapacityConfig) -> None:
        engine = SchedulingEngine([make_task("a", 60, "2024-01-01", "2024-01-01")], weekdays_only)
        assert engine.daily_load_map is engine.daily_load_map
