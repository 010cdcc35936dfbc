"""Tests for the assignment engine (pure core and mutable holder)."""

import pytest

from workshop_scheduler.scheduling.engine import (
    AssignmentEngine,
    AssignmentState,
    auto_assign,
    compute_disabled_staff,
    toggle_assignment,
    week_assignment_counts,
)
from workshop_scheduler.scheduling.types import SegmentAssignment, Weekday

WEEK_ONE_WORKSHOPS = [
    ("mon-ws1", Weekday.MONDAY),
    ("mon-ws2", Weekday.MONDAY),
    ("tue-ws1", Weekday.TUESDAY),
    ("tue-ws2", Weekday.TUESDAY),
    ("wed-ws1", Weekday.WEDNESDAY),
    ("wed-ws2", Weekday.WEDNESDAY),
    ("thu-ws1", Weekday.THURSDAY),
    ("thu-ws2", Weekday.THURSDAY),
]


def _toggle_all(state, programme, staff_id, slots, week=1, **kwargs):
    for segment_id, day in slots:
        state = toggle_assignment(state, programme, segment_id, week, day, staff_id, **kwargs)
    return state


class TestToggleAssignment:
    """Tests for toggle_assignment."""

    def test_toggle_on_creates_record(self, programme):
        state = toggle_assignment(AssignmentState(), programme, "mon-ws1", 1, Weekday.MONDAY, "staff-001")
        record = state.lookup("mon-ws1", 1, Weekday.MONDAY)
        assert record is not None
        assert record.staff_ids == frozenset({"staff-001"})

    def test_toggle_on_adds_to_existing_record(self, programme):
        state = toggle_assignment(AssignmentState(), programme, "mon-ws1", 1, Weekday.MONDAY, "staff-001")
        state = toggle_assignment(state, programme, "mon-ws1", 1, Weekday.MONDAY, "staff-002")
        assert len(state.assignments) == 1
        assert state.lookup("mon-ws1", 1, Weekday.MONDAY).staff_ids == frozenset({"staff-001", "staff-002"})

    def test_toggle_off_removes_staff(self, programme):
        state = toggle_assignment(AssignmentState(), programme, "mon-ws1", 1, Weekday.MONDAY, "staff-001")
        state = toggle_assignment(state, programme, "mon-ws1", 1, Weekday.MONDAY, "staff-002")
        state = toggle_assignment(state, programme, "mon-ws1", 1, Weekday.MONDAY, "staff-001")
        assert state.lookup("mon-ws1", 1, Weekday.MONDAY).staff_ids == frozenset({"staff-002"})

    def test_removing_last_staff_deletes_record(self, programme):
        state = toggle_assignment(AssignmentState(), programme, "tue-ws2", 3, Weekday.TUESDAY, "staff-001")
        state = toggle_assignment(state, programme, "tue-ws2", 3, Weekday.TUESDAY, "staff-001")
        assert state.lookup("tue-ws2", 3, Weekday.TUESDAY) is None
        assert state.assignments == ()

    def test_toggle_pair_restores_prior_state(self, programme):
        state = _toggle_all(AssignmentState(), programme, "staff-001", WEEK_ONE_WORKSHOPS[:3])
        state = toggle_assignment(state, programme, "mon-ws1", 1, Weekday.MONDAY, "staff-002")
        before = state.as_mapping()

        for staff_id in ("staff-002", "staff-003"):
            toggled = toggle_assignment(state, programme, "mon-ws1", 1, Weekday.MONDAY, staff_id)
            restored = toggle_assignment(toggled, programme, "mon-ws1", 1, Weekday.MONDAY, staff_id)
            assert restored.as_mapping() == before

    def test_one_record_per_slot(self, programme):
        state = AssignmentState()
        for staff_id in ("staff-001", "staff-002", "staff-003"):
            state = toggle_assignment(state, programme, "thu-ws1", 2, Weekday.THURSDAY, staff_id)
        keys = [a.key for a in state.assignments]
        assert len(keys) == len(set(keys)) == 1

    def test_same_segment_in_other_week_is_separate(self, programme):
        state = toggle_assignment(AssignmentState(), programme, "mon-ws1", 1, Weekday.MONDAY, "staff-001")
        state = toggle_assignment(state, programme, "mon-ws1", 2, Weekday.MONDAY, "staff-001")
        assert len(state.assignments) == 2


class TestToggleNoOps:
    """Tests for toggles that must leave state untouched."""

    @pytest.mark.parametrize(
        "segment_id,day",
        [
            ("mon-brk", Weekday.MONDAY),
            ("tue-brk", Weekday.TUESDAY),
            ("wed-brk", Weekday.WEDNESDAY),
            ("thu-brk", Weekday.THURSDAY),
        ],
    )
    def test_break_segments_are_never_assigned(self, programme, segment_id, day):
        state = AssignmentState()
        assert toggle_assignment(state, programme, segment_id, 1, day, "staff-001") is state

    def test_break_noop_under_soft_cap(self, programme):
        state = AssignmentState()
        result = toggle_assignment(state, programme, "mon-brk", 1, Weekday.MONDAY, "staff-001", cap_enforcement="soft")
        assert result is state

    @pytest.mark.parametrize(
        "segment_id,week,day",
        [
            ("mon-ws9", 1, Weekday.MONDAY),
            ("mon-ws1", 11, Weekday.MONDAY),
            ("mon-ws1", 1, Weekday.FRIDAY),
            ("mon-ws1", 1, "Funday"),
        ],
    )
    def test_lookup_miss_is_noop(self, programme, segment_id, week, day):
        state = AssignmentState()
        assert toggle_assignment(state, programme, segment_id, week, day, "staff-001") is state


class TestWeeklyCap:
    """Tests for the per-staff weekly cap."""

    def test_hard_cap_rejects_fifth_assignment(self, programme):
        state = _toggle_all(AssignmentState(), programme, "staff-001", WEEK_ONE_WORKSHOPS[:4])
        rejected = toggle_assignment(state, programme, "wed-ws2", 1, Weekday.WEDNESDAY, "staff-001")
        assert rejected is state
        assert state.count_for("staff-001", 1) == 4

    def test_cap_never_exceeded_after_toggle_sequence(self, programme):
        state = AssignmentState()
        for _ in range(3):
            state = _toggle_all(state, programme, "staff-001", WEEK_ONE_WORKSHOPS)
            assert state.count_for("staff-001", 1) <= 4

    def test_cap_counts_segments_not_days(self, programme):
        # Two segments on Monday and two on Tuesday already reach the cap
        state = _toggle_all(AssignmentState(), programme, "staff-001", WEEK_ONE_WORKSHOPS[:4])
        assert compute_disabled_staff(state, 1) == {"staff-001"}

    def test_cap_is_per_week(self, programme):
        state = _toggle_all(AssignmentState(), programme, "staff-001", WEEK_ONE_WORKSHOPS[:4])
        state = toggle_assignment(state, programme, "mon-ws1", 2, Weekday.MONDAY, "staff-001")
        assert state.count_for("staff-001", 2) == 1

    def test_removal_allowed_at_cap(self, programme):
        state = _toggle_all(AssignmentState(), programme, "staff-001", WEEK_ONE_WORKSHOPS[:4])
        state = toggle_assignment(state, programme, "mon-ws1", 1, Weekday.MONDAY, "staff-001")
        assert state.count_for("staff-001", 1) == 3

    def test_soft_cap_allows_fifth_assignment(self, programme):
        state = _toggle_all(
            AssignmentState(), programme, "staff-001", WEEK_ONE_WORKSHOPS[:5], cap_enforcement="soft"
        )
        assert state.count_for("staff-001", 1) == 5
        assert "staff-001" in compute_disabled_staff(state, 1)

    def test_custom_cap(self, programme):
        state = _toggle_all(AssignmentState(), programme, "staff-001", WEEK_ONE_WORKSHOPS, cap=2)
        assert state.count_for("staff-001", 1) == 2

    def test_rejection_is_logged(self, programme, log_messages):
        state = _toggle_all(AssignmentState(), programme, "staff-001", WEEK_ONE_WORKSHOPS[:4])
        toggle_assignment(state, programme, "wed-ws2", 1, Weekday.WEDNESDAY, "staff-001")
        assert any("weekly cap of 4 reached" in message for message in log_messages)


class TestDisabledStaff:
    """Tests for the disabled staff view."""

    def test_under_cap_not_disabled(self, programme):
        state = _toggle_all(AssignmentState(), programme, "staff-001", WEEK_ONE_WORKSHOPS[:3])
        assert compute_disabled_staff(state, 1) == set()

    def test_only_target_week_counts(self, programme):
        state = _toggle_all(AssignmentState(), programme, "staff-001", WEEK_ONE_WORKSHOPS[:4])
        assert compute_disabled_staff(state, 2) == set()

    def test_week_counts(self, programme):
        state = _toggle_all(AssignmentState(), programme, "staff-001", WEEK_ONE_WORKSHOPS[:2])
        state = toggle_assignment(state, programme, "mon-ws1", 1, Weekday.MONDAY, "staff-002")
        assert week_assignment_counts(state, 1) == {"staff-001": 2, "staff-002": 1}


class TestAutoAssign:
    """Tests for the greedy auto-assign pass."""

    def test_first_fit_in_list_order(self, programme, staff_factory):
        staff = [staff_factory(name) for name in ("A", "B", "C", "D", "E")]
        state = auto_assign(AssignmentState(), programme, 1, staff)

        assigned = [state.lookup(segment_id, 1, day).staff_ids for segment_id, day in WEEK_ONE_WORKSHOPS]
        assert assigned == [frozenset({"A"})] * 4 + [frozenset({"B"})] * 4
        assert max(week_assignment_counts(state, 1).values()) <= 4

    def test_leaves_slots_unassigned_when_caps_exhausted(self, programme, staff_factory):
        state = auto_assign(AssignmentState(), programme, 1, [staff_factory("A")])
        assert len(state.assignments) == 4
        assert state.lookup("wed-ws1", 1, Weekday.WEDNESDAY) is None
        assert state.lookup("thu-ws2", 1, Weekday.THURSDAY) is None

    def test_never_assigns_breaks(self, programme, staff_factory):
        state = auto_assign(AssignmentState(), programme, 1, [staff_factory(name) for name in "ABC"])
        assert all(not a.segment_id.endswith("-brk") for a in state.assignments)

    def test_counts_seeded_from_existing_assignments(self, programme, staff_factory):
        state = _toggle_all(AssignmentState(), programme, "A", WEEK_ONE_WORKSHOPS[4:7])
        state = auto_assign(state, programme, 1, [staff_factory("A"), staff_factory("B")])

        assert state.count_for("A", 1) == 4
        assert state.lookup("mon-ws1", 1, Weekday.MONDAY).staff_ids == frozenset({"A"})
        assert state.lookup("mon-ws2", 1, Weekday.MONDAY).staff_ids == frozenset({"B"})

    def test_skips_staff_already_on_segment(self, programme, staff_factory):
        state = toggle_assignment(AssignmentState(), programme, "mon-ws1", 1, Weekday.MONDAY, "A")
        state = auto_assign(state, programme, 1, [staff_factory("A"), staff_factory("B")])
        assert state.lookup("mon-ws1", 1, Weekday.MONDAY).staff_ids == frozenset({"A", "B"})

    def test_other_weeks_untouched(self, programme, staff_factory):
        state = toggle_assignment(AssignmentState(), programme, "mon-ws1", 2, Weekday.MONDAY, "Z")
        state = auto_assign(state, programme, 1, [staff_factory("A"), staff_factory("B")])
        assert state.lookup("mon-ws1", 2, Weekday.MONDAY).staff_ids == frozenset({"Z"})
        assert state.for_week(2) == [
            SegmentAssignment(segment_id="mon-ws1", week=2, day=Weekday.MONDAY, staff_ids=frozenset({"Z"}))
        ]

    def test_no_staff_or_missing_week_is_noop(self, programme, staff_factory):
        assert auto_assign(AssignmentState(), programme, 1, []).assignments == ()
        assert auto_assign(AssignmentState(), programme, 12, [staff_factory("A")]).assignments == ()

    def test_deterministic(self, programme, staff_factory):
        staff = [staff_factory(name) for name in "ABC"]
        assert auto_assign(AssignmentState(), programme, 1, staff) == auto_assign(
            AssignmentState(), programme, 1, staff
        )


class TestAssignmentEngine:
    """Tests for the mutable engine holder."""

    def test_toggle_reports_change(self, programme):
        engine = AssignmentEngine(programme)
        assert engine.toggle("mon-ws1", 1, Weekday.MONDAY, "staff-001") is True
        assert engine.toggle("mon-brk", 1, Weekday.MONDAY, "staff-001") is False
        assert [a.segment_id for a in engine.assignments] == ["mon-ws1"]

    def test_on_change_called_only_for_changes(self, programme):
        changes = []
        engine = AssignmentEngine(programme, on_change=changes.append)
        engine.toggle("mon-ws1", 1, Weekday.MONDAY, "staff-001")
        engine.toggle("mon-brk", 1, Weekday.MONDAY, "staff-001")
        engine.toggle("mon-ws1", 1, Weekday.MONDAY, "staff-001")
        assert len(changes) == 2
        assert changes[-1] == AssignmentState()

    def test_hard_cap_through_engine(self, programme):
        engine = AssignmentEngine(programme, cap=1)
        engine.toggle("mon-ws1", 1, Weekday.MONDAY, "staff-001")
        assert engine.toggle("mon-ws2", 1, Weekday.MONDAY, "staff-001") is False
        assert engine.disabled_staff(1) == {"staff-001"}

    def test_auto_assign_through_engine(self, programme, staff_factory):
        engine = AssignmentEngine(programme)
        assert engine.auto_assign(1, [staff_factory("A"), staff_factory("B")]) is True
        assert engine.week_counts(1) == {"A": 4, "B": 4}

    def test_replace_state_does_not_notify(self, programme):
        changes = []
        engine = AssignmentEngine(programme, on_change=changes.append)
        restored = AssignmentState(
            assignments=(
                SegmentAssignment(segment_id="mon-ws1", week=1, day=Weekday.MONDAY, staff_ids=frozenset({"x"})),
            )
        )
        engine.replace_state(restored)
        assert engine.state is restored
        assert changes == []


class TestSegmentAssignmentModel:
    """Tests for the assignment record model."""

    def test_empty_staff_set_rejected(self):
        with pytest.raises(ValueError):
            SegmentAssignment(segment_id="mon-ws1", week=1, day=Weekday.MONDAY, staff_ids=frozenset())

    def test_serializes_camel_case_with_sorted_staff(self):
        record = SegmentAssignment(
            segment_id="mon-ws1", week=1, day=Weekday.MONDAY, staff_ids=frozenset({"b", "a"})
        )
        assert record.model_dump(mode="json", by_alias=True) == {
            "segmentId": "mon-ws1",
            "week": 1,
            "day": "Monday",
            "staffIds": ["a", "b"],
        }
