import json
import os
import tempfile
import unittest

from planner.domain.WeekPlan import SlotAddress
from planner.events.Event_Bus import EventBus, COMMAND_APPLIED, LEDGER_DEPLETED, LEDGER_EXPIRING_SNAPSHOT
from planner.events.web_observers import EventRecorder
from planner.infra.State_Repository import StateRepository
from planner.logic.consumption import drop_ingredient, set_servings
from planner.logic.grid.addressing import shift_week
from planner.logic.history import HistoryManager
from planner.logic.inventory import commands
from planner.logic.session import PlannerSession

from state_builders import make_state, count_of, WEEK

DINNER_MON = SlotAddress("dinner", 0)


class TestHistoryManager(unittest.TestCase):

    def test_capacity_drops_oldest(self):
        history = HistoryManager(capacity=2)
        states = [make_state() for _ in range(3)]
        for i, state in enumerate(states):
            state.current_week_start_date = f"2024-01-0{i + 1}"
            history.record(state)
        self.assertEqual(len(history), 2)
        self.assertEqual(history.undo(make_state()).current_week_start_date, "2024-01-03")
        self.assertEqual(history.undo(make_state()).current_week_start_date, "2024-01-02")
        self.assertIsNone(history.undo(make_state()))

    def test_record_clears_redo(self):
        history = HistoryManager()
        history.record(make_state())
        history.undo(make_state())
        self.assertTrue(history.can_redo)
        history.record(make_state())
        self.assertFalse(history.can_redo)
        self.assertEqual(history.status(), {"canUndo": True, "canRedo": False, "past": 1, "future": 0})


class TestPlannerSession(unittest.TestCase):

    def setUp(self):
        self.bus = EventBus()
        self.recorder = EventRecorder().attach(self.bus)
        self.session = PlannerSession(make_state(), event_bus=self.bus)

    def test_undo_redo_are_inverse(self):
        before = self.session.state.to_dict()
        self.assertTrue(self.session.dispatch(drop_ingredient, DINNER_MON, "ing-chicken"))
        self.assertTrue(self.session.dispatch(set_servings, DINNER_MON, 3))
        after = self.session.state.to_dict()

        self.assertTrue(self.session.undo())
        self.assertTrue(self.session.undo())
        self.assertEqual(self.session.state.to_dict(), before)
        self.assertFalse(self.session.undo())

        self.assertTrue(self.session.redo())
        self.assertTrue(self.session.redo())
        self.assertEqual(self.session.state.to_dict(), after)
        self.assertFalse(self.session.redo())

    def test_no_op_is_not_recorded(self):
        self.assertFalse(self.session.dispatch(drop_ingredient, DINNER_MON, "missing"))
        self.assertFalse(self.session.history.can_undo)
        self.assertEqual(self.recorder.get_events()['events'], [])

    def test_navigation_skips_history(self):
        self.assertTrue(self.session.navigate(shift_week, 1))
        self.assertEqual(self.session.state.current_week_start_date, "2024-01-08")
        self.assertFalse(self.session.history.can_undo)

    def test_events_for_commands_and_depletion(self):
        self.session.dispatch(commands.adjust_ingredient_count, "ing-chicken", -4)
        events = self.recorder.get_events()['events']
        self.assertEqual([e['type'] for e in events], [COMMAND_APPLIED, LEDGER_DEPLETED])
        self.assertEqual(events[0]['command'], "adjust_ingredient_count")
        self.assertEqual(events[1]['ingredientId'], "ing-chicken")

        # Already at zero: no second depletion event
        self.session.dispatch(drop_ingredient, DINNER_MON, "ing-chicken")
        later = self.recorder.get_events(since=events[-1]['id'])
        self.assertEqual([e['type'] for e in later['events']], [COMMAND_APPLIED])
        self.assertEqual(later['next_cursor'], events[-1]['id'] + 1)

    def test_expiring_snapshot(self):
        self.session.announce_expiring()
        events = self.recorder.get_events()['events']
        self.assertEqual(events[0]['type'], LEDGER_EXPIRING_SNAPSHOT)
        self.assertEqual(events[0]['count'], 0)

    def test_recorder_buffer_is_bounded(self):
        recorder = EventRecorder(max_events=3)
        for i in range(5):
            recorder.record(COMMAND_APPLIED, {"command": f"c{i}", "weekStartDate": WEEK})
        events = recorder.get_events()['events']
        self.assertEqual([e['command'] for e in events], ["c2", "c3", "c4"])


class TestStateRepository(unittest.TestCase):

    def setUp(self):
        self.tmp = tempfile.TemporaryDirectory()
        self.path = os.path.join(self.tmp.name, "state.json")
        self.repo = StateRepository(self.path)

    def tearDown(self):
        self.tmp.cleanup()

    def test_missing_file_loads_none(self):
        self.assertIsNone(self.repo.load())

    def test_session_persists_every_commit(self):
        session = PlannerSession(make_state(), event_bus=EventBus(), repository=self.repo)
        session.dispatch(drop_ingredient, DINNER_MON, "ing-chicken")
        session.dispatch(commands.set_inventory_sort, "expiry")

        loaded = self.repo.load()
        self.assertEqual(count_of(loaded, "ing-chicken"), 3)
        self.assertEqual(loaded.inventory_sort, "expiry")
        self.assertEqual(loaded.current_plan().get_cell("dinner", 0).family.ingredient_refs[0].name, "chicken")

        reopened = PlannerSession.open(self.repo, event_bus=EventBus())
        self.assertEqual(reopened.state.current_week_start_date, WEEK)
        self.assertEqual(reopened.state.ledger.to_dict(), session.state.ledger.to_dict())

    def test_corrupt_file_loads_none(self):
        with open(self.path, "w", encoding="utf-8") as f:
            f.write("{not json")
        self.assertIsNone(self.repo.load())
        with open(self.path, "w", encoding="utf-8") as f:
            json.dump({"ingredients": []}, f)
        self.assertIsNone(self.repo.load())

    def test_open_without_file_uses_demo(self):
        session = PlannerSession.open(self.repo, event_bus=EventBus())
        self.assertEqual(len(session.state.ingredients), 12)
        self.assertIsNotNone(session.state.current_plan())


if __name__ == '__main__':
    unittest.main()
