import datetime as dt
import unittest

from app import session_manager
from app.domain import CurrentConditions, LocationQuery, UnitSystem, WeatherSnapshot


def _snapshot(request_id, name="Paris", hour=12, query=None, units=UnitSystem.METRIC):
    observed = int(dt.datetime(2024, 1, 1, hour, tzinfo=dt.timezone.utc).timestamp())
    return WeatherSnapshot(
        request_id=request_id,
        query=query or LocationQuery.for_name(name),
        units=units,
        current=CurrentConditions(
            name=name, temperature=10.0, feels_like=9.0, humidity=70, pressure=1010, wind_speed=2.0,
            cloud_cover=20, condition="Clear", observed_at=observed, utc_offset=0,
        ),
        forecast=[],
    )


class TestSessionManager(unittest.TestCase):
    def setUp(self):
        session_manager.use_in_memory_store_for_tests()
        session_manager.clear_sessions()
        self.sid = session_manager.create_session(UnitSystem.METRIC)

    def test_apply_replaces_view_and_derives_theme(self):
        session_manager.begin_fetch(self.sid, 1)
        self.assertTrue(session_manager.apply_snapshot(self.sid, _snapshot(1, hour=20), search_name="Paris"))

        state = session_manager.get_session(self.sid)
        self.assertEqual(state.view.current.name, "Paris")
        self.assertTrue(state.view.is_night)
        self.assertTrue(state.dark_mode)
        self.assertEqual([s.name for s in state.recent_searches], ["Paris"])
        self.assertEqual(state.last_query, LocationQuery.for_name("Paris"))

    def test_stale_result_is_discarded(self):
        session_manager.begin_fetch(self.sid, 1)
        session_manager.begin_fetch(self.sid, 2)

        # newer request settles first, older one afterwards
        self.assertTrue(session_manager.apply_snapshot(self.sid, _snapshot(2, name="Rome"), search_name="Rome"))
        self.assertFalse(session_manager.apply_snapshot(self.sid, _snapshot(1, name="Oslo"), search_name="Oslo"))

        state = session_manager.get_session(self.sid)
        self.assertEqual(state.view.current.name, "Rome")
        self.assertEqual([s.name for s in state.recent_searches], ["Rome"])

    def test_error_keeps_previous_view(self):
        session_manager.begin_fetch(self.sid, 1)
        session_manager.apply_snapshot(self.sid, _snapshot(1), search_name="Paris")
        session_manager.begin_fetch(self.sid, 2)
        self.assertTrue(session_manager.record_error(self.sid, "Location not found. Please try again.", request_id=2))

        state = session_manager.get_session(self.sid)
        self.assertEqual(state.error, "Location not found. Please try again.")
        self.assertEqual(state.view.current.name, "Paris")

        session_manager.begin_fetch(self.sid, 3)
        session_manager.apply_snapshot(self.sid, _snapshot(3, name="Rome"), search_name="Rome")
        self.assertIsNone(session_manager.get_session(self.sid).error)

    def test_stale_error_is_ignored(self):
        session_manager.begin_fetch(self.sid, 1)
        session_manager.begin_fetch(self.sid, 2)
        self.assertFalse(session_manager.record_error(self.sid, "boom", request_id=1))
        self.assertIsNone(session_manager.get_session(self.sid).error)

    def test_geolocated_fetch_does_not_touch_recent_searches(self):
        session_manager.begin_fetch(self.sid, 1)
        coords = LocationQuery.for_coordinates(51.5, -0.12)
        session_manager.apply_snapshot(self.sid, _snapshot(1, name="London", query=coords))
        state = session_manager.get_session(self.sid)
        self.assertEqual(state.recent_searches, [])
        self.assertEqual(session_manager.refetch_query(state), coords)

    def test_units_and_theme(self):
        state = session_manager.set_units(self.sid, UnitSystem.IMPERIAL)
        self.assertIs(state.units, UnitSystem.IMPERIAL)
        self.assertTrue(session_manager.toggle_theme(self.sid).dark_mode)
        self.assertFalse(session_manager.toggle_theme(self.sid).dark_mode)

    def test_refetch_defaults_to_configured_city(self):
        state = session_manager.get_session(self.sid)
        self.assertEqual(session_manager.refetch_query(state).name, session_manager.settings.default_city)

    def test_unknown_session(self):
        self.assertIsNone(session_manager.get_session("missing"))
        self.assertIsNone(session_manager.toggle_theme("missing"))
        self.assertFalse(session_manager.apply_snapshot("missing", _snapshot(1)))


if __name__ == "__main__":
    unittest.main()
