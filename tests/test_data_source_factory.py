import unittest

from app.data_sources import openweather_client
from app.data_sources.base import CallableWeatherDataSource
from app.data_sources.factory import DEFAULT_SOURCE_NAME, build_data_source
from app.domain import LocationQuery, UnitSystem


class DummySettings:
    def __init__(self, **kwargs):
        self.weather_source = kwargs.get("weather_source", DEFAULT_SOURCE_NAME)
        self.weather_api_key = kwargs.get("weather_api_key", "k")
        self.weather_base_url = kwargs.get("weather_base_url", "http://ow.test/data/2.5")
        self.request_timeout_seconds = kwargs.get("request_timeout_seconds", 3.0)


class TestDataSourceFactory(unittest.TestCase):
    def test_build_openweather_default(self):
        ds = build_data_source(DummySettings())
        self.assertIsInstance(ds, CallableWeatherDataSource)

    def test_source_name_is_case_insensitive(self):
        ds = build_data_source(DummySettings(weather_source="OpenWeather"))
        self.assertIsInstance(ds, CallableWeatherDataSource)

    def test_unknown_source_raises(self):
        with self.assertRaises(ValueError):
            build_data_source(DummySettings(weather_source="unknown-source"))

    def test_settings_are_bound_into_requests(self):
        calls = []

        class Resp:
            status_code = 200

            def raise_for_status(self):
                pass

            def json(self):
                return {"list": []}

        def fake_get(url, params=None, timeout=None):
            calls.append((url, params, timeout))
            return Resp()

        orig = openweather_client.session
        openweather_client.session = type("S", (), {"get": staticmethod(fake_get)})()
        try:
            ds = build_data_source(DummySettings(weather_api_key="secret"))
            self.assertEqual(ds.fetch_forecast(LocationQuery.for_name("Paris"), units=UnitSystem.METRIC), [])
        finally:
            openweather_client.session = orig

        url, params, timeout = calls[0]
        self.assertEqual(url, "http://ow.test/data/2.5/forecast")
        self.assertEqual(params["appid"], "secret")
        self.assertEqual(timeout, 3.0)


if __name__ == "__main__":
    unittest.main()
