import unittest

from pydantic import ValidationError

from app.errors import GeolocationDenied, GeolocationUnsupported
from app.geolocation import GeolocationReport, resolve_geolocation


class TestResolveGeolocation(unittest.TestCase):
    def test_coordinates_become_query(self):
        query = resolve_geolocation(GeolocationReport(latitude=51.5, longitude=-0.12))
        self.assertTrue(query.is_coordinates)
        self.assertEqual((query.latitude, query.longitude), (51.5, -0.12))

    def test_denied(self):
        with self.assertRaises(GeolocationDenied) as ctx:
            resolve_geolocation(GeolocationReport(error="denied"))
        self.assertEqual(ctx.exception.user_message, "Unable to get your location. Please allow location access.")

    def test_unsupported(self):
        with self.assertRaises(GeolocationUnsupported) as ctx:
            resolve_geolocation(GeolocationReport(error="unsupported"))
        self.assertEqual(ctx.exception.user_message, "Geolocation is not supported by your browser")

    def test_out_of_range_rejected(self):
        with self.assertRaises(ValidationError):
            GeolocationReport(latitude=91, longitude=0)
        with self.assertRaises(ValidationError):
            GeolocationReport(latitude=0, longitude=-180.5)
        with self.assertRaises(ValidationError):
            GeolocationReport(latitude=float("nan"), longitude=0)

    def test_missing_coordinates_without_error_rejected(self):
        with self.assertRaises(ValidationError):
            GeolocationReport(latitude=10)


if __name__ == "__main__":
    unittest.main()
