import unittest

from fastapi.testclient import TestClient

from app.main import app, _STATIC_DIR


class TestMain(unittest.TestCase):
    def test_app_metadata(self):
        self.assertEqual(app.title, "SkyCast Dashboard")
        self.assertTrue(_STATIC_DIR.exists())

    def test_index_served(self):
        resp = TestClient(app).get("/")
        self.assertEqual(resp.status_code, 200)
        self.assertIn("SkyCast", resp.text)


if __name__ == "__main__":
    unittest.main()
