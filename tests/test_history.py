import unittest

from app.domain import RecentSearch
from app.history import toggle_favorite, update_recent_searches


class TestUpdateRecentSearches(unittest.TestCase):
    def test_duplicate_name_is_ignored(self):
        history = update_recent_searches([], "Paris")
        history = update_recent_searches(history, "Paris")
        self.assertEqual([s.name for s in history], ["Paris"])

    def test_window_keeps_five_most_recent_first(self):
        history = []
        for name in ["A", "B", "C", "D", "E", "F"]:
            history = update_recent_searches(history, name)
        self.assertEqual([s.name for s in history], ["F", "E", "D", "C", "B"])

    def test_empty_name_is_noop(self):
        history = [RecentSearch(id="1", name="Paris")]
        self.assertEqual(update_recent_searches(history, ""), history)

    def test_ids_are_unique_and_input_untouched(self):
        original = update_recent_searches([], "Paris")
        updated = update_recent_searches(original, "Rome")
        self.assertEqual(len(original), 1)
        self.assertEqual(len({s.id for s in updated}), 2)

    def test_match_is_exact(self):
        history = update_recent_searches([], "paris")
        history = update_recent_searches(history, "Paris")
        self.assertEqual([s.name for s in history], ["Paris", "paris"])

    def test_custom_limit(self):
        history = []
        for name in ["A", "B", "C"]:
            history = update_recent_searches(history, name, limit=2)
        self.assertEqual([s.name for s in history], ["C", "B"])


class TestToggleFavorite(unittest.TestCase):
    def test_add_then_remove(self):
        favorites = toggle_favorite([], "Paris")
        self.assertEqual(favorites, ["Paris"])
        favorites = toggle_favorite(favorites, "Rome")
        self.assertEqual(favorites, ["Paris", "Rome"])
        self.assertEqual(toggle_favorite(favorites, "Paris"), ["Rome"])

    def test_exact_membership(self):
        self.assertEqual(toggle_favorite(["Paris"], "paris"), ["Paris", "paris"])


if __name__ == "__main__":
    unittest.main()
