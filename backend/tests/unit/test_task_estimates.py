"""
Tests for chore time estimates and suggestions.
"""

from chorely.services.task_estimates import get_task_estimate, get_task_suggestions


class TestGetTaskEstimate:
    def test_exact_title_is_case_insensitive(self):
        estimate = get_task_estimate("  Clean Bathroom ")

        assert estimate.minutes == 25
        assert estimate.tips == "Start with toilet, then sink, finally shower"

    def test_title_containing_known_chore(self):
        assert get_task_estimate("Grocery shopping for the week").minutes == 60

    def test_short_title_inside_known_chore(self):
        assert get_task_estimate("fold").minutes == 20

    def test_falls_back_to_category(self):
        estimate = get_task_estimate("Scrub tiles", "Outdoor")

        assert estimate.minutes == 35
        assert estimate.tips is None

    def test_unknown_category_uses_default(self):
        assert get_task_estimate("Scrub tiles", "Pet Care").minutes == 20
        assert get_task_estimate("Scrub tiles").minutes == 20


class TestGetTaskSuggestions:
    def test_first_five_of_category(self):
        assert get_task_suggestions("Cleaning") == [
            "vacuum living room",
            "vacuum bedroom",
            "vacuum stairs",
            "mop kitchen floor",
            "mop bathroom floor",
        ]

    def test_category_without_known_chores(self):
        assert get_task_suggestions("Pet Care") == []

    def test_limit(self):
        assert get_task_suggestions("laundry", limit=2) == ["wash clothes", "dry clothes"]
