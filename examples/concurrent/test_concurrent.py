"""Tests for the concurrent rendering example."""


class TestConcurrentApp:
    """Verify 8 threads render correctly without cross-contamination."""

    def test_all_pages_rendered(self, example_app) -> None:
        assert len(example_app.results) == 8

    def test_each_page_has_its_own_data(self, example_app) -> None:
        for i, html in enumerate(example_app.results):
            assert f'id="page-{i}"' in html
            assert f"<footer>Page {i}</footer>" in html

    def test_no_cross_contamination(self, example_app) -> None:
        for i, html in enumerate(example_app.results):
            assert f"tag-{i}-a" in html
            for j in range(8):
                if j != i:
                    assert f"tag-{j}-a" not in html

    def test_results_are_distinct(self, example_app) -> None:
        assert len(set(example_app.results)) == 8
