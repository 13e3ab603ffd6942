import json

import pytest

from weeklytweet.pageview import AnalyticsError, PageView, aggregate_page_views, parse_page_views


class TestPageView:

    def test_from_json(self):
        page_view = PageView.from_json({"uniques": "12", "pathname": "/some-post/"})
        assert page_view == PageView(uniques=12, pathname="some-post")

    def test_integer_uniques_are_accepted(self):
        assert PageView.from_json({"uniques": 4, "pathname": "/a-b"}).uniques == 4

    @pytest.mark.parametrize("entry", [
        {"uniques": "many", "pathname": "/a-b"},
        {"uniques": None, "pathname": "/a-b"},
        {"uniques": "1"},
        {"pathname": "/a-b"},
        {"uniques": "1", "pathname": 5},
        ["1", "/a-b"],
    ])
    def test_malformed_entries(self, entry):
        with pytest.raises(AnalyticsError):
            PageView.from_json(entry)


class TestParsePageViews:

    def test_parse(self):
        payload = json.dumps([
            {"uniques": "3", "pathname": "/a-b"},
            {"uniques": "1", "pathname": "/c-d"},
        ]).encode("utf-8")
        assert parse_page_views(payload) == [PageView(3, "a-b"), PageView(1, "c-d")]

    @pytest.mark.parametrize("payload", [b"not json", b'{"error": "unauthorized"}'])
    def test_invalid_payload(self, payload):
        with pytest.raises(AnalyticsError):
            parse_page_views(payload)


class TestAggregatePageViews:

    def test_same_pathname_is_merged(self):
        views = [PageView(10, "a-b"), PageView(25, "c-d"), PageView(7, "a-b"), PageView(12, "e-f")]
        assert aggregate_page_views(views) == [PageView(25, "c-d"), PageView(17, "a-b"), PageView(12, "e-f")]

    def test_limit(self):
        views = [PageView(n, f"post-{n}") for n in range(10)]
        top = aggregate_page_views(views, limit=2)
        assert [view.pathname for view in top] == ["post-9", "post-8"]

    def test_ties_keep_first_seen_order(self):
        views = [PageView(5, "x-1"), PageView(5, "x-2"), PageView(5, "x-3")]
        assert [view.pathname for view in aggregate_page_views(views, 2)] == ["x-1", "x-2"]

    def test_input_is_not_mutated(self):
        views = [PageView(1, "a-b"), PageView(2, "a-b")]
        aggregate_page_views(views)
        assert views == [PageView(1, "a-b"), PageView(2, "a-b")]

    def test_empty(self):
        assert aggregate_page_views([]) == []
