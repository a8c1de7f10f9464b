"""
Unit tests for URL resolution and content metrics.
"""

import pytest

from pageharvest.extractor.metrics import ContentMetrics, calculate_metrics, count_words, reading_time
from pageharvest.extractor.urls import host_of, is_absolute_http, is_external, resolve_url

BASE = "https://example.com/articles/2023/story.html"


class TestResolveUrl:
    """Test cases for resolve_url."""

    @pytest.mark.parametrize(
        "reference, expected",
        [
            ("https://cdn.example.net/a.jpg", "https://cdn.example.net/a.jpg"),
            ("//cdn.example.net/a.jpg", "https://cdn.example.net/a.jpg"),
            ("/images/a.jpg", "https://example.com/images/a.jpg"),
            ("a.jpg", "https://example.com/articles/2023/a.jpg"),
            ("../b.jpg", "https://example.com/articles/b.jpg"),
            ("?page=2", "https://example.com/articles/2023/story.html?page=2"),
            ("  /spaced.jpg  ", "https://example.com/spaced.jpg"),
            ("/img/\nbroken.jpg", "https://example.com/img/broken.jpg"),
        ],
    )
    def test_resolution(self, reference, expected):
        assert resolve_url(reference, BASE) == expected

    @pytest.mark.parametrize(
        "reference",
        ["", "   ", "mailto:someone@example.com", "javascript:void(0)", "tel:+123", "data:image/png;base64,AAA"],
    )
    def test_unresolvable_references(self, reference):
        assert resolve_url(reference, BASE) is None

    def test_relative_reference_without_usable_base(self):
        assert resolve_url("/a.jpg", "not a url") is None
        assert resolve_url("/a.jpg", "") is None

    def test_absolute_reference_ignores_bad_base(self):
        assert resolve_url("http://example.org/x", "") == "http://example.org/x"

    def test_invalid_ipv6_host(self):
        assert resolve_url("http://[::1/broken", BASE) is None


class TestHostHelpers:
    """Test cases for host comparison."""

    def test_host_of_is_lower_case(self):
        assert host_of("https://WWW.Example.COM/path") == "www.example.com"
        assert host_of("not a url") == ""

    def test_is_external(self):
        assert not is_external("https://EXAMPLE.com/other", BASE)
        assert is_external("https://blog.example.com/post", BASE)
        assert is_external("https://example.org/", BASE)

    def test_is_absolute_http(self):
        assert is_absolute_http("http://example.com")
        assert not is_absolute_http("ftp://example.com/file")
        assert not is_absolute_http("/relative")


class TestMetrics:
    """Test cases for word count and reading time."""

    def test_count_words(self):
        assert count_words("") == 0
        assert count_words("one") == 1
        assert count_words("  one   two\nthree\t") == 3

    @pytest.mark.parametrize(
        "words, expected",
        [(0, 1), (1, 1), (199, 1), (200, 1), (399, 1), (400, 2), (1000, 5)],
    )
    def test_reading_time_rounds_down_with_floor_of_one(self, words, expected):
        assert reading_time(words) == expected

    def test_reading_time_custom_speed(self):
        assert reading_time(600, words_per_minute=100) == 6

    def test_reading_time_rejects_zero_speed(self):
        with pytest.raises(ValueError):
            reading_time(100, words_per_minute=0)

    def test_calculate_metrics(self):
        metrics = calculate_metrics("word " * 450)
        assert metrics == ContentMetrics(word_count=450, reading_time=2)

    def test_calculate_metrics_empty(self):
        assert calculate_metrics("") == ContentMetrics(word_count=0, reading_time=1)
