"""
Unit tests for DateExtractor.
"""

from datetime import datetime, timedelta, timezone

import pytest

from pageharvest.metadata.date_extractor import DateExtractor

UTC = timezone.utc


@pytest.fixture
def dates():
    return DateExtractor()


class TestParseDate:
    """Test cases for single-value parsing."""

    @pytest.mark.parametrize(
        "value, expected",
        [
            ("2023-06-14", datetime(2023, 6, 14, tzinfo=UTC)),
            ("2023-06-14T09:30:00Z", datetime(2023, 6, 14, 9, 30, tzinfo=UTC)),
            ("2023-06-14T09:30:00+02:00", datetime(2023, 6, 14, 9, 30, tzinfo=timezone(timedelta(hours=2)))),
            ("2023/06/14", datetime(2023, 6, 14, tzinfo=UTC)),
            ("June 14, 2023", datetime(2023, 6, 14, tzinfo=UTC)),
            ("Jun 14, 2023", datetime(2023, 6, 14, tzinfo=UTC)),
            ("Sept. 3rd, 2021", datetime(2021, 9, 3, tzinfo=UTC)),
            ("Wednesday, June 14, 2023", datetime(2023, 6, 14, tzinfo=UTC)),
            ("14 June 2023", datetime(2023, 6, 14, tzinfo=UTC)),
            ("14 Jun 2023", datetime(2023, 6, 14, tzinfo=UTC)),
            ("06/14/2023", datetime(2023, 6, 14, tzinfo=UTC)),
            ("14.06.2023", datetime(2023, 6, 14, tzinfo=UTC)),
            ("Wed, 14 Jun 2023 09:30:00 +0000", datetime(2023, 6, 14, 9, 30, tzinfo=UTC)),
        ],
    )
    def test_supported_formats(self, dates, value, expected):
        assert dates.parse_date(value) == expected

    @pytest.mark.parametrize("value", [None, "", "yesterday", "not a date", "June 2023", "32/13/2023"])
    def test_unparseable_values(self, dates, value):
        assert dates.parse_date(value) is None

    def test_dates_before_1990_are_rejected(self, dates):
        assert dates.parse_date("1989-12-31") is None
        assert dates.parse_date("1990-01-01") == datetime(1990, 1, 1, tzinfo=UTC)

    def test_results_are_timezone_aware(self, dates):
        assert dates.parse_date("2020-01-02 03:04:05").tzinfo is not None

    def test_parsing_is_deterministic(self, dates):
        assert dates.parse_date("March 5, 2022") == dates.parse_date("March 5, 2022")


class TestDateDetection:
    """Test cases for locating dates in markup and text."""

    def test_find_date_in_text_takes_first_match(self, dates):
        text = "Posted on March 5, 2022 by Staff. Updated 2023-01-01."
        assert dates.find_date_in_text(text) == datetime(2022, 3, 5, tzinfo=UTC)

    def test_find_date_in_text_skips_unparseable_matches(self, dates):
        assert dates.find_date_in_text("Code 99/99/2020 then 2021-02-03") == datetime(2021, 2, 3, tzinfo=UTC)

    def test_no_date_in_text(self, dates):
        assert dates.find_date_in_text("Nothing to see here") is None

    def test_time_elements_prefer_published_markers(self, dates, make_soup):
        soup = make_soup(
            """
            <time datetime="2024-02-02">Updated</time>
            <span itemprop="datePublished" content="2024-01-01">January</span>
            """
        )
        assert dates.from_time_elements(soup) == datetime(2024, 1, 1, tzinfo=UTC)

    def test_any_time_element(self, dates, make_soup):
        soup = make_soup('<p>Posted <time datetime="2022-10-11T08:00:00Z">Oct 11</time></p>')
        assert dates.from_time_elements(soup) == datetime(2022, 10, 11, 8, 0, tzinfo=UTC)

    def test_page_text_search_is_bounded(self, dates, make_soup):
        soup = make_soup(f"<body><p>{'filler ' * 100}</p><p>June 14, 2023</p></body>")
        assert dates.from_page_text(soup, 100) is None
        assert dates.from_page_text(soup, 2000) == datetime(2023, 6, 14, tzinfo=UTC)

    def test_page_text_ignores_scripts(self, dates, make_soup):
        soup = make_soup('<body><script>var d = "2001-01-01";</script><p>No date</p></body>')
        assert dates.from_page_text(soup, 1500) is None

    def test_page_text_ignores_site_chrome(self, dates, make_soup):
        soup = make_soup(
            "<body><header><div class='topbar'>Today is March 3, 2025</div></header>"
            "<article><p>The valley floods every spring.</p></article></body>"
        )
        assert dates.from_page_text(soup, 1500) is None
