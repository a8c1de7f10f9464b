"""
Unit tests for VideoExtractor and platform classification.
"""

import pytest

from pageharvest.extractor.videos import VideoExtractor, classify_platform, youtube_video_id
from pageharvest.models import PlatformKind, VideoPlatform

BASE = "https://example.com/watch/"


@pytest.fixture
def videos(config, logger):
    return VideoExtractor(config, logger=logger)


class TestClassifyPlatform:
    """Test cases for classify_platform."""

    @pytest.mark.parametrize(
        "url, expected",
        [
            ("https://www.youtube.com/embed/abc", VideoPlatform.youtube()),
            ("https://youtu.be/abc", VideoPlatform.youtube()),
            ("https://www.youtube-nocookie.com/embed/abc", VideoPlatform.youtube()),
            ("https://player.vimeo.com/video/123", VideoPlatform.vimeo()),
            ("https://cdn.example.com/clip.mp4", VideoPlatform.direct()),
            ("https://cdn.example.com/clip.WEBM?token=1", VideoPlatform.direct()),
            ("https://cdn.example.com/clip.mov", VideoPlatform.direct()),
            ("https://www.dailymotion.com/embed/video/x7", VideoPlatform.other("www.dailymotion.com")),
        ],
    )
    def test_classification(self, url, expected):
        assert classify_platform(url) == expected

    def test_host_rule_precedes_extension_rule(self):
        assert classify_platform("https://vimeo.com/files/clip.mp4").kind is PlatformKind.VIMEO


class TestYoutubeId:
    """Test cases for YouTube id parsing."""

    @pytest.mark.parametrize(
        "url",
        [
            "https://www.youtube.com/watch?v=dQw4w9WgXcQ",
            "https://www.youtube.com/watch?feature=share&v=dQw4w9WgXcQ",
            "https://youtu.be/dQw4w9WgXcQ?t=10",
            "https://www.youtube.com/embed/dQw4w9WgXcQ?autoplay=1",
        ],
    )
    def test_known_forms(self, url):
        assert youtube_video_id(url) == "dQw4w9WgXcQ"

    def test_unknown_form(self):
        assert youtube_video_id("https://www.youtube.com/channel/UC123") is None


class TestVideoExtractor:
    """Test cases for video collection."""

    def test_video_elements_and_embeds(self, videos, make_soup):
        soup = make_soup(
            """
            <video src="/media/intro.mp4" title="Intro" poster="/media/intro.jpg" data-duration="PT1M30S"></video>
            <video><source src="clips/second.webm" type="video/webm"></video>
            <iframe src="https://www.youtube.com/embed/dQw4w9WgXcQ" aria-label="Music video"></iframe>
            <iframe data-src="//player.vimeo.com/video/76979871"></iframe>
            <iframe src="https://maps.example.com/embed?pb=1"></iframe>
            """
        )
        result = videos.extract(soup, BASE)

        assert [video.url for video in result] == [
            "https://example.com/media/intro.mp4",
            "https://example.com/watch/clips/second.webm",
            "https://www.youtube.com/embed/dQw4w9WgXcQ",
            "https://player.vimeo.com/video/76979871",
        ]
        intro, second, youtube, vimeo = result
        assert intro.title == "Intro"
        assert intro.duration == "PT1M30S"
        assert intro.thumbnail == "https://example.com/media/intro.jpg"
        assert intro.platform == VideoPlatform.direct()
        assert second.title == ""
        assert second.duration is None
        assert youtube.title == "Music video"
        assert youtube.platform.kind is PlatformKind.YOUTUBE
        assert youtube.thumbnail == "https://img.youtube.com/vi/dQw4w9WgXcQ/maxresdefault.jpg"
        assert vimeo.platform.kind is PlatformKind.VIMEO
        assert vimeo.thumbnail is None

    def test_figcaption_title_and_microdata_duration(self, videos, make_soup):
        soup = make_soup(
            """
            <figure itemscope itemtype="https://schema.org/VideoObject">
              <meta itemprop="duration" content="PT4M">
              <iframe src="https://fast.wistia.net/embed/iframe/abc"></iframe>
              <figcaption>Product <b>tour</b></figcaption>
            </figure>
            """
        )
        (video,) = videos.extract(soup, BASE)
        assert video.title == "Product tour"
        assert video.duration == "PT4M"
        assert video.platform == VideoPlatform.other("fast.wistia.net")

    def test_embed_host_with_path_prefix(self, videos, make_soup):
        soup = make_soup(
            '<iframe src="https://www.facebook.com/plugins/video.php?href=x"></iframe>'
            '<iframe src="https://www.facebook.com/plugins/like.php"></iframe>'
        )
        result = videos.extract(soup, BASE)
        assert [video.url for video in result] == ["https://www.facebook.com/plugins/video.php?href=x"]

    def test_duplicates_keep_first(self, videos, make_soup):
        soup = make_soup(
            '<iframe src="https://youtu.be/abc" title="first"></iframe>'
            '<iframe src="https://youtu.be/abc" title="second"></iframe>'
        )
        result = videos.extract(soup, BASE)
        assert len(result) == 1
        assert result[0].title == "first"

    def test_unresolvable_video_is_dropped(self, videos, make_soup):
        soup = make_soup('<video src="javascript:play()"></video>')
        assert videos.extract(soup, BASE) == ()
