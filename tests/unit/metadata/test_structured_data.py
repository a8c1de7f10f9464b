"""
Unit tests for the structured data parser.
"""

from pageharvest.metadata.structured_data_parser import SchemaOrgParser, StructuredDataParser, ld_text, ld_texts

HEAD = """
<html lang="de">
<head>
  <title> Page   Title </title>
  <meta property="og:title" content="OG Title">
  <meta name="og:description" content="Declared with name instead of property">
  <meta property="article:tag" content="alpha">
  <meta property="article:tag" content="beta">
  <meta name="twitter:title" content="Tweet Title">
  <meta name="twitter:image" content="/twitter.png">
  <meta name="Description" content="Plain description">
  <meta http-equiv="Content-Language" content="de-DE">
  <script type="application/ld+json">
    {"@context": "https://schema.org", "@graph": [
      {"@type": "WebSite", "name": "Example Site"},
      {"@type": "NewsArticle", "headline": "LD Headline", "author": [{"@type": "Person", "name": "A. Writer"}]}
    ]}
  </script>
  <script type="application/ld+json">{ this is not json }</script>
</head>
<body></body>
</html>
"""


class TestStructuredDataParser:
    """Test cases for StructuredDataParser."""

    def test_collects_every_source(self, make_soup):
        data = StructuredDataParser().parse(make_soup(HEAD), "https://example.com/a/")

        assert data.og("og:title") == "OG Title"
        assert data.og("og:description") == "Declared with name instead of property"
        assert data.article_tags == ["alpha", "beta"]
        assert data.twitter_value("twitter:title") == "Tweet Title"
        assert data.meta_value("description") == "Plain description"
        assert data.http_equiv["content-language"] == "de-DE"
        assert data.title_tag == "Page Title"
        assert data.html_lang == "de"

    def test_json_ld_graph_is_flattened_and_invalid_json_skipped(self, make_soup):
        data = StructuredDataParser().parse(make_soup(HEAD))

        assert [item["@type"] for item in data.json_ld] == ["WebSite", "NewsArticle"]
        # Article-like items are consulted first.
        assert data.json_ld_text("headline", "name") == "LD Headline"
        assert data.json_ld_text("name", article_only=True) is None
        assert ld_texts(data.json_ld_raw("author")) == ["A. Writer"]

    def test_preview_image_falls_back_to_twitter(self, make_soup):
        data = StructuredDataParser().parse(make_soup(HEAD), "https://example.com/a/")
        assert data.image_url == "https://example.com/twitter.png"

    def test_empty_document(self, make_soup):
        data = StructuredDataParser().parse(make_soup(""))
        assert data.json_ld == []
        assert data.title_tag is None
        assert data.image_url is None

    def test_comment_wrapped_json_ld(self, make_soup):
        soup = make_soup('<script type="application/ld+json"><!-- {"@type": "Article", "headline": "X"} --></script>')
        data = StructuredDataParser().parse(soup)
        assert data.json_ld_text("headline") == "X"


class TestJsonLdHelpers:
    """Test cases for JSON-LD value helpers."""

    def test_flatten_nested_lists(self):
        payload = [{"@type": "Article"}, [{"@type": "Person"}], "ignored"]
        assert [item["@type"] for item in SchemaOrgParser.flatten(payload)] == ["Article", "Person"]

    def test_ld_text_shapes(self):
        assert ld_text("  spaced  text ") == "spaced text"
        assert ld_text({"@type": "Person", "name": "Ada"}) == "Ada"
        assert ld_text([{}, "second"]) == "second"
        assert ld_text(2024) == "2024"
        assert ld_text(True) is None
        assert ld_text(None) is None

    def test_ld_texts_collects_all(self):
        assert ld_texts([{"name": "Ada"}, "Grace", {"url": "https://x"}]) == ["Ada", "Grace"]
