from django.test import SimpleTestCase

from api.wiki.wikidata import InvalidArgument, SearchResult


class SearchResultFromDictTest(SimpleTestCase):
    def test_explicit_wiki_url_wins(self) -> None:
        result = SearchResult.from_dict(
            {
                "id": "Q42",
                "wiki_url": "https://example.org/adams",
                "sitelinks": {"enwiki": {"url": "https://en.wikipedia.org/wiki/Douglas_Adams"}},
            },
            "en",
        )
        self.assertEqual(result.wiki_url, "https://example.org/adams")

    def test_sitelink_for_language_used_when_no_explicit_url(self) -> None:
        result = SearchResult.from_dict(
            {
                "id": "Q42",
                "wiki_url": None,
                "sitelinks": {
                    "enwiki": {"url": "https://en.wikipedia.org/wiki/Douglas_Adams"},
                    "frwiki": {"url": "https://fr.wikipedia.org/wiki/Douglas_Adams"},
                },
            },
            "fr",
        )
        self.assertEqual(result.wiki_url, "https://fr.wikipedia.org/wiki/Douglas_Adams")

    def test_constructed_url_is_last_resort(self) -> None:
        result = SearchResult.from_dict({"id": "Q29247", "sitelinks": {}}, "de")
        self.assertEqual(result.wiki_url, "https://de.wikipedia.org/wiki/Q29247")
        self.assertEqual(result.lang, "de")

    def test_no_url_without_id(self) -> None:
        result = SearchResult.from_dict({"label": "orphan"})
        self.assertEqual(result.id, "")
        self.assertIsNone(result.wiki_url)

    def test_rejects_non_item_id(self) -> None:
        with self.assertRaises(InvalidArgument):
            SearchResult.from_dict({"id": "P31"})

    def test_aliases_keep_order_and_ignore_garbage(self) -> None:
        result = SearchResult.from_dict({"id": "Q1", "aliases": ["b", "a"]})
        self.assertEqual(result.aliases, ("b", "a"))
        result = SearchResult.from_dict({"id": "Q1", "aliases": "not-a-list"})
        self.assertEqual(result.aliases, ())

    def test_as_dict(self) -> None:
        result = SearchResult.from_dict(
            {"id": "Q42", "label": "Douglas Adams", "description": "writer", "aliases": ["DNA"]}
        )
        self.assertEqual(
            result.as_dict(),
            {
                "id": "Q42",
                "label": "Douglas Adams",
                "description": "writer",
                "wiki_url": "https://en.wikipedia.org/wiki/Q42",
                "aliases": ["DNA"],
            },
        )

    def test_is_immutable(self) -> None:
        result = SearchResult.from_dict({"id": "Q42"})
        with self.assertRaises(AttributeError):
            result.label = "changed"
