from unittest.mock import MagicMock

from django.core.cache import caches
from django.test import SimpleTestCase, override_settings

from api.wiki.wikidata.cache import WikidataCache, digest


class WikidataCacheTest(SimpleTestCase):
    def setUp(self) -> None:
        self.backend = caches["default"]
        self.backend.clear()

    def test_key_is_deterministic(self) -> None:
        key = WikidataCache.key("search", digest("Getty Museum"), "en", 5)
        self.assertEqual(key, f"wd.search.{digest('Getty Museum')}.en.5")
        self.assertEqual(key, WikidataCache.key("search", digest("Getty Museum"), "en", 5))
        self.assertNotEqual(key, WikidataCache.key("search", digest("Getty Museum"), "en", 6))
        self.assertEqual(len(digest("Getty Museum")), 32)

    def test_miss_then_hit(self) -> None:
        memo = WikidataCache(self.backend, timeout=60)
        producer = MagicMock(return_value=["Q1"])
        self.assertEqual(memo.memoize("wd.test.1", producer), ["Q1"])
        self.assertEqual(memo.memoize("wd.test.1", producer), ["Q1"])
        producer.assert_called_once_with()

    def test_producer_failure_is_not_cached(self) -> None:
        memo = WikidataCache(self.backend, timeout=60)
        producer = MagicMock(side_effect=[RuntimeError("down"), ["Q1"]])
        with self.assertRaises(RuntimeError):
            memo.memoize("wd.test.2", producer)
        self.assertEqual(memo.memoize("wd.test.2", producer), ["Q1"])
        self.assertEqual(producer.call_count, 2)

    def test_zero_timeout_disables_caching(self) -> None:
        memo = WikidataCache(self.backend, timeout=0)
        producer = MagicMock(return_value="value")
        memo.memoize("wd.test.3", producer)
        memo.memoize("wd.test.3", producer)
        self.assertEqual(producer.call_count, 2)

    def test_per_call_timeout_overrides_default(self) -> None:
        backend = MagicMock()
        memo = WikidataCache(backend, timeout=60)
        memo.memoize("wd.test.4", lambda: 1, timeout=3600)
        self.assertEqual(backend.get_or_set.call_args.kwargs["timeout"], 3600)
        memo.memoize("wd.test.4", lambda: 1)
        self.assertEqual(backend.get_or_set.call_args.kwargs["timeout"], 60)

    @override_settings(WIKI_CACHE_TIMEOUT=120)
    def test_defaults_come_from_settings(self) -> None:
        memo = WikidataCache()
        self.assertEqual(memo.timeout, 120)
        self.assertIs(memo.cache, caches["default"])
