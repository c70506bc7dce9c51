"""
Wikidata client: label search, property search and entity lookup.

- search()     -> list[SearchResult]
- search_by()  -> list[SearchResult]
- get()        -> dict (entity core + optional selected claims)

Pass ``props`` to get() (e.g. ["P18"]) to fetch only the claims you need.
"""

import logging
import re
from collections.abc import Iterable
from typing import Any
from urllib.parse import quote

from django.core.cache import BaseCache

from api.wiki import conf
from api.wiki.wikidata import http
from api.wiki.wikidata.cache import WikidataCache, digest
from api.wiki.wikidata.exceptions import (
    EntityNotFound,
    InvalidArgument,
    TransportError,
    WikidataError,
)
from api.wiki.wikidata.results import SearchResult, wikipedia_url
from api.wiki.wikidata.sparql import (
    WikidataSparqlClient,
    clean_property_codes,
    is_pid,
    is_qid,
)

logger = logging.getLogger(__name__)

WIKIDATA_API = "https://www.wikidata.org/w/api.php"
ENTITY_BATCH_SIZE = 50
WIKI_RAW_CACHE_TIMEOUT = 3600 * 24 * 30

LANG_RE = re.compile(r"[a-z]{2,}(?:-[a-z0-9]+)*")
TAXONBAR_RE = re.compile(r"Taxonbar\|from=([A-Z]\d+)")


def _localized(body: dict, section: str, lang: str) -> str | None:
    values = body.get(section)
    if not isinstance(values, dict):
        return None
    for code in (lang, "en"):
        entry = values.get(code)
        if isinstance(entry, dict) and entry.get("value") is not None:
            return entry["value"]
    return None


def _aliases(body: dict, lang: str) -> list[str]:
    rows = (body.get("aliases") or {}).get(lang) or []
    return [r["value"] for r in rows if isinstance(r, dict) and "value" in r]


def normalize_entity(
    qid: str,
    body: dict,
    lang: str,
    include_sitelinks: bool = True,
) -> dict[str, Any]:
    """Reshape a wbgetentities entity into the flat entity record."""
    sitelinks = body.get("sitelinks")
    if not isinstance(sitelinks, dict):
        sitelinks = {}
    wiki_url = None
    if include_sitelinks:
        link = sitelinks.get(f"{lang}wiki")
        if isinstance(link, dict):
            wiki_url = link.get("url")
    return {
        "id": str(body.get("id") or qid),
        "label": _localized(body, "labels", lang),
        "description": _localized(body, "descriptions", lang),
        "aliases": _aliases(body, lang),
        "sitelinks": sitelinks,
        "wiki_url": wiki_url,
    }


class WikidataService:
    def __init__(
        self,
        cache: BaseCache | None = None,
        cache_timeout: int | None = None,
        search_limit: int | None = None,
        user_agent: str | None = None,
        api_url: str = WIKIDATA_API,
        sparql_client: WikidataSparqlClient | None = None,
    ) -> None:
        self.cache = WikidataCache(
            cache,
            timeout=conf.cache_timeout() if cache_timeout is None else cache_timeout,
        )
        self.search_limit = search_limit or conf.search_limit()
        self.user_agent = user_agent or conf.user_agent()
        self.api_url = api_url
        self.sparql_client = sparql_client or WikidataSparqlClient(
            user_agent=self.user_agent
        )

    def with_cache_timeout(self, seconds: int | None) -> "WikidataService":
        self.cache.timeout = seconds
        return self

    def _limit(self, limit: int | None) -> int:
        limit = self.search_limit if limit is None else limit
        if not isinstance(limit, int) or limit < 1:
            raise InvalidArgument(f"limit must be a positive integer, got {limit!r}")
        return limit

    @staticmethod
    def _lang(lang: str) -> str:
        if not isinstance(lang, str) or not LANG_RE.fullmatch(lang):
            raise InvalidArgument(f"Not a language code: {lang!r}")
        return lang

    def search(
        self, query: str, lang: str = "en", limit: int | None = None
    ) -> list[SearchResult]:
        if not query or not query.strip():
            raise InvalidArgument("search(): query must not be empty.")
        lang = self._lang(lang)
        limit = self._limit(limit)
        key = WikidataCache.key("search", digest(query), lang, limit)

        def produce() -> list[SearchResult]:
            ids = self._search_entity_ids(query, lang, limit)
            if not ids:
                return []
            entities = self.get_entities(ids, lang, include_sitelinks=True)
            return [SearchResult.from_dict(e, lang) for e in entities][:limit]

        return self.cache.memoize(key, produce)

    def search_by(
        self,
        property_code: str,
        value: str,
        lang: str = "en",
        limit: int | None = None,
    ) -> list[SearchResult]:
        if not is_pid(property_code):
            raise InvalidArgument(
                f'search_by(): property must be a P-code like "P18", got {property_code!r}.'
            )
        if value is None or value == "":
            raise InvalidArgument("search_by(): value must not be empty.")
        lang = self._lang(lang)
        limit = self._limit(limit)
        key = WikidataCache.key("searchBy", property_code, digest(value), lang, limit)

        def produce() -> list[SearchResult]:
            logger.info("Searching Wikidata for ?item wdt:%s %r", property_code, value)
            ids = self.sparql_client.fetch_item_ids(property_code, value, limit)
            if not ids:
                return []
            entities = self.get_entities(ids, lang, include_sitelinks=True)
            return [SearchResult.from_dict(e, lang) for e in entities][:limit]

        return self.cache.memoize(key, produce)

    def get(
        self, qid: str, lang: str = "en", props: Iterable[str] = ()
    ) -> dict[str, Any]:
        """Fetch a single entity core and, if ``props`` is given, its claims.

        Property codes that aren't P-codes are dropped; pass no ``props`` to
        skip the claims query entirely.
        """
        if not is_qid(qid):
            raise InvalidArgument(f'get(): qid must be like "Q123", got {qid!r}.')
        lang = self._lang(lang)
        requested = list(props or ())
        codes = clean_property_codes(requested)
        signature = ",".join(codes) if requested else "none"
        key = WikidataCache.key("get", qid, lang, "props", signature)

        def produce() -> dict[str, Any]:
            entities = self.get_entities([qid], lang, include_sitelinks=True)
            if not entities:
                raise EntityNotFound(qid)
            core = entities[0]
            if requested:
                core["claims"] = self.sparql_client.fetch_claims(qid, lang, codes)
            return core

        return self.cache.memoize(key, produce)

    @staticmethod
    def first_claim(entity: dict[str, Any], property_code: str) -> Any:
        values = (entity.get("claims") or {}).get(property_code)
        if not isinstance(values, list) or not values:
            return None
        return values[0]

    def fetch_wikipedia_page(self, title: str, lang: str = "en") -> str | None:
        """Return the id from a Wikipedia page's Taxonbar template, if any.

        Best effort: transport failures are logged and give ``None``.
        """
        lang = self._lang(lang)
        page = quote(title.replace(" ", "_"), safe="/:-_.~()")
        url = wikipedia_url(lang, page) + "?action=raw"
        key = WikidataCache.key("wiki", "raw", digest(url))
        try:
            content = self.cache.memoize(
                key, lambda: self._fetch_text(url), timeout=WIKI_RAW_CACHE_TIMEOUT
            )
        except TransportError as e:
            logger.warning("Failed to fetch Wikipedia page %s: %s", url, e)
            return None
        m = TAXONBAR_RE.search(content or "")
        return m.group(1) if m else None

    def _fetch_text(self, url: str) -> str:
        logger.info("Fetching %s", url)
        body, _ = http.fetch(url, user_agent=self.user_agent)
        return body.decode("utf-8", errors="replace")

    def _api_get(self, params: dict[str, Any]) -> dict:
        data = http.get_json(self.api_url, params, user_agent=self.user_agent)
        error = data.get("error")
        if isinstance(error, dict):
            code = error.get("code")
            if code == "no-such-entity":
                logger.info("Wikidata has no entity for %s", params.get("ids"))
                return {}
            raise WikidataError(f"Wikidata API error {code}: {error.get('info')}")
        return data

    def _search_entity_ids(self, query: str, lang: str, limit: int) -> list[str]:
        logger.info("Searching Wikidata labels for %r (lang=%s, limit=%d)", query, lang, limit)
        data = self._api_get(
            {
                "action": "wbsearchentities",
                "format": "json",
                "language": lang,
                "search": query,
                "limit": limit,
                "type": "item",
                "origin": "*",
            }
        )
        hits = data.get("search") or []
        return [
            h["id"] for h in hits if isinstance(h, dict) and isinstance(h.get("id"), str)
        ]

    def get_entities(
        self,
        ids: Iterable[str],
        lang: str,
        include_sitelinks: bool = True,
    ) -> list[dict[str, Any]]:
        """Fetch entity records for ``ids`` with wbgetentities, 50 per request.

        Ids that are not QIDs and missing entities are skipped; records come back
        in request order.
        """
        ids = list(dict.fromkeys(i for i in ids if is_qid(i)))
        if not ids:
            return []
        props = ["labels", "descriptions", "aliases"]
        if include_sitelinks:
            props.append("sitelinks/urls")

        by_id: dict[str, dict[str, Any]] = {}
        for i in range(0, len(ids), ENTITY_BATCH_SIZE):
            chunk = ids[i : i + ENTITY_BATCH_SIZE]
            logger.info("Fetching %d entities from Wikidata", len(chunk))
            data = self._api_get(
                {
                    "action": "wbgetentities",
                    "format": "json",
                    "ids": "|".join(chunk),
                    "languages": f"{lang}|en",
                    "props": "|".join(props),
                    "origin": "*",
                }
            )
            entities = data.get("entities") or {}
            if not isinstance(entities, dict):
                continue
            for qid, body in entities.items():
                if not isinstance(body, dict) or "missing" in body:
                    continue
                by_id[qid] = normalize_entity(qid, body, lang, include_sitelinks)
        return [by_id[q] for q in ids if q in by_id]
