"""Stub Wikidata responses and fake transports shared by the tests."""

import json
from unittest.mock import MagicMock
from urllib.parse import parse_qs, urlsplit

# Trimmed from real wbgetentities responses (languages=en, props incl. sitelinks/urls).
STUB_ENTITIES = {
    "Q731126": {
        "type": "item",
        "id": "Q731126",
        "labels": {"en": {"language": "en", "value": "J. Paul Getty Museum"}},
        "descriptions": {
            "en": {"language": "en", "value": "art museum in Los Angeles, California"}
        },
        "aliases": {
            "en": [
                {"language": "en", "value": "Getty Museum"},
                {"language": "en", "value": "The Getty"},
            ]
        },
        "sitelinks": {
            "enwiki": {
                "site": "enwiki",
                "title": "J. Paul Getty Museum",
                "url": "https://en.wikipedia.org/wiki/J._Paul_Getty_Museum",
            }
        },
    },
    "Q29247": {
        "type": "item",
        "id": "Q29247",
        "labels": {"en": {"language": "en", "value": "Getty Center"}},
        "descriptions": {"en": {"language": "en", "value": "campus of the Getty Museum"}},
        "aliases": {},
        "sitelinks": {},
    },
    "Q42": {
        "type": "item",
        "id": "Q42",
        "labels": {
            "en": {"language": "en", "value": "Douglas Adams"},
            "fr": {"language": "fr", "value": "Douglas Adams"},
        },
        "descriptions": {
            "en": {"language": "en", "value": "English writer and humorist (1952–2001)"}
        },
        "aliases": {"en": [{"language": "en", "value": "Douglas Noel Adams"}]},
        "sitelinks": {
            "enwiki": {
                "site": "enwiki",
                "title": "Douglas Adams",
                "url": "https://en.wikipedia.org/wiki/Douglas_Adams",
            },
            "frwiki": {
                "site": "frwiki",
                "title": "Douglas Adams",
                "url": "https://fr.wikipedia.org/wiki/Douglas_Adams",
            },
        },
    },
}

STUB_SEARCH_IDS = ["Q731126", "Q29247", "Q42"]

STUB_CLAIM_BINDINGS = [
    {
        "property": {"type": "uri", "value": "http://www.wikidata.org/entity/P31"},
        "propertyValue": {"type": "uri", "value": "http://www.wikidata.org/entity/Q5"},
    },
    {
        # same value again through a second statement
        "property": {"type": "uri", "value": "http://www.wikidata.org/entity/P31"},
        "propertyValue": {"type": "uri", "value": "http://www.wikidata.org/entity/Q5"},
    },
    {
        "property": {"type": "uri", "value": "http://www.wikidata.org/entity/P18"},
        "propertyValue": {
            "type": "uri",
            "value": "http://commons.wikimedia.org/wiki/Special:FilePath/Douglas%20adams%20portrait.jpg",
        },
    },
    {
        "property": {"type": "uri", "value": "http://www.wikidata.org/entity/P1477"},
        "propertyValue": {"xml:lang": "en", "type": "literal", "value": "Douglas Noël Adams"},
    },
]


def fake_response(body, content_type: str = "application/json; charset=utf-8") -> MagicMock:
    if not isinstance(body, (bytes, str)):
        body = json.dumps(body)
    if isinstance(body, str):
        body = body.encode()
    resp = MagicMock()
    resp.read.return_value = body
    resp.headers = {"Content-Type": content_type}
    resp.__enter__.return_value = resp
    return resp


def query_params(request) -> dict[str, str]:
    return {k: v[0] for k, v in parse_qs(urlsplit(request.full_url).query).items()}


class FakeWikidataApi:
    """Stands in for ``urlopen`` and answers like the MediaWiki API."""

    def __init__(self, search_ids=None, entities=None) -> None:
        self.search_ids = list(STUB_SEARCH_IDS if search_ids is None else search_ids)
        self.entities = STUB_ENTITIES if entities is None else entities
        self.requests = []

    def __call__(self, request, timeout=None):
        self.requests.append(request)
        params = query_params(request)
        action = params.get("action")
        if action == "wbsearchentities":
            limit = int(params["limit"])
            hits = [{"id": q, "title": q} for q in self.search_ids[:limit]]
            return fake_response({"search": hits, "success": 1})
        if action == "wbgetentities":
            ids = params["ids"].split("|")
            entities = {
                q: self.entities.get(q, {"id": q, "missing": ""}) for q in ids
            }
            return fake_response({"entities": entities, "success": 1})
        raise AssertionError(f"Unexpected request {request.full_url}")

    def calls(self, action: str) -> list:
        return [r for r in self.requests if query_params(r).get("action") == action]


def fake_sparql_wrapper(bindings=None, body=None, content_type="application/sparql-results+json"):
    """A ``SPARQLWrapper`` class double whose query() returns ``bindings``."""
    if body is None:
        body = json.dumps({"head": {"vars": []}, "results": {"bindings": bindings or []}})
    if isinstance(body, str):
        body = body.encode()
    wrapper_cls = MagicMock()
    result = wrapper_cls.return_value.query.return_value
    result.response.read.return_value = body
    result.info.return_value = {"content-type": content_type}
    return wrapper_cls
