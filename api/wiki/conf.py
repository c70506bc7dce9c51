from django.conf import settings

DEFAULT_SEARCH_LIMIT = 20
DEFAULT_CACHE_TIMEOUT = 3600
DEFAULT_CACHE_ALIAS = "default"
DEFAULT_HTTP_TIMEOUT = 15
DEFAULT_CONTACT = "https://github.com/wikidata-lookup"


def search_limit() -> int:
    return getattr(settings, "WIKI_SEARCH_LIMIT", DEFAULT_SEARCH_LIMIT)


def cache_timeout() -> int | None:
    return getattr(settings, "WIKI_CACHE_TIMEOUT", DEFAULT_CACHE_TIMEOUT)


def cache_alias() -> str:
    return getattr(settings, "WIKI_CACHE_ALIAS", DEFAULT_CACHE_ALIAS)


def http_timeout() -> float:
    return getattr(settings, "WIKI_HTTP_TIMEOUT", DEFAULT_HTTP_TIMEOUT)


def user_agent() -> str:
    contact = getattr(settings, "WIKI_USER_AGENT_CONTACT", DEFAULT_CONTACT)
    return f"WikidataLookup/1.0 (Python; +{contact})"
