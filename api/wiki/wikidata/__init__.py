from api.wiki.wikidata.cache import WikidataCache
from api.wiki.wikidata.exceptions import (
    DecodeError,
    EntityNotFound,
    InvalidArgument,
    TransportError,
    WikidataError,
)
from api.wiki.wikidata.results import SearchResult
from api.wiki.wikidata.service import WikidataService
from api.wiki.wikidata.sparql import WikidataSparqlClient

__all__ = [
    "DecodeError",
    "EntityNotFound",
    "InvalidArgument",
    "SearchResult",
    "TransportError",
    "WikidataCache",
    "WikidataError",
    "WikidataService",
    "WikidataSparqlClient",
]
