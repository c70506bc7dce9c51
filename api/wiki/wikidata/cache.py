import hashlib
import logging
from collections.abc import Callable
from typing import Any, TypeVar

from django.core.cache import BaseCache, caches

from api.wiki import conf

logger = logging.getLogger(__name__)

KEY_PREFIX = "wd"

T = TypeVar("T")

_UNSET: Any = object()


def digest(text: str) -> str:
    return hashlib.md5(text.encode("utf-8")).hexdigest()


class WikidataCache:
    """Memoize remote Wikidata calls in a Django cache under derived keys.

    Django timeout semantics apply: ``None`` keeps entries forever and ``0``
    disables caching.
    """

    def __init__(
        self,
        cache: BaseCache | None = None,
        timeout: int | None = _UNSET,
    ) -> None:
        self.cache = cache if cache is not None else caches[conf.cache_alias()]
        self.timeout = conf.cache_timeout() if timeout is _UNSET else timeout

    @staticmethod
    def key(operation: str, *parts: object) -> str:
        return ".".join([KEY_PREFIX, operation, *(str(p) for p in parts)])

    def memoize(
        self,
        key: str,
        producer: Callable[[], T],
        timeout: int | None = _UNSET,
    ) -> T:
        """Return the value cached under ``key``, producing it on a miss.

        Nothing is stored when ``producer`` raises.
        """
        if timeout is _UNSET:
            timeout = self.timeout

        def produce() -> T:
            logger.debug("Cache miss for %s", key)
            return producer()

        return self.cache.get_or_set(key, produce, timeout=timeout)
