import json
import logging
import re
from http.client import HTTPException
from typing import Any
from urllib.error import HTTPError, URLError
from urllib.parse import urlencode
from urllib.request import Request, urlopen

from api.wiki import conf
from api.wiki.wikidata.exceptions import DecodeError, TransportError

logger = logging.getLogger(__name__)

SNIPPET_LENGTH = 300


def build_url(url: str, params: dict[str, Any] | None = None) -> str:
    if not params:
        return url
    return f"{url}?{urlencode(params)}"


def fetch(
    url: str,
    params: dict[str, Any] | None = None,
    accept: str | None = None,
    user_agent: str | None = None,
) -> tuple[bytes, str]:
    """GET ``url`` and return ``(body, content_type)``.

    HTTP error statuses and network failures, including a timeout while the
    body is read, are raised as ``TransportError``.
    """
    full_url = build_url(url, params)
    headers = {"User-Agent": user_agent or conf.user_agent()}
    if accept:
        headers["Accept"] = accept
    try:
        req = Request(full_url, headers=headers)
        with urlopen(req, timeout=conf.http_timeout()) as resp:
            content_type = resp.headers.get("Content-Type", "") or ""
            return resp.read(), content_type
    except HTTPError as e:
        raise TransportError(full_url, f"HTTP {e.code}") from e
    except URLError as e:
        raise TransportError(full_url, e.reason) from e
    except (OSError, HTTPException) as e:
        raise TransportError(full_url, e) from e


def snippet(body: bytes | str, length: int = SNIPPET_LENGTH) -> str:
    text = body.decode("utf-8", errors="replace") if isinstance(body, bytes) else body
    return re.sub(r"\s+", " ", text).strip()[:length]


def decode_json(body: bytes | str, url: str, content_type: str = "") -> dict:
    """Decode a JSON object body, surfacing a short snippet if it isn't one."""
    try:
        decoded = json.loads(body)
    except ValueError as e:
        short = snippet(body)
        logger.error(
            "Wikidata JSON decode failed for %s (%s, content-type=%r): %s",
            url,
            e,
            content_type,
            short,
        )
        raise DecodeError(url, short, content_type) from e
    if not isinstance(decoded, dict):
        short = snippet(body)
        logger.error(
            "Wikidata returned a JSON %s instead of an object for %s",
            type(decoded).__name__,
            url,
        )
        raise DecodeError(url, short, content_type)
    return decoded


def get_json(
    url: str,
    params: dict[str, Any] | None = None,
    accept: str = "application/json",
    user_agent: str | None = None,
) -> dict:
    body, content_type = fetch(url, params, accept=accept, user_agent=user_agent)
    return decode_json(body, build_url(url, params), content_type)
