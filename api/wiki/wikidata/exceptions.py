class WikidataError(Exception):
    """Base class for errors raised while talking to Wikidata."""


class InvalidArgument(WikidataError, ValueError):
    pass


class EntityNotFound(WikidataError, LookupError):
    def __init__(self, qid: str) -> None:
        super().__init__(f"Entity {qid} not found.")
        self.qid = qid


class DecodeError(WikidataError):
    """The response body was not valid JSON."""

    def __init__(self, url: str, snippet: str, content_type: str = "") -> None:
        super().__init__(
            f"Wikidata returned non-JSON or invalid JSON from {url}: {snippet}"
        )
        self.url = url
        self.snippet = snippet
        self.content_type = content_type


class TransportError(WikidataError):
    def __init__(self, url: str, reason: object) -> None:
        super().__init__(f"Request to {url} failed: {reason}")
        self.url = url
        self.reason = reason
