from dataclasses import dataclass, field
from typing import Any

from api.wiki.wikidata.exceptions import InvalidArgument
from api.wiki.wikidata.sparql import is_qid


def wikipedia_url(lang: str, title: str) -> str:
    return f"https://{lang}.wikipedia.org/wiki/{title}"


@dataclass(frozen=True)
class SearchResult:
    id: str
    label: str | None = None
    description: str | None = None
    aliases: tuple[str, ...] = field(default_factory=tuple)
    wiki_url: str | None = None
    lang: str = "en"

    @classmethod
    def from_dict(cls, data: dict[str, Any], lang: str = "en") -> "SearchResult":
        """Build a result from a normalized entity mapping.

        ``wiki_url`` is taken from the mapping itself, then from the sitelink
        for ``lang``, then built from the id.
        """
        qid = str(data.get("id") or "")
        if qid and not is_qid(qid):
            raise InvalidArgument(f"Not a Wikidata item id: {qid!r}")

        aliases = data.get("aliases")
        if not isinstance(aliases, (list, tuple)):
            aliases = []

        url = data.get("wiki_url") or None
        if not url:
            sitelinks = data.get("sitelinks")
            if isinstance(sitelinks, dict):
                link = sitelinks.get(f"{lang}wiki")
                if isinstance(link, dict):
                    url = link.get("url") or None
        if not url and qid:
            url = wikipedia_url(lang, qid)

        return cls(
            id=qid,
            label=data.get("label"),
            description=data.get("description"),
            aliases=tuple(str(a) for a in aliases),
            wiki_url=url,
            lang=lang,
        )

    def as_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "label": self.label,
            "description": self.description,
            "wiki_url": self.wiki_url,
            "aliases": list(self.aliases),
        }
