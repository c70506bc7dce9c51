import logging
import re
from collections.abc import Iterable
from http.client import HTTPException

from SPARQLWrapper import JSON, SPARQLWrapper
from SPARQLWrapper.SPARQLExceptions import SPARQLWrapperException

from api.wiki import conf
from api.wiki.wikidata.exceptions import TransportError
from api.wiki.wikidata.http import decode_json

logger = logging.getLogger(__name__)

WIKIDATA_SPARQL = "https://query.wikidata.org/sparql"

QID_RE = re.compile(r"Q\d+")
PID_RE = re.compile(r"P\d+")
ENTITY_URI_RE = re.compile(r"^https?://www\.wikidata\.org/entity/([PQ]\d+)$")

# SPARQL ECHAR escapes for string literals.
_LITERAL_ESCAPES = {
    "\\": "\\\\",
    '"': '\\"',
    "'": "\\'",
    "\n": "\\n",
    "\r": "\\r",
    "\t": "\\t",
}


def is_qid(value: object) -> bool:
    return isinstance(value, str) and QID_RE.fullmatch(value) is not None


def is_pid(value: object) -> bool:
    return isinstance(value, str) and PID_RE.fullmatch(value) is not None


def extract_wikidata_id(uri: str | None, prefix: str = "Q") -> str | None:
    if not uri:
        return None
    m = ENTITY_URI_RE.match(uri)
    if not m or not m.group(1).startswith(prefix):
        return None
    return m.group(1)


def sparql_literal(value: str) -> str:
    return '"' + "".join(_LITERAL_ESCAPES.get(c, c) for c in value) + '"'


def sparql_subject(value: str) -> str:
    """Entity reference for a QID, quoted string literal for anything else."""
    if is_qid(value):
        return f"wd:{value}"
    return sparql_literal(value)


def clean_property_codes(props: Iterable[str]) -> list[str]:
    """Keep well-formed P-codes, deduplicated, in first-seen order."""
    seen: set[str] = set()
    result: list[str] = []
    for p in props:
        if is_pid(p) and p not in seen:
            seen.add(p)
            result.append(p)
    return result


def build_search_by_query(property_code: str, value: str, limit: int) -> str:
    return f"""
PREFIX wd: <http://www.wikidata.org/entity/>
PREFIX wdt: <http://www.wikidata.org/prop/direct/>

SELECT ?item WHERE {{
  ?item wdt:{property_code} {sparql_subject(value)} .
}}
LIMIT {int(limit)}
"""


def build_claims_query(qid: str, lang: str, props: list[str]) -> str:
    values = " ".join(f"wd:{p}" for p in props)
    return f"""
PREFIX wd: <http://www.wikidata.org/entity/>
PREFIX wikibase: <http://wikiba.se/ontology#>
PREFIX bd: <http://www.bigdata.com/rdf#>

SELECT ?property ?propertyLabel ?statement ?propertyValue ?propertyValueLabel ?ps ?pq
WHERE {{
  VALUES (?item) {{(wd:{qid})}}
  VALUES ?property {{ {values} }}
  ?property wikibase:claim ?prop .
  ?property wikibase:statementProperty ?ps .
  OPTIONAL {{ ?property wikibase:qualifier ?pq . }}

  ?item ?prop ?statement .
  ?statement ?ps ?propertyValue .

  SERVICE wikibase:label {{ bd:serviceParam wikibase:language "{lang},en". }}
}}
"""


def simplify_value(value: str) -> str:
    """Entity URIs become bare QIDs; literals pass through unchanged."""
    return extract_wikidata_id(value, prefix="Q") or value


def claims_from_rows(rows: list[dict[str, str | None]]) -> dict[str, list[str]]:
    """Reduce claim bindings to property code -> ordered, distinct values."""
    claims: dict[str, list[str]] = {}
    for row in rows:
        p_code = extract_wikidata_id(row.get("property"), prefix="P")
        if not p_code:
            continue
        raw = row.get("propertyValue")
        if not isinstance(raw, str):
            continue
        value = simplify_value(raw)
        values = claims.setdefault(p_code, [])
        if value not in values:
            values.append(value)
    return claims


class WikidataSparqlClient:
    def __init__(
        self,
        endpoint: str = WIKIDATA_SPARQL,
        user_agent: str | None = None,
    ) -> None:
        self.endpoint = endpoint
        self.user_agent = user_agent or conf.user_agent()

    def _execute(self, sparql: SPARQLWrapper) -> dict:
        try:
            result = sparql.query()
            content_type = result.info().get("content-type", "") or ""
            body = result.response.read()
        except (SPARQLWrapperException, OSError, HTTPException) as e:
            logger.warning("SPARQL request to %s failed: %s", self.endpoint, e)
            raise TransportError(self.endpoint, e) from e
        return decode_json(body, self.endpoint, content_type)

    @staticmethod
    def _get_val(binding: dict, key: str) -> str | None:
        b = binding.get(key)
        return b.get("value") if isinstance(b, dict) else None

    def select(self, query: str) -> list[dict[str, str | None]]:
        """Run a SELECT query and flatten each binding to ``{var: value}``."""
        sparql = SPARQLWrapper(self.endpoint, agent=self.user_agent)
        sparql.setQuery(query)
        sparql.setReturnFormat(JSON)
        sparql.setTimeout(int(conf.http_timeout()))
        raw = self._execute(sparql)
        bindings = (raw.get("results") or {}).get("bindings") or []
        rows = [
            {key: self._get_val(b, key) for key in b}
            for b in bindings
            if isinstance(b, dict)
        ]
        logger.info("Retrieved %d bindings from Wikidata SPARQL", len(rows))
        return rows

    def fetch_item_ids(self, property_code: str, value: str, limit: int) -> list[str]:
        rows = self.select(build_search_by_query(property_code, value, limit))
        qids: list[str] = []
        for row in rows:
            qid = extract_wikidata_id(row.get("item"))
            if qid:
                qids.append(qid)
        return qids

    def fetch_claims(
        self, qid: str, lang: str, props: Iterable[str]
    ) -> dict[str, list[str]]:
        props = clean_property_codes(props)
        if not props:
            return {}
        rows = self.select(build_claims_query(qid, lang, props))
        return claims_from_rows(rows)
