from django.core.management.base import BaseCommand, CommandError

from api.wiki.cli import (
    EMPTY,
    configure_logging,
    display_values,
    parse_property_expression,
    parse_props,
    render_table,
    to_json,
    truncate,
)
from api.wiki.wikidata import WikidataError, WikidataService


class Command(BaseCommand):
    help = "Search Wikidata by label or property expression."

    def add_arguments(self, parser):
        parser.add_argument(
            "query",
            nargs="?",
            default=None,
            help=(
                'Search text (e.g. "Getty Museum") or a property expression '
                '(e.g. "P31=Q33506"). Omit when using --property/--value.'
            ),
        )
        parser.add_argument(
            "--locale",
            default="en",
            help="Locale/language (default: en).",
        )
        parser.add_argument(
            "--limit",
            type=int,
            default=10,
            help="Max number of results (default 10).",
        )
        parser.add_argument(
            "--property",
            default=None,
            help="Property code for property-based search (e.g. P31).",
        )
        parser.add_argument(
            "--value",
            default=None,
            help="Value for property-based search (e.g. Q33506 or a literal).",
        )
        parser.add_argument(
            "--props",
            default=None,
            help=(
                "Comma-separated property codes to also fetch for each hit "
                "(e.g. P18,P279)."
            ),
        )
        parser.add_argument(
            "--format",
            choices=["text", "json"],
            default="text",
            help="Output format: text or json (default text).",
        )

    def handle(self, *args, **options):
        configure_logging(options["verbosity"])
        query = options["query"]
        prop = options["property"]
        value = options["value"]
        locale = options["locale"]
        limit = options["limit"]
        props = parse_props(options["props"])

        if prop is None and query is not None:
            parsed = parse_property_expression(query)
            if parsed is not None:
                prop, value = parsed
                query = None

        service = WikidataService()
        try:
            if prop is not None:
                if not value:
                    raise CommandError(
                        "When using --property, you must also provide --value "
                        "(QID or literal)."
                    )
                results = service.search_by(prop, value, locale, limit)
            else:
                if not query:
                    raise CommandError(
                        'Provide a search string (label), a property expression like '
                        '"P31=Q33506", or use --property with --value.'
                    )
                results = service.search(query, locale, limit)

            claims_by_id: dict[str, dict] = {}
            if props:
                for hit in results:
                    entity = service.get(hit.id, locale, props)
                    claims_by_id[hit.id] = entity.get("claims") or {}
        except WikidataError as e:
            raise CommandError(str(e)) from e

        if options["format"] == "json":
            payload = []
            for r in results:
                row = r.as_dict()
                if r.id in claims_by_id:
                    row["claims"] = claims_by_id[r.id]
                payload.append(row)
            self.stdout.write(to_json(payload))
            return

        self.stdout.write(self.style.MIGRATE_HEADING("Wikidata Search"))
        if prop is not None:
            criteria = f"Property: {prop}  Value: {value}  Locale: {locale}  Limit: {limit}"
        else:
            criteria = f"Query: {query}  Locale: {locale}  Limit: {limit}"
        self.stdout.write(f"// {criteria}")

        rows = [
            [r.id, r.label or EMPTY, truncate(r.description), r.wiki_url or EMPTY]
            for r in results
        ]
        for line in render_table(["QID", "Label", "Description", "Wikipedia"], rows):
            self.stdout.write(line)
        self.stdout.write(self.style.SUCCESS(f"Found {len(results)} result(s)."))

        if not props:
            self.stdout.write(
                "// Tip: use --props=P18 to also fetch images, or multiple like "
                "--props=P18,P279."
            )
            return

        self.stdout.write(self.style.MIGRATE_HEADING("Requested properties"))
        prop_rows = []
        for r in results:
            claims = claims_by_id.get(r.id) or {}
            if not claims:
                prop_rows.append([r.id, EMPTY, EMPTY])
                continue
            for p_code, values in claims.items():
                prop_rows.append([r.id, p_code, display_values(values)])
        for line in render_table(["QID", "Property", "Values"], prop_rows):
            self.stdout.write(line)
