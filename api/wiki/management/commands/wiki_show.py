from django.core.management.base import BaseCommand, CommandError

from api.wiki.cli import (
    EMPTY,
    configure_logging,
    display_values,
    parse_props,
    render_table,
    to_json,
)
from api.wiki.wikidata import WikidataError, WikidataService


class Command(BaseCommand):
    help = (
        "Show basic Wikidata info and selected properties, "
        "e.g. `manage.py wiki_show Q71981788 --props P625`."
    )

    def add_arguments(self, parser):
        parser.add_argument("qid", help="Wikidata QID (e.g. Q42).")
        parser.add_argument(
            "--lang",
            default="en",
            help="Language code (default: en).",
        )
        parser.add_argument(
            "--props",
            default=None,
            help=(
                "Comma-separated property codes (e.g. P18,P279). "
                "If omitted, no properties are fetched."
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
        qid = options["qid"].strip()
        lang = options["lang"]
        props = parse_props(options["props"])

        try:
            entity = WikidataService().get(qid, lang, props)
        except WikidataError as e:
            raise CommandError(str(e)) from e

        if options["format"] == "json":
            self.stdout.write(to_json(entity))
            return

        self.stdout.write(
            self.style.MIGRATE_HEADING(f"Wikidata {entity.get('id') or qid} ({lang})")
        )
        for term, definition in [
            ("ID", entity.get("id") or qid),
            ("Label", entity.get("label") or EMPTY),
            ("Description", entity.get("description") or EMPTY),
            ("Wikipedia", entity.get("wiki_url") or EMPTY),
        ]:
            self.stdout.write(f"  {term + ':':<13} {definition}")

        claims = entity.get("claims") or {}
        if claims:
            self.stdout.write(self.style.MIGRATE_HEADING("Properties"))
            rows = [[p_code, display_values(values)] for p_code, values in claims.items()]
            for line in render_table(["Property", "Values"], rows):
                self.stdout.write(line)
        elif props:
            self.stdout.write(
                self.style.WARNING(
                    "No values found for requested properties: " + ", ".join(props)
                )
            )
        else:
            self.stdout.write(
                "// No properties were requested. Use --props=P18,P279 to fetch "
                "specific properties."
            )
