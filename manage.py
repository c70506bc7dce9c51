#!/usr/bin/env python
"""Run wikidata-lookup management commands (wiki_search, wiki_show, runserver)."""

import os
import sys


def main():
    # Keep the repository root importable so api.config resolves from any cwd
    project_root = os.path.dirname(os.path.abspath(__file__))
    if project_root not in sys.path:
        sys.path.insert(0, project_root)

    os.environ.setdefault("DJANGO_SETTINGS_MODULE", "api.config.settings")

    try:
        from django.core.management import execute_from_command_line
    except ImportError as exc:
        raise ImportError(
            "Django is required to run wikidata-lookup. Install the project "
            "with `pip install -e .` first."
        ) from exc

    execute_from_command_line(sys.argv)


if __name__ == "__main__":
    main()
