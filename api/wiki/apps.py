from django.apps import AppConfig


class WikiConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "api.wiki"
    label = "wiki"
    verbose_name = "Wikidata"
