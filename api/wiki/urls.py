"""
URL routing for the Wikidata API.
"""

from django.urls import include, path
from rest_framework.routers import DefaultRouter

from api.wiki.views import WikidataViewSet

router = DefaultRouter()
router.register(r"wikidata", WikidataViewSet, basename="wikidata")

app_name = "wiki"

urlpatterns = [
    path("", include(router.urls)),
]
