"""
URL configuration for the wikidata-lookup API.
"""

from django.urls import include, path

urlpatterns = [
    path("api/", include("api.wiki.urls")),
]
