from rest_framework import status, viewsets
from rest_framework.exceptions import APIException, NotFound, ValidationError
from rest_framework.permissions import AllowAny
from rest_framework.response import Response

from api.wiki.serializers import (
    EntityParamsSerializer,
    EntitySerializer,
    SearchParamsSerializer,
    SearchResultSerializer,
)
from api.wiki.wikidata import (
    EntityNotFound,
    InvalidArgument,
    WikidataError,
    WikidataService,
)


class UpstreamError(APIException):
    status_code = status.HTTP_502_BAD_GATEWAY
    default_detail = "Wikidata request failed."
    default_code = "upstream_error"


class WikidataViewSet(viewsets.ViewSet):
    """Search Wikidata (list) and show a single entity (retrieve)."""

    permission_classes = [AllowAny]
    lookup_value_regex = "[^/]+"

    def get_service(self) -> WikidataService:
        return WikidataService()

    def _call(self, func, *args):
        try:
            return func(*args)
        except InvalidArgument as e:
            raise ValidationError({"detail": str(e)}) from e
        except EntityNotFound as e:
            raise NotFound(str(e)) from e
        except WikidataError as e:
            raise UpstreamError(str(e)) from e

    def list(self, request):
        params = SearchParamsSerializer(data=request.query_params)
        params.is_valid(raise_exception=True)
        data = params.validated_data
        service = self.get_service()
        if "property" in data:
            results = self._call(
                service.search_by,
                data["property"],
                data["value"],
                data["lang"],
                data["limit"],
            )
        else:
            results = self._call(service.search, data["q"], data["lang"], data["limit"])
        return Response(SearchResultSerializer(results, many=True).data)

    def retrieve(self, request, pk=None):
        params = EntityParamsSerializer(data=request.query_params)
        params.is_valid(raise_exception=True)
        data = params.validated_data
        entity = self._call(self.get_service().get, pk, data["lang"], data["props"])
        return Response(EntitySerializer(entity).data)
