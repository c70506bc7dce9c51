from rest_framework import serializers

from api.wiki.cli import parse_props


class SearchResultSerializer(serializers.Serializer):
    id = serializers.CharField(read_only=True)
    label = serializers.CharField(read_only=True, allow_null=True)
    description = serializers.CharField(read_only=True, allow_null=True)
    wiki_url = serializers.CharField(read_only=True, allow_null=True)
    aliases = serializers.ListField(child=serializers.CharField(), read_only=True)


class EntitySerializer(serializers.Serializer):
    id = serializers.CharField(read_only=True)
    label = serializers.CharField(read_only=True, allow_null=True)
    description = serializers.CharField(read_only=True, allow_null=True)
    wiki_url = serializers.CharField(read_only=True, allow_null=True)
    aliases = serializers.ListField(child=serializers.CharField(), read_only=True)
    claims = serializers.DictField(
        child=serializers.ListField(), read_only=True, required=False
    )


class SearchParamsSerializer(serializers.Serializer):
    q = serializers.CharField(required=False, allow_blank=True, default="")
    property = serializers.RegexField(r"^P\d+$", required=False)
    value = serializers.CharField(required=False)
    lang = serializers.CharField(required=False, default="en")
    limit = serializers.IntegerField(required=False, min_value=1, max_value=50, default=10)

    def validate(self, attrs):
        if "property" in attrs:
            if not attrs.get("value"):
                raise serializers.ValidationError(
                    {"value": "Required when searching by property."}
                )
        elif not attrs["q"].strip():
            raise serializers.ValidationError(
                {"q": "Provide a search string, or property and value."}
            )
        return attrs


class EntityParamsSerializer(serializers.Serializer):
    lang = serializers.CharField(required=False, default="en")
    props = serializers.CharField(required=False, allow_blank=True, default="")

    def validate_props(self, value: str) -> list[str]:
        return parse_props(value)
