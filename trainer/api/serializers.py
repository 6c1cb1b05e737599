from rest_framework import serializers
from rest_framework.validators import UniqueValidator

from ..config import DEFAULT_GROUP_ID, DISTRACTOR_COUNT
from ..data.models import Group


class GroupInSerializer(serializers.Serializer):
    name = serializers.CharField(max_length=200)
    id = serializers.SlugField(
        max_length=64,
        required=False,
        validators=[UniqueValidator(queryset=Group.objects.all())],
    )

    def validate_id(self, value):
        if value == DEFAULT_GROUP_ID:
            raise serializers.ValidationError(
                f"{DEFAULT_GROUP_ID!r} is reserved for the default group"
            )
        return value


class CardContentSerializer(serializers.Serializer):
    term = serializers.CharField(max_length=255)
    phonetic = serializers.CharField(max_length=255, required=False, allow_blank=True)
    term_translation = serializers.CharField(
        max_length=255, required=False, allow_blank=True, allow_null=True
    )
    definition_en = serializers.CharField(required=False, allow_blank=True)
    definition_cn = serializers.CharField()
    example = serializers.CharField(required=False, allow_blank=True)
    wrong_definitions = serializers.ListField(
        child=serializers.CharField(), required=False, max_length=DISTRACTOR_COUNT
    )


class TermInSerializer(CardContentSerializer):
    group_id = serializers.CharField(max_length=64, required=False, allow_null=True)


class DueQuerySerializer(serializers.Serializer):
    until = serializers.DateTimeField(required=False)  # ISO-8601
    group = serializers.CharField(max_length=64, required=False)


class OutcomeSerializer(serializers.Serializer):
    term_id = serializers.CharField(max_length=64)
    success = serializers.BooleanField()


class ReviewBatchSerializer(serializers.Serializer):
    outcomes = OutcomeSerializer(many=True)


class SessionStartSerializer(serializers.Serializer):
    group_id = serializers.CharField(max_length=64, required=False, allow_null=True)


class AnswerSerializer(serializers.Serializer):
    position = serializers.IntegerField(min_value=0)
    option = serializers.CharField(allow_blank=True, trim_whitespace=False)
