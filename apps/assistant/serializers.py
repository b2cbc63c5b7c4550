"""
Input serializers for the assistant endpoints.
"""

from rest_framework import serializers

from .services import EN_TO_HI, HI_TO_EN

MIN_SUMMARY_CONTENT = 50


class ContentSerializer(serializers.Serializer):
    content = serializers.CharField(trim_whitespace=True)


class SummarizeSerializer(ContentSerializer):
    content = serializers.CharField(
        min_length=MIN_SUMMARY_CONTENT,
        error_messages={'min_length': 'Content must be at least 50 characters long'},
    )


class TitledContentSerializer(ContentSerializer):
    title = serializers.CharField(max_length=200)


class TranslateSerializer(ContentSerializer):
    direction = serializers.ChoiceField(
        choices=[HI_TO_EN, EN_TO_HI],
        error_messages={'invalid_choice': 'Direction must be either HI_TO_EN or EN_TO_HI'},
    )
