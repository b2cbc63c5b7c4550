"""
Category serializers.
"""

from rest_framework import serializers

from .models import Category, color_validator, slug_validator


class CategorySerializer(serializers.ModelSerializer):

    class Meta:
        model = Category
        fields = [
            'id',
            'name',
            'slug',
            'description',
            'color',
            'article_count',
            'created_at',
            'updated_at',
        ]
        read_only_fields = fields


class CategorySummarySerializer(serializers.ModelSerializer):
    """Embedded in article payloads."""

    class Meta:
        model = Category
        fields = ['id', 'name', 'slug', 'color']
        read_only_fields = fields


class CategoryCreateSerializer(serializers.Serializer):
    name = serializers.CharField(max_length=100)
    slug = serializers.CharField(max_length=100)
    description = serializers.CharField(max_length=500, required=False, allow_blank=True, default='')
    color = serializers.CharField(max_length=7, validators=[color_validator])

    def validate_slug(self, value):
        value = value.strip().lower()
        slug_validator(value)
        return value


class CategoryUpdateSerializer(serializers.Serializer):
    name = serializers.CharField(max_length=100, required=False)
    description = serializers.CharField(max_length=500, required=False, allow_blank=True)
    color = serializers.CharField(max_length=7, required=False, validators=[color_validator])
