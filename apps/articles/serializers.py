"""
Article serializers.
"""

from rest_framework import serializers

from apps.categories.serializers import CategorySummarySerializer
from apps.core.serializers import AuthorSerializer

from .models import Article, ArticleStatusChange, normalize_tags
from .workflow import STATUS_CHOICES

SEO_TITLE_MAX = 60
SEO_DESCRIPTION_MAX = 160
SEO_KEYWORDS_MAX = 7


class SEOSerializer(serializers.Serializer):
    title = serializers.CharField(max_length=SEO_TITLE_MAX, required=False, allow_blank=True)
    meta_description = serializers.CharField(max_length=SEO_DESCRIPTION_MAX, required=False, allow_blank=True)
    keywords = serializers.ListField(
        child=serializers.CharField(max_length=100),
        max_length=SEO_KEYWORDS_MAX,
        required=False,
    )

    def validate_keywords(self, value):
        return [keyword.strip() for keyword in value if keyword.strip()]


class ArticleListSerializer(serializers.ModelSerializer):
    """Compact serializer for article lists (no body)."""

    author = AuthorSerializer(read_only=True)
    category = CategorySummarySerializer(read_only=True)

    class Meta:
        model = Article
        fields = [
            'id',
            'title',
            'slug',
            'summary',
            'tags',
            'status',
            'author',
            'category',
            'featured_image',
            'published_at',
            'view_count',
            'created_at',
            'updated_at',
        ]
        read_only_fields = fields


class ArticleDetailSerializer(ArticleListSerializer):
    """Full article."""

    class Meta(ArticleListSerializer.Meta):
        fields = ArticleListSerializer.Meta.fields + [
            'content',
            'seo',
            'pdf_url',
            'version',
        ]
        read_only_fields = fields


class ArticleWriteSerializer(serializers.Serializer):
    """
    Input for create (all content fields required) and PATCH (partial=True).

    category accepts a category UUID or slug; the engine resolves it.
    """
    title = serializers.CharField(max_length=200)
    content = serializers.CharField()
    summary = serializers.ListField(
        child=serializers.CharField(max_length=500),
        required=False,
    )
    tags = serializers.ListField(
        child=serializers.CharField(max_length=50),
        required=False,
    )
    seo = SEOSerializer(required=False)
    category = serializers.CharField(max_length=100)
    featured_image = serializers.CharField(max_length=500)
    pdf_url = serializers.CharField(max_length=500, required=False, allow_blank=True)
    status = serializers.ChoiceField(choices=STATUS_CHOICES, required=False)
    note = serializers.CharField(max_length=500, required=False, allow_blank=True, default='')

    def validate_title(self, value):
        value = value.strip()
        if not value:
            raise serializers.ValidationError("Title is required")
        return value

    def validate_summary(self, value):
        return [line.strip() for line in value if line.strip()]

    def validate_tags(self, value):
        return normalize_tags(value)

    def validate_featured_image(self, value):
        value = value.strip()
        if not value:
            raise serializers.ValidationError("Featured image is required")
        return value


class TransitionSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=STATUS_CHOICES)
    note = serializers.CharField(max_length=500, required=False, allow_blank=True, default='')


class ArticleStatusChangeSerializer(serializers.ModelSerializer):
    changed_by = AuthorSerializer(read_only=True)

    class Meta:
        model = ArticleStatusChange
        fields = ['id', 'from_status', 'to_status', 'changed_by', 'note', 'created_at']
        read_only_fields = fields
