"""
Draft assistant API views.

POST /api/ai/summarize/  - {"content"}                 -> {"summary": [...]}
POST /api/ai/tags/       - {"content"}                 -> {"tags": [...]}
POST /api/ai/seo/        - {"title", "content"}        -> {"seo": {...}}
POST /api/ai/translate/  - {"content", "direction"}    -> {"translation": "..."}
POST /api/ai/complete/   - {"title", "content"}        -> {"summary", "tags", "seo"}

Staff only; throttled with the "ai" scope.
"""

import logging

from rest_framework.permissions import IsAuthenticated
from rest_framework.views import APIView

from apps.core.exceptions import success_response
from apps.core.permissions import IsStaffMember
from apps.core.throttling import AIEndpointThrottle

from .serializers import (
    ContentSerializer,
    SummarizeSerializer,
    TitledContentSerializer,
    TranslateSerializer,
)
from .services import DraftAssistant

logger = logging.getLogger(__name__)


class AssistantView(APIView):
    permission_classes = [IsAuthenticated, IsStaffMember]
    throttle_classes = [AIEndpointThrottle]
    input_serializer_class = ContentSerializer
    assistant_class = DraftAssistant

    def get_input(self, request):
        serializer = self.input_serializer_class(data=request.data)
        serializer.is_valid(raise_exception=True)
        return serializer.validated_data

    @property
    def assistant(self) -> DraftAssistant:
        return self.assistant_class()


class SummarizeView(AssistantView):
    input_serializer_class = SummarizeSerializer

    def post(self, request):
        data = self.get_input(request)
        summary = self.assistant.summarize(data['content'])
        return success_response({'summary': summary}, message='Summary generated successfully')


class TagsView(AssistantView):

    def post(self, request):
        data = self.get_input(request)
        tags = self.assistant.suggest_tags(data['content'])
        return success_response({'tags': tags}, message='Tags generated successfully')


class SEOView(AssistantView):
    input_serializer_class = TitledContentSerializer

    def post(self, request):
        data = self.get_input(request)
        seo = self.assistant.generate_seo(data['title'], data['content'])
        return success_response({'seo': seo}, message='SEO metadata generated successfully')


class TranslateView(AssistantView):
    input_serializer_class = TranslateSerializer

    def post(self, request):
        data = self.get_input(request)
        translation = self.assistant.translate(data['content'], data['direction'])
        return success_response({'translation': translation}, message='Translation completed successfully')


class CompleteView(AssistantView):
    """Summary, tags and SEO from a single model call."""

    input_serializer_class = TitledContentSerializer

    def post(self, request):
        data = self.get_input(request)
        result = self.assistant.complete(data['title'], data['content'])
        logger.info(
            "Complete assist for user %s: %d points, %d tags",
            request.user.pk, len(result['summary']), len(result['tags']),
        )
        return success_response(result, message='AI assistance generated successfully')
