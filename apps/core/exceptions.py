"""
Standardized error handling for the newsroom API.

Provides consistent error codes, exception classes, and the response
envelope shared by every endpoint.
"""

import logging
import uuid
from enum import Enum
from typing import Any, Dict, Optional
import dataclasses
from dataclasses import dataclass

from django.core.exceptions import ValidationError as DjangoValidationError
from django.http import Http404
from django.utils import timezone
from rest_framework import status
from rest_framework.exceptions import APIException
from rest_framework.response import Response
from rest_framework.views import exception_handler as drf_exception_handler

logger = logging.getLogger(__name__)


# =============================================================================
# Error Codes
# =============================================================================

class ErrorCode(str, Enum):
    """Standardized error codes for API responses."""

    # Validation errors (400)
    VALIDATION_ERROR = "VALIDATION_ERROR"

    # Authentication/Authorization (401/403)
    AUTHENTICATION_REQUIRED = "AUTHENTICATION_REQUIRED"
    FORBIDDEN = "FORBIDDEN"
    RATE_LIMITED = "RATE_LIMITED"

    # Resource errors (404/409)
    NOT_FOUND = "NOT_FOUND"
    ARTICLE_NOT_FOUND = "ARTICLE_NOT_FOUND"
    CATEGORY_NOT_FOUND = "CATEGORY_NOT_FOUND"
    CATEGORY_EXISTS = "CATEGORY_EXISTS"
    CATEGORY_HAS_ARTICLES = "CATEGORY_HAS_ARTICLES"
    USER_EXISTS = "USER_EXISTS"

    # Workflow errors
    INVALID_TRANSITION = "INVALID_TRANSITION"
    CONCURRENT_MODIFICATION = "CONCURRENT_MODIFICATION"
    SLUG_GENERATION_EXHAUSTED = "SLUG_GENERATION_EXHAUSTED"

    # External service errors
    AI_SERVICE_ERROR = "AI_SERVICE_ERROR"

    # Server errors
    INTERNAL_ERROR = "INTERNAL_ERROR"


# =============================================================================
# Error Response Schema
# =============================================================================

def _timestamp() -> str:
    return timezone.now().isoformat()


@dataclass
class ErrorResponse:
    """Standardized error envelope."""
    code: ErrorCode
    message: str
    field: Optional[str] = None
    details: Optional[Dict[str, Any]] = None
    request_id: str = dataclasses.field(default_factory=lambda: str(uuid.uuid4()))

    def to_dict(self) -> Dict[str, Any]:
        result = {
            "success": False,
            "error": self.message,
            "code": self.code.value if isinstance(self.code, ErrorCode) else self.code,
            "timestamp": _timestamp(),
            "request_id": self.request_id,
        }
        if self.field:
            result["field"] = self.field
        if self.details:
            result["details"] = self.details
        return result

    def to_response(self, status_code: int = 400) -> Response:
        return Response(self.to_dict(), status=status_code)


# =============================================================================
# Custom Exceptions
# =============================================================================

class NewsroomException(APIException):
    """Base exception for newsroom API errors."""

    status_code = status.HTTP_400_BAD_REQUEST
    error_code = ErrorCode.INTERNAL_ERROR
    default_detail = "An error occurred"

    def __init__(
        self,
        message: Optional[str] = None,
        code: Optional[ErrorCode] = None,
        field: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
        status_code: Optional[int] = None,
    ):
        self.message = message or self.default_detail
        self.error_code = code or self.error_code
        self.field = field
        self.error_details = details or {}

        if status_code:
            self.status_code = status_code

        super().__init__(detail=self.message)

    def get_error_response(self, request_id: Optional[str] = None) -> ErrorResponse:
        return ErrorResponse(
            code=self.error_code,
            message=self.message,
            field=self.field,
            details=self.error_details if self.error_details else None,
            request_id=request_id or str(uuid.uuid4()),
        )


class ValidationError(NewsroomException):
    """Validation error."""
    status_code = status.HTTP_400_BAD_REQUEST
    error_code = ErrorCode.VALIDATION_ERROR
    default_detail = "Validation failed"


class NotFoundError(NewsroomException):
    """Resource not found."""
    status_code = status.HTTP_404_NOT_FOUND
    error_code = ErrorCode.NOT_FOUND
    default_detail = "Resource not found"


class ArticleNotFoundError(NotFoundError):
    error_code = ErrorCode.ARTICLE_NOT_FOUND
    default_detail = "Article not found"


class CategoryNotFoundError(NotFoundError):
    error_code = ErrorCode.CATEGORY_NOT_FOUND
    default_detail = "Category not found"


class ForbiddenError(NewsroomException):
    """Actor lacks authority for the requested action."""
    status_code = status.HTTP_403_FORBIDDEN
    error_code = ErrorCode.FORBIDDEN
    default_detail = "You do not have permission to perform this action"


class InvalidTransitionError(NewsroomException):
    """Requested status is not reachable from the current status."""
    status_code = status.HTTP_409_CONFLICT
    error_code = ErrorCode.INVALID_TRANSITION
    default_detail = "Invalid status transition"


class ConcurrentModificationError(NewsroomException):
    """Article changed underneath the writer too many times."""
    status_code = status.HTTP_409_CONFLICT
    error_code = ErrorCode.CONCURRENT_MODIFICATION
    default_detail = "Article was modified concurrently; reload and retry"


class SlugGenerationExhaustedError(NewsroomException):
    status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    error_code = ErrorCode.SLUG_GENERATION_EXHAUSTED
    default_detail = "Could not allocate a unique slug"


class DuplicateError(NewsroomException):
    """Duplicate category."""
    status_code = status.HTTP_409_CONFLICT
    error_code = ErrorCode.CATEGORY_EXISTS
    default_detail = "Category already exists"


class UserExistsError(NewsroomException):
    """Username or email already belongs to another account."""
    status_code = status.HTTP_409_CONFLICT
    error_code = ErrorCode.USER_EXISTS
    default_detail = "User with this email already exists"


class CategoryInUseError(NewsroomException):
    status_code = status.HTTP_409_CONFLICT
    error_code = ErrorCode.CATEGORY_HAS_ARTICLES
    default_detail = "Cannot delete category with existing articles"


class AIServiceError(NewsroomException):
    """Upstream text-generation failure."""
    status_code = status.HTTP_502_BAD_GATEWAY
    error_code = ErrorCode.AI_SERVICE_ERROR
    default_detail = "AI service is unavailable"


# =============================================================================
# Exception Handler
# =============================================================================

def get_request_id(request) -> str:
    """Get or generate request ID from request."""
    if hasattr(request, 'request_id'):
        return request.request_id
    return str(uuid.uuid4())


def newsroom_exception_handler(exc, context):
    """
    Custom exception handler for the newsroom API.

    Converts all exceptions to the standardized error envelope.
    """
    request = context.get('request')
    request_id = get_request_id(request) if request else str(uuid.uuid4())

    # Handle our custom exceptions
    if isinstance(exc, NewsroomException):
        logger.warning(
            f"API Error: {exc.error_code.value}",
            extra={
                "error_code": exc.error_code.value,
                "error_message": exc.message,
                "field": exc.field,
                "status_code": exc.status_code,
            }
        )
        return exc.get_error_response(request_id).to_response(exc.status_code)

    # Handle Django validation errors
    if isinstance(exc, DjangoValidationError):
        if hasattr(exc, 'message_dict'):
            details = exc.message_dict
            message = "Validation failed"
        else:
            details = {"errors": exc.messages}
            message = exc.messages[0] if exc.messages else "Validation failed"

        return ErrorResponse(
            code=ErrorCode.VALIDATION_ERROR,
            message=message,
            details=details,
            request_id=request_id,
        ).to_response(status.HTTP_400_BAD_REQUEST)

    # Handle 404
    if isinstance(exc, Http404):
        return ErrorResponse(
            code=ErrorCode.NOT_FOUND,
            message=str(exc) if str(exc) else "Resource not found",
            request_id=request_id,
        ).to_response(status.HTTP_404_NOT_FOUND)

    # Use DRF's default handler for standard exceptions
    response = drf_exception_handler(exc, context)

    if response is not None:
        # Wrap DRF response in our format
        error_code = ErrorCode.VALIDATION_ERROR
        if response.status_code == 401:
            error_code = ErrorCode.AUTHENTICATION_REQUIRED
        elif response.status_code == 403:
            error_code = ErrorCode.FORBIDDEN
        elif response.status_code == 404:
            error_code = ErrorCode.NOT_FOUND
        elif response.status_code == 429:
            error_code = ErrorCode.RATE_LIMITED
        elif response.status_code >= 500:
            error_code = ErrorCode.INTERNAL_ERROR

        # Extract message from DRF response
        if isinstance(response.data, dict):
            if 'detail' in response.data:
                message = str(response.data['detail'])
                details = None
            else:
                message = "Validation failed"
                details = response.data
        elif isinstance(response.data, list):
            message = str(response.data[0]) if response.data else "Error"
            details = {"errors": response.data}
        else:
            message = str(response.data)
            details = None

        error_response = ErrorResponse(
            code=error_code,
            message=message,
            details=details,
            request_id=request_id,
        ).to_response(response.status_code)
        # Keep Retry-After / WWW-Authenticate from DRF
        for header in ('Retry-After', 'WWW-Authenticate'):
            if header in response:
                error_response[header] = response[header]
        return error_response

    # Unhandled exception - log and return generic error
    logger.exception(
        f"Unhandled exception: {type(exc).__name__}",
        extra={
            "exception_type": type(exc).__name__,
        }
    )

    return ErrorResponse(
        code=ErrorCode.INTERNAL_ERROR,
        message="An unexpected error occurred",
        request_id=request_id,
    ).to_response(status.HTTP_500_INTERNAL_SERVER_ERROR)


# =============================================================================
# Response Helpers
# =============================================================================

def success_response(
    data: Any = None,
    message: Optional[str] = None,
    status_code: int = 200,
) -> Response:
    """Create a standardized success response."""
    response_data = {
        "success": True,
        "data": data,
    }

    if message:
        response_data['message'] = message

    response_data['timestamp'] = _timestamp()
    return Response(response_data, status=status_code)


def created_response(
    data: Any = None,
    message: str = "Created successfully",
) -> Response:
    """Create a 201 Created response."""
    return success_response(data=data, message=message, status_code=201)
