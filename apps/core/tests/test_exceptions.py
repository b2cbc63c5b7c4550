"""
Tests for the error envelope.
"""

import uuid

from apps.core.exceptions import (
    ErrorCode,
    ErrorResponse,
    UserExistsError,
    ValidationError,
)


class TestErrorResponse:

    def test_defaults_generate_request_id(self):
        error = ErrorResponse(code=ErrorCode.NOT_FOUND, message="Resource not found")

        assert error.field is None
        assert uuid.UUID(error.request_id)

    def test_to_dict_includes_field_and_details(self):
        body = ErrorResponse(
            code=ErrorCode.VALIDATION_ERROR,
            message="Title is required",
            field='title',
            details={'title': ['required']},
            request_id='req-1',
        ).to_dict()

        assert body['success'] is False
        assert body['code'] == 'VALIDATION_ERROR'
        assert body['field'] == 'title'
        assert body['details'] == {'title': ['required']}
        assert body['request_id'] == 'req-1'
        assert 'timestamp' in body

    def test_optional_keys_omitted(self):
        body = ErrorResponse(code=ErrorCode.FORBIDDEN, message="No").to_dict()
        assert 'field' not in body
        assert 'details' not in body


class TestNewsroomException:

    def test_error_response_carries_field(self):
        response = ValidationError("Bad slug", field='slug').get_error_response('req-2')

        assert response.field == 'slug'
        assert response.request_id == 'req-2'
        assert response.code == ErrorCode.VALIDATION_ERROR

    def test_user_exists_is_conflict(self):
        exc = UserExistsError(field='email')

        assert exc.status_code == 409
        assert exc.get_error_response().to_dict()['code'] == 'USER_EXISTS'
