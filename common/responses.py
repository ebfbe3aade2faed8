"""Translate operation results into DRF responses."""

from rest_framework import status
from rest_framework.response import Response

from .identity import is_authenticated
from .results import ActionResult

_STATUS_BY_ERROR = {
    "validation": status.HTTP_400_BAD_REQUEST,
    "integrity": status.HTTP_400_BAD_REQUEST,
    "authorization": status.HTTP_403_FORBIDDEN,
    "not_found": status.HTTP_404_NOT_FOUND,
    "conflict": status.HTTP_409_CONFLICT,
}


def result_response(result: ActionResult, *, request=None, success_status: int = status.HTTP_200_OK) -> Response:
    if result.success:
        return Response(result.as_dict(), status=success_status)
    code = _STATUS_BY_ERROR.get(result.error, status.HTTP_500_INTERNAL_SERVER_ERROR)
    if result.error == "authorization" and request is not None and not is_authenticated(request.user):
        code = status.HTTP_401_UNAUTHORIZED
    return Response(result.as_dict(), status=code)


def first_error_message(errors) -> str:
    """Return the first human-readable message from serializer errors."""

    if isinstance(errors, dict):
        for field, value in errors.items():
            message = first_error_message(value)
            if field == "non_field_errors":
                return message
            return f"{field}: {message}"
    if isinstance(errors, (list, tuple)) and errors:
        return first_error_message(errors[0])
    return str(errors) or "Invalid input."


def invalid_input_response(serializer) -> Response:
    """Report serializer errors in the uniform result envelope."""

    result = ActionResult.fail(first_error_message(serializer.errors), error="validation")
    return Response(result.as_dict(), status=status.HTTP_400_BAD_REQUEST)
