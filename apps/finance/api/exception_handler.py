"""
Maps exceptions to problem-details responses:
{type, title, status, detail, errors?}.
"""

import logging

from django.http import Http404
from rest_framework import exceptions, status
from rest_framework.response import Response
from rest_framework.views import exception_handler

from apps.finance.domain.exceptions import FinanceTrackerError, ValidationError

logger = logging.getLogger(__name__)

PROBLEM_CONTENT_TYPE = "application/problem+json"

PROBLEM_TYPES = {
    400: "https://tools.ietf.org/html/rfc9110#section-15.5.1",
    401: "https://tools.ietf.org/html/rfc9110#section-15.5.2",
    403: "https://tools.ietf.org/html/rfc9110#section-15.5.4",
    404: "https://tools.ietf.org/html/rfc9110#section-15.5.5",
    405: "https://tools.ietf.org/html/rfc9110#section-15.5.6",
    409: "https://tools.ietf.org/html/rfc9110#section-15.5.10",
    415: "https://tools.ietf.org/html/rfc9110#section-15.5.16",
    500: "https://tools.ietf.org/html/rfc9110#section-15.6.1",
}

TITLES = {
    400: "Bad request",
    401: "Unauthorized",
    403: "Forbidden",
    404: "Resource not found",
    405: "Method not allowed",
    409: "Conflict",
    415: "Unsupported media type",
    500: "An unexpected error occurred",
}


def problem_response(status_code: int, title: str, detail: str, errors: dict | None = None, headers=None) -> Response:
    body = {
        "type": PROBLEM_TYPES.get(status_code, "about:blank"),
        "title": title,
        "status": status_code,
        "detail": detail,
    }
    if errors:
        body["errors"] = errors

    response = Response(body, status=status_code, headers=headers)
    response.content_type = PROBLEM_CONTENT_TYPE
    return response


def problem_details_exception_handler(exc, context):
    if isinstance(exc, ValidationError):
        return problem_response(exc.status_code, exc.title, exc.detail, errors=exc.errors)

    if isinstance(exc, FinanceTrackerError):
        return problem_response(exc.status_code, exc.title, exc.detail)

    if isinstance(exc, (exceptions.APIException, Http404)):
        # Let DRF set auth headers (WWW-Authenticate) and convert Http404.
        response = exception_handler(exc, context)
        if response is not None:
            return _from_drf_response(exc, response)

    view = context.get("view")
    logger.exception(
        "Unhandled exception in %s", type(view).__name__ if view is not None else "unknown view", exc_info=exc
    )
    return problem_response(
        status.HTTP_500_INTERNAL_SERVER_ERROR,
        TITLES[500],
        "An unexpected error occurred. Please try again later.",
    )


def _from_drf_response(exc, response: Response) -> Response:
    status_code = response.status_code
    data = response.data
    errors = None

    if isinstance(exc, exceptions.ValidationError):
        errors = _normalize_errors(data)
        detail = "One or more validation errors occurred"
    elif isinstance(data, dict) and "detail" in data:
        detail = str(data["detail"])
    else:
        detail = str(data)

    headers = {key: value for key, value in response.items() if key.lower() != "content-type"}
    return problem_response(status_code, TITLES.get(status_code, "Error"), detail, errors=errors, headers=headers)


def _normalize_errors(data) -> dict[str, list[str]]:
    if isinstance(data, dict):
        return {
            field: [str(m) for m in messages] if isinstance(messages, (list, tuple)) else [str(messages)]
            for field, messages in data.items()
        }
    if isinstance(data, (list, tuple)):
        return {"non_field_errors": [str(m) for m in data]}
    return {"non_field_errors": [str(data)]}
