"""
Client-side result types.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Generic, List, Optional, TypeVar

import requests

T = TypeVar("T")

UNEXPECTED_ERROR = "An unexpected error occurred while processing the request."


@dataclass
class ProblemDetails:
    """Error body returned by the API for every non-2xx response."""
    type: Optional[str] = None
    title: Optional[str] = None
    status: Optional[int] = None
    detail: Optional[str] = None
    errors: Dict[str, List[str]] = field(default_factory=dict)

    @classmethod
    def from_json(cls, data: Any) -> "ProblemDetails":
        if not isinstance(data, dict):
            return cls()
        return cls(
            type=data.get("type"),
            title=data.get("title"),
            status=data.get("status"),
            detail=data.get("detail"),
            errors=data.get("errors") or {},
        )


@dataclass
class ApiResult(Generic[T]):
    is_success: bool
    status_code: Optional[int] = None
    value: Optional[T] = None
    general_errors: List[str] = field(default_factory=list)
    field_errors: Dict[str, List[str]] = field(default_factory=dict)

    @classmethod
    def success(cls, value: Optional[T] = None, status_code: Optional[int] = None) -> "ApiResult[T]":
        return cls(is_success=True, status_code=status_code, value=value)

    @classmethod
    def failure(
        cls,
        general_errors: Optional[List[str]] = None,
        field_errors: Optional[Dict[str, List[str]]] = None,
        status_code: Optional[int] = None,
    ) -> "ApiResult[T]":
        return cls(
            is_success=False,
            status_code=status_code,
            general_errors=list(general_errors or []),
            field_errors=dict(field_errors or {}),
        )

    @classmethod
    def from_response(cls, response: requests.Response) -> "ApiResult":
        """
        2xx responses become successes carrying the decoded body (None for
        empty bodies). Anything else is read as problem details.
        """
        if response.ok:
            value = response.json() if response.content else None
            return cls.success(value, status_code=response.status_code)

        try:
            problem = ProblemDetails.from_json(response.json())
        except ValueError:
            problem = ProblemDetails()

        general_errors = [problem.detail] if problem.detail and problem.detail.strip() else [UNEXPECTED_ERROR]
        return cls.failure(general_errors, problem.errors, status_code=response.status_code)


@dataclass
class PagedResult(Generic[T]):
    items: List[T] = field(default_factory=list)
    page: int = 1
    page_size: int = 20
    total_count: int = 0
    total_pages: int = 0

    @classmethod
    def from_json(cls, data: Dict[str, Any]) -> "PagedResult":
        return cls(
            items=list(data.get("items") or []),
            page=data.get("page", 1),
            page_size=data.get("page_size", 20),
            total_count=data.get("total_count", 0),
            total_pages=data.get("total_pages", 0),
        )
