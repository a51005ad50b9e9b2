"""
HTTP client for the Finance Tracker API.

Every call returns an ApiResult; problem-details error bodies are turned
into failures instead of exceptions. Network errors propagate as
requests exceptions.
"""

import logging
from datetime import date
from decimal import Decimal
from typing import Any, Dict, Optional
from uuid import UUID

import requests

from client.models import ApiResult, PagedResult

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 10


class FinanceTrackerClient:

    def __init__(
        self,
        base_url: str,
        token: Optional[str] = None,
        session: Optional[requests.Session] = None,
        timeout: float = DEFAULT_TIMEOUT,
    ):
        self.base_url = base_url.rstrip("/")
        self.session = session or requests.Session()
        self.timeout = timeout
        self.token = token

    def _request(self, method: str, path: str, json: Any = None, params: Optional[Dict] = None) -> ApiResult:
        headers = {"Accept": "application/json"}
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"

        response = self.session.request(
            method,
            f"{self.base_url}/api/{path.lstrip('/')}",
            json=json,
            params={k: v for k, v in (params or {}).items() if v is not None},
            headers=headers,
            timeout=self.timeout,
        )

        if response.status_code == 401:
            logger.warning("Request %s %s was rejected as unauthenticated", method, path)
            self.token = None

        return ApiResult.from_response(response)

    def register(self, username: str, password: str) -> ApiResult:
        return self._request("POST", "auth/register", json={"username": username, "password": password})

    def login(self, username: str, password: str) -> ApiResult:
        """On success the token is kept and sent with every later call."""
        result = self._request("POST", "auth/login", json={"username": username, "password": password})
        if result.is_success:
            self.token = result.value["token"]
        return result

    def logout(self) -> None:
        self.token = None

    def list_users(self) -> ApiResult:
        return self._request("GET", "users")

    def get_user(self, user_id: UUID) -> ApiResult:
        return self._request("GET", f"users/{user_id}")

    def update_user(self, user_id: UUID, username: str) -> ApiResult:
        return self._request("PUT", f"users/{user_id}", json={"username": username})

    def delete_user(self, user_id: UUID) -> ApiResult:
        return self._request("DELETE", f"users/{user_id}")

    def change_password(self, current_password: str, new_password: str) -> ApiResult:
        return self._request(
            "PUT",
            "users/me/change-password",
            json={"current_password": current_password, "new_password": new_password},
        )

    def list_wallets(self) -> ApiResult:
        return self._request("GET", "wallets")

    def get_wallet(self, wallet_id: UUID) -> ApiResult:
        return self._request("GET", f"wallets/{wallet_id}")

    def create_wallet(self, name: str, base_currency_code: str) -> ApiResult:
        return self._request("POST", "wallets", json={"name": name, "base_currency_code": base_currency_code})

    def update_wallet(self, wallet_id: UUID, name: str) -> ApiResult:
        return self._request("PUT", f"wallets/{wallet_id}", json={"name": name})

    def delete_wallet(self, wallet_id: UUID) -> ApiResult:
        return self._request("DELETE", f"wallets/{wallet_id}")

    def list_wallet_operations(self, wallet_id: UUID) -> ApiResult:
        return self._request("GET", f"wallets/{wallet_id}/operations")

    def get_operation(self, wallet_id: UUID, operation_id: UUID) -> ApiResult:
        return self._request("GET", f"wallets/{wallet_id}/operations/{operation_id}")

    def create_operation(
        self,
        wallet_id: UUID,
        type_id: UUID,
        amount_original: Decimal,
        operation_date: date,
        currency_original_code: Optional[str] = None,
        note: Optional[str] = None,
    ) -> ApiResult:
        return self._request(
            "POST",
            f"wallets/{wallet_id}/operations",
            json=_operation_body(type_id, amount_original, operation_date, currency_original_code, note),
        )

    def update_operation(
        self,
        wallet_id: UUID,
        operation_id: UUID,
        type_id: UUID,
        amount_original: Decimal,
        operation_date: date,
        currency_original_code: Optional[str] = None,
        note: Optional[str] = None,
    ) -> ApiResult:
        return self._request(
            "PUT",
            f"wallets/{wallet_id}/operations/{operation_id}",
            json=_operation_body(type_id, amount_original, operation_date, currency_original_code, note),
        )

    def delete_operation(self, wallet_id: UUID, operation_id: UUID) -> ApiResult:
        return self._request("DELETE", f"wallets/{wallet_id}/operations/{operation_id}")

    def list_operations(
        self,
        wallet_id: Optional[UUID] = None,
        date_from: Optional[date] = None,
        date_to: Optional[date] = None,
        page: int = 1,
        page_size: int = 20,
    ) -> ApiResult:
        """Paged operations across all wallets; `value` is a PagedResult."""
        result = self._request(
            "GET",
            "operations",
            params={
                "wallet_id": str(wallet_id) if wallet_id else None,
                "from": date_from.isoformat() if date_from else None,
                "to": date_to.isoformat() if date_to else None,
                "page": page,
                "page_size": page_size,
            },
        )
        if result.is_success:
            result.value = PagedResult.from_json(result.value)
        return result

    def list_types(self) -> ApiResult:
        return self._request("GET", "types")

    def get_type(self, type_id: UUID) -> ApiResult:
        return self._request("GET", f"types/{type_id}")

    def create_type(self, name: str, kind: str, description: str = "") -> ApiResult:
        return self._request("POST", "types", json={"name": name, "kind": kind, "description": description})

    def update_type(self, type_id: UUID, name: str, description: str = "") -> ApiResult:
        return self._request("PUT", f"types/{type_id}", json={"name": name, "description": description})

    def delete_type(self, type_id: UUID) -> ApiResult:
        return self._request("DELETE", f"types/{type_id}")

    def list_currencies(self) -> ApiResult:
        return self._request("GET", "currencies")

    def get_currency(self, code: str) -> ApiResult:
        return self._request("GET", f"currencies/{code}")

    def daily_report(self, wallet_id: UUID, day: date) -> ApiResult:
        return self._request("GET", "reports/daily", params={"wallet_id": str(wallet_id), "date": day.isoformat()})

    def period_report(self, wallet_id: UUID, start: date, end: date) -> ApiResult:
        return self._request(
            "GET",
            "reports/period",
            params={"wallet_id": str(wallet_id), "start": start.isoformat(), "end": end.isoformat()},
        )


def _operation_body(type_id, amount_original, operation_date, currency_original_code, note) -> Dict[str, Any]:
    return {
        "type_id": str(type_id),
        "amount_original": str(amount_original),
        "currency_original_code": currency_original_code,
        "date": operation_date.isoformat(),
        "note": note,
    }
