"""
ViewSets for the finance API v1.
Views parse the request, call one application service and render its DTOs.
"""

import uuid
from dataclasses import asdict
from datetime import date

from django.utils.dateparse import parse_date
from drf_spectacular.types import OpenApiTypes
from drf_spectacular.utils import OpenApiParameter, extend_schema
from rest_framework import status, viewsets
from rest_framework.decorators import action
from rest_framework.exceptions import NotFound
from rest_framework.permissions import AllowAny
from rest_framework.response import Response
from rest_framework.views import APIView

from apps.finance.api.v1.serializers import (
    CurrencySerializer,
    FinanceReportSerializer,
    FinancialOperationDetailsSerializer,
    IdSerializer,
    OperationTypeSerializer,
    PagedFinancialOperationSerializer,
    TokenSerializer,
    UserSerializer,
    WalletSerializer,
)
from apps.finance.application.dto import OperationQuery, PageRequest
from apps.finance.application.services.auth import AuthService
from apps.finance.application.services.currencies import CurrencyService
from apps.finance.application.services.operation_types import OperationTypeService
from apps.finance.application.services.operations import FinancialOperationService
from apps.finance.application.services.reports import ReportService
from apps.finance.application.services.users import UserService
from apps.finance.application.services.wallets import WalletService
from apps.finance.application.validators import (
    ChangePasswordValidator,
    FinancialOperationUpsertValidator,
    LoginValidator,
    OperationTypeCreateValidator,
    OperationTypeUpdateValidator,
    RegisterValidator,
    UserUpdateValidator,
    WalletCreateValidator,
    WalletUpdateValidator,
)
from apps.finance.domain.exceptions import NotFoundError, ValidationError
from apps.finance.infrastructure.persistence.unit_of_work import UnitOfWork

UUID_PATTERN = r"[0-9a-fA-F]{8}-?[0-9a-fA-F]{4}-?[0-9a-fA-F]{4}-?[0-9a-fA-F]{4}-?[0-9a-fA-F]{12}"


def parse_uuid(value: str, what: str = "Resource") -> uuid.UUID:
    try:
        return uuid.UUID(str(value))
    except ValueError:
        raise NotFoundError(f"{what} with id {value} was not found")


def query_uuid(params, name: str, required: bool = False) -> uuid.UUID | None:
    raw = params.get(name)
    if not raw:
        if required:
            raise ValidationError.for_field(name, f"'{name}' is required")
        return None
    try:
        return uuid.UUID(raw)
    except ValueError:
        raise ValidationError.for_field(name, f"'{name}' must be a valid UUID")


def query_date(params, name: str, required: bool = False) -> date | None:
    raw = params.get(name)
    if not raw:
        if required:
            raise ValidationError.for_field(name, f"'{name}' is required")
        return None
    try:
        parsed = parse_date(raw)
    except ValueError:
        parsed = None
    if parsed is None:
        raise ValidationError.for_field(name, f"'{name}' must be a date in YYYY-MM-DD format")
    return parsed


def created(new_id: uuid.UUID) -> Response:
    return Response(IdSerializer({"id": new_id}).data, status=status.HTTP_201_CREATED)


class FinanceViewSet(viewsets.ViewSet):
    """One UnitOfWork per request; the caller's UserContext comes from request.auth."""

    lookup_value_regex = UUID_PATTERN

    def initial(self, request, *args, **kwargs):
        self.uow = UnitOfWork()
        super().initial(request, *args, **kwargs)

    @property
    def user_context(self):
        return self.request.auth


@extend_schema(tags=['Auth'])
class AuthViewSet(FinanceViewSet):
    permission_classes = [AllowAny]
    authentication_classes = []

    @extend_schema(request=RegisterValidator, responses={201: IdSerializer})
    @action(detail=False, methods=['post'])
    def register(self, request):
        user_id = AuthService(self.uow).register(request.data)
        return created(user_id)

    @extend_schema(request=LoginValidator, responses={200: TokenSerializer})
    @action(detail=False, methods=['post'])
    def login(self, request):
        token = AuthService(self.uow).login(request.data)
        return Response(TokenSerializer({"token": token}).data)


@extend_schema(tags=['Users'])
class UserViewSet(FinanceViewSet):

    @extend_schema(responses={200: UserSerializer(many=True)})
    def list(self, request):
        users = UserService(self.uow).list_users()
        return Response(UserSerializer(users, many=True).data)

    @extend_schema(responses={200: UserSerializer})
    def retrieve(self, request, pk=None):
        user = UserService(self.uow).get_user(parse_uuid(pk, "User"))
        return Response(UserSerializer(user).data)

    @extend_schema(request=UserUpdateValidator, responses={204: None})
    def update(self, request, pk=None):
        UserService(self.uow).update_user(self.user_context, parse_uuid(pk, "User"), request.data)
        return Response(status=status.HTTP_204_NO_CONTENT)

    @extend_schema(responses={204: None})
    def destroy(self, request, pk=None):
        UserService(self.uow).delete_user(self.user_context, parse_uuid(pk, "User"))
        return Response(status=status.HTTP_204_NO_CONTENT)

    @extend_schema(request=ChangePasswordValidator, responses={204: None})
    @action(detail=False, methods=['put'], url_path='me/change-password', url_name='change-password')
    def change_password(self, request):
        UserService(self.uow).change_password(self.user_context, request.data)
        return Response(status=status.HTTP_204_NO_CONTENT)


@extend_schema(tags=['Wallets'])
class WalletViewSet(FinanceViewSet):

    @extend_schema(responses={200: WalletSerializer(many=True)})
    def list(self, request):
        wallets = WalletService(self.uow).list_wallets(self.user_context)
        return Response(WalletSerializer(wallets, many=True).data)

    @extend_schema(request=WalletCreateValidator, responses={201: IdSerializer})
    def create(self, request):
        return created(WalletService(self.uow).create_wallet(self.user_context, request.data))

    @extend_schema(responses={200: WalletSerializer})
    def retrieve(self, request, pk=None):
        wallet = WalletService(self.uow).get_wallet(self.user_context, parse_uuid(pk, "Wallet"))
        return Response(WalletSerializer(wallet).data)

    @extend_schema(request=WalletUpdateValidator, responses={204: None})
    def update(self, request, pk=None):
        WalletService(self.uow).update_wallet(self.user_context, parse_uuid(pk, "Wallet"), request.data)
        return Response(status=status.HTTP_204_NO_CONTENT)

    @extend_schema(responses={204: None})
    def destroy(self, request, pk=None):
        WalletService(self.uow).delete_wallet(self.user_context, parse_uuid(pk, "Wallet"))
        return Response(status=status.HTTP_204_NO_CONTENT)


@extend_schema(tags=['Operations'])
class WalletOperationViewSet(FinanceViewSet):
    """Operations of a single wallet: /wallets/{wallet_id}/operations."""

    def get_service(self) -> FinancialOperationService:
        return FinancialOperationService(self.uow)

    def get_wallet_id(self) -> uuid.UUID:
        return parse_uuid(self.kwargs["wallet_id"], "Wallet")

    @extend_schema(responses={200: FinancialOperationDetailsSerializer(many=True)})
    def list(self, request, wallet_id=None):
        operations = self.get_service().list_wallet_operations(self.user_context, self.get_wallet_id())
        return Response(FinancialOperationDetailsSerializer(operations, many=True).data)

    @extend_schema(request=FinancialOperationUpsertValidator, responses={201: IdSerializer})
    def create(self, request, wallet_id=None):
        return created(self.get_service().create_operation(self.user_context, self.get_wallet_id(), request.data))

    @extend_schema(responses={200: FinancialOperationDetailsSerializer})
    def retrieve(self, request, wallet_id=None, pk=None):
        operation = self.get_service().get_operation(
            self.user_context, self.get_wallet_id(), parse_uuid(pk, "Financial operation")
        )
        return Response(FinancialOperationDetailsSerializer(operation).data)

    @extend_schema(request=FinancialOperationUpsertValidator, responses={204: None})
    def update(self, request, wallet_id=None, pk=None):
        self.get_service().update_operation(
            self.user_context, self.get_wallet_id(), parse_uuid(pk, "Financial operation"), request.data
        )
        return Response(status=status.HTTP_204_NO_CONTENT)

    @extend_schema(responses={204: None})
    def destroy(self, request, wallet_id=None, pk=None):
        self.get_service().delete_operation(
            self.user_context, self.get_wallet_id(), parse_uuid(pk, "Financial operation")
        )
        return Response(status=status.HTTP_204_NO_CONTENT)


@extend_schema(tags=['Operations'])
class OperationViewSet(FinanceViewSet):

    @extend_schema(
        parameters=[
            OpenApiParameter("wallet_id", OpenApiTypes.UUID, description="Only operations of this wallet"),
            OpenApiParameter("from", OpenApiTypes.DATE, description="Start date (YYYY-MM-DD), inclusive"),
            OpenApiParameter("to", OpenApiTypes.DATE, description="End date (YYYY-MM-DD), inclusive"),
            OpenApiParameter("page", OpenApiTypes.INT, description="Page number, 1-based"),
            OpenApiParameter("page_size", OpenApiTypes.INT, description="Items per page (1-100, default 20)"),
        ],
        responses={200: PagedFinancialOperationSerializer},
        description="All operations of the current user across wallets, newest first",
    )
    def list(self, request):
        params = request.query_params
        query = OperationQuery(
            wallet_id=query_uuid(params, "wallet_id"),
            date_from=query_date(params, "from"),
            date_to=query_date(params, "to"),
            paging=PageRequest.normalize(params.get("page"), params.get("page_size")),
        )
        result = FinancialOperationService(self.uow).list_user_operations(self.user_context, query)
        data = asdict(result)
        data["total_pages"] = result.total_pages
        return Response(PagedFinancialOperationSerializer(data).data)


@extend_schema(tags=['Types'])
class OperationTypeViewSet(FinanceViewSet):

    @extend_schema(responses={200: OperationTypeSerializer(many=True)})
    def list(self, request):
        types = OperationTypeService(self.uow).list_types(self.user_context)
        return Response(OperationTypeSerializer(types, many=True).data)

    @extend_schema(request=OperationTypeCreateValidator, responses={201: IdSerializer})
    def create(self, request):
        return created(OperationTypeService(self.uow).create_type(self.user_context, request.data))

    @extend_schema(responses={200: OperationTypeSerializer})
    def retrieve(self, request, pk=None):
        operation_type = OperationTypeService(self.uow).get_type(self.user_context, parse_uuid(pk, "Operation type"))
        return Response(OperationTypeSerializer(operation_type).data)

    @extend_schema(request=OperationTypeUpdateValidator, responses={204: None})
    def update(self, request, pk=None):
        OperationTypeService(self.uow).update_type(self.user_context, parse_uuid(pk, "Operation type"), request.data)
        return Response(status=status.HTTP_204_NO_CONTENT)

    @extend_schema(responses={204: None})
    def destroy(self, request, pk=None):
        OperationTypeService(self.uow).delete_type(self.user_context, parse_uuid(pk, "Operation type"))
        return Response(status=status.HTTP_204_NO_CONTENT)


@extend_schema(tags=['Currencies'])
class CurrencyViewSet(FinanceViewSet):
    permission_classes = [AllowAny]
    authentication_classes = []
    lookup_field = 'code'
    lookup_value_regex = r"[A-Za-z]{3}"

    @extend_schema(responses={200: CurrencySerializer(many=True)})
    def list(self, request):
        currencies = CurrencyService(self.uow).list_currencies()
        return Response(CurrencySerializer(currencies, many=True).data)

    @extend_schema(responses={200: CurrencySerializer})
    def retrieve(self, request, code=None):
        currency = CurrencyService(self.uow).get_currency(code)
        return Response(CurrencySerializer(currency).data)


@extend_schema(tags=['Reports'])
class ReportViewSet(FinanceViewSet):

    @extend_schema(
        parameters=[
            OpenApiParameter("wallet_id", OpenApiTypes.UUID, required=True, description="Wallet to report on"),
            OpenApiParameter("date", OpenApiTypes.DATE, required=True, description="Day (YYYY-MM-DD)"),
        ],
        responses={200: FinanceReportSerializer},
    )
    @action(detail=False, methods=['get'])
    def daily(self, request):
        params = request.query_params
        report = ReportService(self.uow).daily_report(
            self.user_context,
            query_uuid(params, "wallet_id", required=True),
            query_date(params, "date", required=True),
        )
        return Response(FinanceReportSerializer(report).data)

    @extend_schema(
        parameters=[
            OpenApiParameter("wallet_id", OpenApiTypes.UUID, required=True, description="Wallet to report on"),
            OpenApiParameter("start", OpenApiTypes.DATE, required=True, description="Start date (YYYY-MM-DD), inclusive"),
            OpenApiParameter("end", OpenApiTypes.DATE, required=True, description="End date (YYYY-MM-DD), inclusive"),
        ],
        responses={200: FinanceReportSerializer},
    )
    @action(detail=False, methods=['get'])
    def period(self, request):
        params = request.query_params
        report = ReportService(self.uow).period_report(
            self.user_context,
            query_uuid(params, "wallet_id", required=True),
            query_date(params, "start", required=True),
            query_date(params, "end", required=True),
        )
        return Response(FinanceReportSerializer(report).data)


@extend_schema(exclude=True)
class UnknownRouteView(APIView):
    """Answers any /api/ path no route matched, for every method."""

    permission_classes = [AllowAny]
    authentication_classes = []

    def initial(self, request, *args, **kwargs):
        super().initial(request, *args, **kwargs)
        raise NotFound(f"No endpoint matches {request.method} {request.path}")
