from django.urls import include, path, re_path
from rest_framework.routers import DefaultRouter

from apps.finance.api.v1.views import (
    UUID_PATTERN,
    AuthViewSet,
    CurrencyViewSet,
    OperationTypeViewSet,
    OperationViewSet,
    ReportViewSet,
    UnknownRouteView,
    UserViewSet,
    WalletOperationViewSet,
    WalletViewSet,
)

router = DefaultRouter(trailing_slash=False)
router.register(r'auth', AuthViewSet, basename='auth')
router.register(r'users', UserViewSet, basename='user')
router.register(r'wallets', WalletViewSet, basename='wallet')
router.register(
    rf'wallets/(?P<wallet_id>{UUID_PATTERN})/operations',
    WalletOperationViewSet,
    basename='wallet-operation',
)
router.register(r'operations', OperationViewSet, basename='operation')
router.register(r'types', OperationTypeViewSet, basename='operation-type')
router.register(r'currencies', CurrencyViewSet, basename='currency')
router.register(r'reports', ReportViewSet, basename='report')

urlpatterns = [
    path('', include(router.urls)),
    re_path(r'^.*$', UnknownRouteView.as_view(), name='unknown-route'),
]
