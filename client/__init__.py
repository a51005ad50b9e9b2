from client.api import FinanceTrackerClient
from client.models import ApiResult, PagedResult, ProblemDetails

__all__ = ["ApiResult", "FinanceTrackerClient", "PagedResult", "ProblemDetails"]
