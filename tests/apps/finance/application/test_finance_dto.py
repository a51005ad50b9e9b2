import pytest
from decimal import Decimal
from datetime import date
import sys
import uuid

from apps.finance.application.dto import MAX_PAGE, FinanceReportDTO, PagedResult, PageRequest


class TestPageRequest:
    """Tests for paging normalization."""

    @pytest.mark.parametrize(
        "page, page_size, expected",
        [
            (1, 20, (1, 20)),
            (3, 50, (3, 50)),
            (0, 20, (1, 20)),
            (-4, 20, (1, 20)),
            (2, 0, (2, 20)),
            (2, 101, (2, 20)),
            (2, 100, (2, 100)),
            (None, None, (1, 20)),
            ("abc", "xyz", (1, 20)),
            ("2", "5", (2, 5)),
        ],
    )
    def test_normalize(self, page, page_size, expected):
        paging = PageRequest.normalize(page, page_size)

        assert (paging.page, paging.page_size) == expected

    def test_offset(self):
        assert PageRequest.normalize(3, 10).offset == 20

    def test_huge_page_is_capped(self):
        paging = PageRequest.normalize(str(10 ** 19), 100)

        assert paging.page == MAX_PAGE
        assert paging.offset + paging.page_size <= sys.maxsize


class TestPagedResult:

    def test_total_pages_rounds_up(self):
        assert PagedResult(items=[], page=1, page_size=20, total_count=41).total_pages == 3
        assert PagedResult(items=[], page=1, page_size=20, total_count=0).total_pages == 0


class TestFinanceReportDTO:

    def test_net(self):
        report = FinanceReportDTO(
            wallet_id=uuid.uuid4(),
            wallet_name="Main",
            currency_code="USD",
            start=date(2024, 1, 1),
            end=date(2024, 1, 1),
            total_income=Decimal("1200.50"),
            total_expense=Decimal("200.00"),
        )

        assert report.net == Decimal("1000.50")
