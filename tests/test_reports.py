from __future__ import annotations

from datetime import datetime, timedelta
from pathlib import Path

import fitz  # PyMuPDF
import pytest

from posprint.errors import ContentTooTallError, SurfaceError
from posprint.models import (
    ClubImport,
    ClubTransactionRow,
    DailySales,
    InventoryRow,
    InventoryTotals,
    PeriodTotals,
    Product,
    ProductSalesRow,
    SalesDetailRow,
    SalesTotals,
    SalesTransaction,
    TransactionType,
)
from posprint.printing.reports.catalog import render_catalog
from posprint.printing.reports.club_imports import render_club_imports
from posprint.printing.reports.common import (
    ReportContext,
    centered_x,
    format_cents,
    format_number,
    truncate_desc,
)
from posprint.printing.reports.daily_sales import render_daily_sales
from posprint.printing.reports.inventory import render_inventory
from posprint.printing.reports.product_sales import render_product_sales
from posprint.printing.reports.sales_detail import render_sales_detail
from posprint.printing.surface import ReportLabSurface


CTX = ReportContext(facility="Annex", printed_at=datetime(2024, 3, 5, 14, 7, 9))
START = datetime(2024, 3, 1)
END = datetime(2024, 3, 31)


def _page_texts(path: Path) -> list[str]:
    with fitz.open(path) as doc:
        return [page.get_text() for page in doc]


def _sales_rows(categories: int = 6, per_category: int = 12) -> list[ProductSalesRow]:
    rows: list[ProductSalesRow] = []
    for c in range(categories):
        category = f"Category {c}"
        for i in range(per_category):
            rows.append(
                ProductSalesRow(
                    category=category,
                    upc=f"0000{c}{i:03d}",
                    name=f"Item {c}-{i}",
                    quantity_sold=i + 1,
                    price=125,
                    total_sales=125 * (i + 1),
                )
            )
        rows.append(
            ProductSalesRow(
                category=category,
                quantity_sold=sum(range(1, per_category + 1)),
                total_sales=125 * sum(range(1, per_category + 1)),
                is_summary=True,
            )
        )
    return rows


def test_formatting_helpers() -> None:
    assert format_cents(0) == "$0.00"
    assert format_cents(123456) == "$1,234.56"
    assert format_cents(-5) == "-$0.05"
    assert format_number(12345) == "12,345"
    assert truncate_desc("short", 40) == "short"
    assert truncate_desc("abcdefghij", 5) == "abcd…"
    assert centered_x("x" * 1000, 14.0, 210.0) == 0.0


def test_product_sales_report_pages_and_numbers(tmp_path: Path) -> None:
    rows = _sales_rows()
    totals = SalesTotals(total_quantity=468, total_value=58500)
    report = render_product_sales(rows, START, END, totals, account_total=987654, ctx=CTX)
    assert report.title == "Annex Sales from 2024-03-01 to 2024-03-31"
    assert report.page_count > 1

    path = tmp_path / "sales.pdf"
    report.surface.save(path)
    texts = _page_texts(path)
    assert len(texts) == report.page_count
    for i, text in enumerate(texts, start=1):
        assert f"Page {i} of {report.page_count}" in text
        assert "Account Total: $9,876.54" in text
        assert "Printed: 3/5/2024 2:07:09 PM" in text
        assert "Qty" in text
    assert report.title in texts[0]
    assert report.title not in texts[1]
    assert "Grand Total:" in texts[-1]


def test_sales_detail_keeps_transactions_whole(tmp_path: Path) -> None:
    transactions = [
        SalesTransaction(
            order_id=1000 + n,
            date=datetime(2024, 3, 1 + n % 28, 9, 30),
            customer_name=f"Customer {n}",
            customer_mdoc=50000 + n,
            item_count=n % 5 + 1,
            order_total=300 * (n % 5 + 1),
            details=[
                SalesDetailRow(upc=f"UPC{n}-{d}", product_name=f"Snack {d}", quantity=1, price=300)
                for d in range(n % 5 + 1)
            ],
        )
        for n in range(40)
    ]
    totals = SalesTotals(total_quantity=120, total_value=36000)
    report = render_sales_detail(transactions, START, END, totals, account_total=0, ctx=CTX)
    path = tmp_path / "detail.pdf"
    report.surface.save(path)
    texts = _page_texts(path)

    assert len(texts) == report.page_count > 1
    for tx in transactions:
        pages = [i for i, text in enumerate(texts) if f"Customer {tx.order_id - 1000} (" in text]
        assert len(pages) == 1
        page = texts[pages[0]]
        assert all(d.upc in page for d in tx.details)
    assert "$360.00" in texts[0]


def test_inventory_signature_block_stays_together(tmp_path: Path) -> None:
    rows = [
        InventoryRow(category="Candy", upc=f"C{i}", name=f"Bar {i}", price=150, quantity=2, total=300)
        for i in range(30)
    ]
    rows.append(InventoryRow(category="Candy", quantity=60, total=9000, is_summary=True))
    report = render_inventory(rows, InventoryTotals(total_quantity=60, total_value=9000), 100, ctx=CTX)
    path = tmp_path / "inventory.pdf"
    report.surface.save(path)
    texts = _page_texts(path)

    resident = [i for i, t in enumerate(texts) if "Resident Signature:" in t]
    staff = [i for i, t in enumerate(texts) if "Staff Signature:" in t]
    assert resident == staff == [len(texts) - 1]
    assert "Annex Product Inventory Report" in texts[0]


def test_catalog_flows_across_columns_and_pages(tmp_path: Path) -> None:
    products = [
        Product(category=f"Aisle {i // 25}", desc=f"Product number {i} with a long description text", price=99 + i)
        for i in range(400)
    ]
    report = render_catalog(products, ctx=CTX, number_pages=True)
    assert report.page_count > 1

    path = tmp_path / "catalog.pdf"
    report.surface.save(path)
    texts = _page_texts(path)
    assert len(texts) == report.page_count
    assert "Annex Product Catalog" in texts[0]
    assert "Annex Product Catalog" not in texts[1]
    assert f"Page {report.page_count} of {report.page_count}" in texts[-1]
    # every column opening on a new page repeats its category label
    assert all("Aisle" in t for t in texts[1:])


def test_unknown_font_is_a_surface_error() -> None:
    surface, _ = ReportLabSurface.new("x", 210.0, 297.0)
    with pytest.raises(SurfaceError):
        surface.add_builtin_font("Comic-Sans")


def test_page_limit_is_a_surface_error(monkeypatch) -> None:  # noqa: ANN001 - pytest fixture
    monkeypatch.setattr("posprint.config.MAX_PAGES", 1)
    products = [Product(category="A", desc=f"p{i}", price=1) for i in range(2000)]
    with pytest.raises(SurfaceError):
        render_catalog(products, ctx=CTX)


def test_daily_sales_fill_left_column_before_right(tmp_path: Path) -> None:
    days = [DailySales(day=datetime(2023, 1, 1) + timedelta(days=n), total_sales=1000 + n) for n in range(120)]
    totals = SalesTotals(total_quantity=240, total_value=sum(d.total_sales for d in days))
    report = render_daily_sales(days, START, END, totals, account_total=0, ctx=CTX)
    assert report.title == "Annex Sales by Day from 2024-03-01 to 2024-03-31"
    assert report.page_count == 3

    path = tmp_path / "daily.pdf"
    report.surface.save(path)
    with fitz.open(path) as doc:
        words = [[w[:5] for w in page.get_text("words")] for page in doc]
    texts = _page_texts(path)

    seen = []
    per_page = []
    for page_words in words:
        dates = [w for w in page_words if len(w[4]) == 10 and w[4].startswith("2023-")]
        left = [w[4] for w in sorted(dates, key=lambda w: w[1]) if w[0] < 100]
        right = [w[4] for w in sorted(dates, key=lambda w: w[1]) if w[0] >= 100]
        # within a page, every left-column day comes before every right-column day
        assert left == sorted(left) and right == sorted(right)
        if right:
            assert left[-1] < right[0]
        seen.extend(left + right)
        per_page.append((len(left), len(right)))
    assert seen == [f"{d.day:%Y-%m-%d}" for d in days]
    # 33 lines fit under the first-page title, 35 on a fresh page; the totals block spills over
    assert per_page == [(33, 33), (35, 19), (0, 0)]

    assert report.title in texts[0]
    assert report.title not in texts[1]
    assert all(t.count("Date") == 2 for t in texts)
    assert "Grand Total:" in texts[-1]
    assert "Page 3 of 3" in texts[-1]


def test_club_import_summary_and_running_balance(tmp_path: Path) -> None:
    club_import = ClubImport(
        source_file="club_march.csv",
        activity_from=datetime(2024, 3, 1),
        activity_to=datetime(2024, 3, 31),
    )
    rows = []
    balance = 0
    for n in range(60):
        amount = 2500 if n % 3 else -1000
        balance += amount
        rows.append(
            ClubTransactionRow(
                date=datetime(2024, 3, 1 + n % 28),
                tx_type=TransactionType.DEPOSIT if amount > 0 else TransactionType.WITHDRAWAL,
                entity_name=f"Member {n}",
                mdoc=70000 + n if n % 2 else None,
                amount=amount,
                running_total=balance,
            )
        )
    totals = PeriodTotals(period_pos_sum=40 * 2500, period_neg_sum=-20 * 1000)
    report = render_club_imports(club_import, rows, totals, account_total=5000, ctx=CTX)
    assert report.title == "Annex Club Exception Report  2024/03/01 - 2024/03/31"
    assert report.page_count == 2

    path = tmp_path / "club.pdf"
    report.surface.save(path)
    texts = _page_texts(path)
    first = texts[0]
    assert "Source File:" in first and "club_march.csv" in first
    assert "Balance:" in first and format_cents(balance) in first
    assert "Customer Deposits:" in first and "$1,000.00" in first
    assert "Customer Withdrawals:" in first and "-$200.00" in first
    assert "Net Customer Change:" in first and "$800.00" in first
    assert "Member 1 (70001)" in first
    assert "Member 0 (" not in first
    # later pages repeat the column labels under the missing title
    assert "Received From" in texts[1]
    assert report.title not in texts[1]
    assert "Member 59" in texts[-1]
    for i, text in enumerate(texts, start=1):
        assert f"Page {i} of 2" in text
        assert "Account Total: $50.00" in text


@pytest.mark.parametrize("items, fits_page", [(33, True), (34, False)])
def test_sales_detail_order_size_limit(items: int, fits_page: bool) -> None:
    tx = SalesTransaction(
        order_id=1,
        date=datetime(2024, 3, 2, 9, 0),
        customer_name="Bulk Buyer",
        customer_mdoc=1,
        item_count=items,
        order_total=100 * items,
        details=[SalesDetailRow(upc=f"U{i}", product_name="Gum", quantity=1, price=100) for i in range(items)],
    )
    totals = SalesTotals(total_quantity=items, total_value=100 * items)
    if fits_page:
        assert render_sales_detail([tx], START, END, totals, account_total=0, ctx=CTX).page_count >= 1
    else:
        with pytest.raises(ContentTooTallError):
            render_sales_detail([tx], START, END, totals, account_total=0, ctx=CTX)
