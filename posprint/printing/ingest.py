from __future__ import annotations

import csv
from datetime import datetime
from pathlib import Path
from typing import Dict, List

from pydantic import ValidationError

from ..errors import IngestError
from ..models import (
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
)


CATALOG_COLUMNS = {"category", "desc", "price"}
PRODUCT_SALES_COLUMNS = {"category", "name", "quantity_sold", "price", "total_sales"}
INVENTORY_COLUMNS = {"category", "quantity", "total"}
SALES_DETAIL_COLUMNS = {
    "order_id",
    "date",
    "customer_name",
    "customer_mdoc",
    "upc",
    "product_name",
    "quantity",
    "price",
}

DAILY_SALES_COLUMNS = {"day", "total_sales"}
CLUB_TRANSACTION_COLUMNS = {"date", "tx_type", "entity_name", "amount"}

TRUE_VALUES ={"1", "true", "yes", "y"}


def load_rows(csv_path: Path, required: set[str]) -> List[dict]:
    if not csv_path.exists():
        raise IngestError(f"CSV not found: {csv_path}")
    with csv_path.open("r", encoding="utf-8", newline="") as handle:
        reader = csv.DictReader(handle)
        if reader.fieldnames is None:
            raise IngestError("CSV has no header")
        missing = required - set(reader.fieldnames)
        if missing:
            raise IngestError(f"CSV missing columns: {', '.join(sorted(missing))}")
        rows = [
            {key: (value or "").strip() for key, value in row.items() if key}
            for row in reader
            if any((value or "").strip() for value in row.values())
        ]
    return rows


def _flag(value: str) -> bool:
    return value.strip().lower() in TRUE_VALUES


def _build(model, row: dict, line: int):
    try:
        return model.model_validate(row)
    except ValidationError as exc:
        raise IngestError(f"Row {line}: {exc.errors()[0]['msg']}") from exc


def load_catalog(csv_path: Path) -> List[Product]:
    rows = load_rows(csv_path, CATALOG_COLUMNS)
    products = [_build(Product, row, i) for i, row in enumerate(rows, start=2)]
    return sorted(products, key=lambda p: (p.category.lower(), p.desc.lower()))


def load_product_sales(csv_path: Path) -> List[ProductSalesRow]:
    rows = load_rows(csv_path, PRODUCT_SALES_COLUMNS)
    out: List[ProductSalesRow] = []
    for i, row in enumerate(rows, start=2):
        row["is_summary"] = _flag(row.get("is_summary", ""))
        # summary rows leave upc/name/price blank
        row = {key: value for key, value in row.items() if value != ""}
        out.append(_build(ProductSalesRow, row, i))
    return out


def load_inventory(csv_path: Path) -> List[InventoryRow]:
    rows = load_rows(csv_path, INVENTORY_COLUMNS)
    out: List[InventoryRow] = []
    for i, row in enumerate(rows, start=2):
        row["is_summary"] = _flag(row.get("is_summary", ""))
        for key in ("upc", "name", "price"):
            if not row.get(key):
                row[key] = None
        out.append(_build(InventoryRow, row, i))
    return out


def load_sales_detail(csv_path: Path) -> List[SalesTransaction]:
    """One CSV line per sold item; lines sharing an order_id form one transaction."""
    rows = load_rows(csv_path, SALES_DETAIL_COLUMNS)
    by_order: Dict[int, SalesTransaction] = {}
    for i, row in enumerate(rows, start=2):
        try:
            order_id = int(row["order_id"])
            date = datetime.fromisoformat(row["date"])
        except ValueError as exc:
            raise IngestError(f"Row {i}: {exc}") from exc
        detail = _build(SalesDetailRow, row, i)
        tx = by_order.get(order_id)
        if tx is None:
            tx = _build(
                SalesTransaction,
                {
                    "order_id": order_id,
                    "date": date,
                    "customer_name": row["customer_name"],
                    "customer_mdoc": row["customer_mdoc"],
                },
                i,
            )
            by_order[order_id] = tx
        tx.details.append(detail)
        tx.item_count += detail.quantity
        tx.order_total += detail.quantity * detail.price
    return sorted(by_order.values(), key=lambda t: (t.date, t.order_id))


def load_daily_sales(csv_path: Path) -> List[DailySales]:
    rows = load_rows(csv_path, DAILY_SALES_COLUMNS)
    days = [
        _build(DailySales, {key: value for key, value in row.items() if value != ""}, i)
        for i, row in enumerate(rows, start=2)
    ]
    return sorted(days, key=lambda d: d.day)


def load_club_transactions(csv_path: Path, opening_balance: int = 0) -> List[ClubTransactionRow]:
    """
    Club transactions in date order, each carrying the balance after it.

    Amounts are signed cents: deposits positive, withdrawals negative. The running
    balance starts from `opening_balance`, the account total before this import.
    """
    rows = load_rows(csv_path, CLUB_TRANSACTION_COLUMNS)
    out = [
        _build(ClubTransactionRow, {key: value for key, value in row.items() if value != ""}, i)
        for i, row in enumerate(rows, start=2)
    ]
    out.sort(key=lambda r: r.date)
    balance = opening_balance
    for row in out:
        balance += row.amount
        row.running_total = balance
    return out


def period_totals(rows: List[ClubTransactionRow]) -> PeriodTotals:
    return PeriodTotals(
        period_pos_sum=sum(r.amount for r in rows if r.amount > 0),
        period_neg_sum=sum(r.amount for r in rows if r.amount < 0),
    )


def daily_sales_totals(days: List[DailySales]) -> SalesTotals:
    return SalesTotals(
        total_quantity=sum(d.quantity for d in days),
        total_value=sum(d.total_sales for d in days),
    )


def product_sales_totals(rows: List[ProductSalesRow]) -> SalesTotals:
    details = [r for r in rows if not r.is_summary]
    return SalesTotals(
        total_quantity=sum(r.quantity_sold for r in details),
        total_value=sum(r.total_sales for r in details),
    )


def sales_detail_totals(transactions: List[SalesTransaction]) -> SalesTotals:
    return SalesTotals(
        total_quantity=sum(t.item_count for t in transactions),
        total_value=sum(t.order_total for t in transactions),
    )


def inventory_totals(rows: List[InventoryRow]) -> InventoryTotals:
    details = [r for r in rows if not r.is_summary]
    return InventoryTotals(
        total_quantity=sum(r.quantity for r in details),
        total_value=sum(r.total for r in details),
    )
