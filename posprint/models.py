from __future__ import annotations

from datetime import datetime, timezone
from enum import Enum
from typing import List, Optional

from sqlmodel import Field, SQLModel, create_engine, Session

from . import config


class ReportStatus(str, Enum):
    READY = "READY"
    FAILED = "FAILED"


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class ReportRun(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)
    report_type: str = Field(index=True)
    title: str = ""
    path: Optional[str] = None
    page_count: int = 0
    status: ReportStatus = Field(default=ReportStatus.READY)
    fail_detail: Optional[str] = None
    printer: Optional[str] = None
    created_at: datetime = Field(default_factory=utc_now)


# ---------- report rows (not persisted) ----------
class Product(SQLModel):
    category: str
    upc: str = ""
    desc: str
    price: int


class ProductSalesRow(SQLModel):
    category: str
    upc: str = ""
    name: str = ""
    quantity_sold: int = 0
    price: int = 0
    total_sales: int = 0
    is_summary: bool = False


class SalesTotals(SQLModel):
    total_quantity: int = 0
    total_value: int = 0


class SalesDetailRow(SQLModel):
    upc: str
    product_name: str
    quantity: int
    price: int


class SalesTransaction(SQLModel):
    order_id: int
    date: datetime
    customer_name: str
    customer_mdoc: int
    item_count: int = 0
    order_total: int = 0
    details: List[SalesDetailRow] = Field(default_factory=list)


class InventoryRow(SQLModel):
    category: str
    upc: Optional[str] = None
    name: Optional[str] = None
    price: Optional[int] = None
    quantity: int = 0
    total: int = 0
    is_summary: bool = False


class InventoryTotals(SQLModel):
    total_quantity: int = 0
    total_value: int = 0


class DailySales(SQLModel):
    day: datetime
    total_sales: int
    quantity: int = 0


class TransactionType(str, Enum):
    DEPOSIT = "Deposit"
    WITHDRAWAL = "Withdrawal"


class ClubImport(SQLModel):
    source_file: str
    activity_from: datetime
    activity_to: datetime


class ClubTransactionRow(SQLModel):
    date: datetime
    tx_type: TransactionType
    entity_name: str
    mdoc: Optional[int] = None
    amount: int
    running_total: int = 0


class PeriodTotals(SQLModel):
    period_pos_sum: int = 0
    period_neg_sum: int = 0

    @property
    def net(self) -> int:
        return self.period_pos_sum + self.period_neg_sum


engine = create_engine(f"sqlite:///{config.DB_PATH}")


def reset_engine() -> None:
    global engine
    engine = create_engine(f"sqlite:///{config.DB_PATH}")


def init_db() -> None:
    config.OUT_DIR.mkdir(parents=True, exist_ok=True)
    SQLModel.metadata.create_all(engine)


def get_session() -> Session:
    return Session(engine, expire_on_commit=False)
