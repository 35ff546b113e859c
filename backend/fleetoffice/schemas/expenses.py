"""Expense report and payslip schemas."""
from datetime import date, datetime

from pydantic import BaseModel, Field

from ..models.enums import ExpenseStatus, PaymentMethod, PayslipStatus
from .common import ORMModel


class ExpenseItemPayload(BaseModel):
    """Item as sent by the client; ``id`` identifies an existing item on update."""

    id: int | None = None
    item_date: date | None = None
    description: str = Field(min_length=1, max_length=255)
    amount: float = 0.0
    invoice_number: str | None = None
    supplier_id: int | None = None
    project_id: int | None = None
    note: str | None = None


class ExpenseItemRead(ExpenseItemPayload, ORMModel):
    id: int


class ExpenseReportCreate(BaseModel):
    number: str | None = Field(default=None, max_length=50)
    employee_id: int
    purpose: str | None = None
    creation_date: date | None = None
    submit_date: date | None = None
    start_date: date | None = None
    end_date: date | None = None
    reimbursable: float | None = Field(default=None, ge=0)
    project_id: int | None = None
    payment_method: PaymentMethod | None = None
    notes: str | None = None
    items: list[ExpenseItemPayload] = Field(default_factory=list)


class ExpenseReportUpdate(ExpenseReportCreate):
    status: ExpenseStatus | None = None


class ExpenseReportRead(ORMModel):
    id: int
    number: str
    employee_id: int
    purpose: str | None = None
    creation_date: date
    submit_date: date | None = None
    start_date: date | None = None
    end_date: date | None = None
    approval_date: date | None = None
    total: float
    reimbursable: float
    non_reimbursable: float
    project_id: int | None = None
    payment_method: PaymentMethod | None = None
    status: ExpenseStatus
    notes: str | None = None
    items: list[ExpenseItemRead] = Field(default_factory=list)


class NextNumber(BaseModel):
    number: str


class PayslipRead(ORMModel):
    id: int
    employee_id: int | None = None
    employee_name: str | None = None
    fiscal_code: str
    reference_month: str
    original_filename: str
    uploaded_at: datetime
    status: PayslipStatus


class PayslipUploadResult(BaseModel):
    processed: int = 0
    stored: int = 0
    unmatched: list[str] = Field(default_factory=list)
    errors: list[str] = Field(default_factory=list)


class BulkDelete(BaseModel):
    ids: list[int]


class BulkDeleteResult(BaseModel):
    deleted: int
