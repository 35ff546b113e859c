"""Document and dashboard schemas."""
from datetime import date, datetime

from pydantic import BaseModel

from ..models.enums import DocumentType, OwnerType
from .common import ORMModel
from .expenses import ExpenseReportRead
from .registry import ComplianceItemRead, InsuranceRead


class DocumentRead(ORMModel):
    id: int
    owner_type: OwnerType
    owner_id: int
    document_type: DocumentType
    filename: str
    original_filename: str
    content_type: str | None = None
    size: int
    issue_date: date | None = None
    expiry_date: date | None = None
    uploaded_at: datetime


class DocumentStatistics(BaseModel):
    total: int = 0
    expired: int = 0
    expiring_soon: int = 0
    valid: int = 0
    no_expiry: int = 0
    expired_percentage: float = 0.0
    expiring_soon_percentage: float = 0.0
    valid_percentage: float = 0.0
    no_expiry_percentage: float = 0.0
    urgent: int = 0


class DashboardMetrics(BaseModel):
    vehicles: int
    vehicles_in_service: int
    assigned_vehicles: int
    assignments: int
    last_incoming_protocol: str
    last_outgoing_protocol: str
    monthly_fuel_amount: float
    active_projects: int
    active_projects_value: float
    active_contracts: int
    active_bookings: int


class MonthlyAmount(BaseModel):
    month: str
    amount: float


class ExpenseBalance(BaseModel):
    month: str
    total: float
    reimbursable: float
    non_reimbursable: float


class UpcomingTask(BaseModel):
    id: int
    vehicle_id: int
    plate: str
    task_type: str
    due_date: date | None = None
    due_mileage: int | None = None


class Dashboard(BaseModel):
    metrics: DashboardMetrics
    vehicle_status: dict[str, int]
    fuel_costs: list[MonthlyAmount]
    expense_balances: list[ExpenseBalance]
    upcoming_tasks: list[UpcomingTask]
    upcoming_compliance: list[ComplianceItemRead]
    pending_expense_reports: list[ExpenseReportRead]
    expiring_policies: list[InsuranceRead]
    document_statistics: DocumentStatistics
