"""Pydantic schemas used across the backend API."""
from .common import AddressFields, NameCreate, NameRead, ORMModel, Page
from .documents import (
    Dashboard,
    DashboardMetrics,
    DocumentRead,
    DocumentStatistics,
    ExpenseBalance,
    MonthlyAmount,
    UpcomingTask,
)
from .employees import (
    EmployeeCreate,
    EmployeeRead,
    EmploymentCreate,
    EmploymentRead,
    EmploymentTerminate,
)
from .expenses import (
    BulkDelete,
    BulkDeleteResult,
    ExpenseItemPayload,
    ExpenseItemRead,
    ExpenseReportCreate,
    ExpenseReportRead,
    ExpenseReportUpdate,
    NextNumber,
    PayslipRead,
    PayslipUploadResult,
)
from .fleet import (
    AssignmentCreate,
    AssignmentRead,
    AutoTaskSelection,
    BookingBase,
    BookingCreate,
    BookingRead,
    BookingStats,
    BookingUpdate,
    FuelCardCreate,
    FuelCardRead,
    MaintenanceCreate,
    MaintenanceRead,
    MaintenanceStats,
    RefuelCreate,
    RefuelRead,
    TaskTypeCreate,
    TaskTypeRead,
    VehicleCreate,
    VehicleRead,
    VehicleTaskCreate,
    VehicleTaskRead,
)
from .registry import (
    ComplianceItemCreate,
    ComplianceItemRead,
    ContractCreate,
    ContractRead,
    ContractStats,
    CorrespondenceCreate,
    CorrespondenceRead,
    InsuranceCreate,
    InsuranceRead,
    LastProtocols,
    ProjectCreate,
    ProjectRead,
    SupplierCreate,
    SupplierRead,
)
