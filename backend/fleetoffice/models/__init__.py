"""SQLAlchemy models exposed by the backend."""
from .assignment import Assignment
from .base import Base
from .booking import VehicleBooking
from .contract import Contract, Insurance
from .document import Document
from .employee import Employee, EmployeeRole, employee_role_links
from .employment import Employment
from .expense import ExpenseItem, ExpenseReport
from .fuel import FuelCard, Refuel
from .maintenance import Maintenance, TaskType, VehicleTask
from .payslip import Payslip
from .registry import ComplianceCategory, ComplianceItem, Correspondence
from .supplier import Project, Supplier
from .vehicle import Vehicle

__all__ = [
    "Assignment",
    "Base",
    "ComplianceCategory",
    "ComplianceItem",
    "Contract",
    "Correspondence",
    "Document",
    "Employee",
    "EmployeeRole",
    "Employment",
    "ExpenseItem",
    "ExpenseReport",
    "FuelCard",
    "Insurance",
    "Maintenance",
    "Payslip",
    "Project",
    "Refuel",
    "Supplier",
    "TaskType",
    "Vehicle",
    "VehicleBooking",
    "VehicleTask",
    "employee_role_links",
]
