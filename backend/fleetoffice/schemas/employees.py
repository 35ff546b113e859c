"""Employee and employment schemas."""
from datetime import date, datetime

from pydantic import BaseModel, EmailStr, Field

from ..models.enums import ContractType, EducationLevel, EmploymentStatus, Gender, MaritalStatus
from .common import AddressFields, NameRead, ORMModel


class EmployeeBase(AddressFields):
    """Shared properties for employee operations."""

    first_name: str = Field(min_length=2, max_length=50)
    last_name: str = Field(min_length=2, max_length=50)
    birth_date: date
    birth_place: str | None = None
    gender: Gender | None = None
    fiscal_code: str = Field(min_length=16, max_length=16)
    email: EmailStr | None = None
    pec: EmailStr | None = None
    phone: str | None = None
    mobile: str | None = None
    iban: str | None = None
    marital_status: MaritalStatus | None = None
    education_level: EducationLevel | None = None
    notes: str | None = None


class EmployeeCreate(EmployeeBase):
    """Employee payload for creation and update."""

    role_ids: list[int] = Field(default_factory=list)


class EmployeeRead(EmployeeBase, ORMModel):
    """Employee representation returned by the API."""

    id: int
    full_name: str
    # stored values may predate stricter email checks
    email: str | None = None
    pec: str | None = None
    roles: list[NameRead] = Field(default_factory=list)
    created_at: datetime | None = None


class EmploymentBase(BaseModel):
    """Shared properties for employment operations."""

    employee_id: int
    matricola: str = Field(min_length=1, max_length=10, pattern=r"^[A-Za-z0-9_-]+$")
    contract_type: ContractType | None = None
    branch: str | None = None
    department: str | None = None
    job_title: str | None = None
    contract_level: str | None = None
    ccnl: str | None = None
    job_role: str | None = None
    salary: float = Field(default=0.0, ge=0)
    start_date: date
    end_date: date | None = None
    status: EmploymentStatus = EmploymentStatus.ACTIVE


class EmploymentCreate(EmploymentBase):
    """Employment payload for creation and update."""


class EmploymentRead(EmploymentBase, ORMModel):
    id: int


class EmploymentTerminate(BaseModel):
    end_date: date
