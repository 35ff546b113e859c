"""Schemas for suppliers, projects, contracts, insurance, correspondence and compliance."""
from datetime import date

from pydantic import BaseModel, EmailStr, Field

from ..models.enums import (
    CorrespondenceType,
    CurrencyCode,
    ProjectStatus,
    RecurringFrequency,
    SupplierContractStatus,
    SupplierContractType,
)
from .common import AddressFields, ORMModel


class SupplierCreate(AddressFields):
    name: str = Field(min_length=1, max_length=200)
    vat_number: str | None = Field(default=None, max_length=20)
    phone: str | None = None
    email: EmailStr | None = None
    pec: EmailStr | None = None
    iban: str | None = None
    sdi_code: str | None = Field(default=None, max_length=7)
    notes: str | None = None


class SupplierRead(SupplierCreate, ORMModel):
    id: int
    email: str | None = None
    pec: str | None = None


class ProjectCreate(AddressFields):
    code: str = Field(min_length=1, max_length=50)
    name: str = Field(min_length=1, max_length=200)
    cig: str | None = None
    cup: str | None = None
    manager_id: int | None = None
    start_date: date | None = None
    end_date: date | None = None
    status: ProjectStatus = ProjectStatus.PLANNED
    work_description: str | None = None
    value: float = Field(default=0.0, ge=0)
    advance_amount: float = Field(default=0.0, ge=0)


class ProjectRead(ProjectCreate, ORMModel):
    id: int


class ContractCreate(BaseModel):
    supplier_id: int
    project_id: int | None = None
    contract_type: SupplierContractType
    subject: str = Field(min_length=1, max_length=255)
    status: SupplierContractStatus | None = None
    start_date: date | None = None
    end_date: date | None = None
    termination_notice_days: int | None = Field(default=None, ge=0)
    expiry_reminder: bool = False
    net_amount: float | None = None
    vat_rate: float | None = Field(default=None, ge=0, le=100)
    currency: CurrencyCode = CurrencyCode.EUR
    payment_terms: str | None = None
    periodic_fee: float | None = Field(default=None, ge=0)
    recurring_frequency: RecurringFrequency | None = None
    durc_required: bool = False
    durc_expiry: date | None = None
    reference_person: str | None = None
    notes: str | None = None


class ContractRead(ContractCreate, ORMModel):
    id: int
    status: SupplierContractStatus
    net_amount: float
    vat_rate: float
    duration_months: int | None = None
    gross_amount: float


class ContractStats(BaseModel):
    draft: int
    active: int
    expiring: int
    expired: int


class InsuranceCreate(BaseModel):
    project_id: int | None = None
    supplier_id: int | None = None
    policy_number: str = Field(min_length=1, max_length=50)
    policy_type: str = Field(min_length=1, max_length=100)
    start_date: date | None = None
    expiry_date: date | None = None
    payment_date: date | None = None
    guaranteed_amount: float = Field(default=0.0, ge=0)
    notes: str | None = None


class InsuranceRead(InsuranceCreate, ORMModel):
    id: int


class CorrespondenceCreate(BaseModel):
    progressive: int | None = Field(default=None, ge=0)
    year: int | None = Field(default=None, ge=1900, le=2100)
    direction: CorrespondenceType
    description: str | None = None
    protocol_date: date | None = None
    sender: str = Field(min_length=1, max_length=200)
    recipient: str | None = None
    notes: str | None = None


class CorrespondenceRead(CorrespondenceCreate, ORMModel):
    id: int
    progressive: int
    year: int
    protocol: str


class LastProtocols(BaseModel):
    incoming: str
    outgoing: str


class ComplianceItemCreate(BaseModel):
    category_id: int
    employee_id: int | None = None
    project_id: int | None = None
    description: str | None = None
    visit_date: date | None = None
    periodicity_years: int | None = Field(default=None, ge=0)
    due_date: date | None = None
    notes: str | None = None


class ComplianceItemRead(ComplianceItemCreate, ORMModel):
    id: int
    due_date: date
