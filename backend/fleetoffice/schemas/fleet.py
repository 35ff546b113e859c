"""Vehicle, assignment, maintenance and fuel schemas."""
from datetime import date, datetime, time

from pydantic import BaseModel, Field

from ..models.enums import (
    AssignmentStatus,
    BookingStatus,
    FuelType,
    OwnershipType,
    TaskStatus,
    VehicleStatus,
    VehicleType,
)
from .common import ORMModel


class VehicleBase(BaseModel):
    """Shared properties for vehicle operations."""

    plate: str = Field(min_length=1, max_length=12)
    chassis_number: str | None = Field(default=None, max_length=17)
    brand: str = Field(min_length=1, max_length=50)
    model: str = Field(min_length=1, max_length=50)
    series: str | None = None
    year: int | None = Field(default=None, ge=1900, le=2100)
    vehicle_type: VehicleType | None = None
    fuel_type: FuelType | None = None
    ownership: OwnershipType | None = None
    supplier_id: int | None = None
    registration_date: date | None = None
    contract_start_date: date | None = None
    contract_end_date: date | None = None
    contract_duration_months: int | None = Field(default=None, ge=0)
    contract_km: int | None = Field(default=None, ge=0)
    monthly_fee: float = Field(default=0.0, ge=0)
    fringe_benefit: float = Field(default=0.0, ge=0)
    status: VehicleStatus = VehicleStatus.IN_SERVICE
    current_mileage: int = Field(default=0, ge=0)
    telepass: bool = False
    insurance_expiry: date | None = None
    car_tax_expiry: date | None = None


class VehicleCreate(VehicleBase):
    """Vehicle payload for creation and update."""


class VehicleRead(VehicleBase, ORMModel):
    id: int
    image_path: str | None = None


class AssignmentBase(BaseModel):
    employment_id: int
    vehicle_id: int
    project_id: int | None = None
    start_date: date | None = None
    start_time: time | None = None
    end_date: date | None = None
    end_time: time | None = None
    status: AssignmentStatus | None = None
    note: str | None = None


class AssignmentCreate(AssignmentBase):
    """Assignment payload for creation and update."""


class AssignmentRead(AssignmentBase, ORMModel):
    id: int
    start_date: date
    status: AssignmentStatus


class TaskTypeCreate(BaseModel):
    code: str = Field(min_length=1, max_length=50)
    description: str | None = None
    by_date: bool = True
    by_mileage: bool = False
    months_interval: int | None = Field(default=None, ge=0)
    km_interval: int | None = Field(default=None, ge=0)
    auto: bool = True


class TaskTypeRead(TaskTypeCreate, ORMModel):
    id: int


class MaintenanceCreate(BaseModel):
    vehicle_id: int
    supplier_id: int | None = None
    task_type_id: int | None = None
    service_date: date
    mileage: int | None = Field(default=None, ge=0)
    cost: float = Field(default=0.0, ge=0)
    description: str | None = None


class MaintenanceRead(MaintenanceCreate, ORMModel):
    id: int


class MaintenanceStats(BaseModel):
    year: int
    count: int
    total_cost: float
    average_cost: float


class VehicleTaskCreate(BaseModel):
    vehicle_id: int
    task_type_id: int
    due_date: date | None = None
    due_mileage: int | None = Field(default=None, ge=0)


class VehicleTaskRead(VehicleTaskCreate, ORMModel):
    id: int
    status: TaskStatus
    executed: bool


class AutoTaskSelection(BaseModel):
    """Automatic task types a vehicle should keep an open task for."""

    task_type_ids: list[int] = Field(default_factory=list)


class BookingBase(BaseModel):
    start_at: datetime
    end_at: datetime
    title: str | None = Field(default=None, max_length=120)
    requester_name: str | None = Field(default=None, max_length=120)
    requester_contact: str | None = Field(default=None, max_length=255)
    notes: str | None = None
    status: BookingStatus | None = None


class BookingCreate(BookingBase):
    vehicle_id: int


class BookingUpdate(BookingBase):
    """Bookings keep their vehicle; only the window and details change."""


class BookingRead(BookingBase, ORMModel):
    id: int
    vehicle_id: int
    status: BookingStatus
    created_at: datetime | None = None


class BookingStats(BaseModel):
    active: int
    today: int
    upcoming: int


class FuelCardBase(BaseModel):
    card_number: str = Field(min_length=1, max_length=50)
    expiry_date: date | None = None
    supplier_id: int | None = None
    employee_id: int | None = None
    vehicle_id: int | None = None
    plafond: float = Field(default=0.0, ge=0)


class FuelCardCreate(FuelCardBase):
    """Fuel card payload for creation and update."""


class FuelCardRead(FuelCardBase, ORMModel):
    id: int
    active: bool


class RefuelCreate(BaseModel):
    vehicle_id: int
    fuel_card_id: int | None = None
    employee_id: int | None = None
    refuel_date: date
    mileage: int | None = Field(default=None, ge=0)
    quantity: float = Field(gt=0)
    amount: float = Field(default=0.0, ge=0)


class RefuelRead(RefuelCreate, ORMModel):
    id: int
    mileage: int
