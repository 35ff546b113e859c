"""Enumerations stored as strings in the database."""
from __future__ import annotations

import enum

from sqlalchemy import Enum as SAEnum


class LabeledEnum(str, enum.Enum):
    """String enum whose members carry a human readable label."""

    def __new__(cls, value: str, label: str = ""):
        obj = str.__new__(cls, value)
        obj._value_ = value
        obj.label = label or value.replace("_", " ").capitalize()
        return obj


def enum_column(enum_cls: type[enum.Enum], length: int = 32) -> SAEnum:
    """Non-native enum type (a VARCHAR) keyed on member values."""

    return SAEnum(
        enum_cls,
        native_enum=False,
        length=length,
        validate_strings=True,
        values_callable=lambda members: [member.value for member in members],
    )


class VehicleStatus(LabeledEnum):
    IN_SERVICE = ("IN_SERVICE", "In service")
    ASSIGNED = ("ASSIGNED", "Assigned")
    UNDER_MAINTENANCE = ("UNDER_MAINTENANCE", "Under maintenance")
    OUT_OF_SERVICE = ("OUT_OF_SERVICE", "Out of service")


class VehicleType(LabeledEnum):
    CAR = ("CAR", "Car")
    TRUCK = ("TRUCK", "Truck")
    WORKSITE = ("WORKSITE", "Worksite vehicle")


class FuelType(LabeledEnum):
    PETROL = ("PETROL", "Petrol")
    DIESEL = ("DIESEL", "Diesel")
    LPG = ("LPG", "LPG")
    METHANE = ("METHANE", "Methane")
    HYBRID = ("HYBRID", "Hybrid")
    ELECTRIC = ("ELECTRIC", "Electric")


class OwnershipType(LabeledEnum):
    OWNED = ("OWNED", "Owned")
    LEASED = ("LEASED", "Long-term rental")


class AssignmentStatus(LabeledEnum):
    ASSIGNED = ("ASSIGNED", "Assigned")
    RETURNED = ("RETURNED", "Returned")
    BOOKED = ("BOOKED", "Booked")
    OPEN = ("OPEN", "Open")
    CLOSED = ("CLOSED", "Closed")


class EmploymentStatus(LabeledEnum):
    ACTIVE = ("ACTIVE", "Active")
    ON_LEAVE = ("ON_LEAVE", "On leave")
    SUSPENDED = ("SUSPENDED", "Suspended")
    TERMINATED = ("TERMINATED", "Terminated")


class ContractType(LabeledEnum):
    PERMANENT = ("PERMANENT", "Permanent")
    FIXED_TERM = ("FIXED_TERM", "Fixed term")


class Gender(LabeledEnum):
    MALE = ("MALE", "Male")
    FEMALE = ("FEMALE", "Female")
    OTHER = ("OTHER", "Other")


class MaritalStatus(LabeledEnum):
    SINGLE = ("SINGLE", "Single")
    MARRIED = ("MARRIED", "Married")
    DIVORCED = ("DIVORCED", "Divorced")
    WIDOWED = ("WIDOWED", "Widowed")
    SEPARATED = ("SEPARATED", "Separated")


class EducationLevel(LabeledEnum):
    PRIMARY = ("PRIMARY", "Primary school")
    LOWER_SECONDARY = ("LOWER_SECONDARY", "Lower secondary")
    UPPER_SECONDARY = ("UPPER_SECONDARY", "Upper secondary")
    BACHELOR = ("BACHELOR", "Bachelor degree")
    MASTER = ("MASTER", "Master degree")
    DOCTORATE = ("DOCTORATE", "Doctorate")


class TaskStatus(LabeledEnum):
    OPEN = ("OPEN", "Open")
    CLOSED = ("CLOSED", "Closed")


class BookingStatus(LabeledEnum):
    PLANNED = ("PLANNED", "Planned")
    CONFIRMED = ("CONFIRMED", "Confirmed")
    COMPLETED = ("COMPLETED", "Completed")
    CANCELLED = ("CANCELLED", "Cancelled")


class ExpenseStatus(LabeledEnum):
    DRAFT = ("DRAFT", "Draft")
    SUBMITTED = ("SUBMITTED", "Submitted")
    APPROVED = ("APPROVED", "Approved")
    REJECTED = ("REJECTED", "Rejected")
    PAID = ("PAID", "Paid")


class PaymentMethod(LabeledEnum):
    PAY_SLIP = ("PAY_SLIP", "Pay slip")
    BANK_TRANSFER = ("BANK_TRANSFER", "Bank transfer")


class PayslipStatus(LabeledEnum):
    PENDING = ("PENDING", "Pending")
    SENT = ("SENT", "Sent")
    UNMATCHED = ("UNMATCHED", "Unmatched")
    FAILED = ("FAILED", "Failed")


class ProjectStatus(LabeledEnum):
    PLANNED = ("PLANNED", "Planned")
    ACTIVE = ("ACTIVE", "Active")
    SUSPENDED = ("SUSPENDED", "Suspended")
    COMPLETED = ("COMPLETED", "Completed")
    CANCELLED = ("CANCELLED", "Cancelled")


class SupplierContractStatus(LabeledEnum):
    DRAFT = ("DRAFT", "Draft")
    IN_APPROVAL = ("IN_APPROVAL", "In approval")
    ACTIVE = ("ACTIVE", "Active")
    SUSPENDED = ("SUSPENDED", "Suspended")
    EXPIRED = ("EXPIRED", "Expired")
    WITHDRAWN = ("WITHDRAWN", "Withdrawn")


class SupplierContractType(LabeledEnum):
    SUPPLY = ("SUPPLY", "Supply")
    SERVICE = ("SERVICE", "Service")
    WORKS = ("WORKS", "Works")
    SUBCONTRACT = ("SUBCONTRACT", "Subcontract")
    RENTAL = ("RENTAL", "Rental")
    CONSULTING = ("CONSULTING", "Consulting")
    MAINTENANCE = ("MAINTENANCE", "Maintenance")
    OTHER = ("OTHER", "Other")


class RecurringFrequency(LabeledEnum):
    MONTHLY = ("MONTHLY", "Monthly")
    QUARTERLY = ("QUARTERLY", "Quarterly")
    SEMIANNUAL = ("SEMIANNUAL", "Semiannual")
    ANNUAL = ("ANNUAL", "Annual")


class CurrencyCode(LabeledEnum):
    EUR = ("EUR", "Euro")
    USD = ("USD", "US dollar")


class CorrespondenceType(LabeledEnum):
    E = ("E", "Incoming")
    U = ("U", "Outgoing")


class DocumentType(LabeledEnum):
    IDENTITY_CARD = ("IDENTITY_CARD", "Identity card")
    DRIVING_LICENSE = ("DRIVING_LICENSE", "Driving license")
    FISCAL_CODE_CARD = ("FISCAL_CODE_CARD", "Fiscal code card")
    PASSPORT = ("PASSPORT", "Passport")
    RESIDENCE_PERMIT = ("RESIDENCE_PERMIT", "Residence permit")
    IDENTITY_PHOTO = ("IDENTITY_PHOTO", "Profile photo")
    EMPLOYMENT_CONTRACT = ("EMPLOYMENT_CONTRACT", "Employment contract")
    MEDICAL_CERTIFICATE = ("MEDICAL_CERTIFICATE", "Medical certificate")
    TRAINING_CERTIFICATE = ("TRAINING_CERTIFICATE", "Training certificate")
    REGISTRATION_CERTIFICATE = ("REGISTRATION_CERTIFICATE", "Registration certificate")
    INSURANCE_CERTIFICATE = ("INSURANCE_CERTIFICATE", "Insurance certificate")
    VEHICLE_IMAGE = ("VEHICLE_IMAGE", "Vehicle image")
    ASSIGNMENT_PHOTO = ("ASSIGNMENT_PHOTO", "Assignment photo")
    DELIVERY_REPORT = ("DELIVERY_REPORT", "Delivery report")
    INVOICE = ("INVOICE", "Invoice")
    RECEIPT = ("RECEIPT", "Receipt")
    CONTRACT = ("CONTRACT", "Contract")
    POLICY = ("POLICY", "Insurance policy")
    LETTER = ("LETTER", "Letter")
    OTHER = ("OTHER", "Other")

    @property
    def is_photo(self) -> bool:
        return self in PHOTO_DOCUMENT_TYPES


PHOTO_DOCUMENT_TYPES = frozenset(
    {DocumentType.IDENTITY_PHOTO, DocumentType.VEHICLE_IMAGE, DocumentType.ASSIGNMENT_PHOTO}
)


class OwnerType(LabeledEnum):
    """Entities that can own uploaded documents."""

    EMPLOYEE = ("employee", "Employee")
    EMPLOYMENT = ("employment", "Employment")
    VEHICLE = ("vehicle", "Vehicle")
    MAINTENANCE = ("maintenance", "Maintenance")
    ASSIGNMENT = ("assignment", "Assignment")
    PROJECT = ("project", "Project")
    INSURANCE = ("insurance", "Insurance")
    CONTRACT = ("contract", "Contract")
    SUPPLIER = ("supplier", "Supplier")
    CORRESPONDENCE = ("correspondence", "Correspondence")
    COMPLIANCE_ITEM = ("compliance_item", "Compliance item")
    EXPENSE_ITEM = ("expense_item", "Expense item")
