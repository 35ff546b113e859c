"""Unit tests for the pure business rules behind the services."""
from datetime import date, datetime, time

import pytest

from fleetoffice import models
from fleetoffice.exceptions import BusinessValidationError
from fleetoffice.models.contract import months_between
from fleetoffice.models.enums import SupplierContractStatus, SupplierContractType
from fleetoffice.schemas import ContractCreate
from fleetoffice.services.compliance import add_years, due_date_for
from fleetoffice.services.contracts import contract_values, is_expiring
from fleetoffice.services.dashboard import month_buckets
from fleetoffice.services.documents import expiry_statistics
from fleetoffice.services.expenses import build_items, sequential_number
from fleetoffice.services.bookings import assignment_window, overlaps
from fleetoffice.services.maintenance import add_months, initial_due, next_due
from fleetoffice.services.payslips import fiscal_code_from_filename, month_directory


def test_build_items_from_parallel_lists() -> None:
    items = build_items(
        ids=["", "7"],
        descriptions=["Hotel", "Train"],
        amounts=["120,50", "35"],
        dates=["2024-03-01", ""],
        invoices=["F-1"],
    )

    assert [item.description for item in items] == ["Hotel", "Train"]
    assert [item.amount for item in items] == [120.5, 35.0]
    assert items[0].id is None and items[1].id == 7
    assert items[0].item_date == date(2024, 3, 1) and items[1].item_date is None
    assert items[0].invoice_number == "F-1" and items[1].invoice_number is None


def test_build_items_handles_missing_lists() -> None:
    assert build_items() == []
    assert build_items(amounts=["10"]) == []
    assert build_items(descriptions=["", "  "], amounts=["1", "2"]) == []


def test_build_items_rejects_bad_amount() -> None:
    with pytest.raises(BusinessValidationError):
        build_items(descriptions=["Taxi"], amounts=["ten"])


def test_sequential_number() -> None:
    assert sequential_number("012/2024/") == 12
    assert sequential_number("abc") == 0
    assert sequential_number(None) == 0


def test_contract_defaults() -> None:
    payload = ContractCreate(supplier_id=1, contract_type=SupplierContractType.SERVICE, subject=" Cleaning ")
    values = contract_values(payload)

    assert values["net_amount"] == 0.0
    assert values["vat_rate"] == 0.0
    assert values["status"] == SupplierContractStatus.DRAFT
    assert values["subject"] == "Cleaning"


def test_contract_dates_must_be_ordered() -> None:
    payload = ContractCreate(
        supplier_id=1,
        contract_type="SUPPLY",
        subject="Paper",
        start_date=date(2024, 5, 1),
        end_date=date(2024, 4, 1),
    )
    with pytest.raises(BusinessValidationError):
        contract_values(payload)


def test_contract_derived_values() -> None:
    contract = models.Contract(
        net_amount=1000.0,
        vat_rate=22.0,
        start_date=date(2024, 1, 15),
        end_date=date(2025, 1, 14),
    )
    assert contract.gross_amount == 1220.0
    assert contract.duration_months == 11
    assert months_between(date(2024, 1, 15), date(2025, 1, 15)) == 12
    assert months_between(None, date(2025, 1, 15)) is None


def test_contract_expiring_window() -> None:
    today = date(2024, 6, 1)
    contract = models.Contract(
        status=SupplierContractStatus.ACTIVE, end_date=date(2024, 6, 20), termination_notice_days=30
    )
    assert is_expiring(contract, today)

    contract.end_date = date(2024, 8, 1)
    assert not is_expiring(contract, today)

    contract.end_date = date(2024, 5, 1)
    assert not is_expiring(contract, today)

    contract.end_date = date(2024, 6, 20)
    contract.termination_notice_days = None
    assert not is_expiring(contract, today)


def test_expiry_statistics() -> None:
    today = date(2024, 6, 1)
    stats = expiry_statistics(
        [None, date(2024, 5, 1), date(2024, 6, 10), date(2025, 1, 1)],
        warning_days=30,
        today=today,
    )

    assert (stats.total, stats.expired, stats.expiring_soon, stats.valid, stats.no_expiry) == (4, 1, 1, 1, 1)
    assert stats.expired_percentage == 25.0
    assert stats.urgent == 2
    assert expiry_statistics([], 30, today).total == 0


def test_compliance_due_date() -> None:
    assert add_years(date(2020, 2, 29), 1) == date(2021, 2, 28)
    assert due_date_for(date(2024, 3, 1), 2, None) == date(2026, 3, 1)
    assert due_date_for(None, 2, date(2024, 9, 1)) == date(2024, 9, 1)
    assert due_date_for(date(2024, 3, 1), None, None) is None


def test_month_buckets_cross_year() -> None:
    assert month_buckets(3, date(2024, 2, 10)) == ["2023-12", "2024-01", "2024-02"]
    assert month_buckets(1, date(2024, 2, 10)) == ["2024-02"]


def test_next_due_by_task_type() -> None:
    service = models.TaskType(code="SERVICE", months_interval=12, km_interval=15000)
    summer = models.TaskType(code="TYRE_CHANGE_SUMMER")
    winter = models.TaskType(code="tyre_change_winter")
    revision = models.TaskType(code="REVISION", months_interval=24, km_interval=30000)
    done = date(2024, 3, 31)

    assert next_due(service, done, 50000) == (date(2025, 3, 31), 65000)
    assert next_due(service, done, None) == (date(2025, 3, 31), None)
    assert next_due(summer, done, 50000) == (date(2025, 4, 15), None)
    assert next_due(winter, done, 50000) == (date(2025, 11, 15), None)
    assert next_due(revision, done, 50000) == (date(2026, 3, 31), None)
    assert add_months(date(2024, 1, 31), 1) == date(2024, 2, 29)


def test_initial_due_for_a_new_vehicle() -> None:
    leased = models.Vehicle(plate="AB123CD", contract_start_date=date(2024, 5, 10), current_mileage=1200)
    registered = models.Vehicle(plate="EF456GH", registration_date=date(2023, 12, 1))
    service = models.TaskType(code="ORDINARY_SERVICE", months_interval=12, km_interval=20000)
    revision = models.TaskType(code="REVISION", months_interval=24)
    summer = models.TaskType(code="TYRE_CHANGE_SUMMER", months_interval=6)
    winter = models.TaskType(code="TYRE_CHANGE_WINTER", months_interval=6)
    custom = models.TaskType(code="WASH", months_interval=3, km_interval=5000)

    assert initial_due(leased, service) == (date(2025, 5, 10), 21200)
    assert initial_due(leased, revision) == (date(2028, 5, 10), None)
    assert initial_due(leased, summer) == (date(2025, 4, 15), None)
    assert initial_due(leased, winter) == (date(2024, 11, 15), None)
    assert initial_due(registered, summer) == (date(2024, 4, 15), None)
    assert initial_due(registered, custom) == (date(2024, 3, 1), 5000)
    assert initial_due(models.Vehicle(plate="GH789IJ"), revision, date(2024, 4, 15)) == (date(2028, 4, 15), None)


def test_booking_overlap_windows() -> None:
    nine, noon = datetime(2030, 1, 1, 9), datetime(2030, 1, 1, 12)
    assert overlaps(nine, noon, datetime(2030, 1, 1, 11), datetime(2030, 1, 1, 13))
    assert not overlaps(nine, noon, noon, datetime(2030, 1, 1, 14))

    open_ended = models.Assignment(start_date=date(2030, 1, 1), start_time=time(8, 30))
    start, end = assignment_window(open_ended)
    assert start == datetime(2030, 1, 1, 8, 30)
    assert end.year == 9999
    dated = models.Assignment(start_date=date(2030, 1, 1), end_date=date(2030, 1, 2))
    assert assignment_window(dated)[1] == datetime.combine(date(2030, 1, 2), time.max)


def test_payslip_filename_parsing() -> None:
    assert fiscal_code_from_filename("rssmra85t10a562s.pdf") == "RSSMRA85T10A562S"
    assert fiscal_code_from_filename("folder/RSS-MRA 85T10A562S_extra.pdf") == "RSSMRA85T10A562S"
    assert fiscal_code_from_filename(None) == ""
    assert month_directory("2024-03") == "payslips/2024/03"
    with pytest.raises(BusinessValidationError):
        month_directory("2024-13")
