"""Supplier contracts and insurance policies."""
from __future__ import annotations

import logging
from datetime import date

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from .. import models
from ..exceptions import require_date_order
from ..models.enums import OwnerType, SupplierContractStatus
from ..schemas import ContractCreate, InsuranceCreate
from ..storage import FileStorage
from .common import apply, delete_now, ensure_exists, get_or_404
from .documents import init_owner_directory, purge_owner_documents

logger = logging.getLogger(__name__)


def contract_values(payload: ContractCreate) -> dict:
    """Payload values with amounts and status defaulted."""

    require_date_order(payload.start_date, payload.end_date)
    values = payload.model_dump()
    values["net_amount"] = payload.net_amount if payload.net_amount is not None else 0.0
    values["vat_rate"] = payload.vat_rate if payload.vat_rate is not None else 0.0
    values["status"] = payload.status or SupplierContractStatus.DRAFT
    values["subject"] = payload.subject.strip()
    return values


async def list_contracts(
    session: AsyncSession, status: SupplierContractStatus | None = None, supplier_id: int | None = None
) -> list[models.Contract]:
    stmt = select(models.Contract)
    if status is not None:
        stmt = stmt.where(models.Contract.status == status)
    if supplier_id is not None:
        stmt = stmt.where(models.Contract.supplier_id == supplier_id)
    result = await session.execute(stmt.order_by(models.Contract.start_date.desc(), models.Contract.id.desc()))
    return list(result.scalars().all())


async def get_contract(session: AsyncSession, contract_id: int) -> models.Contract:
    return await get_or_404(session, models.Contract, contract_id, "Contract")


async def _check_references(session: AsyncSession, payload: ContractCreate) -> None:
    await get_or_404(session, models.Supplier, payload.supplier_id, "Supplier")
    await ensure_exists(session, models.Project, payload.project_id, "Project")


async def create_contract(session: AsyncSession, storage: FileStorage, payload: ContractCreate) -> models.Contract:
    values = contract_values(payload)
    await _check_references(session, payload)
    contract = models.Contract(**values)
    session.add(contract)
    await session.commit()
    init_owner_directory(storage, OwnerType.CONTRACT, contract)
    logger.info("Created contract %s with supplier %s", contract.id, contract.supplier_id)
    return contract


async def update_contract(session: AsyncSession, contract_id: int, payload: ContractCreate) -> models.Contract:
    contract = await get_contract(session, contract_id)
    values = contract_values(payload)
    await _check_references(session, payload)
    apply(contract, values)
    await session.commit()
    return contract


async def delete_contract(session: AsyncSession, storage: FileStorage, contract_id: int) -> None:
    contract = await get_contract(session, contract_id)
    await purge_owner_documents(session, storage, OwnerType.CONTRACT, contract)
    await delete_now(session, contract)
    await session.commit()
    logger.info("Deleted contract %s", contract_id)


def is_expiring(contract: models.Contract, today: date) -> bool:
    """Active, with the end date inside its termination notice window."""

    if contract.status != SupplierContractStatus.ACTIVE or contract.end_date is None:
        return False
    if contract.termination_notice_days is None:
        return False
    days_left = (contract.end_date - today).days
    return 0 <= days_left <= contract.termination_notice_days


async def contract_stats(session: AsyncSession) -> dict:
    counts = dict(
        (
            await session.execute(
                select(models.Contract.status, func.count()).group_by(models.Contract.status)
            )
        ).all()
    )
    active = await session.execute(
        select(models.Contract).where(models.Contract.status == SupplierContractStatus.ACTIVE)
    )
    today = date.today()
    return {
        "draft": counts.get(SupplierContractStatus.DRAFT, 0),
        "active": counts.get(SupplierContractStatus.ACTIVE, 0),
        "expiring": sum(1 for contract in active.scalars().all() if is_expiring(contract, today)),
        "expired": counts.get(SupplierContractStatus.EXPIRED, 0),
    }


async def list_insurances(session: AsyncSession, project_id: int | None = None) -> list[models.Insurance]:
    stmt = select(models.Insurance)
    if project_id is not None:
        stmt = stmt.where(models.Insurance.project_id == project_id)
    result = await session.execute(stmt.order_by(models.Insurance.expiry_date, models.Insurance.id))
    return list(result.scalars().all())


async def get_insurance(session: AsyncSession, insurance_id: int) -> models.Insurance:
    return await get_or_404(session, models.Insurance, insurance_id, "Insurance")


async def _insurance_values(session: AsyncSession, payload: InsuranceCreate) -> dict:
    require_date_order(payload.start_date, payload.expiry_date, "Expiry date must not precede start date")
    await ensure_exists(session, models.Project, payload.project_id, "Project")
    await ensure_exists(session, models.Supplier, payload.supplier_id, "Supplier")
    return payload.model_dump()


async def create_insurance(session: AsyncSession, storage: FileStorage, payload: InsuranceCreate) -> models.Insurance:
    insurance = models.Insurance(**await _insurance_values(session, payload))
    session.add(insurance)
    await session.commit()
    init_owner_directory(storage, OwnerType.INSURANCE, insurance)
    logger.info("Created insurance policy %s", insurance.policy_number)
    return insurance


async def update_insurance(session: AsyncSession, insurance_id: int, payload: InsuranceCreate) -> models.Insurance:
    insurance = await get_insurance(session, insurance_id)
    apply(insurance, await _insurance_values(session, payload))
    await session.commit()
    return insurance


async def delete_insurance(session: AsyncSession, storage: FileStorage, insurance_id: int) -> None:
    insurance = await get_insurance(session, insurance_id)
    await purge_owner_documents(session, storage, OwnerType.INSURANCE, insurance)
    await delete_now(session, insurance)
    await session.commit()
    logger.info("Deleted insurance %s", insurance_id)


async def expiring_insurances(session: AsyncSession, limit: int = 5) -> list[models.Insurance]:
    """Policies expiring from today on, soonest first."""

    result = await session.execute(
        select(models.Insurance)
        .where(models.Insurance.expiry_date >= date.today())
        .order_by(models.Insurance.expiry_date)
        .limit(limit)
    )
    return list(result.scalars().all())
