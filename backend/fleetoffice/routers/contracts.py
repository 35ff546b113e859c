"""Supplier contract and insurance policy endpoints."""
from typing import Sequence

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from ..dependencies import get_db_session, get_storage
from ..models import Contract, Insurance
from ..models.enums import SupplierContractStatus
from ..schemas import ContractCreate, ContractRead, ContractStats, InsuranceCreate, InsuranceRead
from ..services import contracts as service
from ..storage import FileStorage

contracts_router = APIRouter(prefix="/settings/contracts", tags=["contracts"])
insurances_router = APIRouter(prefix="/settings/insurances", tags=["contracts"])


@contracts_router.get("/", response_model=list[ContractRead])
async def list_contracts(
    status: SupplierContractStatus | None = None,
    supplier_id: int | None = None,
    session: AsyncSession = Depends(get_db_session),
) -> Sequence[Contract]:
    return await service.list_contracts(session, status, supplier_id)


@contracts_router.get("/stats", response_model=ContractStats)
async def contract_stats(session: AsyncSession = Depends(get_db_session)) -> dict:
    """Draft, active, expiring and expired contract counts."""

    return await service.contract_stats(session)


@contracts_router.get("/{contract_id}", response_model=ContractRead)
async def get_contract(contract_id: int, session: AsyncSession = Depends(get_db_session)) -> Contract:
    return await service.get_contract(session, contract_id)


@contracts_router.post("/", response_model=ContractRead, status_code=status.HTTP_201_CREATED)
async def create_contract(
    payload: ContractCreate,
    session: AsyncSession = Depends(get_db_session),
    storage: FileStorage = Depends(get_storage),
) -> Contract:
    return await service.create_contract(session, storage, payload)


@contracts_router.put("/{contract_id}", response_model=ContractRead)
async def update_contract(
    contract_id: int,
    payload: ContractCreate,
    session: AsyncSession = Depends(get_db_session),
) -> Contract:
    return await service.update_contract(session, contract_id, payload)


@contracts_router.delete("/{contract_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_contract(
    contract_id: int,
    session: AsyncSession = Depends(get_db_session),
    storage: FileStorage = Depends(get_storage),
) -> None:
    await service.delete_contract(session, storage, contract_id)


@insurances_router.get("/", response_model=list[InsuranceRead])
async def list_insurances(
    project_id: int | None = None,
    session: AsyncSession = Depends(get_db_session),
) -> Sequence[Insurance]:
    return await service.list_insurances(session, project_id)


@insurances_router.get("/expiring", response_model=list[InsuranceRead])
async def expiring_insurances(
    limit: int = Query(default=5, ge=1, le=100),
    session: AsyncSession = Depends(get_db_session),
) -> Sequence[Insurance]:
    """Policies not yet expired, soonest expiry first."""

    return await service.expiring_insurances(session, limit)


@insurances_router.get("/{insurance_id}", response_model=InsuranceRead)
async def get_insurance(insurance_id: int, session: AsyncSession = Depends(get_db_session)) -> Insurance:
    return await service.get_insurance(session, insurance_id)


@insurances_router.post("/", response_model=InsuranceRead, status_code=status.HTTP_201_CREATED)
async def create_insurance(
    payload: InsuranceCreate,
    session: AsyncSession = Depends(get_db_session),
    storage: FileStorage = Depends(get_storage),
) -> Insurance:
    return await service.create_insurance(session, storage, payload)


@insurances_router.put("/{insurance_id}", response_model=InsuranceRead)
async def update_insurance(
    insurance_id: int,
    payload: InsuranceCreate,
    session: AsyncSession = Depends(get_db_session),
) -> Insurance:
    return await service.update_insurance(session, insurance_id, payload)


@insurances_router.delete("/{insurance_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_insurance(
    insurance_id: int,
    session: AsyncSession = Depends(get_db_session),
    storage: FileStorage = Depends(get_storage),
) -> None:
    await service.delete_insurance(session, storage, insurance_id)
