"""
Beneficiary Service.

Owner-scoped beneficiary operations. Enforces that the percentages of a
user's active beneficiaries never add up to more than 100.
"""

from __future__ import annotations

from typing import List, Optional, Tuple

from sqlalchemy.ext.asyncio import AsyncSession

from herit.core.database.entities.beneficiaries import Beneficiary
from herit.core.database.repositories import BeneficiaryQuery, BeneficiaryRepository
from herit.core.errors import DomainValidationError, ResourceNotFoundError
from herit.core.logging_config import get_logger
from herit.core.models.io.beneficiaries import BeneficiaryCreate, BeneficiaryUpdate

logger = get_logger(__name__)

MAX_TOTAL_PERCENTAGE = 100.0
REQUIRED_FIELDS = ("name", "relationship_type", "country")


class BeneficiaryService:
    """
    Beneficiary operations bound to one database session.

    Args:
        session: Request-scoped async database session.
    """

    def __init__(self, session: AsyncSession) -> None:
        self.beneficiaries = BeneficiaryRepository(session)

    async def _check_allocation(
        self, user_email: str, percentage: Optional[float], exclude_id: Optional[str] = None
    ) -> None:
        if not percentage:
            return
        allocated = await self.beneficiaries.allocated_percentage(user_email, exclude_id=exclude_id)
        if allocated + percentage > MAX_TOTAL_PERCENTAGE:
            raise DomainValidationError(
                "Total beneficiary allocation cannot exceed 100%",
                details={"allocated_percentage": allocated, "available_percentage": MAX_TOTAL_PERCENTAGE - allocated},
            )

    async def list_beneficiaries(
        self,
        user_email: str,
        *,
        page: int = 1,
        page_size: int = 10,
        search: Optional[str] = None,
        relationship_type: Optional[str] = None,
        sort_by: str = "created_at",
        sort_order: str = "desc",
    ) -> Tuple[List[Beneficiary], int]:
        query = BeneficiaryQuery(
            search=search,
            relationship_type=relationship_type,
            sort_by=sort_by,
            sort_order=sort_order,
            limit=page_size,
            offset=(page - 1) * page_size,
        )
        return await self.beneficiaries.search(user_email, query)

    async def create_beneficiary(self, user_email: str, data: BeneficiaryCreate) -> Beneficiary:
        """
        Raises:
            DomainValidationError: The new percentage would push the total over 100.
        """
        await self._check_allocation(user_email, data.percentage)
        beneficiary = Beneficiary(user_email=user_email, status="active", **data.model_dump(mode="json"))
        beneficiary = await self.beneficiaries.create(beneficiary)
        logger.info(f"Beneficiary {beneficiary.id} created for {user_email}")
        return beneficiary

    async def get_beneficiary(self, user_email: str, beneficiary_id: str) -> Beneficiary:
        """
        Raises:
            ResourceNotFoundError: Missing, deleted or owned by someone else.
        """
        beneficiary = await self.beneficiaries.get_owned(beneficiary_id, user_email)
        if beneficiary is None:
            raise ResourceNotFoundError("Beneficiary", beneficiary_id)
        return beneficiary

    async def update_beneficiary(
        self, user_email: str, beneficiary_id: str, data: BeneficiaryUpdate
    ) -> Beneficiary:
        beneficiary = await self.get_beneficiary(user_email, beneficiary_id)
        changes = data.model_dump(mode="json", exclude_unset=True)
        if "percentage" in changes:
            await self._check_allocation(user_email, changes["percentage"], exclude_id=beneficiary.id)
        for field, value in changes.items():
            if value is None and field in REQUIRED_FIELDS:
                continue
            setattr(beneficiary, field, value)
        return await self.beneficiaries.update(beneficiary)

    async def delete_beneficiary(self, user_email: str, beneficiary_id: str) -> Beneficiary:
        beneficiary = await self.get_beneficiary(user_email, beneficiary_id)
        beneficiary = await self.beneficiaries.soft_delete(beneficiary)
        logger.info(f"Beneficiary {beneficiary_id} soft-deleted for {user_email}")
        return beneficiary

    async def count(self, user_email: str) -> Tuple[int, float]:
        """Number of active beneficiaries and their allocated percentage."""
        return (
            await self.beneficiaries.count_active(user_email),
            await self.beneficiaries.allocated_percentage(user_email),
        )
