"""Driver catalog service layer.

Business rules enforced:
- Name, tax id, license number and carrier are required; phone is not.
- The tax id must be a valid CPF and is unique across the catalog, on
  create and on update.
- Shipments copy driver name and tax id, so deleting a driver never
  touches a shipment.
- Listing is ordered by name.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Optional

import structlog
from django.db import IntegrityError, transaction

from modules.accounts.policy import Action, Actor, authorize
from modules.core.exceptions import FieldError
from modules.drivers.exceptions import DriverNotFound, DuplicateDriver
from modules.drivers.models import Driver
from modules.shipments.exceptions import InvalidTaxId
from shared.domain.validators import normalize_tax_id, require, validate_tax_id

if TYPE_CHECKING:
    from django.db.models import QuerySet

    from modules.drivers.dtos import CreateDriverDTO, UpdateDriverDTO
    from modules.drivers.repositories.interfaces import IDriverRepository

logger = structlog.get_logger(__name__)


class DriverService:
    def __init__(self, driver_repository: IDriverRepository) -> None:
        self._driver_repo = driver_repository

    @transaction.atomic
    def create_driver(self, actor: Optional[Actor], dto: CreateDriverDTO) -> Driver:
        """Register a driver.

        Raises:
            InvalidInput: a required field is blank or the tax id is not a CPF.
            DuplicateDriver: the tax id is already registered.
        """
        authorize(actor, Action.MANAGE_DRIVERS)
        require(
            {
                "name": dto.name,
                "tax_id": dto.tax_id,
                "license_number": dto.license_number,
            }
        )
        tax_id = self._validated_tax_id(dto.tax_id)
        if self._driver_repo.exists_by_tax_id(tax_id):
            raise DuplicateDriver()

        driver = Driver(
            name=dto.name,
            tax_id=tax_id,
            license_number=dto.license_number,
            phone=dto.phone,
            carrier=dto.carrier,
            created_by_id=actor.user_id,
        )
        try:
            with transaction.atomic():
                driver = self._driver_repo.save(driver)
        except IntegrityError as exc:
            raise DuplicateDriver() from exc

        logger.info("driver.created", driver_id=str(driver.id), carrier=driver.carrier)
        return driver

    @transaction.atomic
    def update_driver(
        self, actor: Optional[Actor], driver_id: str, dto: UpdateDriverDTO
    ) -> Driver:
        """Apply a partial update; a new tax id goes through the same checks.

        Raises:
            DriverNotFound: unknown driver.
            InvalidInput: a required field blanked, or an invalid tax id.
            DuplicateDriver: the new tax id belongs to another driver.
        """
        authorize(actor, Action.MANAGE_DRIVERS)
        driver = self.get_driver(driver_id)
        changes = dto.model_dump(exclude_none=True)
        require(
            {
                field: changes[field]
                for field in ("name", "tax_id", "license_number")
                if field in changes
            }
        )
        if "tax_id" in changes:
            tax_id = self._validated_tax_id(changes["tax_id"])
            if tax_id != driver.tax_id and self._driver_repo.exists_by_tax_id(tax_id):
                raise DuplicateDriver()
            changes["tax_id"] = tax_id

        for field, value in changes.items():
            setattr(driver, field, value)
        try:
            with transaction.atomic():
                driver = self._driver_repo.save(driver)
        except IntegrityError as exc:
            raise DuplicateDriver() from exc

        logger.info("driver.updated", driver_id=str(driver.id), fields=sorted(changes))
        return driver

    @transaction.atomic
    def delete_driver(self, actor: Optional[Actor], driver_id: str) -> None:
        authorize(actor, Action.MANAGE_DRIVERS)
        driver = self.get_driver(driver_id)
        self._driver_repo.delete(str(driver.id))

    def get_driver(self, driver_id: str) -> Driver:
        driver = self._driver_repo.get_by_id(driver_id)
        if not driver:
            raise DriverNotFound(f"Driver {driver_id} not found.")
        return driver

    def list_drivers(self) -> QuerySet:
        return self._driver_repo.list().order_by("name", "id")

    @staticmethod
    def _validated_tax_id(raw: str) -> str:
        result = validate_tax_id(raw)
        if not result.valid:
            raise InvalidTaxId(
                errors=[
                    FieldError(
                        field="tax_id",
                        code=f"invalid_tax_id_{result.reason}",
                        detail="Tax id is not a valid CPF.",
                    )
                ]
            )
        return normalize_tax_id(raw)
