"""Integration tests for DriverService."""

from __future__ import annotations

import pytest

from modules.accounts.policy import Actor
from modules.core.exceptions import Forbidden, InvalidInput
from modules.drivers.dtos import CreateDriverDTO, UpdateDriverDTO
from modules.drivers.exceptions import DriverNotFound, DuplicateDriver
from modules.drivers.models import Driver
from modules.shipments.constants import Carrier
from tests.conftest import VALID_CPF

pytestmark = pytest.mark.integration


def _dto(**overrides):
    fields = {
        "name": "Carlos Souza",
        "tax_id": VALID_CPF,
        "license_number": "01234567890",
        "carrier": Carrier.ACERT,
    }
    fields.update(overrides)
    return CreateDriverDTO(**fields)


class TestCreateDriver:
    def test_stores_normalized_tax_id(self, driver_service, usuario):
        driver = driver_service.create_driver(
            Actor.from_user(usuario), _dto(tax_id="529.982.247-25", phone=" 6299 ")
        )
        assert driver.tax_id == VALID_CPF
        assert driver.phone == "6299"
        assert driver.created_by_id == usuario.id

    def test_phone_is_optional(self, driver_service, gerente):
        driver = driver_service.create_driver(Actor.from_user(gerente), _dto())
        assert driver.phone == ""

    def test_invalid_checksum_rejected(self, driver_service, usuario):
        with pytest.raises(InvalidInput) as exc_info:
            driver_service.create_driver(
                Actor.from_user(usuario), _dto(tax_id="52998224724")
            )
        error = exc_info.value.errors[0]
        assert error.field == "tax_id"
        assert error.code == "invalid_tax_id_checksum"
        assert not Driver.objects.exists()

    @pytest.mark.parametrize("field", ["name", "tax_id", "license_number"])
    def test_required_fields(self, driver_service, usuario, field):
        with pytest.raises(InvalidInput) as exc_info:
            driver_service.create_driver(Actor.from_user(usuario), _dto(**{field: " "}))
        assert [e.field for e in exc_info.value.errors] == [field]

    def test_duplicate_tax_id_in_any_format_is_conflict(self, driver_service, usuario):
        actor = Actor.from_user(usuario)
        driver_service.create_driver(actor, _dto())

        with pytest.raises(DuplicateDriver) as exc_info:
            driver_service.create_driver(
                actor, _dto(name="Outro", tax_id="529.982.247-25")
            )
        assert exc_info.value.kind == "conflict"
        assert Driver.objects.count() == 1

    @pytest.mark.parametrize("role", ["separador", "conferente", "auditor"])
    def test_floor_roles_cannot_register(self, driver_service, request, role):
        user = request.getfixturevalue(role)
        with pytest.raises(Forbidden):
            driver_service.create_driver(Actor.from_user(user), _dto())


class TestUpdateDriver:
    def test_partial_update_keeps_other_fields(self, driver_service, usuario):
        actor = Actor.from_user(usuario)
        driver = driver_service.create_driver(actor, _dto(phone="6299"))

        updated = driver_service.update_driver(
            actor, str(driver.id), UpdateDriverDTO(carrier=Carrier.EXPRESSO_GOIAS)
        )
        assert updated.carrier == Carrier.EXPRESSO_GOIAS
        assert updated.phone == "6299"
        assert updated.tax_id == VALID_CPF

    def test_same_tax_id_reformatted_is_not_a_duplicate(self, driver_service, usuario):
        actor = Actor.from_user(usuario)
        driver = driver_service.create_driver(actor, _dto())

        updated = driver_service.update_driver(
            actor, str(driver.id), UpdateDriverDTO(tax_id="529.982.247-25")
        )
        assert updated.tax_id == VALID_CPF

    def test_tax_id_of_another_driver_is_conflict(self, driver_service, usuario):
        actor = Actor.from_user(usuario)
        driver_service.create_driver(actor, _dto())
        other = driver_service.create_driver(actor, _dto(tax_id="11144477735"))

        with pytest.raises(DuplicateDriver):
            driver_service.update_driver(
                actor, str(other.id), UpdateDriverDTO(tax_id=VALID_CPF)
            )
        other.refresh_from_db()
        assert other.tax_id == "11144477735"

    def test_blanking_name_rejected(self, driver_service, usuario):
        actor = Actor.from_user(usuario)
        driver = driver_service.create_driver(actor, _dto())

        with pytest.raises(InvalidInput) as exc_info:
            driver_service.update_driver(
                actor, str(driver.id), UpdateDriverDTO(name="")
            )
        assert exc_info.value.errors[0].field == "name"


class TestDeleteDriver:
    def test_deletes(self, driver_service, gerente):
        actor = Actor.from_user(gerente)
        driver = driver_service.create_driver(actor, _dto())

        driver_service.delete_driver(actor, str(driver.id))
        assert not Driver.objects.exists()

    def test_unknown_is_not_found(self, driver_service, gerente):
        with pytest.raises(DriverNotFound):
            driver_service.delete_driver(
                Actor.from_user(gerente), "00000000-0000-0000-0000-000000000000"
            )

    def test_separador_cannot_delete(self, driver_service, usuario, separador):
        driver = driver_service.create_driver(Actor.from_user(usuario), _dto())
        with pytest.raises(Forbidden):
            driver_service.delete_driver(Actor.from_user(separador), str(driver.id))
        assert Driver.objects.filter(id=driver.id).exists()


class TestDriverQueries:
    def test_list_ordered_by_name(self, driver_service, usuario):
        actor = Actor.from_user(usuario)
        driver_service.create_driver(actor, _dto(name="Zeca", tax_id="11144477735"))
        driver_service.create_driver(actor, _dto(name="Ana"))

        names = [d.name for d in driver_service.list_drivers()]
        assert names == ["Ana", "Zeca"]

    def test_unknown_id_is_not_found(self, driver_service):
        with pytest.raises(DriverNotFound):
            driver_service.get_driver("not-a-uuid")
