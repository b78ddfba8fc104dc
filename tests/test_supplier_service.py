"""Service-level tests for suppliers against an in-memory database."""

import pytest

from stockledger.core.exceptions import BusinessRuleError, NotFoundError, ValidationError
from stockledger.modules.suppliers.repository import SupplierRepository
from stockledger.modules.suppliers.service import SupplierService

from conftest import MISSING_ID, OTHER_TENANT, TENANT


@pytest.fixture
def service(db):
    return SupplierService(db)


def test_create_supplier_normalizes_fields(service):
    supplier = service.create_supplier(TENANT, {
        "name": "  Acme  ",
        "contact_person": "Jane Doe",
        "email": " Jane@Acme.COM ",
        "phone": "555-0100",
        "address": "  1 Main St ",
    })

    assert len(supplier.id) == 24
    assert supplier.user_id == TENANT
    assert supplier.name == "Acme"
    assert supplier.email == "jane@acme.com"
    assert supplier.address == "1 Main St"


def test_create_supplier_validation_error(service):
    with pytest.raises(ValidationError) as excinfo:
        service.create_supplier(TENANT, {"name": "Acme", "contact_person": "Jane"})
    assert excinfo.value.field == "email"


def test_list_suppliers_sorted_by_name(service, make_supplier):
    make_supplier(name="Zeta Parts")
    make_supplier(name="Alpha Goods")
    make_supplier(OTHER_TENANT, name="Beta Foreign")

    names = [s.name for s in service.list_suppliers(TENANT)]

    assert names == ["Alpha Goods", "Zeta Parts"]


@pytest.mark.parametrize("search", ["zeta", "MARK", "zeta.io"])
def test_list_suppliers_search(service, make_supplier, search):
    make_supplier(name="Zeta Parts", contact_person="Mark Twain", email="sales@zeta.io")
    make_supplier(name="Alpha Goods")

    results = service.list_suppliers(TENANT, {"search": search})

    assert [s.name for s in results] == ["Zeta Parts"]


def test_search_treats_wildcards_literally(service, make_supplier):
    make_supplier(name="Acme 100% Cotton")
    make_supplier(name="Other Goods")

    assert [s.name for s in service.list_suppliers(TENANT, {"search": "%"})] == ["Acme 100% Cotton"]
    assert service.list_suppliers(TENANT, {"search": "_"}) == []


def test_get_supplier_is_scoped_to_owner(service, make_supplier):
    supplier = make_supplier()

    assert service.get_supplier(TENANT, supplier.id).id == supplier.id
    with pytest.raises(NotFoundError):
        service.get_supplier(OTHER_TENANT, supplier.id)


@pytest.mark.parametrize("supplier_id", [MISSING_ID, "not-an-id", ""])
def test_get_supplier_missing_or_malformed(service, supplier_id):
    with pytest.raises(NotFoundError) as excinfo:
        service.get_supplier(TENANT, supplier_id)
    assert excinfo.value.resource == "Supplier"


def test_update_supplier_partial(service, make_supplier):
    supplier = make_supplier()

    updated = service.update_supplier(TENANT, supplier.id, {"phone": "555-9999"})

    assert updated.phone == "555-9999"
    assert updated.name == supplier.name
    assert updated.email == supplier.email


def test_update_supplier_empty_patch_is_noop(service, make_supplier):
    supplier = make_supplier()

    unchanged = service.update_supplier(TENANT, supplier.id, {})

    assert unchanged == supplier


def test_update_supplier_of_other_tenant(service, make_supplier):
    supplier = make_supplier()

    with pytest.raises(NotFoundError):
        service.update_supplier(OTHER_TENANT, supplier.id, {"name": "Hijacked"})
    assert service.get_supplier(TENANT, supplier.id).name == supplier.name


def test_delete_supplier(service, make_supplier):
    supplier = make_supplier()

    service.delete_supplier(TENANT, supplier.id)

    with pytest.raises(NotFoundError):
        service.get_supplier(TENANT, supplier.id)
    with pytest.raises(NotFoundError):
        service.delete_supplier(TENANT, supplier.id)


def test_delete_supplier_of_other_tenant(service, make_supplier):
    supplier = make_supplier()

    with pytest.raises(NotFoundError):
        service.delete_supplier(OTHER_TENANT, supplier.id)
    assert service.get_supplier(TENANT, supplier.id).id == supplier.id


def test_delete_supplier_with_products_is_restricted(service, make_supplier, make_product):
    supplier = make_supplier()
    make_product(supplier_id=supplier.id)

    with pytest.raises(BusinessRuleError) as excinfo:
        service.delete_supplier(TENANT, supplier.id)

    assert "1 product(s)" in excinfo.value.message
    assert service.get_supplier(TENANT, supplier.id).id == supplier.id


def test_list_supplier_names(service, make_supplier):
    make_supplier(name="Zeta Parts")
    make_supplier(name="Alpha Goods")

    assert service.list_supplier_names(TENANT) == ["Alpha Goods", "Zeta Parts"]
    assert service.list_supplier_names(OTHER_TENANT) == []


def test_repository_find_by_name_and_count(db, make_supplier):
    supplier = make_supplier(name="Acme Supplies")
    repository = SupplierRepository(db)

    assert repository.find_by_name(TENANT, "  acme SUPPLIES ").id == supplier.id
    assert repository.find_by_name(OTHER_TENANT, "Acme Supplies") is None
    assert repository.count(TENANT) == 1
    assert repository.count(OTHER_TENANT) == 0
