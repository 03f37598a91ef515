"""Application tests for store and manager administration."""

import json

import pytest
from protean import current_domain
from protean.exceptions import ValidationError

from marketplace.store.manager import Manager
from marketplace.store.registration import (
    AssignStoreManager,
    DeactivateStore,
    RegisterManager,
    RegisterStore,
    UpdateStoreDetails,
)
from marketplace.store.store import Store


def _process(command):
    return current_domain.process(command, asynchronous=False)


def _store(store_id):
    return current_domain.repository_for(Store).get(store_id)


def _manager(manager_id):
    return current_domain.repository_for(Manager).get(manager_id)


class TestRegisterStore:
    def test_store_registered_with_categories(self):
        store_id = _process(
            RegisterStore(
                name="Coastal Catch",
                pincode=600001,
                latitude=13.08,
                longitude=80.27,
                categories=json.dumps({"fish": True, "prawns": True}),
            )
        )

        store = _store(store_id)
        assert store.is_active is True
        assert store.categories.fish is True
        assert store.categories.chicken is False


class TestAssignStoreManager:
    def test_manager_and_store_linked_both_ways(self, make_store):
        store = make_store(with_manager=False)
        manager_id = _process(RegisterManager(name="Meena"))

        _process(AssignStoreManager(store_id=store["store_id"], manager_id=manager_id))

        assert str(_store(store["store_id"]).manager_id) == manager_id
        assert str(_manager(manager_id).store_id) == store["store_id"]

    def test_replacing_manager_releases_previous_one(self, make_store):
        store = make_store()
        replacement = _process(RegisterManager(name="Meena"))

        _process(AssignStoreManager(store_id=store["store_id"], manager_id=replacement))

        assert str(_store(store["store_id"]).manager_id) == replacement
        assert _manager(store["manager_id"]).store_id is None

    def test_moving_manager_releases_previous_store(self, make_store):
        first = make_store()
        second = make_store(with_manager=False, pincode=560002)

        _process(AssignStoreManager(store_id=second["store_id"], manager_id=first["manager_id"]))

        assert _store(first["store_id"]).manager_id is None
        assert str(_store(second["store_id"]).manager_id) == first["manager_id"]
        assert str(_manager(first["manager_id"]).store_id) == second["store_id"]


class TestUpdateStoreDetails:
    def test_partial_update(self, make_store):
        store = make_store()

        _process(UpdateStoreDetails(store_id=store["store_id"], name="Renamed", pincode=560003))

        updated = _store(store["store_id"])
        assert updated.name == "Renamed"
        assert updated.pincode == 560003
        assert updated.address == "MG Road"

    def test_categories_replaced(self, make_store):
        store = make_store()

        _process(UpdateStoreDetails(store_id=store["store_id"], categories=json.dumps({"mutton": True})))

        assert _store(store["store_id"]).categories.mutton is True

    def test_empty_update_rejected(self, make_store):
        store = make_store()
        with pytest.raises(ValidationError):
            _process(UpdateStoreDetails(store_id=store["store_id"]))


class TestDeactivateStore:
    def test_deactivated_store_is_skipped_by_resolution(self, make_store):
        store = make_store()
        _process(DeactivateStore(store_id=store["store_id"]))

        assert _store(store["store_id"]).is_active is False
        assert current_domain.repository_for(Store).find_active() == []
