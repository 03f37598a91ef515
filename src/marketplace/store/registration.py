"""Store and manager administration: commands and handlers."""

import json

from protean import handle
from protean.fields import Float, Identifier, Integer, String, Text
from protean.utils.globals import current_domain

from marketplace.domain import marketplace
from marketplace.store.manager import Manager
from marketplace.store.store import Store


@marketplace.command(part_of="Store")
class RegisterStore:
    name = String(required=True, max_length=150)
    pincode = Integer(required=True)
    address = String(max_length=500)
    phone = String(max_length=20)
    latitude = Float()
    longitude = Float()
    categories = Text()  # JSON object of category flags


@marketplace.command(part_of="Store")
class AssignStoreManager:
    """Put a manager in charge of a store, unlinking any previous pairing."""

    store_id = Identifier(required=True)
    manager_id = Identifier(required=True)


@marketplace.command(part_of="Store")
class UpdateStoreDetails:
    store_id = Identifier(required=True)
    name = String(max_length=150)
    address = String(max_length=500)
    phone = String(max_length=20)
    latitude = Float()
    longitude = Float()
    pincode = Integer()
    categories = Text()  # JSON object of category flags


@marketplace.command(part_of="Store")
class DeactivateStore:
    store_id = Identifier(required=True)


@marketplace.command(part_of="Manager")
class RegisterManager:
    name = String(required=True, max_length=150)
    phone = String(max_length=20)
    email = String(max_length=254)


@marketplace.command_handler(part_of=Store)
class StoreAdministrationHandler:
    @handle(RegisterStore)
    def register_store(self, command):
        store = Store.register(
            name=command.name,
            pincode=command.pincode,
            address=command.address,
            phone=command.phone,
            latitude=command.latitude,
            longitude=command.longitude,
            categories=json.loads(command.categories) if command.categories else None,
        )
        current_domain.repository_for(Store).add(store)
        return str(store.id)

    @handle(AssignStoreManager)
    def assign_store_manager(self, command):
        store_repo = current_domain.repository_for(Store)
        manager_repo = current_domain.repository_for(Manager)

        store = store_repo.get(command.store_id)
        manager = manager_repo.get(command.manager_id)
        store_id = str(store.id)
        manager_id = str(manager.id)

        # Keep the 1:1 pairing consistent on both sides
        if store.manager_id and str(store.manager_id) != manager_id:
            previous_manager = manager_repo.get(str(store.manager_id))
            previous_manager.release_store()
            manager_repo.add(previous_manager)

        if manager.store_id and str(manager.store_id) != store_id:
            previous_store = store_repo.get(str(manager.store_id))
            previous_store.release_manager()
            store_repo.add(previous_store)

        store.assign_manager(manager_id)
        manager.assign_store(store_id)
        store_repo.add(store)
        manager_repo.add(manager)

    @handle(UpdateStoreDetails)
    def update_store_details(self, command):
        repo = current_domain.repository_for(Store)
        store = repo.get(command.store_id)

        changes = {}
        for field in ("name", "address", "phone", "latitude", "longitude", "pincode"):
            value = getattr(command, field)
            if value is not None:
                changes[field] = value
        if command.categories:
            changes["categories"] = json.loads(command.categories)

        store.update_details(**changes)
        repo.add(store)

    @handle(DeactivateStore)
    def deactivate_store(self, command):
        repo = current_domain.repository_for(Store)
        store = repo.get(command.store_id)
        store.deactivate()
        repo.add(store)


@marketplace.command_handler(part_of=Manager)
class ManagerRegistrationHandler:
    @handle(RegisterManager)
    def register_manager(self, command):
        manager = Manager.register(name=command.name, phone=command.phone, email=command.email)
        current_domain.repository_for(Manager).add(manager)
        return str(manager.id)
