"""Store and manager domain events."""

from protean.fields import DateTime, Identifier, Integer, String, Text

from marketplace.domain import marketplace


@marketplace.event(part_of="Store")
class StoreRegistered:
    """A store was registered on the marketplace."""

    __version__ = 1

    store_id = Identifier(required=True)
    name = String(required=True)
    pincode = Integer(required=True)
    registered_at = DateTime(required=True)


@marketplace.event(part_of="Store")
class StoreManagerAssigned:
    """A manager took charge of a store."""

    __version__ = 1

    store_id = Identifier(required=True)
    manager_id = Identifier(required=True)
    previous_manager_id = Identifier()
    assigned_at = DateTime(required=True)


@marketplace.event(part_of="Store")
class StoreDetailsUpdated:
    """Editable store details were changed."""

    __version__ = 1

    store_id = Identifier(required=True)
    changes = Text(required=True)  # JSON object of changed fields
    updated_at = DateTime(required=True)


@marketplace.event(part_of="Store")
class StoreDeactivated:
    """A store stopped accepting orders."""

    __version__ = 1

    store_id = Identifier(required=True)
    deactivated_at = DateTime(required=True)


@marketplace.event(part_of="Manager")
class ManagerRegistered:
    """A store manager account was created."""

    __version__ = 1

    manager_id = Identifier(required=True)
    name = String(required=True)
    registered_at = DateTime(required=True)
