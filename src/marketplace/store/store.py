"""Store aggregate: a physical outlet that fulfills orders for nearby customers.

A store is located by pincode and coordinates and is run by exactly one
manager. Deactivated stores stay on record but are never offered to checkout.
"""

import json
from datetime import UTC, datetime

from protean.exceptions import ValidationError
from protean.fields import Boolean, DateTime, Float, Identifier, Integer, String, ValueObject

from marketplace.domain import marketplace
from marketplace.store.events import (
    StoreDeactivated,
    StoreDetailsUpdated,
    StoreManagerAssigned,
    StoreRegistered,
)

# Fields a manager or admin may patch; everything else is managed by commands.
_EDITABLE_FIELDS = ("name", "address", "phone", "latitude", "longitude", "pincode", "categories")


@marketplace.value_object(part_of="Store")
class MeatCategories:
    """Meat types a store carries."""

    chicken = Boolean(default=False)
    mutton = Boolean(default=False)
    fish = Boolean(default=False)
    prawns = Boolean(default=False)
    eggs = Boolean(default=False)


@marketplace.aggregate
class Store:
    name = String(required=True, max_length=150)
    address = String(max_length=500)
    phone = String(max_length=20)
    latitude = Float(min_value=-90.0, max_value=90.0)
    longitude = Float(min_value=-180.0, max_value=180.0)
    pincode = Integer(required=True)
    categories = ValueObject(MeatCategories)
    manager_id = Identifier()
    is_active = Boolean(default=True)
    created_at = DateTime()
    updated_at = DateTime()

    @classmethod
    def register(
        cls,
        name: str,
        pincode: int,
        address: str | None = None,
        phone: str | None = None,
        latitude: float | None = None,
        longitude: float | None = None,
        categories: dict | None = None,
    ):
        now = datetime.now(UTC)
        store = cls(
            name=name,
            pincode=pincode,
            address=address,
            phone=phone,
            latitude=latitude,
            longitude=longitude,
            categories=MeatCategories(**(categories or {})),
            is_active=True,
            created_at=now,
            updated_at=now,
        )
        store.raise_(
            StoreRegistered(
                store_id=str(store.id),
                name=name,
                pincode=pincode,
                registered_at=now,
            )
        )
        return store

    def assign_manager(self, manager_id: str) -> None:
        previous = str(self.manager_id) if self.manager_id else None
        now = datetime.now(UTC)
        self.manager_id = manager_id
        self.updated_at = now
        self.raise_(
            StoreManagerAssigned(
                store_id=str(self.id),
                manager_id=manager_id,
                previous_manager_id=previous,
                assigned_at=now,
            )
        )

    def release_manager(self) -> None:
        self.manager_id = None
        self.updated_at = datetime.now(UTC)

    def update_details(self, **changes) -> None:
        """Apply a partial update restricted to the editable fields."""
        unknown = sorted(set(changes) - set(_EDITABLE_FIELDS))
        if unknown:
            raise ValidationError({"store": [f"Fields cannot be updated: {', '.join(unknown)}"]})
        if not changes:
            raise ValidationError({"store": ["No changes provided"]})

        for field, value in changes.items():
            if field == "categories":
                value = MeatCategories(**value)
            setattr(self, field, value)

        now = datetime.now(UTC)
        self.updated_at = now
        self.raise_(
            StoreDetailsUpdated(
                store_id=str(self.id),
                changes=json.dumps(changes),
                updated_at=now,
            )
        )

    def deactivate(self) -> None:
        if not self.is_active:
            raise ValidationError({"is_active": ["Store is already inactive"]})

        now = datetime.now(UTC)
        self.is_active = False
        self.updated_at = now
        self.raise_(StoreDeactivated(store_id=str(self.id), deactivated_at=now))
