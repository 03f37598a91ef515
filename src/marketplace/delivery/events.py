"""Delivery partner domain events."""

from protean.fields import DateTime, Identifier, String

from marketplace.domain import marketplace


@marketplace.event(part_of="DeliveryPartner")
class DeliveryPartnerRegistered:
    __version__ = 1

    partner_id = Identifier(required=True)
    name = String(required=True)
    phone = String(required=True)
    registered_at = DateTime(required=True)


@marketplace.event(part_of="DeliveryPartner")
class DocumentStatusUpdated:
    __version__ = 1

    partner_id = Identifier(required=True)
    document = String(required=True)
    status = String(required=True)
    overall_document_status = String(required=True)
    updated_at = DateTime(required=True)


@marketplace.event(part_of="DeliveryPartner")
class DeliveryPartnerActivated:
    __version__ = 1

    partner_id = Identifier(required=True)
    activated_at = DateTime(required=True)
