"""Delivery partner onboarding: registration, document checks, activation."""

from protean import handle
from protean.fields import Identifier, String
from protean.utils.globals import current_domain

from marketplace.delivery.partner import DeliveryPartner
from marketplace.domain import marketplace


@marketplace.command(part_of="DeliveryPartner")
class RegisterDeliveryPartner:
    name = String(required=True, max_length=150)
    phone = String(required=True, max_length=20)
    store_id = Identifier()


@marketplace.command(part_of="DeliveryPartner")
class UpdateDocumentStatus:
    partner_id = Identifier(required=True)
    document = String(required=True, max_length=50)
    status = String(required=True, max_length=20)


@marketplace.command(part_of="DeliveryPartner")
class ActivateDeliveryPartner:
    partner_id = Identifier(required=True)


@marketplace.command_handler(part_of=DeliveryPartner)
class PartnerOnboardingHandler:
    @handle(RegisterDeliveryPartner)
    def register_partner(self, command):
        partner = DeliveryPartner.register(name=command.name, phone=command.phone, store_id=command.store_id)
        current_domain.repository_for(DeliveryPartner).add(partner)
        return str(partner.id)

    @handle(UpdateDocumentStatus)
    def update_document_status(self, command):
        repo = current_domain.repository_for(DeliveryPartner)
        partner = repo.get(command.partner_id)
        partner.update_document_status(command.document, command.status)
        repo.add(partner)

    @handle(ActivateDeliveryPartner)
    def activate_partner(self, command):
        repo = current_domain.repository_for(DeliveryPartner)
        partner = repo.get(command.partner_id)
        partner.activate()
        repo.add(partner)
