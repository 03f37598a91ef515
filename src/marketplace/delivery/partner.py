"""DeliveryPartner aggregate: a rider who carries orders from stores to customers.

A partner starts inactive and pending verification. Each of the required
documents is verified individually; the overall document status is derived
from them, and only a partner whose documents are all verified can be
activated. Delivery counters are never written through the aggregate; they
are incremented atomically by ``DeliveryPartnerRepository.increment``.
"""

from datetime import UTC, datetime
from enum import Enum

from protean.exceptions import ValidationError
from protean.fields import Boolean, DateTime, Float, Identifier, Integer, String, ValueObject

from marketplace.delivery.events import (
    DeliveryPartnerActivated,
    DeliveryPartnerRegistered,
    DocumentStatusUpdated,
)
from marketplace.domain import marketplace


class PartnerStatus(Enum):
    PENDING = "pending"
    VERIFIED = "verified"


class DocumentVerification(Enum):
    PENDING = "pending"
    VERIFIED = "verified"
    REJECTED = "rejected"


REQUIRED_DOCUMENTS = (
    "id_proof",
    "address_proof",
    "vehicle_documents",
    "driving_license",
    "insurance_documents",
)


@marketplace.value_object(part_of="DeliveryPartner")
class DocumentStatus:
    """Verification state of each required document."""

    id_proof = String(choices=DocumentVerification, default=DocumentVerification.PENDING.value)
    address_proof = String(choices=DocumentVerification, default=DocumentVerification.PENDING.value)
    vehicle_documents = String(choices=DocumentVerification, default=DocumentVerification.PENDING.value)
    driving_license = String(choices=DocumentVerification, default=DocumentVerification.PENDING.value)
    insurance_documents = String(choices=DocumentVerification, default=DocumentVerification.PENDING.value)

    def overall(self) -> str:
        statuses = [getattr(self, name) for name in REQUIRED_DOCUMENTS]
        if all(s == DocumentVerification.VERIFIED.value for s in statuses):
            return DocumentVerification.VERIFIED.value
        if any(s == DocumentVerification.REJECTED.value for s in statuses):
            return DocumentVerification.REJECTED.value
        return DocumentVerification.PENDING.value


@marketplace.aggregate
class DeliveryPartner:
    name = String(required=True, max_length=150)
    phone = String(required=True, max_length=20, unique=True)
    status = String(choices=PartnerStatus, default=PartnerStatus.PENDING.value)
    documents = ValueObject(DocumentStatus)
    overall_document_status = String(choices=DocumentVerification, default=DocumentVerification.PENDING.value)
    is_active = Boolean(default=False)
    total_deliveries = Integer(min_value=0, default=0)
    total_accepted = Integer(min_value=0, default=0)
    total_rejected = Integer(min_value=0, default=0)
    rating = Float(min_value=0.0, max_value=5.0, default=0.0)
    store_id = Identifier()
    registered_at = DateTime()
    last_active_at = DateTime()

    @classmethod
    def register(cls, name: str, phone: str, store_id: str | None = None):
        now = datetime.now(UTC)
        partner = cls(
            name=name,
            phone=phone,
            store_id=store_id,
            documents=DocumentStatus(),
            registered_at=now,
        )
        partner.raise_(
            DeliveryPartnerRegistered(
                partner_id=str(partner.id),
                name=name,
                phone=phone,
                registered_at=now,
            )
        )
        return partner

    def update_document_status(self, document: str, status: str) -> None:
        if document not in REQUIRED_DOCUMENTS:
            raise ValidationError({"document": [f"Unknown document: {document}"]})
        if status not in {s.value for s in DocumentVerification}:
            raise ValidationError({"status": [f"Invalid document status: {status}"]})

        values = {name: getattr(self.documents, name) for name in REQUIRED_DOCUMENTS} if self.documents else {}
        values[document] = status
        self.documents = DocumentStatus(**values)
        self.overall_document_status = self.documents.overall()

        self.raise_(
            DocumentStatusUpdated(
                partner_id=str(self.id),
                document=document,
                status=status,
                overall_document_status=self.overall_document_status,
                updated_at=datetime.now(UTC),
            )
        )

    def activate(self) -> None:
        if self.overall_document_status != DocumentVerification.VERIFIED.value:
            raise ValidationError({"documents": ["All documents must be verified before activation"]})
        if self.is_active:
            raise ValidationError({"is_active": ["Delivery partner is already active"]})

        now = datetime.now(UTC)
        self.status = PartnerStatus.VERIFIED.value
        self.is_active = True
        self.last_active_at = now
        self.raise_(DeliveryPartnerActivated(partner_id=str(self.id), activated_at=now))
