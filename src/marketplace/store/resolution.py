"""Store resolution: picks the store that will fulfill a delivery location.

Stores whose pincode is within a small band of the customer's pincode are
preferred; when none exist (or no pincode is known) every active store is
considered. Among the candidates the geographically nearest store wins, and it
must have a manager to hand the order to.
"""

from dataclasses import dataclass

from protean.exceptions import ObjectNotFoundError, ValidationError
from protean.utils.globals import current_domain

from marketplace.errors import NoManagerAssignedError, NoStoreAvailableError
from marketplace.geo.matching import select_nearest
from marketplace.store.manager import Manager
from marketplace.store.store import Store
from marketplace.utils.logging import get_logger

logger = get_logger(__name__)

PINCODE_BAND = 5


@dataclass(frozen=True)
class Resolution:
    store: Store
    manager: Manager


def parse_pincode(pincode) -> int | None:
    """Normalize a pincode to an integer; blank values mean "unknown"."""
    if pincode is None:
        return None
    text = str(pincode).strip()
    if not text:
        return None
    try:
        return int(text)
    except ValueError:
        raise ValidationError({"pincode": ["Pincode must be a valid number"]}) from None


def resolve_store(pincode, latitude: float, longitude: float) -> Resolution:
    repo = current_domain.repository_for(Store)

    pincode_value = parse_pincode(pincode)
    candidates = []
    if pincode_value is not None:
        candidates = repo.find_active_in_pincode_band(pincode_value, PINCODE_BAND)
        candidates.sort(key=lambda store: abs(store.pincode - pincode_value))

    if not candidates:
        logger.info("No store in pincode band, falling back to all active stores", pincode=pincode_value)
        candidates = repo.find_active()

    store = select_nearest(candidates, latitude, longitude)
    if store is None:
        raise NoStoreAvailableError()

    if not store.manager_id:
        raise NoManagerAssignedError()

    try:
        manager = current_domain.repository_for(Manager).get(str(store.manager_id))
    except ObjectNotFoundError:
        raise NoManagerAssignedError("Manager not found for nearest store") from None

    logger.info("Resolved store", store_id=str(store.id), manager_id=str(manager.id), pincode=pincode_value)
    return Resolution(store=store, manager=manager)
