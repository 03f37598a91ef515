"""Customer persistence helpers that need a conditional write."""

from protean.utils.query import Q

from marketplace.customer.customer import Customer
from marketplace.domain import marketplace


@marketplace.repository(part_of=Customer)
class CustomerRepository:
    def debit_wallet(self, customer_id: str, observed_balance: int, points: int) -> bool:
        """Deduct ``points`` only if the stored balance is still ``observed_balance``.

        Returns False when another writer changed the balance first.
        """
        if points <= 0:
            return True
        if observed_balance < points:
            return False

        updated = self._dao._update_all(Q(id=customer_id, wallet=observed_balance), wallet=observed_balance - points)
        return updated > 0
