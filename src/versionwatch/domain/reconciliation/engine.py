"""Apply reconciliation plans through a catalog unit of work."""

from __future__ import annotations

from dataclasses import dataclass
from logging import getLogger
from typing import TYPE_CHECKING

from versionwatch.domain.model import ChangeAction
from versionwatch.domain.ports import CycleConflictError
from versionwatch.domain.reconciliation.plan import plan_reconciliation

if TYPE_CHECKING:
    from collections.abc import Callable

    from versionwatch.domain.collection import ProductCollection
    from versionwatch.domain.ports import CatalogUnitOfWork

log = getLogger(__name__)


@dataclass(frozen=True, slots=True)
class ReconciliationResult:
    product: str
    products_inserted: int = 0
    products_updated: int = 0
    cycles_inserted: int = 0
    cycles_updated: int = 0

    @property
    def changed(self) -> bool:
        return any(
            (
                self.products_inserted,
                self.products_updated,
                self.cycles_inserted,
                self.cycles_updated,
            )
        )


@dataclass(slots=True)
class Reconciler:
    """Persist one product collection per transaction, enrichment-only."""

    unit_of_work_factory: Callable[[], CatalogUnitOfWork]

    def reconcile(self, collection: ProductCollection) -> ReconciliationResult:
        name = collection.product.name
        if not collection.cycles:
            log.debug("%s: nothing collected, not reconciling", name)
            return ReconciliationResult(product=name)
        try:
            return self._reconcile_once(collection)
        except CycleConflictError:
            # A concurrent writer inserted some of our cycles; they are updates now.
            log.warning("%s: cycle insert raced with another writer, retrying", name)
            return self._reconcile_once(collection)

    def _reconcile_once(self, collection: ProductCollection) -> ReconciliationResult:
        name = collection.product.name
        with self.unit_of_work_factory() as uow:
            repositories = uow.repositories
            persisted_product = repositories.products.get_by_name(name)
            persisted_cycles = (
                repositories.cycles.for_product(persisted_product.id)
                if persisted_product is not None and persisted_product.id is not None
                else {}
            )
            plan = plan_reconciliation(
                collection,
                persisted_product=persisted_product,
                persisted_cycles=persisted_cycles,
            )
            if plan.is_noop:
                log.info("%s: already up to date (%d cycles)", name, len(persisted_cycles))
                return ReconciliationResult(product=name)

            product_id = repositories.products.upsert_product(collection.product)
            inserted = repositories.cycles.upsert_cycles(
                product_id, [change.cycle for change in plan.cycle_changes]
            )
            uow.commit()

        result = ReconciliationResult(
            product=name,
            products_inserted=int(plan.product_action is ChangeAction.INSERT),
            products_updated=int(plan.product_action is ChangeAction.UPDATE),
            cycles_inserted=inserted,
            cycles_updated=len(plan.cycle_changes) - inserted,
        )
        log.info(
            "%s: reconciled (%d cycles inserted, %d updated)",
            name,
            result.cycles_inserted,
            result.cycles_updated,
        )
        return result
