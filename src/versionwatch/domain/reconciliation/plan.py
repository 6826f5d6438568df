"""Pure planning of the writes one product collection requires."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from versionwatch.domain.model import ChangeAction
from versionwatch.domain.reconciliation.enrichment import (
    CYCLE_FIELDS,
    PRODUCT_FIELDS,
    cycle_enrichment,
    product_enrichment,
)
from versionwatch.domain.versioning import deduplicate, sort_cycles

if TYPE_CHECKING:
    from collections.abc import Mapping

    from versionwatch.domain.collection import ProductCollection
    from versionwatch.domain.model import Cycle, Product, ProductCycle, ProductInfo


@dataclass(frozen=True, slots=True)
class CycleChange:
    """Insert or enrichment of one cycle; ``changes`` lists the fields written."""

    name: str
    action: ChangeAction
    cycle: ProductCycle
    changes: Mapping[str, object] = field(default_factory=dict)


@dataclass(frozen=True, slots=True)
class ReconciliationPlan:
    product: ProductInfo
    product_action: ChangeAction
    product_changes: Mapping[str, object] = field(default_factory=dict)
    cycle_changes: tuple[CycleChange, ...] = ()

    @property
    def inserts(self) -> tuple[CycleChange, ...]:
        return tuple(c for c in self.cycle_changes if c.action is ChangeAction.INSERT)

    @property
    def updates(self) -> tuple[CycleChange, ...]:
        return tuple(c for c in self.cycle_changes if c.action is ChangeAction.UPDATE)

    @property
    def is_noop(self) -> bool:
        return self.product_action is ChangeAction.UNCHANGED and not self.cycle_changes


def plan_reconciliation(
    collection: ProductCollection,
    *,
    persisted_product: Product | None,
    persisted_cycles: Mapping[str, Cycle],
) -> ReconciliationPlan:
    """Compare collected cycles with stored state; never plans a delete or a null write.

    Cycles of the collection sharing a canonical name are folded first (the
    static tier is not deduplicated upstream); changes come out in version order.
    """

    info = collection.product
    if persisted_product is None:
        product_action = ChangeAction.INSERT
        product_changes: dict[str, object] = {
            name: getattr(info, name)
            for name in PRODUCT_FIELDS
            if getattr(info, name) is not None
        }
        persisted_cycles = {}
    else:
        product_changes = product_enrichment(persisted_product, info)
        product_action = ChangeAction.UPDATE if product_changes else ChangeAction.UNCHANGED

    changes: list[CycleChange] = []
    for cycle in sort_cycles(deduplicate(collection.cycles)):
        stored = persisted_cycles.get(cycle.name)
        if stored is None:
            changes.append(
                CycleChange(
                    name=cycle.name,
                    action=ChangeAction.INSERT,
                    cycle=cycle,
                    changes={
                        name: getattr(cycle, name)
                        for name in CYCLE_FIELDS
                        if getattr(cycle, name) is not None
                    },
                )
            )
            continue
        enrichment = cycle_enrichment(stored, cycle)
        if enrichment:
            changes.append(
                CycleChange(
                    name=cycle.name,
                    action=ChangeAction.UPDATE,
                    cycle=cycle,
                    changes=enrichment,
                )
            )

    return ReconciliationPlan(
        product=info,
        product_action=product_action,
        product_changes=product_changes,
        cycle_changes=tuple(changes),
    )
