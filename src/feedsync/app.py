"""Application orchestration entry points."""

from __future__ import annotations

from dataclasses import dataclass
from logging import getLogger
from typing import TYPE_CHECKING

from feedsync.adapters.sqlalchemy.unit_of_work import (
    SqlAlchemyCatalogUnitOfWork,
    is_started,
    startup,
)
from feedsync.config import get_reprocessing_config
from feedsync.domain.model import PropagationMode, Requirement
from feedsync.domain.reprocessing import ReprocessingOrchestrator
from feedsync.domain.resolution import FeedValueResolver
from feedsync.domain.specification import default_registry
from feedsync.domain.transforms import default_transforms
from feedsync.domain.validation import FeedValidator

if TYPE_CHECKING:
    from uuid import UUID

    from feedsync.config import ReprocessingConfig
    from feedsync.domain.reprocessing import BatchResult, PropagationResult, UnitOfWorkFactory

log = getLogger(__name__)


@dataclass(frozen=True, slots=True)
class SpecificationReport:
    attributes: int
    required: int
    conditional: int
    locked: int
    mapped: int
    transforms: int


def check_specification() -> SpecificationReport:
    """Build the resolver once so every startup check of the feed table runs."""

    registry = default_registry()
    transforms = default_transforms()
    FeedValueResolver(registry, transforms)
    specs = registry.all()
    return SpecificationReport(
        attributes=len(registry),
        required=len(registry.required_attributes()),
        conditional=sum(1 for spec in specs if spec.requirement is Requirement.CONDITIONAL),
        locked=len(registry.locked_attribute_set()),
        mapped=sum(1 for spec in specs if spec.mapping is not None),
        transforms=len(transforms),
    )


def build_orchestrator(
    *,
    unit_of_work_factory: UnitOfWorkFactory | None = None,
    config: ReprocessingConfig | None = None,
) -> ReprocessingOrchestrator:
    """Wire registry, transforms, resolver and validator around a unit of work factory.

    Without an explicit factory the SQLAlchemy adapter is started from the
    configured database.
    """

    if unit_of_work_factory is None:
        if not is_started():
            startup()
        unit_of_work_factory = SqlAlchemyCatalogUnitOfWork
    effective_config = config or get_reprocessing_config()
    registry = default_registry()
    return ReprocessingOrchestrator(
        unit_of_work_factory,
        FeedValueResolver(registry, default_transforms()),
        FeedValidator(registry),
        batch_size=effective_config.batch_size,
        max_workers=effective_config.max_workers,
    )


def reprocess_product(
    product_id: UUID,
    *,
    unit_of_work_factory: UnitOfWorkFactory | None = None,
) -> bool:
    orchestrator = build_orchestrator(unit_of_work_factory=unit_of_work_factory)
    changed = orchestrator.reprocess(product_id)
    log.info("Reprocessed product %s: changed=%s", product_id, changed)
    return changed


def reprocess_shop(
    shop_id: UUID,
    *,
    unit_of_work_factory: UnitOfWorkFactory | None = None,
) -> BatchResult:
    orchestrator = build_orchestrator(unit_of_work_factory=unit_of_work_factory)
    log.info("Starting shop reprocess: shop=%s", shop_id)
    return orchestrator.reprocess_shop(shop_id)


def count_overrides(
    shop_id: UUID,
    attribute: str,
    *,
    unit_of_work_factory: UnitOfWorkFactory | None = None,
) -> int:
    orchestrator = build_orchestrator(unit_of_work_factory=unit_of_work_factory)
    return orchestrator.count_overrides_for_attribute(shop_id, attribute)


def propagate_mapping(
    shop_id: UUID,
    attribute: str,
    mode: PropagationMode,
    *,
    path: str | None = None,
    update_mapping: bool = False,
    unit_of_work_factory: UnitOfWorkFactory | None = None,
) -> PropagationResult:
    """Propagate the shop's current mapping, or store ``path`` first when ``update_mapping``."""

    orchestrator = build_orchestrator(unit_of_work_factory=unit_of_work_factory)
    log.info(
        "Starting propagation: shop=%s, attribute=%s, mode=%s, update_mapping=%s",
        shop_id,
        attribute,
        mode,
        update_mapping,
    )
    if update_mapping:
        return orchestrator.update_shop_mapping(shop_id, attribute, path, mode)
    return orchestrator.propagate_shop_mapping_change(shop_id, attribute, mode)
