"""Keep cached resolved values and validation results consistent with their inputs.

Every write path (override edit, shop mapping edit, bulk propagation) funnels
into one per-product sequence: lock, load, mutate, resolve, validate, store
both caches, commit. Products are serialized by a per-product lock so two
concurrent edits of the same product cannot lose each other's override.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable, Iterator, Sequence
from concurrent.futures import ThreadPoolExecutor, as_completed
from contextlib import contextmanager
from dataclasses import dataclass, field
from functools import partial
from datetime import UTC, datetime
from typing import TYPE_CHECKING
from weakref import WeakValueDictionary

from feedsync.domain.errors import (
    ProductNotFoundError,
    ShopNotFoundError,
    SourceRecordMissingError,
)
from feedsync.domain.model import PropagationMode, StaticOverride
from feedsync.domain.overrides import (
    check_override_allowed,
    check_shop_mapping_allowed,
    require_valid_static_value,
)
from feedsync.domain.resolution import SpecialFlags
from feedsync.domain.specification import ENABLE_CHECKOUT

if TYPE_CHECKING:
    from uuid import UUID

    from feedsync.domain.model import Product, ProductOverride, Shop
    from feedsync.domain.ports import CatalogRepositories, CatalogUnitOfWork
    from feedsync.domain.resolution import FeedValueResolver
    from feedsync.domain.validation import FeedValidator

type UnitOfWorkFactory = Callable[[], CatalogUnitOfWork]
type Mutation = Callable[[Product], bool]
type ProductTask = Callable[[UUID], bool]

log = logging.getLogger(__name__)

DEFAULT_BATCH_SIZE = 50
DEFAULT_MAX_WORKERS = 4


def _utcnow() -> datetime:
    return datetime.now(UTC)


@dataclass(slots=True)
class BatchResult:
    """Per-product tally of a bulk reprocess; failures never abort the run."""

    succeeded: list[UUID] = field(default_factory=list["UUID"])
    failed: dict[UUID, str] = field(default_factory=dict["UUID", str])
    stopped: bool = False

    @property
    def processed(self) -> int:
        return len(self.succeeded) + len(self.failed)


@dataclass(slots=True)
class PropagationResult(BatchResult):
    shop_id: UUID | None = None
    attribute: str = ""
    mode: PropagationMode = PropagationMode.PRESERVE_OVERRIDES
    overrides_removed: int = 0


class ProductLocks:
    """One lock per product id, dropped once nobody holds a reference."""

    def __init__(self) -> None:
        self._guard = threading.Lock()
        self._locks: WeakValueDictionary[UUID, threading.Lock] = WeakValueDictionary()

    @contextmanager
    def hold(self, product_id: UUID) -> Iterator[None]:
        with self._guard:
            lock = self._locks.get(product_id)
            if lock is None:
                lock = threading.Lock()
                self._locks[product_id] = lock
        with lock:
            yield


class ReprocessingOrchestrator:
    def __init__(
        self,
        unit_of_work_factory: UnitOfWorkFactory,
        resolver: FeedValueResolver,
        validator: FeedValidator,
        *,
        batch_size: int = DEFAULT_BATCH_SIZE,
        max_workers: int = DEFAULT_MAX_WORKERS,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        if batch_size < 1:
            raise ValueError("batch_size must be at least 1")
        if max_workers < 1:
            raise ValueError("max_workers must be at least 1")
        self._unit_of_work_factory = unit_of_work_factory
        self._resolver = resolver
        self._validator = validator
        self._batch_size = batch_size
        self._max_workers = max_workers
        self._clock = clock
        self._locks = ProductLocks()

    # single product --------------------------------------------------------

    def reprocess(self, product_id: UUID) -> bool:
        """Recompute and store one product's caches; return whether they changed."""

        return self._update_product(product_id)

    def set_product_override(
        self,
        product_id: UUID,
        attribute: str,
        override: ProductOverride,
    ) -> bool:
        spec = self._resolver.registry.require(attribute)
        check_override_allowed(spec, override)
        if isinstance(override, StaticOverride):
            require_valid_static_value(spec, override.value)

        def mutate(product: Product) -> bool:
            if product.override_for(attribute) == override:
                return False
            product.set_override(attribute, override)
            return True

        return self._update_product(product_id, mutate)

    def clear_product_override(self, product_id: UUID, attribute: str) -> bool:
        self._resolver.registry.require(attribute)
        return self._update_product(
            product_id, lambda product: product.remove_override(attribute)
        )

    # shop level ------------------------------------------------------------

    def update_shop_mapping(
        self,
        shop_id: UUID,
        attribute: str,
        path: str | None,
        mode: PropagationMode = PropagationMode.PRESERVE_OVERRIDES,
    ) -> PropagationResult:
        """Store (``path``) or remove (``None``) a shop mapping, then propagate it."""

        spec = self._resolver.registry.require(attribute)
        check_shop_mapping_allowed(spec, path)
        with self._unit_of_work_factory() as uow:
            shop = self._require_shop(uow.repositories, shop_id)
            shop.set_mapping(attribute, path)
            uow.commit()
        log.info("Shop %s mapping for %s set to %r", shop_id, attribute, path)
        return self.propagate_shop_mapping_change(shop_id, attribute, mode)

    def propagate_shop_mapping_change(
        self,
        shop_id: UUID,
        attribute: str,
        mode: PropagationMode,
        *,
        should_stop: Callable[[], bool] | None = None,
    ) -> PropagationResult:
        self._resolver.registry.require(attribute)
        with self._unit_of_work_factory() as uow:
            repositories = uow.repositories
            self._require_shop(repositories, shop_id)
            product_ids = repositories.products.ids_for_shop(shop_id)
            if mode is PropagationMode.PRESERVE_OVERRIDES:
                overridden = set(repositories.products.ids_with_override(shop_id, attribute))
                product_ids = [pid for pid in product_ids if pid not in overridden]

        result = PropagationResult(shop_id=shop_id, attribute=attribute, mode=mode)
        removed: list[UUID] = []

        def remove_override(product: Product) -> bool:
            if product.remove_override(attribute):
                removed.append(product.id)
                return True
            return False

        task: ProductTask = self._update_product
        if mode is PropagationMode.APPLY_ALL:
            # the override goes even when the product cannot be recomputed
            task = partial(self._update_product, mutate=remove_override, keep_without_source=True)
        self._run_batches(product_ids, task, result, should_stop)
        result.overrides_removed = len(removed)
        log.info(
            "Propagated %s for shop %s (%s): processed=%s, failed=%s, overrides_removed=%s",
            attribute,
            shop_id,
            mode,
            result.processed,
            len(result.failed),
            result.overrides_removed,
        )
        return result

    def count_overrides_for_attribute(self, shop_id: UUID, attribute: str) -> int:
        """How many products of the shop carry any override for ``attribute``."""

        with self._unit_of_work_factory() as uow:
            return uow.repositories.products.count_overrides(shop_id, attribute)

    def reprocess_shop(
        self,
        shop_id: UUID,
        *,
        should_stop: Callable[[], bool] | None = None,
    ) -> BatchResult:
        with self._unit_of_work_factory() as uow:
            self._require_shop(uow.repositories, shop_id)
            product_ids = uow.repositories.products.ids_for_shop(shop_id)
        result = BatchResult()
        self._run_batches(product_ids, self._update_product, result, should_stop)
        log.info(
            "Reprocessed shop %s: processed=%s, failed=%s",
            shop_id,
            result.processed,
            len(result.failed),
        )
        return result

    # internals -------------------------------------------------------------

    def _update_product(
        self,
        product_id: UUID,
        mutate: Mutation | None = None,
        *,
        keep_without_source: bool = False,
    ) -> bool:
        with self._locks.hold(product_id), self._unit_of_work_factory() as uow:
            repositories = uow.repositories
            product = repositories.products.get_for_update(product_id)
            if product is None:
                raise ProductNotFoundError(product_id)
            if product.source_record is None:
                if keep_without_source and mutate is not None and mutate(product):
                    uow.commit()
                raise SourceRecordMissingError(product_id)
            shop = self._require_shop(repositories, product.shop_id)

            mutated = mutate(product) if mutate is not None else False
            recomputed = self._recompute(product, shop)
            if mutated or recomputed:
                uow.commit()
            return mutated or recomputed

    def _recompute(self, product: Product, shop: Shop) -> bool:
        resolved = self._resolver.resolve_all(
            product.source_record or {},
            shop.context(),
            shop.field_mappings,
            product.overrides,
            SpecialFlags(enable_search=product.enable_search),
            product_ref=product.id,
        )
        validation = self._validator.validate(
            resolved, checkout_enabled=resolved.get(ENABLE_CHECKOUT) == "true"
        )
        return product.apply_feed_state(resolved, validation, now=self._clock())

    def _run_batches(
        self,
        product_ids: Sequence[UUID],
        task: ProductTask,
        result: BatchResult,
        should_stop: Callable[[], bool] | None,
    ) -> None:
        for start in range(0, len(product_ids), self._batch_size):
            if should_stop is not None and should_stop():
                result.stopped = True
                log.info("Stopping after %s of %s products", result.processed, len(product_ids))
                return
            batch = product_ids[start : start + self._batch_size]
            for product_id, error in self._run_batch(batch, task):
                if error is None:
                    result.succeeded.append(product_id)
                else:
                    result.failed[product_id] = str(error)

    def _run_batch(
        self,
        batch: Sequence[UUID],
        task: ProductTask,
    ) -> list[tuple[UUID, Exception | None]]:
        if self._max_workers == 1 or len(batch) == 1:
            return [self._attempt(task, product_id) for product_id in batch]
        workers = min(self._max_workers, len(batch))
        with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="reprocess") as pool:
            futures = [pool.submit(self._attempt, task, product_id) for product_id in batch]
            return [future.result() for future in as_completed(futures)]

    @staticmethod
    def _attempt(task: ProductTask, product_id: UUID) -> tuple[UUID, Exception | None]:
        try:
            task(product_id)
        except Exception as exc:  # noqa: BLE001
            log.warning("Reprocessing product %s failed: %s", product_id, exc)
            return product_id, exc
        return product_id, None

    @staticmethod
    def _require_shop(repositories: CatalogRepositories, shop_id: UUID) -> Shop:
        shop = repositories.shops.get(shop_id)
        if shop is None:
            raise ShopNotFoundError(shop_id)
        return shop
