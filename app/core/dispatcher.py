"""
Hand-off of decoded webhook events to background processing.

The webhook endpoint acknowledges as soon as a dispatcher accepts the batch.
Dispatchers never block the request: when the in-process pool is full the
batch is refused with DispatcherSaturated (503) so the platform redelivers.
"""

from __future__ import annotations

import logging
import threading
from abc import ABC, abstractmethod
from concurrent.futures import ThreadPoolExecutor
from typing import Optional, Sequence

from app.config import Settings, get_settings
from app.exceptions import ConfigurationError, DispatcherSaturated
from app.schemas.omnichannel import InboundEvent, StatusEvent
from app.services.inbound_processor import InboundProcessor

logger = logging.getLogger(__name__)


class EventDispatcher(ABC):
    @abstractmethod
    def dispatch(
        self,
        events: Sequence[InboundEvent],
        statuses: Sequence[StatusEvent] = (),
    ) -> None:
        """Accept a batch for processing or raise DispatcherSaturated."""
        ...

    def shutdown(self, wait: bool = True) -> None:
        pass


class InlineDispatcher(EventDispatcher):
    """Processes in the calling thread. Used by tests and single-process tools."""

    def __init__(self, processor: InboundProcessor) -> None:
        self.processor = processor

    def dispatch(self, events, statuses=()) -> None:
        self.processor.process(events, statuses)


class ThreadPoolDispatcher(EventDispatcher):
    """Bounded in-process worker pool."""

    def __init__(
        self,
        processor: InboundProcessor,
        max_workers: int = 4,
        max_pending: int = 100,
    ) -> None:
        self.processor = processor
        self._executor = ThreadPoolExecutor(
            max_workers=max_workers, thread_name_prefix="webhook"
        )
        self._slots = threading.BoundedSemaphore(max_pending)

    def dispatch(self, events, statuses=()) -> None:
        if not self._slots.acquire(blocking=False):
            raise DispatcherSaturated("Webhook processing queue is full")
        try:
            future = self._executor.submit(
                self.processor.process, list(events), list(statuses)
            )
        except RuntimeError as e:
            self._slots.release()
            raise DispatcherSaturated(f"Webhook processing unavailable: {e}") from e
        future.add_done_callback(self._release)

    def _release(self, future) -> None:
        self._slots.release()
        exc = future.exception()
        if exc is not None:
            logger.error("Webhook batch failed: %s", exc, exc_info=exc)

    def shutdown(self, wait: bool = True) -> None:
        self._executor.shutdown(wait=wait)


class CeleryDispatcher(EventDispatcher):
    """Enqueue batches onto the Celery broker."""

    def dispatch(self, events, statuses=()) -> None:
        from app.tasks.process_inbound_events_task import process_inbound_events_task

        try:
            process_inbound_events_task.delay(
                [e.model_dump(mode="json") for e in events],
                [s.model_dump(mode="json") for s in statuses],
            )
        except Exception as e:
            logger.error("Failed to enqueue webhook batch: %s", e)
            raise DispatcherSaturated("Webhook processing queue unavailable") from e


def build_dispatcher(
    processor: InboundProcessor, settings: Optional[Settings] = None
) -> EventDispatcher:
    """Dispatcher selected by WEBHOOK_DISPATCHER (thread_pool, celery or inline)."""
    settings = settings or get_settings()
    kind = settings.webhook_dispatcher.lower()
    if kind == "thread_pool":
        return ThreadPoolDispatcher(
            processor,
            max_workers=settings.webhook_workers,
            max_pending=settings.webhook_max_pending,
        )
    if kind == "celery":
        return CeleryDispatcher()
    if kind == "inline":
        return InlineDispatcher(processor)
    raise ConfigurationError(f"Unknown WEBHOOK_DISPATCHER: {settings.webhook_dispatcher}")
