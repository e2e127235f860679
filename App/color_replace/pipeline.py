"""Background processing of images with replacement rules.

AIDEV-NOTE: Every dispatch gets a fresh generation number and a private
copy of the pristine source buffer, so rule edits never accumulate and a
slow, superseded worker can only produce a result that is thrown away.
Worker signals are delivered to the pipeline's own thread (queued), so all
bookkeeping below runs on the caller's thread and needs no locking.
"""

import logging
import time
from typing import Iterable

from PyQt6.QtCore import QCoreApplication, QObject, QThread, pyqtSignal

from models import (
    ImageState,
    ProcessingResult,
    ProcessingTask,
    RasterBuffer,
    ReplacementRule,
)

from .frame import transform

logger = logging.getLogger(__name__)

BUSY_STATES = (ImageState.DISPATCHED, ImageState.RUNNING)


def run_task(task: ProcessingTask) -> ProcessingResult:
    """Transform one task's buffer, turning any error into a failed result."""
    try:
        buffer = transform(task.buffer, task.rules)
    except Exception as e:
        logger.warning("Processing failed for %s: %s", task.image_id, e)
        return ProcessingResult(task.image_id, task.generation, error=str(e))

    return ProcessingResult(task.image_id, task.generation, buffer=buffer)


class ProcessingThread(QThread):
    """Background thread for one image to avoid blocking the caller."""

    started_processing = pyqtSignal(object)  # ProcessingTask
    result_ready = pyqtSignal(object)  # ProcessingResult
    done = pyqtSignal(object)  # this thread, emitted last

    def __init__(self, task: ProcessingTask):
        super().__init__()
        self.task = task

    def run(self):
        """Execute the task unless it was superseded before or during work."""
        try:
            if self.isInterruptionRequested():
                return

            self.started_processing.emit(self.task)
            result = run_task(self.task)

            if not self.isInterruptionRequested():
                self.result_ready.emit(result)
        finally:
            self.done.emit(self)


class ProcessingPipeline(QObject):
    """Keeps one up-to-date processed result per image.

    Any change to the rule set or the image set re-dispatches the affected
    images. Results for images that were removed or re-dispatched since are
    discarded.
    """

    result_ready = pyqtSignal(object)  # ProcessingResult
    state_changed = pyqtSignal(str, object)  # image id, ImageState
    idle = pyqtSignal()

    def __init__(self, rules: Iterable[ReplacementRule] = (), parent: QObject | None = None):
        super().__init__(parent)
        self._rules: "tuple[ReplacementRule, ...]" = tuple(rules)

        # Insertion ordered: this is the order results are exported in
        self._sources: "dict[str, RasterBuffer]" = {}
        self._states: "dict[str, ImageState]" = {}
        self._results: "dict[str, ProcessingResult]" = {}
        self._generations: "dict[str, int]" = {}
        self._next_generation = 0

        # Latest worker per image, plus every worker still alive
        self._current_threads: "dict[str, ProcessingThread]" = {}
        self._workers: "set[ProcessingThread]" = set()

    # -------------------------------------------------------------
    # Inputs
    # -------------------------------------------------------------

    @property
    def rules(self) -> "tuple[ReplacementRule, ...]":
        return self._rules

    def set_rules(self, rules: Iterable[ReplacementRule]):
        """Replace the rule set and reprocess every image."""
        self._rules = tuple(rules)
        logger.debug("Rule set changed (%d rules), reprocessing", len(self._rules))
        self.dispatch_all()

    def add_image(self, image_id: str, buffer: RasterBuffer, dispatch: bool = True):
        """Add or replace an image.

        The buffer is treated as the pristine source and is never modified;
        each dispatch works on a copy. Work in flight for a replaced image
        is discarded even if the new one is not dispatched yet.
        """
        self._cancel(image_id)
        self._generations.pop(image_id, None)
        self._sources[image_id] = buffer
        self._results.pop(image_id, None)
        self._set_state(image_id, ImageState.IDLE)
        if dispatch:
            self.dispatch(image_id)

    def remove_image(self, image_id: str):
        """Forget an image and ignore any work still in flight for it."""
        if image_id not in self._sources:
            return

        self._cancel(image_id)
        del self._sources[image_id]
        self._states.pop(image_id, None)
        self._results.pop(image_id, None)
        self._generations.pop(image_id, None)
        logger.debug("Removed image %s", image_id)
        self._check_idle()

    def clear(self):
        """Remove every image."""
        for image_id in list(self._sources):
            self.remove_image(image_id)

    # -------------------------------------------------------------
    # Dispatch
    # -------------------------------------------------------------

    def dispatch(self, image_id: str):
        """Start processing ``image_id`` with the current rules.

        Returns immediately; the outcome arrives through ``result_ready``.

        Raises:
            KeyError: If the image was never added
        """
        source = self._sources[image_id]
        self._cancel(image_id)

        self._next_generation += 1
        generation = self._next_generation
        self._generations[image_id] = generation

        task = ProcessingTask(
            image_id=image_id,
            buffer=source.copy(),
            rules=self._rules,
            generation=generation,
        )

        thread = ProcessingThread(task)
        thread.started_processing.connect(self._on_started)
        thread.result_ready.connect(self._on_result)
        thread.done.connect(self._on_thread_done)

        self._current_threads[image_id] = thread
        self._workers.add(thread)
        self._set_state(image_id, ImageState.DISPATCHED)

        logger.debug("Dispatched %s (generation %d)", image_id, generation)
        thread.start()

    def dispatch_all(self):
        for image_id in list(self._sources):
            self.dispatch(image_id)

    def _cancel(self, image_id: str):
        thread = self._current_threads.pop(image_id, None)
        if thread is not None:
            thread.requestInterruption()

    # -------------------------------------------------------------
    # Worker callbacks (run on the pipeline's thread)
    # -------------------------------------------------------------

    def _is_current(self, image_id: str, generation: int) -> bool:
        return (
            image_id in self._sources
            and self._generations.get(image_id) == generation
        )

    def _on_started(self, task: ProcessingTask):
        if self._is_current(task.image_id, task.generation):
            self._set_state(task.image_id, ImageState.RUNNING)

    def _on_result(self, result: ProcessingResult):
        if not self._is_current(result.image_id, result.generation):
            logger.debug(
                "Discarding stale result for %s (generation %d)",
                result.image_id,
                result.generation,
            )
            return

        self._current_threads.pop(result.image_id, None)
        self._results[result.image_id] = result
        if result.succeeded:
            self._set_state(result.image_id, ImageState.COMPLETED)
        else:
            self._set_state(result.image_id, ImageState.FAILED)

        self.result_ready.emit(result)
        self._check_idle()

    def _on_thread_done(self, thread: ProcessingThread):
        # The thread is on its last line of run(); join it before dropping it
        thread.wait()
        self._workers.discard(thread)
        if self._current_threads.get(thread.task.image_id) is thread:
            # Interrupted without a replacement, nothing will report back
            del self._current_threads[thread.task.image_id]

    def _set_state(self, image_id: str, state: ImageState):
        self._states[image_id] = state
        self.state_changed.emit(image_id, state)

    def _check_idle(self):
        if not self.is_busy():
            self.idle.emit()

    # -------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------

    def image_ids(self) -> "list[str]":
        return list(self._sources)

    def state(self, image_id: str) -> ImageState:
        return self._states.get(image_id, ImageState.IDLE)

    def result(self, image_id: str) -> ProcessingResult | None:
        """Latest accepted result for an image, if any."""
        return self._results.get(image_id)

    def results(self) -> "list[ProcessingResult]":
        """Accepted results in image insertion order."""
        return [self._results[i] for i in self._sources if i in self._results]

    def is_busy(self) -> bool:
        return any(state in BUSY_STATES for state in self._states.values())

    def wait(self, timeout: float | None = None) -> bool:
        """Block until every current dispatch has reported back.

        Joins the worker threads and then delivers their queued signals, so
        it needs a QCoreApplication but no running event loop.

        Args:
            timeout: Seconds to wait at most, or None to wait indefinitely

        Returns:
            True if the pipeline is idle
        """
        deadline = None if timeout is None else time.monotonic() + timeout

        while True:
            for thread in list(self._workers):
                if deadline is None:
                    thread.wait()
                else:
                    remaining = max(0.0, deadline - time.monotonic())
                    thread.wait(int(remaining * 1000))

            QCoreApplication.sendPostedEvents()
            QCoreApplication.processEvents()

            if not self.is_busy():
                return True
            if not self._workers:
                logger.warning("Pipeline busy with no workers alive")
                return False
            if deadline is not None and time.monotonic() >= deadline:
                return False
