"""
Bulk Index Writing Module.

This module handles the buffered writing of index records to a bulk backend.
It abstracts the batching of records, the scheduling of flushes (capacity
threshold and idle timeout), the coordination of a single in-flight bulk call
and the reporting of per-item failures.
"""

import dataclasses
import threading
from collections import deque
from concurrent.futures import Future
from typing import Any, Callable, Deque, Mapping, Optional, Tuple, Type, Union

from ..comm.protocols import BulkClient, BulkResult
from ..enum import StreamEvent, WriterStatus
from ..errors import ConfigurationError, TransportError, ValidationError, WriterClosedError
from ..logging_config import get_logger
from ..models import FlushEvent, Record, validate_record
from .config import WriterConfig
from .helpers import _aggregate_item_errors, _parse_bulk_response
from .internal.event_emitter import EventHandler, _EventEmitter
from .internal.idle_timer import _IdleTimer
from .internal.pending_flush import _PendingFlush

# Set the hierarchical logger
logger = get_logger(__name__)

AckCallback = Callable[[Optional[BaseException]], None]


class BulkIndexWriter:
    """
    Batching write sink for index records.

    The `BulkIndexWriter` accumulates records in a FIFO queue and forwards them
    to a [`BulkClient`][bulkstream.comm.BulkClient] in slices of at most
    `high_water_mark` records. A flush starts when:

    * **Capacity**: a write makes the queue reach `high_water_mark`. Exactly one
        slice of `high_water_mark` records is submitted per threshold crossing.
    * **Idle timeout**: when `timeout` is configured, a recurring timer flushes
        up to `high_water_mark` queued records, however few they are.
    * **Close**: `close()` drains the queue in consecutive slices.

    At most one bulk call is in flight at any time. Triggers occurring meanwhile
    only queue records; they are re-evaluated once the call settles.

    ### Acknowledgments
    `write()` returns a `Future` completing when the writer has taken
    responsibility for the record. Records landing below the threshold are
    acknowledged immediately; the record that makes the queue reach the
    threshold is acknowledged only when the flush containing it succeeds.

    Warning: Data loss window
        A record acknowledged below the threshold is only held in memory.
        If the process exits before its slice is flushed, the record is lost.
        The same applies to the slice of a failed flush: it is never re-queued
        nor retried.

    ### Errors
    Validation, transport and item errors never raise from `write()`. They are
    emitted on the `error` notification, fail every outstanding acknowledgment
    and terminate the writer.

    Example:
        ```python
        from bulkstream import BulkIndexWriter, StreamEvent

        writer = BulkIndexWriter(client, high_water_mark=100, timeout=1.0)
        writer.on(StreamEvent.FLUSH, lambda ev: print(ev.written_records))
        writer.on(StreamEvent.ERROR, lambda err: print(f"bulk failed: {err}"))

        for doc in documents:
            writer.write({"index": "docs", "type": "doc", "body": doc})

        writer.close().result()
        ```
    """

    def __init__(
        self,
        client: Optional[BulkClient] = None,
        config: Optional[WriterConfig] = None,
        *,
        high_water_mark: Optional[int] = None,
        timeout: Optional[float] = None,
    ):
        """
        Args:
            client: The backend receiving the slices.
            config: Batching limits. Defaults to `WriterConfig()`.
            high_water_mark: Overrides `config.high_water_mark`.
            timeout: Overrides `config.timeout` (seconds).

        Raises:
            ConfigurationError: If `client` is missing or an option is invalid.
        """
        if client is None:
            raise ConfigurationError("client is required")

        config = config or WriterConfig()
        overrides = {
            name: value
            for name, value in (
                ("high_water_mark", high_water_mark),
                ("timeout", timeout),
            )
            if value is not None
        }
        if overrides:
            config = dataclasses.replace(config, **overrides)

        self._client: BulkClient = client
        """The backend receiving the slices."""
        self._config: WriterConfig = config
        """Batching limits."""
        self._lock = threading.RLock()
        """Guards every state transition. Backend answers and timer ticks may come from other threads."""
        self._queue: Deque[Tuple[Record, Optional[Future]]] = deque()
        """Queued records, each with its acknowledgment when not yet completed."""
        self._in_flight: Optional[_PendingFlush] = None
        """The single flush awaiting the backend answer."""
        self._pumping: bool = False
        self._idle_flush_requested: bool = False
        self._written_records: int = 0
        self._status: WriterStatus = WriterStatus.Open
        self._error: Optional[BaseException] = None
        self._finished: Future = Future()
        """Completes once the writer is closed and drained, or fails with the terminal error."""
        self._events = _EventEmitter()

        self._idle_timer: Optional[_IdleTimer] = None
        if config.timeout is not None:
            self._idle_timer = _IdleTimer(config.timeout, self._on_idle_tick)
            self._idle_timer.start()

    # --- Context Manager ---
    def __enter__(self) -> "BulkIndexWriter":
        """Context manager entry."""
        return self

    def __exit__(
        self,
        exc_type: Optional[Type[BaseException]],
        exc_val: Optional[BaseException],
        exc_tb: Optional[Any],
    ) -> None:
        """
        Context manager exit.

        Closes the writer and waits until the queue is drained. A failure while
        draining is re-raised, unless the with-block is already propagating an
        exception, in which case it is only logged.
        """
        try:
            self.close().result()
        except Exception as e:
            if exc_type is None:
                raise
            logger.error(f"Failed to drain BulkIndexWriter on error exit: '{e}'")

    # --- Properties ---
    @property
    def high_water_mark(self) -> int:
        """The capacity threshold, in records."""
        return self._config.high_water_mark

    @property
    def timeout(self) -> Optional[float]:
        """The idle flush interval in seconds, or `None` if disabled."""
        return self._config.timeout

    @property
    def written_records(self) -> int:
        """Number of records confirmed by the backend so far."""
        return self._written_records

    @property
    def queue_length(self) -> int:
        """Number of records waiting to be flushed (the in-flight slice excluded)."""
        with self._lock:
            return len(self._queue)

    @property
    def status(self) -> WriterStatus:
        return self._status

    def is_active(self) -> bool:
        """Returns `True` while the writer accepts new records."""
        return self._status is WriterStatus.Open

    # --- Notifications ---
    def on(self, event: Union[StreamEvent, str], handler: EventHandler) -> None:
        """
        Registers a handler for a notification.

        Handlers run synchronously on the thread that produced the event: the
        producer thread for synchronous backends, the backend or timer thread
        otherwise.

        Args:
            event: One of `flush`, `error`, `finish`, `close`.
            handler: Called with the event payload (`FlushEvent` for `flush`,
                the exception for `error`, nothing for `finish`/`close`).
        """
        self._events.on(event, handler)

    def off(self, event: Union[StreamEvent, str], handler: EventHandler) -> None:
        """Unregisters a handler previously passed to `on()`."""
        self._events.off(event, handler)

    # --- Writing Logic ---
    def write(
        self,
        record: Union[Record, Mapping[str, Any]],
        callback: Optional[AckCallback] = None,
    ) -> "Future[None]":
        """
        Appends a record to the queue, flushing a slice if the threshold is reached.

        Args:
            record: A `Record`, or a mapping with `index`, `type`, `body` and
                optionally `id`.
            callback: Called with `None` once the record is acknowledged, or
                with the exception that prevented it.

        Returns:
            A future completing on acknowledgment. It fails with the
            `ValidationError` of a malformed record, the error of the flush
            containing the record, or `WriterClosedError` after `close()`.
        """
        ack: Future = Future()
        if callback is not None:
            ack.add_done_callback(lambda f: callback(f.exception()))

        with self._lock:
            if self._status is not WriterStatus.Open:
                logger.warning(
                    f"Record written to a {self._status.value} BulkIndexWriter was discarded"
                )
                ack.set_exception(self._closed_error())
                return ack

            try:
                valid = validate_record(record)
            except ValidationError as e:
                ack.set_exception(e)
                self._fail(e)
                return ack

            self._queue.append((valid, ack))
            if len(self._queue) < self.high_water_mark:
                self._queue[-1] = (valid, None)
                ack.set_result(None)

            self._pump()

        return ack

    def close(
        self,
        record: Optional[Union[Record, Mapping[str, Any]]] = None,
        callback: Optional[AckCallback] = None,
    ) -> "Future[None]":
        """
        Signals that no more records will be written, and drains the queue.

        The idle timer is stopped, then the queued records are flushed in
        consecutive slices. Once the queue is empty and no flush is outstanding,
        `finish` and `close` are emitted. Closing an empty writer finishes
        immediately. Calling `close()` again returns the same future.

        Args:
            record: An optional final record, written before closing.
            callback: Called with `None` once the writer finished, or with the
                terminal error.

        Returns:
            A future completing when the writer finished, or failing with the
            terminal error.
        """
        with self._lock:
            if callback is not None:
                self._finished.add_done_callback(lambda f: callback(f.exception()))

            if record is not None:
                self.write(record)

            if self._status is WriterStatus.Open:
                logger.debug(f"Closing BulkIndexWriter with {len(self._queue)} queued records")
                self._status = WriterStatus.Closing
                self._stop_idle_timer()
                self._pump()

        return self._finished

    def wait(self, timeout: Optional[float] = None) -> None:
        """
        Blocks until the writer finished.

        Raises:
            The terminal error of the writer, or `TimeoutError` (from
            `concurrent.futures`) if `timeout` elapses first.
        """
        self._finished.result(timeout)

    # --- Flush scheduling ---
    def _pump(self) -> None:
        """
        Starts flushes while a trigger holds and nothing is in flight.

        A synchronous backend settles each flush inside `_start_flush()`; the
        loop then picks the next slice instead of recursing.
        """
        if self._pumping:
            return
        self._pumping = True
        try:
            while self._in_flight is None and self._status in (
                WriterStatus.Open,
                WriterStatus.Closing,
            ):
                size = self._next_slice_size()
                if size == 0:
                    break
                self._start_flush(size)

            if (
                self._in_flight is None
                and self._status is WriterStatus.Closing
                and not self._queue
            ):
                self._finish()
        finally:
            self._pumping = False

    def _next_slice_size(self) -> int:
        queued = len(self._queue)
        if queued >= self.high_water_mark:
            return self.high_water_mark
        if queued and self._status is WriterStatus.Closing:
            return queued
        if queued and self._idle_flush_requested:
            self._idle_flush_requested = False
            return queued
        return 0

    def _start_flush(self, size: int) -> None:
        entries = [self._queue.popleft() for _ in range(size)]
        pending = _PendingFlush(
            records=tuple(record for record, _ in entries),
            waiters=[ack for _, ack in entries if ack is not None],
        )
        self._in_flight = pending
        logger.debug(f"Flushing {len(pending)} records ({len(self._queue)} still queued)")

        try:
            result = self._client.bulk(pending.records)
        except Exception as e:
            self._on_flush_settled(pending, error=e)
            return

        if isinstance(result, Future):
            result.add_done_callback(lambda f: self._on_bulk_done(pending, f))
        else:
            self._on_flush_settled(pending, response=result)

    def _on_bulk_done(self, pending: _PendingFlush, future: "Future[BulkResult]") -> None:
        if future.cancelled():
            self._on_flush_settled(pending, error=TransportError("Bulk call was cancelled"))
            return
        error = future.exception()
        if error is not None:
            self._on_flush_settled(pending, error=error)
        else:
            self._on_flush_settled(pending, response=future.result())

    def _on_flush_settled(
        self,
        pending: _PendingFlush,
        response: Optional[BulkResult] = None,
        error: Optional[BaseException] = None,
    ) -> None:
        with self._lock:
            if self._in_flight is pending:
                self._in_flight = None

            if error is None:
                try:
                    error = _aggregate_item_errors(_parse_bulk_response(response))
                except TransportError as e:
                    error = e

            if error is not None:
                logger.error(f"Flush of {len(pending)} records failed: '{error}'")
                pending.reject(error)
                self._fail(error)
                return

            self._written_records += len(pending)
            pending.resolve()
            self._release_acknowledgments()
            logger.debug(
                f"Flushed {len(pending)} records ({self._written_records} written so far)"
            )
            self._events.emit(
                StreamEvent.FLUSH,
                FlushEvent(records=len(pending), written_records=self._written_records),
            )
            self._pump()

    def _release_acknowledgments(self) -> None:
        """Acknowledges the held records that moved below the threshold once a slice left the queue."""
        for position in range(min(len(self._queue), self.high_water_mark - 1)):
            record, ack = self._queue[position]
            if ack is not None:
                self._queue[position] = (record, None)
                if not ack.done():
                    ack.set_result(None)

    def _on_idle_tick(self) -> None:
        with self._lock:
            if (
                self._status is not WriterStatus.Open
                or self._in_flight is not None
                or not self._queue
            ):
                return
            logger.debug(f"Idle timeout elapsed with {len(self._queue)} queued records")
            self._idle_flush_requested = True
            self._pump()

    # --- Lifecycle ---
    def _finish(self) -> None:
        self._status = WriterStatus.Finished
        self._stop_idle_timer()
        logger.info(
            f"BulkIndexWriter finished: {self._written_records} records written"
        )
        self._events.emit(StreamEvent.FINISH)
        self._events.emit(StreamEvent.CLOSE)
        self._finished.set_result(None)

    def _fail(self, error: BaseException) -> None:
        """Terminates the writer: every outstanding acknowledgment fails with `error`."""
        if self._status in (WriterStatus.Error, WriterStatus.Finished):
            logger.error(f"Error after BulkIndexWriter termination: '{error}'")
            return

        self._status = WriterStatus.Error
        self._error = error
        self._stop_idle_timer()

        if self._queue:
            logger.warning(f"Discarding {len(self._queue)} queued records after error")
        for _, ack in self._queue:
            if ack is not None and not ack.done():
                ack.set_exception(error)
        self._queue.clear()

        if self._events.has_handlers(StreamEvent.ERROR):
            self._events.emit(StreamEvent.ERROR, error)
        else:
            logger.error(f"Unhandled BulkIndexWriter error: '{error}'")

        if not self._finished.done():
            self._finished.set_exception(error)

    def _stop_idle_timer(self) -> None:
        if self._idle_timer is not None:
            self._idle_timer.cancel()

    def _closed_error(self) -> WriterClosedError:
        if self._status is WriterStatus.Error:
            err = WriterClosedError(f"write after error: '{self._error}'")
            err.__cause__ = self._error
            return err
        return WriterClosedError("write after close")
