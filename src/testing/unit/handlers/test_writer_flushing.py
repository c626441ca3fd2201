import pytest

from bulkstream import BulkIndexWriter, FlushEvent, StreamEvent
from bulkstream.enum import WriterStatus
from bulkstream.errors import AggregateItemError, ValidationError, WriterClosedError


@pytest.fixture
def writer(client):
    return BulkIndexWriter(client, high_water_mark=6)


def test_write_records_to_backend(writer, client, record_fixture):
    done = []
    writer.close(record_fixture, done.append)

    client.bulk.assert_called_once()
    assert done == [None]


def test_full_slice_then_close_submits_once(writer, client, record_fixture):
    """Closing after an exact threshold flush has nothing left to submit."""
    errors = []
    finished = []
    writer.on(StreamEvent.ERROR, errors.append)
    writer.on(StreamEvent.FINISH, lambda: finished.append(client.bulk.call_count))

    for _ in range(6):
        writer.write(record_fixture)
    writer.close()

    assert finished == [1]
    assert len(client.bulk.call_args[0][0]) == 6
    assert errors == []


def test_finish_then_close_events(writer, record_fixture):
    events = []
    writer.on("finish", lambda: events.append("finish"))
    writer.on("close", lambda: events.append("close"))

    writer.write(record_fixture)
    assert events == []
    writer.close()
    assert events == ["finish", "close"]


def test_empty_writer_finishes_without_submission(writer, client):
    finished = []
    writer.on(StreamEvent.FINISH, lambda: finished.append(True))

    future = writer.close()

    assert future.done()
    assert finished == [True]
    assert not client.bulk.called


def test_flush_event_payload(client, record_fixture):
    writer = BulkIndexWriter(client, high_water_mark=4)
    flushes = []
    writer.on(StreamEvent.FLUSH, flushes.append)

    for _ in range(10):
        writer.write(record_fixture)
    writer.close()

    assert flushes == [
        FlushEvent(records=4, written_records=4),
        FlushEvent(records=4, written_records=8),
        FlushEvent(records=2, written_records=10),
    ]
    assert writer.written_records == 10


def test_transport_error(writer, client, record_fixture):
    """Backend exceptions are surfaced as they are."""
    failure = Exception("Fail")
    client.bulk.side_effect = failure
    errors = []
    writer.on(StreamEvent.ERROR, errors.append)

    future = writer.close(record_fixture)

    assert errors == [failure]
    assert str(errors[0]) == "Fail"
    with pytest.raises(Exception, match="Fail"):
        future.result(timeout=1)
    assert writer.status is WriterStatus.Error


def test_bulk_item_errors(writer, client, record_fixture, error_response):
    client.bulk.return_value = error_response
    errors = []
    writer.on(StreamEvent.ERROR, errors.append)

    writer.write(record_fixture)
    writer.close(record_fixture)

    assert len(errors) == 1
    assert isinstance(errors[0], AggregateItemError)
    assert str(errors[0]) == "InternalServerError,Forbidden"
    assert writer.written_records == 0


def test_failed_slice_fails_its_acknowledgment(writer, client, record_fixture, error_response):
    client.bulk.return_value = error_response
    acks = [writer.write(record_fixture) for _ in range(6)]

    # Records acknowledged below the threshold stay acknowledged.
    assert all(ack.exception() is None for ack in acks[:5])
    with pytest.raises(AggregateItemError):
        acks[5].result(timeout=1)


@pytest.mark.parametrize("field_name", ["index", "type", "body"])
def test_missing_field_errors(writer, client, record_fixture, field_name):
    errors = []
    writer.on(StreamEvent.ERROR, errors.append)
    del record_fixture[field_name]

    future = writer.close(record_fixture)

    assert len(errors) == 1
    assert isinstance(errors[0], ValidationError)
    assert str(errors[0]) == f"{field_name} is required"
    assert not client.bulk.called
    with pytest.raises(ValidationError):
        future.result(timeout=1)


def test_invalid_record_is_not_queued(writer, client, record_fixture):
    writer.on(StreamEvent.ERROR, lambda err: None)
    writer.write(record_fixture)
    ack = writer.write({"index": "records", "type": "record"})

    with pytest.raises(ValidationError, match="body is required"):
        ack.result(timeout=1)
    assert writer.queue_length == 0
    assert not client.bulk.called


def test_close_with_unsupported_record(writer, client, record_fixture):
    errors = []
    writer.on(StreamEvent.ERROR, errors.append)
    writer.write(record_fixture)

    future = writer.close(42)

    assert isinstance(errors[0], ValidationError)
    assert errors[0].field_name == "record"
    assert writer.status is WriterStatus.Error
    with pytest.raises(ValidationError, match="got 'int'"):
        future.result(timeout=1)
    assert not client.bulk.called


def test_writer_is_terminated_after_error(writer, client, record_fixture):
    client.bulk.side_effect = Exception("Fail")
    writer.on(StreamEvent.ERROR, lambda err: None)
    for _ in range(6):
        writer.write(record_fixture)

    assert not writer.is_active()
    ack = writer.write(record_fixture)
    with pytest.raises(WriterClosedError, match="write after error"):
        ack.result(timeout=1)
    client.bulk.assert_called_once()


def test_unhandled_error_is_logged(writer, client, record_fixture, caplog):
    client.bulk.side_effect = Exception("Fail")
    with caplog.at_level("ERROR", logger="bulkstream"):
        writer.close(record_fixture)
    assert "Fail" in caplog.text


def test_failing_handler_does_not_break_writer(writer, client, record_fixture):
    def _broken(event):
        raise RuntimeError("handler bug")

    flushes = []
    writer.on(StreamEvent.FLUSH, _broken)
    writer.on(StreamEvent.FLUSH, flushes.append)

    for _ in range(12):
        writer.write(record_fixture)

    assert client.bulk.call_count == 2
    assert len(flushes) == 2


def test_off_unregisters_handler(writer, record_fixture):
    flushes = []
    writer.on(StreamEvent.FLUSH, flushes.append)
    writer.off(StreamEvent.FLUSH, flushes.append)
    writer.close(record_fixture)
    assert flushes == []


def test_context_manager_raises_drain_error(client, record_fixture):
    client.bulk.side_effect = Exception("Fail")
    with pytest.raises(Exception, match="Fail"):
        with BulkIndexWriter(client) as writer:
            writer.on(StreamEvent.ERROR, lambda err: None)
            writer.write(record_fixture)
