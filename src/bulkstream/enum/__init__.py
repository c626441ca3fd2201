from .stream_event import StreamEvent as StreamEvent
from .writer_status import WriterStatus as WriterStatus
