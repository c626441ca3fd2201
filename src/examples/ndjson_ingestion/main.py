"""
bulkstream: NDJSON to Elasticsearch ingestion example.

This script demonstrates a complete workflow:
1. Reading index records from a newline-delimited JSON file, one record per line
    (`{"index": ..., "type": ..., "id": ..., "body": {...}}`).
2. Streaming them into Elasticsearch through a `BulkIndexWriter`, with an idle
    timeout so a slow producer still sees its records indexed.
3. Reporting flush progress and the final outcome.
"""

import json
import logging as log
import sys
from pathlib import Path

from elasticsearch import Elasticsearch
from rich.console import Console

from bulkstream import (
    BulkIndexWriter,
    ElasticsearchBulkClient,
    FlushEvent,
    StreamEvent,
    setup_sdk_logging,
)

# Configuration Constants
ELASTICSEARCH_URL = "http://localhost:9200"
HIGH_WATER_MARK = 500
IDLE_TIMEOUT_S = 2.0

console = Console()


def run_ingestion(ndjson_file: Path) -> int:
    """Streams every record of `ndjson_file` into Elasticsearch. Returns the exit code."""
    es = Elasticsearch(ELASTICSEARCH_URL)
    writer = BulkIndexWriter(
        ElasticsearchBulkClient(es),
        high_water_mark=HIGH_WATER_MARK,
        timeout=IDLE_TIMEOUT_S,
    )

    def _on_flush(event: FlushEvent):
        console.print(
            f"• [bold]Flushed[/bold] {event.records} records "
            f"({event.written_records} total)"
        )

    def _on_error(err: Exception):
        console.print(f"[bold red]Bulk error:[/bold red] {err}")

    writer.on(StreamEvent.FLUSH, _on_flush)
    writer.on(StreamEvent.ERROR, _on_error)

    with open(ndjson_file) as f:
        for line in f:
            if not line.strip():
                continue
            writer.write(json.loads(line))
            if not writer.is_active():
                break

    try:
        writer.close().result()
    except Exception:
        return 1

    console.print(
        f"[bold green]Done:[/bold green] {writer.written_records} records indexed"
    )
    return 0


if __name__ == "__main__":
    if len(sys.argv) != 2:
        console.print("usage: main.py <records.ndjson>")
        sys.exit(2)

    log.basicConfig(level=log.INFO)
    setup_sdk_logging(level="INFO", pretty=True, console=console)
    sys.exit(run_ingestion(Path(sys.argv[1])))
