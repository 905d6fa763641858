import json
import logging
import sys
import time
from pathlib import Path
from typing import Any, BinaryIO, Dict, Iterator, List, NoReturn, Optional

import click
from tenacity import (
    Retrying,
    before_sleep_log,
    retry_if_exception,
    stop_after_attempt,
    wait_exponential_jitter,
)

from hubshipper import VERSION
from hubshipper.config.settings import load_settings
from hubshipper.constants import (
    CONFIG,
    DEFAULT_CHUNK_SIZE,
    DEFAULT_SEND_RETRIES,
    DEFAULT_TAG,
)
from hubshipper.delivery.batching import chunked
from hubshipper.errors import (
    DeliveryConnectionError,
    DeliveryStatusError,
    DeliveryTimeoutError,
    HubShipperError,
)
from hubshipper.output import ChunkEntry, EventHubsOutput

LOG = logging.getLogger(__name__)

RETRYABLE_STATUS_CODES = {408, 429}


def configure_logger(ctx, param, debug):
    level = logging.CRITICAL

    if debug:
        level = logging.DEBUG

    logging.basicConfig(format="%(asctime)s %(name)s => %(message)s", level=level)


def is_transient(exc: BaseException) -> bool:
    """
    Timeouts, connection failures, 408, 429 and 5xx answers are worth retrying.
    """
    if isinstance(exc, DeliveryStatusError):
        status = exc.status_code or 0
        return status in RETRYABLE_STATUS_CODES or 500 <= status < 600
    return isinstance(exc, (DeliveryTimeoutError, DeliveryConnectionError))


def write_with_retry(output: EventHubsOutput, chunk: List[ChunkEntry], retries: int) -> int:
    """
    Write a chunk, retrying the whole chunk on transient delivery errors.

    Units already accepted before a failure are sent again on retry.
    """
    retrying = Retrying(
        stop=stop_after_attempt(retries + 1),
        wait=wait_exponential_jitter(initial=1, max=30),
        retry=retry_if_exception(is_transient),
        reraise=True,
        before_sleep=before_sleep_log(LOG, logging.WARNING),
    )
    return retrying(output.write, chunk)


def read_records(stream: BinaryIO, tag: str) -> Iterator[ChunkEntry]:
    """
    Yield ``(tag, time, record)`` entries from a JSON-lines stream.

    Undecodable bytes are kept as escapes so the payload codec can replace
    them. Lines that are not JSON are skipped; JSON values that are not
    objects are wrapped as ``{"message": value}``.
    """
    for number, raw in enumerate(stream, start=1):
        line = raw.decode("utf-8", errors="surrogateescape").strip()
        if not line:
            continue

        try:
            value = json.loads(line)
        except json.JSONDecodeError as e:
            LOG.warning("Skipping line %d: not valid JSON (%s)", number, e)
            continue

        record: Dict[str, Any] = value if isinstance(value, dict) else {"message": value}
        yield tag, int(time.time()), record


def _exit_with(error: HubShipperError) -> NoReturn:
    click.secho(error.message, fg="red", err=True)
    sys.exit(error.get_exit_code())


@click.group(help="Ship JSON log records to an Azure Event Hubs endpoint over HTTPS.")
@click.option("--debug", is_flag=True, help="Enable debug logging.", callback=configure_logger)
@click.version_option(version=VERSION)
@click.pass_context
def cli(ctx, debug):
    ctx.ensure_object(dict)


config_option = click.option(
    "--config",
    "config_path",
    type=click.Path(dir_okay=False, path_type=Path),
    default=CONFIG,
    show_default=True,
    help="Path to the config.ini file holding an [eventhubs] section.",
)
connection_option = click.option(
    "--connection-string",
    default=None,
    help="Event Hubs connection string (Endpoint=...;SharedAccessKeyName=...;SharedAccessKey=...).",
)
hub_option = click.option("--hub", "hub_name", default=None, help="Event hub name.")


@cli.command(help="Send JSON-lines records from FILE (or stdin) to the event hub.")
@config_option
@connection_option
@hub_option
@click.option("--tag", default=DEFAULT_TAG, show_default=True, help="Tag of the shipped records.")
@click.option("--batch/--no-batch", default=None, help="Send records in batches.")
@click.option("--max-batch-size", type=int, default=None, help="Records per batch request.")
@click.option("--include-tag/--no-include-tag", default=None, help="Add the tag to each record.")
@click.option("--include-time/--no-include-time", default=None, help="Add the event time to each record.")
@click.option("--chunk-size", type=click.IntRange(min=1), default=DEFAULT_CHUNK_SIZE,
              show_default=True, help="Records written (and retried) together.")
@click.option("--retries", type=click.IntRange(min=0), default=DEFAULT_SEND_RETRIES,
              show_default=True, help="Retries of a chunk after a transient failure.")
@click.option("--dry-run", is_flag=True, help="Print the encoded request bodies instead of sending.")
@click.argument("source", type=click.File("rb"), default="-")
def send(config_path: Path, connection_string: Optional[str], hub_name: Optional[str],
         tag: str, batch: Optional[bool], max_batch_size: Optional[int],
         include_tag: Optional[bool], include_time: Optional[bool],
         chunk_size: int, retries: int, dry_run: bool, source: BinaryIO):
    try:
        settings = load_settings(
            config_path,
            connection_string=connection_string,
            hub_name=hub_name,
            batch=batch,
            max_batch_size=max_batch_size,
            include_tag=include_tag,
            include_time=include_time,
        )
        output = EventHubsOutput(settings)

        records = requests = 0
        for chunk in chunked(read_records(source, tag), chunk_size):
            if dry_run:
                for body in output.encode_chunk(chunk):
                    click.echo(body.decode("utf-8"))
                    requests += 1
            else:
                requests += write_with_retry(output, chunk, retries)
            records += len(chunk)
    except HubShipperError as e:
        _exit_with(e)

    verb = "Encoded" if dry_run else "Sent"
    click.echo(f"{verb} {records} records in {requests} requests.", err=True)


@cli.command(help="Print a Shared Access Signature for the configured event hub.")
@config_option
@connection_option
@hub_option
def token(config_path: Path, connection_string: Optional[str], hub_name: Optional[str]):
    try:
        settings = load_settings(
            config_path, connection_string=connection_string, hub_name=hub_name
        )
        output = EventHubsOutput(settings)
    except HubShipperError as e:
        _exit_with(e)

    click.echo(output.sender.tokens.current_token())
