from typing import Any, MutableMapping

from hubshipper.constants import DEFAULT_TIME_FIELD_NAME

TAG_FIELD_NAME = "tag"


def enrich_record(
    tag: str,
    time: Any,
    record: MutableMapping[str, Any],
    include_tag: bool = False,
    include_time: bool = False,
    time_field_name: str = DEFAULT_TIME_FIELD_NAME,
) -> MutableMapping[str, Any]:
    """
    Add the source tag and/or the event time to ``record`` in place.

    Existing values under the same keys are overwritten. The record is
    returned for convenience.
    """
    if include_tag:
        record[TAG_FIELD_NAME] = tag
    if include_time:
        record[time_field_name] = time
    return record


class RecordEnricher:
    """Binds the enrichment flags once for a whole output."""

    def __init__(
        self,
        include_tag: bool = False,
        include_time: bool = False,
        time_field_name: str = DEFAULT_TIME_FIELD_NAME,
    ):
        self.include_tag = include_tag
        self.include_time = include_time
        self.time_field_name = time_field_name

    @property
    def enabled(self) -> bool:
        return self.include_tag or self.include_time

    def __call__(self, tag: str, time: Any, record: MutableMapping[str, Any]) -> MutableMapping[str, Any]:
        return enrich_record(
            tag,
            time,
            record,
            include_tag=self.include_tag,
            include_time=self.include_time,
            time_field_name=self.time_field_name,
        )
