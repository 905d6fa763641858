import math

import pytest

from hubshipper.delivery.batching import assemble_units, chunked


@pytest.mark.unit
class TestChunked:
    @pytest.mark.parametrize("count", [0, 1, 4, 5, 19, 20, 21, 41])
    @pytest.mark.parametrize("size", [1, 2, 5, 20])
    def test_groups_partition_the_sequence(self, count: int, size: int) -> None:
        records = list(range(count))

        groups = list(chunked(records, size))

        assert len(groups) == math.ceil(count / size)
        assert all(1 <= len(group) <= size for group in groups)
        assert [item for group in groups for item in group] == records

    def test_accepts_iterators(self) -> None:
        assert list(chunked(iter("abcde"), 2)) == [["a", "b"], ["c", "d"], ["e"]]

    @pytest.mark.parametrize("size", [0, -1])
    def test_rejects_sizes_below_one(self, size: int) -> None:
        with pytest.raises(ValueError):
            list(chunked([1, 2], size))


@pytest.mark.unit
class TestAssembleUnits:
    def test_disabled_yields_bare_records(self) -> None:
        records = [{"n": 1}, {"n": 2}, {"n": 3}]

        units = list(assemble_units(records, batch_enabled=False, max_batch_size=2))

        assert units == records
        assert all(unit is record for unit, record in zip(units, records))

    def test_enabled_wraps_groups(self) -> None:
        records = [{"n": i} for i in range(1, 6)]

        units = list(assemble_units(records, batch_enabled=True, max_batch_size=2))

        assert units == [
            {"records": [{"n": 1}, {"n": 2}]},
            {"records": [{"n": 3}, {"n": 4}]},
            {"records": [{"n": 5}]},
        ]

    def test_defaults_to_single_records(self) -> None:
        assert list(assemble_units([{"a": 1}])) == [{"a": 1}]

    def test_default_batch_size_is_twenty(self) -> None:
        units = list(assemble_units(range(41), batch_enabled=True))

        assert [len(unit["records"]) for unit in units] == [20, 20, 1]

    def test_empty_input_yields_nothing(self) -> None:
        assert list(assemble_units([], batch_enabled=True)) == []
