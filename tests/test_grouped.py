"""Tests for grouped (hash-based) sampling."""

import csv
import io

import pytest

from datasample.core.errors import (
    ColumnNotFoundError,
    InvalidPercentageError,
    RowDecodeError,
)
from datasample.transforms.grouped import (
    HASH_MAX,
    GroupedHashSample,
    GroupedHashSampler,
    blake2b_hash,
    grouped_hash_select,
    python_hash,
)


def keep_only(*values: str):
    """Hasher that keeps exactly the given key values at any percentage > 0."""

    def hasher(value: str) -> int:
        return 0 if value in values else HASH_MAX

    return hasher


def rows_by_key(rows: list[list[str]], index: int = 0) -> dict[str, int]:
    counts: dict[str, int] = {}
    for row in rows:
        counts[row[index]] = counts.get(row[index], 0) + 1
    return counts


class TestCoMembership:
    """Rows sharing a key are kept or dropped together."""

    def test_csv_rows_with_same_id(self, events_csv: str) -> None:
        sampler = GroupedHashSampler.from_csv(io.StringIO(events_csv), 50.0, "id")
        samples = sampler.collect_all()

        counts = rows_by_key(samples)
        assert counts.get("1", 0) in (0, 2)
        assert counts.get("2", 0) in (0, 2)
        assert counts.get("3", 0) in (0, 1)
        assert counts.get("4", 0) in (0, 1)

    def test_iterator_matches_collect_all(self, events_csv: str) -> None:
        collected = GroupedHashSampler.from_csv(
            io.StringIO(events_csv), 50.0, "id"
        ).collect_all()
        iterated = list(GroupedHashSampler.from_csv(io.StringIO(events_csv), 50.0, "id"))
        assert collected == iterated

    def test_repeated_constructions_agree(self) -> None:
        rows = [["key"]] + [[f"user{i % 50}"] for i in range(500)]
        first = GroupedHashSampler(rows, 40, "key").collect_all()
        second = GroupedHashSampler(rows, 40, "key").collect_all()
        assert first == second

        for key in {row[0] for row in rows[1:]}:
            total = sum(1 for row in rows[1:] if row[0] == key)
            kept = sum(1 for row in first if row[0] == key)
            assert kept in (0, total)

    def test_decide_is_consistent(self) -> None:
        sampler = GroupedHashSampler([["id"]], 50, "id")
        other = GroupedHashSampler([["id"]], 50, "id")
        for i in range(200):
            value = f"value-{i}"
            assert sampler.decide(value) == sampler.decide(value) == other.decide(value)


def test_scenario_two_rows_share_decision() -> None:
    rows = [["id", "payload"], ["1", "x"], ["2", "y"], ["1", "z"]]
    for _ in range(20):
        kept = GroupedHashSampler(rows, 50, "id").collect_all()
        ids = [row[0] for row in kept]
        assert ids.count("1") in (0, 2)


def test_hasher_controls_decision() -> None:
    rows = [["id", "v"], ["a", "1"], ["b", "2"], ["a", "3"], ["c", "4"]]
    kept = GroupedHashSampler(rows, 50, "id", hasher=keep_only("a")).collect_all()
    assert kept == [["a", "1"], ["a", "3"]]


def test_output_preserves_order() -> None:
    rows = [["id"]] + [[str(i % 7)] for i in range(100)]
    kept = GroupedHashSampler(rows, 60, "id", hasher=keep_only("1", "3", "5")).collect_all()
    assert kept == [row for row in rows[1:] if row[0] in ("1", "3", "5")]


def test_zero_percent_keeps_nothing() -> None:
    rows = [["id"]] + [[str(i)] for i in range(100)]
    assert GroupedHashSampler(rows, 0, "id").collect_all() == []


def test_hundred_percent_keeps_everything() -> None:
    rows = [["id"]] + [[str(i)] for i in range(100)]
    assert GroupedHashSampler(rows, 100, "id").collect_all() == rows[1:]


@pytest.mark.statistical
def test_share_of_keys_close_to_percentage() -> None:
    rows = [["id"]] + [[f"key-{i}"] for i in range(10_000)]
    kept = GroupedHashSampler(rows, 30, "id", hasher=blake2b_hash).collect_all()
    assert len(kept) / 10_000 == pytest.approx(0.30, abs=0.03)


class TestHeader:
    """Header handling and column lookup."""

    def test_header_exposed_unmodified(self, events_csv: str) -> None:
        sampler = GroupedHashSampler.from_csv(io.StringIO(events_csv), 50, "name")
        assert sampler.header == ["id", "name", "value"]
        assert sampler.column_index == 1

    def test_column_name_is_trimmed(self) -> None:
        sampler = GroupedHashSampler([[" id ", "name"]], 50, "id ")
        assert sampler.column_index == 0
        assert sampler.header == [" id ", "name"]

    def test_duplicate_column_first_match_wins(self) -> None:
        sampler = GroupedHashSampler([["x", "id", "id"]], 50, "id")
        assert sampler.column_index == 1

    def test_column_not_found(self) -> None:
        with pytest.raises(ColumnNotFoundError) as exc_info:
            GroupedHashSampler([["id", "name", "value"], ["1", "a", "b"]], 50, "missing")
        assert exc_info.value.column == "missing"
        assert exc_info.value.header == ["id", "name", "value"]
        assert "missing" in str(exc_info.value)

    def test_empty_input_has_no_column(self) -> None:
        with pytest.raises(ColumnNotFoundError):
            GroupedHashSampler([], 50, "id")

    def test_grouped_hash_select_returns_header_and_rows(self) -> None:
        rows = [["id", "v"], ["a", "1"], ["b", "2"]]
        header, selected = grouped_hash_select(rows, 50, "id", hasher=keep_only("b"))
        assert header == ["id", "v"]
        assert list(selected) == [["b", "2"]]


class TestErrors:
    """Validation and decode failure propagation."""

    def test_invalid_percentage_fails_before_reading(self) -> None:
        def rows():
            raise AssertionError("header must not be read")
            yield  # pragma: no cover

        with pytest.raises(InvalidPercentageError):
            GroupedHashSampler(rows(), 120, "id")

    def test_decode_error_stops_iteration(self) -> None:
        def rows():
            yield ["id"]
            yield ["1"]
            raise RowDecodeError("unterminated quote", 3)

        sampler = GroupedHashSampler(rows(), 50, "id", hasher=keep_only("1"))
        assert next(sampler) == ["1"]
        with pytest.raises(RowDecodeError) as exc_info:
            next(sampler)
        assert exc_info.value.line_number == 3
        with pytest.raises(StopIteration):
            next(sampler)

    def test_csv_error_becomes_decode_error(self) -> None:
        reader = csv.reader(io.StringIO('id,name\n1,"a"b\n2,c\n'), strict=True)
        sampler = GroupedHashSampler(reader, 100, "id")
        with pytest.raises(RowDecodeError):
            sampler.collect_all()

    def test_malformed_csv_row_from_stream(self) -> None:
        data = 'id,name\n1,ok\n2,"bad"x\n3,never\n'
        sampler = GroupedHashSampler.from_csv(io.StringIO(data), 100, "id")
        assert next(sampler) == ["1", "ok"]
        with pytest.raises(RowDecodeError) as exc_info:
            next(sampler)
        assert exc_info.value.line_number == 3
        assert list(sampler) == []

    def test_short_row_passes_through(self) -> None:
        rows = [["a", "b", "id"], ["1", "2"], ["1", "2", "x"]]
        kept = GroupedHashSampler(rows, 50, "id", hasher=keep_only("nothing")).collect_all()
        assert kept == [["1", "2"]]


class TestHashers:
    """Key hash functions."""

    def test_python_hash_in_range_and_stable(self) -> None:
        for value in ["", "a", "user_42", "ünïcode"]:
            h = python_hash(value)
            assert 0 <= h <= HASH_MAX
            assert h == python_hash(value)

    def test_blake2b_hash_in_range_and_stable(self) -> None:
        assert 0 <= blake2b_hash("user_42") <= HASH_MAX
        assert blake2b_hash("user_42") == blake2b_hash("user_42")
        assert blake2b_hash("user_42") != blake2b_hash("user_43")


class TestGroupedHashSampleStep:
    """GroupedHashSample as a pipeline step."""

    def test_emits_header_then_kept_rows(self) -> None:
        rows = [["id", "v"], ["a", "1"], ["b", "2"], ["a", "3"]]
        step = GroupedHashSample("id", 50, hasher=keep_only("a"))
        assert list(step.process(rows)) == [["id", "v"], ["a", "1"], ["a", "3"]]

    def test_missing_column_raises_on_first_pull(self) -> None:
        step = GroupedHashSample("nope", 50)
        out = step.process([["id"], ["1"]])
        with pytest.raises(ColumnNotFoundError):
            next(iter(out))

    def test_rejects_invalid_percentage(self) -> None:
        with pytest.raises(InvalidPercentageError):
            GroupedHashSample("id", -5)
