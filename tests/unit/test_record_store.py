"""Tests for the fixed-length binary record store."""

from unittest.mock import patch

import pytest

from superferry.errors import RecordNotFound, StorageIOFailure
from superferry.models import Ferry, Reservation
from superferry.storage.record_store import RecordStore


def _ferry(i):
    return Ferry(f"FERRY {i}", 10 + i, 20 + i)


def _store(tmp_path, n=0):
    store = RecordStore(tmp_path / "ferries.dat", Ferry).open()
    for i in range(n):
        store.append(_ferry(i))
    return store


def _names(store):
    return [f.name for f in store.records()]


class TestLifecycle:
    def test_open_creates_missing_file_and_directory(self, tmp_path):
        path = tmp_path / "nested" / "ferries.dat"
        with RecordStore(path, Ferry) as store:
            assert store.is_open
            assert path.exists()
            assert store.count() == 0
        assert not store.is_open

    def test_open_is_idempotent(self, tmp_path):
        store = _store(tmp_path)
        assert store.open() is store
        store.close()
        store.close()
        assert not store.is_open

    def test_count_of_missing_file_is_zero(self, tmp_path):
        store = RecordStore(tmp_path / "never.dat", Ferry)
        assert store.count() == 0
        assert not (tmp_path / "never.dat").exists()

    def test_operations_open_lazily(self, tmp_path):
        store = RecordStore(tmp_path / "ferries.dat", Ferry)
        store.append(_ferry(0))
        assert store.is_open
        store.close()

    def test_reset_keeps_store_open_and_empties_it(self, tmp_path):
        store = _store(tmp_path, 3)
        store.reset()
        assert store.is_open
        assert store.count() == 0
        store.append(_ferry(9))
        assert _names(store) == ["FERRY 9"]
        store.close()

    def test_open_failure_is_storage_error(self, tmp_path):
        blocker = tmp_path / "file"
        blocker.write_text("not a directory")
        store = RecordStore(blocker / "ferries.dat", Ferry)
        with pytest.raises(StorageIOFailure) as exc:
            store.open()
        assert exc.value.context["operation"] == "open"


class TestReads:
    def test_count_is_file_size_over_record_size(self, tmp_path):
        store = _store(tmp_path, 4)
        assert store.count() == 4
        assert len(store) == 4
        assert (tmp_path / "ferries.dat").stat().st_size == 4 * 36
        store.close()

    def test_trailing_partial_record_is_ignored(self, tmp_path):
        store = _store(tmp_path, 2)
        store.close()
        with open(tmp_path / "ferries.dat", "ab") as f:
            f.write(b"\0" * 10)
        store.open()
        assert store.count() == 2
        store.close()

    def test_read_at_out_of_range(self, tmp_path):
        store = _store(tmp_path, 1)
        assert store.read_at(1) is None
        assert store.read_at(-1) is None
        store.close()

    def test_unreadable_record_is_skipped(self, tmp_path):
        store = _store(tmp_path, 2)
        store.close()
        # Zeroed slot decodes to an empty ferry name, which fails validation
        with open(tmp_path / "ferries.dat", "r+b") as f:
            f.write(b"\0" * 36)
        store.open()
        assert store.read_at(0) is None
        assert _names(store) == ["FERRY 1"]
        assert [i for i, _ in store.iter_records()] == [1]
        store.close()

    def test_find_indexes_and_first(self, tmp_path):
        store = _store(tmp_path, 5)
        assert store.find_indexes(lambda f: f.high_capacity % 2 == 0) == [0, 2, 4]
        index, ferry = store.find_first(lambda f: f.low_capacity > 21)
        assert (index, ferry.name) == (2, "FERRY 2")
        assert store.find_first(lambda f: f.name == "NOPE") is None
        store.close()


class TestWrites:
    def test_append_returns_index(self, tmp_path):
        store = _store(tmp_path, 2)
        assert store.append(_ferry(7)) == 2
        store.close()

    def test_write_at_overwrites(self, tmp_path):
        store = _store(tmp_path, 3)
        store.write_at(1, Ferry("RENAMED", 1, 1))
        assert _names(store) == ["FERRY 0", "RENAMED", "FERRY 2"]
        store.close()

    def test_write_at_out_of_range(self, tmp_path):
        store = _store(tmp_path, 1)
        with pytest.raises(RecordNotFound):
            store.write_at(1, _ferry(1))
        store.close()

    def test_records_survive_reopen(self, tmp_path):
        store = _store(tmp_path, 3)
        store.close()
        reopened = RecordStore(tmp_path / "ferries.dat", Ferry)
        assert reopened.records() == [_ferry(0), _ferry(1), _ferry(2)]
        reopened.close()

    def test_write_failure_is_storage_error(self, tmp_path):
        store = _store(tmp_path, 1)
        with patch("superferry.storage.record_store.os.fsync", side_effect=OSError("disk full")):
            with pytest.raises(StorageIOFailure, match="disk full"):
                store.append(_ferry(1))
        store.close()


class TestSwapDelete:
    def test_last_record_moves_into_hole(self, tmp_path):
        store = _store(tmp_path, 4)
        store.delete_at(1)
        assert _names(store) == ["FERRY 0", "FERRY 3", "FERRY 2"]
        assert store.count() == 3
        store.close()

    def test_delete_last_just_shrinks(self, tmp_path):
        store = _store(tmp_path, 3)
        store.delete_at(2)
        assert _names(store) == ["FERRY 0", "FERRY 1"]
        store.close()

    def test_delete_only_record(self, tmp_path):
        store = _store(tmp_path, 1)
        store.delete_at(0)
        assert store.count() == 0
        assert (tmp_path / "ferries.dat").stat().st_size == 0
        store.close()

    def test_delete_out_of_range(self, tmp_path):
        store = _store(tmp_path, 2)
        with pytest.raises(RecordNotFound):
            store.delete_at(2)
        with pytest.raises(RecordNotFound):
            store.delete_at(-1)
        store.close()

    def test_no_temp_file_left_behind(self, tmp_path):
        store = _store(tmp_path, 3)
        store.delete_at(0)
        assert sorted(p.name for p in tmp_path.iterdir()) == ["ferries.dat"]
        store.close()

    def test_store_stays_open_after_delete(self, tmp_path):
        store = _store(tmp_path, 2)
        store.delete_at(0)
        assert store.is_open
        store.append(_ferry(5))
        assert store.count() == 2
        store.close()

    def test_descending_deletes_remove_every_match(self, tmp_path):
        store = RecordStore(tmp_path / "reservations.dat", Reservation).open()
        plates = ["X", "A", "X", "X", "B", "X"]
        for day, plate in enumerate(plates, 1):
            store.append(Reservation(plate, f"ABC-{day:02d}-08"))

        for index in sorted(store.find_indexes(lambda r: r.plate == "X"), reverse=True):
            store.delete_at(index)

        assert sorted(r.plate for r in store.records()) == ["A", "B"]
        store.close()

    def test_ascending_deletes_would_skip_a_match(self, tmp_path):
        store = RecordStore(tmp_path / "reservations.dat", Reservation).open()
        for day, plate in enumerate(["X", "A", "X"], 1):
            store.append(Reservation(plate, f"ABC-{day:02d}-08"))

        # Deleting 0 moves the last X into slot 0; the stale index 2 is now gone
        store.delete_at(0)
        assert store.read_at(0).plate == "X"
        assert store.read_at(2) is None
        store.close()

    def test_failed_truncate_reports_truncate_and_reopens(self, tmp_path):
        store = _store(tmp_path, 2)
        with patch("superferry.storage.record_store.os.replace", side_effect=OSError("rename refused")):
            with pytest.raises(StorageIOFailure, match="rename refused") as exc:
                store.delete_at(1)
        assert exc.value.context["operation"] == "truncate"
        assert store.is_open
        assert not (tmp_path / "ferries.dat.tmp").exists()
        store.close()

    def test_failed_reopen_keeps_truncate_error(self, tmp_path):
        store = _store(tmp_path, 2)
        reopen = StorageIOFailure(store.path, "open")
        with patch("superferry.storage.record_store.os.replace", side_effect=OSError("rename refused")), \
                patch.object(store, "open", side_effect=reopen):
            with pytest.raises(StorageIOFailure) as exc:
                store.delete_at(0)
        assert exc.value.context["operation"] == "truncate"
        assert not store.is_open
