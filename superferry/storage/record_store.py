"""
Fixed-length binary record store.

A store is a flat file holding an unindexed array of equally sized records,
with no header: the record count is the file size divided by the record size.
Records are addressed by position. Deleting compacts the file by moving the
last record into the freed slot (swap-delete), so positions are NOT stable
across deletes; callers re-resolve positions by key after every delete.

Shrinking the file never happens in place: the surviving prefix is written
to a sibling temp file which then replaces the original.
"""

from __future__ import annotations

import os
import struct
from pathlib import Path
from typing import Callable, ClassVar, Generic, Iterator, Protocol, TypeVar

from superferry.errors import RecordNotFound, StorageIOFailure
from superferry.utils.logger import get_logger

logger = get_logger(__name__)

COPY_CHUNK_BYTES = 64 * 1024


class FixedRecord(Protocol):
    """What a record type must provide to be kept in a RecordStore."""
    STRUCT: ClassVar[struct.Struct]

    def pack(self) -> bytes: ...

    @classmethod
    def unpack(cls, raw: bytes): ...


R = TypeVar("R", bound=FixedRecord)


class RecordStore(Generic[R]):
    """
    Positional sequence of fixed-size records backed by one file.

    The store owns a single file handle while open. It opens lazily on the
    first operation that needs the file, and open()/close() are idempotent.
    """

    def __init__(self, path: Path | str, record_type: type[R]):
        self.path = Path(path)
        self.record_type = record_type
        self.record_size = record_type.STRUCT.size
        self._file = None

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    @property
    def is_open(self) -> bool:
        return self._file is not None

    def open(self) -> "RecordStore[R]":
        """Open the backing file, creating it (and its directory) if absent."""
        if self._file is not None:
            return self
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            if not self.path.exists():
                self.path.touch()
            self._file = open(self.path, "r+b")
        except OSError as e:
            raise StorageIOFailure(self.path, "open", e) from e
        logger.debug("Opened %s (%d records)", self.path, self.count())
        return self

    def close(self):
        if self._file is not None:
            self._file.close()
            self._file = None

    def reset(self):
        """Destroy all records. An open store stays open."""
        was_open = self.is_open
        self.close()
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with open(self.path, "wb"):
                pass
        except OSError as e:
            raise StorageIOFailure(self.path, "reset", e) from e
        logger.info("Reset %s", self.path)
        if was_open:
            self.open()

    def __enter__(self) -> "RecordStore[R]":
        return self.open()

    def __exit__(self, exc_type, exc, tb):
        self.close()

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def count(self) -> int:
        """Number of complete records stored; 0 for an empty or missing file."""
        try:
            if self._file is not None:
                size = os.fstat(self._file.fileno()).st_size
            elif self.path.exists():
                size = self.path.stat().st_size
            else:
                return 0
        except OSError as e:
            raise StorageIOFailure(self.path, "count", e) from e
        return size // self.record_size

    def __len__(self) -> int:
        return self.count()

    def read_at(self, index: int) -> R | None:
        """Record at ``index``, or None if out of range or unreadable."""
        if index < 0 or index >= self.count():
            return None
        try:
            raw = self._read_raw(index)
            return self.record_type.unpack(raw)
        except (OSError, struct.error, ValueError) as e:
            logger.warning("Could not read record %d from %s: %s", index, self.path, e)
            return None

    def iter_records(self) -> Iterator[tuple[int, R]]:
        """Yield (index, record) pairs in file order, skipping unreadable slots."""
        for index in range(self.count()):
            record = self.read_at(index)
            if record is not None:
                yield index, record

    def records(self) -> list[R]:
        return [record for _, record in self.iter_records()]

    def find_indexes(self, predicate: Callable[[R], bool]) -> list[int]:
        """Positions of every record matching ``predicate``, ascending."""
        return [index for index, record in self.iter_records() if predicate(record)]

    def find_first(self, predicate: Callable[[R], bool]) -> tuple[int, R] | None:
        """First (index, record) matching ``predicate``, or None."""
        for index, record in self.iter_records():
            if predicate(record):
                return index, record
        return None

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    def write_at(self, index: int, record: R):
        """Overwrite the record at ``index``; the index must already exist."""
        count = self.count()
        if index < 0 or index >= count:
            raise RecordNotFound(
                f"Record index {index} out of range for {self.path.name} ({count} records)",
                index=index, path=str(self.path),
            )
        self._write_raw(index, record.pack(), "write")

    def append(self, record: R) -> int:
        """Append a record, durable on return. Returns its index."""
        index = self.count()
        self._write_raw(index, record.pack(), "append")
        return index

    def delete_at(self, index: int):
        """
        Swap-delete the record at ``index``.

        If it is not the last record, the last record is copied into its slot
        first; either way the file then shrinks by one record.
        """
        count = self.count()
        if index < 0 or index >= count:
            raise RecordNotFound(
                f"Record index {index} out of range for {self.path.name} ({count} records)",
                index=index, path=str(self.path),
            )
        last = count - 1
        if index != last:
            try:
                raw = self._read_raw(last)
            except OSError as e:
                raise StorageIOFailure(self.path, "delete", e) from e
            self._write_raw(index, raw, "delete")
        self._truncate(last)
        logger.debug("Deleted record %d from %s (%d left)", index, self.path, last)

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _handle(self):
        if self._file is None:
            self.open()
        return self._file

    def _read_raw(self, index: int) -> bytes:
        handle = self._handle()
        handle.seek(index * self.record_size)
        raw = handle.read(self.record_size)
        if len(raw) != self.record_size:
            raise OSError(f"short read at record {index}: {len(raw)} bytes")
        return raw

    def _write_raw(self, index: int, raw: bytes, operation: str):
        try:
            handle = self._handle()
            handle.seek(index * self.record_size)
            handle.write(raw)
            handle.flush()
            os.fsync(handle.fileno())
        except OSError as e:
            raise StorageIOFailure(self.path, operation, e) from e

    def _truncate(self, num_records: int):
        """Keep only the first ``num_records`` records (write-new, then replace)."""
        num_records = max(num_records, 0)
        tmp_path = self.path.with_name(self.path.name + ".tmp")
        self.close()
        try:
            remaining = num_records * self.record_size
            with open(self.path, "rb") as old, open(tmp_path, "wb") as new:
                while remaining > 0:
                    chunk = old.read(min(COPY_CHUNK_BYTES, remaining))
                    if not chunk:
                        break
                    new.write(chunk)
                    remaining -= len(chunk)
                new.flush()
                os.fsync(new.fileno())
            os.replace(tmp_path, self.path)
        except OSError as e:
            if tmp_path.exists():
                tmp_path.unlink()
            failure = StorageIOFailure(self.path, "truncate", e)
            try:
                self.open()
            except StorageIOFailure as reopen_error:
                logger.error("Could not reopen %s after failed truncate: %s", self.path, reopen_error)
            raise failure from e
        self.open()
