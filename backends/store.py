"""
Record store for the backend services

Each service receives a store instance at construction time instead of
reaching for module-level globals, so tests can hand in an empty or
pre-seeded store with no simulated latency.
"""

import asyncio
import copy
import random
import uuid
from typing import Any, Callable, Dict, Iterable, List, Optional, Protocol, Tuple

from shared.utils.timestamps import utc_timestamp

Record = Dict[str, Any]
Predicate = Callable[[Record], bool]


class RecordStore(Protocol):
    """Operations the services need from their storage backend"""

    async def create(self, data: Record) -> Record: ...

    async def find_by_id(self, record_id: str) -> Optional[Record]: ...

    async def find_all(self, predicate: Optional[Predicate] = None) -> List[Record]: ...

    async def update(self, record_id: str, changes: Record) -> Optional[Record]: ...

    async def delete(self, record_id: str) -> bool: ...


class InMemoryRecordStore:
    """
    Dict-backed store that emulates a remote database

    Args:
        id_prefix: Prefix for generated ids, e.g. 'user' gives 'user_<hex>'
        id_field: Key the id is stored under in each record
        latency: (min, max) seconds of simulated latency per operation
        timestamps: Stamp createdAt/updatedAt on create and update
    """

    def __init__(
        self,
        id_prefix: str,
        id_field: str = "_id",
        latency: Tuple[float, float] = (0.0, 0.0),
        timestamps: bool = True
    ):
        self.id_prefix = id_prefix
        self.id_field = id_field
        self.latency = latency
        self.timestamps = timestamps
        self._records: Dict[str, Record] = {}

    async def _simulate_latency(self):
        low, high = self.latency
        if high > 0:
            await asyncio.sleep(random.uniform(low, high))

    def _new_id(self) -> str:
        return f"{self.id_prefix}_{uuid.uuid4().hex}"

    def seed(self, records: Iterable[Record]):
        """Insert records as-is, without latency or timestamping"""
        for record in records:
            self._records[record[self.id_field]] = copy.deepcopy(record)

    def __len__(self) -> int:
        return len(self._records)

    async def create(self, data: Record) -> Record:
        await self._simulate_latency()
        record = {self.id_field: self._new_id()}
        record.update((k, v) for k, v in data.items() if k != self.id_field)
        if self.timestamps:
            now = utc_timestamp()
            record["createdAt"] = now
            record["updatedAt"] = now
        self._records[record[self.id_field]] = record
        return copy.deepcopy(record)

    async def find_by_id(self, record_id: str) -> Optional[Record]:
        await self._simulate_latency()
        record = self._records.get(record_id)
        return copy.deepcopy(record) if record is not None else None

    async def find_all(self, predicate: Optional[Predicate] = None) -> List[Record]:
        """All matching records, most recently inserted first"""
        await self._simulate_latency()
        return [
            copy.deepcopy(record)
            for record in reversed(list(self._records.values()))
            if predicate is None or predicate(record)
        ]

    async def update(self, record_id: str, changes: Record) -> Optional[Record]:
        await self._simulate_latency()
        record = self._records.get(record_id)
        if record is None:
            return None

        updated = {**record, **changes, self.id_field: record_id}
        if self.timestamps:
            updated["updatedAt"] = utc_timestamp()
        self._records[record_id] = updated
        return copy.deepcopy(updated)

    async def delete(self, record_id: str) -> bool:
        await self._simulate_latency()
        return self._records.pop(record_id, None) is not None
