"""In-memory backend and record builders shared by the tests."""

from datetime import date, datetime, timedelta, timezone
from decimal import Decimal

from recordkeeper.models.records import Expense, Note, WikiCommand, utc_now
from recordkeeper.services.storage import (
    NotFoundError,
    RecordStorageInterface,
    StorageError,
)


BASE_TIME = datetime(2024, 1, 1, 12, 0, tzinfo=timezone.utc)


class InMemoryStorage(RecordStorageInterface):
    """Storage fake holding records in a list."""

    def __init__(self, schema, records=None):
        super().__init__(schema)
        self.records = list(records or [])
        self.calls: list[str] = []
        self.fail_on: set[str] = set()
        self._next_id = 0

    def _call(self, operation: str) -> None:
        self.calls.append(operation)
        if operation in self.fail_on:
            raise StorageError(f"{operation} failed")

    async def fetch_all(self):
        self._call("fetch_all")
        return sorted(self.records, key=self._schema.order_value_of, reverse=True)

    async def insert(self, draft):
        self._call("insert")
        self._next_id += 1
        record = self._schema.materialize(
            draft, f"{self._schema.name}-{self._next_id}", utc_now()
        )
        self.records.insert(0, record)
        return record

    async def update(self, record):
        self._call("update")
        for index, existing in enumerate(self.records):
            if existing.id == record.id:
                self.records[index] = record
                return record
        raise NotFoundError(record.id)

    async def delete(self, record_id):
        self._call("delete")
        self.records = [r for r in self.records if r.id != record_id]
        return True


def make_note(record_id="n1", title="A", category="Work", tags=None,
              content="hello", minutes=0) -> Note:
    created = BASE_TIME + timedelta(minutes=minutes)
    return Note(
        id=record_id,
        title=title,
        category=category,
        tags=tags or [],
        content=content,
        created_at=created,
        updated_at=created,
    )


def make_expense(record_id="e1", description="Coffee", amount="5.50",
                 on="2024-01-10", category="Food") -> Expense:
    return Expense(
        id=record_id,
        description=description,
        category=category,
        amount=Decimal(amount),
        date=date.fromisoformat(on),
    )


def make_wiki(record_id="w1", title="Show interfaces", vendor="Cisco",
              device_type="Switch", command="show ip interface brief",
              minutes=0, **extra) -> WikiCommand:
    created = BASE_TIME + timedelta(minutes=minutes)
    return WikiCommand(
        id=record_id,
        title=title,
        vendor=vendor,
        device_type=device_type,
        command=command,
        created_at=created,
        updated_at=created,
        **extra,
    )
