from __future__ import annotations


class StorageError(Exception):
    def __init__(self, operation: str, reason: str):
        super().__init__(f"Storage error during {operation}: {reason}")
        self.operation = operation
        self.reason = reason


class RecordNotFoundError(StorageError):
    def __init__(self, table: str, record_id: str):
        super().__init__(f"get {table}", f"record not found: {record_id}")
        self.table = table
        self.record_id = record_id


class StorageNotConfiguredError(StorageError):
    def __init__(self, missing: list[str]):
        super().__init__("configure", f"missing settings: {', '.join(missing)}")
        self.missing = missing
