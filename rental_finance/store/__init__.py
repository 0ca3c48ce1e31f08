"""Record sources the report engine reads from."""

from rental_finance.store.base import RecordFilter, RecordSource
from rental_finance.store.memory import RentalDataStore
from rental_finance.store.postgres import PostgresRecordStore

__all__ = ["PostgresRecordStore", "RecordFilter", "RecordSource", "RentalDataStore"]
