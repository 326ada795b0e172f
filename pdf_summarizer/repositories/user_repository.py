"""Repository for user accounts."""

from typing import Optional

from pdf_summarizer.core.database import JsonRecordStore
from pdf_summarizer.models.records import UserRecord
from pdf_summarizer.repositories.base_repository import BaseRepository


class UserRepository(BaseRepository[UserRecord]):
    collection = "users"

    def __init__(self, store: JsonRecordStore):
        super().__init__(store, UserRecord)

    def get_by_username(self, username: str) -> Optional[UserRecord]:
        return self._to_model(self.store.find_one(self.collection, lambda r: r.get("username") == username))

    def get_by_email(self, email: str) -> Optional[UserRecord]:
        return self._to_model(self.store.find_one(self.collection, lambda r: r.get("email") == email))

    def get_by_username_or_email(self, identifier: str) -> Optional[UserRecord]:
        return self._to_model(
            self.store.find_one(
                self.collection,
                lambda r: r.get("username") == identifier or r.get("email") == identifier,
            )
        )
