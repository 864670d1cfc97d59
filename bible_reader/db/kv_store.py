from __future__ import annotations

from typing import Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from bible_reader.core.exceptions import StorageError
from bible_reader.db import repo


class SessionKeyValueStore:
    """Key/value store on the ``key_values`` table of an open session.

    The caller owns the session and commits it.
    """

    def __init__(self, session: Session) -> None:
        self.session = session

    def get(self, key: str) -> Optional[str]:
        try:
            return repo.get_value(self.session, key)
        except SQLAlchemyError as exc:
            raise StorageError(f"cannot read {key}: {exc}") from exc

    def set(self, key: str, value: str) -> None:
        try:
            repo.set_value(self.session, key, value)
        except SQLAlchemyError as exc:
            raise StorageError(f"cannot write {key}: {exc}") from exc

    def delete(self, key: str) -> None:
        try:
            repo.delete_value(self.session, key)
        except SQLAlchemyError as exc:
            raise StorageError(f"cannot delete {key}: {exc}") from exc
