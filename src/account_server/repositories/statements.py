"""Statement builders for user writes.

Partial updates go through an explicit field whitelist instead of expanding
arbitrary objects into SQL, so only known columns can ever appear in the
SET clause and every value is bound as a parameter.
"""

import uuid
from enum import Enum
from typing import Mapping

from sqlalchemy import Update, update

from ..models.user import User


class UserField(str, Enum):
    """User columns that may be changed by an update."""

    NAME = "name"
    EMAIL = "email"
    PASSWORD = "password"

    @property
    def column(self):
        return getattr(User.__table__.c, self.value)


def build_user_update(user_id: uuid.UUID, changes: Mapping[UserField, str]) -> Update:
    """Build ``UPDATE user SET ... WHERE id = :id`` for the given changes.

    Args:
        user_id: ID of the user row to update
        changes: New (already hashed where required) value per field

    Returns:
        Parameterized update statement

    Raises:
        ValueError: If there is nothing to update or a key is not a UserField
    """
    if not changes:
        raise ValueError("An update needs at least one field")

    values = {}
    for field, value in changes.items():
        if not isinstance(field, UserField):
            raise ValueError(f"Unknown user field: {field!r}")
        values[field.column] = value

    return update(User).where(User.id == user_id).values(values)
