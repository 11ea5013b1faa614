"""
Fixtures for authentication tests.
"""

from unittest.mock import AsyncMock, MagicMock
from uuid import uuid4

import pytest

from admit_portal.core.security import hash_password
from admit_portal.modules.users.models import User


@pytest.fixture
def mock_db():
    """Create a mock database session."""
    db = AsyncMock()
    db.commit = AsyncMock()
    db.refresh = AsyncMock()
    db.rollback = AsyncMock()
    db.add = MagicMock()
    return db


@pytest.fixture
def sample_user():
    """A stored user whose password is 'secret123'."""
    user = MagicMock(spec=User)
    user.id = uuid4()
    user.email = "user@example.com"
    user.password_hash = hash_password("secret123", rounds=4)
    return user
