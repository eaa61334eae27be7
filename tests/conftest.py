import os

# Point the application at an in-memory database before anything imports recipebox.db.session.
os.environ.setdefault("DB_URL", "sqlite://")
os.environ.setdefault("JWT_SECRET_KEY", "recipebox-test-secret")

import logging  # noqa: E402, F401
import sys  # noqa: E402

import pytest  # noqa: E402
from sqlalchemy import create_engine  # noqa: E402
from sqlalchemy.orm import sessionmaker  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

from recipebox.db.base import Base  # noqa: E402
from recipebox.lib.audit import MemoryAuditSink  # noqa: E402
from recipebox.models import *  # noqa: E402, F403
from recipebox.models.user import User  # noqa: E402

from tests.helpers.constants import EXTRA_USER, TEST_USER, THIRD_USER  # noqa: E402

sys.path.append(".")

# Attempt to import optional top level fixtures. If the modules they depend on are not installed,
# we won't have access to our full fixture suite and only a limited subset of tests can be run.
try:
    from tests.conftest_optional import *  # noqa: F401, F403

except ModuleNotFoundError:
    pass


@pytest.fixture()
def session():
    # Un-comment this line to log all database queries:
    # logging.getLogger("sqlalchemy.engine").setLevel(logging.INFO)

    # A single shared connection keeps the in-memory database alive across sessions and threads.
    engine = create_engine(
        "sqlite://",
        echo=False,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    session = sessionmaker(autocommit=False, autoflush=False, bind=engine)()

    Base.metadata.create_all(bind=engine)

    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def setup_lib_db(session):
    """
    Sets up the lib test db with three users: the test user, the extra user and a third user.
    """
    db = session
    db.add(User(**TEST_USER))
    db.add(User(**EXTRA_USER))
    db.add(User(**THIRD_USER))
    db.commit()


@pytest.fixture
def audit_sink():
    return MemoryAuditSink()
