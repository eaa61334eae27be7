from typing import Any, Generator

from sqlalchemy.orm import Session

from recipebox.db.session import SessionLocal
from recipebox.lib.audit import AuditSink, default_audit_sink


def get_db() -> Generator[Session, Any, None]:
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def get_audit_sink() -> AuditSink:
    return default_audit_sink
