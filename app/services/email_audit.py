"""
Email audit log: which address signed up or logged in, and when.
Used by the admin export endpoints and scripts/export_emails.py.

Every method opens its own session from the injected factory, so a failing
audit write never rolls back (or is rolled back by) the caller's transaction.
"""
import logging
from contextlib import contextmanager
from typing import Dict, List, Optional

from sqlalchemy import func
from sqlalchemy.orm import Session, sessionmaker

from app.models.email_record import EmailRecord, EmailSource
from app.utils.dates import isoformat_utc, utcnow

logger = logging.getLogger(__name__)

CSV_HEADER = "Email,User ID,Source,Timestamp"


def _csv_field(value) -> str:
    text = "" if value is None else str(value)
    return '"' + text.replace('"', '""') + '"'


def record_to_dict(record: EmailRecord) -> Dict:
    return {
        "email": record.email,
        "userId": record.user_id,
        "source": record.source,
        "timestamp": isoformat_utc(record.timestamp),
    }


class EmailAuditLog:
    def __init__(self, session_factory: sessionmaker):
        self.session_factory = session_factory

    @contextmanager
    def _session(self):
        db: Session = self.session_factory()
        try:
            yield db
        finally:
            db.close()

    def add_email(self, email: str, user_id: str, source: str) -> EmailRecord:
        """Insert or refresh the (email, user_id) record."""
        source = EmailSource(source).value
        with self._session() as db:
            try:
                record = db.query(EmailRecord).filter(
                    EmailRecord.email == email,
                    EmailRecord.user_id == user_id,
                ).first()
                if record:
                    record.timestamp = utcnow()
                    record.source = source
                else:
                    record = EmailRecord(
                        email=email,
                        user_id=user_id,
                        source=source,
                        timestamp=utcnow(),
                    )
                    db.add(record)
                db.commit()
                db.refresh(record)
                db.expunge(record)
            except Exception:
                db.rollback()
                raise
        logger.info("[EmailStorage] Email %s: %s (User: %s)", source, email, user_id)
        return record

    def get_all_emails(self) -> List[EmailRecord]:
        """All records, newest first."""
        with self._session() as db:
            records = db.query(EmailRecord).order_by(
                EmailRecord.timestamp.desc(), EmailRecord.id.desc()
            ).all()
            db.expunge_all()
            return records

    def get_emails_by_source(self, source: str) -> List[EmailRecord]:
        source = EmailSource(source).value
        with self._session() as db:
            records = db.query(EmailRecord).filter(
                EmailRecord.source == source
            ).order_by(EmailRecord.timestamp.desc(), EmailRecord.id.desc()).all()
            db.expunge_all()
            return records

    def get_email_count(self) -> int:
        with self._session() as db:
            return db.query(func.count(EmailRecord.id)).scalar() or 0

    def get_unique_email_count(self) -> int:
        with self._session() as db:
            return db.query(func.count(func.distinct(EmailRecord.email))).scalar() or 0

    def get_last_updated(self) -> Optional[str]:
        with self._session() as db:
            latest = db.query(func.max(EmailRecord.timestamp)).scalar()
            return isoformat_utc(latest)

    def get_stats(self) -> Dict:
        """All figures come from one session so they describe the same snapshot."""
        with self._session() as db:
            total, unique, latest = db.query(
                func.count(EmailRecord.id),
                func.count(func.distinct(EmailRecord.email)),
                func.max(EmailRecord.timestamp),
            ).one()
            counts = dict(
                db.query(EmailRecord.source, func.count(EmailRecord.id))
                .group_by(EmailRecord.source)
                .all()
            )
        return {
            "total": total or 0,
            "unique": unique or 0,
            "signups": counts.get(EmailSource.SIGNUP.value, 0),
            "logins": counts.get(EmailSource.LOGIN.value, 0),
            "lastUpdated": isoformat_utc(latest),
        }

    def export_as_text(self) -> str:
        records = self.get_all_emails()
        lines = [
            f"{r.email} ({r.source}) - {isoformat_utc(r.timestamp)}"
            for r in records
        ]
        header = (
            f"Collected Emails ({len(records)} total, {self.get_unique_email_count()} unique)\n"
            f"Generated: {isoformat_utc(utcnow())}\n\n"
        )
        return header + "\n".join(lines)

    def export_as_csv(self) -> str:
        rows = [
            ",".join(
                _csv_field(v)
                for v in (r.email, r.user_id, r.source, isoformat_utc(r.timestamp))
            )
            for r in self.get_all_emails()
        ]
        return "\n".join([CSV_HEADER] + rows)

    def clear(self) -> int:
        """Delete every record. Returns how many were removed."""
        with self._session() as db:
            try:
                deleted = db.query(EmailRecord).delete(synchronize_session=False)
                db.commit()
            except Exception:
                db.rollback()
                raise
        logger.info("[EmailStorage] All emails cleared (%s records)", deleted)
        return deleted
