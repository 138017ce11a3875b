"""Best-effort audit trail."""
from typing import Any, Dict, Optional
from flask import current_app
from sqlalchemy.exc import SQLAlchemyError
from school_portal import db
from school_portal.models.audit_log import AuditLog

class AuditService:
    """Append entries to the audit log without affecting the audited write."""

    @staticmethod
    def log(user_id: Optional[int], action: str, resource_type: str,
            resource_id: Any = None, details: Dict = None) -> Optional[AuditLog]:
        """Write one audit entry in its own commit.

        A failure is logged and swallowed; the primary operation has already
        been committed and is not rolled back.
        """
        entry = AuditLog(
            user_id=user_id,
            action=action,
            resource_type=resource_type,
            resource_id=str(resource_id) if resource_id is not None else None,
            details=details
        )
        try:
            db.session.add(entry)
            db.session.commit()
            return entry
        except SQLAlchemyError as e:
            db.session.rollback()
            current_app.logger.error(f"Failed to write audit entry {action}: {str(e)}")
            return None
