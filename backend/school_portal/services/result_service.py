"""Result recording service."""
from typing import Any, Dict, List
from flask import current_app
from sqlalchemy import func
from sqlalchemy.exc import SQLAlchemyError
from school_portal import db
from school_portal.models.result import ResultRecord
from school_portal.services.attendance_service import ensure_students_exist
from school_portal.services.audit_service import AuditService
from school_portal.services.authorization import Caller, Operation, authorize
from school_portal.services.grading import classify_score
from school_portal.utils.exceptions import PersistenceError
from school_portal.utils.validators import ResultEntry, Validator

class ResultService:
    """Service for subject scores and their derived grades."""

    @staticmethod
    def record_result(caller: Caller, payload: Any) -> Dict:
        """Record one score; returns the stored result."""
        authorize(caller, Operation.RECORD_RESULTS)

        entry = Validator.parse_result(payload)
        ensure_students_exist([entry.student_id])

        stored = ResultService._apply(caller, [entry])
        return stored[0]

    @staticmethod
    def record_results(caller: Caller, records: Any) -> Dict:
        """Record a batch of scores, all validated before the first write."""
        authorize(caller, Operation.RECORD_RESULTS)

        entries = Validator.parse_result_records(records, current_app.config['RESULT_MAX_BATCH'])
        ensure_students_exist(entry.student_id for entry in entries)

        stored = ResultService._apply(caller, entries)
        return {'count': len(stored), 'results': stored}

    @staticmethod
    def _apply(caller: Caller, entries: List[ResultEntry]) -> List[Dict]:
        stored = []
        for entry in entries:
            grade = classify_score(entry.score)
            try:
                ResultRecord.upsert(
                    {
                        'student_id': entry.student_id,
                        'subject': entry.subject,
                        'score': entry.score,
                        'grade': grade,
                        'recorded_by': caller.user_id,
                    },
                    conflict_columns=('student_id', 'subject'),
                    update_columns=('score', 'grade', 'recorded_by')
                )
                db.session.commit()
            except SQLAlchemyError as e:
                db.session.rollback()
                current_app.logger.error(
                    f"Result upsert failed for student {entry.student_id}/{entry.subject}: {str(e)}"
                )
                raise PersistenceError(
                    f"Failed to save results after {len(stored)} of {len(entries)} records",
                    succeeded=len(stored),
                    total=len(entries)
                )

            result = ResultRecord.query.filter_by(
                student_id=entry.student_id, subject=entry.subject
            ).first()
            AuditService.log(
                caller.user_id,
                'result_recorded',
                'result',
                resource_id=result.id,
                details={
                    'student_id': entry.student_id,
                    'subject': entry.subject,
                    'score': entry.score,
                    'grade': grade
                }
            )
            stored.append(result.to_dict())
        return stored

    @staticmethod
    def get_student_results(student_id: int) -> List[ResultRecord]:
        return ResultRecord.query.filter_by(student_id=student_id) \
            .order_by(ResultRecord.subject).all()

    @staticmethod
    def summarize(student_id: int) -> Dict:
        """Average score across subjects and its grade."""
        count, average = db.session.query(
            func.count(ResultRecord.id), func.avg(ResultRecord.score)
        ).filter(ResultRecord.student_id == student_id).one()

        if not count:
            return {'subjects': 0, 'average_score': None, 'average_grade': None}

        average = round(float(average), 1)
        return {
            'subjects': count,
            'average_score': average,
            'average_grade': classify_score(int(average))
        }
