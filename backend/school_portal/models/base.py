"""Base model class with common functionality."""
from datetime import datetime
from typing import Dict, Any, Iterable
from sqlalchemy.dialects import postgresql, sqlite
from school_portal import db

_UPSERT_DIALECTS = {
    'postgresql': postgresql.insert,
    'sqlite': sqlite.insert,
}

class BaseModel(db.Model):
    """Base model class with common fields and methods."""

    __abstract__ = True

    id = db.Column(db.Integer, primary_key=True)
    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    def save(self) -> 'BaseModel':
        """Save instance to database."""
        db.session.add(self)
        db.session.commit()
        return self

    def delete(self) -> None:
        """Delete instance from database."""
        db.session.delete(self)
        db.session.commit()

    def update(self, **kwargs) -> 'BaseModel':
        """Update instance with provided data."""
        for key, value in kwargs.items():
            if hasattr(self, key):
                setattr(self, key, value)

        self.updated_at = datetime.utcnow()
        db.session.commit()
        return self

    def to_dict(self, exclude: list = None) -> Dict[str, Any]:
        """Convert instance to dictionary."""
        exclude = exclude or []
        result = {}

        for column in self.__table__.columns:
            key = column.name
            if key not in exclude:
                value = getattr(self, key)
                if hasattr(value, 'isoformat'):
                    value = value.isoformat()
                elif hasattr(value, 'value'):
                    value = value.value
                result[key] = value

        return result

    @classmethod
    def get_by_id(cls, id: int) -> 'BaseModel':
        """Get instance by ID."""
        return db.session.get(cls, id)

    @classmethod
    def upsert(cls, values: Dict[str, Any], conflict_columns: Iterable[str],
               update_columns: Iterable[str]) -> None:
        """Insert a row or update the row that collides on a unique key.

        Runs as a single INSERT ... ON CONFLICT DO UPDATE statement so the
        database decides between insert and update atomically. The caller
        owns the transaction.
        """
        dialect = db.session.get_bind().dialect.name
        insert = _UPSERT_DIALECTS.get(dialect)
        if insert is None:
            raise NotImplementedError(f"Upsert is not supported on {dialect}")

        now = datetime.utcnow()
        row = dict(values, created_at=now, updated_at=now)

        stmt = insert(cls.__table__).values(**row)
        changes = {column: stmt.excluded[column] for column in update_columns}
        changes['updated_at'] = now
        stmt = stmt.on_conflict_do_update(
            index_elements=list(conflict_columns),
            set_=changes
        )
        db.session.execute(stmt)

    def __repr__(self) -> str:
        return f'<{self.__class__.__name__} {self.id}>'
