"""Base service class with common functionality."""

from typing import Any, Dict, Generic, Optional, Type, TypeVar

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from invoice_numbering.models.audit import AuditLog
from invoice_numbering.models.base import BaseModel
from invoice_numbering.models.enums import AuditAction
from invoice_numbering.utils.logger import logger

ModelType = TypeVar("ModelType", bound=BaseModel)


class BaseService(Generic[ModelType]):
    """
    Base service class providing common CRUD operations and audit logging.

    This class provides:
    - Lookup by ID
    - Creation and update with automatic audit logging
    - Error handling and logging with rollback on failure
    """

    def __init__(self, model: Type[ModelType]):
        """
        Initialize base service.

        Args:
            model: SQLAlchemy model class
        """
        self.model = model
        self.model_name = model.__name__.lower()

    def get(self, db: Session, id: int) -> Optional[ModelType]:
        """
        Get a record by ID.

        Args:
            db: Database session
            id: Record ID

        Returns:
            Model instance or None if not found
        """
        try:
            return db.query(self.model).filter(self.model.id == id).first()
        except SQLAlchemyError as e:
            logger.error(f"Error fetching {self.model_name} with id {id}: {e}")
            raise

    def create(
        self,
        db: Session,
        obj_in: Dict[str, Any],
        user_id: Optional[int] = None,
        reason: Optional[str] = None,
    ) -> ModelType:
        """
        Create a new record with audit logging.

        Args:
            db: Database session
            obj_in: Dictionary with creation data
            user_id: ID of user performing the action
            reason: Optional reason recorded in the audit log

        Returns:
            Created model instance
        """
        try:
            db_obj = self.model(**obj_in)
            db.add(db_obj)
            db.flush()  # Flush to get the ID without committing

            self._log_audit(
                db=db,
                action=AuditAction.INSERT,
                record_id=db_obj.id,
                new_values=db_obj.to_dict(),
                user_id=user_id,
                reason=reason,
            )

            db.commit()
            db.refresh(db_obj)

            logger.info(f"Created {self.model_name} with id {db_obj.id}")
            return db_obj

        except SQLAlchemyError as e:
            db.rollback()
            logger.error(f"Error creating {self.model_name}: {e}")
            raise

    def update(
        self,
        db: Session,
        db_obj: ModelType,
        obj_in: Dict[str, Any],
        user_id: Optional[int] = None,
        action: AuditAction = AuditAction.UPDATE,
    ) -> ModelType:
        """
        Update an existing record with audit logging.

        Args:
            db: Database session
            db_obj: Existing model instance
            obj_in: Dictionary with update data
            user_id: ID of user performing the action
            action: Audit action to record

        Returns:
            Updated model instance
        """
        try:
            old_values = db_obj.to_dict()

            for field, value in obj_in.items():
                if hasattr(db_obj, field):
                    setattr(db_obj, field, value)

            db.flush()

            self._log_audit(
                db=db,
                action=action,
                record_id=db_obj.id,
                old_values=old_values,
                new_values=db_obj.to_dict(),
                user_id=user_id,
            )

            db.commit()
            db.refresh(db_obj)

            logger.info(f"Updated {self.model_name} with id {db_obj.id}")
            return db_obj

        except SQLAlchemyError as e:
            db.rollback()
            logger.error(f"Error updating {self.model_name}: {e}")
            raise

    def _log_audit(
        self,
        db: Session,
        action: AuditAction,
        record_id: int,
        old_values: Optional[Dict[str, Any]] = None,
        new_values: Optional[Dict[str, Any]] = None,
        user_id: Optional[int] = None,
        reason: Optional[str] = None,
    ) -> None:
        """
        Create audit log entry in the current transaction.

        Args:
            db: Database session
            action: Type of action performed
            record_id: ID of the affected record
            old_values: Values before the change
            new_values: Values after the change
            user_id: ID of user performing the action
            reason: Reason for the action
        """
        try:
            AuditLog.log_change(
                session=db,
                table_name=self.model.__tablename__,
                record_id=record_id,
                action=action,
                old_values=old_values,
                new_values=new_values,
                user=user_id,
                reason=reason,
            )
        except Exception as e:
            # Log error but don't fail the main operation
            logger.error(f"Failed to create audit log: {e}")
