"""
Category registry.

usage_count is never written here; job_service keeps it in step with the jobs
table. The delete guard deliberately counts live job rows instead of trusting
the cached counter.
"""
import logging
from typing import List, Optional

from sqlalchemy import func
from sqlalchemy.orm import Session

from jobboard.core.errors import BadRequestError, ConflictError, NotFoundError, ValidationError
from jobboard.db.models.category import Category
from jobboard.db.models.job import Job
from jobboard.db.session import commit_unique

logger = logging.getLogger(__name__)


def _clean_type(category_type: Optional[str]) -> str:
    if category_type is None or not category_type.strip():
        raise ValidationError("Type is required")
    return category_type.strip()


def get_category(db: Session, category_id: Optional[int]) -> Category:
    if category_id is None:
        raise ValidationError("Category ID is required")
    category = db.query(Category).filter(Category.id == category_id).first()
    if not category:
        raise NotFoundError("Category not found")
    return category


def find_by_type(db: Session, category_type: str) -> Optional[Category]:
    # Exact, case-sensitive match
    return db.query(Category).filter(Category.type == category_type).first()


def create_category(db: Session, category_type: Optional[str]) -> Category:
    category_type = _clean_type(category_type)

    if find_by_type(db, category_type):
        raise ConflictError("Category already exists")

    category = Category(type=category_type, usage_count=0, is_visible=True)
    db.add(category)
    commit_unique(db, "Category already exists")
    db.refresh(category)

    logger.info(f"Category created: id={category.id}, type={category.type}")
    return category


def update_category(
    db: Session,
    category_id: Optional[int],
    category_type: Optional[str],
    is_visible: Optional[bool] = None,
) -> Category:
    if category_id is None:
        raise ValidationError("Category ID is required")
    category_type = _clean_type(category_type)

    clash = db.query(Category).filter(
        Category.type == category_type,
        Category.id != category_id,
    ).first()
    if clash:
        raise ConflictError("Category type already exists")

    category = get_category(db, category_id)
    category.type = category_type
    # Omitting isVisible makes the category visible again
    category.is_visible = is_visible if is_visible is not None else True
    commit_unique(db, "Category type already exists")
    db.refresh(category)

    logger.info(f"Category updated: id={category.id}, type={category.type}, visible={category.is_visible}")
    return category


def count_referencing_jobs(db: Session, category_id: int) -> int:
    return db.query(func.count(Job.id)).filter(Job.category_id == category_id).scalar() or 0


def delete_category(db: Session, category_id: Optional[int]) -> None:
    category = get_category(db, category_id)

    job_count = count_referencing_jobs(db, category.id)
    if job_count > 0:
        raise BadRequestError("Cannot delete category because it is used in existing jobs")

    db.delete(category)
    db.commit()

    logger.info(f"Category deleted: id={category_id}")


def toggle_visibility(db: Session, category_id: Optional[int]) -> Category:
    category = get_category(db, category_id)
    category.is_visible = not category.is_visible
    db.commit()
    db.refresh(category)

    logger.info(f"Category visibility toggled: id={category.id}, visible={category.is_visible}")
    return category


def list_visible_categories(db: Session) -> List[Category]:
    return db.query(Category).filter(Category.is_visible.is_(True)).order_by(Category.type.asc()).all()


def list_all_categories(db: Session) -> List[Category]:
    return db.query(Category).order_by(Category.type.asc()).all()
