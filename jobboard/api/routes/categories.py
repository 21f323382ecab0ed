"""
Category registry endpoints. Companies and admins may manage categories.
"""
import logging

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from jobboard.core.auth_dependency import get_category_manager, get_db
from jobboard.core.errors import InternalError, JobBoardError
from jobboard.schemas.category import CategoryCreate, CategoryResponse, CategoryUpdate
from jobboard.schemas.common import dump
from jobboard.services import category_service

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/api/categories",
    tags=["Categories"],
    dependencies=[Depends(get_category_manager)],
)


def _category_data(category) -> dict:
    return dump(CategoryResponse.model_validate(category))


@router.get("")
def list_visible_categories(db: Session = Depends(get_db)):
    categories = category_service.list_visible_categories(db)
    return {
        "success": True,
        "message": "Categories fetched successfully",
        "categories": [_category_data(c) for c in categories],
    }


@router.get("/all")
def list_all_categories(db: Session = Depends(get_db)):
    categories = category_service.list_all_categories(db)
    return {
        "success": True,
        "message": "Categories fetched successfully",
        "categories": [_category_data(c) for c in categories],
    }


@router.get("/{category_id}")
def get_category(category_id: int, db: Session = Depends(get_db)):
    category = category_service.get_category(db, category_id)
    return {
        "success": True,
        "message": "Category fetched successfully",
        "categoryData": _category_data(category),
    }


@router.post("", status_code=status.HTTP_201_CREATED)
def create_category(payload: CategoryCreate, db: Session = Depends(get_db)):
    try:
        category = category_service.create_category(db, payload.type)
        return {
            "success": True,
            "message": "Category created successfully",
            "categoryData": _category_data(category),
        }
    except JobBoardError:
        db.rollback()
        raise
    except Exception as e:
        logger.error(f"Error creating category: {e}", exc_info=True)
        db.rollback()
        raise InternalError("Failed to create category", error=str(e))


@router.put("/{category_id}")
def update_category(category_id: int, payload: CategoryUpdate, db: Session = Depends(get_db)):
    try:
        category = category_service.update_category(db, category_id, payload.type, payload.is_visible)
        return {
            "success": True,
            "message": "Category updated successfully",
            "categoryData": _category_data(category),
        }
    except JobBoardError:
        db.rollback()
        raise
    except Exception as e:
        logger.error(f"Error updating category: {e}", exc_info=True)
        db.rollback()
        raise InternalError("Failed to update category", error=str(e))


@router.delete("/{category_id}")
def delete_category(category_id: int, db: Session = Depends(get_db)):
    try:
        category_service.delete_category(db, category_id)
        return {"success": True, "message": "Category deleted successfully"}
    except JobBoardError:
        db.rollback()
        raise
    except Exception as e:
        logger.error(f"Error deleting category: {e}", exc_info=True)
        db.rollback()
        raise InternalError("Failed to delete category", error=str(e))


@router.post("/{category_id}/visibility")
def toggle_category_visibility(category_id: int, db: Session = Depends(get_db)):
    try:
        category = category_service.toggle_visibility(db, category_id)
        return {
            "success": True,
            "message": "Category visibility updated",
            "categoryData": _category_data(category),
        }
    except JobBoardError:
        db.rollback()
        raise
    except Exception as e:
        logger.error(f"Error toggling category visibility: {e}", exc_info=True)
        db.rollback()
        raise InternalError("Failed to update category visibility", error=str(e))
