"""Transaction category endpoints"""

from fastapi import APIRouter, BackgroundTasks, Depends, Request
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from finplanner.api.dependencies import (
    get_current_user_id,
    get_notification_client,
    get_request_id,
    parse_record_id,
)
from finplanner.api.v1.common import invalid_request, not_found, write_failed, write_succeeded
from finplanner.api.v1.schemas import CategoryCreate, CategoryListResponse, CategorySchema
from finplanner.domain.categories import ensure_deletable, merge_categories
from finplanner.domain.exceptions import ProtectedCategoryError
from finplanner.domain.models import Category
from finplanner.infrastructure.clients.notifications import NotificationClient
from finplanner.infrastructure.database.repositories import CategoryRepository, category_to_domain
from finplanner.infrastructure.database.session import get_db

router = APIRouter()


@router.get("/categories", response_model=CategoryListResponse)
def list_categories(
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    """Built-in categories followed by the user's own"""
    user_categories = [category_to_domain(r) for r in CategoryRepository(db).list_for_user(user_id)]
    return CategoryListResponse(
        user_id=user_id,
        categories=[CategorySchema.model_validate(c) for c in merge_categories(user_categories)],
    )


@router.post("/categories", response_model=CategorySchema, status_code=201)
def create_category(
    body: CategoryCreate,
    background_tasks: BackgroundTasks,
    request: Request,
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
    notifier: NotificationClient = Depends(get_notification_client),
):
    request_id = get_request_id(request)
    category = Category(name=body.name.strip(), color=body.color, icon=body.icon, type=body.type)

    try:
        rec = CategoryRepository(db).create(user_id, category)
        db.commit()
    except SQLAlchemyError as e:
        raise write_failed(db, request_id, "category", "create", e)

    write_succeeded(background_tasks, notifier, request_id, user_id, "category", "create")
    return CategorySchema.model_validate(category_to_domain(rec))


@router.delete("/categories/{category_id}", status_code=204)
def delete_category(
    category_id: str,
    background_tasks: BackgroundTasks,
    request: Request,
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
    notifier: NotificationClient = Depends(get_notification_client),
):
    """Delete a user category; transactions keep the category name they were saved with"""
    request_id = get_request_id(request)
    try:
        ensure_deletable(category_id)
    except ProtectedCategoryError as e:
        raise invalid_request(db, request_id, e)

    repo = CategoryRepository(db)
    rec = repo.get(user_id, parse_record_id(category_id))
    if rec is None:
        raise not_found("Category")

    try:
        repo.delete(rec)
        db.commit()
    except SQLAlchemyError as e:
        raise write_failed(db, request_id, "category", "delete", e)

    write_succeeded(background_tasks, notifier, request_id, user_id, "category", "delete")
