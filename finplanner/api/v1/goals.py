"""Savings goal endpoints"""

from dataclasses import replace
from datetime import date
from fastapi import APIRouter, BackgroundTasks, Depends, Request
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from finplanner.api.dependencies import (
    get_current_user_id,
    get_notification_client,
    get_request_id,
    parse_record_id,
)
from finplanner.api.v1.common import not_found, write_failed, write_succeeded
from finplanner.api.v1.schemas import (
    ContributionCreate,
    ContributionListResponse,
    ContributionResponse,
    ContributionSchema,
    GoalListResponse,
    GoalRequest,
    GoalSchema,
)
from finplanner.domain.goals import INITIAL_STATUS, apply_contribution, is_completed, months_remaining, progress
from finplanner.domain.models import Goal, GoalContribution
from finplanner.infrastructure.clients.notifications import NotificationClient
from finplanner.infrastructure.database.repositories import (
    GoalRepository,
    contribution_to_domain,
    goal_to_domain,
)
from finplanner.infrastructure.database.session import get_db

router = APIRouter()


def to_schema(goal: Goal) -> GoalSchema:
    schema = GoalSchema.model_validate(goal)
    schema.progress = progress(goal)
    schema.months_remaining = months_remaining(goal, date.today())
    return schema


@router.post("/goals", response_model=GoalSchema, status_code=201)
def create_goal(
    body: GoalRequest,
    background_tasks: BackgroundTasks,
    request: Request,
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
    notifier: NotificationClient = Depends(get_notification_client),
):
    """New goals start at zero with status "Iniciado" """
    request_id = get_request_id(request)
    goal = Goal(
        title=body.title,
        deadline=body.deadline,
        target_value=body.target_value,
        category=body.category,
        icon=body.icon,
        background_image=body.background_image,
        monthly_contribution=body.monthly_contribution,
        status=INITIAL_STATUS,
    )

    try:
        rec = GoalRepository(db).create(user_id, goal)
        db.commit()
    except SQLAlchemyError as e:
        raise write_failed(db, request_id, "goal", "create", e)

    write_succeeded(background_tasks, notifier, request_id, user_id, "goal", "create")
    return to_schema(goal_to_domain(rec))


@router.get("/goals", response_model=GoalListResponse)
def list_goals(
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    """Goals split into active and completed"""
    goals = [goal_to_domain(r) for r in GoalRepository(db).list_for_user(user_id)]
    return GoalListResponse(
        user_id=user_id,
        active=[to_schema(g) for g in goals if not is_completed(g)],
        completed=[to_schema(g) for g in goals if is_completed(g)],
    )


@router.put("/goals/{goal_id}", response_model=GoalSchema)
def update_goal(
    goal_id: str,
    body: GoalRequest,
    background_tasks: BackgroundTasks,
    request: Request,
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
    notifier: NotificationClient = Depends(get_notification_client),
):
    """Edit goal details; progress and contribution history are kept"""
    request_id = get_request_id(request)
    repo = GoalRepository(db)
    rec = repo.get(user_id, parse_record_id(goal_id))
    if rec is None:
        raise not_found("Goal")

    existing = goal_to_domain(rec)
    goal = replace(
        existing,
        title=body.title,
        deadline=body.deadline,
        target_value=body.target_value,
        category=body.category,
        icon=body.icon,
        background_image=body.background_image,
        monthly_contribution=body.monthly_contribution,
        status=body.status or existing.status,
    )

    try:
        repo.update(rec, goal)
        db.commit()
    except SQLAlchemyError as e:
        raise write_failed(db, request_id, "goal", "update", e)

    write_succeeded(background_tasks, notifier, request_id, user_id, "goal", "update")
    return to_schema(goal_to_domain(rec))


@router.delete("/goals/{goal_id}", status_code=204)
def delete_goal(
    goal_id: str,
    background_tasks: BackgroundTasks,
    request: Request,
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
    notifier: NotificationClient = Depends(get_notification_client),
):
    """Delete a goal together with its contribution history"""
    request_id = get_request_id(request)
    repo = GoalRepository(db)
    rec = repo.get(user_id, parse_record_id(goal_id))
    if rec is None:
        raise not_found("Goal")

    try:
        repo.delete(rec)
        db.commit()
    except SQLAlchemyError as e:
        raise write_failed(db, request_id, "goal", "delete", e)

    write_succeeded(background_tasks, notifier, request_id, user_id, "goal", "delete")


@router.post("/goals/{goal_id}/contributions", response_model=ContributionResponse, status_code=201)
def add_contribution(
    goal_id: str,
    body: ContributionCreate,
    background_tasks: BackgroundTasks,
    request: Request,
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
    notifier: NotificationClient = Depends(get_notification_client),
):
    """
    Add money to a goal.

    The history row and the goal's running total are written in the same
    database transaction.
    """
    request_id = get_request_id(request)
    repo = GoalRepository(db)
    rec = repo.get(user_id, parse_record_id(goal_id))
    if rec is None:
        raise not_found("Goal")

    contribution = GoalContribution(goal_id=str(rec.id), amount=body.amount, date=body.date)
    goal = apply_contribution(goal_to_domain(rec), contribution)

    try:
        contribution_rec = repo.add_contribution(user_id, contribution)
        repo.update(rec, goal)
        db.commit()
    except SQLAlchemyError as e:
        raise write_failed(db, request_id, "goal_contribution", "create", e)

    write_succeeded(background_tasks, notifier, request_id, user_id, "goal_contribution", "create")
    return ContributionResponse(
        goal=to_schema(goal_to_domain(rec)),
        contribution=ContributionSchema.model_validate(contribution_to_domain(contribution_rec)),
    )


@router.get("/goals/{goal_id}/contributions", response_model=ContributionListResponse)
def list_contributions(
    goal_id: str,
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    repo = GoalRepository(db)
    goal_uuid = parse_record_id(goal_id)
    if repo.get(user_id, goal_uuid) is None:
        raise not_found("Goal")

    records = repo.list_contributions(user_id, goal_uuid)
    return ContributionListResponse(
        goal_id=goal_id,
        contributions=[ContributionSchema.model_validate(contribution_to_domain(r)) for r in records],
    )
