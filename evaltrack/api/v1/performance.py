from fastapi import APIRouter, Depends, status
from sqlalchemy import func
from sqlalchemy.orm import Session, joinedload
from typing import List
from evaltrack.core.database import get_db
from evaltrack.core.exceptions import AuthorizationDenied, Conflict, InvalidReference, NotFound
from evaltrack.core.logging_config import get_logger
from evaltrack.core.permissions import Caller, can_delete_score, can_record_score
from evaltrack.models.evaluation import EvaluationCriteria, PerformanceScore
from evaltrack.models.user import User
from evaltrack.schemas.evaluation import (
    CriteriaCreate, CriteriaUpdate, CriteriaResponse,
    ScoreCreate, ScoreResponse, ScoreDetailResponse,
)
from evaltrack.services.notification_service import NotificationService
from evaltrack.services.outbox import Outbox, get_outbox
from evaltrack.api.v1.dependencies import get_current_caller, get_current_admin

router = APIRouter()
criteria_router = APIRouter()
logger = get_logger(__name__)


# Performance scores

def _score_query(db: Session):
    return db.query(PerformanceScore).options(
        joinedload(PerformanceScore.employee),
        joinedload(PerformanceScore.criteria),
        joinedload(PerformanceScore.evaluator),
    )


@router.get("", response_model=List[ScoreDetailResponse])
def list_scores(db: Session = Depends(get_db)):
    return _score_query(db).order_by(PerformanceScore.evaluation_date.desc()).all()


@router.post("", response_model=ScoreResponse, status_code=status.HTTP_201_CREATED)
def create_score(
    score_in: ScoreCreate,
    db: Session = Depends(get_db),
    outbox: Outbox = Depends(get_outbox),
    caller: Caller = Depends(get_current_caller)
):
    """
    Record a 1-5 score. The evaluator named in the payload must be the caller.
    """
    if not can_record_score(caller, score_in.evaluator_id):
        logger.warning(f"Caller {caller.id} tried to record a score as {score_in.evaluator_id}")
        raise AuthorizationDenied("Forbidden: You can only record evaluations as yourself.")

    if db.get(User, score_in.employee_id) is None:
        raise InvalidReference("Invalid employee ID for performance score.")
    criteria = db.get(EvaluationCriteria, score_in.criteria_id)
    if criteria is None:
        raise InvalidReference("Invalid criteria ID for performance score.")
    if db.get(User, score_in.evaluator_id) is None:
        raise InvalidReference("Invalid evaluator ID for performance score.")

    score = PerformanceScore(**score_in.model_dump())
    db.add(score)
    db.commit()
    db.refresh(score)

    employee_id, criteria_name = score.employee_id, criteria.name
    if caller.id != employee_id:
        outbox.enqueue("evaluation notification", lambda s: NotificationService(s).notify_evaluation_completed(
            employee_id, caller.id, criteria_name))
    outbox.publish()
    return score


@router.get("/{score_id}", response_model=ScoreDetailResponse)
def get_score(score_id: str, db: Session = Depends(get_db)):
    score = _score_query(db).filter(PerformanceScore.id == score_id).first()
    if score is None:
        raise NotFound("Performance score not found")
    return score


@router.delete("/{score_id}")
def delete_score(
    score_id: str,
    db: Session = Depends(get_db),
    caller: Caller = Depends(get_current_caller)
):
    score = db.get(PerformanceScore, score_id)
    if score is None:
        raise NotFound("Performance score not found")
    if not can_delete_score(caller, score.evaluator_id):
        raise AuthorizationDenied("Forbidden: Only the evaluator or an administrator can delete this score.")
    db.delete(score)
    db.commit()
    return {"message": "Performance score deleted successfully"}


# Evaluation criteria

@criteria_router.get("", response_model=List[CriteriaResponse])
def list_criteria(
    db: Session = Depends(get_db),
    caller: Caller = Depends(get_current_caller)
):
    return db.query(EvaluationCriteria).order_by(EvaluationCriteria.name.asc()).all()


@criteria_router.post("", response_model=CriteriaResponse, status_code=status.HTTP_201_CREATED)
def create_criteria(
    criteria_in: CriteriaCreate,
    db: Session = Depends(get_db),
    caller: Caller = Depends(get_current_admin)
):
    criteria = EvaluationCriteria(**criteria_in.model_dump())
    db.add(criteria)
    db.commit()
    db.refresh(criteria)
    return criteria


@criteria_router.get("/{criteria_id}", response_model=CriteriaResponse)
def get_criteria(
    criteria_id: str,
    db: Session = Depends(get_db),
    caller: Caller = Depends(get_current_caller)
):
    criteria = db.get(EvaluationCriteria, criteria_id)
    if criteria is None:
        raise NotFound("Evaluation criterion not found")
    return criteria


@criteria_router.put("/{criteria_id}", response_model=CriteriaResponse)
def update_criteria(
    criteria_id: str,
    criteria_update: CriteriaUpdate,
    db: Session = Depends(get_db),
    caller: Caller = Depends(get_current_admin)
):
    criteria = db.get(EvaluationCriteria, criteria_id)
    if criteria is None:
        raise NotFound("Evaluation criterion not found")

    update_data = criteria_update.model_dump(exclude_unset=True)
    for field in ("name", "description"):
        if update_data.get(field) is not None:
            setattr(criteria, field, update_data[field])
    if "weight" in update_data:
        criteria.weight = update_data["weight"]

    db.commit()
    db.refresh(criteria)
    return criteria


@criteria_router.delete("/{criteria_id}")
def delete_criteria(
    criteria_id: str,
    db: Session = Depends(get_db),
    caller: Caller = Depends(get_current_admin)
):
    criteria = db.get(EvaluationCriteria, criteria_id)
    if criteria is None:
        raise NotFound("Evaluation criterion not found")

    in_use = db.query(func.count(PerformanceScore.id)).filter(
        PerformanceScore.criteria_id == criteria_id
    ).scalar()
    if in_use:
        raise Conflict(
            "Cannot delete criterion, it is used in performance scores. "
            "Please remove scores first or reassign criteria."
        )

    db.delete(criteria)
    db.commit()
    return {"message": "Evaluation criteria deleted successfully"}
