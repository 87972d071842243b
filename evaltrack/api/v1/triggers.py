from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
from typing import List
from evaltrack.core.database import get_db
from evaltrack.core.exceptions import NotFound
from evaltrack.core.permissions import Caller
from evaltrack.models.notification import AutoMessageTrigger
from evaltrack.schemas.notification import TriggerCreate, TriggerUpdate, TriggerResponse
from evaltrack.api.v1.dependencies import get_current_caller, get_current_admin

router = APIRouter()


def _get_trigger_or_404(db: Session, trigger_id: str) -> AutoMessageTrigger:
    trigger = db.get(AutoMessageTrigger, trigger_id)
    if trigger is None:
        raise NotFound("Auto message trigger not found")
    return trigger


@router.get("", response_model=List[TriggerResponse])
def list_triggers(
    db: Session = Depends(get_db),
    caller: Caller = Depends(get_current_caller)
):
    return db.query(AutoMessageTrigger).order_by(AutoMessageTrigger.event_name.asc()).all()


@router.post("", response_model=TriggerResponse, status_code=status.HTTP_201_CREATED)
def create_trigger(
    trigger_in: TriggerCreate,
    db: Session = Depends(get_db),
    caller: Caller = Depends(get_current_admin)
):
    trigger = AutoMessageTrigger(**trigger_in.model_dump())
    db.add(trigger)
    db.commit()
    db.refresh(trigger)
    return trigger


@router.get("/{trigger_id}", response_model=TriggerResponse)
def get_trigger(
    trigger_id: str,
    db: Session = Depends(get_db),
    caller: Caller = Depends(get_current_caller)
):
    return _get_trigger_or_404(db, trigger_id)


@router.put("/{trigger_id}", response_model=TriggerResponse)
def update_trigger(
    trigger_id: str,
    trigger_update: TriggerUpdate,
    db: Session = Depends(get_db),
    caller: Caller = Depends(get_current_admin)
):
    trigger = _get_trigger_or_404(db, trigger_id)
    for field, value in trigger_update.model_dump(exclude_unset=True).items():
        if value is None and field != "days_before_event":
            continue
        setattr(trigger, field, value)
    db.commit()
    db.refresh(trigger)
    return trigger


@router.delete("/{trigger_id}")
def delete_trigger(
    trigger_id: str,
    db: Session = Depends(get_db),
    caller: Caller = Depends(get_current_admin)
):
    trigger = _get_trigger_or_404(db, trigger_id)
    db.delete(trigger)
    db.commit()
    return {"message": "Auto message trigger deleted successfully"}
