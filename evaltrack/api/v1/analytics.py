from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from evaltrack.core.database import get_db
from evaltrack.services.analytics_service import evaluation_distribution, performance_trends

router = APIRouter()


@router.get("/evaluation-distribution")
def get_evaluation_distribution(db: Session = Depends(get_db)):
    """Count of scores per rating band."""
    return evaluation_distribution(db)


@router.get("/performance-trends")
def get_performance_trends(db: Session = Depends(get_db)):
    """Average score for each of the last six calendar months."""
    return performance_trends(db)
