from sqlalchemy import Column, String, Integer, Float, ForeignKey, DateTime, Text, CheckConstraint
from sqlalchemy.orm import relationship
from evaltrack.core.database import Base, new_id

class EvaluationCriteria(Base):
    __tablename__ = "evaluation_criteria"

    id = Column(String(36), primary_key=True, default=new_id)
    name = Column(String, nullable=False)
    description = Column(Text, nullable=False)
    weight = Column(Float)

    scores = relationship("PerformanceScore", back_populates="criteria")

class PerformanceScore(Base):
    __tablename__ = "performance_scores"
    __table_args__ = (
        CheckConstraint("score >= 1 AND score <= 5", name="ck_performance_scores_score_range"),
    )

    id = Column(String(36), primary_key=True, default=new_id)
    employee_id = Column(String(36), ForeignKey("users.id"), nullable=False, index=True)
    criteria_id = Column(String(36), ForeignKey("evaluation_criteria.id"), nullable=False, index=True)
    score = Column(Integer, nullable=False)  # 1-5
    comments = Column(Text)
    evaluation_date = Column(DateTime(timezone=True), nullable=False)
    # Nulled rather than cascaded when the evaluator is deleted
    evaluator_id = Column(String(36), ForeignKey("users.id"), index=True)

    employee = relationship("User", foreign_keys=[employee_id], back_populates="scores_received")
    evaluator = relationship("User", foreign_keys=[evaluator_id])
    criteria = relationship("EvaluationCriteria", back_populates="scores")
