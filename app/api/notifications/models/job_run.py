from sqlalchemy import Column, Integer, String, Text, DateTime
import uuid

from ....database.db_connection import Base

class SchedulerJobRun(Base):
    """Registro de cada execução de job do agendador (automática ou manual)"""
    __tablename__ = "scheduler_job_runs"

    id = Column(String, primary_key=True, default=lambda: str(uuid.uuid4()))
    job = Column(String, nullable=False, index=True)
    trigger = Column(String, nullable=False, default="scheduled")  # scheduled | manual
    status = Column(String, nullable=False, default="running")  # running | success | skipped | error

    processed = Column(Integer, nullable=False, default=0)
    sent = Column(Integer, nullable=False, default=0)
    error = Column(Text, nullable=True)

    started_at = Column(DateTime, nullable=False)
    finished_at = Column(DateTime, nullable=True)
