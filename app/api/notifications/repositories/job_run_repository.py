from sqlalchemy.orm import Session
from sqlalchemy import desc
from typing import List, Optional
from datetime import datetime
import logging

from ..models.job_run import SchedulerJobRun

logger = logging.getLogger(__name__)

class JobRunRepository:
    """Histórico das execuções do agendador"""

    def __init__(self, db: Session):
        self.db = db

    def start(self, job: str, trigger: str, started_at: datetime) -> SchedulerJobRun:
        try:
            run = SchedulerJobRun(job=job, trigger=trigger, status="running", started_at=started_at)
            self.db.add(run)
            self.db.commit()
            self.db.refresh(run)
            return run
        except Exception as e:
            self.db.rollback()
            logger.error(f"Erro ao registrar início do job {job}: {e}")
            raise

    def finish(
        self,
        run: SchedulerJobRun,
        status: str,
        finished_at: datetime,
        processed: int = 0,
        sent: int = 0,
        error: Optional[str] = None,
    ) -> SchedulerJobRun:
        try:
            run.status = status
            run.finished_at = finished_at
            run.processed = processed
            run.sent = sent
            run.error = error
            self.db.commit()
            self.db.refresh(run)
            return run
        except Exception as e:
            self.db.rollback()
            logger.error(f"Erro ao registrar fim do job {run.job}: {e}")
            raise

    def list_recent(self, job: Optional[str] = None, limit: int = 50) -> List[SchedulerJobRun]:
        query = self.db.query(SchedulerJobRun)
        if job:
            query = query.filter(SchedulerJobRun.job == job)
        return query.order_by(desc(SchedulerJobRun.started_at), desc(SchedulerJobRun.id)).limit(limit).all()
