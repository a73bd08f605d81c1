from sqlalchemy.orm import Session, joinedload
from typing import List, Optional
from datetime import date

from ..models.model_contract import ContractModel


class ContractRepository:
    """Leitura de contratos mantidos pelo CRUD externo"""

    def __init__(self, db: Session):
        self.db = db

    def get_by_id(self, contract_id: str) -> Optional[ContractModel]:
        return self.db.query(ContractModel).filter(ContractModel.id == contract_id).first()

    def get_ending_on(self, end_dates: List[date]) -> List[ContractModel]:
        """Contratos cujo término cai em uma das datas informadas"""
        if not end_dates:
            return []
        return (
            self.db.query(ContractModel)
            .options(joinedload(ContractModel.contact), joinedload(ContractModel.unit))
            .filter(ContractModel.end_date.in_(end_dates))
            .order_by(ContractModel.end_date, ContractModel.id)
            .all()
        )
