import logging

from .db_connection import engine, Base

logger = logging.getLogger(__name__)


def importar_models():
    """Importa todos os models para registrá-los no metadata do SQLAlchemy"""
    from app.api.cadastros.models.model_contact import ContactModel
    from app.api.cadastros.models.model_unit import UnitModel
    from app.api.billing.models.model_contract import ContractModel
    from app.api.billing.models.model_payment import PaymentModel
    from app.api.notifications.models.notification import Notification, NotificationLog
    from app.api.notifications.models.preference import NotificationPreference
    from app.api.notifications.models.job_run import SchedulerJobRun
    logger.info("📦 Models importados com sucesso.")


def criar_tabelas(bind=None):
    """Cria as tabelas que ainda não existem (checkfirst)"""
    importar_models()
    Base.metadata.create_all(bind=bind or engine, checkfirst=True)
    logger.info("✅ Tabelas criadas/verificadas com sucesso.")


def inicializar_banco():
    logger.info("🚀 Iniciando processo de inicialização do banco de dados...")
    try:
        criar_tabelas()
    except Exception as e:
        logger.error(f"❌ Erro ao criar tabelas: {e}", exc_info=True)
        raise
    logger.info("✅ Banco inicializado com sucesso.")
