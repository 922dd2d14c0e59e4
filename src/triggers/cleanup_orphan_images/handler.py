"""Handler: disparado por EventBridge (cron diário meia-noite UTC)."""

from aws_lambda_powertools import Logger
from shared.config import CleanupConfig

from service import CleanupOrphanImagesService

logger = Logger(service="cleanup-orphan-images")


@logger.inject_lambda_context
def lambda_handler(event, context):
    """Executa limpeza de imagens órfãs na pasta do Cloudinary."""
    try:
        config = CleanupConfig.from_env()
        dry_run = event.get("dry_run") if isinstance(event, dict) else None
        if isinstance(dry_run, bool):
            # Execução manual pode forçar (ou desligar) o modo simulação; só aceita booleano JSON.
            config = config.model_copy(update={"dry_run": dry_run})
        service = CleanupOrphanImagesService(config)
        result = service.run()
        logger.info("Cleanup concluído", extra=result)
        return {"statusCode": 200, "body": result}
    except Exception:
        logger.exception("Erro na limpeza de imagens órfãs")
        raise
