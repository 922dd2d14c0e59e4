"""Repository: leitura do Firestore e acesso ao Cloudinary."""

from typing import Any, Dict, Iterator, List, Optional, Set, Tuple

from aws_lambda_powertools import Logger
from shared.cloudinary_client import AssetEnumerationError, CloudinaryClient
from shared.config import CleanupConfig
from shared.firebase import get_firestore_client

logger = Logger(service="cleanup-orphan-images")


class CleanupOrphanImagesRepository:
    """Consulta documentos no Firestore e lista/deleta imagens no Cloudinary."""

    PRODUCTS_COLLECTION = "products"
    SETTINGS_COLLECTION = "settings"

    def __init__(self, config: CleanupConfig) -> None:
        self.db = get_firestore_client(config)
        self.cloudinary = CloudinaryClient(config)
        self.folder = config.folder
        self.resource_type = config.resource_type
        self.page_size = config.page_size

    def iter_products(self) -> Iterator[Tuple[str, Dict[str, Any]]]:
        """Percorre todos os documentos de products como (id, dados)."""
        for snapshot in self.db.collection(self.PRODUCTS_COLLECTION).stream():
            yield snapshot.id, snapshot.to_dict() or {}

    def get_settings(self, key: str) -> Optional[Dict[str, Any]]:
        """Retorna settings/{key} ou None se o documento não existir."""
        snapshot = self.db.collection(self.SETTINGS_COLLECTION).document(key).get()
        if not snapshot.exists:
            return None
        return snapshot.to_dict() or {}

    def list_stored_public_ids(self) -> List[str]:
        """
        Lista todos os public_ids da pasta no Cloudinary, página a página,
        seguindo o next_cursor até a última página. Mantém a ordem da listagem.

        Raises:
            AssetEnumerationError: Se qualquer página falhar ou vier malformada.
        """
        expression = f"resource_type:{self.resource_type} AND folder={self.folder}"
        public_ids: List[str] = []
        seen: Set[str] = set()
        next_cursor: Optional[str] = None
        pages = 0

        while True:
            page = self.cloudinary.search_page(expression, self.page_size, next_cursor)
            pages += 1
            resources = page.get("resources") or []
            if not isinstance(resources, list):
                raise AssetEnumerationError(f"Página {pages} da listagem sem lista de resources")
            for resource in resources:
                public_id = resource.get("public_id") if isinstance(resource, dict) else None
                if not public_id:
                    logger.warning("Resource sem public_id ignorado", extra={"page": pages})
                    continue
                if public_id not in seen:
                    seen.add(public_id)
                    public_ids.append(public_id)
            next_cursor = page.get("next_cursor")
            if not next_cursor:
                break

        logger.debug("Listagem do Cloudinary concluída", extra={"pages": pages})
        return public_ids

    def delete_resources(self, public_ids: List[str]) -> Dict[str, Any]:
        return self.cloudinary.delete_resources(public_ids)
