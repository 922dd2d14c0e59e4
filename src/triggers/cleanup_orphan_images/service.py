"""Service: lógica de limpeza de imagens órfãs no Cloudinary."""

from typing import Any, Dict, Iterable, List, Optional, Set

from aws_lambda_powertools import Logger
from pydantic import ValidationError
from shared.cloudinary_client import AssetEnumerationError
from shared.config import CleanupConfig

from public_id import extract_public_id
from repository import CleanupOrphanImagesRepository
from schemas import HeroSliderDocument, ProductDocument, SlideEntry, StoreDetailsDocument

logger = Logger(service="cleanup-orphan-images")

STORE_DETAILS_KEY = "store_details"
HERO_SLIDER_KEY = "hero_slider"


class CleanupOrphanImagesService:
    """Remove imagens do Cloudinary não referenciadas em nenhum documento do Firestore."""

    def __init__(self, config: CleanupConfig) -> None:
        self.config = config
        self.repo = CleanupOrphanImagesRepository(config)
        self.source_counts: Dict[str, int] = {}

    def _add_reference(self, safe_ids: Set[str], url: Any, source: str) -> bool:
        public_id = extract_public_id(url)
        if public_id is None:
            # Referência não protegida: o asset pode ser apagado se estiver na listagem.
            logger.warning("Não foi possível extrair public_id", extra={"source": source, "url": url})
            return False
        safe_ids.add(public_id)
        return True

    def _collect_products(self, safe_ids: Set[str]) -> int:
        found = 0
        for product_id, data in self.repo.iter_products():
            try:
                product = ProductDocument.model_validate(data)
            except ValidationError as e:
                logger.warning(
                    "Produto com formato inválido ignorado",
                    extra={"product_id": product_id, "error": str(e)},
                )
                continue
            for url in product.image_urls or []:
                if self._add_reference(safe_ids, url, "products"):
                    found += 1
        return found

    def _collect_store_logo(self, safe_ids: Set[str]) -> int:
        data = self.repo.get_settings(STORE_DETAILS_KEY)
        if data is None:
            return 0
        details = StoreDetailsDocument.model_validate(data)
        if details.logo_url and self._add_reference(safe_ids, details.logo_url, "store_logo"):
            return 1
        return 0

    def _collect_hero_slider(self, safe_ids: Set[str]) -> int:
        data = self.repo.get_settings(HERO_SLIDER_KEY)
        if data is None:
            return 0
        slider = HeroSliderDocument.model_validate(data)
        found = 0
        for position, entry in enumerate(slider.slides or []):
            try:
                slide = SlideEntry.model_validate(entry)
            except ValidationError as e:
                logger.warning(
                    "Slide com formato inválido ignorado",
                    extra={"position": position, "error": str(e)},
                )
                continue
            if slide.image_url and self._add_reference(safe_ids, slide.image_url, "hero_slider"):
                found += 1
        return found

    def collect_referenced_ids(self) -> Set[str]:
        """
        Monta o set de public_ids referenciados (products, logo, hero slider).

        Cada fonte é isolada: se uma falhar, o erro é logado e as demais
        continuam; o que já foi coletado permanece no set.
        """
        safe_ids: Set[str] = set()
        sources = (
            ("products", self._collect_products),
            ("store_logo", self._collect_store_logo),
            ("hero_slider", self._collect_hero_slider),
        )
        for source, collect in sources:
            try:
                self.source_counts[source] = collect(safe_ids)
            except Exception:
                logger.exception("Erro ao coletar referências", extra={"source": source})
                self.source_counts[source] = 0
                continue
            logger.info(
                "Referências encontradas",
                extra={"source": source, "count": self.source_counts[source]},
            )
        logger.info("Total de public_ids seguros", extra={"count": len(safe_ids)})
        return safe_ids

    @staticmethod
    def find_orphans(stored: Iterable[str], referenced: Set[str]) -> List[str]:
        """stored - referenced, na ordem da listagem e sem repetição."""
        orphans: List[str] = []
        seen: Set[str] = set()
        for public_id in stored:
            if public_id in referenced or public_id in seen:
                continue
            seen.add(public_id)
            orphans.append(public_id)
        return orphans

    def delete_in_batches(self, orphans: List[str]) -> Dict[str, int]:
        """
        Deleta em lotes de até batch_size. Um lote com erro é logado e os
        seguintes continuam; 'not_found' conta como já removido.
        """
        batch_size = self.config.batch_size
        totals = {"batches": 0, "deleted_count": 0, "not_found_count": 0, "failed_batches": 0}

        for start in range(0, len(orphans), batch_size):
            batch = orphans[start:start + batch_size]
            totals["batches"] += 1
            try:
                result = self.repo.delete_resources(batch)
            except Exception as e:
                totals["failed_batches"] += 1
                logger.exception(
                    "Falha ao deletar lote",
                    extra={"batch": totals["batches"], "size": len(batch), "error": str(e)},
                )
                continue

            statuses = (result or {}).get("deleted") or {}
            if statuses:
                deleted = sum(1 for status in statuses.values() if status == "deleted")
                not_found = sum(1 for status in statuses.values() if status == "not_found")
            else:
                deleted, not_found = len(batch), 0
            totals["deleted_count"] += deleted
            totals["not_found_count"] += not_found
            logger.info(
                "Lote deletado",
                extra={
                    "batch": totals["batches"],
                    "size": len(batch),
                    "deleted": deleted,
                    "not_found": not_found,
                    "partial": bool((result or {}).get("partial")),
                },
            )
        return totals

    def _summary(self, status: str, referenced: Set[str], stored: Optional[List[str]] = None,
                 orphans: Optional[List[str]] = None, totals: Optional[Dict[str, int]] = None) -> Dict[str, Any]:
        summary: Dict[str, Any] = {
            "status": status,
            "dry_run": self.config.dry_run,
            "referenced_count": len(referenced),
            "stored_count": len(stored or []),
            "orphans_found": len(orphans or []),
            "batches": 0,
            "deleted_count": 0,
            "not_found_count": 0,
            "failed_batches": 0,
            "source_counts": dict(self.source_counts),
        }
        summary.update(totals or {})
        return summary

    def run(self) -> Dict[str, Any]:
        """Executa coleta -> listagem -> diferença -> deleção e retorna o resumo."""
        logger.info("Iniciando limpeza", extra={"folder": self.config.folder, "dry_run": self.config.dry_run})
        self.source_counts = {}
        referenced = self.collect_referenced_ids()

        try:
            stored = self.repo.list_stored_public_ids()
        except AssetEnumerationError:
            logger.exception("Erro ao listar imagens no Cloudinary; nenhuma deleção será feita")
            return self._summary("aborted", referenced)
        logger.info("Imagens no Cloudinary", extra={"folder": self.config.folder, "count": len(stored)})

        orphans = self.find_orphans(stored, referenced)
        logger.info("Órfãs encontradas", extra={"count": len(orphans)})

        if not orphans:
            logger.info("Nenhuma imagem para deletar", extra={"folder": self.config.folder})
            return self._summary("clean", referenced, stored)

        logger.info("Orphans a deletar", extra={"public_ids": orphans})
        if self.config.dry_run:
            return self._summary("completed", referenced, stored, orphans)

        totals = self.delete_in_batches(orphans)
        return self._summary("completed", referenced, stored, orphans, totals)
