"""
Cloudinary Admin/Search API client: paginated listing and batched deletion.

Credentials come from CleanupConfig and are passed on every call, so the
SDK's global cloudinary.config() is never touched.
"""

from typing import Any, Dict, List, Optional

import cloudinary
import cloudinary.api
from aws_lambda_powertools import Logger

from shared.config import CleanupConfig

logger = Logger(service="cloudinary")


class AssetEnumerationError(Exception):
    """Raised when a page of the Cloudinary listing cannot be fetched."""

    pass


class CloudinaryClient:
    def __init__(self, config: CleanupConfig) -> None:
        self._credentials = config.cloudinary_credentials()
        self.resource_type = config.resource_type

    def search_page(
        self, expression: str, max_results: int, next_cursor: Optional[str] = None
    ) -> Dict[str, Any]:
        """
        Executa uma página da Search API.

        Returns:
            dict com 'resources' (lista de dicts com 'public_id') e,
            se houver mais páginas, 'next_cursor'.

        Raises:
            AssetEnumerationError: On any SDK or network error.
        """
        search = cloudinary.Search().expression(expression).max_results(max_results)
        if next_cursor:
            search = search.next_cursor(next_cursor)
        try:
            result = search.execute(**self._credentials)
        except Exception as e:
            raise AssetEnumerationError(f"Falha na listagem do Cloudinary: {e}") from e
        return dict(result)

    def delete_resources(self, public_ids: List[str]) -> Dict[str, Any]:
        """
        Deleta até 100 public_ids numa única chamada.

        Returns:
            dict com 'deleted' ({public_id: 'deleted' | 'not_found'}) e 'partial'.

        Raises:
            cloudinary.exceptions.Error: On API error (propagated to the caller).
        """
        result = cloudinary.api.delete_resources(
            public_ids, resource_type=self.resource_type, **self._credentials
        )
        return dict(result)
