"""
Configuração do job de limpeza, carregada uma única vez no início do processo.

Expects env: FIREBASE_PROJECT_ID, FIREBASE_CLIENT_EMAIL, FIREBASE_PRIVATE_KEY,
CLOUDINARY_CLOUD_NAME, CLOUDINARY_API_KEY, CLOUDINARY_API_SECRET;
optional CLOUDINARY_FOLDER, CLOUDINARY_RESOURCE_TYPE, CLEANUP_PAGE_SIZE,
CLEANUP_BATCH_SIZE, CLEANUP_DRY_RUN.
"""

import os
from typing import Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field

REQUIRED_ENV_VARS = {
    "firebase_project_id": "FIREBASE_PROJECT_ID",
    "firebase_client_email": "FIREBASE_CLIENT_EMAIL",
    "firebase_private_key": "FIREBASE_PRIVATE_KEY",
    "cloudinary_cloud_name": "CLOUDINARY_CLOUD_NAME",
    "cloudinary_api_key": "CLOUDINARY_API_KEY",
    "cloudinary_api_secret": "CLOUDINARY_API_SECRET",
}

OPTIONAL_ENV_VARS = {
    "folder": "CLOUDINARY_FOLDER",
    "resource_type": "CLOUDINARY_RESOURCE_TYPE",
    "page_size": "CLEANUP_PAGE_SIZE",
    "batch_size": "CLEANUP_BATCH_SIZE",
    "dry_run": "CLEANUP_DRY_RUN",
}


class CleanupConfig(BaseModel):
    """Credenciais do Firestore e do Cloudinary + parâmetros da limpeza."""

    model_config = ConfigDict(frozen=True)

    firebase_project_id: str
    firebase_client_email: str
    firebase_private_key: str
    cloudinary_cloud_name: str
    cloudinary_api_key: str
    cloudinary_api_secret: str
    folder: str = "sundorica"
    resource_type: str = "image"
    # Limites da API do Cloudinary: search até 500, delete_resources até 100.
    page_size: int = Field(500, ge=1, le=500)
    batch_size: int = Field(100, ge=1, le=100)
    dry_run: bool = False

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "CleanupConfig":
        """
        Builds the config from environment variables.

        Raises:
            ValueError: If a required variable is missing or empty.
            pydantic.ValidationError: If an optional value is out of range.
        """
        env = os.environ if environ is None else environ

        missing = [name for name in REQUIRED_ENV_VARS.values() if not env.get(name)]
        if missing:
            raise ValueError(f"Variáveis de ambiente obrigatórias não definidas: {', '.join(missing)}")

        values = {field: env[name] for field, name in REQUIRED_ENV_VARS.items()}
        values["firebase_private_key"] = values["firebase_private_key"].replace("\\n", "\n")
        for field, name in OPTIONAL_ENV_VARS.items():
            if env.get(name):
                values[field] = env[name]
        return cls(**values)

    def cloudinary_credentials(self) -> dict:
        """Options repassadas a cada chamada do SDK do Cloudinary."""
        return {
            "cloud_name": self.cloudinary_cloud_name,
            "api_key": self.cloudinary_api_key,
            "api_secret": self.cloudinary_api_secret,
        }
