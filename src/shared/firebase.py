import firebase_admin
from firebase_admin import credentials, firestore
from aws_lambda_powertools import Logger

from shared.config import CleanupConfig

logger = Logger(service="firebase")

FIREBASE_APP_NAME = "cleanup-orphan-images"


def _build_credentials(config: CleanupConfig) -> credentials.Certificate:
    cred_dict = {
        "type": "service_account",
        "project_id": config.firebase_project_id,
        "private_key": config.firebase_private_key,
        "client_email": config.firebase_client_email,
        "token_uri": "https://oauth2.googleapis.com/token",
    }
    return credentials.Certificate(cred_dict)


def get_firestore_client(config: CleanupConfig):
    """
    Initializes Firebase Admin SDK with the service account from config.

    The app is registered under its own name so a warm Lambda container
    reuses it instead of initializing twice.

    Returns:
        google.cloud.firestore.Client bound to the project in config.
    """
    try:
        app = firebase_admin.get_app(FIREBASE_APP_NAME)
        logger.info("Firebase Admin SDK already initialized (reusing existing app)")
    except ValueError:
        try:
            app = firebase_admin.initialize_app(
                _build_credentials(config),
                {"projectId": config.firebase_project_id},
                name=FIREBASE_APP_NAME,
            )
            logger.info("Firebase Admin SDK initialized successfully")
        except Exception as e:
            logger.error(f"Failed to initialize Firebase: {str(e)}")
            raise

    return firestore.client(app)
