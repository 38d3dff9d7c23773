"""Build engine collaborators (registry, gateway, Firebase app) from configuration."""

from __future__ import annotations

from typing import Any

from autocenter_events.config.schema import AlignmentConfig, EngineConfig, FirebaseConfig, ServiceConfig
from autocenter_events.delivery.base import ErrorClassifier, PushGateway
from autocenter_events.delivery.dry_run import LoggingPushGateway
from autocenter_events.envelope import Category
from autocenter_events.logging_config import get_logger
from autocenter_events.processor import NotificationEngine
from autocenter_events.registry.base import TokenRegistry
from autocenter_events.registry.sqlite import SqliteTokenRegistry

logger = get_logger(__name__)


def init_firebase_app(config: FirebaseConfig) -> Any:
    """Return the default Firebase app, initializing it on first use."""
    import firebase_admin
    from firebase_admin import credentials

    try:
        return firebase_admin.get_app()
    except ValueError:
        pass

    credential = credentials.Certificate(config.credentials_path) if config.credentials_path else None
    options = {"projectId": config.project_id} if config.project_id else None
    logger.info("initializing firebase app", project_id=config.project_id, explicit_credentials=credential is not None)
    return firebase_admin.initialize_app(credential, options)


def log_trigger_statuses(config: EngineConfig) -> list[Category]:
    """Log the statuses the triggers match; returns categories left on the built-in default."""
    logger.info(
        "trigger statuses",
        alignment=config.alignment.trigger_status,
        service=config.service.trigger_status,
    )
    defaults = {
        Category.ALIGNMENT: (config.alignment.trigger_status, AlignmentConfig.model_fields["trigger_status"].default),
        Category.SERVICE: (config.service.trigger_status, ServiceConfig.model_fields["trigger_status"].default),
    }
    on_default = [category for category, (active, default) in defaults.items() if active == default]
    if on_default:
        logger.warning(
            "trigger status left at built-in default; check that autocenter.yml is deployed",
            categories=[c.value for c in on_default],
        )
    return on_default


def _needs_firebase(config: EngineConfig) -> bool:
    return config.registry.backend == "firestore" or config.gateway.backend == "fcm"


async def build_registry(config: EngineConfig, app: Any = None) -> TokenRegistry:
    if config.registry.backend == "sqlite":
        registry = SqliteTokenRegistry(config.registry.sqlite_path)
        await registry.init()
        return registry

    from autocenter_events.registry.firestore import FirestoreTokenRegistry

    return FirestoreTokenRegistry.from_app(app, collection=config.registry.collection)


def build_gateway(config: EngineConfig, app: Any = None) -> PushGateway:
    if config.gateway.backend == "log":
        return LoggingPushGateway()

    from autocenter_events.delivery.fcm import FcmPushGateway

    classifier = ErrorClassifier(config.gateway.permanent_error_codes, config.gateway.transient_error_codes)
    return FcmPushGateway(classifier, app=app, dry_run=config.gateway.dry_run)


async def build_engine(
    config: EngineConfig,
    *,
    registry: TokenRegistry | None = None,
    gateway: PushGateway | None = None,
) -> NotificationEngine:
    """Assemble an engine; explicit collaborators override the configured backends."""
    app = None
    if (registry is None or gateway is None) and _needs_firebase(config):
        app = init_firebase_app(config.firebase)
    if registry is None:
        registry = await build_registry(config, app)
    if gateway is None:
        gateway = build_gateway(config, app)
    return NotificationEngine.from_config(config, registry, gateway)
