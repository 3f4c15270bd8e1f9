"""
Startup Security Validation.

Checks security invariants before the application accepts traffic.
If any check fails, the application refuses to start with a clear
error message. Called during FastAPI lifespan initialization.
"""

from modules.backend.core.config import get_app_config, get_settings
from modules.backend.core.logging import get_logger

logger = get_logger(__name__)


class StartupSecurityError(RuntimeError):
    """Raised when a startup security check fails."""


def run_startup_checks() -> None:
    """
    Validate all security invariants at startup.

    Raises:
        StartupSecurityError: If any check fails
    """
    app_config = get_app_config()
    settings = get_settings()
    environment = app_config.application.environment

    errors: list[str] = []

    _check_secret_strength(settings, app_config.security, errors)
    _check_provider_keys(settings, app_config.features, errors)
    _check_production_safety(app_config, environment == "production", errors)
    _check_roles(app_config.security, errors)

    if errors:
        for error in errors:
            logger.error("Startup security check failed", extra={"check": error})
        raise StartupSecurityError(
            f"Startup blocked, {len(errors)} security check(s) failed:\n"
            + "\n".join(f"  - {e}" for e in errors)
        )

    logger.info(
        "Startup security checks passed",
        extra={"environment": environment, "checks_run": 4},
    )


def _check_secret_strength(settings, security_config, errors: list[str]) -> None:
    """Validate that secrets meet minimum length requirements."""
    jwt_min = security_config.secrets_validation.jwt_secret_min_length
    if len(settings.jwt_secret) < jwt_min:
        errors.append(
            f"JWT_SECRET is {len(settings.jwt_secret)} chars, minimum is {jwt_min}"
        )


def _check_provider_keys(settings, features, errors: list[str]) -> None:
    """Enabled provider features need their API keys."""
    if features.ai_tools_enabled and not settings.openai_api_key:
        errors.append("ai_tools_enabled is true but OPENAI_API_KEY is empty")
    if features.billing_enabled and not settings.stripe_secret_key:
        errors.append("billing_enabled is true but STRIPE_SECRET_KEY is empty")


def _check_production_safety(app_config, is_production: bool, errors: list[str]) -> None:
    """Validate production environment safety constraints."""
    if not is_production:
        return

    app = app_config.application
    if app.debug:
        errors.append("debug is true in production environment")

    if app_config.features.api_detailed_errors:
        errors.append("api_detailed_errors is true in production environment")

    if app.docs_enabled:
        errors.append("docs_enabled is true in production environment")

    if app_config.security.cors.enforce_in_production:
        localhost_origins = [o for o in app.cors.origins if "localhost" in o]
        if localhost_origins:
            errors.append(
                f"CORS origins contain localhost in production: {localhost_origins}"
            )


def _check_roles(security_config, errors: list[str]) -> None:
    """At least one admin must be configured to moderate the community."""
    if not security_config.roles.admin_emails:
        errors.append("security.roles.admin_emails is empty")
