"""
Configuration Schemas.

Pydantic models defining the expected structure of each YAML config file.
Used by AppConfig to validate configuration at load time. If a YAML file
has missing keys, wrong types, or unknown fields, a clear ValidationError
is raised at startup instead of a cryptic KeyError deep in application code.

Each top-level class corresponds to one file in config/settings/:
    ApplicationSchema   → application.yaml
    DatabaseSchema      → database.yaml
    LoggingSchema       → logging.yaml
    FeaturesSchema      → features.yaml
    SecuritySchema      → security.yaml
    ObservabilitySchema → observability.yaml
    ConcurrencySchema   → concurrency.yaml
    EventsSchema        → events.yaml
    CreditsSchema       → credits.yaml
    IntegrationsSchema  → integrations.yaml
"""

from pydantic import BaseModel, ConfigDict


class _StrictBase(BaseModel):
    """Base with extra='forbid' so unknown YAML keys are caught immediately."""

    model_config = ConfigDict(extra="forbid")


# =============================================================================
# application.yaml
# =============================================================================


class ServerSchema(_StrictBase):
    host: str
    port: int


class CorsSchema(_StrictBase):
    origins: list[str]


class ApplicationSchema(_StrictBase):
    name: str
    version: str
    description: str
    environment: str
    debug: bool
    api_prefix: str
    docs_enabled: bool
    server: ServerSchema
    cors: CorsSchema


# =============================================================================
# database.yaml
# =============================================================================


class BrokerSchema(_StrictBase):
    queue_name: str
    result_expiry_seconds: int


class RedisSchema(_StrictBase):
    host: str
    port: int
    db: int
    broker: BrokerSchema


class DatabaseSchema(_StrictBase):
    host: str
    port: int
    name: str
    user: str
    url: str | None = None
    pool_size: int
    max_overflow: int
    pool_timeout: int
    pool_recycle: int
    echo: bool
    echo_pool: bool
    redis: RedisSchema


# =============================================================================
# logging.yaml
# =============================================================================


class ConsoleHandlerSchema(_StrictBase):
    enabled: bool


class FileHandlerSchema(_StrictBase):
    enabled: bool
    path: str
    max_bytes: int
    backup_count: int


class HandlersSchema(_StrictBase):
    console: ConsoleHandlerSchema
    file: FileHandlerSchema


class LoggingSchema(_StrictBase):
    level: str
    format: str
    handlers: HandlersSchema


# =============================================================================
# features.yaml
# =============================================================================


class FeaturesSchema(_StrictBase):
    auth_rate_limit_enabled: bool
    api_detailed_errors: bool
    security_startup_checks_enabled: bool
    events_enabled: bool
    events_publish_enabled: bool
    realtime_notifications_enabled: bool
    ai_tools_enabled: bool
    billing_enabled: bool


# =============================================================================
# security.yaml
# =============================================================================


class JwtSchema(_StrictBase):
    algorithm: str
    access_token_expire_minutes: int
    refresh_token_expire_days: int
    audience: str


class ApiRateLimitSchema(_StrictBase):
    requests_per_minute: int
    requests_per_hour: int


class RateLimitingSchema(_StrictBase):
    api: ApiRateLimitSchema


class SecretsValidationSchema(_StrictBase):
    jwt_secret_min_length: int


class CorsEnforcementSchema(_StrictBase):
    enforce_in_production: bool
    allow_methods: list[str]
    allow_headers: list[str]


class RolesSchema(_StrictBase):
    admin_emails: list[str]
    super_user_emails: list[str]


class SecuritySchema(_StrictBase):
    jwt: JwtSchema
    rate_limiting: RateLimitingSchema
    secrets_validation: SecretsValidationSchema
    cors: CorsEnforcementSchema
    roles: RolesSchema


# =============================================================================
# observability.yaml
# =============================================================================


class HealthChecksSchema(_StrictBase):
    ready_timeout_seconds: int


class ObservabilitySchema(_StrictBase):
    health_checks: HealthChecksSchema


# =============================================================================
# concurrency.yaml
# =============================================================================


class SemaphoresSchema(_StrictBase):
    external_api: int
    llm: int


class ConcurrencySchema(_StrictBase):
    semaphores: SemaphoresSchema


# =============================================================================
# events.yaml
# =============================================================================


class EventBrokerSchema(_StrictBase):
    type: str


class EventStreamsSchema(_StrictBase):
    default_maxlen: int


class CircuitBreakerSchema(_StrictBase):
    fail_max: int
    timeout_duration: int


class RetrySchema(_StrictBase):
    max_attempts: int
    backoff_multiplier: int
    backoff_max: int


class ConsumerConfigSchema(_StrictBase):
    stream: str
    group: str
    criticality: str
    circuit_breaker: CircuitBreakerSchema
    retry: RetrySchema
    processing_timeout: int


class EventDlqSchema(_StrictBase):
    enabled: bool
    stream_prefix: str


class EventsSchema(_StrictBase):
    broker: EventBrokerSchema
    streams: EventStreamsSchema
    consumers: dict[str, ConsumerConfigSchema]
    dlq: EventDlqSchema


# =============================================================================
# credits.yaml
# =============================================================================


class AiCostsSchema(_StrictBase):
    generate_script: int
    enhance_script: int
    analyze_script: int


class ReferralDefaultsSchema(_StrictBase):
    referrer_reward: int
    referred_reward: int
    minimum_spend: int
    max_uses: int


class CreditsSchema(_StrictBase):
    signup_credits: int
    super_user_balance: int
    welcome_package_credits: int
    monthly_veteran_credits: int
    military_discount_percent: int
    ai_costs: AiCostsSchema
    referral: ReferralDefaultsSchema


# =============================================================================
# integrations.yaml
# =============================================================================


class OpenAISchema(_StrictBase):
    base_url: str
    chat_model: str
    image_model: str
    image_size: str
    image_quality: str
    timeout_seconds: int
    circuit_breaker: CircuitBreakerSchema
    retry: RetrySchema


class StripeSchema(_StrictBase):
    base_url: str
    currency: str
    timeout_seconds: int
    circuit_breaker: CircuitBreakerSchema
    retry: RetrySchema


class IntegrationsSchema(_StrictBase):
    openai: OpenAISchema
    stripe: StripeSchema
