#!/usr/bin/env python3
"""
Bravo Zulu Films CLI.

Runs the API, the job worker and scheduler, and the credit event worker,
plus the operational one-shots: health, config, seed, tests, migrations.

Usage:
    python cli.py --service server --verbose
    python cli.py --service server --action restart --port 8099
    python cli.py --service worker --workers 2
    python cli.py --service scheduler
    python cli.py --service event-worker
    python cli.py --service seed
    python cli.py --service migrate --migrate-action autogenerate -m "add referrals"
"""

import asyncio
import os
import signal
import subprocess
import sys
import time
from pathlib import Path

import click
import structlog

PROJECT_ROOT = Path(__file__).parent
sys.path.insert(0, str(PROJECT_ROOT))

from modules.backend.core.logging import get_logger, setup_logging  # noqa: E402

LONG_RUNNING_SERVICES = ("server", "worker", "scheduler", "event-worker")
ONE_SHOT_SERVICES = ("health", "config", "seed", "test", "info", "migrate")

# Migration action -> alembic arguments (revision is appended where needed).
ALEMBIC_COMMANDS = {
    "upgrade": ["upgrade"],
    "downgrade": ["downgrade"],
    "current": ["current"],
    "history": ["history", "--verbose"],
    "autogenerate": ["revision", "--autogenerate"],
}


def fail(message: str, code: int = 1) -> None:
    click.echo(click.style(f"Error: {message}", fg="red"), err=True)
    sys.exit(code)


def _pids_on_port(port: int) -> list[int]:
    result = subprocess.run(["lsof", "-ti", f":{port}"], capture_output=True, text=True)
    return [int(pid) for pid in result.stdout.split() if pid.strip()]


def _stop(logger, service: str, port: int) -> None:
    pids = _pids_on_port(port)
    if not pids:
        click.echo(f"No {service} running on port {port}.")
        return
    for pid in pids:
        os.kill(pid, signal.SIGINT)
        logger.info("Sent SIGINT", extra={"service": service, "pid": pid, "port": port})
    click.echo(f"{service.title()} on port {port} stopped (PID: {', '.join(map(str, pids))}).")


def _status(service: str, port: int) -> None:
    pids = _pids_on_port(port)
    if pids:
        click.echo(f"{service.title()} is running on port {port} (PID: {', '.join(map(str, pids))}).")
    else:
        click.echo(f"{service.title()} is not running on port {port}.")


def _redis_or_exit(logger) -> None:
    from modules.backend.core.config import get_redis_url

    try:
        url = get_redis_url()
    except Exception as e:
        logger.error("Redis configuration unavailable", extra={"error": str(e)})
        fail(f"Redis not configured: {e}")
    logger.debug("Redis configured", extra={"redis_host": url.split("@")[-1]})


def _run_forever(logger, cmd: list[str], label: str) -> None:
    """Run a long-running child process until Ctrl+C."""
    click.echo("Press Ctrl+C to stop\n")
    try:
        subprocess.run(cmd, check=True)
    except KeyboardInterrupt:
        logger.info(f"{label} stopped")
    except subprocess.CalledProcessError as e:
        logger.error(f"{label} exited", extra={"exit_code": e.returncode})
        sys.exit(e.returncode)


# =============================================================================
# Long-running services
# =============================================================================


def run_server(logger, host: str | None, port: int | None, reload: bool) -> None:
    from modules.backend.core.config import get_app_config

    server = get_app_config().application.server
    host, port = host or server.host, port or server.port
    logger.info("Starting API server", extra={"host": host, "port": port, "reload": reload})

    cmd = [sys.executable, "-m", "uvicorn", "modules.backend.main:app", "--host", host, "--port", str(port)]
    if reload:
        cmd.append("--reload")

    click.echo(f"API and /ws at http://{host}:{port}")
    _run_forever(logger, cmd, "Server")


def run_worker(logger, workers: int) -> None:
    """Job worker for monthly credits, subscription expiry and achievement sweeps."""
    _redis_or_exit(logger)
    logger.info("Starting job worker", extra={"workers": workers})
    cmd = [
        sys.executable, "-m", "taskiq", "worker",
        "modules.backend.tasks.broker:broker", "--workers", str(workers),
    ]
    _run_forever(logger, cmd, "Worker")


def run_scheduler(logger) -> None:
    from modules.backend.tasks.scheduled import SCHEDULED_TASKS

    _redis_or_exit(logger)
    logger.info("Starting job scheduler")
    click.echo("Scheduled jobs:")
    for name, config in SCHEDULED_TASKS.items():
        click.echo(f"  {config['schedule'][0]['cron']:<14} {name}")
    click.echo(click.style("Run only ONE scheduler, or every job fires once per process.", fg="yellow"))

    cmd = [sys.executable, "-m", "taskiq", "scheduler", "modules.backend.tasks.scheduler:scheduler"]
    _run_forever(logger, cmd, "Scheduler")


def run_event_worker(logger) -> None:
    """Consumes credits-spent events and re-evaluates achievements."""
    from modules.backend.core.config import get_app_config

    if not get_app_config().features.events_enabled:
        fail("events_enabled is false in features.yaml; enable it to run the event worker.")

    _redis_or_exit(logger)
    logger.info("Starting event worker")
    cmd = [
        sys.executable, "-m", "faststream", "run", "--factory",
        "modules.backend.events.broker:create_event_app",
    ]
    _run_forever(logger, cmd, "Event worker")


# =============================================================================
# One-shot commands
# =============================================================================


def _app_name() -> str:
    from modules.backend.core.config import get_app_config

    return get_app_config().application.name


def _secrets() -> None:
    from modules.backend.core.config import get_settings

    get_settings()


def _app_routes() -> str:
    from modules.backend.main import get_app

    return f"{len(get_app().routes)} routes"


def _health_checks() -> list[tuple[str, bool, str | None]]:
    checks: list[tuple[str, bool, str | None]] = []

    def attempt(name: str, fn) -> None:
        try:
            checks.append((name, True, fn()))
        except Exception as e:
            checks.append((name, False, str(e)))

    attempt("YAML configuration", _app_name)
    attempt("Secrets (config/.env)", _secrets)
    attempt("FastAPI application", _app_routes)

    try:
        from modules.backend.api.health import _run_checks

        results = asyncio.run(_run_checks())
    except Exception as e:
        checks.append(("Dependency checks", False, str(e)))
    else:
        for component, result in results.items():
            healthy = result.get("status") == "healthy"
            checks.append((f"{component.title()} connection", healthy, result.get("error")))
    return checks


def check_health(logger) -> None:
    checks = _health_checks()
    click.echo("Health Check Results:")
    click.echo("-" * 50)
    for name, passed, detail in checks:
        mark = click.style("PASS", fg="green") if passed else click.style("FAIL", fg="red")
        click.echo(f"  {mark}  {name}{f' ({detail})' if detail else ''}")
        if not passed:
            logger.warning("Health check failed", extra={"check": name, "detail": detail})
    click.echo("-" * 50)

    if not all(passed for _, passed, _ in checks):
        click.echo(click.style("Some checks failed.", fg="yellow"))
        sys.exit(1)
    click.echo(click.style("All checks passed.", fg="green"))


def show_config(logger) -> None:
    """Print the YAML-backed settings. Secrets live in config/.env and are never shown."""
    from modules.backend.core.config import get_app_config

    config = get_app_config()
    sections = {
        "Application": config.application,
        "Database": config.database,
        "Logging": config.logging,
        "Feature Flags": config.features,
        "Credits": config.credits,
    }
    for title, section in sections.items():
        click.echo(click.style(title, bold=True))
        for key, value in section.model_dump().items():
            click.echo(f"  {key}: {value}")
        click.echo()
    logger.debug("Configuration displayed")


async def _seed() -> tuple[int, int, int]:
    from modules.backend.core.database import dispose_engine, get_session_factory
    from modules.backend.services.achievement import AchievementService
    from modules.backend.services.billing import BillingService

    try:
        async with get_session_factory()() as session:
            plans = await BillingService(session).init_plans()
            tiers, achievements = await AchievementService(session).init_defaults()
            await session.commit()
    finally:
        await dispose_engine()
    return plans, tiers, achievements


def run_seed(logger) -> None:
    """Create the subscription plans, spending tiers and achievements if missing."""
    logger.info("Seeding reference data")
    try:
        plans, tiers, achievements = asyncio.run(_seed())
    except Exception as e:
        logger.error("Seeding failed", extra={"error": str(e)})
        fail(f"seeding failed: {e}")

    click.echo(f"Plans created: {plans}")
    click.echo(f"Spending tiers created: {tiers}")
    click.echo(f"Achievements created: {achievements}")


def run_tests(logger, test_type: str, coverage: bool) -> None:
    target = {"unit": "tests/unit", "integration": "tests/integration"}.get(test_type, "tests/")
    cmd = [sys.executable, "-m", "pytest", target, "-v"]
    if coverage:
        cmd += ["--cov=modules/backend", "--cov-report=term-missing"]

    logger.info("Running tests", extra={"target": target, "coverage": coverage})
    click.echo(f"Running: {' '.join(cmd)}\n")
    sys.exit(subprocess.run(cmd).returncode)


def run_migrations(logger, migrate_action: str, revision: str, message: str | None) -> None:
    alembic_ini = PROJECT_ROOT / "modules" / "backend" / "migrations" / "alembic.ini"
    if not alembic_ini.exists():
        fail("modules/backend/migrations/alembic.ini not found.")

    args = list(ALEMBIC_COMMANDS[migrate_action])
    if migrate_action in ("upgrade", "downgrade"):
        args.append(revision)
    elif migrate_action == "autogenerate":
        if not message:
            fail("--message/-m is required for autogenerate.")
        args += ["-m", message]

    cmd = [sys.executable, "-m", "alembic", "-c", str(alembic_ini), *args]
    logger.info("Running migration", extra={"action": migrate_action, "revision": revision})
    result = subprocess.run(cmd, cwd=PROJECT_ROOT)
    if result.returncode != 0:
        logger.error("Migration failed", extra={"exit_code": result.returncode})
        sys.exit(result.returncode)


def show_info(logger) -> None:
    from modules.backend.core.config import get_app_config

    app = get_app_config().application
    click.echo(f"{app.name} {app.version} ({app.environment})")
    click.echo(app.description)
    click.echo()
    click.echo("Long-running (--action start|stop|restart|status):")
    click.echo("  server         REST API and /ws notifications")
    click.echo("  worker         taskiq job worker")
    click.echo("  scheduler      cron scheduler for the monthly, daily and nightly jobs")
    click.echo("  event-worker   credit event consumer")
    click.echo("One-shot:")
    click.echo("  health         configuration, app and dependency checks")
    click.echo("  config         print YAML settings")
    click.echo("  seed           default plans, spending tiers and achievements")
    click.echo("  test           run pytest")
    click.echo("  migrate        alembic migrations")
    click.echo("  info           this overview")
    logger.debug("Info displayed")


@click.command()
@click.option(
    "--service", "-s",
    type=click.Choice(LONG_RUNNING_SERVICES + ONE_SHOT_SERVICES),
    default="info",
    help="Service or command to run.",
)
@click.option(
    "--action", "-a",
    type=click.Choice(["start", "stop", "restart", "status"]),
    default="start",
    help="Lifecycle action for long-running services.",
)
@click.option("--verbose", "-v", is_flag=True, help="INFO level logging.")
@click.option("--debug", "-d", is_flag=True, help="DEBUG level logging.")
@click.option("--host", default=None, help="Server host.")
@click.option("--port", default=None, type=int, help="Server port.")
@click.option("--reload", is_flag=True, help="Auto-reload (server only).")
@click.option("--workers", default=1, type=int, help="Job worker processes.")
@click.option(
    "--test-type",
    type=click.Choice(["all", "unit", "integration"]),
    default="all",
    help="Test suite to run.",
)
@click.option("--coverage", is_flag=True, help="Run tests with coverage.")
@click.option(
    "--migrate-action",
    type=click.Choice(list(ALEMBIC_COMMANDS)),
    default="current",
    help="Migration action.",
)
@click.option("--revision", default="head", help="Target revision for upgrade/downgrade.")
@click.option("-m", "--message", default=None, help="Migration message (autogenerate).")
def main(
    service: str,
    action: str,
    verbose: bool,
    debug: bool,
    host: str | None,
    port: int | None,
    reload: bool,
    workers: int,
    test_type: str,
    coverage: bool,
    migrate_action: str,
    revision: str,
    message: str | None,
) -> None:
    """Bravo Zulu Films operations CLI."""
    if not (PROJECT_ROOT / ".project_root").exists():
        fail(".project_root not found. Run from the project root.")

    level = "DEBUG" if debug else "INFO" if verbose else "WARNING"
    setup_logging(level=level, format_type="console")
    structlog.contextvars.bind_contextvars(source="cli")
    logger = get_logger(__name__)
    logger.debug("CLI invoked", extra={"service": service, "action": action})

    if service in LONG_RUNNING_SERVICES and action != "start":
        from modules.backend.core.config import get_app_config

        service_port = port or get_app_config().application.server.port
        if action == "status":
            _status(service, service_port)
            return
        _stop(logger, service, service_port)
        if action == "stop":
            return
        time.sleep(2)

    runners = {
        "server": lambda: run_server(logger, host, port, reload),
        "worker": lambda: run_worker(logger, workers),
        "scheduler": lambda: run_scheduler(logger),
        "event-worker": lambda: run_event_worker(logger),
        "health": lambda: check_health(logger),
        "config": lambda: show_config(logger),
        "seed": lambda: run_seed(logger),
        "test": lambda: run_tests(logger, test_type, coverage),
        "info": lambda: show_info(logger),
        "migrate": lambda: run_migrations(logger, migrate_action, revision, message),
    }
    runners[service]()


if __name__ == "__main__":
    main()
