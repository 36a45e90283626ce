import asyncio
import logging
import time
from pathlib import Path

import click

from .commands import CountApplications
from .configuration import ManagementApiConfig, load_environment_variables
from .error_handling import classify_error, report_error
from .logging_config import configure_logging, verbosity_to_level
from .management import ManagementApi

logger = logging.getLogger(__name__)


def run_command(command_cls, config: ManagementApiConfig, username: str, password: str):
    """Run one command against a fresh Management API session.

    Every failure ends up in ``report_error`` and terminates the process with
    its exit code.
    """

    async def _run():
        async with ManagementApi.create(config) as api:
            command = command_cls(api, click.echo)
            logger.info(
                f"Running {command.name} against {config.base_url}",
                extra={"command": command.name},
            )
            return await command.run(username, password)

    started = time.perf_counter()
    try:
        result = asyncio.run(_run())
    except (Exception, KeyboardInterrupt) as e:
        context = classify_error(e, operation=command_cls.name)
        raise SystemExit(report_error(context))

    logger.info(
        f"{command_cls.name} finished",
        extra={
            "command": command_cls.name,
            "duration_ms": round((time.perf_counter() - started) * 1000, 1),
        },
    )
    return result


def _build_config(settings: dict) -> ManagementApiConfig:
    try:
        return ManagementApiConfig.from_env(**settings)
    except Exception as e:
        raise SystemExit(report_error(classify_error(e, operation="configuration")))


@click.group()
@click.option("--url", help="Management API root URL [env: APIM_URL]")
@click.option("--organization", help="Organization id [env: APIM_ORGANIZATION]")
@click.option("--environment", help="Environment id [env: APIM_ENVIRONMENT]")
@click.option("--timeout", type=float, help="Request timeout in seconds [env: APIM_TIMEOUT]")
@click.option(
    "--insecure",
    is_flag=True,
    default=None,
    help="Do not verify TLS certificates",
)
@click.option(
    "--env-file",
    type=click.Path(path_type=Path, dir_okay=False),
    help="Read environment variables from this file before ./.env",
)
@click.option("-v", "--verbose", count=True)
@click.option("--json-logs", is_flag=True, help="Emit logs as JSON lines on stderr")
@click.pass_context
def main(
    ctx: click.Context,
    url: str | None,
    organization: str | None,
    environment: str | None,
    timeout: float | None,
    insecure: bool | None,
    env_file: Path | None,
    verbose: int,
    json_logs: bool,
) -> None:
    """APIM CLI - scripts for the API Management Management API"""
    configure_logging(verbosity_to_level(verbose), structured=json_logs)
    load_environment_variables(env_file)

    ctx.obj = {
        "url": url,
        "organization": organization,
        "environment": environment,
        "timeout": timeout,
        "verify_ssl": False if insecure else None,
    }


@main.command("count-applications", help=CountApplications.description)
@click.option("--username", envvar="APIM_USERNAME", required=True, help="[env: APIM_USERNAME]")
@click.option(
    "--password",
    envvar="APIM_PASSWORD",
    prompt=True,
    hide_input=True,
    help="[env: APIM_PASSWORD]",
)
@click.pass_obj
def count_applications(settings: dict, username: str, password: str) -> None:
    config = _build_config(settings)
    run_command(CountApplications, config, username, password)


if __name__ == "__main__":
    main()
