"""Main module entrypoint for local runtime execution.

This module validates startup configuration and launches the FastAPI service
or submits one job from the command line.
"""

import argparse
import json

import uvicorn

from controlm_facade.bootstrap import bootstrap_create_application, bootstrap_create_services
from controlm_facade.config import config_configure_logging, config_load_settings
from controlm_facade.jobs import SubmissionFailedError


def main() -> None:
    """Run selected runtime command with validated startup configuration.

    Returns:
        None: This function does not return a runtime value.

    Raises:
        SettingsLoadError: Raised when configuration validation fails.
        SystemExit: Raised with code 1 when `job-start` submission fails.
    """

    argument_parser = argparse.ArgumentParser(description="Control-M job facade runtime entrypoint")
    argument_parser.add_argument(
        "command",
        nargs="?",
        default="api",
        choices=("api", "job-start"),
        help="Runtime command: `api` starts server, `job-start` submits one job and prints its execution id",
        type=str,
    )
    argument_parser.add_argument(
        "--job-name",
        dest="job_name",
        type=str,
        help="Job name for `job-start`",
    )
    argument_parser.add_argument(
        "--parameters",
        dest="parameters",
        type=str,
        default="{}",
        help="JSON object of job parameters for `job-start`",
    )
    parsed_arguments = argument_parser.parse_args()

    settings = config_load_settings()
    config_configure_logging(settings.log_level)

    if parsed_arguments.command == "job-start":
        if not parsed_arguments.job_name:
            argument_parser.error("--job-name is required for job-start")
        try:
            parameters = json.loads(parsed_arguments.parameters)
        except json.JSONDecodeError as error:
            argument_parser.error(f"--parameters must be a JSON object: {error}")
        if not isinstance(parameters, dict):
            argument_parser.error("--parameters must be a JSON object")

        services = bootstrap_create_services(settings)
        try:
            start_result = services.orchestrator.job_start(job_name=parsed_arguments.job_name, parameters=parameters)
        except SubmissionFailedError as error:
            print(f"SUBMISSION_FAILED: {error}")
            raise SystemExit(1) from error
        print(start_result.execution_id)
        return

    application = bootstrap_create_application(settings=settings)
    uvicorn.run(
        application,
        host=settings.application_host,
        port=settings.application_port,
    )


if __name__ == "__main__":
    main()
