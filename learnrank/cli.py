"""learnrank CLI - resolve and validate stored ranking configs.

Example:
    # Resolve a ranking config with request params
    learnrank resolve product-ranker --models-dir ./models --param query="running shoes"

    # Validate a stored ranking config without templating
    learnrank validate product-ranker --models-dir ./models

    # List stored models
    learnrank list --models-dir ./models
"""

import argparse
import asyncio
import json
import logging
import sys
from collections.abc import Sequence
from typing import Any

import yaml

from learnrank.config import load_settings
from learnrank.config.schema import CoreSettings
from learnrank.framework.errors import InvalidConfigError, LearnRankError, to_learnrank_error
from learnrank.ltr.service import LearningToRankService
from learnrank.observability.logging import configure_logging
from learnrank.providers.model_store import FileTrainedModelProvider

logger = logging.getLogger(__name__)


def _build_service(args: argparse.Namespace, settings: CoreSettings) -> LearningToRankService:
    models_dir = args.models_dir or settings.storage.models_dir
    logger.debug("Using model records from %s", models_dir)
    return LearningToRankService.from_settings(
        settings, model_provider=FileTrainedModelProvider(models_dir)
    )


def _parse_params(args: argparse.Namespace) -> dict[str, Any]:
    """Collect template params from --params-file and --param (the latter wins)."""
    params: dict[str, Any] = {}

    if args.params_file:
        try:
            with open(args.params_file, encoding="utf-8") as f:
                loaded = json.load(f)
        except OSError as e:
            msg = f"Failed to read params file {args.params_file}: {e}"
            raise InvalidConfigError(msg, field="params_file") from e
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            msg = f"Params file is not valid JSON: {e}"
            raise InvalidConfigError(msg, field="params_file") from e
        if not isinstance(loaded, dict):
            msg = "Params file must contain a JSON object"
            raise InvalidConfigError(msg, field="params_file")
        params.update(loaded)

    for param in args.param or []:
        if "=" not in param:
            msg = f"Invalid --param [{param}], expected key=value"
            raise InvalidConfigError(msg, field="param")

        key, value = param.split("=", 1)
        # Try to parse as JSON for complex values
        try:
            params[key] = json.loads(value)
        except json.JSONDecodeError:
            params[key] = value

    return params


def _emit(data: Any, output_format: str) -> None:
    if output_format == "yaml":
        sys.stdout.write(yaml.safe_dump(data, sort_keys=False))
    else:
        sys.stdout.write(json.dumps(data, indent=2) + "\n")


def _report_error(exc: Exception) -> int:
    error = to_learnrank_error(exc)
    sys.stderr.write(json.dumps(error.to_dict(), default=str) + "\n")
    return 1


# =============================================================================
# Commands
# =============================================================================


def resolve_command(args: argparse.Namespace, settings: CoreSettings) -> int:
    """Resolve a stored ranking config with request params.

    Returns:
        Exit code (0 for success, 1 for failure)
    """
    try:
        params = _parse_params(args)
        service = _build_service(args, settings)
        config = asyncio.run(service.load_learning_to_rank_config(args.model_id, params))
    except LearnRankError as e:
        return _report_error(e)

    _emit(config.to_dict(), args.format)
    return 0


def validate_command(args: argparse.Namespace, settings: CoreSettings) -> int:
    """Validate a stored ranking config without applying templates."""
    try:
        service = _build_service(args, settings)
        config = asyncio.run(service.load_validated_config(args.model_id))
    except LearnRankError as e:
        return _report_error(e)

    _emit({"model_id": args.model_id, "valid": True, "features": config.feature_names}, "json")
    return 0


def list_command(args: argparse.Namespace, settings: CoreSettings) -> int:
    """List stored model ids."""
    provider = FileTrainedModelProvider(args.models_dir or settings.storage.models_dir)
    _emit({"models": provider.list_model_ids()}, "json")
    return 0


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser for the CLI.

    Returns:
        Configured ArgumentParser
    """
    parser = argparse.ArgumentParser(
        prog="learnrank",
        description="learnrank - ranking config resolution for learning-to-rank models",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  learnrank resolve product-ranker --models-dir ./models --param query="shoes"
  learnrank validate product-ranker --models-dir ./models
        """,
    )

    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        default=None,
        help="Set logging level (default: from configuration)",
    )

    subparsers = parser.add_subparsers(dest="command", help="Command to execute")

    def add_models_dir(subparser: argparse.ArgumentParser) -> None:
        subparser.add_argument(
            "--models-dir",
            "-d",
            default=None,
            help="Directory of stored model records (default: storage.models_dir)",
        )

    resolve_parser = subparsers.add_parser("resolve", help="Resolve a ranking config")
    resolve_parser.add_argument("model_id", help="Trained model id")
    add_models_dir(resolve_parser)
    resolve_parser.add_argument(
        "--param",
        action="append",
        help="Template parameter in format key=value (can be used multiple times)",
    )
    resolve_parser.add_argument(
        "--params-file",
        help="Path to JSON file containing template parameters",
    )
    resolve_parser.add_argument(
        "--format",
        choices=["json", "yaml"],
        default="json",
        help="Output format (default: json)",
    )
    resolve_parser.set_defaults(func=resolve_command)

    validate_parser = subparsers.add_parser("validate", help="Validate a stored ranking config")
    validate_parser.add_argument("model_id", help="Trained model id")
    add_models_dir(validate_parser)
    validate_parser.set_defaults(func=validate_command)

    list_parser = subparsers.add_parser("list", help="List stored models")
    add_models_dir(list_parser)
    list_parser.set_defaults(func=list_command)

    return parser


def main(argv: Sequence[str] | None = None) -> int:
    """Main entry point for the CLI.

    Returns:
        Exit code (0 for success, non-zero for failure)
    """
    parser = create_parser()
    args = parser.parse_args(argv)

    try:
        settings = load_settings()
    except LearnRankError as e:
        return _report_error(e)

    configure_logging(args.log_level or settings.logging.level, settings.logging.json_format)

    if not args.command:
        parser.print_help()
        return 1

    return args.func(args, settings)


if __name__ == "__main__":
    sys.exit(main())
