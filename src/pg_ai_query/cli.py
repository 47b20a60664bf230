"""Command-line entrypoint for pg-ai-query."""

from __future__ import annotations

import argparse
import json
import sys

from pydantic import ValidationError

from pg_ai_query import __version__
from pg_ai_query.config import ConfigError, Settings, load_settings
from pg_ai_query.db.inspector import SchemaInspector
from pg_ai_query.formatting import format_outcome
from pg_ai_query.generator import QueryGenerator
from pg_ai_query.logging_config import setup_logging
from pg_ai_query.models.generation import GenerationRequest, ProviderPreference
from pg_ai_query.prompts import build_prompt


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="pg-ai-query",
        description=(
            "Generate PostgreSQL queries from natural language, grounded in "
            "live catalog metadata."
        ),
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )
    parser.add_argument(
        "--config",
        default=None,
        help="Path to the config file (default: $PG_AI_CONFIG or ~/.pg_ai.config).",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Write debug logs to stderr regardless of [general] settings.",
    )

    subparsers = parser.add_subparsers(dest="command")
    subparsers.add_parser(
        "config-check",
        help="Show the loaded configuration with credentials redacted.",
    )
    subparsers.add_parser(
        "list-tables",
        help="List user tables with approximate row counts as JSON.",
    )
    describe_parser = subparsers.add_parser(
        "describe-table",
        help="Describe columns and indexes of one table as JSON.",
    )
    describe_parser.add_argument("table_name", help="Table to describe.")
    describe_parser.add_argument(
        "--schema",
        default="public",
        help="Schema containing the table (default: public).",
    )
    prompt_parser = subparsers.add_parser(
        "build-prompt",
        help="Print the system and user prompts for a request.",
    )
    prompt_parser.add_argument("question", help="Natural language request.")
    generate_parser = subparsers.add_parser(
        "generate",
        help="Generate a SQL query for a natural language request.",
    )
    generate_parser.add_argument("question", help="Natural language request.")
    generate_parser.add_argument(
        "--api-key",
        default=None,
        help="API key for this call; overrides configured keys.",
    )
    generate_parser.add_argument(
        "--provider",
        choices=[preference.value for preference in ProviderPreference],
        default=ProviderPreference.AUTO.value,
        help="LLM provider to use (default: auto).",
    )
    generate_parser.add_argument(
        "--json",
        action="store_true",
        help="Print the full outcome as JSON instead of formatted output.",
    )
    return parser


def _redact(value: str) -> str:
    return "***" if value else "(not set)"


def _print_config(settings: Settings) -> None:
    print("Configuration loaded successfully:")
    print(f"- config_path: {settings.config_path}")
    print(f"- POSTGRES_DSN: {settings.postgres_dsn or '(not set)'}")
    print(f"- log_level: {settings.general.log_level}")
    print(f"- enable_logging: {settings.general.enable_logging}")
    print(f"- request_timeout_ms: {settings.general.request_timeout_ms}")
    print(f"- max_retries: {settings.general.max_retries}")
    print(f"- enforce_limit: {settings.query.enforce_limit}")
    print(f"- default_limit: {settings.query.default_limit}")
    for profile in settings.providers:
        default_model = profile.default_model.name if profile.default_model else "(none)"
        source = f" ({profile.api_key_source})" if profile.api_key_source else ""
        print(f"- {profile.provider.value}:")
        print(f"  api_key: {_redact(profile.api_key)}{source}")
        print(f"  default_model: {default_model}")


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return 0

    try:
        settings = load_settings(args.config)
    except ConfigError as exc:
        print(f"Configuration error:\n{exc}", file=sys.stderr)
        return 2
    setup_logging(settings.general, debug=args.debug)

    if args.command == "config-check":
        _print_config(settings)
        return 0

    if args.command in ("list-tables", "describe-table"):
        try:
            settings.validate_catalog_requirements()
        except ConfigError as exc:
            print(f"Configuration error:\n{exc}", file=sys.stderr)
            return 2
        generator = QueryGenerator.from_settings(settings)

        if args.command == "list-tables":
            schema = generator.list_tables()
            if not schema.success:
                print(f"Listing tables failed:\n{schema.error_message}", file=sys.stderr)
                return 1
            print(json.dumps([table.to_dict() for table in schema.tables], indent=2))
            return 0

        details = generator.describe_table(args.table_name, args.schema)
        if not details.success:
            print(f"Describing table failed:\n{details.error_message}", file=sys.stderr)
            return 1
        print(json.dumps(details.to_dict(), indent=2))
        return 0

    if args.command == "build-prompt":
        inspector = (
            SchemaInspector.from_dsn(settings.postgres_dsn)
            if settings.postgres_dsn
            else None
        )
        bundle = build_prompt(args.question, inspector)
        print(
            "- mentioned_tables: "
            f"{', '.join(bundle.mentioned_tables) if bundle.mentioned_tables else '(none)'}"
        )
        print("\n--- SYSTEM PROMPT ---")
        print(bundle.system_prompt)
        print("\n--- USER PROMPT ---")
        print(bundle.user_prompt)
        return 0

    if args.command == "generate":
        try:
            request = GenerationRequest(
                natural_language=args.question,
                api_key=args.api_key,
                provider=args.provider,
            )
        except ValidationError as exc:
            print(f"Invalid request:\n{exc}", file=sys.stderr)
            return 2

        outcome = QueryGenerator.from_settings(settings).generate(request)
        if args.json:
            print(json.dumps(outcome.model_dump(mode="json"), indent=2))
        elif outcome.success:
            print(format_outcome(outcome, settings.response))
        else:
            print(format_outcome(outcome, settings.response), file=sys.stderr)
        return 0 if outcome.success else 1

    print(f"Command '{args.command}' is not implemented.", file=sys.stderr)
    return 2


if __name__ == "__main__":
    sys.exit(main())
