"""Main entry point for Datadog MCP server."""

import argparse
import asyncio
import sys
from pathlib import Path

import structlog
from dotenv import load_dotenv

from . import __version__
from .config import DatadogConfig
from .error_handler import ErrorHandler
from .exceptions import ConfigurationError
from .server import DatadogMCPServer


def parse_arguments(argv=None) -> argparse.Namespace:
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(
        description="Datadog MCP Server - Model Context Protocol server for Datadog",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Environment Variables:
  DD_API_KEY              Datadog API key
  DD_APP_KEY              Datadog application key
  DD_SITE                 Datadog site (default: datadoghq.com)
  DD_LOGS_SITE            Site override, takes precedence over DD_SITE
  DD_MCP_LOG_LEVEL        Log level: DEBUG, INFO, WARNING, ERROR, CRITICAL (default: INFO)
  DD_MCP_LOG_FORMAT       Log format: json, text (default: json)

Examples:
  export DD_API_KEY="your_api_key"
  export DD_APP_KEY="your_app_key"
  datadog-mcp

  DD_SITE=datadoghq.eu DD_MCP_LOG_FORMAT=text datadog-mcp
        """
    )

    parser.add_argument(
        "--config-file",
        type=Path,
        help="Path to a JSON configuration file (environment variables take precedence)"
    )

    parser.add_argument(
        "--validate-config",
        action="store_true",
        help="Validate configuration and exit"
    )

    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="Override log level from environment"
    )

    parser.add_argument(
        "--log-format",
        choices=["json", "text"],
        help="Override log format from environment"
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}"
    )

    return parser.parse_args(argv)


def load_configuration(args: argparse.Namespace) -> DatadogConfig:
    """Load configuration from .env, environment, optional file and arguments."""
    load_dotenv()

    try:
        config = DatadogConfig.from_env_and_file(args.config_file)
    except ConfigurationError as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        print("\nPlease check your configuration file format and environment variable values.", file=sys.stderr)
        sys.exit(1)

    overrides = {}
    if args.log_level:
        overrides["log_level"] = args.log_level
    if args.log_format:
        overrides["log_format"] = args.log_format
    if overrides:
        config = config.model_copy(update=overrides)

    return config


def validate_configuration(config: DatadogConfig) -> None:
    """Print a configuration report; exit non-zero when credentials are missing."""
    summary = config.get_validation_summary()
    current = summary["config"]

    print("=" * 60)
    print("DATADOG MCP SERVER - CONFIGURATION VALIDATION")
    print("=" * 60)

    print("\nCurrent Configuration:")
    print(f"  API Key: {'configured' if current['api_key_set'] else 'missing'}")
    print(f"  App Key: {'configured' if current['app_key_set'] else 'missing'}")
    print(f"  Site: {current['resolved_site']}")
    print(f"  Log Level: {current['log_level']}")
    print(f"  Log Format: {current['log_format']}")
    print(f"  Server Name: {current['server_name']}")
    print(f"  Server Version: {current['server_version']}")

    if summary["errors"]:
        print("\nCONFIGURATION ERRORS:")
        for field, message in summary["errors"].items():
            print(f"  - {field}: {message}")

    print("\n" + "=" * 60)
    if summary["valid"]:
        print("CONFIGURATION IS VALID - Server can start")
        print("=" * 60)
    else:
        print("CONFIGURATION IS INCOMPLETE - Please fix the errors above")
        print("=" * 60)
        sys.exit(1)


async def main_async(args: argparse.Namespace) -> None:
    """Async main function."""
    config = load_configuration(args)

    if args.validate_config:
        validate_configuration(config)
        return

    ErrorHandler.configure_logging(log_level=config.log_level, log_format=config.log_format)
    logger = structlog.get_logger(__name__)

    # search-logs accepts keys per call, so missing ones only warrant a warning
    for field, message in config.validate_required_fields().items():
        logger.warning("Configuration warning", field=field, message=message)

    server = DatadogMCPServer(config)
    try:
        await server.start()
        await server.run_stdio()
    except Exception as e:
        logger.error("Failed to run server", error=str(e), exc_info=True)
        raise
    finally:
        await server.shutdown()


def main() -> None:
    """Main entry point for the server."""
    args = parse_arguments()
    try:
        asyncio.run(main_async(args))
    except KeyboardInterrupt:
        print("\nShutdown complete", file=sys.stderr)
        sys.exit(0)
    except Exception as e:
        print(f"Fatal error: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
