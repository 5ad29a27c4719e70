"""
Stream API CLI.

Thin command-line wrapper over StreamAPI: one subcommand per endpoint.
"""

import argparse
import json
import sys

from dotenv import load_dotenv

from stream_client.api import StreamAPI
from stream_client.cache import RedisCache
from stream_client.config import get_settings
from stream_client.logging import configure_logging


def _split_fields(value):
    if not value:
        return []
    return [field.strip() for field in value.split(",") if field.strip()]


def cmd_validate_key(api, args):
    """Validate the configured API key."""
    return api.validate_key(allow_cache=not args.no_cache)


def cmd_get_user(api, args):
    """Fetch a single user."""
    return api.get_user(args.user_id, allow_cache=not args.no_cache)


def cmd_get_record(api, args):
    """Fetch a single record."""
    return api.get_record(
        args.record_id, fields=_split_fields(args.fields), allow_cache=not args.no_cache
    )


def cmd_get_records(api, args):
    """Fetch all records for the site."""
    return api.get_records(fields=_split_fields(args.fields), allow_cache=not args.no_cache)


def cmd_new_record(api, args):
    """Create a record from a JSON object."""
    try:
        record = json.loads(args.record)
    except ValueError as e:
        raise SystemExit(f"Invalid record JSON: {e}")
    if not isinstance(record, dict):
        raise SystemExit("Record JSON must be an object")
    return api.new_record(record, fields=_split_fields(args.fields))


def cmd_cache_status(api, args):
    """Show cache backend status."""
    if isinstance(api.cache, RedisCache):
        return api.cache.health_check()
    return {"backend": type(api.cache).__name__, "entries": len(api.cache)}


def cmd_cache_clear(api, args):
    """Drop every cached response."""
    return {"deleted": api.clear_cache()}


COMMANDS = {
    "validate-key": cmd_validate_key,
    "get-user": cmd_get_user,
    "get-record": cmd_get_record,
    "get-records": cmd_get_records,
    "new-record": cmd_new_record,
    "cache-status": cmd_cache_status,
    "cache-clear": cmd_cache_clear,
}


def build_parser():
    parser = argparse.ArgumentParser(
        prog="stream-api",
        description="Stream API client - query and create records from the command line",
    )
    parser.add_argument("--no-cache", action="store_true", help="Bypass the response cache")
    parser.add_argument("--format", choices=["json", "pretty"], default="pretty")
    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    subparsers.add_parser("validate-key", help="Validate the configured API key")

    get_user_parser = subparsers.add_parser("get-user", help="Get a user by ID")
    get_user_parser.add_argument("user_id", help="Numeric user ID")

    get_record_parser = subparsers.add_parser("get-record", help="Get a record by ID")
    get_record_parser.add_argument("record_id", help="Record ID")
    get_record_parser.add_argument("--fields", help="Comma-separated list of fields")

    get_records_parser = subparsers.add_parser("get-records", help="List the site's records")
    get_records_parser.add_argument("--fields", help="Comma-separated list of fields")

    new_record_parser = subparsers.add_parser("new-record", help="Create a record")
    new_record_parser.add_argument("record", help="Record as a JSON object")
    new_record_parser.add_argument("--fields", help="Comma-separated list of fields")

    subparsers.add_parser("cache-status", help="Show cache status")
    subparsers.add_parser("cache-clear", help="Clear cached responses")

    return parser


def _dump(payload, fmt):
    if fmt == "json":
        return json.dumps(payload, default=str)
    return json.dumps(payload, indent=2, sort_keys=True, default=str)


def main(argv=None, api=None):
    """Main entry point with CLI interface. Returns the process exit code."""
    load_dotenv()

    parser = build_parser()
    args = parser.parse_args(argv)

    if args.command not in COMMANDS:
        parser.print_help()
        return 2

    configure_logging(get_settings().log_level)

    owns_api = api is None
    api = api or StreamAPI()
    try:
        payload = COMMANDS[args.command](api, args)
    finally:
        if owns_api:
            api.close()

    if payload is False:
        errors = dict(api.errors)
        if api.last_error is not None and not errors:
            errors["detail"] = api.last_error.detail
        print(_dump({"errors": errors}, args.format), file=sys.stderr)
        return 1

    print(_dump(payload, args.format))
    return 0


if __name__ == "__main__":
    sys.exit(main())
