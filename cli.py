#!/usr/bin/env python3
"""
Command-line interface for the subscription event mapper.

Usage:
    uv run python cli.py [command] [options]

Commands:
    hooks       List the hook table
    fire        Fire a hook for a stored subscription
    demo        Run demo scenarios
    test        Run the test suite
    serve       Start the API server

Examples:
    uv run python cli.py hooks
    uv run python cli.py fire woocommerce_subscription_status_active 101
    uv run python cli.py demo lifecycle
    uv run python cli.py serve
"""

import argparse
import json
import logging
import subprocess
import sys


def run_hooks() -> None:
    """Print the hook table."""
    from subscription_events.hooks import HOOK_TABLE

    for spec in HOOK_TABLE.values():
        flags = []
        if spec.passes_id:
            flags.append("id")
        if spec.include_unique:
            flags.append("unique")
        if spec.value_source.value != "none":
            flags.append(f"value:{spec.value_source.value}")
        print(f"{spec.hook_name:<52} -> {spec.event_name:<38} {' '.join(flags)}")


def run_fire(hook_name: str, subscription_id: int) -> None:
    """Fire one hook and print the events it produced."""
    from shared.channels import RecordingChannel, get_channel
    from shared.config import get_settings
    from shared.data_store import DataStore
    from subscription_events.hook_bus import HookBus
    from subscription_events.hooks import get_hook_spec
    from subscription_events.mapper import SubscriptionEventMapper
    from subscription_events.platform import SubscriptionPlatform

    settings = get_settings()
    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s | %(name)-24s | %(levelname)-5s | %(message)s",
        datefmt="%H:%M:%S",
    )

    if get_hook_spec(hook_name) is None:
        print(f"Unknown hook: {hook_name}")
        sys.exit(1)

    hook_bus = HookBus()
    data_store = DataStore(data_dir=settings.data_dir)
    channel = get_channel(settings)

    mapper = SubscriptionEventMapper(hook_bus=hook_bus, data_store=data_store, channel=channel)
    mapper.start()
    try:
        SubscriptionPlatform(hook_bus=hook_bus, data_store=data_store).fire(hook_name, subscription_id)
    except LookupError as e:
        print(e)
        sys.exit(1)
    finally:
        mapper.stop()
        if hasattr(channel, "close"):
            channel.close()

    if isinstance(channel, RecordingChannel):
        for result in channel.sent_events:
            print(json.dumps({
                "user_id": result.user_id,
                "event": result.event_name,
                "email": result.email,
                "details": result.details,
            }, indent=2))


def run_demo(scenario: str) -> None:
    """Run a demo scenario."""
    from subscription_events.demo import (
        run_failed_payment_demo,
        run_guest_trial_demo,
        run_lifecycle_demo,
    )

    if scenario == "lifecycle":
        run_lifecycle_demo()
    elif scenario == "guest-trial":
        run_guest_trial_demo()
    elif scenario == "failed-payment":
        run_failed_payment_demo()
    elif scenario == "all":
        run_lifecycle_demo()
        run_guest_trial_demo()
        run_failed_payment_demo()
    else:
        print(f"Unknown scenario: {scenario}")
        sys.exit(1)


def run_tests(args: list[str]) -> None:
    """Run the test suite."""
    cmd = ["uv", "run", "pytest"] + args
    subprocess.run(cmd)


def run_server(host: str, port: int, reload: bool) -> None:
    """Start the API server."""
    cmd = ["uv", "run", "uvicorn", "api.main:app", f"--host={host}", f"--port={port}"]
    if reload:
        cmd.append("--reload")

    print(f"Starting server at http://{host}:{port}")
    print(f"API docs available at http://{host}:{port}/docs")
    subprocess.run(cmd)


def main() -> None:
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        description="Subscription Event Mapper CLI",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s hooks
  %(prog)s fire woocommerce_scheduled_subscription_payment 101
  %(prog)s demo all
  %(prog)s test -v
  %(prog)s serve --reload
        """,
    )

    subparsers = parser.add_subparsers(dest="command", help="Command to run")

    subparsers.add_parser("hooks", help="List the hook table")

    fire_parser = subparsers.add_parser("fire", help="Fire a hook for a stored subscription")
    fire_parser.add_argument("hook_name", help="Platform hook name")
    fire_parser.add_argument("subscription_id", type=int, help="Subscription id")

    demo_parser = subparsers.add_parser("demo", help="Run demo scenarios")
    demo_parser.add_argument(
        "scenario",
        choices=["lifecycle", "guest-trial", "failed-payment", "all"],
        help="Which scenario to run",
    )

    test_parser = subparsers.add_parser("test", help="Run the test suite")
    test_parser.add_argument(
        "pytest_args",
        nargs="*",
        default=[],
        help="Arguments to pass to pytest",
    )

    serve_parser = subparsers.add_parser("serve", help="Start the API server")
    serve_parser.add_argument("--host", default="127.0.0.1", help="Host to bind to")
    serve_parser.add_argument("--port", type=int, default=8000, help="Port to bind to")
    serve_parser.add_argument("--reload", action="store_true", help="Enable auto-reload")

    args = parser.parse_args()

    if args.command == "hooks":
        run_hooks()
    elif args.command == "fire":
        run_fire(args.hook_name, args.subscription_id)
    elif args.command == "demo":
        run_demo(args.scenario)
    elif args.command == "test":
        run_tests(args.pytest_args)
    elif args.command == "serve":
        run_server(args.host, args.port, args.reload)
    else:
        parser.print_help()


if __name__ == "__main__":
    main()
