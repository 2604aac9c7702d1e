#!/usr/bin/env python3
"""
Command-line interface for the restaurant ordering services.

Usage:
    uv run python cli.py [command] [options]

Commands:
    serve       Start the catalog or order service
    demo        Run the in-process order lifecycle demo
    test        Run the test suite

Examples:
    uv run python cli.py serve catalog --port 8001
    uv run python cli.py serve orders --port 8000
    uv run python cli.py demo
"""

import argparse
import subprocess
from typing import Optional

SERVICE_APPS = {
    "catalog": ("catalog.api:app", 8001),
    "orders": ("ordering.api:app", 8000),
}


def run_demo() -> None:
    """Run the order lifecycle demo."""
    from ordering.demo import run_order_lifecycle_demo
    run_order_lifecycle_demo()


def run_tests(args: list[str]) -> None:
    """Run the test suite."""
    cmd = ["uv", "run", "pytest"] + args
    subprocess.run(cmd)


def run_server(service: str, host: str, port: Optional[int], reload: bool) -> None:
    """Start one of the services with uvicorn."""
    import uvicorn

    app_path, default_port = SERVICE_APPS[service]
    port = port or default_port

    print(f"Starting {service} service at http://{host}:{port}")
    print(f"API docs available at http://{host}:{port}/docs")
    uvicorn.run(app_path, host=host, port=port, reload=reload)


def main() -> None:
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        description="Restaurant ordering services CLI",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s serve catalog
  %(prog)s serve orders --port 9000 --reload
  %(prog)s demo
  %(prog)s test -v
        """,
    )

    subparsers = parser.add_subparsers(dest="command", help="Command to run")

    serve_parser = subparsers.add_parser("serve", help="Start a service")
    serve_parser.add_argument("service", choices=sorted(SERVICE_APPS), help="Which service")
    serve_parser.add_argument("--host", default="127.0.0.1", help="Host to bind to")
    serve_parser.add_argument("--port", type=int, default=None, help="Port to bind to")
    serve_parser.add_argument("--reload", action="store_true", help="Enable auto-reload")

    subparsers.add_parser("demo", help="Run the order lifecycle demo")

    test_parser = subparsers.add_parser("test", help="Run the test suite")
    test_parser.add_argument(
        "pytest_args",
        nargs="*",
        default=[],
        help="Arguments to pass to pytest",
    )

    args = parser.parse_args()

    if args.command == "serve":
        run_server(args.service, args.host, args.port, args.reload)
    elif args.command == "demo":
        run_demo()
    elif args.command == "test":
        run_tests(args.pytest_args)
    else:
        parser.print_help()


if __name__ == "__main__":
    main()
