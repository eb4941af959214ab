"""Command line interface for the Chaum-Pedersen authentication service."""

from __future__ import annotations

import argparse
import getpass
import json
import logging
import os
import sys

import httpx

from cpauth.client import AuthClient, password_to_secret
from cpauth.constants import DEFAULT_HOST, DEFAULT_PORT, DEFAULT_URL, HOST_ENV, PORT_ENV
from cpauth.errors import AuthError, ParameterError
from cpauth.params import resolve_parameters, save_parameters

logger = logging.getLogger("cpauth")


def parse_args(argv: list[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument(
        "--params",
        help="JSON file with decimal p, q, g, h (default: $CPAUTH_PARAMETERS or the built-in group)",
    )
    parser.add_argument(
        "--log-level",
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging verbosity (default: WARNING)",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    serve_parser = subparsers.add_parser("serve", help="Run the authentication server")
    serve_parser.add_argument(
        "--host",
        default=os.environ.get(HOST_ENV, DEFAULT_HOST),
        help=f"Interface to bind (default: {DEFAULT_HOST})",
    )
    serve_parser.add_argument(
        "--port",
        type=int,
        default=os.environ.get(PORT_ENV, str(DEFAULT_PORT)),
        help=f"Port to bind (default: {DEFAULT_PORT})",
    )

    params_parser = subparsers.add_parser("params", help="Print the active group parameters")
    params_parser.add_argument("--output", help="Optional file path to store the parameters JSON")

    for name, help_text in (
        ("register", "Register commitments derived from a numeric password"),
        ("login", "Prove knowledge of a numeric password"),
    ):
        command_parser = subparsers.add_parser(name, help=help_text)
        command_parser.add_argument("user", help="User identifier")
        command_parser.add_argument(
            "password",
            nargs="?",
            help="Numeric password used as the secret (prompted for when omitted)",
        )
        command_parser.add_argument(
            "--url",
            default=DEFAULT_URL,
            help=f"Base URL of the server (default: {DEFAULT_URL})",
        )

    return parser.parse_args(argv)


def serve(namespace: argparse.Namespace) -> int:
    import uvicorn

    from cpauth.server import create_app
    from cpauth.service import AuthService

    params = resolve_parameters(namespace.params)
    app = create_app(AuthService(params))
    logger.info("Server listening on %s:%d", namespace.host, namespace.port)
    uvicorn.run(app, host=namespace.host, port=namespace.port, log_level=namespace.log_level.lower())
    return 0


def main(argv: list[str] | None = None) -> int:
    namespace = parse_args(argv if argv is not None else sys.argv[1:])
    logging.basicConfig(
        level=namespace.log_level,
        format="%(asctime)s - %(levelname)s - %(message)s",
    )

    try:
        if namespace.command == "serve":
            return serve(namespace)

        params = resolve_parameters(namespace.params)

        if namespace.command == "params":
            if namespace.output:
                save_parameters(params, namespace.output)
            print(json.dumps(params.to_dict(), indent=2))
            return 0

        password = namespace.password
        if password is None:
            password = getpass.getpass("Enter Password: ")
        secret = password_to_secret(password)
        with AuthClient(namespace.url) as client:
            if namespace.command == "register":
                message = client.register_secret(namespace.user, secret, params)
                print(json.dumps({"user": namespace.user, "message": message}, indent=2))
                return 0

            if namespace.command == "login":
                session_id = client.login(namespace.user, secret, params)
                print(
                    json.dumps(
                        {"user": namespace.user, "verified": bool(session_id), "session_id": session_id},
                        indent=2,
                    )
                )
                return 0 if session_id else 1
    except ParameterError as exc:
        print(f"Invalid parameters: {exc}", file=sys.stderr)
        return 1
    except AuthError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1
    except httpx.HTTPStatusError as exc:
        print(f"Server rejected request: {exc.response.text}", file=sys.stderr)
        return 1
    except httpx.HTTPError as exc:
        print(f"Unable to reach server: {exc}", file=sys.stderr)
        return 1

    raise RuntimeError("Unreachable")


if __name__ == "__main__":
    raise SystemExit(main())
