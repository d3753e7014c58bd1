#!/usr/bin/env python3
"""
tokengate -- forward-auth bearer token gateway.

Usage:
  python main.py
  python main.py --port 3001
  python main.py --host 10.0.0.5 --log-level debug

Environment variables:
  INTERNAL_AUTH_PORT  Listening port (default 3000).
  INTERNAL_AUTH_HOST  Bind address (default 127.0.0.1). Loopback or private only.
  ADMIN_TOKEN         Admin bearer token for /tokens. Unset = management disabled.
  TOKENS_FILE         Token digest file (default /data/tokens.json).
  BCRYPT_ROUNDS       bcrypt cost factor (default 10).
  ADMIN_RATE_LIMIT    slowapi limit for admin routes (default 30/minute).
  LOG_LEVEL           Log level (default INFO).
"""

import argparse
import sys

import uvicorn

from core.config import get_settings, validate_bind_host


def main() -> None:
    parser = argparse.ArgumentParser(
        prog="tokengate",
        description="Bearer token verification for reverse-proxy forward auth.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "--host",
        metavar="ADDR",
        help="Bind address (overrides INTERNAL_AUTH_HOST). Must be loopback or private.",
    )
    parser.add_argument(
        "--port",
        type=int,
        metavar="PORT",
        help="Listening port (overrides INTERNAL_AUTH_PORT)",
    )
    parser.add_argument(
        "--log-level",
        choices=["critical", "error", "warning", "info", "debug"],
        default=None,
        help="Uvicorn log level (default: LOG_LEVEL)",
    )
    args = parser.parse_args()

    try:
        settings = get_settings()
        host = validate_bind_host(args.host) if args.host else settings.internal_auth_host
    except ValueError as e:
        print(f"  [!] {e}", file=sys.stderr)
        sys.exit(2)

    port = args.port or settings.internal_auth_port
    log_level = args.log_level or settings.log_level.lower()

    print(f"tokengate listening at http://{host}:{port}")
    uvicorn.run("api.main:app", host=host, port=port, log_level=log_level)


if __name__ == "__main__":
    main()
