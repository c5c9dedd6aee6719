from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path

from pydantic import ValidationError

from .settings import Settings
from .webhooks.verify import compute_signature


def _load_settings() -> Settings | None:
    try:
        return Settings()
    except ValidationError as e:
        print(f"Invalid configuration:\n{e}", file=sys.stderr)
        return None


def cmd_serve(args: argparse.Namespace) -> int:
    settings = _load_settings()
    if settings is None:
        return 2
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    import uvicorn

    from .api.main import create_app

    host = args.host or settings.host
    port = args.port or settings.port
    logging.info("holders-sync listening at %s:%s", host, port)
    uvicorn.run(create_app(settings), host=host, port=port, reload=False)
    return 0


def cmd_config(_: argparse.Namespace) -> int:
    settings = _load_settings()
    if settings is None:
        return 2
    print(json.dumps(settings.redacted(), indent=2, sort_keys=True))
    return 0


def cmd_sign(args: argparse.Namespace) -> int:
    body = Path(args.body)
    if not body.exists():
        print(f"Body file not found: {body}", file=sys.stderr)
        return 2
    print(compute_signature(body.read_bytes(), args.key))
    return 0


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="holders-sync",
        description="Holders logger and DOOP bridge webhook synchronizer",
    )
    sub = p.add_subparsers(dest="cmd", required=True)

    p_serve = sub.add_parser("serve", help="Run the webhook server")
    p_serve.add_argument("--host", help="Bind host (default: HOST)")
    p_serve.add_argument("--port", type=int, help="Bind port (default: PORT)")
    p_serve.set_defaults(func=cmd_serve)

    p_config = sub.add_parser("config", help="Print effective configuration with secrets masked")
    p_config.set_defaults(func=cmd_config)

    p_sign = sub.add_parser("sign", help="Compute the webhook signature of a body file")
    p_sign.add_argument("--key", required=True, help="Webhook signing key")
    p_sign.add_argument("--body", required=True, help="File holding the exact request body")
    p_sign.set_defaults(func=cmd_sign)
    return p


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    return args.func(args)


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
