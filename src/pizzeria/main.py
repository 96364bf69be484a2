from __future__ import annotations

import logging
import sys

from pydantic import ValidationError as ConfigError

from pizzeria.adapters.inbound.cli import run_cli
from pizzeria.bootstrap import build_usecases
from pizzeria.config import Settings, load_environment


def main(argv: list[str] | None = None) -> int:
    argv = argv or sys.argv[1:]
    if not argv:
        print("usage: pizzeria '<json steps>'")
        return 2

    load_environment()
    try:
        settings = Settings.from_env()
    except ConfigError as e:
        print(f"invalid_config: {e}")
        return 2

    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    usecases = build_usecases(settings)
    return run_cli(usecases.lifecycle, usecases.identity, argv[0])


if __name__ == "__main__":
    raise SystemExit(main())
