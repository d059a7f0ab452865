from __future__ import annotations

import logging
import sys
from typing import Optional, Sequence

from shared.protocol import ConfigError, FatalSessionError, UsageError
from shared.session import SERVER_USAGE, Connection, resolve_address
from shared.settings import configure_logging, load_settings
from shared.ui import ConsoleChat

logger = logging.getLogger(__name__)


def main(argv: Optional[Sequence[str]] = None) -> int:
    argv = list(sys.argv if argv is None else argv)
    try:
        address = resolve_address(argv, SERVER_USAGE)
    except UsageError as exc:
        print(exc.usage)
        if exc.message != exc.usage:
            print(exc.message)
        return 1

    try:
        settings = load_settings()
    except ConfigError as exc:
        print(f"Error: {exc.message}", file=sys.stderr)
        return 1
    configure_logging(settings)

    try:
        connection, listener = Connection.make_server(settings.frame_size, address)
    except FatalSessionError as exc:
        print(exc.message, file=sys.stderr)
        return 1

    try:
        ConsoleChat(connection, settings, listener=listener, remote_label="Client").run()
    except FatalSessionError as exc:
        logger.exception("Session aborted: %s", exc)
        print(exc.message, file=sys.stderr)
        return 1
    except KeyboardInterrupt:
        logger.info("Interrupted")
    finally:
        connection.close()
        listener.close()
    return 0


if __name__ == "__main__":
    sys.exit(main())
