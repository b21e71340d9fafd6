"""Entry point for qaskpass."""

import logging
import os
import sys

DEBUG_ENV = "QASKPASS_DEBUG"


def main() -> int:
    # stdout is reserved for the secret; logs go to stderr
    logging.basicConfig(
        level=logging.DEBUG if os.environ.get(DEBUG_ENV) else logging.WARNING,
        format="%(asctime)s [%(name)s] %(levelname)s: %(message)s",
        stream=sys.stderr,
    )

    from qaskpass.app import AskpassApp

    app = AskpassApp()
    return app.run()


if __name__ == "__main__":
    sys.exit(main())
