"""
GameHub API — Server Entry Point
=================================

What:  Runs the API under uvicorn (`python -m gamehub` or the `gamehub` script).
How:   uvicorn installs SIGINT/SIGTERM handlers: it stops accepting new
       connections, gives in-flight requests SHUTDOWN_GRACE_PERIOD seconds to
       finish, then closes whatever is left and runs the lifespan shutdown.
"""

import uvicorn

from gamehub.config import settings


def main() -> None:
    uvicorn.run(
        "gamehub.main:app",
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
        timeout_keep_alive=settings.keepalive_timeout,
        timeout_graceful_shutdown=settings.shutdown_grace_period,
        h11_max_incomplete_event_size=1 << 20,  # 1 MiB of headers
    )


if __name__ == "__main__":
    main()
