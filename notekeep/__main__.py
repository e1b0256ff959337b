"""
Notekeep Backend: Server Entry Point
=====================================

What:  `python -m notekeep` (or the `notekeep` console script) serves the API.
How:   Runs uvicorn on SERVER_HOST and the fixed port 3000. If the note
       store cannot be reached, the lifespan fails and uvicorn exits with a
       non-zero status.
"""

import uvicorn

from notekeep.config import settings


def main() -> None:
    uvicorn.run(
        "notekeep.main:app",
        host=settings.server_host,
        port=settings.server_port,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    main()
