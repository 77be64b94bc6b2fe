"""Rezio server launcher: runs the API under uvicorn."""

from __future__ import annotations

import socket
import sys

import uvicorn

from rezio.config import settings


def port_in_use(host: str, port: int) -> bool:
    """True if something is already listening on host:port."""
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as s:
        s.settimeout(0.2)
        return s.connect_ex((host, port)) == 0


def main() -> None:
    if port_in_use(settings.host, settings.port):
        print(f"Port {settings.port} on {settings.host} is already in use.", file=sys.stderr)
        sys.exit(1)

    print(f"Starting {settings.app_name} on http://{settings.host}:{settings.port}")
    uvicorn.run(
        "rezio.main:app",
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
        reload=settings.debug,
    )


if __name__ == "__main__":
    main()
