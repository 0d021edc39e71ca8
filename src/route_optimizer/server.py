"""Start the API with uvicorn, honouring a platform-provided PORT."""

import os
import sys

import uvicorn

from .config import settings


def main() -> None:
    port = os.environ.get("PORT", str(settings.port))
    try:
        port_int = int(port)
    except ValueError:
        print(f"Warning: Invalid PORT value '{port}', using {settings.port}", file=sys.stderr)
        port_int = settings.port

    uvicorn.run(
        "route_optimizer.main:app",
        host=settings.host,
        port=port_int,
        proxy_headers=True,
        forwarded_allow_ips="*",
    )


if __name__ == "__main__":
    main()
