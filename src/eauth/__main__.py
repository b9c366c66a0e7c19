"""eauth entrypoint.

Run with:
  python -m eauth
"""

import logging

import uvicorn

from eauth.config import load_settings


def main() -> None:
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    settings = load_settings()
    uvicorn.run("eauth.app:create_app", factory=True, host=settings.host, port=settings.port, reload=settings.reload)

if __name__ == "__main__":
    main()
