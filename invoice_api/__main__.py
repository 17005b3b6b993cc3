# invoice_api/__main__.py
"""
Serve the API on the configured address:

    python -m invoice_api
"""

import uvicorn

from invoice_api.config import get_settings


def main():
    settings = get_settings()
    uvicorn.run(
        "invoice_api:app",
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    main()
