"""Entry point: ``python -m cognita_gateway.start``."""

import uvicorn

from cognita_gateway.config import Config


def main() -> None:
    uvicorn.run(
        "cognita_gateway.main:app",
        host="0.0.0.0",
        port=Config.PORT,
        log_config=None,
    )


if __name__ == "__main__":
    main()
