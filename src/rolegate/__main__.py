"""rolegate entrypoint.

Run with:
  python -m rolegate
"""

import logging

import uvicorn

from rolegate import config


def main() -> None:
    logging.basicConfig(
        level=config.LOG_LEVEL,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    config.validate_runtime_config()
    uvicorn.run("rolegate.app:app", host=config.HOST, port=config.PORT, reload=config.RELOAD)

if __name__ == "__main__":
    main()
