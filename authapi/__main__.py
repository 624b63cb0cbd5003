"""Run the API with uvicorn: ``python -m authapi``."""

import uvicorn

from authapi.config import get_settings


def main() -> None:
    uvicorn.run("authapi.main:app", host="0.0.0.0", port=get_settings().port)


if __name__ == "__main__":
    main()
