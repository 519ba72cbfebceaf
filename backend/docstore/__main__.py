"""Run the API with uvicorn: ``python -m docstore``."""
import uvicorn

from docstore.config import Settings
from docstore.main import create_app


def main() -> None:
    settings = Settings()
    uvicorn.run(create_app(settings), host="0.0.0.0", port=settings.PORT)


if __name__ == "__main__":
    main()
