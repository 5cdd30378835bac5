import uvicorn

from minerva.config import settings
from minerva.main import app  # noqa: F401

if __name__ == "__main__":
    uvicorn.run("minerva.main:app", host="0.0.0.0", port=8000, reload=settings.debug)
