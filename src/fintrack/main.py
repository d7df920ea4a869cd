import logging

from fastapi import FastAPI

from fintrack.config import settings
from fintrack.routes import router

app = FastAPI(title="Fintrack Legacy Import", version="0.1.0")
app.include_router(router)


def run() -> None:
    import uvicorn

    logging.basicConfig(level=settings.log_level)
    uvicorn.run(
        "fintrack.main:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.fintrack_env == "development",
    )


if __name__ == "__main__":
    run()
