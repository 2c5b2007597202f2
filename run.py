import uvicorn

from quizexport.core.config import settings

if __name__ == "__main__":
    uvicorn.run(
        "quizexport.main:app",
        host="0.0.0.0",
        port=settings.PORT,
        reload=(settings.ENV == "development"),
        log_level=settings.LOG_LEVEL.lower(),
    )
