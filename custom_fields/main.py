from fastapi import FastAPI

from custom_fields.api.routes import router as custom_fields_router
from custom_fields.config.settings import Settings
from custom_fields.logger import configure_logging


def create_app() -> FastAPI:
    settings = Settings()
    configure_logging(settings.log_level)
    app = FastAPI(title=settings.app_name)
    app.include_router(custom_fields_router)
    return app


app = create_app()
