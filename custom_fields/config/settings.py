# custom_fields/config/settings.py
from typing import List

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # 🔧 Configuración del modelo / settings
    model_config = SettingsConfigDict(
        env_prefix="CUSTOM_FIELDS_",
        env_file=".env",            # lee automáticamente el .env en la raíz
        env_file_encoding="utf-8",
        extra="ignore",
    )

    app_name: str = Field(
        default="custom-fields-service",
        description="Service name for FastAPI.",
    )
    log_level: str = Field(
        default="INFO",
        description="Nivel de log (DEBUG, INFO, WARNING, ERROR).",
    )

    # Bulk edit
    default_tri_state_fields: List[str] = Field(
        default_factory=lambda: ["is_favorite"],
        description="Campos booleanos que en edición masiva usan tres estados (sin cambio / true / false).",
    )
