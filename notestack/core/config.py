from functools import lru_cache
from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import AnyHttpUrl, Field


class ServiceSettings(BaseSettings):
    # 저장소 연결 대상 (환경변수: DATABASE_URL)
    database_url: str = Field(
        ...,
        min_length=1,
        validation_alias="DATABASE_URL",
    )
    # 리스닝 포트 (환경변수: PORT)
    port: int = Field(
        ...,
        ge=0,
        le=65535,
        validation_alias="PORT",
    )
    environment: str = Field(default="local", validation_alias="ENVIRONMENT")
    log_level: str = Field(default="INFO", validation_alias="LOG_LEVEL")

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        populate_by_name=True,
        extra="ignore",
    )


class NotebookServiceSettings(ServiceSettings):
    pass


class NoteServiceSettings(ServiceSettings):
    # Notebook 서비스 주소, e.g. http://notebooks:3000
    notebook_service_url: AnyHttpUrl = Field(
        ...,
        validation_alias="NOTEBOOK_SERVICE_URL",
    )
    notebook_lookup_timeout: float = Field(
        default=5.0,
        gt=0,
        validation_alias="NOTEBOOK_LOOKUP_TIMEOUT",
    )


@lru_cache
def get_notebook_settings() -> NotebookServiceSettings:
    return NotebookServiceSettings()


@lru_cache
def get_note_settings() -> NoteServiceSettings:
    return NoteServiceSettings()
