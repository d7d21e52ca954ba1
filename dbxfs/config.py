from pathlib import Path
from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import Optional
import logging
from functools import lru_cache


class Settings(BaseSettings):
    """
    Centralized configuration with type validation.
    Automatically reads variables from the environment, the .env file and the token file.
    """

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    TOKEN_STORAGE_FILE: str = ".dropbox.token"
    LOG_LEVEL: str = "INFO"

    # --- Dropbox credentials ---
    DROPBOX_ACCESS_TOKEN: Optional[str] = None
    DROPBOX_APP_KEY: Optional[str] = None
    DROPBOX_APP_SECRET: Optional[str] = None
    DROPBOX_REFRESH_TOKEN_ENV: Optional[str] = Field(
        None, alias="DROPBOX_REFRESH_TOKEN"
    )
    DROPBOX_REFRESH_TOKEN_FILE: Optional[str] = None

    # --- Adapter settings ---
    DROPBOX_ROOT_PREFIX: str = ""
    DROPBOX_UPLOAD_CHUNK_SIZE: int = Field(
        8 * 1024 * 1024, validation_alias="DROPBOX_UPLOAD_CHUNK_SIZE"
    )  # 8 MB default, Dropbox accepts at most 150 MB per request
    DROPBOX_TIMEOUT: float = 100.0

    # --- Constants and Computed Paths ---
    BASE_DIR: Path = Path.cwd()

    @model_validator(mode="before")
    def validate_credentials(cls, values):
        access_token = values.get("DROPBOX_ACCESS_TOKEN")
        app_key = values.get("DROPBOX_APP_KEY")

        if not access_token or not str(access_token).strip():
            if not app_key or not str(app_key).strip():
                raise ValueError(
                    "Either DROPBOX_ACCESS_TOKEN or DROPBOX_APP_KEY must be set"
                )
            app_secret = values.get("DROPBOX_APP_SECRET")
            if not app_secret or not str(app_secret).strip():
                raise ValueError(
                    "DROPBOX_APP_SECRET is required when DROPBOX_APP_KEY is used"
                )
            if not values.get("DROPBOX_REFRESH_TOKEN"):
                # The token file is checked in model_post_init; the client fails later if both are missing.
                logging.warning(
                    "DROPBOX_REFRESH_TOKEN not found in environment. Will attempt to load from .dropbox.token file."
                )

        chunk_size = values.get("DROPBOX_UPLOAD_CHUNK_SIZE")
        if chunk_size is not None and int(chunk_size) <= 0:
            raise ValueError("DROPBOX_UPLOAD_CHUNK_SIZE must be a positive number of bytes")

        return values

    def model_post_init(self, __context):
        """
        After initial settings are loaded from the environment,
        try to load a refresh token from the local token file as a fallback.
        """
        token_file = self.BASE_DIR / self.TOKEN_STORAGE_FILE
        if token_file.is_file():
            content = token_file.read_text().strip()
            if content:
                self.DROPBOX_REFRESH_TOKEN_FILE = content
                logging.info(f"Found refresh token in file: {token_file}")

    @property
    def LOG_FILE(self) -> Path:
        return self.BASE_DIR / "dbxfs.log"


@lru_cache()
def get_settings() -> Settings:
    """
    Returns a cached instance of the settings.
    The first call to this function will initialize the settings.
    """
    return Settings()
