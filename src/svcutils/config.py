from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Settings for the error response converter, read from environment variables.

    Field names match env vars case-insensitively (``ERROR_ENTITY_LOG_LIMIT``).
    A ``.env`` file in the working directory is read as well.
    """

    # Characters of a bad response entity copied into warning logs.
    # Error bodies from upstream services can be arbitrarily large.
    error_entity_log_limit: int = 500

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )


settings = Settings()
