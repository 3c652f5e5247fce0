from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    app_name: str = "teamflow"

    # ---------------------------------------------------------------------
    # API contract / OpenAPI
    # ---------------------------------------------------------------------

    api_version: str = "1.0.0"
    api_description: str = (
        "TeamFlow API.\n\n"
        "Protected endpoints require `Authorization: Bearer <access token>`.\n\n"
        "Workspace-scoped endpoints additionally check the caller's membership "
        "and role (manager, developer, designer, qa) in that workspace."
    )

    env: str = "local"
    debug: bool = False
    log_level: str = "INFO"

    db_host: str = "127.0.0.1"
    db_port: int = 5432
    db_name: str = "teamflow"
    db_user: str = "teamflow"
    db_password: str = "teamflow"

    # full SQLAlchemy URL, wins over db_* when set (e.g. sqlite for local runs)
    db_url: str | None = None

    # ---------------------------------------------------------------------
    # Auth
    # ---------------------------------------------------------------------

    jwt_secret: str = "change-me"
    jwt_algorithm: str = "HS256"
    access_token_expire_minutes: int = 60
    refresh_token_expire_days: int = 7

    @property
    def database_url(self) -> str:
        if self.db_url:
            return self.db_url
        return (
            f"postgresql+psycopg://{self.db_user}:{self.db_password}"
            f"@{self.db_host}:{self.db_port}/{self.db_name}"
        )


settings = Settings()
