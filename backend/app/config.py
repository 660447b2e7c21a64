from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # Quote provider (flights + lodging). Empty base URL = demo mode with mock quotes.
    quote_api_base_url: str = ""
    quote_api_timeout: float = 15.0

    # Logging
    log_level: str = "INFO"

    # CORS
    cors_origins: str = "http://localhost:8081,http://localhost:19006"

    @property
    def cors_origin_list(self) -> list[str]:
        return [origin.strip() for origin in self.cors_origins.split(",")]

    @property
    def use_mock_quotes(self) -> bool:
        return not self.quote_api_base_url

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8", "extra": "ignore"}


settings = Settings()
