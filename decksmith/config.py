from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment."""

    model_config = SettingsConfigDict(env_file=".env", env_prefix="DECKSMITH_")

    app_name: str = "Decksmith"
    debug: bool = False

    scryfall_api_url: str = "https://api.scryfall.com"
    user_agent: str = "Decksmith/0.1"
    http_timeout: float = 30.0

    # Scryfall asks for no more than ~10 requests per second
    resolver_batch_size: int = 10
    resolver_batch_delay: float = 0.1

    default_format: str = "standard"


settings = Settings()
