from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    app_name: str = "EcoHabit Impact API"
    api_prefix: str = "/api/v1"
    # Optional JSON file overriding the bundled rate table
    rate_table_path: str = ""

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")


settings = Settings()
