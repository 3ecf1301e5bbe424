from pathlib import Path
from typing import Optional

from pydantic import BaseModel, SecretStr, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class ApiSettings(BaseModel):
    listen_address: str = '127.0.0.1'
    listen_port: int = 8080
    request_timeout: float = 30.0


class Settings(BaseSettings):
    tmdb_token: Optional[SecretStr] = None
    tmdb_token_file: Optional[str] = None
    tmdb_api_url: str = 'https://api.themoviedb.org/'
    api: ApiSettings = ApiSettings()
    log_level: str = 'INFO'
    json_logs: bool = False

    model_config = SettingsConfigDict(
        env_file='.env',
        env_prefix='MOVIE_FEED_',
        env_nested_delimiter='__',
        extra='ignore',
    )

    @model_validator(mode='after')
    def _resolve_token(self) -> 'Settings':
        if self.tmdb_token_file:
            token = Path(self.tmdb_token_file).read_text(encoding='utf-8').strip()
            self.tmdb_token = SecretStr(token)
        if self.tmdb_token is None:
            raise ValueError('missing tmdb_token field')
        return self


settings = Settings()
