from pydantic import Field
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # Output and exit policy
    LOG_LEVEL: str = Field("WARNING", description="Logging level for diagnostics")
    STRICT: bool = Field(
        False, description="Exit non-zero when any file has content violations"
    )
    JSON_INDENT: int = Field(2, ge=0, description="Indentation for --json output")

    # Streaming
    CHUNK_SIZE: int = Field(
        65536, gt=0, description="Bytes read per chunk while scanning a file"
    )

    class Config:
        env_prefix = "SRCCHECK_"
        env_file = ".env"
        case_sensitive = False


settings = Settings()
