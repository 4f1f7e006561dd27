from typing import Optional

from pydantic import Field, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict


class AwsConfig(BaseSettings):
    """Shared AWS credentials configuration"""

    access_key: Optional[str] = None
    secret_key: Optional[SecretStr] = None
    region: str = "us-east-1"

    model_config = SettingsConfigDict(
        env_prefix="AWS_",
        env_file=".env",
        secrets_dir=".secrets",
        case_sensitive=False,
        extra="ignore",
    )


class TranscribeConfig(BaseSettings):
    """Amazon Transcribe streaming configuration."""

    region: str = "us-east-1"
    language_code: str = "en-US"
    media_sample_rate_hz: int = Field(default=16000, ge=8000, le=48000)
    chunk_size: int = Field(default=8192, ge=1024)
    realtime_pacing: bool = Field(
        default=True,
        description="Sleep between chunks so the stream matches wall-clock audio time.",
    )

    model_config = SettingsConfigDict(
        env_prefix="TRANSCRIBE_",
        env_file=".env",
        case_sensitive=False,
        extra="ignore",
    )


class BedrockConfig(BaseSettings):
    """Amazon Bedrock configuration for the coaching model."""

    region: str = Field(
        default="us-east-1",
        validation_alias="BEDROCK_REGION",
    )
    model_id: str = Field(
        default="amazon.nova-lite-v1:0",
        validation_alias="BEDROCK_MODEL_ID",
    )
    max_tokens: int = Field(
        default=1200,
        validation_alias="BEDROCK_MAX_TOKENS",
        ge=1,
        le=4096,
    )
    temperature: float = Field(
        default=0.2,
        validation_alias="BEDROCK_TEMPERATURE",
        ge=0.0,
        le=1.0,
    )
    top_p: float = Field(
        default=0.9,
        validation_alias="BEDROCK_TOP_P",
        ge=0.0,
        le=1.0,
    )
    json_retries: int = Field(
        default=1,
        validation_alias="BEDROCK_JSON_RETRIES",
        ge=0,
        le=5,
    )

    model_config = SettingsConfigDict(
        env_file=".env",
        secrets_dir=".secrets",
        case_sensitive=False,
        extra="ignore",
    )


class AudioConfig(BaseSettings):
    """Upload limits and canonical container parameters."""

    max_upload_bytes: int = Field(default=25 * 1024 * 1024, ge=1)
    target_sample_rate: int = Field(default=16000, ge=8000, le=48000)
    target_channels: int = Field(default=1, ge=1, le=2)
    ffmpeg_binary: str = "ffmpeg"

    model_config = SettingsConfigDict(
        env_prefix="AUDIO_",
        env_file=".env",
        case_sensitive=False,
        extra="ignore",
    )


class Settings(BaseSettings):
    """Application settings"""

    app_name: str = "Speaking Coach API"
    app_version: str = "1.0.0"
    debug: bool = False
    host: str = "0.0.0.0"
    port: int = 8000
    log_file: str = "logs/app.log"
    pipeline_log_file: str = "logs/coaching_pipeline.log"
    transcript_log_file: str = "logs/transcripts.log"

    # Used when the client omits durationSec or sends garbage
    default_duration_sec: int = Field(default=60, ge=1)
    result_store_limit: int = Field(default=100, ge=1)

    # AWS
    aws: AwsConfig = Field(default_factory=AwsConfig)

    # Transcribe
    transcribe: TranscribeConfig = Field(default_factory=TranscribeConfig)

    # Bedrock
    bedrock: BedrockConfig = Field(default_factory=BedrockConfig)

    # Audio
    audio: AudioConfig = Field(default_factory=AudioConfig)

    # CORS
    cors_origins: list[str] = ["*"]
    cors_allow_credentials: bool = True
    cors_allow_methods: list[str] = ["*"]
    cors_allow_headers: list[str] = ["*"]

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=False,
        extra="ignore",
    )


# Global settings instance
settings = Settings()
