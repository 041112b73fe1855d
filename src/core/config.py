
from pydantic import Field
from pydantic_settings import BaseSettings

class Settings(BaseSettings):
    app_name: str = Field("project-table-extractor", alias="APP_NAME")
    app_env: str = Field("dev", alias="APP_ENV")
    app_version: str = Field("0.1.0", alias="APP_VERSION")

    # Logging
    log_level: str = Field("INFO", alias="LOG_LEVEL")
    log_json: bool = Field(False, alias="LOG_JSON")

    # Multimodal model (Gemini generateContent REST API)
    llm_base_url: str = Field("https://generativelanguage.googleapis.com/v1beta", alias="LLM_BASE_URL")
    llm_api_key: str | None = Field(default=None, alias="LLM_API_KEY")
    llm_model: str = Field("gemini-3-pro-preview", alias="LLM_MODEL")
    llm_thinking_budget: int = Field(8192, alias="LLM_THINKING_BUDGET")
    # Unset = no client-side timeout, the upstream's own timeout applies
    llm_timeout_seconds: float | None = Field(default=None, alias="LLM_TIMEOUT_SECONDS")

    # Uploads
    max_image_bytes: int = Field(20 * 1024 * 1024, alias="MAX_IMAGE_BYTES")

    # CORS allowed origins (comma-separated list for production deployment)
    cors_origins: str = Field("http://localhost:3000,http://127.0.0.1:3000", alias="CORS_ORIGINS")

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8"}

settings = Settings()
