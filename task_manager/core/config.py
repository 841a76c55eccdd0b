from pydantic_settings import BaseSettings
from typing import List, Optional
import os


class Settings(BaseSettings):
    PROJECT_NAME: str = "Task Manager API"
    ENVIRONMENT: str = os.getenv("ENVIRONMENT", "development")

    # Server
    HOST: str = "0.0.0.0"
    PORT: int = 5000

    # Dynamic Redis URL
    REDIS_HOST: str = os.getenv("REDIS_HOST", "localhost")
    REDIS_PORT: int = int(os.getenv("REDIS_PORT", 6379))
    REDIS_DB: int = int(os.getenv("REDIS_DB", 0))
    REDIS_URL: str = os.getenv(
        "REDIS_URL",
        f"redis://{os.getenv('REDIS_HOST', 'localhost')}:{os.getenv('REDIS_PORT', 6379)}/{os.getenv('REDIS_DB', 0)}",
    )

    # Redis Keys
    DATA_STORE_NAME: str = "task_data"
    INDEX_NAME: str = "task_index"
    SEQUENCE_KEY: str = "task_seq"

    # HTTP
    CORS_ORIGINS: List[str] = ["*"]
    FRONTEND_DIR: Optional[str] = None

    # Logging
    LOG_LEVEL: str = "INFO"
    LOG_DIR: str = "logs"

    # Client
    TASKS_API_URL: str = "http://localhost:5000/api"
    TASKS_API_TIMEOUT: float = 10.0

    class Config:
        env_file = ".env"


settings = Settings()
