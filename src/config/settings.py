from pathlib import Path
from typing import Optional
from pydantic_settings import BaseSettings
from pydantic import Field

BASE_DIR = Path(__file__).resolve().parent.parent.parent


class Settings(BaseSettings):
    # Database
    DATABASE_URL: str = Field(default="sqlite:///./reports.db")

    # Templates and generated PDFs live side by side
    MEDIA_DIR: Path = Field(default=BASE_DIR / "media")

    # S3
    AWS_REGION: str = Field(default="ap-southeast-2")
    AWS_ACCESS_KEY_ID: Optional[str] = Field(default=None)
    AWS_SECRET_ACCESS_KEY: Optional[str] = Field(default=None)
    AWS_BUCKET_NAME: str = Field(default="")
    S3_UPLOADED_BY: str = Field(default="report-renderer")

    # Headless browser
    PDF_CONTENT_TIMEOUT_MS: int = Field(default=30000)
    PDF_VIEWPORT_WIDTH: int = Field(default=1200)
    PDF_VIEWPORT_HEIGHT: int = Field(default=800)
    PDF_HEADER_LOGO: str = Field(default="logo.svg")  # relative to MEDIA_DIR
    PDF_STYLESHEET: str = Field(default="report.css")  # relative to MEDIA_DIR
    BROWSER_ARGS: str = Field(
        default="--no-sandbox,--disable-setuid-sandbox,--disable-dev-shm-usage,--disable-gpu"
    )

    # Logging
    LOG_DIR: Path = Field(default=BASE_DIR / "logs")
    LOG_LEVEL: str = Field(default="INFO")

    @property
    def browser_args(self) -> list:
        return [a.strip() for a in self.BROWSER_ARGS.split(",") if a.strip()]

    @property
    def header_logo_path(self) -> Path:
        return Path(self.MEDIA_DIR) / self.PDF_HEADER_LOGO

    @property
    def stylesheet_path(self) -> Path:
        return Path(self.MEDIA_DIR) / self.PDF_STYLESHEET

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"

settings = Settings()
