from pathlib import Path

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings

ROOT_DIR = Path(__file__).resolve().parent.parent.parent


class Settings(BaseSettings):
    app_name: str = "Business Analyst Chat"
    debug: bool = False

    # Paths
    data_dir: Path = ROOT_DIR / "public"
    db_path: Path = ROOT_DIR / "analyst.db"

    # Spreadsheet context
    context_files: list[str] = ["3103.xlsx", "Expense Code Mapping Logic.xlsx"]
    context_max_rows: int = 50
    context_max_cols: int = 10
    context_max_chars: int = 50_000

    # LLM
    gemini_api_key: str = Field(
        default="",
        validation_alias=AliasChoices("ANALYST_GEMINI_API_KEY", "GOOGLE_API_KEY"),
    )
    gemini_model: str = "gemini-2.5-flash"
    llm_timeout_seconds: float = 360.0

    # External student directory (auto-login lookups)
    student_api_url: str = ""
    student_api_token: str = ""

    # Server
    host: str = "0.0.0.0"
    port: int = 8000
    cors_origins: list[str] = ["*"]

    model_config = {
        "env_file": str(ROOT_DIR / ".env"),
        "env_prefix": "ANALYST_",
        "extra": "ignore",
        "populate_by_name": True,
    }


settings = Settings()
