"""Unified settings for upload-intake."""

import tomllib
from pathlib import Path
from typing import ClassVar, Literal

from pydantic_settings import BaseSettings, SettingsConfigDict


def read_pyproject(pyproject_path: Path) -> dict:
    """Read pyproject.toml into a dict."""
    if not pyproject_path.is_file():
        return {}
    with pyproject_path.open("rb") as file_handle:
        return tomllib.load(file_handle)


def get_version(base_dir: Path) -> str:
    """Get version from git tags or fallback to package metadata."""
    try:
        import git

        repo = git.Repo(base_dir, search_parent_directories=True)
        latest_tag = max(repo.tags, key=lambda t: t.commit.committed_datetime, default=None)
        return str(latest_tag) if latest_tag else "0.0.0"
    except Exception:
        try:
            import importlib.metadata

            return importlib.metadata.version("upload-intake")
        except Exception:
            return "0.0.0"


class Settings(BaseSettings):
    """Unified settings for the upload intake layer."""

    DEBUG: bool = True
    LOG_LEVEL: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"

    # ClassVar to prevent Pydantic from trying to load from env
    BASE_DIR: ClassVar[Path] = Path(__file__).parent.parent.parent
    PROJECT: ClassVar[dict] = read_pyproject(BASE_DIR / "pyproject.toml")
    SERVICE_NAME: ClassVar[str] = PROJECT.get("project", {}).get("name", "upload-intake")
    SERVICE_VERSION: ClassVar[str] = get_version(BASE_DIR)

    # Filenames
    MAX_FILENAME_LENGTH: int = 200
    FALLBACK_FILENAME: str = "unnamed"
    DATA_URI_FILENAME: str = "data_uri_file"

    # Data URIs
    MAX_DATA_URI_BYTES: int = 100 * 1024 * 1024

    # Extra MIME table entries loaded on top of the defaults
    TYPE_TABLE_PATH: Path | None = None

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8")


settings = Settings()  # type: ignore
