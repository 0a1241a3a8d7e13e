"""Application settings with Pydantic validation.

Settings are stored as JSON and validated using Pydantic models.
"""

from pydantic import BaseModel, Field, field_validator

from tourdesk.services.paging import PAGE_SIZE_OPTIONS


class ApiSettings(BaseModel):
    """Connection to the remote admin API."""

    base_url: str = "http://localhost:8000"
    timeout_seconds: float = Field(default=15.0, gt=0, le=120)

    # Laravel-style CSRF protection: the token cookie is echoed in a header
    xsrf_cookie: str = "XSRF-TOKEN"
    xsrf_header: str = "X-XSRF-TOKEN"

    # Public disk for uploaded files such as agency agreements
    storage_path: str = "/storage"

    model_config = {"validate_assignment": True}

    @field_validator("base_url")
    @classmethod
    def _strip_trailing_slash(cls, value: str) -> str:
        if not value.startswith(("http://", "https://")):
            raise ValueError("base_url must start with http:// or https://")
        return value.rstrip("/")

    @property
    def storage_url(self) -> str:
        return f"{self.base_url}/{self.storage_path.strip('/')}"


class ThemeSettings(BaseModel):
    """Theme configuration."""

    mode: str = Field(default="light", pattern="^(dark|light|system)$")

    model_config = {"validate_assignment": True}


class LoggingSettings(BaseModel):
    """Logging configuration."""

    level: str = Field(default="INFO", pattern="^(DEBUG|INFO|WARNING|ERROR|CRITICAL)$")


class UIStateSettings(BaseModel):
    """UI state to persist across sessions."""

    rows_per_page: int = 10
    last_tab: str = Field(
        default="agencies",
        pattern="^(agencies|tourists|messages|reports|categories)$",
    )

    model_config = {"validate_assignment": True}

    @field_validator("rows_per_page")
    @classmethod
    def _check_rows_per_page(cls, value: int) -> int:
        if value not in PAGE_SIZE_OPTIONS:
            raise ValueError(f"rows_per_page must be one of {PAGE_SIZE_OPTIONS}")
        return value


class AppSettings(BaseModel):
    """Application settings with validation.

    All settings are validated using Pydantic. Invalid values will raise
    validation errors when loading from JSON.

    Example:
        >>> settings = AppSettings()
        >>> settings.api.base_url = "https://admin.example.com"
        >>> settings.ui_state.rows_per_page = 25
    """

    api: ApiSettings = Field(default_factory=ApiSettings)
    theme: ThemeSettings = Field(default_factory=ThemeSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)
    ui_state: UIStateSettings = Field(default_factory=UIStateSettings)

    model_config = {
        "validate_assignment": True,  # Validate on attribute assignment
        "extra": "forbid",  # Forbid extra fields
    }
