from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Delivery strategy
    mail_transport: Literal["resend", "smtp"] = Field(
        default="resend",
        description="Which transport delivers confirmation emails",
    )
    from_email: str = Field(
        default="management@wafadentalclinic.com",
        description="Sender email address (must be a verified domain for Resend)",
    )
    from_name: str = Field(default="Wafa Dental Clinic", description="Sender display name")

    # Email via the Resend API
    resend_api_key: str = Field(default="", description="Resend API key")
    resend_api_url: str = Field(
        default="https://api.resend.com",
        description="Resend API base URL",
    )
    http_timeout: float = Field(default=30.0, description="Timeout for outbound HTTP calls (seconds)")

    # Email via SMTP (legacy)
    smtp_host: str = Field(default="smtp.titan.email", description="SMTP server host")
    smtp_port: int = Field(default=587, description="SMTP server port")
    smtp_user: str = Field(default="", description="SMTP username")
    smtp_password: str = Field(default="", description="SMTP password")
    smtp_use_tls: bool = Field(
        default=False,
        description="Implicit TLS (port 465). When False, STARTTLS is used if the server offers it.",
    )
    smtp_timeout: float = Field(default=30.0, description="SMTP session timeout (seconds)")

    # Google Apps Script booking sheet
    web_app_url: str = Field(default="", description="Apps Script web app URL for booking submissions")

    # Rendering
    logo_path: str = Field(
        default="images/logo.png",
        description="Local path of the clinic logo drawn in the PDF header",
    )

    cors_origins: list[str] = Field(
        default=[
            "https://www.wafadentalclinic.com",
            "http://localhost:3000",
            "http://127.0.0.1:5500",
        ],
        description="Origins allowed to call the API from the browser",
    )

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8"}


settings = Settings()
