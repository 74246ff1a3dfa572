from decimal import Decimal

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_prefix="OBRADOR_", extra="ignore")

    db_url: str = "sqlite:///obrador.db"

    log_level: str = "INFO"
    log_json: bool = False
    log_file: str = ""

    locale: str = "es"

    pricing_free_radius_km: Decimal = Decimal("15")
    pricing_per_km_rate: Decimal = Decimal("3")
    pricing_difficulty_scope: str = "per_item"

    email_backend: str = "none"
    email_from: str = "Presupuestos <presupuestos@example.com>"
    smtp_host: str = "smtp.gmail.com"
    smtp_port: int = 587
    smtp_username: str = ""
    smtp_password: str = ""
    smtp_start_tls: bool = True
    resend_api_key: str = ""
    resend_api_url: str = "https://api.resend.com/emails"

    openai_api_key: str = ""
    openai_base_url: str = "https://api.openai.com/v1"
    openai_model: str = "gpt-4o"
    openai_timeout: float = 30.0

    business_name: str = ""
    business_address: str = ""
    business_tax_id: str = ""
    business_phone: str = ""
    business_email: str = ""

    payment_method: str = "Transferencia bancaria"
    payment_bank: str = ""
    payment_iban: str = ""

    budget_validity_days: int = 15
    pdf_font_path: str = ""


settings = Settings()
