import os

from pydantic import BaseModel

from src.shared.config import SupabaseConfig, get_supabase_config, get_log_level


class FormsServiceConfig(BaseModel):
    supabase: SupabaseConfig
    bucket: str = "application-forms"
    signed_url_expires_in: int = 3600
    list_limit: int = 100
    display_timezone: str = "UTC"
    log_level: str = "INFO"


def load_config() -> FormsServiceConfig:
    bucket = os.getenv("APPLICATION_FORMS_BUCKET", "application-forms")
    signed_url_expires_in = int(os.getenv("SIGNED_URL_EXPIRES_IN", "3600"))
    list_limit = int(os.getenv("FORMS_LIST_LIMIT", "100"))
    display_timezone = os.getenv("DISPLAY_TIMEZONE", "UTC")

    return FormsServiceConfig(
        supabase=get_supabase_config(),
        bucket=bucket,
        signed_url_expires_in=signed_url_expires_in,
        list_limit=list_limit,
        display_timezone=display_timezone,
        log_level=get_log_level(),
    )
