import os

from pydantic import BaseModel


class SupabaseConfig(BaseModel):
    url: str
    anon_key: str
    timeout: float = 10.0


def get_supabase_config() -> SupabaseConfig:
    url = os.getenv("SUPABASE_URL", "http://localhost:54321")
    anon_key = os.getenv("SUPABASE_ANON_KEY", "")
    timeout = float(os.getenv("SUPABASE_TIMEOUT", "10.0"))

    return SupabaseConfig(
        url=url,
        anon_key=anon_key,
        timeout=timeout,
    )


def get_log_level() -> str:
    return os.getenv("LOG_LEVEL", "INFO")
