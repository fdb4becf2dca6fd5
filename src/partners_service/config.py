import os

from pydantic import BaseModel

from src.shared.config import SupabaseConfig, get_supabase_config, get_log_level


class PartnersServiceConfig(BaseModel):
    supabase: SupabaseConfig
    mongo_uri: str
    mongo_db_name: str
    log_level: str = "INFO"


def load_config() -> PartnersServiceConfig:
    mongo_uri = os.getenv("MONGO_URI", "mongodb://mongo:27017/")
    mongo_db_name = os.getenv("MONGO_DB_NAME", "partner_portal")

    return PartnersServiceConfig(
        supabase=get_supabase_config(),
        mongo_uri=mongo_uri,
        mongo_db_name=mongo_db_name,
        log_level=get_log_level(),
    )
