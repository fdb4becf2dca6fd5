from pymongo import MongoClient

from src.partners_service.app import create_app
from src.partners_service.config import load_config
from src.partners_service.mongo_repository import MongoChannelPartnerRepository
from src.shared.auth import SupabaseAuthProvider
from src.shared.logging_config import setup_logging


config = load_config()
setup_logging(config.log_level)

_client = MongoClient(config.mongo_uri)
_repo = MongoChannelPartnerRepository(_client, db_name=config.mongo_db_name)
_auth = SupabaseAuthProvider(config.supabase)

app = create_app(auth_provider=_auth, partner_repository=_repo)
