from pydantic import BaseModel


class ChannelPartner(BaseModel):
    partner_id: str
    name: str
    contact_email: str | None = None
    region: str | None = None
    status: str = "active"


class MongoChannelPartnerRepository:
    def __init__(self, client, db_name: str = "partner_portal"):
        self.client = client
        self.db = client[db_name]
        self.collection = self.db["channel_partners"]

    def list_partners(self) -> list[ChannelPartner]:
        documents = self.collection.find({}, {"_id": 0}).sort("name", 1)
        return [ChannelPartner(**doc) for doc in documents]
