# mongodb.py
from datetime import datetime, timezone
import logging

from pymongo import MongoClient, DESCENDING
from pymongo.errors import DuplicateKeyError, PyMongoError
from pymongo.server_api import ServerApi

from database.response_store import ResponseStore, EmailPattern, StoreError, DuplicateRecord

logger = logging.getLogger(__name__)


class MongoDB:
    """
    Connection to the Atlas cluster holding the quiz responses.

    Built once at process start by create_app() and handed to the store;
    nothing else reaches for the client.
    """

    def __init__(self, uri, db_name, responses_collection='quiz_responses', client=None):
        # For MongoDB Atlas with SRV connection string
        self.client = client or MongoClient(
            uri,
            server_api=ServerApi('1'),
            retryWrites=True,
            w='majority'
        )

        # Test the connection
        try:
            self.client.admin.command('ping')
            logger.info("[STORE] Successfully connected to MongoDB")
        except Exception as e:
            logger.error(f"[STORE] Connection failed: {e}")
            raise

        self.db = self.client[db_name]
        self.responses_collection_name = responses_collection

    @classmethod
    def from_config(cls, config):
        return cls(config.MONGO_URI, config.MONGO_DB_NAME, config.RESPONSES_COLLECTION)

    def get_responses_collection(self):
        return self.db[self.responses_collection_name]

    def init_database(self):
        """Create the indexes the quiz relies on"""
        try:
            responses = self.get_responses_collection()
            # Final arbiter when two sessions race between check and insert
            responses.create_index("email", unique=True)
            responses.create_index([("created_at", DESCENDING)])

            logger.info("[STORE] Database initialized with response indexes")

        except Exception as e:
            logger.error(f"[STORE] Database initialization failed: {e}")
            raise


class MongoResponseStore(ResponseStore):
    """ResponseStore over a pymongo collection."""

    def __init__(self, mongo):
        self.collection = mongo.get_responses_collection()

    def find(self, pattern: EmailPattern) -> list[dict]:
        query = {"email": {"$regex": pattern.to_regex(), "$options": "i"}}
        try:
            cursor = self.collection.find(query, {"email": 1})
            return [{"id": str(doc["_id"]), "email": doc["email"]} for doc in cursor]
        except PyMongoError as e:
            raise StoreError(f"find {pattern} failed: {e}") from e

    def find_by_email(self, email: str) -> list[dict]:
        try:
            cursor = self.collection.find({"email": email}).sort("created_at", DESCENDING)
            return [self._to_record(doc) for doc in cursor]
        except PyMongoError as e:
            raise StoreError(f"find_by_email {email} failed: {e}") from e

    def insert(self, record: dict) -> str:
        document = dict(record)
        document["created_at"] = datetime.now(timezone.utc)
        try:
            result = self.collection.insert_one(document)
        except DuplicateKeyError as e:
            raise DuplicateRecord(f"{record.get('email')} already stored") from e
        except PyMongoError as e:
            raise StoreError(f"insert {record.get('email')} failed: {e}") from e
        return str(result.inserted_id)

    @staticmethod
    def _to_record(doc):
        record = {k: v for k, v in doc.items() if k != "_id"}
        record["id"] = str(doc["_id"])
        return record
