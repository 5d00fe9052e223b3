from typing import Any, Dict, List, Protocol
from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorDatabase #type: ignore
from pymongo import ASCENDING #type: ignore

from music_analytics import config as cfg
from music_analytics.common.logger import get_logger
from music_analytics.core.pipeline import AggregationPlan

NAME_TASK = "Database Core"
logger = get_logger(NAME_TASK)

# (collection, keys, index name)
READ_INDEXES = [
    (cfg.COLLECTION_STREAMS, [("date", ASCENDING)], "idx_streams_date"),
    (cfg.COLLECTION_STREAMS, [("user_id", ASCENDING), ("date", ASCENDING)], "idx_streams_user_date"),
    (cfg.COLLECTION_STREAMS, [("song_id", ASCENDING)], "idx_streams_song"),
    (cfg.COLLECTION_STREAMS, [("artist_id", ASCENDING)], "idx_streams_artist"),
    (cfg.COLLECTION_USERS, [("subscription", ASCENDING), ("country", ASCENDING)], "idx_users_subscription_country"),
    (cfg.COLLECTION_SONGS, [("genre", ASCENDING)], "idx_songs_genre"),
    (cfg.COLLECTION_SONGS, [("artist_name", ASCENDING)], "idx_songs_artist_name"),
]


class QueryExecutor(Protocol):
    async def execute(self, plan: AggregationPlan) -> List[Dict[str, Any]]:
        ...


class Database:
    # Declared types
    _client: AsyncIOMotorClient
    _db: AsyncIOMotorDatabase

    def __init__(self, uri: str = cfg.MONGO_URI, db_name: str = cfg.MONGO_DB):
        self.uri = uri
        self.db_name = db_name
        self._client = None
        self._db = None

    @property
    def client(self) -> AsyncIOMotorClient:
        return self._client

    @property
    def db(self) -> AsyncIOMotorDatabase:
        return self._db

    async def connect_to_mongo(self):
        client = AsyncIOMotorClient(self.uri)
        self._client = client
        self._db = client[self.db_name]
        await self._client.admin.command('ping')
        logger.info(f"Connected to MongoDB database '{self.db_name}'")

    async def ping(self) -> bool:
        if self._client is None:
            return False
        try:
            await self._client.admin.command('ping')
            return True
        except Exception as e:
            logger.warning(f"MongoDB ping failed: {e}")
            return False

    async def create_indexes(self):
        """
        Create the indexes the report pipelines filter and join on.
        """
        for collection, keys, name in READ_INDEXES:
            try:
                await self._db[collection].create_index(keys, name=name)
                logger.info(f"Index {name} ready on {collection}.")
            except Exception as e:
                logger.warning(f"Index creation warning ({name}): {e}")

    def close(self):
        if self._client:
            self._client.close()
            self._client = None
            self._db = None


class MongoQueryExecutor:
    """
    Runs an AggregationPlan against MongoDB and returns the whole result set.
    Driver errors propagate unchanged.
    """

    def __init__(self, db: AsyncIOMotorDatabase):
        self._db = db

    async def execute(self, plan: AggregationPlan) -> List[Dict[str, Any]]:
        cursor = self._db[plan.collection].aggregate(plan.to_pipeline())
        return await cursor.to_list(length=None)
