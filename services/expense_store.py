"""MongoDB persistence for expense records."""
import logging
from typing import List, Optional
from models.expense import Expense
from services.errors import StorageError
from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorCollection # Type hint for collection
from pydantic import ValidationError
from pymongo.errors import PyMongoError

logger = logging.getLogger(__name__)


class ExpenseStore:
    """
    Inserts and lists expense documents in a single MongoDB collection.

    The store is built once by the application entry point and handed to
    whoever needs it. When created through `connect` it owns the client and
    closes it in `close`.
    """

    def __init__(self, collection: AsyncIOMotorCollection, client: Optional[AsyncIOMotorClient] = None):
        self.collection = collection
        self.client = client
        # Ids of documents skipped by the last list_all call
        self.last_skipped: List[str] = []

    @classmethod
    def connect(cls, uri: str, db_name: str, collection_name: str = "expenses") -> "ExpenseStore":
        """Creates the client. The driver only opens sockets on first use."""
        logger.info(f"Creating MongoDB client for database '{db_name}'...")
        client = AsyncIOMotorClient(uri)
        collection = client[db_name].get_collection(collection_name)
        return cls(collection, client=client)

    @property
    def database_name(self) -> str:
        return self.collection.database.name

    async def ping(self) -> None:
        if self.client is None:
            return
        try:
            await self.client.admin.command('ping')
        except PyMongoError as e:
            logger.error(f"MongoDB ping failed: {e}")
            raise StorageError(f"Cannot reach database: {e}") from e
        logger.info("MongoDB ping successful.")

    async def insert(self, expense: Expense) -> Expense:
        """Stores the expense and writes the generated id back onto it."""
        document = expense.to_document()
        try:
            result = await self.collection.insert_one(document)
        except PyMongoError as e:
            logger.error(f"Database error inserting expense: {e}")
            raise StorageError(f"Database error inserting expense: {e}") from e
        expense.id = str(result.inserted_id)
        logger.info(f"Inserted expense {expense.id} ({expense.category}, {expense.amount:.2f}).")
        return expense

    async def list_all(self) -> List[Expense]:
        """Fetches every expense, most recent date first.

        Documents that fail validation are skipped; their ids end up in
        `last_skipped`.
        """
        logger.info(f"Fetching all expenses from collection '{self.collection.name}'...")
        expenses = []
        skipped = []
        try:
            cursor = self.collection.find().sort('date', -1)
            async for doc in cursor:
                try:
                    expenses.append(Expense.from_document(doc))
                except ValidationError as e:
                    doc_id = str(doc.get('_id', 'N/A'))
                    logger.error(f"Data validation error for document ID {doc_id}: {e}")
                    skipped.append(doc_id)
        except PyMongoError as e:
            logger.error(f"Database error fetching expenses: {e}")
            raise StorageError(f"Database error fetching expenses: {e}") from e
        self.last_skipped = skipped
        logger.info(f"Fetched {len(expenses)} expenses successfully ({len(skipped)} skipped).")
        return expenses

    def close(self) -> None:
        if self.client is not None:
            logger.info("Closing MongoDB connection...")
            self.client.close()
            self.client = None
            logger.info("MongoDB connection closed.")
