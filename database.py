"""
MongoDB access for the storefront.

`db` is the shared database handle; the client pools connections and only
connects on first use. Collection names are the lowercase schema class names.
"""
import os
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Union

from bson import ObjectId
from pydantic import BaseModel
from pymongo import MongoClient, ReturnDocument

DATABASE_URL = os.getenv("DATABASE_URL", "mongodb://localhost:27017")
DATABASE_NAME = os.getenv("DATABASE_NAME", "storefront")

# Collections listed here are deleted by flagging isDeleted, the rest are removed.
SOFT_DELETE_COLLECTIONS = {"product"}

client = MongoClient(DATABASE_URL)
db = client[DATABASE_NAME]


def _as_dict(data: Union[BaseModel, Dict[str, Any]]) -> Dict[str, Any]:
    if isinstance(data, BaseModel):
        return data.model_dump(by_alias=True)
    return dict(data)


def create_document(collection_name: str, data: Union[BaseModel, Dict[str, Any]]) -> str:
    """Insert a document, stamping createdAt/updatedAt. Returns the new id as a string."""
    doc = _as_dict(data)
    now = datetime.now(timezone.utc)
    doc.setdefault("createdAt", now)
    doc["updatedAt"] = now
    result = db[collection_name].insert_one(doc)
    return str(result.inserted_id)


def get_documents(collection_name: str, filter_dict: Optional[Dict[str, Any]] = None) -> List[Dict[str, Any]]:
    return list(db[collection_name].find(filter_dict or {}))


def update_document(collection_name: str, doc_id: ObjectId, changes: Dict[str, Any]) -> Optional[Dict[str, Any]]:
    """Apply a $set and return the updated document, or None when nothing matched."""
    return db[collection_name].find_one_and_update(
        {"_id": doc_id},
        {"$set": {**changes, "updatedAt": datetime.now(timezone.utc)}},
        return_document=ReturnDocument.AFTER,
    )


def delete_document(collection_name: str, doc_id: ObjectId) -> Optional[Dict[str, Any]]:
    """Delete a document according to the collection's deletion policy.

    Soft-deleted collections keep the document and flip isDeleted; the flagged
    document is returned. Other collections remove the document and return it
    as it was before removal. None means no document had that id.
    """
    if collection_name in SOFT_DELETE_COLLECTIONS:
        return update_document(collection_name, doc_id, {"isDeleted": True})
    return db[collection_name].find_one_and_delete({"_id": doc_id})
