# /carepoint/repositories/base_repository.py
from carepoint.store.document_store import DocumentStore


class BaseRepository:
    """Entity-shaped CRUD over one collection of the document store.

    Repositories hold no state beyond the store handle, so one instance can be
    shared by every request.
    """
    collection_name = None

    def __init__(self, store: DocumentStore):
        self.store = store

    def find_by_id(self, doc_id):
        return self.store.get(self.collection_name, doc_id)

    def find_all(self, limit=None, order_by='createdAt', descending=True):
        return self.store.all(self.collection_name, order_by=order_by, descending=descending, limit=limit)

    def create(self, data: dict) -> str:
        return self.store.create(self.collection_name, data)

    def update(self, doc_id, data: dict, expected_version=None) -> dict:
        return self.store.update(self.collection_name, doc_id, data, expected_version=expected_version)

    def delete(self, doc_id) -> bool:
        return self.store.delete(self.collection_name, doc_id)

    def _find_first(self, **filters):
        return self.store.find_one(self.collection_name, filters)
