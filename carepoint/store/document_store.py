# /carepoint/store/document_store.py
import logging
import uuid
from datetime import datetime

from sqlalchemy import update

from carepoint.extensions import db
from carepoint.models.document_models import Document
from carepoint.utils.errors import ConflictError, NotFoundError
from carepoint.utils.time_util import utcnow_iso

logger = logging.getLogger(__name__)


class StaleDocumentError(ConflictError):
    default_message = "Document was modified concurrently"


class DocumentStore:
    """
    Generic document persistence on top of a single ``documents`` table.

    Offers get-by-id, field-equality queries, ordered range queries and
    shallow partial updates. There are no multi-document transactions: each
    call commits on its own. ``update`` accepts an ``expected_version`` to
    perform a compare-and-set, the only atomic primitive available to callers.
    """

    def __init__(self, session=None):
        self._session = session

    @property
    def session(self):
        return self._session or db.session

    # --- writes ---

    def create(self, collection: str, data: dict, doc_id: str = None) -> str:
        now = utcnow_iso()
        payload = {k: v for k, v in data.items() if k not in ('id', 'version')}
        payload.setdefault('createdAt', now)
        payload.setdefault('updatedAt', now)

        document = Document(
            id=doc_id or uuid.uuid4().hex,
            collection=collection,
            data=payload,
            version=1,
        )
        self.session.add(document)
        self.session.commit()
        logger.debug("Created %s/%s", collection, document.id)
        return document.id

    def update(self, collection: str, doc_id: str, changes: dict, expected_version: int = None) -> dict:
        """Merges ``changes`` into the stored document and returns the new state.

        Last write wins unless ``expected_version`` is given, in which case the
        write only lands if nobody else has written since that version.
        """
        document = self._load(collection, doc_id)
        if document is None:
            raise NotFoundError(f"{collection} document {doc_id} not found")

        current_version = document.version
        if expected_version is not None and current_version != expected_version:
            raise StaleDocumentError()

        merged = dict(document.data or {})
        merged.update({k: v for k, v in changes.items() if k not in ('id', 'version')})
        merged['updatedAt'] = utcnow_iso()

        result = self.session.execute(
            update(Document)
            .where(Document.id == doc_id, Document.collection == collection, Document.version == current_version)
            .values(data=merged, version=current_version + 1, updated_at=datetime.utcnow())
            .execution_options(synchronize_session=False)
        )
        if result.rowcount == 0:
            self.session.rollback()
            raise StaleDocumentError()

        self.session.commit()
        self.session.expire(document)
        return {**merged, 'id': doc_id, 'version': current_version + 1}

    def delete(self, collection: str, doc_id: str) -> bool:
        document = self._load(collection, doc_id)
        if document is None:
            return False
        self.session.delete(document)
        self.session.commit()
        return True

    # --- reads ---

    def get(self, collection: str, doc_id: str):
        document = self._load(collection, doc_id)
        return document.to_dict() if document else None

    def find(self, collection: str, filters: dict = None, order_by: str = None,
             descending: bool = False, limit: int = None) -> list:
        query = self._query(collection)
        for field, value in (filters or {}).items():
            query = query.filter(self._match(field, value))
        return self._finish(query, order_by, descending, limit)

    def find_one(self, collection: str, filters: dict):
        results = self.find(collection, filters, limit=1)
        return results[0] if results else None

    def find_range(self, collection: str, field: str, start=None, end=None, filters: dict = None,
                   descending: bool = False, limit: int = None) -> list:
        """Documents whose ``field`` lies in the inclusive [start, end] range, ordered by it."""
        query = self._query(collection)
        column = self._accessor(field, start if start is not None else end)
        if start is not None:
            query = query.filter(column >= start)
        if end is not None:
            query = query.filter(column <= end)
        for name, value in (filters or {}).items():
            query = query.filter(self._match(name, value))
        return self._finish(query, field, descending, limit)

    def all(self, collection: str, order_by: str = None, descending: bool = False, limit: int = None) -> list:
        return self.find(collection, order_by=order_by, descending=descending, limit=limit)

    # --- helpers ---

    def _load(self, collection, doc_id):
        if not doc_id:
            return None
        return self.session.query(Document).filter_by(collection=collection, id=str(doc_id)).first()

    def _query(self, collection):
        return self.session.query(Document).filter(Document.collection == collection)

    def _finish(self, query, order_by, descending, limit):
        if order_by:
            column = Document.data[order_by].as_string()
            query = query.order_by(column.desc() if descending else column.asc(), Document.created_at)
        else:
            query = query.order_by(Document.created_at)
        if limit:
            query = query.limit(int(limit))
        return [document.to_dict() for document in query.all()]

    @staticmethod
    def _accessor(field, sample):
        element = Document.data[field]
        if isinstance(sample, bool):
            return element.as_boolean()
        if isinstance(sample, int):
            return element.as_integer()
        if isinstance(sample, float):
            return element.as_float()
        return element.as_string()

    def _match(self, field, value):
        if isinstance(value, (list, tuple, set)):
            values = list(value)
            sample = values[0] if values else ''
            return self._accessor(field, sample).in_(values)
        return self._accessor(field, value) == value
