from carepoint.store.document_store import DocumentStore, StaleDocumentError

__all__ = ['DocumentStore', 'StaleDocumentError']
