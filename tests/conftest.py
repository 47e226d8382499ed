"""Common fixtures and mockfirestore patches for tests."""

from typing import Any, Optional

import pytest
from mockfirestore import CollectionReference, Query
from mockfirestore.document import DocumentReference

from groupfit import create_app


def patch_mockfirestore() -> None:
    """Apply monkeypatches to mockfirestore to support FieldFilter queries."""

    def collection_where(
        self: Any,
        field_path: Optional[str] = None,
        op_string: Optional[str] = None,
        value: Any = None,
        filter: Any = None,
    ) -> Any:
        if filter:
            return self._where(filter.field_path, filter.op_string, filter.value)
        return self._where(field_path, op_string, value)

    if not hasattr(CollectionReference, "_where"):
        CollectionReference._where = CollectionReference.where
        CollectionReference.where = collection_where

    def query_where(
        self: Any,
        field_path: Optional[str] = None,
        op_string: Optional[str] = None,
        value: Any = None,
        filter: Any = None,
    ) -> Any:
        if filter:
            return self._where(filter.field_path, filter.op_string, filter.value)
        return self._where(field_path, op_string, value)

    if not hasattr(Query, "_where"):
        Query._where = Query.where
        Query.where = query_where

    # Snapshots are read with an optional transaction argument
    if not hasattr(DocumentReference, "_orig_get"):
        DocumentReference._orig_get = DocumentReference.get

        def doc_ref_get(self: Any, transaction: Any = None) -> Any:
            return self._orig_get()

        DocumentReference.get = doc_ref_get


patch_mockfirestore()


@pytest.fixture
def app():
    """Create an application configured for tests."""
    app = create_app({"TESTING": True, "SERVER_NAME": "localhost"})
    with app.app_context():
        yield app


@pytest.fixture
def client(app):
    """A test client for the app."""
    return app.test_client()
