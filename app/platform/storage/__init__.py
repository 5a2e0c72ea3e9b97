from app.platform.storage.object_store import (
    HttpObjectStore,
    LocalObjectStore,
    ObjectStore,
    get_object_store,
)

__all__ = ["ObjectStore", "LocalObjectStore", "HttpObjectStore", "get_object_store"]
