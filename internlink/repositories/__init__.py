"""
Persistence adapters.

kv_store holds the string key-value backends (memory, JSON file, SQL);
collection_store layers JSON collections on top of any of them. Services
depend on CollectionStore rather than touching a backend directly.
"""
