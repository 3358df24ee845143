from zenni.store.progression_store import ProgressionStore, InMemoryProgressionStore

__all__ = ["ProgressionStore", "InMemoryProgressionStore"]
