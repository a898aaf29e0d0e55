from pos_backoffice.services.stores.service import StoreService

__all__ = ["StoreService"]
