from models.db_storage import DBStorage

__all__ = ["DBStorage"]
