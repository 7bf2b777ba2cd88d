from models.db_storage import DBStorage
from models.token_store import SQLTokenStore
from models.user_store import EmailTaken, UserStore

__all__ = ["DBStorage", "SQLTokenStore", "UserStore", "EmailTaken"]
