import uuid

from sqlalchemy import Column, String
from sqlalchemy.orm import relationship

from models.base_model import Base, BaseModel


class User(BaseModel, Base):
    __tablename__ = "users"
    email = Column(String(255), nullable=False, unique=True, index=True)
    password_hash = Column(String(255), nullable=False)

    refresh_tokens = relationship(
        "RefreshToken",
        back_populates="user",
        passive_deletes=True,
    )
    chirps = relationship(
        "Chirp",
        back_populates="user",
        passive_deletes=True,
    )

    @property
    def id_uuid(self) -> uuid.UUID:
        return uuid.UUID(self.id)
