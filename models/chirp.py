"""
Chirp model: a short text post owned by a user.
Fields:
- id, created_at, updated_at (BaseModel)
- body (at most CHIRP_MAX_LENGTH characters, enforced by the API)
- user_id (String(36)) - FK to users.id
"""
from sqlalchemy import Column, String, Text, ForeignKey
from sqlalchemy.orm import relationship

from models.base_model import Base, BaseModel

CHIRP_MAX_LENGTH = 140


class Chirp(BaseModel, Base):
    __tablename__ = "chirps"

    body = Column(Text, nullable=False)
    user_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)

    user = relationship("User", back_populates="chirps")
