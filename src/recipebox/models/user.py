from sqlalchemy import Boolean, Column, DateTime, Integer, String
from sqlalchemy.orm import Mapped

from recipebox.db.base import Base


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True)
    username = Column(String, index=True, nullable=False, unique=True)
    first_name = Column(String, nullable=True)
    last_name = Column(String, nullable=True)
    email = Column(String, nullable=True)
    is_active = Column(Boolean, nullable=False, default=True)
    date_joined = Column(DateTime, nullable=True)
    is_first_login: Mapped[bool] = Column(Boolean, nullable=False, default=True)
    last_login = Column(DateTime, nullable=True)
