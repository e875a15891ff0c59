"""User model for the database."""

from sqlalchemy import Column, Integer, String, Date

from components.core.database import Base


class User(Base):
    """User model; the owner of every ledger row."""
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    login = Column(String(50), unique=True, nullable=False)
    password = Column(String(255), nullable=False)  # Hashed password
    name = Column(String(100), nullable=False, default="")
    registration_date = Column(Date, nullable=False)
