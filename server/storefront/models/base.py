"""Declarative base shared by all ORM models."""
from sqlalchemy import BigInteger, Integer
from sqlalchemy.orm import DeclarativeBase

# SQLite only autoincrements INTEGER PRIMARY KEY columns
PrimaryKeyType = BigInteger().with_variant(Integer, "sqlite")


class Base(DeclarativeBase):
    """Base class for ORM models."""
