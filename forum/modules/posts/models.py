"""Post SQLAlchemy model.

Translation fields start at their defaults (`is_english=True`, empty
`translated_content`) and are filled in by the background translation when the
content was not already cached.
"""

from __future__ import annotations

from sqlalchemy import BigInteger, Boolean, Column, Integer, String, Text, false, true

from forum.core.database import Base


class Post(Base):
    __tablename__ = "posts"

    pid = Column(Integer, primary_key=True, autoincrement=True)
    uid = Column(Integer, nullable=False, index=True)
    tid = Column(Integer, nullable=False, index=True)
    content = Column(Text, nullable=False)
    source_content = Column(Text, nullable=True)
    # Milliseconds since the epoch.
    timestamp = Column(BigInteger, nullable=False)
    is_english = Column(Boolean, nullable=False, default=True, server_default=true())
    translated_content = Column(Text, nullable=False, default="", server_default="")
    to_pid = Column(Integer, nullable=True, index=True)
    ip = Column(String(64), nullable=True)
    handle = Column(String(255), nullable=True)
    replies = Column(Integer, nullable=False, default=0, server_default="0")
    deleted = Column(Boolean, nullable=False, default=False, server_default=false())

    def to_dict(self) -> dict:
        return {column.name: getattr(self, column.name) for column in self.__table__.columns}


__all__ = ["Post"]
