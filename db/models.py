"""
db.models - SQLAlchemy ORM declarations.

Tables
------
data          - one row per data activity.  Settings and HTML templates are
                plain columns so a preset import can overwrite them by name.
data_fields   - field definitions belonging to an activity.
data_records  - entries added by users.
data_content  - one value per (record, field).  Deleted with its field.
files         - content store.  Rows with filename "." are directory entries.
"""

from __future__ import annotations

from datetime import datetime, timezone

from sqlalchemy import (
    Column, String, Integer, DateTime, Text, LargeBinary, ForeignKey, Index,
)
from sqlalchemy.orm import DeclarativeBase, validates


class Base(DeclarativeBase):
    pass


def _now() -> datetime:
    return datetime.now(timezone.utc)


class DataModule(Base):
    __tablename__ = "data"

    id     = Column(Integer, primary_key=True, autoincrement=True)
    course = Column(Integer, nullable=False, default=0, index=True)
    name   = Column(String(255), nullable=False, default="")

    # ── Settings ───────────────────────────────────────────────────────
    intro                 = Column(Text, default="")
    introformat           = Column(Integer, default=0)
    comments              = Column(Integer, default=0)
    requiredentries       = Column(Integer, default=0)
    requiredentriestoview = Column(Integer, default=0)
    maxentries            = Column(Integer, default=0)
    rssarticles           = Column(Integer, default=0)
    approval              = Column(Integer, default=0)
    manageapproved        = Column(Integer, default=1)
    defaultsort           = Column(Integer, default=0)
    defaultsortdir        = Column(Integer, default=0)
    editany               = Column(Integer, default=0)
    notification          = Column(Integer, default=0)

    # ── Templates ──────────────────────────────────────────────────────
    singletemplate     = Column(Text)
    listtemplate       = Column(Text)
    listtemplateheader = Column(Text)
    listtemplatefooter = Column(Text)
    addtemplate        = Column(Text)
    rsstemplate        = Column(Text)
    rsstitletemplate   = Column(Text)
    csstemplate        = Column(Text)
    jstemplate         = Column(Text)
    asearchtemplate    = Column(Text)

    timemodified = Column(DateTime, default=_now, onupdate=_now)

    @validates(
        "course", "introformat", "comments", "requiredentries",
        "requiredentriestoview", "maxentries", "rssarticles", "approval",
        "manageapproved", "defaultsort", "defaultsortdir", "editany",
        "notification",
    )
    def _coerce_int(self, key, value):
        # Preset settings arrive as text
        if value is None or value == "":
            return 0
        return int(value)

    @classmethod
    def setting_names(cls) -> list[str]:
        """Every column a preset import may overwrite."""
        return [c.key for c in cls.__table__.columns if c.key != "id"]

    def to_dict(self) -> dict:
        d = {c.key: getattr(self, c.key) for c in self.__table__.columns}
        d["timemodified"] = self.timemodified.isoformat() if self.timemodified else ""
        return d


class DataField(Base):
    __tablename__ = "data_fields"

    id          = Column(Integer, primary_key=True, autoincrement=True)
    dataid      = Column(Integer, ForeignKey("data.id", ondelete="CASCADE"),
                         nullable=False, index=True)
    type        = Column(String(255), nullable=False, default="")
    name        = Column(String(255), nullable=False, default="")
    description = Column(Text, nullable=False, default="")
    required    = Column(Integer, nullable=False, default=0)
    param1      = Column(Text)
    param2      = Column(Text)
    param3      = Column(Text)
    param4      = Column(Text)
    param5      = Column(Text)
    param6      = Column(Text)
    param7      = Column(Text)
    param8      = Column(Text)
    param9      = Column(Text)
    param10     = Column(Text)

    __table_args__ = (
        Index("ix_field_name", "dataid", "name"),
    )

    @validates("dataid", "required")
    def _coerce_int(self, key, value):
        if value is None or value == "":
            return 0
        return int(value)

    @classmethod
    def attribute_names(cls) -> set[str]:
        return {c.key for c in cls.__table__.columns}

    def to_dict(self) -> dict:
        return {c.key: getattr(self, c.key) for c in self.__table__.columns}


class DataRecord(Base):
    __tablename__ = "data_records"

    id          = Column(Integer, primary_key=True, autoincrement=True)
    dataid      = Column(Integer, ForeignKey("data.id", ondelete="CASCADE"),
                         nullable=False, index=True)
    userid      = Column(Integer, nullable=False, default=0)
    timecreated = Column(DateTime, default=_now)


class DataContent(Base):
    __tablename__ = "data_content"

    id       = Column(Integer, primary_key=True, autoincrement=True)
    fieldid  = Column(Integer, ForeignKey("data_fields.id", ondelete="CASCADE"),
                      nullable=False, index=True)
    recordid = Column(Integer, ForeignKey("data_records.id", ondelete="CASCADE"),
                      nullable=False, index=True)
    content  = Column(Text)
    content1 = Column(Text)
    content2 = Column(Text)
    content3 = Column(Text)
    content4 = Column(Text)


class StoredFile(Base):
    """
    One file (or directory entry) in the content store.

    Addressed by (contextid, component, filearea, itemid, filepath, filename),
    filepath always starts and ends with "/".
    """
    __tablename__ = "files"

    id          = Column(Integer, primary_key=True, autoincrement=True)
    contextid   = Column(Integer, nullable=False)
    component   = Column(String(100), nullable=False)
    filearea    = Column(String(50), nullable=False)
    itemid      = Column(Integer, nullable=False, default=0)
    filepath    = Column(String(255), nullable=False, default="/")
    filename    = Column(String(255), nullable=False)
    content     = Column(LargeBinary)
    timecreated = Column(DateTime, default=_now)

    __table_args__ = (
        Index("ix_file_location", "contextid", "component", "filearea",
              "itemid", "filepath", "filename", unique=True),
    )

    def is_directory(self) -> bool:
        return self.filename == "."

    def get_content(self) -> bytes:
        return self.content or b""
