"""
services.file_storage - Path-addressable content store backed by the
``files`` table.

A file is addressed by (contextid, component, filearea, itemid,
filepath, filename).  Every directory on a file's path has its own
entry with filename ".", so directory listings come from the same
query as file listings.
"""

from __future__ import annotations

from sqlalchemy.orm import Session

from db.models import StoredFile


class FileStorage:

    def __init__(self, session: Session):
        self.session = session

    def get_area_files(
        self,
        contextid: int,
        component: str,
        filearea: str,
        itemid: int | None = None,
    ) -> list[StoredFile]:
        """All files and directory entries of an area, sorted by path."""
        q = self.session.query(StoredFile).filter(
            StoredFile.contextid == contextid,
            StoredFile.component == component,
            StoredFile.filearea == filearea,
        )
        if itemid is not None:
            q = q.filter(StoredFile.itemid == itemid)
        return q.order_by(StoredFile.itemid, StoredFile.filepath,
                          StoredFile.filename).all()

    def get_file(
        self,
        contextid: int,
        component: str,
        filearea: str,
        itemid: int,
        filepath: str,
        filename: str,
    ) -> StoredFile | None:
        return self.session.query(StoredFile).filter(
            StoredFile.contextid == contextid,
            StoredFile.component == component,
            StoredFile.filearea == filearea,
            StoredFile.itemid == itemid,
            StoredFile.filepath == filepath,
            StoredFile.filename == filename,
        ).one_or_none()

    def file_exists(self, contextid, component, filearea, itemid,
                    filepath, filename) -> bool:
        return self.get_file(contextid, component, filearea, itemid,
                             filepath, filename) is not None

    def create_directory(self, contextid, component, filearea, itemid,
                         filepath) -> StoredFile:
        """Create a directory entry and its parents.  Idempotent."""
        filepath = _normalise_path(filepath)
        existing = self.get_file(contextid, component, filearea, itemid,
                                 filepath, ".")
        if existing is not None:
            return existing
        if filepath != "/":
            parent = filepath.rstrip("/").rsplit("/", 1)[0] + "/"
            self.create_directory(contextid, component, filearea, itemid, parent)
        entry = StoredFile(
            contextid=contextid, component=component, filearea=filearea,
            itemid=itemid, filepath=filepath, filename=".",
        )
        self.session.add(entry)
        self.session.flush()
        return entry

    def create_file_from_string(
        self,
        contextid: int,
        component: str,
        filearea: str,
        itemid: int,
        filepath: str,
        filename: str,
        content: str | bytes,
    ) -> StoredFile:
        filepath = _normalise_path(filepath)
        if self.file_exists(contextid, component, filearea, itemid,
                            filepath, filename):
            raise FileExistsError(f"{filepath}{filename} already exists")
        self.create_directory(contextid, component, filearea, itemid, filepath)
        if isinstance(content, str):
            content = content.encode("utf-8")
        stored = StoredFile(
            contextid=contextid, component=component, filearea=filearea,
            itemid=itemid, filepath=filepath, filename=filename,
            content=content,
        )
        self.session.add(stored)
        self.session.flush()
        return stored


def _normalise_path(filepath: str) -> str:
    return "/" + filepath.strip("/") + "/" if filepath.strip("/") else "/"
