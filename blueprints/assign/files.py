from __future__ import annotations
import hashlib
import logging
import mimetypes
from typing import Any

from sqlalchemy import select

from extensions import db
from models import StoredFile

log = logging.getLogger(__name__)

def get_file_storage() -> "FileStorage":
    return FileStorage()


class FileStorage:
    """Файлы областей (context, component, filearea, itemid) в таблице files."""

    @staticmethod
    def pathname_hash(context_id: int, component: str, filearea: str, itemid: int,
                      filepath: str, filename: str) -> str:
        path = f"/{context_id}/{component}/{filearea}/{itemid}{filepath}{filename}"
        return hashlib.sha1(path.encode("utf-8")).hexdigest()

    def _store(self, record: dict[str, Any], content: bytes) -> StoredFile:
        filepath = record.get("filepath") or "/"
        filename = record["filename"]
        phash = self.pathname_hash(record["context_id"], record["component"], record["filearea"],
                                   record["itemid"], filepath, filename)
        if db.session.execute(select(StoredFile.id).where(StoredFile.pathnamehash == phash)).first():
            raise FileExistsError(f"file already exists: {filepath}{filename}")
        f = StoredFile(
            context_id=record["context_id"],
            component=record["component"],
            filearea=record["filearea"],
            itemid=record["itemid"],
            filepath=filepath,
            filename=filename,
            mimetype=record.get("mimetype") or mimetypes.guess_type(filename)[0],
            filesize=len(content),
            content=content,
            pathnamehash=phash,
        )
        db.session.add(f)
        db.session.flush()
        return f

    def create_file_from_string(self, record: dict[str, Any], content: str | bytes) -> StoredFile:
        if isinstance(content, str):
            content = content.encode("utf-8")
        return self._store(record, content)

    def create_file_from_storedfile(self, field_updates: dict[str, Any], source: StoredFile) -> StoredFile:
        record = {
            "context_id": source.context_id,
            "component": source.component,
            "filearea": source.filearea,
            "itemid": source.itemid,
            "filepath": source.filepath,
            "filename": source.filename,
            "mimetype": source.mimetype,
        }
        record.update(field_updates)
        return self._store(record, source.content)

    def get_area_files(self, context_id: int, component: str, filearea: str, itemid: int | None = None,
                       sort: str = "id", include_dirs: bool = True) -> list[StoredFile]:
        stmt = select(StoredFile).where(
            StoredFile.context_id == context_id,
            StoredFile.component == component,
            StoredFile.filearea == filearea,
        )
        if itemid is not None:
            stmt = stmt.where(StoredFile.itemid == itemid)
        if not include_dirs:
            stmt = stmt.where(StoredFile.filename != ".")
        stmt = stmt.order_by(getattr(StoredFile, sort))
        return list(db.session.execute(stmt).scalars())

    def delete_area_files(self, context_id: int, component: str, filearea: str,
                          itemid: int | None = None) -> int:
        files = self.get_area_files(context_id, component, filearea, itemid)
        for f in files:
            db.session.delete(f)
        db.session.flush()
        if files:
            log.info("deleted %d file(s) from %s/%s", len(files), component, filearea)
        return len(files)
