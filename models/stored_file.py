from datetime import datetime

from sqlalchemy import DateTime, Index, Integer, LargeBinary
from sqlalchemy.orm import Mapped, mapped_column

from extensions import db

class StoredFile(db.Model):
    __tablename__ = "files"

    id: Mapped[int] = mapped_column(primary_key=True)
    context_id: Mapped[int] = mapped_column(Integer, nullable=False)
    component: Mapped[str] = mapped_column(db.String(100), nullable=False)
    filearea: Mapped[str] = mapped_column(db.String(50), nullable=False)
    itemid: Mapped[int] = mapped_column(Integer, nullable=False)
    filepath: Mapped[str] = mapped_column(db.String(255), nullable=False, default="/")
    filename: Mapped[str] = mapped_column(db.String(255), nullable=False)
    mimetype: Mapped[str | None] = mapped_column(db.String(100))
    filesize: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    content: Mapped[bytes] = mapped_column(LargeBinary, nullable=False, default=b"")
    pathnamehash: Mapped[str] = mapped_column(db.String(40), nullable=False, unique=True)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow, nullable=False)

    __table_args__ = (
        Index("ix_files_area", "context_id", "component", "filearea", "itemid"),
    )

    @property
    def is_directory(self) -> bool:
        return self.filename == "."

    def __repr__(self):
        return f"<StoredFile {self.component}/{self.filearea}/{self.itemid}{self.filepath}{self.filename}>"
