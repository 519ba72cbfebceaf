"""Document model - PDF metadata (actual bytes live in the upload directory)."""
from sqlalchemy import String, BigInteger
from sqlalchemy.orm import Mapped, mapped_column
from docstore.models.base import Base, CreatedAtMixin


class Document(Base, CreatedAtMixin):
    __tablename__ = "documents"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    original_filename: Mapped[str] = mapped_column(String(500), nullable=False)
    stored_filename: Mapped[str] = mapped_column(String(100), nullable=False, unique=True)
    filepath: Mapped[str] = mapped_column(String(1000), nullable=False)
    filesize: Mapped[int] = mapped_column(BigInteger, nullable=False)

    def __repr__(self) -> str:
        return f"<Document id={self.id} stored_filename={self.stored_filename!r}>"
