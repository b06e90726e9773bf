from fastapi import HTTPException
from sqlalchemy import update
from sqlmodel import Session, select

from hillcipher.models.schema import TextRecord, utcnow
from hillcipher.shared.logger import Logger

__all__ = ["TextRepository"]

logger = Logger(__name__).get_logger()


class TextRepository:
    """Create, read, update, delete and list text records for one owner.

    Records belonging to someone else behave as if they did not exist.
    """

    def __init__(self, session: Session, owner: str):
        self.session = session
        self.owner = owner

    def create(self, content: str) -> TextRecord:
        record = TextRecord(owner_username=self.owner, content=content)
        self.session.add(record)
        self.session.commit()
        self.session.refresh(record)
        logger.info("Created text %s for %s", record.id, self.owner)
        return record

    def get(self, text_id: int) -> TextRecord:
        record = self.session.exec(
            select(TextRecord).where(
                TextRecord.id == text_id,
                TextRecord.owner_username == self.owner,
            )
        ).first()
        if record is None:
            raise HTTPException(status_code=404, detail=f"Text {text_id} not found")
        return record

    def list(self) -> list[TextRecord]:
        return list(
            self.session.exec(
                select(TextRecord)
                .where(TextRecord.owner_username == self.owner)
                .order_by(TextRecord.id)
            ).all()
        )

    def update(self, text_id: int, content: str) -> TextRecord:
        """Replace the content; the new content is plaintext."""
        return self.store(text_id, content, key_digest=None)

    def store(self, text_id: int, content: str, key_digest: str | None) -> TextRecord:
        record = self.get(text_id)
        record.content = content
        record.key_digest = key_digest
        record.date_updated = utcnow()
        self.session.add(record)
        self.session.commit()
        self.session.refresh(record)
        logger.info(
            "Stored text %s for %s (encrypted: %s)", text_id, self.owner, record.encrypted
        )
        return record

    def transition(
        self,
        text_id: int,
        content: str,
        key_digest: str | None,
        expected_content: str,
        expected_digest: str | None,
    ) -> TextRecord:
        """Store ``content`` only if the record still holds ``expected_content``
        under ``expected_digest``.

        The check and the write are a single UPDATE, so of two concurrent
        encrypt (or decrypt) requests only one succeeds; the other gets 409.
        """
        current = (
            TextRecord.key_digest.is_(None)
            if expected_digest is None
            else TextRecord.key_digest == expected_digest
        )
        statement = (
            update(TextRecord)
            .where(
                TextRecord.id == text_id,
                TextRecord.owner_username == self.owner,
                TextRecord.content == expected_content,
                current,
            )
            .values(content=content, key_digest=key_digest, date_updated=utcnow())
        )
        result = self.session.connection().execute(statement)
        self.session.commit()

        if result.rowcount != 1:
            logger.warning("Text %s changed state before it could be stored", text_id)
            raise HTTPException(
                status_code=409,
                detail=f"Text {text_id} was modified by another request",
            )

        self.session.expire_all()
        record = self.get(text_id)
        logger.info(
            "Stored text %s for %s (encrypted: %s)", text_id, self.owner, record.encrypted
        )
        return record

    def delete(self, text_id: int) -> None:
        record = self.get(text_id)
        self.session.delete(record)
        self.session.commit()
        logger.info("Deleted text %s for %s", text_id, self.owner)
