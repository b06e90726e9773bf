from datetime import UTC, datetime

from sqlmodel import Field, Relationship, SQLModel


def utcnow() -> datetime:
    # SQLite drops tzinfo, so timestamps are stored as naive UTC
    return datetime.now(UTC).replace(tzinfo=None)


class User(SQLModel, table=True):
    id: int | None = Field(default=None, primary_key=True)
    username: str = Field(..., unique=True, index=True, description="Unique username")
    password_hash: bytes = Field(..., description="Scrypt digest of the password")
    password_salt: bytes = Field(..., description="Random salt used for the digest")

    # Relationships
    tokens: list["AuthToken"] = Relationship(back_populates="user")
    texts: list["TextRecord"] = Relationship(back_populates="owner")


class AuthToken(SQLModel, table=True):
    id: int | None = Field(default=None, primary_key=True)
    token: str = Field(..., unique=True, index=True, description="Bearer token")
    f_username: str = Field(
        ..., foreign_key="user.username", description="Foreign key to User.username"
    )
    expires_at: datetime = Field(..., description="Naive UTC expiry timestamp")

    user: User | None = Relationship(back_populates="tokens")

    @property
    def expired(self) -> bool:
        return self.expires_at <= utcnow()


class TextRecord(SQLModel, table=True):
    id: int | None = Field(default=None, primary_key=True)
    owner_username: str = Field(
        ..., foreign_key="user.username", index=True, description="Owner of the text"
    )
    content: str = Field(..., description="Plaintext or ciphertext, depending on state")
    key_digest: str | None = Field(
        default=None,
        description="Digest of the key that produced the content; None when plain",
    )
    date_created: datetime = Field(default_factory=utcnow)
    date_updated: datetime = Field(default_factory=utcnow)

    owner: User | None = Relationship(back_populates="texts")

    @property
    def encrypted(self) -> bool:
        return self.key_digest is not None
