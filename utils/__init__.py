from passlib.context import CryptContext

pwd_context = CryptContext(schemes=["pbkdf2_sha256"], deprecated="auto")


def get_password_hash(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    return pwd_context.verify(plain_password, hashed_password)


def split_interests(interests) -> list:
    """Split a comma separated interests string into trimmed, non-empty items."""
    if not interests:
        return []
    return [i.strip() for i in interests.split(",") if i.strip()]
