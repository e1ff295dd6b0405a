import datetime
import secrets
from typing import Optional

import jwt  # Import PyJWT
from jwt import ExpiredSignatureError, InvalidTokenError
from passlib.context import CryptContext


class SecurityService:
    def __init__(self, config):
        self.config = config
        # one-time codes are short-lived, pbkdf2 keeps hashing cheap and pure-python
        self.code_context = CryptContext(schemes=["pbkdf2_sha256"], deprecated="auto")

    def generate_one_time_code(self) -> str:
        return "".join(
            secrets.choice("0123456789") for _ in range(self.config.OTP_LENGTH)
        )

    def hash_code(self, code: str) -> str:
        return self.code_context.hash(code)

    def verify_code(self, plain_code: str, code_hash: str) -> bool:
        return self.code_context.verify(plain_code, code_hash)

    def generate_guest_token(self) -> str:
        return secrets.token_urlsafe(24)

    def create_access_token(
        self, data: dict, expires_delta: Optional[datetime.timedelta] = None
    ):
        to_encode = data.copy()
        to_encode.update({"nonce": secrets.token_hex(8)})  # Add a random nonce
        if expires_delta:
            expire = datetime.datetime.now(datetime.timezone.utc) + expires_delta
        else:
            expire = datetime.datetime.now(datetime.timezone.utc) + datetime.timedelta(
                minutes=self.config.ACCESS_TOKEN_EXPIRE_MINUTES
            )
        to_encode.update({"exp": expire})
        encoded_jwt = jwt.encode(
            to_encode, self.config.SECRET_KEY, algorithm=self.config.ALGORITHM
        )
        return encoded_jwt, expire

    def create_refresh_token(self, data: dict):
        to_encode = data.copy()
        to_encode.update({"nonce": secrets.token_hex(8)})
        expire = datetime.datetime.now(datetime.timezone.utc) + datetime.timedelta(
            days=self.config.REFRESH_TOKEN_EXPIRE_DAYS
        )
        to_encode.update({"exp": expire})
        encoded_jwt = jwt.encode(
            to_encode, self.config.REFRESH_SECRET_KEY, algorithm=self.config.ALGORITHM
        )
        return encoded_jwt, expire

    def _decode_subject(self, token: str, key: str) -> Optional[int]:
        try:
            payload = jwt.decode(token, key, algorithms=[self.config.ALGORITHM])
        except (ExpiredSignatureError, InvalidTokenError):
            return None
        subject = payload.get("sub")
        if subject is None or not str(subject).isdigit():
            return None
        return int(subject)

    def decode_access_token(self, token: str) -> Optional[int]:
        """Return the user id carried by a valid access token."""
        return self._decode_subject(token, self.config.SECRET_KEY)

    def decode_refresh_token(self, token: str) -> Optional[int]:
        return self._decode_subject(token, self.config.REFRESH_SECRET_KEY)
