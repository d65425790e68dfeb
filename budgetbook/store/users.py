"""User registration and login.

Passwords are stored as salted PBKDF2 hashes. The ledger layer only ever
sees the resolved integer user id.
"""

import hashlib
import hmac
import logging
import secrets
import sqlite3
from pathlib import Path

from budgetbook.store.queries import _connect

logger = logging.getLogger(__name__)

HASH_ITERATIONS = 200_000


class UserExistsError(Exception):
    """An account with this email is already registered."""


class AuthenticationError(Exception):
    """No account matches this email and password."""


def normalize_email(email: str) -> str:
    return email.strip().lower()


def hash_password(password: str, salt: str | None = None) -> str:
    """Hash a password for storage.

    Args:
        password: Plain-text password.
        salt: Hex salt. If None, a random one is generated.

    Returns:
        "<salt>$<hex digest>" string.
    """
    if salt is None:
        salt = secrets.token_hex(16)
    digest = hashlib.pbkdf2_hmac("sha256", password.encode(), bytes.fromhex(salt), HASH_ITERATIONS)
    return f"{salt}${digest.hex()}"


def verify_password(password: str, stored: str) -> bool:
    salt, _, _ = stored.partition("$")
    return hmac.compare_digest(hash_password(password, salt), stored)


def register_user(email: str, password: str, db_path: Path | None = None) -> int:
    """Create an account.

    Args:
        email: Account email (case-insensitive).
        password: Plain-text password.
        db_path: Path to the database file. If None, uses default location.

    Returns:
        New user id.

    Raises:
        ValueError: If email or password is empty.
        UserExistsError: If the email is already registered.
        sqlite3.Error: If database operation fails.
    """
    email = normalize_email(email)
    if not email or not password:
        raise ValueError("Email and password are required")

    with _connect(db_path) as conn:
        cursor = conn.cursor()
        try:
            cursor.execute("SELECT id FROM users WHERE email = ?", (email,))
            if cursor.fetchone():
                raise UserExistsError(f"User '{email}' already exists")

            cursor.execute(
                "INSERT INTO users (email, password_hash) VALUES (?, ?)",
                (email, hash_password(password)),
            )
            user_id = cursor.lastrowid
            conn.commit()
        except sqlite3.IntegrityError as e:
            conn.rollback()
            raise UserExistsError(f"User '{email}' already exists") from e
        except sqlite3.Error:
            conn.rollback()
            raise

    logger.info("Registered user %s", user_id)
    return int(user_id)


def authenticate_user(email: str, password: str, db_path: Path | None = None) -> int:
    """Resolve an email and password to a user id.

    Raises:
        AuthenticationError: If no account matches.
        sqlite3.Error: If database operation fails.
    """
    with _connect(db_path) as conn:
        cursor = conn.cursor()
        cursor.execute("SELECT id, password_hash FROM users WHERE email = ?", (normalize_email(email),))
        row = cursor.fetchone()

    if row is None or not verify_password(password, row["password_hash"]):
        raise AuthenticationError("Invalid email or password")
    return int(row["id"])
