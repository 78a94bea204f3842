"""Client identity store with SQLite persistence."""

import logging
import sqlite3
from datetime import datetime, timedelta, timezone
from pathlib import Path

from cryptography import x509
from cryptography.hazmat.primitives import hashes, serialization
from cryptography.hazmat.primitives.asymmetric import rsa
from cryptography.x509.oid import NameOID

from .core.protocols import Identity
from .errors import IdentityError

logger = logging.getLogger(__name__)

CERTIFICATE_LIFETIME = timedelta(days=5 * 365)
KEY_SIZE = 2048


def generate_identity(name: str) -> Identity:
    """Generate a self-signed RSA certificate and key for a name."""
    key = rsa.generate_private_key(public_exponent=65537, key_size=KEY_SIZE)
    subject = x509.Name([x509.NameAttribute(NameOID.COMMON_NAME, name)])
    now = datetime.now(timezone.utc)

    certificate = (
        x509.CertificateBuilder()
        .subject_name(subject)
        .issuer_name(subject)
        .public_key(key.public_key())
        .serial_number(x509.random_serial_number())
        .not_valid_before(now)
        .not_valid_after(now + CERTIFICATE_LIFETIME)
        .add_extension(x509.BasicConstraints(ca=False, path_length=None), critical=True)
        .sign(key, hashes.SHA256())
    )

    cert_pem = certificate.public_bytes(serialization.Encoding.PEM).decode("ascii")
    key_pem = key.private_bytes(
        serialization.Encoding.PEM,
        serialization.PrivateFormat.PKCS8,
        serialization.NoEncryption(),
    ).decode("ascii")
    return Identity(name=name, cert_pem=cert_pem, key_pem=key_pem)


class IdentityStore:
    """Identities persisted in SQLite; at most one is active."""

    def __init__(self, db_path: str | Path = ":memory:"):
        self.db_path = str(db_path)
        if self.db_path != ":memory:":
            Path(self.db_path).parent.mkdir(parents=True, exist_ok=True)
        self.conn = sqlite3.connect(self.db_path)
        self._init_db()

    def _init_db(self):
        """Initialize SQLite tables."""
        self.conn.execute("""
            CREATE TABLE IF NOT EXISTS identities (
                name TEXT PRIMARY KEY,
                cert TEXT NOT NULL,
                key TEXT NOT NULL,
                active BOOLEAN NOT NULL DEFAULT 0
            )
        """)
        self.conn.commit()

    def get_active_identity(self) -> Identity | None:
        """Return the active identity, or None when there is none."""
        row = self.conn.execute(
            "SELECT name, cert, key, active FROM identities WHERE active = 1 LIMIT 1"
        ).fetchone()
        if row is None:
            return None
        return _to_identity(row)

    def list_identities(self) -> list[Identity]:
        cursor = self.conn.execute("SELECT name, cert, key, active FROM identities ORDER BY name")
        return [_to_identity(row) for row in cursor.fetchall()]

    def create_identity(self, name: str) -> Identity:
        """Generate and store a new identity and make it the active one."""
        name = name.strip()
        if not name:
            raise IdentityError("Identity name must not be empty")

        identity = generate_identity(name)
        try:
            self.conn.execute(
                "INSERT INTO identities (name, cert, key, active) VALUES (?, ?, ?, 0)",
                (identity.name, identity.cert_pem, identity.key_pem),
            )
        except sqlite3.IntegrityError as e:
            raise IdentityError(f"Identity {name!r} already exists") from e
        self.set_active(name)
        logger.info("created identity %r", name)
        return Identity(identity.name, identity.cert_pem, identity.key_pem, active=True)

    def set_active(self, name: str) -> None:
        """Make the named identity active and deactivate all others."""
        exists = self.conn.execute(
            "SELECT 1 FROM identities WHERE name = ?", (name,)
        ).fetchone()
        if exists is None:
            raise IdentityError(f"No identity named {name!r}")

        self.conn.execute(
            "UPDATE identities SET active = (CASE WHEN name = ? THEN 1 ELSE 0 END)",
            (name,),
        )
        self.conn.commit()

    def close(self):
        """Close database connection."""
        self.conn.close()


def _to_identity(row: tuple) -> Identity:
    name, cert, key, active = row
    return Identity(name=name, cert_pem=cert, key_pem=key, active=bool(active))
