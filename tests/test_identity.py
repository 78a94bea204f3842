"""Tests for the identity store."""

import pytest
from cryptography import x509
from cryptography.x509.oid import NameOID

from smolnet.errors import IdentityError
from smolnet.identity import IdentityStore, generate_identity


class TestGenerateIdentity:
    def test_self_signed_certificate(self):
        """The certificate names the identity and signs itself."""
        identity = generate_identity("alice")
        cert = x509.load_pem_x509_certificate(identity.cert_pem.encode())
        common_name = cert.subject.get_attributes_for_oid(NameOID.COMMON_NAME)[0].value
        assert common_name == "alice"
        assert cert.issuer == cert.subject
        assert "PRIVATE KEY" in identity.key_pem


class TestIdentityStore:
    @pytest.fixture
    def store(self, tmp_path):
        store = IdentityStore(tmp_path / "identities.db")
        yield store
        store.close()

    def test_empty(self, store):
        """A new store has no identities."""
        assert store.list_identities() == []
        assert store.get_active_identity() is None

    def test_create_activates(self, store):
        """A new identity becomes the active one."""
        created = store.create_identity("alice")
        assert created.active
        assert store.get_active_identity().name == "alice"

    def test_single_active(self, store):
        """Creating another identity deactivates the previous one."""
        store.create_identity("alice")
        store.create_identity("bob")
        active = {identity.name: identity.active for identity in store.list_identities()}
        assert active == {"alice": False, "bob": True}

    def test_set_active(self, store):
        """set_active switches the active identity."""
        store.create_identity("alice")
        store.create_identity("bob")
        store.set_active("alice")
        assert store.get_active_identity().name == "alice"

    def test_set_active_unknown(self, store):
        """Activating a missing identity fails."""
        with pytest.raises(IdentityError):
            store.set_active("nobody")

    def test_duplicate_name(self, store):
        """Names are unique."""
        store.create_identity("alice")
        with pytest.raises(IdentityError):
            store.create_identity("alice")

    def test_empty_name(self, store):
        """Names must not be blank."""
        with pytest.raises(IdentityError):
            store.create_identity("  ")

    def test_persistence(self, tmp_path):
        """Identities survive reopening the database."""
        path = tmp_path / "nested" / "identities.db"
        store = IdentityStore(path)
        created = store.create_identity("alice")
        store.close()

        reopened = IdentityStore(path)
        try:
            active = reopened.get_active_identity()
        finally:
            reopened.close()
        assert active == created
