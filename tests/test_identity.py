import pytest

from beebright.auth.identity import authenticate, identity_from_settings
from beebright.auth.passwords import hash_password, verify_password
from beebright.config import Settings
from beebright.errors import ConfigError, InvalidCredentials


def _settings(**kw):
    base = {"_env_file": None, "SECRET_KEY": "x"}
    base.update(kw)
    return Settings(**base)


def test_password_hash_roundtrip():
    h = hash_password("123456")
    assert h != "123456"
    assert verify_password(h, "123456")
    assert not verify_password(h, "1234567")


def test_verify_password_tolerates_bad_hash():
    assert not verify_password("not-a-hash", "123456")
    assert not verify_password("", "123456")


def test_identity_from_plain_password():
    ident = identity_from_settings(_settings(ADMIN_USER="admin", ADMIN_PASSWORD="pw"))
    assert ident.username == "admin"
    assert verify_password(ident.password_hash, "pw")


def test_hash_takes_precedence_over_plain():
    h = hash_password("from-hash")
    ident = identity_from_settings(_settings(ADMIN_PASSWORD="plain", ADMIN_PASSWORD_HASH=h))
    assert ident.password_hash == h


def test_identity_requires_password():
    with pytest.raises(ConfigError):
        identity_from_settings(_settings())


def test_authenticate():
    ident = identity_from_settings(_settings(ADMIN_USER="admin", ADMIN_PASSWORD="pw"))
    assert authenticate(ident, "admin", "pw") is ident


@pytest.mark.parametrize(
    "username,password",
    [("admin", "wrong"), ("Admin", "pw"), ("other", "pw"), ("", ""), (None, None)],
)
def test_authenticate_rejects(username, password):
    ident = identity_from_settings(_settings(ADMIN_USER="admin", ADMIN_PASSWORD="pw"))
    with pytest.raises(InvalidCredentials):
        authenticate(ident, username, password)
