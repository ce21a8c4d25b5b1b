from datetime import datetime, timedelta, timezone
from types import SimpleNamespace

import jwt
import pytest

from otpauth.repository import OTPRepository, UserRepository
from otpauth.service import AuthError, AuthService, generate_jwt, generate_otp


class FakeCollection:
    def __init__(self):
        self.docs = []
        self._next_id = 0

    def insert_one(self, doc):
        doc = dict(doc)
        if "_id" not in doc:
            self._next_id += 1
            doc["_id"] = self._next_id
        self.docs.append(doc)
        return SimpleNamespace(inserted_id=doc["_id"])

    @staticmethod
    def _matches(doc, flt):
        for key, cond in flt.items():
            value = doc.get(key)
            if isinstance(cond, dict):
                if "$gte" in cond and (value is None or value < cond["$gte"]):
                    return False
            elif value != cond:
                return False
        return True

    def find_one(self, flt, sort=None):
        found = [d for d in self.docs if self._matches(d, flt)]
        for key, direction in reversed(sort or []):
            found.sort(key=lambda d: d[key], reverse=direction < 0)
        return dict(found[0]) if found else None

    def update_one(self, flt, update):
        for doc in self.docs:
            if self._matches(doc, flt):
                doc.update(update.get("$set", {}))
                return SimpleNamespace(matched_count=1)
        return SimpleNamespace(matched_count=0)

    def count_documents(self, flt):
        return sum(1 for d in self.docs if self._matches(d, flt))


@pytest.fixture
def env(monkeypatch):
    monkeypatch.setenv("OTP_EXPIRATION_MINUTES", "2")
    monkeypatch.setenv("OTP_REQUEST_LIMIT", "3")
    monkeypatch.setenv("JWT_SECRET", "secret")


@pytest.fixture
def stores():
    return FakeCollection(), FakeCollection()


@pytest.fixture
def service(stores):
    otp_coll, user_coll = stores
    return AuthService(UserRepository(user_coll), OTPRepository(otp_coll))


def test_generate_otp_is_five_digits():
    for _ in range(200):
        code = generate_otp()
        assert len(code) == 5 and code.isdigit()


def test_generate_jwt_claims(monkeypatch):
    monkeypatch.setenv("JWT_SECRET", "secret")
    claims = jwt.decode(generate_jwt("alice"), "secret", algorithms=["HS256"])
    assert claims["phone"] == "alice"
    assert claims["exp"] - claims["iat"] == int(timedelta(hours=24).total_seconds())


def test_send_otp_stores_code(env, service, stores, capsys):
    code = service.send_otp("alice")
    doc = stores[0].docs[0]
    assert doc["otp"] == code and doc["phone"] == "alice" and doc["verified"] is False
    remaining = doc["expires_at"] - datetime.now(timezone.utc)
    assert timedelta(minutes=1) < remaining <= timedelta(minutes=2)
    assert code in capsys.readouterr().out


def test_send_otp_rate_limit(env, service, stores):
    for _ in range(3):
        service.send_otp("alice")
    with pytest.raises(AuthError, match="Too many OTP requests"):
        service.send_otp("alice")
    assert len(stores[0].docs) == 3
    service.send_otp("bob")


@pytest.mark.parametrize("limit", [None, "abc"])
def test_send_otp_without_valid_limit_refuses(env, service, monkeypatch, limit):
    if limit is None:
        monkeypatch.delenv("OTP_REQUEST_LIMIT")
    else:
        monkeypatch.setenv("OTP_REQUEST_LIMIT", limit)
    with pytest.raises(AuthError, match="Too many OTP requests"):
        service.send_otp("alice")


def test_verify_success_creates_user(env, service, stores):
    code = service.send_otp("alice")
    issued = service.verify_otp("alice", code)
    assert jwt.decode(issued, "secret", algorithms=["HS256"])["phone"] == "alice"
    assert [u["phone"] for u in stores[1].docs] == ["alice"]
    assert stores[0].docs[0]["verified"] is True


def test_verify_twice_is_rejected(env, service):
    code = service.send_otp("alice")
    service.verify_otp("alice", code)
    with pytest.raises(AuthError, match="OTP already used"):
        service.verify_otp("alice", code)


def test_existing_user_not_duplicated(env, service, stores):
    first = service.verify_otp("alice", service.send_otp("alice"))
    second = service.verify_otp("alice", service.send_otp("alice"))
    for issued in (first, second):
        assert jwt.decode(issued, "secret", algorithms=["HS256"])["phone"] == "alice"
    assert [u["phone"] for u in stores[1].docs] == ["alice"]


def test_verify_wrong_code(env, service):
    code = service.send_otp("alice")
    wrong = "x" + code[1:]
    with pytest.raises(AuthError, match="invalid OTP"):
        service.verify_otp("alice", wrong)


def test_verify_unknown_phone(env, service):
    with pytest.raises(AuthError, match="OTP not found"):
        service.verify_otp("nobody", "12345")


def test_verify_expired(env, service, stores):
    now = datetime.now(timezone.utc)
    stores[0].insert_one({"phone": "alice", "otp": "12345", "verified": False,
                          "expires_at": now - timedelta(seconds=1), "created_at": now})
    with pytest.raises(AuthError, match="OTP expired"):
        service.verify_otp("alice", "12345")