"""
BoardCtrl — Core unit tests
Password hashing, token service, bearer parsing, role gate, paging maths,
engine timeout wiring and the exception hierarchy. No shared database required.
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from unittest.mock import MagicMock

import pytest
from pydantic import ValidationError

from boardctrl import database
from boardctrl.config import JWTSettings, Settings
from boardctrl.core.exceptions import (
    AuthenticationError,
    ConcurrencyConflictError,
    ConfigurationError,
    ConflictError,
    IdMismatchError,
    InvalidInputError,
    PermissionDeniedError,
    ResourceNotFoundError,
)
from boardctrl.core.security import (
    TokenService,
    extract_bearer_token,
    get_token_service,
    hash_password,
    verify_password,
)
from boardctrl.services.rbac import ADMIN_ONLY, READERS, RoleGate
from boardctrl.services.repository import MAX_PAGE_SIZE, resolve_page, validate_paging


def _service(**overrides) -> TokenService:
    base = get_token_service()
    values = {
        "SECRET": base._secret,
        "VALID_ISSUER": base.issuer,
        "VALID_AUDIENCE": base.audience,
    }
    values.update(overrides)
    return TokenService(JWTSettings(**values))


# ═══════════════════════════════════════════════════════════════════════════════
# PASSWORD HASHING
# ═══════════════════════════════════════════════════════════════════════════════


class TestPasswordHashing:
    def test_same_password_hashes_differently(self):
        first = hash_password("s3cret!")
        second = hash_password("s3cret!")
        assert first != second
        assert verify_password("s3cret!", first)
        assert verify_password("s3cret!", second)

    def test_hash_never_contains_plaintext(self):
        assert "s3cret!" not in hash_password("s3cret!")

    def test_wrong_password_does_not_verify(self):
        assert not verify_password("guess", hash_password("s3cret!"))

    def test_empty_password_rejected(self):
        with pytest.raises(InvalidInputError):
            hash_password("")
        with pytest.raises(InvalidInputError):
            hash_password(None)

    def test_unrecognised_stored_hash_fails_closed(self):
        assert not verify_password("s3cret!", "not-a-hash")
        assert not verify_password("s3cret!", None)
        assert not verify_password("", hash_password("s3cret!"))


# ═══════════════════════════════════════════════════════════════════════════════
# TOKEN SERVICE
# ═══════════════════════════════════════════════════════════════════════════════


class TestTokenService:
    def test_issue_and_verify_roundtrip(self):
        tokens = get_token_service()
        claims = tokens.verify(tokens.issue("alice", "User"))
        assert claims["name"] == "alice"
        assert claims["role"] == "User"
        assert claims["iss"] == tokens.issuer
        assert claims["aud"] == tokens.audience

    def test_token_lives_sixty_minutes(self):
        tokens = get_token_service()
        claims = tokens.verify(tokens.issue("alice", "User"))
        assert claims["exp"] - claims["iat"] == 3600

    def test_expired_token_rejected(self):
        tokens = get_token_service()
        issued = datetime.now(tz=timezone.utc) - timedelta(minutes=61)
        with pytest.raises(AuthenticationError, match="expired"):
            tokens.verify(tokens.issue("alice", "User", issued_at=issued))

    def test_wrong_audience_rejected(self):
        foreign = _service(VALID_AUDIENCE="someone-else")
        with pytest.raises(AuthenticationError):
            get_token_service().verify(foreign.issue("alice", "Admin"))

    def test_wrong_issuer_rejected(self):
        foreign = _service(VALID_ISSUER="someone-else")
        with pytest.raises(AuthenticationError):
            get_token_service().verify(foreign.issue("alice", "Admin"))

    def test_wrong_secret_rejected(self):
        foreign = _service(SECRET="a-completely-different-signing-secret")
        with pytest.raises(AuthenticationError):
            get_token_service().verify(foreign.issue("alice", "Admin"))

    def test_tampered_token_rejected(self):
        tokens = get_token_service()
        token = tokens.issue("alice", "User")
        head, payload, sig = token.split(".")
        tampered = ".".join([head, payload, sig[::-1]])
        with pytest.raises(AuthenticationError):
            tokens.verify(tampered)

    def test_garbage_rejected(self):
        with pytest.raises(AuthenticationError):
            get_token_service().verify("not.a.jwt")

    def test_missing_secret_is_configuration_error(self):
        with pytest.raises(ConfigurationError):
            TokenService(JWTSettings(SECRET=""))


# ═══════════════════════════════════════════════════════════════════════════════
# BEARER HEADER PARSING
# ═══════════════════════════════════════════════════════════════════════════════


class TestExtractBearerToken:
    @pytest.mark.parametrize(
        "header",
        ["abc.def.ghi", "Bearer abc.def.ghi", "bearer abc.def.ghi", "BEARER  abc.def.ghi "],
    )
    def test_prefix_optional_and_case_insensitive(self, header):
        assert extract_bearer_token(header) == "abc.def.ghi"

    @pytest.mark.parametrize("header", [None, "", "   ", "Bearer ", "bearer    "])
    def test_missing_token_rejected(self, header):
        with pytest.raises(AuthenticationError, match="Missing"):
            extract_bearer_token(header)


# ═══════════════════════════════════════════════════════════════════════════════
# ROLE GATE
# ═══════════════════════════════════════════════════════════════════════════════


class TestRoleGate:
    def test_admin_allowed_everywhere(self):
        gate = RoleGate()
        assert gate.check("Admin", ADMIN_ONLY)
        assert gate.check("Admin", READERS)

    def test_user_reads_only(self):
        gate = RoleGate()
        assert gate.check("User", READERS)
        with pytest.raises(PermissionDeniedError):
            gate.check("User", ADMIN_ONLY, "create_category")

    def test_matching_is_case_sensitive(self):
        assert not RoleGate().is_allowed("admin", ADMIN_ONLY)

    def test_empty_allowed_set_denies(self):
        assert not RoleGate().is_allowed("Admin", frozenset())


# ═══════════════════════════════════════════════════════════════════════════════
# PAGING
# ═══════════════════════════════════════════════════════════════════════════════


class TestPaging:
    def test_total_pages_rounds_up(self):
        assert resolve_page(1, 5, 12) == (1, 3)
        assert resolve_page(2, 5, 10) == (2, 2)

    def test_overflowing_page_clamps_to_last(self):
        assert resolve_page(99, 5, 12) == (3, 3)

    def test_zero_page_size_rejected(self):
        with pytest.raises(InvalidInputError) as exc:
            validate_paging(1, 0)
        assert exc.value.field == "pagesize"

    def test_page_below_one_rejected(self):
        with pytest.raises(InvalidInputError):
            validate_paging(0, 5)

    def test_page_size_ceiling(self):
        validate_paging(1, MAX_PAGE_SIZE)
        with pytest.raises(InvalidInputError) as exc:
            validate_paging(1, MAX_PAGE_SIZE + 1)
        assert exc.value.field == "pagesize"

    def test_huge_page_size_rejected_before_store(self):
        with pytest.raises(InvalidInputError):
            validate_paging(1, 10**20)


# ═══════════════════════════════════════════════════════════════════════════════
# ENGINE FACTORY
# ═══════════════════════════════════════════════════════════════════════════════


class TestEngineFactory:
    def test_sqlite_gets_query_timeout(self, monkeypatch):
        captured = {}
        real_create_engine = database.create_engine

        def recording_create_engine(url, **kwargs):
            captured.update(kwargs)
            return real_create_engine(url, **kwargs)

        monkeypatch.setattr(database, "create_engine", recording_create_engine)
        engine = database._build_engine(
            Settings(DATABASE_URL="sqlite:///:memory:", QUERY_TIMEOUT_SECONDS=7)
        )
        engine.dispose()
        assert captured["connect_args"]["timeout"] == 7

    def test_postgres_gets_statement_timeout(self, monkeypatch):
        captured = {}

        def recording_create_engine(url, **kwargs):
            captured.update(kwargs)
            return MagicMock()

        monkeypatch.setattr(database, "create_engine", recording_create_engine)
        database._build_engine(
            Settings(DATABASE_URL="postgresql://u:p@db/boards", QUERY_TIMEOUT_SECONDS=100)
        )
        assert captured["connect_args"]["options"] == "-c statement_timeout=100000"
        assert captured["pool_timeout"] == 100

    def test_non_positive_timeout_rejected(self):
        with pytest.raises(ValidationError):
            Settings(QUERY_TIMEOUT_SECONDS=0)


# ═══════════════════════════════════════════════════════════════════════════════
# EXCEPTIONS
# ═══════════════════════════════════════════════════════════════════════════════


class TestExceptions:
    @pytest.mark.parametrize(
        "exc, status",
        [
            (InvalidInputError("bad"), 400),
            (IdMismatchError(1, 2), 400),
            (AuthenticationError(), 401),
            (PermissionDeniedError("User"), 403),
            (ResourceNotFoundError("Board", 7), 404),
            (ConflictError("dup"), 409),
            (ConcurrencyConflictError("Board", 7), 500),
            (ConfigurationError("JWT secret"), 500),
        ],
    )
    def test_status_codes(self, exc, status):
        assert exc.http_status_code == status

    def test_to_dict_shape(self):
        body = ResourceNotFoundError("Board", 7).to_dict()
        assert body["error_code"] == "NOT_FOUND"
        assert body["message"] == "Board 7 not found"
        assert body["detail"] == {"resource": "Board", "id": 7}

    def test_not_found_without_id_describes_empty_collection(self):
        assert ResourceNotFoundError("Slide").message == "No Slide records found"

    def test_id_mismatch_is_invalid_input(self):
        exc = IdMismatchError(3, None)
        assert isinstance(exc, InvalidInputError)
        assert exc.error_code == "ID_MISMATCH"
