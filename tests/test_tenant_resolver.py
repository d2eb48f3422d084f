"""Tests for principal to craftsman resolution"""

import threading
from concurrent.futures import ThreadPoolExecutor
from unittest.mock import patch

import pytest
from sqlalchemy import create_engine
from sqlalchemy.exc import IntegrityError, OperationalError
from sqlalchemy.orm import sessionmaker

from zimmr.auth import Principal
from zimmr.database import Base
from zimmr.domain.tenants.service import TenantResolver, derive_display_name
from zimmr.errors import TenantResolutionError
from zimmr.models import Craftsman


class TestResolveOrCreate:
    def test_first_request_creates_craftsman(self, db_session):
        """The first resolution inserts exactly one row bound to the principal"""
        principal = Principal(id="user-1", email="meister@example.com")

        craftsman_id = TenantResolver(db_session).resolve_or_create(principal)

        rows = db_session.query(Craftsman).all()
        assert len(rows) == 1
        assert rows[0].id == craftsman_id
        assert rows[0].user_id == "user-1"
        assert rows[0].email == "meister@example.com"
        assert rows[0].name == "meister"

    def test_resolution_is_idempotent(self, db_session):
        principal = Principal(id="user-1")
        resolver = TenantResolver(db_session)

        first = resolver.resolve_or_create(principal)
        second = resolver.resolve_or_create(principal)

        assert first == second
        assert db_session.query(Craftsman).count() == 1

    def test_distinct_principals_get_distinct_craftsmen(self, db_session):
        resolver = TenantResolver(db_session)

        a = resolver.resolve_or_create(Principal(id="user-a"))
        b = resolver.resolve_or_create(Principal(id="user-b"))

        assert a != b
        assert db_session.query(Craftsman).count() == 2

    def test_metadata_fills_profile(self, db_session):
        principal = Principal(
            id="user-1",
            metadata={"full_name": "Hans Müller", "phone": "+491701234567", "specialty": "Tischler"},
        )

        craftsman_id = TenantResolver(db_session).resolve_or_create(principal)

        row = db_session.get(Craftsman, craftsman_id)
        assert row.name == "Hans Müller"
        assert row.phone == "+491701234567"
        assert row.specialty == "Tischler"


class TestConcurrentCreation:
    @pytest.mark.parametrize("workers", [2, 8])
    def test_simultaneous_first_requests_converge(self, tmp_path, workers):
        """Threads racing on one database all end up with the same single row"""
        engine = create_engine(
            f"sqlite:///{tmp_path / 'tenants.db'}",
            connect_args={"check_same_thread": False, "timeout": 30},
        )
        Base.metadata.create_all(bind=engine)
        factory = sessionmaker(autocommit=False, autoflush=False, bind=engine)
        start = threading.Barrier(workers)

        def first_request(_):
            session = factory()
            try:
                start.wait()
                return TenantResolver(session).resolve_or_create(Principal(id="user-burst"))
            finally:
                session.close()

        try:
            with ThreadPoolExecutor(max_workers=workers) as pool:
                ids = list(pool.map(first_request, range(workers)))

            check = factory()
            row_ids = [row.id for row in check.query(Craftsman).filter_by(user_id="user-burst")]
            check.close()
        finally:
            engine.dispose()

        assert len(row_ids) == 1
        assert set(ids) == set(row_ids)

    def test_losing_insert_converges_on_winner(self, db_session, session_factory):
        """
        A request that saw no row, then lost the insert race, returns the
        winner's id instead of failing or creating a second row.
        """
        other = session_factory()
        winner = Craftsman(user_id="user-race", name="Winner")
        other.add(winner)
        other.commit()
        winner_id = winner.id
        other.close()

        resolver = TenantResolver(db_session)
        real_lookup = resolver.repo.get_by_user_id
        calls = []

        def stale_then_real(user_id):
            calls.append(user_id)
            if len(calls) == 1:
                return None
            return real_lookup(user_id)

        with patch.object(resolver.repo, "get_by_user_id", side_effect=stale_then_real):
            resolved = resolver.resolve_or_create(Principal(id="user-race"))

        assert resolved == winner_id
        assert len(calls) == 2
        assert db_session.query(Craftsman).filter_by(user_id="user-race").count() == 1

    def test_conflict_without_visible_row_is_not_found(self, db_session):
        resolver = TenantResolver(db_session)
        conflict = IntegrityError("INSERT INTO craftsmen", {}, Exception("UNIQUE constraint failed"))

        with patch.object(resolver.repo, "get_by_user_id", return_value=None), patch.object(
            resolver.repo, "create", side_effect=conflict
        ):
            with pytest.raises(TenantResolutionError) as exc_info:
                resolver.resolve_or_create(Principal(id="user-ghost"))

        assert exc_info.value.status_code == 404
        assert exc_info.value.step == "relookup"

    def test_other_insert_failure_is_server_error(self, db_session):
        resolver = TenantResolver(db_session)
        failure = OperationalError("INSERT INTO craftsmen", {}, Exception("disk I/O error"))

        with patch.object(resolver.repo, "get_by_user_id", return_value=None), patch.object(
            resolver.repo, "create", side_effect=failure
        ):
            with pytest.raises(TenantResolutionError) as exc_info:
                resolver.resolve_or_create(Principal(id="user-1"))

        assert exc_info.value.status_code == 500
        assert exc_info.value.step == "create"
        assert exc_info.value.cause is failure

    def test_lookup_failure_is_server_error(self, db_session):
        resolver = TenantResolver(db_session)
        failure = OperationalError("SELECT", {}, Exception("connection lost"))

        with patch.object(resolver.repo, "get_by_user_id", side_effect=failure):
            with pytest.raises(TenantResolutionError) as exc_info:
                resolver.resolve_or_create(Principal(id="user-1"))

        assert exc_info.value.status_code == 500
        assert exc_info.value.step == "lookup"


class TestDisplayName:
    def test_full_name_wins(self):
        principal = Principal(id="u", email="x@example.com", metadata={"full_name": "Anna", "name": "A"})
        assert derive_display_name(principal) == "Anna"

    def test_name_claim_second(self):
        assert derive_display_name(Principal(id="u", metadata={"name": "Jens"})) == "Jens"

    def test_email_local_part_third(self):
        assert derive_display_name(Principal(id="u", email="jens.kraft@example.com")) == "jens.kraft"

    def test_fallback(self):
        assert derive_display_name(Principal(id="u")) == "New User"
