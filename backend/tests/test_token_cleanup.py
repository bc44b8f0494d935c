from __future__ import annotations

import datetime as dt

from onlineshops.db.base import utcnow
from onlineshops.models.refresh_token import RefreshToken
from onlineshops.services import auth, token_cleanup


def test_run_once_deletes_expired_rows(db, session_factory, make_user, monkeypatch) -> None:
    user = make_user()
    fresh = auth.mint_credential_pair(db, user)
    stale = auth.mint_credential_pair(db, user)
    record = db.get(RefreshToken, auth.decode_refresh_token(stale.refresh_token).token_id)
    record.expires_at = utcnow() - dt.timedelta(hours=1)
    db.commit()

    monkeypatch.setattr(token_cleanup, "SessionLocal", session_factory)

    assert token_cleanup.run_once() == 1
    db.expire_all()
    remaining = [r.id for r in db.query(RefreshToken).all()]
    assert remaining == [auth.decode_refresh_token(fresh.refresh_token).token_id]


def test_run_once_swallows_database_errors(monkeypatch) -> None:
    class _BrokenSession:
        rolled_back = False
        closed = False

        def query(self, *_args):
            raise RuntimeError("database unavailable")

        def rollback(self):
            _BrokenSession.rolled_back = True

        def close(self):
            _BrokenSession.closed = True

    monkeypatch.setattr(token_cleanup, "SessionLocal", _BrokenSession)

    assert token_cleanup.run_once() == 0
    assert _BrokenSession.rolled_back and _BrokenSession.closed
