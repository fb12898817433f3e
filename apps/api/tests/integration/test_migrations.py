from pathlib import Path

from alembic import command
from alembic.config import Config
from sqlalchemy import create_engine, text
from sqlalchemy.orm import sessionmaker

from access_api.models.user import MANAGER
from access_api.services import access_requests
from factories import identity_of, make_software, make_user

API_ROOT = Path(__file__).resolve().parents[2]


def upgrade_to_head():
    cfg = Config()
    cfg.set_main_option("script_location", str(API_ROOT / "alembic"))
    command.upgrade(cfg, "head")


def test_migrated_pending_index_is_partial_on_sqlite(tmp_path, monkeypatch):
    url = f"sqlite:///{tmp_path / 'access.db'}"
    monkeypatch.setenv("DATABASE_URL", url)
    upgrade_to_head()

    engine = create_engine(url)
    try:
        with engine.connect() as conn:
            ddl = conn.execute(
                text("SELECT sql FROM sqlite_master WHERE name = 'uq_requests_pending_tuple'")
            ).scalar_one()
        assert "WHERE status = 'Pending'" in ddl

        with sessionmaker(bind=engine)() as session:
            alice = make_user(session, "alice")
            bob = make_user(session, "bob", role=MANAGER)
            crm = make_software(session, "CRM", ["Read"])
            first = access_requests.create_request(
                session, identity_of(alice), software_id=crm.id, access_type="Read", reason="reports"
            )
            access_requests.review_request(session, identity_of(bob), first.id, status="Rejected")
            again = access_requests.create_request(
                session, identity_of(alice), software_id=crm.id, access_type="Read", reason="reports"
            )
            assert again.status == "Pending"
    finally:
        engine.dispose()
