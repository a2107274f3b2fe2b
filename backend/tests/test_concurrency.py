"""
Two residents racing for the same resource slot from separate sessions.

Both requests pass every pre-check; the partial unique index decides.
"""

import threading

import pytest
from sqlalchemy import create_engine, event
from sqlalchemy.orm import sessionmaker

from app.models.generated import Base, Resources
from app.services import admission
from app.services.errors import SlotConflict
from app.services.ledger import BookingLedger
from app.services.slots import SettingsRepository
from conftest import FixedClock, TOMORROW


@pytest.fixture
def file_sessions(tmp_path):
    engine = create_engine(
        f"sqlite:///{tmp_path / 'race.db'}",
        connect_args={"check_same_thread": False, "timeout": 10},
    )

    @event.listens_for(engine, "connect")
    def _fk_on(dbapi_connection, _):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    Base.metadata.create_all(bind=engine)
    yield sessionmaker(autocommit=False, autoflush=False, bind=engine)
    engine.dispose()


def test_only_one_of_two_racing_bookings_wins(file_sessions):
    with file_sessions() as setup:
        SettingsRepository(setup).get()
        court = Resources(name="Tennis Court", type="sports", location="Grounds")
        setup.add(court)
        setup.commit()
        court_id = court.id

    barrier = threading.Barrier(2)
    outcomes = {}

    def attempt(user_id):
        db = file_sessions()
        try:
            # Warm the settings read so both threads reach the insert together
            repo = SettingsRepository(db)
            repo.get()
            barrier.wait()
            booking = admission.book_slot(
                db, user_id, court_id, TOMORROW, "18:00-19:00",
                settings_repo=repo, clock=FixedClock(),
            )
            outcomes[user_id] = booking.id
        except SlotConflict as e:
            outcomes[user_id] = e
        finally:
            db.close()

    threads = [threading.Thread(target=attempt, args=(u,)) for u in ("u1", "u2")]
    for t in threads:
        t.start()
    for t in threads:
        t.join(timeout=30)

    conflicts = [v for v in outcomes.values() if isinstance(v, SlotConflict)]
    winners = [v for v in outcomes.values() if isinstance(v, int)]
    assert len(conflicts) == 1
    assert len(winners) == 1

    with file_sessions() as check:
        assert BookingLedger(check).active_slots(court_id, TOMORROW) == {"18:00-19:00"}
