"""Unit tests for infection declarations."""

import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

import pytest
from datetime import timedelta
from app.errors import NotFound, InvalidArgument
from app.models.checkin import CheckIn
from app.models.infection import Infection
from app.schemas.infection import InfectionCreate
from app.services.infection_service import create_infection
from conftest import T0


def window(places, start=T0, hours=2):
    return InfectionCreate(places_ids=[p.id for p in places],
                           start_timestamp=start, end_timestamp=start + timedelta(hours=hours))


def flagged(db):
    db.expire_all()
    return {c.id for c in db.query(CheckIn).filter(CheckIn.potential_infection.is_(True))}


class TestCreateInfection:
    def test_flags_overlapping_checkins_only(self, db, make_org, make_place, make_checkin):
        org = make_org()
        place, elsewhere = make_place(org=org), make_place(org=org)
        inside = make_checkin(place, start=T0 + timedelta(minutes=30))
        straddling = make_checkin(place, start=T0 - timedelta(minutes=30), minutes=60)
        make_checkin(place, start=T0 - timedelta(hours=2), minutes=60)      # ends before
        make_checkin(place, start=T0 + timedelta(hours=2))                  # starts at end
        make_checkin(elsewhere, start=T0)

        result = create_infection(db, org.id, window([place]))

        assert result.flagged_checkins == 2
        assert result.places_ids == [place.id]
        assert flagged(db) == {inside.id, straddling.id}

    def test_duplicate_place_ids_collapse(self, db, make_org, make_place):
        org = make_org()
        place = make_place(org=org)
        result = create_infection(db, org.id, window([place, place]))
        assert result.places_ids == [place.id]
        assert db.get(Infection, result.id).places_ids == [place.id]

    def test_foreign_place_rejected_without_writes(self, db, make_org, make_place, make_checkin):
        org = make_org()
        own, foreign = make_place(org=org), make_place(org=make_org())
        make_checkin(own)

        with pytest.raises(NotFound):
            create_infection(db, org.id, window([own, foreign]))
        assert db.query(Infection).count() == 0
        assert flagged(db) == set()

    def test_empty_window_rejected(self, db, make_org, make_place):
        org = make_org()
        place = make_place(org=org)
        with pytest.raises(InvalidArgument):
            create_infection(db, org.id, window([place], hours=0))
