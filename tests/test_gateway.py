"""Persistence gateway against a real SQLite database."""
import io
from datetime import datetime, timezone
from unittest.mock import MagicMock

import pytest
from sqlalchemy.exc import OperationalError, SQLAlchemyError

from app.errors import StorageFault, ValidationError
from app.models.location import LocationEntry
from app.services.images.blobs import BlobStore
from app.services.locations.gateway import LocationGateway


def _store_image(blobs, name="toilet-1-000000001.png"):
    return blobs.write(lambda: name, io.BytesIO(b"png"))


class TestCreate:
    def test_normalized_fields_and_server_assigned_values(self, gateway, valid_fields):
        row = gateway.create(valid_fields)

        assert len(row.id) == 32
        assert row.location == "Central station, platform 3"
        assert row.description == "Clean enough, no paper."
        assert (row.danger_rating, row.location_rating) == (2, 4)
        assert row.image is None
        assert row.latitude is None and row.longitude is None
        assert row.created_at == row.updated_at

    def test_ids_are_unique(self, gateway, valid_fields):
        ids = {gateway.create(valid_fields).id for _ in range(5)}

        assert len(ids) == 5

    def test_coordinates_are_stored(self, gateway, valid_fields):
        row = gateway.create({**valid_fields, "latitude": "48.8566", "longitude": "2.3522"})

        assert row.latitude == pytest.approx(48.8566)
        assert row.longitude == pytest.approx(2.3522)
        assert row.has_coordinates

    def test_image_reference_is_kept(self, gateway, blobs, valid_fields):
        name = _store_image(blobs)

        row = gateway.create(valid_fields, name)

        assert row.image == name
        assert blobs.exists(name)

    @pytest.mark.parametrize("field", ["dangerRating", "locationRating"])
    def test_out_of_range_rating_writes_nothing(self, gateway, db_session, valid_fields, field):
        with pytest.raises(ValidationError) as exc:
            gateway.create({**valid_fields, field: "6"})

        assert exc.value.violations
        assert db_session.query(LocationEntry).count() == 0

    def test_failed_validation_removes_uploaded_image(self, gateway, blobs, db_session, valid_fields):
        name = _store_image(blobs)

        with pytest.raises(ValidationError):
            gateway.create({**valid_fields, "dangerRating": "0"}, name)

        assert blobs.listing() == []
        assert db_session.query(LocationEntry).count() == 0

    def test_failed_insert_removes_image_and_raises_storage_fault(self, blobs, valid_fields):
        name = _store_image(blobs)
        db = MagicMock()
        db.commit.side_effect = OperationalError("INSERT", {}, Exception("disk I/O error"))

        with pytest.raises(StorageFault):
            LocationGateway(db, blobs).create(valid_fields, name)

        db.rollback.assert_called_once()
        assert blobs.listing() == []

    def test_cleanup_failure_does_not_mask_validation_error(self, valid_fields, db_session):
        blobs = MagicMock(spec=BlobStore)
        blobs.delete.side_effect = StorageFault("Error deleting image", detail="EACCES")

        with pytest.raises(ValidationError):
            LocationGateway(db_session, blobs).create({**valid_fields, "type": "nope"}, "x.png")


class TestRead:
    def test_list_is_newest_first(self, gateway, valid_fields):
        first = gateway.create({**valid_fields, "location": "t1"})
        second = gateway.create({**valid_fields, "location": "t2"})
        third = gateway.create({**valid_fields, "location": "t3"})

        assert [r.id for r in gateway.list_all()] == [third.id, second.id, first.id]

    def test_list_empty(self, gateway):
        assert gateway.list_all() == []

    def test_get_by_id(self, gateway, valid_fields):
        row = gateway.create(valid_fields)

        assert gateway.get_by_id(row.id).location == row.location
        assert gateway.get_by_id("does-not-exist") is None

    def test_read_failure_is_a_storage_fault(self, blobs):
        db = MagicMock()
        db.get.side_effect = SQLAlchemyError("gone")

        with pytest.raises(StorageFault):
            LocationGateway(db, blobs).get_by_id("abc")


class TestDelete:
    def test_removes_row_and_image(self, gateway, blobs, valid_fields):
        name = _store_image(blobs)
        row = gateway.create(valid_fields, name)

        assert gateway.delete_by_id(row.id) is True
        assert gateway.get_by_id(row.id) is None
        assert blobs.listing() == []

    def test_unknown_id_mutates_nothing(self, gateway, blobs, valid_fields):
        name = _store_image(blobs)
        gateway.create(valid_fields, name)

        assert gateway.delete_by_id("missing") is False
        assert len(gateway.list_all()) == 1
        assert blobs.listing() == [name]

    def test_blob_failure_does_not_fail_delete(self, db_session, valid_fields):
        blobs = MagicMock(spec=BlobStore)
        gw = LocationGateway(db_session, blobs)
        row = gw.create(valid_fields, "toilet-1-1.png")
        blobs.delete.side_effect = StorageFault("Error deleting image", detail="EBUSY")

        assert gw.delete_by_id(row.id) is True
        assert gw.get_by_id(row.id) is None

    def test_missing_blob_is_tolerated(self, gateway, valid_fields):
        row = gateway.create(valid_fields, "already-gone.png")

        assert gateway.delete_by_id(row.id) is True


class TestSummary:
    def test_groups_by_type(self, gateway, valid_fields):
        for rating in (1, 3, 5):
            gateway.create({**valid_fields, "type": "public facility", "locationRating": rating, "dangerRating": 2})
        gateway.create({**valid_fields, "type": "outdoors", "locationRating": 4, "dangerRating": 5})

        stats = gateway.summary_stats()

        assert stats.total_locations == 4
        by_type = {s.type: s for s in stats.type_stats}
        assert set(by_type) == {"public facility", "outdoors"}
        assert by_type["public facility"].count == 3
        assert by_type["public facility"].avg_rating == pytest.approx(3)
        assert by_type["public facility"].avg_danger == pytest.approx(2)
        assert by_type["outdoors"].count == 1
        assert by_type["outdoors"].avg_rating == pytest.approx(4)
        assert by_type["outdoors"].avg_danger == pytest.approx(5)
        # largest group first
        assert stats.type_stats[0].type == "public facility"

    def test_wire_shape(self, gateway, valid_fields):
        gateway.create(valid_fields)

        data = gateway.summary_stats().to_json()

        assert data == {
            "totalLocations": 1,
            "typeStats": [{"_id": "public facility", "count": 1, "avgRating": 4.0, "avgDanger": 2.0}],
        }

    def test_empty_database(self, gateway):
        assert gateway.summary_stats().to_json() == {"totalLocations": 0, "typeStats": []}


def test_fake_clock_drives_timestamps(db_session, blobs, valid_fields, make_clock):
    clock = make_clock(start=datetime(2030, 1, 1, tzinfo=timezone.utc))
    row = LocationGateway(db_session, blobs, clock=clock).create(valid_fields)

    assert row.created_at.replace(tzinfo=timezone.utc) > datetime(2030, 1, 1, tzinfo=timezone.utc)
