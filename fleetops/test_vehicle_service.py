import io
import shutil
import unittest
from unittest.mock import MagicMock, patch
from datetime import date
from decimal import Decimal

from fastapi import UploadFile
from pydantic import ValidationError
from starlette.datastructures import Headers

from fleetops.models import AuditLog, Brand, Vehicle, VehicleIdentification, VehicleModel
from fleetops.schemas.vehicle import VehicleCreateRequest, VehicleUpdateRequest
from fleetops.services.vehicle_service import vehicle_service as svc
from fleetops.testing import make_session_factory, make_image_store
from fleetops.utils.exceptions import (
    NotFoundException, DuplicateEntryException, UploadFailedException,
)


def photo(content: bytes = b"\xff\xd8\xff\xe0jpeg", content_type: str = "image/jpeg") -> UploadFile:
    return UploadFile(
        file=io.BytesIO(content),
        filename="car.jpg",
        headers=Headers({"content-type": content_type}),
    )


def vehicle_request(vin="1HGCM82633A004352", plate="abc-123", brand="Honda", model="Accord"):
    return VehicleCreateRequest(
        vin=vin, brand=brand, model=model, plate=plate,
        purchaseDate=date(2024, 3, 1), cost=Decimal("325000.50"),
        registrationDate=date(2024, 3, 15),
    )


class VehicleServiceTestCase(unittest.TestCase):
    def setUp(self):
        self.engine, Session = make_session_factory()
        self.db = Session()
        self.images = make_image_store()

    def tearDown(self):
        self.db.close()
        self.engine.dispose()
        shutil.rmtree(self.images.root, ignore_errors=True)


class TestCreateVehicle(VehicleServiceTestCase):
    def test_create_vehicle_stores_photo_and_identification(self):
        data = svc.create_vehicle(self.db, vehicle_request(), photo(), self.images)

        self.assertEqual(data["vin"], "1HGCM82633A004352")
        self.assertEqual(data["brand"], "Honda")
        self.assertEqual(data["model"], "Accord")
        self.assertEqual(data["plate"], "ABC-123")
        self.assertEqual(data["cost"], "325000.50")
        self.assertEqual(data["purchaseDate"], "2024-03-01")
        self.assertEqual(data["registrationDate"], "2024-03-15")
        self.assertRegex(data["photoUrl"], r"^/api/v1/vehicles/view/1HGCM82633A004352-[0-9a-f]{32}\.jpg$")
        self.assertEqual(data["assignmentStatus"], "unassigned")
        self.assertIsNone(data["assignmentId"])
        self.assertTrue(self.images.path_for(data["photoUrl"].rsplit("/", 1)[-1]).is_file())
        self.assertEqual(self.db.query(AuditLog).filter(AuditLog.action == "CREATE").count(), 1)

    def test_duplicate_vin_conflicts(self):
        svc.create_vehicle(self.db, vehicle_request(), photo(), self.images)
        with self.assertRaises(DuplicateEntryException) as ctx:
            svc.create_vehicle(self.db, vehicle_request(plate="OTHER-1"), photo(), self.images)
        self.assertEqual(ctx.exception.status_code, 409)

    def test_duplicate_plate_conflicts(self):
        svc.create_vehicle(self.db, vehicle_request(), photo(), self.images)
        with self.assertRaises(DuplicateEntryException):
            svc.create_vehicle(self.db, vehicle_request(vin="OTHERVIN"), photo(), self.images)

    def test_brand_and_model_are_reused(self):
        svc.create_vehicle(self.db, vehicle_request(), photo(), self.images)
        svc.create_vehicle(self.db, vehicle_request(vin="VIN2", plate="P2"), photo(), self.images)
        svc.create_vehicle(self.db, vehicle_request(vin="VIN3", plate="P3", model="Civic"), photo(), self.images)

        self.assertEqual(self.db.query(Brand).count(), 1)
        self.assertEqual(self.db.query(VehicleModel).count(), 2)

    def test_rejected_photo_is_upload_failure_and_creates_nothing(self):
        with self.assertRaises(UploadFailedException) as ctx:
            svc.create_vehicle(self.db, vehicle_request(), photo(content_type="text/plain"), self.images)
        self.assertEqual(ctx.exception.status_code, 400)
        with self.assertRaises(NotFoundException):
            svc.list_vehicles(self.db)
        self.assertEqual(self.db.query(Brand).count(), 0)

    def test_losing_a_create_race_keeps_the_winners_photo(self):
        winner = svc.create_vehicle(self.db, vehicle_request(), photo(), self.images)
        winner_file = winner["photoUrl"].rsplit("/", 1)[-1]

        # The second request finds no vehicle or plate, as if it checked first
        real_query = self.db.query

        def query(entity, *args):
            if entity in (Vehicle, VehicleIdentification):
                empty = MagicMock()
                empty.filter.return_value.first.return_value = None
                return empty
            return real_query(entity, *args)

        with patch.object(self.db, "query", side_effect=query):
            with self.assertRaises(DuplicateEntryException):
                svc.create_vehicle(self.db, vehicle_request(), photo(b"loser"), self.images)

        self.assertEqual(self.images.path_for(winner_file).read_bytes(), b"\xff\xd8\xff\xe0jpeg")
        self.assertEqual(sorted(p.name for p in self.images.root.iterdir()), [winner_file])
        self.assertEqual(svc.get_vehicle(self.db, "1HGCM82633A004352")["photoUrl"], winner["photoUrl"])

    def test_vin_that_is_not_a_plain_identifier_is_refused(self):
        with self.assertRaises(ValidationError):
            vehicle_request(vin="../escaped")


class TestLookups(VehicleServiceTestCase):
    def setUp(self):
        super().setUp()
        svc.create_vehicle(self.db, vehicle_request(vin="VIN1", plate="P1"), photo(), self.images)
        svc.create_vehicle(self.db, vehicle_request(vin="VIN2", plate="P2", model="Civic"), photo(), self.images)

    def test_get_vehicle(self):
        self.assertEqual(svc.get_vehicle(self.db, "VIN2")["model"], "Civic")
        with self.assertRaises(NotFoundException):
            svc.get_vehicle(self.db, "MISSING")

    def test_list_by_model(self):
        self.assertEqual([v["vin"] for v in svc.list_by_model(self.db, "Accord")], ["VIN1"])
        with self.assertRaises(NotFoundException):
            svc.list_by_model(self.db, "Tsuru")

    def test_model_without_vehicles_is_not_found(self):
        svc.update_vehicle(self.db, "VIN2", VehicleUpdateRequest(model="Accord"))
        with self.assertRaises(NotFoundException) as ctx:
            svc.list_by_model(self.db, "Civic")
        self.assertIn("No vehicles", ctx.exception.message)

    def test_list_vehicles(self):
        self.assertEqual([v["vin"] for v in svc.list_vehicles(self.db)], ["VIN1", "VIN2"])


class TestUpdateVehicle(VehicleServiceTestCase):
    def setUp(self):
        super().setUp()
        svc.create_vehicle(self.db, vehicle_request(vin="VIN1", plate="P1"), photo(), self.images)
        svc.create_vehicle(self.db, vehicle_request(vin="VIN2", plate="P2"), photo(), self.images)

    def test_update_fields(self):
        data = svc.update_vehicle(self.db, "VIN1", VehicleUpdateRequest(
            plate="new-1", cost=Decimal("1000"), brand="Acura", model="TLX",
        ))
        self.assertEqual(data["vin"], "VIN1")
        self.assertEqual(data["plate"], "NEW-1")
        self.assertEqual(data["brand"], "Acura")
        self.assertEqual(data["model"], "TLX")
        self.assertEqual(Decimal(data["cost"]), Decimal("1000"))

    def test_update_to_taken_plate_conflicts(self):
        with self.assertRaises(DuplicateEntryException):
            svc.update_vehicle(self.db, "VIN1", VehicleUpdateRequest(plate="P2"))

    def test_update_missing_vehicle(self):
        with self.assertRaises(NotFoundException):
            svc.update_vehicle(self.db, "NOPE", VehicleUpdateRequest(plate="X"))


if __name__ == "__main__":
    unittest.main()
