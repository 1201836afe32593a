import json
import os
import unittest
from unittest.mock import MagicMock, patch
from uuid import uuid4

from sqlalchemy import create_engine, delete
from sqlalchemy.exc import OperationalError
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool
from pydantic import ValidationError as PydanticValidationError

os.environ.setdefault("DATABASE_URL", "sqlite+pysqlite:///:memory:")

from form_admin.models.form import Form
from form_admin.services.access_policy import Actor
from form_admin.services.errors import AuthorizationError, NotFoundError, StorageError, ValidationError
from form_admin.services.form_repository import FormRepository
from form_admin.services.form_service import FormService

ADMIN = Actor(subject="admin-1", email="admin@example.com", role="ADMIN")
USER = Actor(subject="user-1", email="user@example.com", role="USER")

CONTACT = {
    "title": "Contact Form",
    "method": "POST",
    "action": "/contact",
    "fields": [{"type": "text", "name": "name", "label": "Full Name", "required": True}],
}


class FormServiceTests(unittest.TestCase):
    @classmethod
    def setUpClass(cls):
        cls.engine = create_engine(
            "sqlite+pysqlite:///:memory:",
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
        )
        cls.SessionLocal = sessionmaker(bind=cls.engine, autocommit=False, autoflush=False)
        Form.__table__.create(bind=cls.engine)

    @classmethod
    def tearDownClass(cls):
        Form.__table__.drop(bind=cls.engine)
        cls.engine.dispose()

    def setUp(self):
        self.db = self.SessionLocal()
        self.db.execute(delete(Form))
        self.db.commit()
        self.service = FormService(self.db)

    def tearDown(self):
        self.db.close()

    def _form_count(self) -> int:
        return self.db.query(Form).count()

    def test_create_then_show_returns_input(self):
        created = self.service.create(CONTACT, ADMIN)
        shown = self.service.show(created.id, ADMIN)

        self.assertEqual(shown.title, CONTACT["title"])
        self.assertEqual(shown.method, CONTACT["method"])
        self.assertEqual(shown.action, CONTACT["action"])
        self.assertEqual(shown.fields, CONTACT["fields"])
        self.assertTrue(shown.is_active)
        self.assertIsNone(shown.configuration)
        self.assertIsNotNone(shown.created_at)

    def test_returned_definition_is_immutable(self):
        created = self.service.create(CONTACT, ADMIN)
        with self.assertRaises(PydanticValidationError):
            created.title = "Changed"

    def test_list_returns_every_created_form(self):
        ids = {self.service.create({**CONTACT, "title": f"Form {i}"}, ADMIN).id for i in range(3)}
        self.assertEqual({form.id for form in self.service.list_forms(ADMIN)}, ids)

    def test_list_follows_insertion_order_even_with_equal_timestamps(self):
        created = [self.service.create({**CONTACT, "title": f"Form {i}"}, ADMIN) for i in range(4)]
        same_moment = created[0].created_at
        self.db.query(Form).update({Form.created_at: same_moment})
        self.db.commit()

        listed = self.service.list_forms(ADMIN)
        self.assertEqual([form.title for form in listed], ["Form 0", "Form 1", "Form 2", "Form 3"])
        self.assertEqual(
            [row.seq for row in self.db.query(Form).order_by(Form.seq).all()],
            [1, 2, 3, 4],
        )

    def test_non_admin_is_rejected_without_touching_storage(self):
        repository = MagicMock(spec=FormRepository)
        service = FormService(self.db, repository=repository)

        calls = [
            lambda: service.list_forms(USER),
            lambda: service.show(uuid4(), USER),
            lambda: service.create({}, USER),
            lambda: service.update(uuid4(), {}, USER),
            lambda: service.update_structure(uuid4(), None, USER),
            lambda: service.import_json("invalid-json", USER),
            lambda: service.delete(uuid4(), USER),
        ]
        for call in calls:
            with self.assertRaises(AuthorizationError):
                call()
        self.assertEqual(repository.mock_calls, [])

    def test_create_reports_exactly_the_missing_attributes(self):
        with self.assertRaises(ValidationError) as ctx:
            self.service.create({"title": "Has title", "action": "/a"}, ADMIN)
        self.assertEqual(set(ctx.exception.errors.keys()), {"method", "fields"})
        self.assertEqual(self._form_count(), 0)

    def test_create_rejects_non_string_title(self):
        with self.assertRaises(ValidationError) as ctx:
            self.service.create({**CONTACT, "title": 42}, ADMIN)
        self.assertEqual(ctx.exception.errors, {"title": ["The form title must be a string."]})

    def test_update_replaces_attributes_wholesale(self):
        created = self.service.create(CONTACT, ADMIN)
        new_fields = [
            {"type": "email", "name": "email", "label": "Email"},
            {"type": "textarea", "name": "body", "label": "Body", "placeholder": "Say hi"},
        ]
        updated = self.service.update(
            created.id,
            {"title": "Renamed", "method": "GET", "action": "/renamed", "fields": new_fields},
            ADMIN,
        )
        self.assertEqual(updated.title, "Renamed")
        self.assertEqual(updated.method, "GET")
        self.assertEqual([field["name"] for field in updated.fields], ["email", "body"])
        self.assertFalse(updated.fields[0]["required"])
        self.assertEqual(updated.id, created.id)

    def test_update_unknown_form_is_not_found(self):
        created = self.service.create(CONTACT, ADMIN)
        with self.assertRaises(NotFoundError):
            self.service.update(uuid4(), {**CONTACT, "title": "Other"}, ADMIN)
        self.assertEqual(self.service.show(created.id, ADMIN).title, "Contact Form")
        self.assertEqual(self._form_count(), 1)

    def test_update_structure_writes_only_configuration(self):
        created = self.service.create(CONTACT, ADMIN)
        configuration = {"fields": [{"type": "text", "name": "moved", "label": "Moved"}]}

        self.service.update_structure(created.id, configuration, ADMIN)

        shown = self.service.show(created.id, ADMIN)
        self.assertEqual(shown.configuration, configuration)
        self.assertEqual(shown.fields, CONTACT["fields"])
        self.assertEqual((shown.title, shown.method, shown.action), ("Contact Form", "POST", "/contact"))

    def test_update_structure_requires_configuration(self):
        created = self.service.create(CONTACT, ADMIN)
        for value in (None, {}, [], "text", 7):
            with self.assertRaises(ValidationError) as ctx:
                self.service.update_structure(created.id, value, ADMIN)
            self.assertEqual(list(ctx.exception.errors.keys()), ["configuration"])

    def test_import_json_echoes_document_without_persisting(self):
        document = {"title": "Imported", "fields": [{"type": "text", "name": "x", "label": "X"}], "extra": [1, 2]}
        self.assertEqual(self.service.import_json(json.dumps(document), ADMIN), document)
        self.assertEqual(self.service.import_json("[1, 2, 3]", ADMIN), [1, 2, 3])
        self.assertEqual(self._form_count(), 0)

    def test_import_json_rejects_invalid_text(self):
        for raw in ("invalid-json", "", None, {"already": "decoded"}, "NaN", "[Infinity]"):
            with self.assertRaises(ValidationError) as ctx:
                self.service.import_json(raw, ADMIN)
            self.assertEqual(list(ctx.exception.errors.keys()), ["json_data"])

    def test_delete_removes_form(self):
        created = self.service.create(CONTACT, ADMIN)
        self.service.delete(created.id, ADMIN)
        with self.assertRaises(NotFoundError):
            self.service.show(created.id, ADMIN)
        with self.assertRaises(NotFoundError):
            self.service.delete(created.id, ADMIN)

    def test_storage_failure_is_surfaced_as_storage_error(self):
        with patch.object(self.db, "commit", side_effect=OperationalError("INSERT", {}, Exception("disk full"))):
            with self.assertLogs("form_admin.services.form_repository", level="ERROR"):
                with self.assertRaises(StorageError) as ctx:
                    self.service.create(CONTACT, ADMIN)
        self.assertEqual(ctx.exception.status_code, 500)
        self.assertEqual(self._form_count(), 0)


if __name__ == "__main__":
    unittest.main()
