"""
Contact Service — ContactService Tests
========================================

What:  Tests for the five collection operations against a real (in-memory
       SQLite) database, plus storage failure translation with a mock session.

What we test:
    ✅ create → get returns the stored fields, omitted fields as None
    ✅ duplicate names raise ConflictError and insert nothing
    ✅ partial update keeps unsent fields; sent nulls override
    ✅ rename, rename onto a taken name, blank names rejected
    ✅ unknown keys count as a body but are never stored
    ✅ numbers become strings; objects are rejected
    ✅ delete and not-found paths
    ✅ list is capped at MAX_CONTACTS
    ✅ driver errors become DatabaseError with the route prefix
"""

import pytest
from pydantic import ValidationError as PayloadError
from sqlalchemy import func, select
from sqlalchemy.exc import OperationalError

from contact_service.exceptions import (
    ConflictError,
    DatabaseError,
    NotFoundError,
    ValidationError,
)
from contact_service.models.contact import Contact
from contact_service.schemas.contact import ContactPayload
from contact_service.services.contact_service import MAX_CONTACTS, ContactService


async def count_contacts(db) -> int:
    result = await db.execute(select(func.count(Contact.id)))
    return result.scalar_one()


class TestPayload:

    def test_unknown_keys_are_not_empty(self):
        payload = ContactPayload(nickname="Ada")

        assert not payload.is_empty()
        assert payload.provided_fields() == {}
        assert "nickname" not in payload.contact_fields()

    def test_no_keys_is_empty(self):
        assert ContactPayload().is_empty()

    def test_numbers_become_strings(self):
        payload = ContactPayload.model_validate({"phone_number": 5551234, "message": 1.5})

        assert payload.phone_number == "5551234"
        assert payload.message == "1.5"

    @pytest.mark.parametrize("value", [{"home": "555"}, ["555"]])
    def test_structured_values_rejected(self, value):
        with pytest.raises(PayloadError):
            ContactPayload.model_validate({"phone_number": value})


class TestCreateAndGet:

    def setup_method(self):
        self.service = ContactService()

    @pytest.mark.asyncio
    async def test_create_then_get(self, db_session, ada):
        await self.service.create_contact(db_session, ContactPayload(**ada))

        contact = await self.service.get_contact(db_session, "Ada")

        assert contact.contact_name == "Ada"
        assert contact.phone_number == "555"
        assert contact.message == "hi"
        assert contact.image_url is None

    @pytest.mark.asyncio
    async def test_get_missing_raises_not_found(self, db_session):
        with pytest.raises(NotFoundError, match="Contact not found"):
            await self.service.get_contact(db_session, "Nobody")

    @pytest.mark.asyncio
    async def test_get_is_exact_match(self, db_session, ada):
        await self.service.create_contact(db_session, ContactPayload(**ada))

        for name in ("ada", "ADA", " Ada", "Ada "):
            with pytest.raises(NotFoundError):
                await self.service.get_contact(db_session, name)

    @pytest.mark.asyncio
    async def test_duplicate_name_conflicts(self, db_session, ada):
        await self.service.create_contact(db_session, ContactPayload(**ada))
        await db_session.commit()

        with pytest.raises(ConflictError) as exc_info:
            await self.service.create_contact(db_session, ContactPayload(**ada))
        await db_session.rollback()

        assert exc_info.value.message == "Contact with name 'Ada' already exists."
        assert await count_contacts(db_session) == 1

    @pytest.mark.asyncio
    async def test_nameless_contacts_may_coexist(self, db_session):
        await self.service.create_contact(db_session, ContactPayload(phone_number="1"))
        await self.service.create_contact(db_session, ContactPayload(phone_number="2"))

        assert await count_contacts(db_session) == 2

    @pytest.mark.asyncio
    async def test_create_storage_failure(self, mock_db_session):
        mock_db_session.flush.side_effect = OperationalError(
            "INSERT", {}, Exception("disk I/O error")
        )

        with pytest.raises(DatabaseError) as exc_info:
            await self.service.create_contact(mock_db_session, ContactPayload(contact_name="X"))

        assert exc_info.value.message.startswith("Failed to add contact: ")
        assert "disk I/O error" in exc_info.value.message


class TestList:

    def setup_method(self):
        self.service = ContactService()

    @pytest.mark.asyncio
    async def test_list_empty(self, db_session):
        assert await self.service.list_contacts(db_session) == []

    @pytest.mark.asyncio
    async def test_list_is_capped(self, db_session):
        db_session.add_all(
            [Contact(contact_name=f"c{i}") for i in range(MAX_CONTACTS + 5)]
        )
        await db_session.commit()

        contacts = await self.service.list_contacts(db_session)

        assert len(contacts) == MAX_CONTACTS

    @pytest.mark.asyncio
    async def test_list_storage_failure(self, mock_db_session):
        mock_db_session.execute.side_effect = OperationalError(
            "SELECT", {}, Exception("connection refused")
        )

        with pytest.raises(DatabaseError, match="Error fetching contacts"):
            await self.service.list_contacts(mock_db_session)


class TestUpdate:

    def setup_method(self):
        self.service = ContactService()

    @pytest.mark.asyncio
    async def test_partial_update_keeps_other_fields(self, db_session, ada):
        await self.service.create_contact(
            db_session, ContactPayload(**ada, image_url="http://img/ada.png")
        )

        await self.service.update_contact(
            db_session, "Ada", ContactPayload(phone_number="777")
        )

        contact = await self.service.get_contact(db_session, "Ada")
        assert contact.phone_number == "777"
        assert contact.message == "hi"
        assert contact.image_url == "http://img/ada.png"

    @pytest.mark.asyncio
    async def test_sent_null_and_empty_override(self, db_session, ada):
        await self.service.create_contact(db_session, ContactPayload(**ada))

        await self.service.update_contact(
            db_session, "Ada", ContactPayload(message=None, phone_number="")
        )

        contact = await self.service.get_contact(db_session, "Ada")
        assert contact.message is None
        assert contact.phone_number == ""

    @pytest.mark.asyncio
    async def test_rename(self, db_session, ada):
        await self.service.create_contact(db_session, ContactPayload(**ada))

        await self.service.update_contact(
            db_session, "Ada", ContactPayload(contact_name="Grace")
        )

        with pytest.raises(NotFoundError):
            await self.service.get_contact(db_session, "Ada")
        renamed = await self.service.get_contact(db_session, "Grace")
        assert renamed.phone_number == "555"

    @pytest.mark.asyncio
    async def test_rename_onto_taken_name_conflicts(self, db_session, ada):
        await self.service.create_contact(db_session, ContactPayload(**ada))
        await self.service.create_contact(db_session, ContactPayload(contact_name="Grace"))
        await db_session.commit()

        with pytest.raises(ConflictError) as exc_info:
            await self.service.update_contact(
                db_session, "Ada", ContactPayload(contact_name="Grace")
            )
        await db_session.rollback()

        assert exc_info.value.contact_name == "Grace"
        assert (await self.service.get_contact(db_session, "Ada")).message == "hi"
        assert await count_contacts(db_session) == 2

    @pytest.mark.asyncio
    async def test_update_missing_raises_not_found(self, db_session):
        with pytest.raises(NotFoundError) as exc_info:
            await self.service.update_contact(
                db_session, "Nobody", ContactPayload(message="x")
            )

        assert exc_info.value.message == "Contact with name Nobody does NOT exist."
        assert await count_contacts(db_session) == 0

    @pytest.mark.asyncio
    async def test_update_without_fields_rejected(self, db_session):
        with pytest.raises(ValidationError):
            await self.service.update_contact(db_session, "Ada", ContactPayload())

    @pytest.mark.asyncio
    @pytest.mark.parametrize("blank", [None, ""])
    async def test_blank_name_rejected(self, db_session, ada, blank):
        await self.service.create_contact(db_session, ContactPayload(**ada))

        with pytest.raises(ValidationError) as exc_info:
            await self.service.update_contact(
                db_session, "Ada", ContactPayload(contact_name=blank, message="x")
            )

        assert exc_info.value.context["field"] == "contact_name"
        contact = await self.service.get_contact(db_session, "Ada")
        assert contact.message == "hi"

    @pytest.mark.asyncio
    async def test_unknown_keys_change_nothing(self, db_session, ada):
        await self.service.create_contact(db_session, ContactPayload(**ada))

        await self.service.update_contact(db_session, "Ada", ContactPayload(nickname="Countess"))

        contact = await self.service.get_contact(db_session, "Ada")
        assert contact.model_dump() == {**ada, "image_url": None}

    @pytest.mark.asyncio
    async def test_unknown_keys_on_missing_contact(self, db_session):
        with pytest.raises(NotFoundError):
            await self.service.update_contact(
                db_session, "Nobody", ContactPayload(nickname="x")
            )

    @pytest.mark.asyncio
    async def test_long_phone_number(self, db_session, ada):
        await self.service.create_contact(db_session, ContactPayload(**ada))
        phone = "9" * 500

        await self.service.update_contact(db_session, "Ada", ContactPayload(phone_number=phone))

        assert (await self.service.get_contact(db_session, "Ada")).phone_number == phone

    @pytest.mark.asyncio
    async def test_update_storage_failure(self, mock_db_session):
        mock_db_session.execute.side_effect = OperationalError(
            "UPDATE", {}, Exception("database is locked")
        )

        with pytest.raises(DatabaseError) as exc_info:
            await self.service.update_contact(
                mock_db_session, "Ada", ContactPayload(message="x")
            )

        assert exc_info.value.message.startswith("Failed to update contact: ")


class TestDelete:

    def setup_method(self):
        self.service = ContactService()

    @pytest.mark.asyncio
    async def test_delete_existing(self, db_session, ada):
        await self.service.create_contact(db_session, ContactPayload(**ada))

        await self.service.delete_contact(db_session, "Ada")

        with pytest.raises(NotFoundError):
            await self.service.get_contact(db_session, "Ada")

    @pytest.mark.asyncio
    async def test_delete_missing_raises_not_found(self, db_session, ada):
        await self.service.create_contact(db_session, ContactPayload(**ada))

        with pytest.raises(NotFoundError, match="Contact with name Bob does NOT exist."):
            await self.service.delete_contact(db_session, "Bob")

        assert await count_contacts(db_session) == 1

    @pytest.mark.asyncio
    async def test_delete_storage_failure(self, mock_db_session):
        mock_db_session.execute.side_effect = OperationalError(
            "DELETE", {}, Exception("connection reset")
        )

        with pytest.raises(DatabaseError) as exc_info:
            await self.service.delete_contact(mock_db_session, "Ada")

        assert exc_info.value.message.startswith("Internal Server Error: ")
