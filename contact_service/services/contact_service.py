"""
Contact Service — Contact Operations
======================================

What:  The five collection operations behind the /contacts routes.
How:   Each method issues exactly one SQL statement on the request's session
       and translates the outcome into a response model or a tagged
       exception from contact_service.exceptions.
Who:   Called by the route handlers in contact_service.routes.contacts.

Statement per operation:
    list_contacts   SELECT ... LIMIT 100            (no ORDER BY)
    get_contact     SELECT ... WHERE contact_name = :name
    create_contact  INSERT                          (unique index → 409)
    update_contact  UPDATE ... WHERE contact_name = :original
                    SET only the fields the client sent; 0 rows → 404
    delete_contact  DELETE ... WHERE contact_name = :name; 0 rows → 404

    Existence is decided by the statement itself (unique index violation,
    affected row count), never by a separate lookup before the write.

Error Handling:
    IntegrityError → ConflictError. Any other SQLAlchemy or connection error
    → DatabaseError whose message is the route's prefix plus the driver text.
    Service exceptions propagate untouched.
"""

import logging
from typing import List

from sqlalchemy import delete, select, update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from contact_service.exceptions import (
    ConflictError,
    DatabaseError,
    NotFoundError,
    ValidationError,
)
from contact_service.models.contact import Contact
from contact_service.schemas.contact import ContactPayload, ContactResponse

logger = logging.getLogger(__name__)

# Upper bound on GET /contacts; there is no pagination cursor
MAX_CONTACTS = 100

# Exceptions treated as storage failures
STORAGE_ERRORS = (SQLAlchemyError, OSError)


class ContactService:
    """
    Stateless operations over the contacts table.

    The session is passed into every call, so a single instance serves all
    requests concurrently.
    """

    async def list_contacts(self, db: AsyncSession) -> List[ContactResponse]:
        """Return up to MAX_CONTACTS contacts in storage order."""
        try:
            result = await db.execute(select(Contact).limit(MAX_CONTACTS))
            contacts = result.scalars().all()
        except STORAGE_ERRORS as e:
            logger.error("Error fetching contacts: %s", e, exc_info=True)
            raise DatabaseError(
                message="Error fetching contacts",
                context={"error_type": type(e).__name__},
            )

        logger.debug("Fetched %d contact(s)", len(contacts))
        return [ContactResponse.model_validate(c) for c in contacts]

    async def get_contact(self, db: AsyncSession, name: str) -> ContactResponse:
        """
        Retrieve one contact by exact name.

        Raises:
            NotFoundError: no contact has this name (→ 404)
            DatabaseError: the query failed (→ 500)
        """
        logger.info("Contact to find: %s", name)
        try:
            result = await db.execute(
                select(Contact).where(Contact.contact_name == name).limit(1)
            )
            contact = result.scalars().first()
        except STORAGE_ERRORS as e:
            logger.error("Error fetching contact %r: %s", name, e, exc_info=True)
            raise DatabaseError(
                message="Error fetching contact",
                context={"contact_name": name, "error_type": type(e).__name__},
            )

        logger.debug("Result: %r", contact)
        if contact is None:
            raise NotFoundError(message="Contact not found", contact_name=name)
        return ContactResponse.model_validate(contact)

    async def create_contact(self, db: AsyncSession, payload: ContactPayload) -> None:
        """
        Insert a new contact with the four payload fields.

        Fields the client omitted are stored as NULL. The flush sends the
        INSERT immediately so a duplicate name is reported here, not at
        commit time.

        Raises:
            ConflictError: the name is already taken (→ 409)
            DatabaseError: the insert failed (→ 500)
        """
        values = payload.contact_fields()
        contact = Contact(**values)
        try:
            db.add(contact)
            await db.flush()
        except IntegrityError as e:
            logger.info("Duplicate contact name %r rejected", payload.contact_name)
            raise ConflictError(
                contact_name=payload.contact_name,
                context={"error_type": type(e).__name__},
            )
        except STORAGE_ERRORS as e:
            logger.error("Error adding contact: %s", e, exc_info=True)
            raise DatabaseError(
                message=f"Failed to add contact: {e}",
                context={"error_type": type(e).__name__},
            )

        logger.info("Document inserted: %r", contact)

    async def update_contact(
        self,
        db: AsyncSession,
        original_name: str,
        payload: ContactPayload,
    ) -> None:
        """
        Apply a partial update to the contact named `original_name`.

        Only the fields present in the request body are written; the rest
        keep their stored values. For phone_number, message and image_url a
        present field overrides even when its value is null or "". Renaming
        is allowed and changes the key, but a null or empty contact_name is
        rejected: the contact could never be addressed by name again.

        A body holding only unknown keys changes nothing; the statement then
        just confirms the contact exists.

        Raises:
            ValidationError: empty body, or null/empty contact_name (→ 400)
            NotFoundError: no contact has `original_name` (→ 404)
            ConflictError: the new name belongs to another contact (→ 409)
            DatabaseError: the update failed (→ 500)
        """
        if payload.is_empty():
            raise ValidationError()

        changes = payload.provided_fields()
        if "contact_name" in changes and not changes["contact_name"]:
            raise ValidationError(
                message="Bad request: contact_name cannot be null or empty.",
                field="contact_name",
            )
        if not changes:
            # No-op assignment; the matched row count still answers 404
            changes = {"contact_name": Contact.contact_name}

        stmt = (
            update(Contact)
            .where(Contact.contact_name == original_name)
            .values(**changes)
            .execution_options(synchronize_session=False)
        )
        try:
            result = await db.execute(stmt)
        except IntegrityError as e:
            new_name = changes.get("contact_name")
            logger.info("Rename of %r to %r rejected: name taken", original_name, new_name)
            raise ConflictError(
                contact_name=new_name,
                context={"original_name": original_name, "error_type": type(e).__name__},
            )
        except STORAGE_ERRORS as e:
            logger.error("Error updating contact %r: %s", original_name, e, exc_info=True)
            raise DatabaseError(
                message=f"Failed to update contact: {e}",
                context={"contact_name": original_name, "error_type": type(e).__name__},
            )

        logger.info("Update results: %d row(s) matched for %r", result.rowcount, original_name)
        if result.rowcount == 0:
            raise NotFoundError(
                message=f"Contact with name {original_name} does NOT exist.",
                contact_name=original_name,
            )

    async def delete_contact(self, db: AsyncSession, name: str) -> None:
        """
        Delete the contact with this exact name.

        Raises:
            NotFoundError: no contact has this name (→ 404)
            DatabaseError: the delete failed (→ 500)
        """
        logger.info("Contact to delete: %s", name)
        stmt = (
            delete(Contact)
            .where(Contact.contact_name == name)
            .execution_options(synchronize_session=False)
        )
        try:
            result = await db.execute(stmt)
        except STORAGE_ERRORS as e:
            logger.error("Error deleting contact %r: %s", name, e, exc_info=True)
            raise DatabaseError(
                message=f"Internal Server Error: {e}",
                context={"contact_name": name, "error_type": type(e).__name__},
            )

        logger.info("Delete results: %d row(s) removed", result.rowcount)
        if result.rowcount == 0:
            raise NotFoundError(
                message=f"Contact with name {name} does NOT exist.",
                contact_name=name,
            )


contact_service = ContactService()
