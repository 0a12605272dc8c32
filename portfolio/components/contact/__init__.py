"""
Contact component.

Contact form intake with notification side effects, plus admin triage.
"""

from portfolio.components.contact.component import (
    CONTACT_SORT_FIELDS,
    run,
    run_delete,
    run_get,
    run_list,
    run_submit,
    run_update,
)
from portfolio.components.contact.models import (
    ContactCreateSchema,
    ContactFilter,
    ContactListOutput,
    ContactOutput,
    ContactQuery,
    ContactUpdateSchema,
    DeleteContactInput,
    ListContactsInput,
    SubmitContactInput,
    SubmitContactOutput,
    UpdateContactInput,
)
from portfolio.components.contact.ports import ContactRepoPort

__all__ = [
    "run",
    "run_submit",
    "run_list",
    "run_get",
    "run_update",
    "run_delete",
    "CONTACT_SORT_FIELDS",
    "ContactCreateSchema",
    "ContactUpdateSchema",
    "SubmitContactInput",
    "SubmitContactOutput",
    "ContactFilter",
    "ContactQuery",
    "ListContactsInput",
    "ContactListOutput",
    "ContactOutput",
    "UpdateContactInput",
    "DeleteContactInput",
    "ContactRepoPort",
]
