"""Installment chain lifecycle: generation, editing, renegotiation and deletes."""

from installments.changeset import ChangeSet
from installments.chain import ChainIndex
from installments.editor import (
    PropagationMode,
    TransactionChanges,
    TransactionDraft,
    plan_create,
    plan_delete,
    plan_delete_future,
    plan_edit,
)
from installments.generator import generate_installments
from installments.renegotiation import RenegotiationRequest, resolve_renegotiation

__all__ = [
    "ChainIndex",
    "ChangeSet",
    "PropagationMode",
    "RenegotiationRequest",
    "TransactionChanges",
    "TransactionDraft",
    "generate_installments",
    "plan_create",
    "plan_delete",
    "plan_delete_future",
    "plan_edit",
    "resolve_renegotiation",
]
