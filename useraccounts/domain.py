"""Defines the core data structures for the user-accounts service."""

from typing import NamedTuple, Optional, Dict, Any
from datetime import datetime


class Account(NamedTuple):
    """A user account, as persisted in the datastore."""

    id: str
    """Opaque, server-generated identifier (a UUID4 string)."""

    user_name: str
    """Unique display name."""

    email_address: str
    """Unique email address."""

    identity_number: str
    """Unique national identity number; exactly 16 characters."""

    account_number: str
    """Server-generated 10-digit account number."""

    password: str
    """bcrypt hash of the user's password. Never the plaintext."""

    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @property
    def claims(self) -> 'Claims':
        """The identity claims carried by a session token for this account."""
        return Claims(
            id=self.id,
            email_address=self.email_address,
            user_name=self.user_name,
            account_number=self.account_number,
            identity_number=self.identity_number
        )


class Claims(NamedTuple):
    """Identity attributes embedded in a session token."""

    id: str
    email_address: str
    user_name: str
    account_number: str
    identity_number: str

    def to_payload(self) -> Dict[str, str]:
        """Represent the claims using the token's field names."""
        return {
            'id': self.id,
            'emailAddress': self.email_address,
            'userName': self.user_name,
            'accountNumber': self.account_number,
            'identityNumber': self.identity_number
        }

    @classmethod
    def from_payload(cls, payload: Dict[str, Any]) -> 'Claims':
        """Read claims from a decoded token payload.

        Raises :class:`KeyError` if any claim is missing.
        """
        return cls(
            id=str(payload['id']),
            email_address=payload['emailAddress'],
            user_name=payload['userName'],
            account_number=payload['accountNumber'],
            identity_number=payload['identityNumber']
        )


class Profile(NamedTuple):
    """Restricted projection of an account, safe to show to callers."""

    id: str
    user_name: str
    account_number: str
    email_address: str
    identity_number: str

    def to_dict(self) -> Dict[str, str]:
        return {
            'id': self.id,
            'userName': self.user_name,
            'accountNumber': self.account_number,
            'emailAddress': self.email_address,
            'identityNumber': self.identity_number
        }


def _timestamp(value: Optional[datetime]) -> Optional[str]:
    return value.isoformat() if value is not None else None


def registration_view(account: Account) -> Dict[str, Any]:
    """Everything stored about a newly registered account except its hash."""
    return {
        'id': account.id,
        'userName': account.user_name,
        'emailAddress': account.email_address,
        'identityNumber': account.identity_number,
        'accountNumber': account.account_number,
        'createdAt': _timestamp(account.created_at),
        'updatedAt': _timestamp(account.updated_at)
    }


def public_view(account: Account) -> Dict[str, Any]:
    """An account with password, email and identity number removed."""
    view = registration_view(account)
    del view['emailAddress']
    del view['identityNumber']
    return view
