"""
Web3 identities: profiles, wallets, reputation, permissions.

Wallet keys are generated and used locally with ``eth-account``; a
generated private key is handed back to the caller once and is never
sent to the backend.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

from eth_account import Account
from eth_account.messages import encode_defunct

from .base import BaseService

logger = logging.getLogger(__name__)

IDENTITY_TYPES = ("player", "developer", "guild", "moderator")


def _hex(raw: bytes) -> str:
    return "0x" + bytes(raw).hex()


def generate_wallet() -> Dict[str, str]:
    """Create a fresh Ethereum keypair.

    Returns:
        Dict with ``address`` and ``privateKey`` (0x-prefixed hex).
    """
    account = Account.create()
    return {"address": account.address, "privateKey": _hex(account.key)}


def wallet_address(private_key: str) -> str:
    """Checksummed address for a private key."""
    return Account.from_key(private_key).address


def sign_message(private_key: str, message: str) -> str:
    """EIP-191 personal-sign ``message`` and return the 0x signature."""
    signed = Account.sign_message(encode_defunct(text=message), private_key=private_key)
    return _hex(signed.signature)


def verify_signature(message: str, signature: str, address: str) -> bool:
    """Whether ``signature`` over ``message`` recovers to ``address``."""
    try:
        recovered = Account.recover_message(encode_defunct(text=message), signature=signature)
    except Exception as exc:  # eth-keys raises its own BadSignature hierarchy
        logger.debug("Signature recovery failed: %s", exc)
        return False
    return recovered.lower() == address.lower()


def _identity_path(identity_id: Optional[str]) -> str:
    return f"/v1/identities/{identity_id}" if identity_id else "/v1/identities/me"


class IdentityService(BaseService):
    """Calls behind ``gamebuild identity``."""

    def create_identity(
        self,
        identity_type: str,
        wallet_address: Optional[str] = None,
        display_name: Optional[str] = None,
        email: Optional[str] = None,
    ) -> Dict[str, Any]:
        """Register an identity, generating a wallet when none is given.

        Returns:
            The server's identity record, plus ``privateKey`` when a
            wallet was generated here.
        """
        private_key = None
        if not wallet_address:
            wallet = generate_wallet()
            wallet_address = wallet["address"]
            private_key = wallet["privateKey"]
            logger.info("Generated wallet %s", wallet_address)

        identity = self.client.post(
            "/v1/identities", "create identity",
            json={
                "type": identity_type,
                "displayName": display_name,
                "email": email,
                "walletAddress": wallet_address,
            },
        )
        if private_key:
            identity = {**identity, "privateKey": private_key}
        return identity

    def link_wallet(self, identity_id: str, wallet_address: str, network: str) -> None:
        self.client.post(
            f"/v1/identities/{identity_id}/wallets", "link wallet",
            json={"walletAddress": wallet_address, "network": network},
        )

    def verify_identity(self, identity_id: str, signature: str) -> Dict[str, Any]:
        return self.client.post(
            f"/v1/identities/{identity_id}/verify", "verify identity",
            json={"signature": signature},
        )

    def get_profile(self, identity_id: Optional[str] = None) -> Dict[str, Any]:
        return self.client.get(_identity_path(identity_id), "get profile")

    def update_profile(self, identity_id: Optional[str], updates: Dict[str, Any]) -> None:
        self.client.patch(_identity_path(identity_id), "update profile", json=updates)

    def list_identities(self, identity_type: Optional[str] = None) -> List[Dict[str, Any]]:
        return self.client.get_field(
            "/v1/identities", "list identities", "identities", [], params={"type": identity_type},
        )

    def get_reputation(self, identity_id: str) -> Dict[str, Any]:
        return self.client.get(f"/v1/identities/{identity_id}/reputation", "get reputation")

    def add_permission(self, identity_id: str, permission: str) -> None:
        self.client.post(
            f"/v1/identities/{identity_id}/permissions", "add permission",
            json={"permission": permission},
        )

    def remove_permission(self, identity_id: str, permission: str) -> None:
        self.client.delete(
            f"/v1/identities/{identity_id}/permissions/{permission}", "remove permission",
        )

    def get_permissions(self, identity_id: str) -> List[str]:
        return self.client.get_field(
            f"/v1/identities/{identity_id}/permissions", "get permissions", "permissions", [],
        )
