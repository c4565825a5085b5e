"""Tests for local wallet handling and IdentityService request shapes."""

from __future__ import annotations

from gamebuild.prompts import is_eth_address
from gamebuild.services import IdentityService
from gamebuild.services.base import ApiClient
from gamebuild.services.identity import (
    generate_wallet,
    sign_message,
    verify_signature,
    wallet_address,
)

from conftest import FakeSession


# ---------------------------------------------------------------------------
# Wallets and signatures
# ---------------------------------------------------------------------------


class TestWallet:
    """eth-account backed keypairs and EIP-191 signatures."""

    def test_generate_wallet(self):
        wallet = generate_wallet()
        assert is_eth_address(wallet["address"])
        assert wallet["privateKey"].startswith("0x")
        assert len(wallet["privateKey"]) == 66

    def test_wallets_are_unique(self):
        assert generate_wallet()["address"] != generate_wallet()["address"]

    def test_address_from_key(self):
        wallet = generate_wallet()
        assert wallet_address(wallet["privateKey"]) == wallet["address"]

    def test_sign_then_verify(self):
        wallet = generate_wallet()
        signature = sign_message(wallet["privateKey"], "I own this identity")
        assert signature.startswith("0x")
        assert verify_signature("I own this identity", signature, wallet["address"])

    def test_verify_is_case_insensitive_on_address(self):
        wallet = generate_wallet()
        signature = sign_message(wallet["privateKey"], "hello")
        assert verify_signature("hello", signature, wallet["address"].lower())

    def test_wrong_message_fails(self):
        wallet = generate_wallet()
        signature = sign_message(wallet["privateKey"], "hello")
        assert not verify_signature("goodbye", signature, wallet["address"])

    def test_wrong_address_fails(self):
        signer, other = generate_wallet(), generate_wallet()
        signature = sign_message(signer["privateKey"], "hello")
        assert not verify_signature("hello", signature, other["address"])

    def test_garbage_signature_fails(self):
        assert not verify_signature("hello", "0xdeadbeef", generate_wallet()["address"])


# ---------------------------------------------------------------------------
# IdentityService
# ---------------------------------------------------------------------------


def _service(session: FakeSession) -> IdentityService:
    return IdentityService(ApiClient(base_url="https://api.test", token="t", session=session))


class TestIdentityService:
    """Endpoint paths and bodies."""

    def test_create_generates_wallet_and_keeps_key_local(self):
        session = FakeSession()
        session.add("POST", "/v1/identities", {"id": "id-1", "type": "player"})

        created = _service(session).create_identity("player", display_name="Ada")

        body = session.calls[0].json
        assert is_eth_address(body["walletAddress"])
        assert "privateKey" not in body
        assert created["privateKey"].startswith("0x")
        assert wallet_address(created["privateKey"]) == body["walletAddress"]

    def test_create_with_existing_wallet(self):
        session = FakeSession()
        session.add("POST", "/v1/identities", {"id": "id-1"})
        address = "0x" + "ab" * 20

        created = _service(session).create_identity("developer", wallet_address=address)

        assert session.calls[0].json["walletAddress"] == address
        assert "privateKey" not in created

    def test_profile_defaults_to_me(self):
        session = FakeSession()
        session.add("GET", "/v1/identities/me", {"id": "me"})
        session.add("PATCH", "/v1/identities/me", {})
        service = _service(session)
        service.get_profile()
        service.update_profile(None, {"bio": "hi"})
        assert session.paths() == ["/v1/identities/me", "/v1/identities/me"]
        assert session.calls[1].json == {"bio": "hi"}

    def test_permissions(self):
        session = FakeSession()
        session.add("POST", "/v1/identities/i1/permissions", {})
        session.add("DELETE", "/v1/identities/i1/permissions/admin", {})
        session.add("GET", "/v1/identities/i1/permissions", {"permissions": ["play"]})
        service = _service(session)

        service.add_permission("i1", "admin")
        service.remove_permission("i1", "admin")
        assert service.get_permissions("i1") == ["play"]
        assert session.calls[0].json == {"permission": "admin"}

    def test_list_filters_by_type(self):
        session = FakeSession()
        session.add("GET", "/v1/identities", {"identities": [{"id": "a"}]})
        assert _service(session).list_identities("guild") == [{"id": "a"}]
        assert session.calls[0].params == {"type": "guild"}
