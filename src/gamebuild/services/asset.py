"""
Assets (NFTs) and ERC-20 / ERC-721 token contracts.

Minting first pins the asset file on IPFS through the IPFS HTTP API,
then asks the backend to mint an NFT pointing at the gateway URL.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Dict, List, Optional

import requests

from ..errors import ApiError
from .base import ApiClient, BaseService, error_message

logger = logging.getLogger(__name__)

DEFAULT_IPFS_API = "https://ipfs.infura.io:5001"
IPFS_GATEWAY = "https://ipfs.io/ipfs"


class AssetService(BaseService):
    """Calls behind ``gamebuild asset``.

    Args:
        client: Authenticated API client.
        ipfs_api_url: IPFS HTTP API root used for uploads.
        ipfs_session: Optional session for IPFS calls (tests inject one).
    """

    def __init__(
        self,
        client: ApiClient,
        ipfs_api_url: Optional[str] = None,
        ipfs_session: Optional[requests.Session] = None,
    ) -> None:
        super().__init__(client)
        self.ipfs_api_url = (ipfs_api_url or DEFAULT_IPFS_API).rstrip("/")
        self.ipfs_session = ipfs_session or requests.Session()

    def upload_to_ipfs(self, file_path: Path) -> str:
        """Pin a file on IPFS.

        Returns:
            The public gateway URL for the content hash.

        Raises:
            ApiError: If the file is unreadable or the upload fails.
        """
        path = Path(file_path).expanduser()
        logger.info("Uploading %s to IPFS", path)
        try:
            with path.open("rb") as fh:
                resp = self.ipfs_session.post(
                    f"{self.ipfs_api_url}/api/v0/add",
                    files={"file": (path.name, fh)},
                    timeout=self.client.timeout,
                )
            resp.raise_for_status()
            content_hash = resp.json()["Hash"]
        # RequestException subclasses OSError, so it must be caught first
        except requests.RequestException as exc:
            raise ApiError(f"Failed to mint asset: {error_message(exc)}") from exc
        except OSError as exc:
            raise ApiError(f"Failed to mint asset: {exc}") from exc
        except (ValueError, KeyError) as exc:
            raise ApiError("Failed to mint asset: unexpected IPFS response") from exc
        return f"{IPFS_GATEWAY}/{content_hash}"

    def mint_asset(
        self, name: str, file_path: Path, description: Optional[str] = None,
    ) -> Dict[str, Any]:
        ipfs_url = self.upload_to_ipfs(file_path)
        asset = self.client.post(
            "/v1/assets/mint", "mint asset",
            json={"name": name, "description": description, "ipfsUrl": ipfs_url},
        )
        return {**asset, "ipfsUrl": ipfs_url}

    def list_assets(self) -> List[Dict[str, Any]]:
        return self.client.get_field("/v1/assets", "list assets", "assets", [])

    def get_asset(self, asset_id: str) -> Dict[str, Any]:
        return self.client.get(f"/v1/assets/{asset_id}", "get asset")

    def transfer_asset(self, asset_id: str, to_address: str) -> None:
        self.client.post(
            f"/v1/assets/{asset_id}/transfer", "transfer asset",
            json={"toAddress": to_address},
        )

    def burn_asset(self, asset_id: str) -> None:
        self.client.post(f"/v1/assets/{asset_id}/burn", "burn asset")

    # -- token contracts ----------------------------------------------------

    def issue_erc20(
        self, name: str, symbol: str, decimals: int, total_supply: str,
    ) -> Dict[str, Any]:
        return self.client.post(
            "/v1/tokens/erc20/issue", "issue ERC20 token",
            json={
                "name": name,
                "symbol": symbol,
                "decimals": decimals,
                "totalSupply": total_supply,
            },
        )

    def issue_erc721(
        self, name: str, symbol: str, base_uri: Optional[str] = None,
    ) -> Dict[str, Any]:
        return self.client.post(
            "/v1/tokens/erc721/issue", "issue ERC721 collection",
            json={"name": name, "symbol": symbol, "baseUri": base_uri},
        )

    def mint_erc721(
        self, contract_address: str, to_address: str, metadata_uri: Optional[str] = None,
    ) -> Dict[str, Any]:
        return self.client.post(
            "/v1/tokens/erc721/mint", "mint ERC721 NFT",
            json={
                "contractAddress": contract_address,
                "toAddress": to_address,
                "metadataUri": metadata_uri,
            },
        )

    def get_erc20_token(self, contract_address: str) -> Dict[str, Any]:
        return self.client.get(f"/v1/tokens/erc20/{contract_address}", "get ERC20 token")

    def get_erc721_collection(self, contract_address: str) -> Dict[str, Any]:
        return self.client.get(
            f"/v1/tokens/erc721/{contract_address}", "get ERC721 collection",
        )

    def get_erc721_token(self, contract_address: str, token_id: str) -> Dict[str, Any]:
        return self.client.get(
            f"/v1/tokens/erc721/{contract_address}/{token_id}", "get ERC721 token",
        )

    def list_erc20_tokens(self) -> List[Dict[str, Any]]:
        return self.client.get_field("/v1/tokens/erc20", "list ERC20 tokens", "tokens", [])

    def list_erc721_collections(self) -> List[Dict[str, Any]]:
        return self.client.get_field(
            "/v1/tokens/erc721", "list ERC721 collections", "collections", [],
        )
