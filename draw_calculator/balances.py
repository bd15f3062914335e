from __future__ import annotations

import json
import pathlib
from typing import Any, List, Optional, Sequence

from web3 import Web3
from web3.contract import Contract
from web3.middleware import ExtraDataToPOAMiddleware

# Only the view the calculator needs; a full artifact can be supplied instead.
TICKET_BALANCES_ABI: List[dict] = [
    {
        "type": "function",
        "name": "getBalancesAt",
        "stateMutability": "view",
        "inputs": [
            {"name": "user", "type": "address"},
            {"name": "timestamps", "type": "uint64[]"},
        ],
        "outputs": [{"name": "", "type": "uint256[]"}],
    }
]


class TicketBalanceClient:
    """Reads historical user balances from the ticket contract."""

    def __init__(self, web3: Web3, contract: Contract) -> None:
        self._web3 = web3
        self._contract = contract

    @classmethod
    def from_rpc(
        cls, rpc_url: str, ticket_address: str, abi_path: Optional[str] = None
    ) -> "TicketBalanceClient":
        web3 = Web3(Web3.HTTPProvider(rpc_url))
        if web3.is_connected() is False:
            raise RuntimeError("Failed to connect to RPC endpoint")

        # For PoA testnets (e.g. Hardhat, Polygon) insert the middleware.
        web3.middleware_onion.inject(ExtraDataToPOAMiddleware, layer=0)

        abi = cls._load_abi(abi_path) if abi_path else TICKET_BALANCES_ABI
        contract = web3.eth.contract(
            address=Web3.to_checksum_address(ticket_address),
            abi=abi,
        )
        return cls(web3, contract)

    @staticmethod
    def _load_abi(path: str) -> Sequence[dict[str, Any]]:
        artifact_path = pathlib.Path(path)
        if not artifact_path.exists():
            raise FileNotFoundError(f"Contract artifact not found: {artifact_path}")
        with artifact_path.open("r", encoding="utf-8") as fh:
            artifact = json.load(fh)
        abi = artifact.get("abi")
        if not isinstance(abi, list):
            raise ValueError("Invalid artifact file: missing ABI")
        return abi

    def get_balances_at(self, user: str, timestamps: Sequence[int]) -> List[int]:
        balances = self._contract.functions.getBalancesAt(
            Web3.to_checksum_address(user), [int(t) for t in timestamps]
        ).call()
        return [int(b) for b in balances]
