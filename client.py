import logging
from typing import Any, Dict, List, Optional

import requests
from pydantic import ValidationError

from schemas import MinedBlock, PendingTransaction, Transaction

logger = logging.getLogger(__name__)

class RemoteServiceError(Exception):
    """A call to the remote chain service failed or returned something unusable."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code

class ChainClient:
    """Thin client for the blockchain-backed supply-chain API."""

    def __init__(self, base_url: str, timeout: float = 10.0, session: Optional[requests.Session] = None):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.session = session or requests.Session()

    def close(self) -> None:
        self.session.close()

    def _request(self, method: str, path: str, **kwargs) -> Dict[str, Any]:
        url = f"{self.base_url}{path}"
        try:
            r = self.session.request(method, url, timeout=self.timeout, **kwargs)
        except requests.RequestException as e:
            logger.error("%s %s failed: %s", method, url, e)
            raise RemoteServiceError(f"{method} {path} failed: {e}") from e
        if r.status_code >= 400:
            logger.error("%s %s returned %s: %s", method, url, r.status_code, r.text)
            raise RemoteServiceError(f"{method} {path} returned {r.status_code}: {r.text}", status_code=r.status_code)
        if not r.content:
            return {}
        try:
            data = r.json()
        except ValueError as e:
            raise RemoteServiceError(f"{method} {path} returned a non-JSON body", status_code=r.status_code) from e
        if not isinstance(data, dict):
            raise RemoteServiceError(f"{method} {path} returned an unexpected body", status_code=r.status_code)
        return data

    # ---------- reads ----------
    def get_chain(self) -> List[MinedBlock]:
        data = self._request("GET", "/chain")
        try:
            return [MinedBlock.model_validate(b) for b in data.get("chain") or []]
        except (TypeError, ValidationError) as e:
            raise RemoteServiceError(f"malformed chain from remote service: {e}") from e

    def get_pending_transactions(self) -> List[PendingTransaction]:
        data = self._request("GET", "/pending-transactions")
        try:
            return [PendingTransaction.model_validate(t) for t in data.get("transactions") or []]
        except (TypeError, ValidationError) as e:
            raise RemoteServiceError(f"malformed pending transactions from remote service: {e}") from e

    # ---------- writes ----------
    def create_transaction(self, tx: Transaction) -> str:
        body = tx.model_dump(by_alias=True, mode="json", exclude={"id"})
        data = self._request("POST", "/transactions/new", json=body)
        return data.get("message", "Transaction created.")

    def update_transaction(self, tx_id: str, tx: Transaction) -> str:
        body = tx.model_dump(by_alias=True, mode="json", exclude={"id"})
        body["_id"] = tx_id
        data = self._request("PUT", f"/transactions/{tx_id}", json=body)
        return data.get("message", "Transaction updated successfully.")

    def delete_transaction(self, tx_id: str) -> str:
        data = self._request("DELETE", f"/transactions/{tx_id}")
        return data.get("message", "Transaction deleted successfully.")

    def mine(self) -> str:
        data = self._request("GET", "/mine")
        return data.get("message", "New block mined.")

    def clear(self) -> str:
        data = self._request("POST", "/clear")
        return data.get("message", "Blockchain cleared.")
