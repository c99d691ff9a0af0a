from __future__ import annotations

import logging
from typing import Any, Dict, Iterable, Optional

import requests

from ...config import API_BASE_URL, API_TOKEN, REQUEST_TIMEOUT
from ...constants import BATCH_PAYMENT_STATUS_PATH

logger = logging.getLogger(__name__)


class PaymentStatusUnavailable(RuntimeError):
    """The accounting service could not answer a payment-status request."""


class PaymentStatusClient:
    """
    Batch "has anything been paid on this purchase order?" lookups.

    POST {base_url}/api/accounting2/transactions/purchase-orders/batch-payment-status
         {"purchaseOrderIds": [...]}
      -> {"success": true, "data": [{"purchaseOrderId": ..., "hasPaidAmount": ...}, ...]}
    """

    def __init__(
        self,
        base_url: str = API_BASE_URL,
        token: Optional[str] = API_TOKEN,
        timeout: float = REQUEST_TIMEOUT,
        session: Optional[requests.Session] = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.token = token
        self.timeout = timeout
        self.session = session or requests.Session()

    def _headers(self) -> dict[str, str]:
        if not self.token:
            return {}
        return {"x-auth-token": self.token, "Authorization": f"Bearer {self.token}"}

    def fetch_statuses(self, order_ids: Iterable[str]) -> Dict[str, bool]:
        ids = [str(i) for i in order_ids if i]
        if not ids:
            return {}
        url = f"{self.base_url}{BATCH_PAYMENT_STATUS_PATH}"
        try:
            resp = self.session.post(
                url,
                json={"purchaseOrderIds": ids},
                headers=self._headers(),
                timeout=self.timeout,
            )
            resp.raise_for_status()
            body = resp.json()
        except requests.exceptions.RequestException as e:
            logger.warning("Payment status request failed for %d orders: %s", len(ids), e)
            raise PaymentStatusUnavailable("Could not reach the payment status service.") from e
        except ValueError as e:
            logger.warning("Payment status response was not JSON: %s", e)
            raise PaymentStatusUnavailable("Payment status service returned an invalid response.") from e

        return self._parse(body)

    @staticmethod
    def _parse(body: Any) -> Dict[str, bool]:
        if not isinstance(body, dict):
            raise PaymentStatusUnavailable("Payment status service returned an invalid response.")
        if body.get("success") is False:
            raise PaymentStatusUnavailable(body.get("message") or "Batch payment status check failed.")
        out: Dict[str, bool] = {}
        for entry in body.get("data") or []:
            if not isinstance(entry, dict):
                continue
            po_id = entry.get("purchaseOrderId")
            if po_id:
                out[str(po_id)] = bool(entry.get("hasPaidAmount"))
        return out
