"""HTTP client for the construction ERP backend."""

from __future__ import annotations

import logging
from typing import Any

import httpx
from tenacity import Retrying, retry_if_exception, stop_after_attempt, wait_exponential_jitter

from buildledger.client.serialization import (
    account_from_dict,
    contract_from_dict,
    cost_plan_from_dict,
    cost_plan_to_dict,
    partner_from_dict,
    project_from_dict,
    project_to_dict,
    transaction_from_dict,
    transaction_to_dict,
)
from buildledger.config import ApiConfig
from buildledger.engine.tax_kpi import default_cost_plan
from buildledger.exceptions import BackendError
from buildledger.models.finance import CashAccount, Contract, CostPlan, Partner, Project, Transaction

logger = logging.getLogger(__name__)

COST_PLAN_COLLECTION = "kpi-finance_cost_plan_config"


def _is_retryable(exc: BaseException) -> bool:
    """Transport failures and 5xx responses are retried; 4xx are not."""
    if isinstance(exc, (httpx.TimeoutException, httpx.TransportError)):
        return True
    return isinstance(exc, BackendError) and (exc.status_code or 0) >= 500


class BackendClient:
    """Typed access to the REST backend.

    Responses are either the ``{success, data, message, timestamp}``
    envelope or a bare JSON body; both are accepted. A ``success: false``
    envelope raises ``BackendError``.

    Parameters
    ----------
    config : ApiConfig
        Base URL, token, timeout and retry settings.
    client : httpx.Client | None
        Pre-built HTTP client (tests pass one with a ``MockTransport``).
    """

    def __init__(self, config: ApiConfig | None = None, client: httpx.Client | None = None) -> None:
        self._config = config or ApiConfig()
        self._client = client or httpx.Client(timeout=self._config.timeout_seconds)
        self._retrying = Retrying(
            reraise=True,
            retry=retry_if_exception(_is_retryable),
            stop=stop_after_attempt(self._config.retry_max_attempts),
            wait=wait_exponential_jitter(
                initial=self._config.retry_base_seconds, max=self._config.retry_max_seconds
            ),
        )

    def _headers(self) -> dict[str, str]:
        h = {"Accept": "application/json", "Content-Type": "application/json"}
        if self._config.token:
            h["Authorization"] = f"Bearer {self._config.token}"
        return h

    def _request(
        self,
        method: str,
        path: str,
        params: dict[str, Any] | None = None,
        json: Any = None,
    ) -> Any:
        url = self._config.base_url.rstrip("/") + path
        for attempt in self._retrying:
            with attempt:
                r = self._client.request(method, url, params=params, json=json, headers=self._headers())
                if r.status_code >= 500:
                    raise BackendError(f"Backend server error {r.status_code}", r.status_code)
                if r.status_code >= 400:
                    raise BackendError(f"Backend client error {r.status_code}: {r.text}", r.status_code)
                return self._unwrap(r)

    @staticmethod
    def _unwrap(response: httpx.Response) -> Any:
        if not response.content:
            return None
        body = response.json()
        if isinstance(body, dict) and "success" in body:
            if not body["success"]:
                raise BackendError(body.get("message") or "Request failed", response.status_code)
            return body.get("data")
        return body

    # Transactions

    def list_transactions(self, **filters: Any) -> list[Transaction]:
        data = self._request("GET", "/transactions", params=filters or None)
        return [transaction_from_dict(d) for d in data or []]

    def create_transaction(self, transaction: Transaction) -> Transaction:
        data = self._request("POST", "/transactions", json=transaction_to_dict(transaction))
        return transaction_from_dict(data) if data else transaction

    def update_transaction(self, transaction: Transaction) -> Transaction:
        """PUT the full transaction; returns the backend's copy when it sends one."""
        data = self._request(
            "PUT",
            f"/transactions/{transaction.transaction_id}",
            json=transaction_to_dict(transaction),
        )
        logger.debug("Saved transaction %s (%s)", transaction.transaction_id, transaction.status.value)
        return transaction_from_dict(data) if isinstance(data, dict) and "id" in data else transaction

    def delete_transaction(self, transaction_id: str) -> None:
        self._request("DELETE", f"/transactions/{transaction_id}")

    # Reference data

    def list_projects(self) -> list[Project]:
        return [project_from_dict(d) for d in self._request("GET", "/projects") or []]

    def update_project(self, project: Project) -> Project:
        data = self._request("PUT", f"/projects/{project.project_id}", json=project_to_dict(project))
        return project_from_dict(data) if isinstance(data, dict) and "id" in data else project

    def list_partners(self) -> list[Partner]:
        return [partner_from_dict(d) for d in self._request("GET", "/partners") or []]

    def list_contracts(self, partner_id: str | None = None, project_id: str | None = None) -> list[Contract]:
        params: dict[str, Any] = {}
        if partner_id:
            params["partnerId"] = partner_id
        if project_id:
            params["projectId"] = project_id
        data = self._request("GET", "/contracts", params=params or None)
        return [contract_from_dict(d) for d in data or []]

    def get_contract(self, contract_id: str) -> Contract:
        return contract_from_dict(self._request("GET", f"/contracts/{contract_id}"))

    def list_accounts(self) -> list[CashAccount]:
        return [account_from_dict(d) for d in self._request("GET", "/cash-accounts") or []]

    # Cost plan

    def get_cost_plan(self) -> CostPlan:
        """The configured plan, or the standard norms when none is stored.

        A failed request also yields the standard norms.
        """
        try:
            data = self._request("GET", f"/{COST_PLAN_COLLECTION}")
        except (BackendError, httpx.HTTPError) as exc:
            logger.warning("Cost plan unavailable, using defaults: %s", exc)
            return default_cost_plan()
        if isinstance(data, list):
            data = data[0] if data else None
        if not data:
            logger.info("No cost plan configured; using defaults")
            return default_cost_plan()
        return cost_plan_from_dict(data)

    def save_cost_plan(self, plan: CostPlan) -> None:
        self._request("POST", f"/{COST_PLAN_COLLECTION}", json=cost_plan_to_dict(plan))

    def health(self) -> bool:
        """True if the backend answers ``/health``; never raises."""
        try:
            self._request("GET", "/health")
        except (BackendError, httpx.HTTPError) as exc:
            logger.warning("Backend health check failed: %s", exc)
            return False
        return True

    def close(self) -> None:
        self._client.close()
