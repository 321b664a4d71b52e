"""REST backend access and persisted lifecycle workflow."""

from buildledger.client.rest import BackendClient
from buildledger.client.workflow import ConsistencyMode, TransactionWorkflow, WorkflowResult

__all__ = ["BackendClient", "ConsistencyMode", "TransactionWorkflow", "WorkflowResult"]
