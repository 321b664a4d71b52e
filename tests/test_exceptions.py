"""Tests for custom exception hierarchy."""

from buildledger.exceptions import (
    BackendError,
    BuildLedgerError,
    ConfigurationError,
    EntityNotFoundError,
    InvalidEntityStateError,
    InvalidStateError,
    PermissionDeniedError,
    ReferentialIntegrityError,
    SinkError,
    ValidationError,
)


class TestExceptionHierarchy:
    """Test exception inheritance chain."""

    def test_build_ledger_error_is_exception(self) -> None:
        assert isinstance(BuildLedgerError("test"), Exception)

    def test_entity_not_found_is_build_ledger_error(self) -> None:
        assert isinstance(EntityNotFoundError("test"), BuildLedgerError)

    def test_referential_integrity_is_entity_not_found(self) -> None:
        err = ReferentialIntegrityError("test")
        assert isinstance(err, EntityNotFoundError)
        assert isinstance(err, BuildLedgerError)

    def test_invalid_state_is_invalid_entity_state(self) -> None:
        err = InvalidStateError("test")
        assert isinstance(err, InvalidEntityStateError)
        assert isinstance(err, BuildLedgerError)

    def test_workflow_errors_are_distinct(self) -> None:
        assert not isinstance(PermissionDeniedError("x"), ValidationError)
        assert not isinstance(ValidationError("x"), InvalidStateError)
        assert not isinstance(InvalidStateError("x"), PermissionDeniedError)

    def test_configuration_and_sink_errors(self) -> None:
        assert isinstance(ConfigurationError("test"), BuildLedgerError)
        assert isinstance(SinkError("test"), BuildLedgerError)

    def test_backend_error_keeps_status_code(self) -> None:
        err = BackendError("Backend server error 503", 503)
        assert isinstance(err, BuildLedgerError)
        assert err.status_code == 503
        assert BackendError("offline").status_code is None

    def test_exception_message(self) -> None:
        err = ReferentialIntegrityError("Cash account acc-001 not found")
        assert str(err) == "Cash account acc-001 not found"
