"""Tests for ServiceResult and BaseService."""

import logging

import pytest

from core.exceptions import ConflictError, ValidationError
from core.services import BaseService, ServiceResult
from finance.models import Company


class TestServiceResult:
    def test_success(self):
        result = ServiceResult.success({"id": 1})

        assert result.success is True
        assert bool(result) is True
        assert result.data == {"id": 1}
        assert result.error is None

    def test_failure(self):
        result = ServiceResult.failure(
            "Invalid input",
            error_code="VALIDATION_ERROR",
            errors={"amount": ["Must be positive"]},
        )

        assert not result
        assert result.error == "Invalid input"
        assert result.error_code == "VALIDATION_ERROR"
        assert result.errors == {"amount": ["Must be positive"]}

    def test_from_application_error_keeps_code_and_details(self):
        exc = ConflictError(
            "Account was modified",
            error_code="CONCURRENT_MODIFICATION",
            details={"expected_version": 3},
        )

        result = ServiceResult.from_exception(exc)

        assert result.error == "Account was modified"
        assert result.error_code == "CONCURRENT_MODIFICATION"
        assert result.details == {"expected_version": 3}

    def test_from_plain_exception_uses_class_name(self):
        result = ServiceResult.from_exception(KeyError("missing"))

        assert result.error_code == "KEYERROR"
        assert result.details is None

    def test_failure_is_falsy(self):
        assert not ServiceResult.failure("Nope", error_code="NOPE")


class ExampleService(BaseService):
    pass


class TestBaseService:
    def test_logger_named_after_service(self):
        assert ExampleService.get_logger().name == f"{__name__}.ExampleService"

    def test_handle_exception_logs_and_converts(self, caplog):
        exc = ValidationError("Bad amount", details={"amount": "-1"})

        with caplog.at_level(logging.WARNING, logger=f"{__name__}.ExampleService"):
            result = ExampleService.handle_exception(
                exc, context="Creating document", log_level=logging.WARNING
            )

        assert result.error_code == "VALIDATION_ERROR"
        assert "Creating document: [VALIDATION_ERROR] Bad amount" in caplog.text

    def test_handle_exception_adds_context_to_record(self, caplog):
        exc = ConflictError("Account was modified", error_code="CONCURRENT_MODIFICATION")

        with caplog.at_level(logging.ERROR, logger=f"{__name__}.ExampleService"):
            ExampleService.handle_exception(exc, extra={"document_id": "abc"})

        record = caplog.records[-1]
        assert record.document_id == "abc"
        assert record.error_code == "CONCURRENT_MODIFICATION"

    @pytest.mark.django_db
    def test_atomic_rolls_back_on_error(self, company):
        with pytest.raises(RuntimeError), ExampleService.atomic():
            Company.objects.filter(pk=company.pk).update(name="Changed")
            raise RuntimeError("boom")

        company.refresh_from_db()
        assert company.name != "Changed"
