"""
Tests for SoftDeleteMixin in core/model_mixins.py.

This module tests:
- soft_delete() method sets is_deleted and deleted_at
- restore() method clears is_deleted and deleted_at
- Idempotency of soft_delete and restore
"""

from datetime import timedelta

from django.utils import timezone

from finance.ledger.models import Account
from finance.models import Document


class TestSoftDelete:
    def test_sets_flag_and_timestamp(self, make_document, funded_account):
        document = make_document(funded_account)
        before = timezone.now()

        document.soft_delete()

        document.refresh_from_db()
        assert document.is_deleted is True
        assert before <= document.deleted_at <= timezone.now() + timedelta(seconds=1)

    def test_hidden_from_default_manager(self, make_document, funded_account):
        document = make_document(funded_account)

        document.soft_delete()

        assert not Document.objects.filter(pk=document.pk).exists()
        assert Document.all_objects.filter(pk=document.pk).exists()

    def test_is_idempotent(self, make_document, funded_account):
        document = make_document(funded_account)
        document.soft_delete()
        first = document.deleted_at
        version = document.version

        document.soft_delete()

        assert document.deleted_at == first
        assert document.version == version

    def test_only_touches_deletion_fields(self, make_document, funded_account):
        document = make_document(funded_account)
        document.notes = "unsaved edit"

        document.soft_delete()

        assert Document.all_objects.get(pk=document.pk).notes == ""


class TestRestore:
    def test_clears_flag_and_timestamp(self, funded_account):
        funded_account.soft_delete()

        funded_account.restore()

        funded_account.refresh_from_db()
        assert funded_account.is_deleted is False
        assert funded_account.deleted_at is None
        assert Account.objects.filter(pk=funded_account.pk).exists()

    def test_restore_live_record_is_a_no_op(self, funded_account):
        version = funded_account.version

        funded_account.restore()

        assert funded_account.version == version
