"""
Tests for the leaving certificate status state machine and the decision update.
"""

from datetime import UTC, datetime
from unittest.mock import MagicMock

import pytest

from app.modules.leaving_certificates.models import CertificateStatus
from app.modules.leaving_certificates.repository import (
    VALID_STATUS_TRANSITIONS,
    InvalidStatusTransitionError,
    is_valid_transition,
    mark_decided,
)


class TestStatusTransitions:
    def test_pending_can_be_decided(self):
        assert VALID_STATUS_TRANSITIONS[CertificateStatus.PENDING] == {
            CertificateStatus.APPROVED,
            CertificateStatus.REJECTED,
        }

    def test_decided_states_are_terminal(self):
        assert VALID_STATUS_TRANSITIONS[CertificateStatus.APPROVED] == set()
        assert VALID_STATUS_TRANSITIONS[CertificateStatus.REJECTED] == set()

    def test_all_statuses_are_in_transition_map(self):
        assert set(VALID_STATUS_TRANSITIONS) == set(CertificateStatus)

    def test_cannot_go_back_to_pending(self):
        assert not is_valid_transition(CertificateStatus.APPROVED, CertificateStatus.PENDING)
        assert not is_valid_transition(CertificateStatus.REJECTED, CertificateStatus.PENDING)

    def test_cannot_flip_decision(self):
        assert not is_valid_transition(CertificateStatus.APPROVED, CertificateStatus.REJECTED)
        assert not is_valid_transition(CertificateStatus.REJECTED, CertificateStatus.APPROVED)


class TestInvalidStatusTransitionError:
    def test_message_contains_both_statuses(self):
        error = InvalidStatusTransitionError(CertificateStatus.APPROVED, CertificateStatus.PENDING)

        assert "APPROVED" in str(error)
        assert "PENDING" in str(error)
        assert error.current_status == CertificateStatus.APPROVED
        assert error.new_status == CertificateStatus.PENDING


class TestMarkDecided:
    @pytest.mark.asyncio
    async def test_refuses_pending_target(self, mock_db):
        with pytest.raises(InvalidStatusTransitionError):
            await mark_decided(
                mock_db,
                1,
                CertificateStatus.PENDING,
                approved_by="principal",
                approved_at=datetime.now(UTC),
            )

        mock_db.execute.assert_not_called()

    @pytest.mark.asyncio
    @pytest.mark.parametrize("rowcount", [0, 1])
    async def test_reports_rowcount(self, mock_db, rowcount):
        mock_db.execute.return_value = MagicMock(rowcount=rowcount)

        updated = await mark_decided(
            mock_db,
            1,
            CertificateStatus.APPROVED,
            approved_by="principal",
            approved_at=datetime.now(UTC),
        )

        assert updated == rowcount
        mock_db.commit.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_update_is_conditional_on_pending(self, mock_db):
        mock_db.execute.return_value = MagicMock(rowcount=1)

        await mark_decided(
            mock_db,
            5,
            CertificateStatus.REJECTED,
            approved_by="principal",
            approved_at=datetime.now(UTC),
            rejection_reason="Fees pending",
            school_id=3,
        )

        statement = mock_db.execute.call_args.args[0]
        where = str(statement.whereclause)
        assert "leaving_certificates.id" in where
        assert "leaving_certificates.status" in where
        assert "leaving_certificates.school_id" in where
