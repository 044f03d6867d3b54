"""Unit tests for the five-stage proposal workflow."""

import pytest
from unittest.mock import AsyncMock

from app.exceptions import ClaudeClientError, InputValidationError, WorkflowError
from app.layers.layer3_workflow import ProposalWorkflow
from app.models import STATE_FIELDS, WorkflowStatus

REQUIREMENTS = "Build a mobile app for patient scheduling with HIPAA compliance"

STAGE_MARKERS = [
    "[STAGE:outline]",
    "[STAGE:generate]",
    "[STAGE:review]",
    "[STAGE:finalize]",
]


class TestWorkflowRun:
    async def test_populates_every_field(self, stage_marker_llm):
        state = await ProposalWorkflow(stage_marker_llm).run(REQUIREMENTS)

        for field_name in STATE_FIELDS:
            assert state.is_populated(field_name)
        assert state.final_proposal != state.full_proposal
        assert state.status == WorkflowStatus.FINALIZED

    async def test_stages_run_in_order(self, stage_marker_llm):
        await ProposalWorkflow(stage_marker_llm).run(REQUIREMENTS)

        assert stage_marker_llm.calls == ["analyze", "outline", "generate", "review", "finalize"]

    async def test_final_proposal_carries_every_stage_in_order(self, stage_marker_llm):
        """각 단계는 이전 단계 출력 전체를 입력으로 받으므로 표시가 순서대로 처음 등장해야 한다."""
        state = await ProposalWorkflow(stage_marker_llm).run(REQUIREMENTS)

        positions = [state.final_proposal.find(marker) for marker in STAGE_MARKERS]
        assert all(position != -1 for position in positions)
        assert positions == sorted(positions)
        assert REQUIREMENTS in state.final_proposal

    async def test_empty_requirements_rejected(self, stage_marker_llm):
        with pytest.raises(InputValidationError):
            await ProposalWorkflow(stage_marker_llm).run("   \n ")

        assert stage_marker_llm.calls == []


class TestWorkflowFailure:
    async def test_failure_names_stage_and_stops(self, mock_claude_client):
        cause = ClaudeClientError("Claude request failed after 3 attempts: timeout")
        mock_claude_client.complete.side_effect = [
            '{"project_overview": "Scheduling app"}',
            "OUTLINE",
            cause,
        ]

        with pytest.raises(WorkflowError) as exc_info:
            await ProposalWorkflow(mock_claude_client).run(REQUIREMENTS)

        assert exc_info.value.stage == "generate"
        assert exc_info.value.__cause__ is cause
        assert "generate" in exc_info.value.message
        assert mock_claude_client.complete.await_count == 3

    async def test_progress_events(self, mock_claude_client):
        mock_claude_client.complete.return_value = "stage output"
        on_progress = AsyncMock()

        await ProposalWorkflow(mock_claude_client).run(REQUIREMENTS, on_progress=on_progress)

        events = [call.args[0] for call in on_progress.await_args_list]
        assert len(events) == 10
        assert events[0].event_type == "stage_start"
        assert events[0].stage == "analyze"
        assert events[-1].event_type == "stage_complete"
        assert events[-1].stage == "finalize"
        assert events[-1].progress_percent == 100

    async def test_error_event_emitted(self, mock_claude_client):
        mock_claude_client.complete.side_effect = RuntimeError("boom")
        on_progress = AsyncMock()

        with pytest.raises(WorkflowError) as exc_info:
            await ProposalWorkflow(mock_claude_client).run(REQUIREMENTS, on_progress=on_progress)

        assert exc_info.value.stage == "analyze"
        assert exc_info.value.details == {"error_type": "RuntimeError"}
        last_event = on_progress.await_args_list[-1].args[0]
        assert last_event.event_type == "error"
        assert last_event.stage == "analyze"
