"""Tests for the concrete admin screens."""

import pytest

from tourdesk.domain.models import AgencyStatus, Category, MessageStatus, ReportStatus
from tourdesk.services.gate import GateState
from tourdesk.services.notifications import Severity
from tourdesk.state.screens import (
    AgenciesController,
    CategoriesController,
    MessagesController,
    ReportsController,
    TouristsController,
)


class TestMessages:
    """Tests for MessagesController."""

    @pytest.fixture
    async def messages(self, qapp, make_message_gateway, sample_messages, notifier, confirm_yes):
        controller = MessagesController(make_message_gateway(sample_messages), notifier, confirm_yes)
        await controller.load()
        return controller

    @pytest.mark.asyncio
    async def test_unread_count(self, messages):
        assert messages.unread_count == 1

    @pytest.mark.asyncio
    async def test_view_details_marks_read(self, messages):
        counts = []
        messages.unread.changed.connect(counts.append)

        message = await messages.view_details(1)

        assert message.status == MessageStatus.READ
        assert messages.unread_count == 0
        assert counts == [0]

    @pytest.mark.asyncio
    async def test_view_read_message_sends_nothing(self, messages):
        message = await messages.view_details(2)
        assert message.name == "Anna"
        assert "mark_read" not in messages.store.gateway.operations()

    @pytest.mark.asyncio
    async def test_view_details_survives_mark_read_failure(self, messages, caplog):
        messages.store.gateway.fail_on.add("mark_read")

        message = await messages.view_details(1)

        assert message.name == "John"
        assert message.status == MessageStatus.UNREAD
        assert messages.unread_count == 1
        assert "Could not mark message" in caplog.text

    @pytest.mark.asyncio
    async def test_view_unknown_message(self, messages):
        assert await messages.view_details(99) is None

    @pytest.mark.asyncio
    async def test_view_during_pending_delete_leaves_unread(self, qapp, make_message_gateway, sample_messages,
                                                            notifier):
        controller = None
        viewed = []

        async def confirmer(prompt):
            viewed.append(await controller.view_details(1))
            return False

        controller = MessagesController(make_message_gateway(sample_messages), notifier, confirmer)
        await controller.load()
        await controller.delete(1)

        assert viewed[0].name == "John"
        assert viewed[0].status == MessageStatus.UNREAD
        assert "mark_read" not in controller.store.gateway.operations()
        assert controller.unread_count == 1

    @pytest.mark.asyncio
    async def test_deleting_unread_updates_count(self, messages):
        await messages.delete(1)
        assert messages.unread_count == 0

    @pytest.mark.asyncio
    async def test_messages_have_no_status_action(self, messages, notifier):
        assert await messages.change_status(1, "read") is None
        assert notifier.last.severity == Severity.ERROR


class TestReports:
    """Tests for ReportsController."""

    @pytest.fixture
    async def reports(self, qapp, make_gateway, make_report, notifier, confirm_yes):
        data = [make_report(i) for i in range(5, 9)] + [make_report(9, status=ReportStatus.REVIEWED)]
        controller = ReportsController(make_gateway(data), notifier, confirm_yes)
        await controller.load()
        return controller

    @pytest.mark.asyncio
    async def test_mark_reviewed_updates_tallies(self, reports, notifier, confirm_yes):
        tallies = []
        reports.tallies.changed.connect(tallies.append)

        gate = await reports.mark_reviewed(7)

        assert gate.state == GateState.SUCCEEDED
        assert reports.tally[ReportStatus.PENDING] == 3
        assert reports.tally[ReportStatus.REVIEWED] == 2
        assert tallies[-1][ReportStatus.REVIEWED] == 2
        assert confirm_yes.prompts[0].text == "Are you sure you want to mark report #7 as reviewed?"
        assert notifier.last.title == "Updated!"

    @pytest.mark.asyncio
    async def test_reopen_ignored_report(self, reports):
        await reports.mark_ignored(6)
        await reports.mark_pending(6)
        assert reports.store.get(6).status == ReportStatus.PENDING

    @pytest.mark.asyncio
    async def test_same_status_is_rejected_without_request(self, reports, notifier, confirm_yes):
        assert await reports.mark_reviewed(9) is None
        assert confirm_yes.prompts == []
        assert "change_status" not in reports.store.gateway.operations()
        assert notifier.last.severity == Severity.INFO

    @pytest.mark.asyncio
    async def test_status_failure_notifies(self, reports, notifier):
        reports.store.gateway.fail_on.add("change_status")

        gate = await reports.mark_ignored(5)

        assert gate.state == GateState.FAILED
        assert reports.store.get(5).status == ReportStatus.PENDING
        assert notifier.last.text.startswith("Failed to update report status to ignored.")

    @pytest.mark.asyncio
    async def test_refresh_picks_up_new_reports(self, reports, make_report):
        reports.store.gateway.entities[10] = make_report(10)
        assert await reports.refresh()
        assert reports.store.count == 6
        assert reports.tally[ReportStatus.PENDING] == 5


class TestAgencies:
    """Tests for AgenciesController."""

    @pytest.fixture
    async def agencies(self, qapp, make_gateway, make_agency, notifier, confirm_yes):
        controller = AgenciesController(make_gateway([make_agency(1), make_agency(2)]), notifier, confirm_yes)
        await controller.load()
        return controller

    @pytest.mark.asyncio
    async def test_approve(self, agencies, notifier):
        await agencies.approve(1)
        assert agencies.store.get(1).status == AgencyStatus.APPROVED
        assert agencies.store.gateway.calls[-1] == ("change_status", 1, "approved")
        assert notifier.last.text == "Agency 1 has been approved successfully."
        assert agencies.tally[AgencyStatus.PENDING] == 1

    @pytest.mark.asyncio
    async def test_reject(self, agencies):
        await agencies.reject(2)
        assert agencies.store.get(2).status == AgencyStatus.REJECTED

    @pytest.mark.asyncio
    async def test_delete_wording(self, agencies, confirm_yes, notifier):
        await agencies.delete(2)
        assert confirm_yes.prompts[0].text == "Are you sure you want to delete Agency 2? This action cannot be undone."
        assert notifier.last.text == "The agency and associated user have been deleted."

    @pytest.mark.asyncio
    async def test_edit_merges_phone(self, agencies):
        updated = await agencies.save({"name": "", "email": "new@example.com", "phone_number": "555"}, id=1)
        assert updated.email == "new@example.com"
        assert updated.phone == "555"
        assert updated.name == "Agency 1"

    @pytest.mark.asyncio
    async def test_agreement_url(self, qapp, make_gateway, make_agency, notifier, confirm_yes):
        data = [
            make_agency(1, agreement_file="agreements/sun.pdf"),
            make_agency(2),
            make_agency(3, agreement_file="https://cdn.example.com/a.pdf"),
        ]
        controller = AgenciesController(make_gateway(data), notifier, confirm_yes,
                                        storage_url="https://api.example.com/storage/")
        await controller.load()

        assert controller.agreement_url(1) == "https://api.example.com/storage/agreements/sun.pdf"
        assert controller.agreement_url(2) is None
        assert controller.agreement_url(3) == "https://cdn.example.com/a.pdf"
        assert controller.agreement_url(99) is None


class TestOtherScreens:
    """Tourists and categories."""

    @pytest.mark.asyncio
    async def test_tourists_search_by_phone(self, qapp, make_gateway, make_tourist, notifier, confirm_yes):
        tourists = [make_tourist(1, phone_number="+20 100"), make_tourist(2, phone_number="+44 200")]
        controller = TouristsController(make_gateway(tourists), notifier, confirm_yes)
        await controller.load()
        controller.set_query("+44")
        assert [t.id for t in controller.page.rows] == [2]

    @pytest.mark.asyncio
    async def test_categories_edit(self, qapp, make_gateway, notifier, confirm_yes):
        controller = CategoriesController(make_gateway([Category(id=1, name="Hiking")]), notifier, confirm_yes)
        await controller.load()

        await controller.save({"name": "Trekking", "comment": "Long walks"}, id=1)

        assert controller.store.get(1) == Category(id=1, name="Trekking", comment="Long walks")
        assert notifier.last.text == "Trekking has been updated successfully."

    @pytest.mark.asyncio
    async def test_store_is_owned_by_controller(self, qapp, make_gateway, notifier, confirm_yes):
        controller = CategoriesController(make_gateway(), notifier, confirm_yes)
        assert controller.store.parent() is controller
