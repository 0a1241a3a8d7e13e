"""Tests for the notification channel."""

from tourdesk.services.notifications import NotificationChannel, Severity


class TestNotificationChannel:
    """Tests for NotificationChannel."""

    def test_post_records_and_emits(self, qtbot):
        channel = NotificationChannel()
        with qtbot.waitSignal(channel.posted) as blocker:
            channel.success("Deleted!", "Message has been removed.")
        notification = blocker.args[0]
        assert notification.severity == Severity.SUCCESS
        assert notification.title == "Deleted!"
        assert channel.last is notification

    def test_error_helper(self, qtbot):
        channel = NotificationChannel()
        channel.error("Error!", "Failed to delete message.")
        assert channel.last.severity == Severity.ERROR

    def test_history_is_bounded(self, qtbot):
        channel = NotificationChannel(max_history=3)
        for i in range(5):
            channel.info("Note", str(i))
        assert [n.text for n in channel.history] == ["2", "3", "4"]

    def test_history_is_a_copy(self, qtbot):
        channel = NotificationChannel()
        channel.info("Note", "x")
        channel.history.clear()
        assert len(channel.history) == 1

    def test_empty_channel(self, qtbot):
        assert NotificationChannel().last is None
