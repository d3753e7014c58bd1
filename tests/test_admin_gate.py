"""Unit tests for auth/admin.py -- the three-way admin decision."""

import pytest

from auth.admin import AdminDecision, AdminGate


class TestConfiguredGate:
    gate = AdminGate("correct-horse-battery-staple")

    def test_correct_token_allowed(self):
        assert self.gate.authorize("correct-horse-battery-staple") is AdminDecision.allowed

    @pytest.mark.parametrize("presented", [None, "", "wrong", "correct-horse-battery-stapl", "correct-horse-battery-staple "])
    def test_anything_else_denied(self, presented):
        assert self.gate.authorize(presented) is AdminDecision.denied

    def test_reports_configured(self):
        assert self.gate.configured is True


class TestUnconfiguredGate:
    @pytest.mark.parametrize("admin_token", [None, ""])
    @pytest.mark.parametrize("presented", [None, "", "anything"])
    def test_always_misconfigured(self, admin_token, presented):
        gate = AdminGate(admin_token)
        assert gate.configured is False
        assert gate.authorize(presented) is AdminDecision.misconfigured
