"""Tests for the access policy."""
import pytest

from hr_workflow.errors import AccessDeniedError
from hr_workflow.services.access_policy import (
    authorize_transition,
    ensure_can_read,
    ensure_owner,
    require_manager,
)
from hr_workflow.services.workflow import Actor


class TestRequireManager:
    """Tests for manager-only operations."""

    def test_manager_allowed(self, manager):
        """Test managers pass."""
        require_manager(manager)

    def test_employee_denied(self, employee):
        """Test employees are denied."""
        with pytest.raises(AccessDeniedError, match="Insufficient permissions"):
            require_manager(employee)


class TestEnsureCanRead:
    """Tests for single-record reads."""

    def test_employee_reads_own(self, employee):
        """Test employees read their own records."""
        ensure_can_read(employee, employee.id)

    def test_employee_cannot_read_others(self, employee, other_employee):
        """Test employees cannot read someone else's record."""
        with pytest.raises(AccessDeniedError):
            ensure_can_read(employee, other_employee.id)

    def test_manager_reads_anything(self, manager, employee):
        """Test managers read across employees."""
        ensure_can_read(manager, employee.id)


class TestOwnership:
    """Tests for owner-only transitions."""

    def test_owner_allowed(self, employee):
        """Test owners pass."""
        ensure_owner(employee, employee.id)

    def test_manager_is_not_owner(self, manager, employee):
        """Test being a manager does not grant ownership."""
        with pytest.raises(AccessDeniedError):
            ensure_owner(manager, employee.id)

    def test_authorize_owner_transition(self, employee, other_employee):
        """Test owner transitions check ownership."""
        authorize_transition(employee, Actor.OWNER, employee.id)

        with pytest.raises(AccessDeniedError):
            authorize_transition(other_employee, Actor.OWNER, employee.id)

    def test_authorize_manager_transition(self, manager, employee):
        """Test manager transitions check the role."""
        authorize_transition(manager, Actor.MANAGER, employee.id)

        with pytest.raises(AccessDeniedError):
            authorize_transition(employee, Actor.MANAGER, employee.id)
