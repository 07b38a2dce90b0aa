"""Access policy - role and ownership decisions."""
import logging

from hr_workflow.errors import AccessDeniedError
from hr_workflow.models.user import Principal
from hr_workflow.services.workflow import Actor

logger = logging.getLogger(__name__)


def require_manager(principal: Principal) -> None:
    """
    Allow only managers through.

    Raises:
        AccessDeniedError: If the principal is not a manager
    """
    if not principal.is_manager:
        logger.warning("Principal %s (%s) denied manager-only operation", principal.id, principal.role.value)
        raise AccessDeniedError("Access denied. Insufficient permissions.")


def ensure_owner(principal: Principal, owner_id: str) -> None:
    """
    Allow only the owner of a record, whatever their role.

    Raises:
        AccessDeniedError: If the record belongs to someone else
    """
    if owner_id != principal.id:
        logger.warning("Principal %s denied access to record owned by %s", principal.id, owner_id)
        raise AccessDeniedError("Access denied")


def ensure_can_read(principal: Principal, owner_id: str) -> None:
    """Managers read everything; employees read only their own records."""
    if principal.is_manager:
        return
    ensure_owner(principal, owner_id)


def authorize_transition(principal: Principal, actor: Actor, owner_id: str) -> None:
    """
    Check that the principal may fire a transition requiring ``actor``.

    Raises:
        AccessDeniedError: If the principal is not the required actor
    """
    if actor is Actor.MANAGER:
        require_manager(principal)
    else:
        ensure_owner(principal, owner_id)
