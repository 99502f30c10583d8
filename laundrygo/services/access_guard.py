# laundrygo/services/access_guard.py
from ..errors import Forbidden, Unauthorized
from ..model import BranchAssignment, User

BRANCH_ROLES = ("employee", "owner")


class AccessGuard:
    """Checks that a caller is actively assigned to a branch."""

    def __init__(self, session):
        self.session = session

    def resolve(self, user_id) -> User:
        try:
            uid = int(user_id)
        except (TypeError, ValueError):
            raise Unauthorized("Not authenticated")
        user = self.session.get(User, uid)
        if not user:
            raise Unauthorized("Not authenticated")
        return user

    def is_assigned(self, user: User, branch_id) -> bool:
        try:
            bid = int(branch_id)
        except (TypeError, ValueError):
            return False
        row = (
            self.session.query(BranchAssignment.id)
            .filter(
                BranchAssignment.user_id == user.id,
                BranchAssignment.branch_id == bid,
                BranchAssignment.role_in_shop.in_(BRANCH_ROLES),
                BranchAssignment.is_active.is_(True),
            )
            .first()
        )
        return row is not None

    def authorize(self, user: User, branch_id) -> None:
        if not self.is_assigned(user, branch_id):
            raise Forbidden("Not assigned to this branch")
