class BoardException(Exception):
    """Base exception for the boards domain."""
    status_code = 400

    def __init__(self, detail: str):
        super().__init__(detail)
        self.detail = detail

class ListingNotFoundException(BoardException):
    """Raised when a group, share item, need or prayer is not found."""
    status_code = 404

class UserNotFoundException(BoardException):
    """Raised when a profile user is not found."""
    status_code = 404

class MembershipNotFoundException(BoardException):
    """Raised when leaving a group or dropping a claim that does not exist."""
    status_code = 404

class BusinessRuleViolation(BoardException):
    """Raised when an action breaks a board rule, e.g. a full group."""
    status_code = 400

class UnknownActionException(BoardException):
    """Raised when a form posts an _action the board does not handle."""
    status_code = 400

class PermissionDeniedException(BoardException):
    """Raised when a user lacks permission to perform an action."""
    status_code = 403
