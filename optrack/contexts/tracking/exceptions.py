"""Custom exceptions for the tracking context."""

from typing import Optional


class OpportunityNotFoundError(LookupError):
    """
    Exception raised when an update or delete names an unknown record id.

    Attributes:
        opportunity_id: The id that was not found
        user_id: Owner of the record list that was searched
    """

    def __init__(self, opportunity_id: str, user_id: Optional[str] = None):
        self.opportunity_id = opportunity_id
        self.user_id = user_id

        message = f"Opportunity not found: {opportunity_id}"
        if user_id:
            message += f" (user: {user_id})"

        super().__init__(message)


class NotSignedInError(RuntimeError):
    """Exception raised when a record or profile mutation has no signed-in user."""

    def __init__(self, action: str = "modify tracker data"):
        self.action = action
        super().__init__(f"Sign in to {action}")
