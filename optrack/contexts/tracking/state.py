"""
Application state for the tracker and the pure functions that update it.

TrackerState is immutable. Every update function takes a state and returns a
new one with eligibility assessments recomputed, so derived views never drift
from the records and profile they were computed from.

TrackerSession binds a state to TrackerStorage and persists after each update.
It is the only code path that writes to the store.

Usage:
    session = TrackerSession.open(storage)
    session.sign_in(UserIdentity(id="google-42", name="Ada"))
    session.add(Opportunity.create(title="Summer Research Internship"))
"""

import dataclasses
from dataclasses import dataclass, field
from typing import Optional, Tuple

from optrack.contexts.targeting.eligibility import assess_all
from optrack.contexts.tracking.exceptions import NotSignedInError, OpportunityNotFoundError
from optrack.contexts.tracking.logger import _log_info, _log_success
from optrack.contexts.tracking.opportunity import Opportunity, Profile, UserIdentity
from optrack.contexts.tracking.storage import TrackerStorage


@dataclass(frozen=True)
class TrackerState:
    """Signed-in user, their records (newest first), and their profile."""

    user: Optional[UserIdentity] = None
    opportunities: Tuple[Opportunity, ...] = field(default_factory=tuple)
    profile: Profile = field(default_factory=Profile)

    @property
    def signed_in(self) -> bool:
        return self.user is not None

    def find(self, opportunity_id: str) -> Optional[Opportunity]:
        for opportunity in self.opportunities:
            if opportunity.id == opportunity_id:
                return opportunity
        return None


def _require_user(state: TrackerState, action: str) -> UserIdentity:
    if state.user is None:
        raise NotSignedInError(action)
    return state.user


def refresh_assessments(state: TrackerState) -> TrackerState:
    """Recompute every record's eligibility assessment against the current profile."""
    return dataclasses.replace(
        state, opportunities=tuple(assess_all(state.opportunities, state.profile))
    )


def sign_in(
    state: TrackerState, user: UserIdentity, opportunities=(), profile: Optional[Profile] = None
) -> TrackerState:
    """Switch to a user, replacing in-memory data with theirs."""
    new_state = TrackerState(
        user=user, opportunities=tuple(opportunities), profile=profile or Profile()
    )
    return refresh_assessments(new_state)


def sign_out(state: TrackerState) -> TrackerState:
    return TrackerState()


def add_opportunity(state: TrackerState, opportunity: Opportunity) -> TrackerState:
    """
    Prepend a new record (newest first).

    Raises:
        NotSignedInError: If no user is signed in
        ValueError: If the title is empty or the id is already in use
    """
    _require_user(state, "save opportunities")
    if not opportunity.title:
        raise ValueError("Opportunity title is required")
    if state.find(opportunity.id) is not None:
        raise ValueError(f"Opportunity id already exists: {opportunity.id}")

    new_state = dataclasses.replace(state, opportunities=(opportunity,) + state.opportunities)
    return refresh_assessments(new_state)


def update_opportunity(state: TrackerState, opportunity_id: str, **changes) -> TrackerState:
    """
    Edit one record in place (position and id preserved).

    Raises:
        NotSignedInError: If no user is signed in
        OpportunityNotFoundError: If no record has this id
        ValueError: If the edit blanks the title or names unknown fields
    """
    user = _require_user(state, "edit opportunities")
    current = state.find(opportunity_id)
    if current is None:
        raise OpportunityNotFoundError(opportunity_id, user.id)

    updated = current.with_updates(**changes)
    if not updated.title:
        raise ValueError("Opportunity title is required")

    opportunities = tuple(
        updated if opportunity.id == opportunity_id else opportunity
        for opportunity in state.opportunities
    )
    return refresh_assessments(dataclasses.replace(state, opportunities=opportunities))


def delete_opportunity(state: TrackerState, opportunity_id: str) -> TrackerState:
    user = _require_user(state, "delete opportunities")
    if state.find(opportunity_id) is None:
        raise OpportunityNotFoundError(opportunity_id, user.id)

    opportunities = tuple(o for o in state.opportunities if o.id != opportunity_id)
    return dataclasses.replace(state, opportunities=opportunities)


def clear_opportunities(state: TrackerState) -> TrackerState:
    _require_user(state, "clear opportunities")
    return dataclasses.replace(state, opportunities=())


def save_profile(state: TrackerState, profile: Profile) -> TrackerState:
    """Replace the profile (stamped with lastUpdated) and rescore every record."""
    _require_user(state, "save a profile")
    new_state = dataclasses.replace(state, profile=profile.touch())
    return refresh_assessments(new_state)


class TrackerSession:
    """
    Stateful wrapper that applies updates and persists them.

    Each mutation is read-modify-write: compute the new state, write the full
    list (or profile) to storage, then adopt the new state.
    """

    def __init__(self, storage: TrackerStorage, state: Optional[TrackerState] = None):
        self.storage = storage
        self.state = state or TrackerState()

    @classmethod
    def open(cls, storage: TrackerStorage) -> "TrackerSession":
        """Restore the previously signed-in user (if any) and their data."""
        session = cls(storage)
        user = storage.load_current_user()
        if user is not None:
            session.state = sign_in(
                TrackerState(),
                user,
                storage.load_opportunities(user.id),
                storage.load_profile(user.id),
            )
        return session

    @property
    def opportunities(self) -> Tuple[Opportunity, ...]:
        return self.state.opportunities

    @property
    def profile(self) -> Profile:
        return self.state.profile

    def sign_in(self, user: UserIdentity) -> TrackerState:
        self.storage.save_current_user(user)
        self.state = sign_in(
            self.state,
            user,
            self.storage.load_opportunities(user.id),
            self.storage.load_profile(user.id),
        )
        _log_info(f"Signed in as {user.name or user.id} ({len(self.state.opportunities)} record(s))")
        return self.state

    def sign_out(self) -> TrackerState:
        self.storage.clear_current_user()
        self.state = sign_out(self.state)
        return self.state

    def add(self, opportunity: Opportunity) -> Opportunity:
        new_state = add_opportunity(self.state, opportunity)
        self._persist_opportunities(new_state)
        _log_success(f"Added opportunity: {opportunity.title}")
        return new_state.opportunities[0]

    def update(self, opportunity_id: str, **changes) -> Opportunity:
        new_state = update_opportunity(self.state, opportunity_id, **changes)
        self._persist_opportunities(new_state)
        return new_state.find(opportunity_id)

    def delete(self, opportunity_id: str) -> None:
        new_state = delete_opportunity(self.state, opportunity_id)
        self._persist_opportunities(new_state)
        _log_info(f"Deleted opportunity {opportunity_id}")

    def clear(self) -> int:
        """Remove every record for the signed-in user. Returns how many were removed."""
        removed = len(self.state.opportunities)
        new_state = clear_opportunities(self.state)
        self._persist_opportunities(new_state)
        _log_info(f"Cleared {removed} opportunity record(s)")
        return removed

    def save_profile(self, profile: Profile) -> Profile:
        new_state = save_profile(self.state, profile)
        self.storage.save_profile(new_state.user.id, new_state.profile)
        self.state = new_state
        return new_state.profile

    def _persist_opportunities(self, new_state: TrackerState) -> None:
        self.storage.save_opportunities(new_state.user.id, new_state.opportunities)
        self.state = new_state
