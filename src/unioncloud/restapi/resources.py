"""Per-resource methods of the UnionCloud API.

One thin method per catalog entry. Defaults here mirror the defaults in
:data:`~.catalog.ENDPOINTS`.
"""

import abc
from typing import Any

from .response import ApiResponse

Id = int | str


class ResourceMethods(abc.ABC):
    """Mixin providing the resource endpoints on top of ``call``."""

    @abc.abstractmethod
    def call(self, operation: str, **arguments: Any) -> ApiResponse:
        """Execute the named catalog operation with the given arguments."""

    # Uploads

    def upload_student(self, data: Any) -> ApiResponse:
        return self.call("upload_student", data=data)

    def upload_guest(self, data: Any) -> ApiResponse:
        return self.call("upload_guest", data=data)

    def upload_programme(self, data: Any) -> ApiResponse:
        return self.call("upload_programme", data=data)

    # Users

    def users(self, mode: str = "standard", page: int = 1) -> ApiResponse:
        return self.call("users", mode=mode, page=page)

    def user_search(
        self, filters: Any, mode: str = "standard", page: int = 1
    ) -> ApiResponse:
        return self.call("user_search", filters=filters, mode=mode, page=page)

    def user_get(self, uid: Id, mode: str = "standard") -> ApiResponse:
        return self.call("user_get", uid=uid, mode=mode)

    def user_get_group_memberships(
        self, uid: Id, mode: str = "standard", page: int = 1
    ) -> ApiResponse:
        return self.call("user_get_group_memberships", uid=uid, mode=mode, page=page)

    def user_update(self, uid: Id, data: Any) -> ApiResponse:
        return self.call("user_update", uid=uid, data=data)

    def user_delete(self, uid: Id) -> ApiResponse:
        return self.call("user_delete", uid=uid)

    # User groups

    def usergroups(self, mode: str = "standard", page: int = 1) -> ApiResponse:
        return self.call("usergroups", mode=mode, page=page)

    def usergroup_search(
        self, filters: Any, mode: str = "standard", page: int = 1
    ) -> ApiResponse:
        return self.call("usergroup_search", filters=filters, mode=mode, page=page)

    def usergroup_create(
        self, name: str, description: str, folder_id: Id | None = None
    ) -> ApiResponse:
        return self.call(
            "usergroup_create", name=name, description=description, folder_id=folder_id
        )

    def usergroup_get(self, ug_id: Id, mode: str = "standard") -> ApiResponse:
        return self.call("usergroup_get", ug_id=ug_id, mode=mode)

    def usergroup_get_members(
        self, ug_id: Id, mode: str = "standard", page: int = 1
    ) -> ApiResponse:
        return self.call("usergroup_get_members", ug_id=ug_id, mode=mode, page=page)

    def usergroup_update(self, ug_id: Id, data: Any) -> ApiResponse:
        return self.call("usergroup_update", ug_id=ug_id, data=data)

    def usergroup_delete(self, ug_id: Id) -> ApiResponse:
        return self.call("usergroup_delete", ug_id=ug_id)

    def usergroup_folderstructure(self) -> ApiResponse:
        return self.call("usergroup_folderstructure")

    # User group memberships

    def usergroup_membership_create(
        self, uid: Id, ug_id: Id, expire_date: str
    ) -> ApiResponse:
        return self.call(
            "usergroup_membership_create", uid=uid, ug_id=ug_id, expire_date=expire_date
        )

    def usergroup_membership_create_multiple(self, data: list[Any]) -> ApiResponse:
        return self.call("usergroup_membership_create_multiple", data=data)

    def usergroup_membership_update(self, ugm_id: Id, expire_date: str) -> ApiResponse:
        return self.call(
            "usergroup_membership_update", ugm_id=ugm_id, expire_date=expire_date
        )

    def usergroup_membership_delete(self, ugm_id: Id) -> ApiResponse:
        return self.call("usergroup_membership_delete", ugm_id=ugm_id)

    def usergroup_membership_delete_multiple(self, data: list[Any]) -> ApiResponse:
        return self.call("usergroup_membership_delete_multiple", data=data)

    # Events

    def eventtypes_get(self) -> ApiResponse:
        return self.call("eventtypes_get")

    def events(self, mode: str = "standard") -> ApiResponse:
        return self.call("events", mode=mode)

    def event_search(self, filters: Any, mode: str = "standard") -> ApiResponse:
        return self.call("event_search", filters=filters, mode=mode)

    def event_create(self, data: Any) -> ApiResponse:
        return self.call("event_create", data=data)

    def event_get(self, event_id: Id, mode: str = "standard") -> ApiResponse:
        return self.call("event_get", event_id=event_id, mode=mode)

    def event_update(self, event_id: Id, data: Any) -> ApiResponse:
        return self.call("event_update", event_id=event_id, data=data)

    def event_cancel(self, event_id: Id) -> ApiResponse:
        return self.call("event_cancel", event_id=event_id)

    def event_attendees(self, event_id: Id, mode: str = "standard") -> ApiResponse:
        return self.call("event_attendees", event_id=event_id, mode=mode)

    def event_tickettype_create(self, event_id: Id, data: Any) -> ApiResponse:
        return self.call("event_tickettype_create", event_id=event_id, data=data)

    def event_tickettype_update(
        self, event_id: Id, event_ticket_type_id: Id, data: Any
    ) -> ApiResponse:
        return self.call(
            "event_tickettype_update",
            event_id=event_id,
            event_ticket_type_id=event_ticket_type_id,
            data=data,
        )

    def event_tickettype_delete(
        self, event_id: Id, event_ticket_type_id: Id
    ) -> ApiResponse:
        return self.call(
            "event_tickettype_delete",
            event_id=event_id,
            event_ticket_type_id=event_ticket_type_id,
        )

    def event_question_create(self, event_id: Id, data: Any) -> ApiResponse:
        return self.call("event_question_create", event_id=event_id, data=data)

    def event_question_update(
        self, event_id: Id, question_id: Id, data: Any
    ) -> ApiResponse:
        return self.call(
            "event_question_update",
            event_id=event_id,
            question_id=question_id,
            data=data,
        )

    def event_question_delete(self, event_id: Id, question_id: Id) -> ApiResponse:
        return self.call(
            "event_question_delete", event_id=event_id, question_id=question_id
        )

    # eVoting elections

    def election_categories(self, page: int = 1) -> ApiResponse:
        return self.call("election_categories", page=page)

    def election_category_get(self, category_id: Id) -> ApiResponse:
        return self.call("election_category_get", category_id=category_id)

    def election_positions(self, page: int = 1, mode: str = "full") -> ApiResponse:
        return self.call("election_positions", page=page, mode=mode)

    def election_position_get(
        self, position_id: Id, mode: str = "standard"
    ) -> ApiResponse:
        return self.call("election_position_get", position_id=position_id, mode=mode)

    def elections(self, page: int = 1, mode: str = "full") -> ApiResponse:
        return self.call("elections", page=page, mode=mode)

    def election_get(self, election_id: Id, mode: str = "full") -> ApiResponse:
        return self.call("election_get", election_id=election_id, mode=mode)

    def election_standings(
        self, election_id: Id, page: int = 1, mode: str = "full"
    ) -> ApiResponse:
        return self.call(
            "election_standings", election_id=election_id, page=page, mode=mode
        )

    def election_voters(
        self, election_id: Id, voter_type: str = "actual", page: int = 1
    ) -> ApiResponse:
        """List voters; large rolls are served through a payload reference."""
        return self.call(
            "election_voters",
            election_id=election_id,
            voter_type=voter_type,
            page=page,
        )

    def election_voters_demographics(
        self,
        election_id: Id,
        voter_type: str = "actual",
        page: int = 1,
        mode: str = "full",
    ) -> ApiResponse:
        """Voter demographics; may also be served through a payload reference."""
        return self.call(
            "election_voters_demographics",
            election_id=election_id,
            voter_type=voter_type,
            page=page,
            mode=mode,
        )

    def election_votes(self, election_id: Id, page: int = 1) -> ApiResponse:
        return self.call("election_votes", election_id=election_id, page=page)

    # Student groups

    def groups(self, mode: str = "full", page: int = 1) -> ApiResponse:
        return self.call("groups", mode=mode, page=page)

    def group_get(self, group_id: Id, mode: str = "full") -> ApiResponse:
        return self.call("group_get", group_id=group_id, mode=mode)

    def group_join(self, group_id: Id, uid: Id, membership_type_id: Id) -> ApiResponse:
        return self.call(
            "group_join",
            group_id=group_id,
            uid=uid,
            membership_type_id=membership_type_id,
        )
