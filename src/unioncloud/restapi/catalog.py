"""Endpoint catalog for the UnionCloud API.

Each operation is a declarative :class:`Endpoint`: an HTTP method, a path
template and a description of which arguments go into the path, the query
string and the ``data`` body wrapper.
"""

from dataclasses import dataclass
from string import Formatter
from typing import Any, NamedTuple


class BoundRequest(NamedTuple):
    method: str
    path: str
    params: dict[str, Any]
    body: dict[str, Any] | None


@dataclass(frozen=True)
class Endpoint:
    """Mapping of one logical operation onto the HTTP API.

    Attributes:
        method: HTTP method.
        path: Path template below ``/api``; ``{name}`` placeholders are
            filled from arguments.
        query: Arguments sent as query parameters, in this order.
        data_arg: Argument sent as ``{"data": <value>}``.
        data_fields: ``(body_key, argument)`` pairs sent as
            ``{"data": {body_key: <value>, ...}}``.
        defaults: ``(argument, default)`` pairs for optional arguments.
    """

    method: str
    path: str
    query: tuple[str, ...] = ()
    data_arg: str | None = None
    data_fields: tuple[tuple[str, str], ...] = ()
    defaults: tuple[tuple[str, Any], ...] = ()

    @property
    def path_fields(self) -> tuple[str, ...]:
        return tuple(name for _, name, _, _ in Formatter().parse(self.path) if name)

    @property
    def arguments(self) -> tuple[str, ...]:
        """All argument names the endpoint accepts."""
        body_args = (self.data_arg,) if self.data_arg else ()
        body_args += tuple(arg for _, arg in self.data_fields)
        return self.path_fields + self.query + body_args

    def bind(self, **arguments: Any) -> BoundRequest:
        """Resolve arguments into method, path, query parameters and body.

        Raises:
            TypeError: On unknown or missing arguments.
        """
        accepted = self.arguments
        unknown = sorted(set(arguments) - set(accepted))
        if unknown:
            msg = (
                f"unexpected arguments for {self.method} {self.path}: "
                f"{', '.join(unknown)}"
            )
            raise TypeError(msg)

        values = dict(self.defaults) | arguments
        missing = [name for name in accepted if name not in values]
        if missing:
            msg = (
                f"missing arguments for {self.method} {self.path}: "
                f"{', '.join(missing)}"
            )
            raise TypeError(msg)

        path = self.path.format(**{name: values[name] for name in self.path_fields})
        params = {name: values[name] for name in self.query}

        body = None
        if self.data_arg:
            body = {"data": values[self.data_arg]}
        elif self.data_fields:
            body = {"data": {key: values[arg] for key, arg in self.data_fields}}

        return BoundRequest(self.method, path, params, body)


def _listing(path: str, mode: str = "standard") -> Endpoint:
    """Paged listing with ``mode`` and ``page`` query parameters."""
    return Endpoint(
        "GET",
        path,
        query=("mode", "page"),
        defaults=(("mode", mode), ("page", 1)),
    )


def _detail(path: str, mode: str = "standard") -> Endpoint:
    return Endpoint("GET", path, query=("mode",), defaults=(("mode", mode),))


def _send(method: str, path: str) -> Endpoint:
    return Endpoint(method, path, data_arg="data")


ENDPOINTS: dict[str, Endpoint] = {
    # Uploads
    "upload_student": _send("POST", "/json/upload/students"),
    "upload_guest": _send("POST", "/json/upload/guests"),
    "upload_programme": _send("POST", "/json/upload/programmes"),
    # Users
    "users": _listing("/users"),
    "user_search": Endpoint(
        "POST",
        "/users/search",
        query=("mode", "page"),
        data_arg="filters",
        defaults=(("mode", "standard"), ("page", 1)),
    ),
    "user_get": _detail("/users/{uid}"),
    "user_get_group_memberships": _listing("/users/{uid}/user_group_memberships"),
    "user_update": _send("PUT", "/users/{uid}"),
    "user_delete": Endpoint("DELETE", "/users/{uid}"),
    # User groups
    "usergroups": _listing("/user_groups"),
    "usergroup_search": Endpoint(
        "GET",
        "/user_groups/search",
        query=("mode", "page"),
        data_arg="filters",
        defaults=(("mode", "standard"), ("page", 1)),
    ),
    "usergroup_create": Endpoint(
        "POST",
        "/user_groups",
        data_fields=(
            ("ug_name", "name"),
            ("ug_description", "description"),
            ("folder_id", "folder_id"),
        ),
        defaults=(("folder_id", None),),
    ),
    "usergroup_get": _detail("/user_groups/{ug_id}"),
    "usergroup_get_members": _listing("/user_groups/{ug_id}/user_group_memberships"),
    "usergroup_update": _send("PUT", "/user_groups/{ug_id}"),
    "usergroup_delete": Endpoint("DELETE", "/user_groups/{ug_id}"),
    "usergroup_folderstructure": Endpoint("GET", "/user_groups/folderstructure"),
    # User group memberships
    "usergroup_membership_create": Endpoint(
        "POST",
        "/user_group_memberships",
        data_fields=(
            ("uid", "uid"),
            ("ug_id", "ug_id"),
            ("expire_date", "expire_date"),
        ),
    ),
    "usergroup_membership_create_multiple": _send(
        "POST", "/user_group_memberships/upload"
    ),
    "usergroup_membership_update": Endpoint(
        "PUT",
        "/user_group_memberships/{ugm_id}",
        data_fields=(("expire_date", "expire_date"),),
    ),
    "usergroup_membership_delete": Endpoint(
        "DELETE", "/user_group_memberships/{ugm_id}"
    ),
    "usergroup_membership_delete_multiple": _send(
        "POST", "/user_group_memberships/delete"
    ),
    # Event types
    "eventtypes_get": Endpoint("GET", "/event_types"),
    # Events
    "events": _detail("/events"),
    "event_search": Endpoint(
        "POST",
        "/events/search",
        query=("mode",),
        data_arg="filters",
        defaults=(("mode", "standard"),),
    ),
    "event_create": _send("POST", "/events"),
    "event_get": _detail("/events/{event_id}"),
    "event_update": _send("PUT", "/events/{event_id}"),
    "event_cancel": Endpoint("PUT", "/events/{event_id}/cancel"),
    "event_attendees": _detail("/events/{event_id}/attendees"),
    # Event ticket types
    "event_tickettype_create": _send("POST", "/events/{event_id}/event_ticket_types"),
    "event_tickettype_update": _send(
        "PUT", "/events/{event_id}/event_ticket_types/{event_ticket_type_id}"
    ),
    "event_tickettype_delete": Endpoint(
        "DELETE", "/events/{event_id}/event_ticket_types/{event_ticket_type_id}"
    ),
    # Event questions
    "event_question_create": _send("POST", "/events/{event_id}/questions"),
    "event_question_update": _send("PUT", "/events/{event_id}/questions/{question_id}"),
    "event_question_delete": Endpoint(
        "DELETE", "/events/{event_id}/questions/{question_id}"
    ),
    # eVoting elections
    "election_categories": Endpoint(
        "GET", "/election_categories", query=("page",), defaults=(("page", 1),)
    ),
    "election_category_get": Endpoint("GET", "/election_categories/{category_id}"),
    "election_positions": Endpoint(
        "GET",
        "/election_positions",
        query=("page", "mode"),
        defaults=(("page", 1), ("mode", "full")),
    ),
    "election_position_get": _detail("/election_positions/{position_id}"),
    "elections": _listing("/elections", mode="full"),
    "election_get": _detail("/elections/{election_id}", mode="full"),
    "election_standings": Endpoint(
        "GET",
        "/elections/{election_id}/election_standings",
        query=("page", "mode"),
        defaults=(("page", 1), ("mode", "full")),
    ),
    "election_voters": Endpoint(
        "GET",
        "/elections/{election_id}/election_voters",
        query=("page", "voter_type"),
        defaults=(("page", 1), ("voter_type", "actual")),
    ),
    "election_voters_demographics": Endpoint(
        "GET",
        "/elections/{election_id}/election_voters_demographics",
        query=("page", "voter_type", "mode"),
        defaults=(("page", 1), ("voter_type", "actual"), ("mode", "full")),
    ),
    "election_votes": Endpoint(
        "GET",
        "/elections/{election_id}/votes",
        query=("page",),
        defaults=(("page", 1),),
    ),
    # Student groups
    "groups": _listing("/groups", mode="full"),
    "group_get": _detail("/groups/{group_id}", mode="full"),
    "group_join": Endpoint(
        "POST",
        "/groups/{group_id}/join",
        data_fields=(("uid", "uid"), ("membership_type_id", "membership_type_id")),
    ),
}
