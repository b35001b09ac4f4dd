from __future__ import annotations

import random

import pytest
from sqlalchemy.exc import IntegrityError

from loto_game.errors import ConflictError, ForbiddenError, NotFoundError, ValidationError
from loto_game.models.room import RoomStatus
from loto_game.repositories.ticket_repository import TicketRepository
from loto_game.services.call_service import CallService
from loto_game.services.room_service import ROOM_CODE_ALPHABET, RoomService, is_valid_room_code
from loto_game.services.ticket_codec import hash_ticket, ticket_from_rows
from loto_game.services.ticket_generator import validate_ticket
from loto_game.services.ticket_service import TicketConflictError, TicketService, is_duplicate_hash_error
from loto_game.services.win_detection import WinPattern


class ScriptedGenerator:
    """Returns the given grids in order, repeating the last one."""

    def __init__(self, *grids):
        self._grids = list(grids)
        self.calls = 0

    def generate(self):
        self.calls += 1
        if len(self._grids) > 1:
            return self._grids.pop(0)
        return self._grids[0]


@pytest.fixture()
def rooms():
    return RoomService(rng=random.Random(3))


@pytest.fixture()
def room(session, rooms):
    return rooms.create_room(session, host_id="host-1")


# -- rooms -------------------------------------------------------------------


def test_create_room_assigns_code(session, rooms):
    room = rooms.create_room(session, host_id="host-1")
    assert is_valid_room_code(room.room_code)
    assert set(room.room_code) <= set(ROOM_CODE_ALPHABET)
    assert room.status == RoomStatus.WAITING.value
    assert room.started_at is None


def test_create_room_requires_host(session, rooms):
    with pytest.raises(ValidationError):
        rooms.create_room(session, host_id="  ")


def test_explicit_code_conflict(session, rooms):
    rooms.create_room(session, host_id="h", room_code="abc234")
    with pytest.raises(ConflictError):
        rooms.create_room(session, host_id="h", room_code="ABC234")


def test_code_collisions_exhaust(session):
    first = RoomService(rng=random.Random(11)).create_room(session, host_id="h")
    # Same seed replays the same code every time.
    again = RoomService(rng=random.Random(11), max_code_attempts=1)
    with pytest.raises(ConflictError):
        again.create_room(session, host_id="h")
    assert first.room_code


def test_lookup_by_code_is_case_insensitive(session, rooms, room):
    assert rooms.get_room_by_code(session, room.room_code.lower()).id == room.id


def test_lookup_bad_code(session, rooms):
    with pytest.raises(ValidationError):
        rooms.get_room_by_code(session, "abc")
    with pytest.raises(NotFoundError):
        rooms.get_room_by_code(session, "ZZZZZZ")


def test_status_changes(session, rooms, room):
    with pytest.raises(ForbiddenError):
        rooms.update_status(session, room.id, host_id="intruder", status="active")

    updated = rooms.update_status(session, room.id, host_id="host-1", status="active")
    assert updated.started_at is not None

    updated = rooms.update_status(session, room.id, host_id="host-1", status="completed")
    assert updated.ended_at is not None

    with pytest.raises(ConflictError):
        rooms.update_status(session, room.id, host_id="host-1", status="active")


def test_status_must_be_known(session, rooms, room):
    with pytest.raises(ValidationError):
        rooms.update_status(session, room.id, host_id="host-1", status="paused")


# -- calling -----------------------------------------------------------------


def test_first_call_starts_room(session, rooms, room):
    calls = CallService(room_service=rooms)
    calls.call_number(session, room.id, "host-1", 42)
    assert room.status == RoomStatus.ACTIVE.value
    assert room.started_at is not None


def test_calls_listed_in_order(session, rooms, room):
    calls = CallService(room_service=rooms)
    for n in (90, 1, 45):
        calls.call_number(session, room.id, "host-1", n)
    assert calls.list_called(session, room.id) == [90, 1, 45]


@pytest.mark.parametrize("number", [0, 91, True])
def test_call_rejects_bad_numbers(session, rooms, room, number):
    with pytest.raises(ValidationError):
        CallService(room_service=rooms).call_number(session, room.id, "host-1", number)


def test_call_rules(session, rooms, room):
    calls = CallService(room_service=rooms)
    with pytest.raises(ForbiddenError):
        calls.call_number(session, room.id, "player", 5)

    calls.call_number(session, room.id, "host-1", 5)
    with pytest.raises(ConflictError):
        calls.call_number(session, room.id, "host-1", 5)

    rooms.update_status(session, room.id, "host-1", "completed")
    with pytest.raises(ConflictError):
        calls.call_number(session, room.id, "host-1", 6)


# -- joining -----------------------------------------------------------------


def test_join_issues_valid_ticket(session, rooms, room):
    result = TicketService(room_service=rooms).join_room(session, room.id, "player-123456789")

    assert result.is_new_ticket is True
    grid = ticket_from_rows(result.ticket.ticket_data)
    assert validate_ticket(grid)
    assert result.ticket.ticket_hash == hash_ticket(grid)
    assert result.ticket.player_name == "Player player-1"


def test_rejoin_returns_same_ticket(session, rooms, room):
    service = TicketService(room_service=rooms)
    first = service.join_room(session, room.id, "p1", "Lan")
    second = service.join_room(session, room.room_code, "p1")

    assert second.is_new_ticket is False
    assert second.ticket.id == first.ticket.id
    assert second.ticket.player_name == "Lan"


def test_players_get_distinct_tickets(session, rooms, room):
    service = TicketService(room_service=rooms)
    hashes = {service.join_room(session, room.id, f"p{i}").ticket.ticket_hash for i in range(20)}
    assert len(hashes) == 20
    assert len(service.list_room_tickets(session, room.id)) == 20


def test_duplicate_hash_regenerates(session, rooms, room, valid_grid, other_grid):
    gen = ScriptedGenerator(valid_grid, valid_grid, other_grid)
    service = TicketService(generator=gen, room_service=rooms)

    service.join_room(session, room.id, "p1")
    result = service.join_room(session, room.id, "p2")

    assert result.ticket.ticket_hash == hash_ticket(other_grid)
    assert gen.calls == 3


def test_duplicate_hash_exhausts(session, rooms, room, valid_grid):
    gen = ScriptedGenerator(valid_grid)
    service = TicketService(generator=gen, room_service=rooms, max_attempts=4)

    service.join_room(session, room.id, "p1")
    with pytest.raises(TicketConflictError) as excinfo:
        service.join_room(session, room.id, "p2")

    assert excinfo.value.code == "ticket_conflict"
    assert excinfo.value.status_code == 409
    assert gen.calls == 1 + 4


def test_constraint_duplicate_keeps_pending_writes(monkeypatch, session, rooms, room, valid_grid, other_grid):
    # Pre-check misses, as when a concurrent join inserts the same hash first.
    monkeypatch.setattr(TicketRepository, "hash_exists", lambda self, session, room_id, ticket_hash: False)
    gen = ScriptedGenerator(valid_grid, valid_grid, other_grid)
    service = TicketService(generator=gen, room_service=rooms)

    first = service.join_room(session, room.id, "p1")
    result = service.join_room(session, room.id, "p2")

    assert first.ticket.ticket_hash == hash_ticket(valid_grid)
    assert result.ticket.ticket_hash == hash_ticket(other_grid)
    assert result.room.id == room.id
    assert gen.calls == 3

    # The room was never committed; it must survive the rejected insert.
    assert rooms.get_room(session, room.id).room_code == room.room_code
    assert [t.player_id for t in service.list_room_tickets(session, room.id)] == ["p1", "p2"]
    session.commit()


class RejectingRepository(TicketRepository):
    def create(self, session, **kwargs):
        raise IntegrityError("INSERT INTO tickets", {}, Exception("FOREIGN KEY constraint failed"))


def test_other_integrity_errors_propagate(session, rooms, room, valid_grid):
    gen = ScriptedGenerator(valid_grid)
    service = TicketService(generator=gen, room_service=rooms, repository=RejectingRepository())

    with pytest.raises(IntegrityError):
        service.join_room(session, room.id, "p1")
    assert gen.calls == 1


class _Diag:
    def __init__(self, constraint_name):
        self.constraint_name = constraint_name


class _DriverError(Exception):
    def __init__(self, message, constraint_name=None):
        super().__init__(message)
        if constraint_name is not None:
            self.diag = _Diag(constraint_name)


@pytest.mark.parametrize(
    "orig, expected",
    [
        (_DriverError("UNIQUE constraint failed: tickets.room_id, tickets.ticket_hash"), True),
        (_DriverError("duplicate key", constraint_name="uq_tickets_room_hash"), True),
        (_DriverError("duplicate key", constraint_name="tickets_pkey"), False),
        (_DriverError("FOREIGN KEY constraint failed"), False),
        (_DriverError("NOT NULL constraint failed: tickets.player_id"), False),
    ],
)
def test_is_duplicate_hash_error(orig, expected):
    assert is_duplicate_hash_error(IntegrityError("INSERT", {}, orig)) is expected


def test_join_completed_room(session, rooms, room):
    rooms.update_status(session, room.id, "host-1", "completed")
    with pytest.raises(ConflictError):
        TicketService(room_service=rooms).join_room(session, room.id, "p1")


def test_join_unknown_room(session, rooms):
    with pytest.raises(NotFoundError):
        TicketService(room_service=rooms).join_room(session, "no-such-room", "p1")


def test_check_player(session, rooms, room, valid_grid):
    service = TicketService(generator=ScriptedGenerator(valid_grid), room_service=rooms)
    calls = CallService(room_service=rooms)
    service.join_room(session, room.id, "p1")

    for n in (5, 23, 45, 67, 82):
        calls.call_number(session, room.id, "host-1", n)

    status = service.check_player(session, room.id, "p1")
    assert status.win.has_won is True
    assert status.win.pattern is WinPattern.TOP_LINE
    assert status.progress.marked == 5
    assert status.numbers_to_win.full_house == 10


def test_check_player_without_ticket(session, rooms, room):
    with pytest.raises(NotFoundError):
        TicketService(room_service=rooms).check_player(session, room.id, "ghost")


def test_preview_ticket(valid_grid):
    preview = TicketService(generator=ScriptedGenerator(valid_grid)).preview_ticket()
    assert preview.grid == valid_grid
    assert preview.ticket_hash == hash_ticket(valid_grid)
    assert " 5 |" in preview.text
