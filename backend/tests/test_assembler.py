import threading
from types import SimpleNamespace

import pytest

from arena.services.games.assembler import (
    DUPLICATE_ACROSS_TEAMS,
    DUPLICATE_IN_TARGET,
    INVALID_ID,
    UNKNOWN_PLAYER,
    TeamAssembler,
    guest_player,
    player_id,
)
from arena.services.games.errors import StorageUnavailable
from arena.services.games.scheduler import SchedulingClock


class FakeCatalog:
    def __init__(self):
        self.records = []
        self.fail = False

    def add(self, **fields):
        if self.fail:
            raise StorageUnavailable('down')
        record = SimpleNamespace(id=len(self.records) + 1, **fields)
        self.records.append(record)
        return record


def _resolve(roll):
    if str(roll).startswith('P'):
        return {'id': roll, 'rollNumber': roll, 'name': f'Name {roll}', 'email': '', 'mobile': ''}
    return None


@pytest.fixture()
def catalog():
    return FakeCatalog()


@pytest.fixture()
def assembler(flask_app, fake_now, catalog):
    return TeamAssembler(_resolve, SchedulingClock(30, now=fake_now), catalog, team_size=4)


def test_player_id_prefers_id_then_roll():
    assert player_id({'id': 'x', 'rollNumber': 'y'}) == 'x'
    assert player_id({'rollNumber': 7}) == '7'
    assert player_id({'roll': 'r'}) == 'r'
    assert player_id({'name': 'anon'}) is None


def test_side_flips_after_team_a_fills(assembler):
    for i in range(1, 5):
        assert assembler.submit(f'P{i}').accepted
    state = assembler.snapshot()
    assert state['filling_side'] == 'B'
    assert len(state['team_a']) == 4
    assert state['team_b'] == []


def test_game_ready_only_when_both_sides_full(assembler, catalog):
    results = [assembler.submit(f'P{i}') for i in range(1, 9)]
    assert all(r.game is None for r in results[:7])
    game = results[-1].game
    assert game.game_no == 1
    assert game.play_time == '10:00'
    assert len(game.team_one) == 4 and len(game.team_two) == 4
    assert len(catalog.records) == 1
    assert assembler.snapshot() == {'team_a': [], 'team_b': [], 'filling_side': 'A', 'team_size': 4}


def test_duplicate_in_target(assembler):
    assembler.submit('P1')
    result = assembler.submit('P1')
    assert not result.accepted
    assert result.reason == DUPLICATE_IN_TARGET
    assert len(assembler.snapshot()['team_a']) == 1


def test_duplicate_across_teams(assembler):
    for i in range(1, 5):
        assembler.submit(f'P{i}')
    result = assembler.submit('P2')
    assert result.reason == DUPLICATE_ACROSS_TEAMS
    assert assembler.snapshot()['team_b'] == []


def test_unknown_player(assembler):
    result = assembler.submit('X9')
    assert not result.accepted
    assert result.reason == UNKNOWN_PLAYER


def test_guest_without_contact_uses_sentinel_id(assembler):
    first = assembler.submit('1', {'roll': '1', 'name': 'Walk-in'})
    second = assembler.submit('1', {'roll': '1', 'name': 'Another'})
    assert first.accepted
    assert second.reason == DUPLICATE_IN_TARGET


def test_player_without_identity_is_invalid(flask_app, fake_now, catalog):
    assembler = TeamAssembler(lambda roll: {'name': 'no id'}, SchedulingClock(30, now=fake_now), catalog)
    assert assembler.submit('P1').reason == INVALID_ID


def test_storage_failure_keeps_lobby_intact(assembler, catalog):
    for i in range(1, 8):
        assembler.submit(f'P{i}')
    catalog.fail = True
    with pytest.raises(StorageUnavailable):
        assembler.submit('P8')
    state = assembler.snapshot()
    assert len(state['team_b']) == 3
    assert state['filling_side'] == 'B'

    catalog.fail = False
    assert assembler.submit('P8').game.game_no == 1


def test_second_game_is_spaced(assembler, fake_now):
    for i in range(1, 9):
        assembler.submit(f'P{i}')
    fake_now.advance(3)
    for i in range(1, 9):
        result = assembler.submit(f'P{i}')
    assert result.game.game_no == 2
    assert result.game.play_time == '10:30'


def test_concurrent_submissions_never_duplicate(flask_app, assembler, catalog):
    # 16 distinct players each tapped 4 times from parallel callers
    rolls = [f'P{i}' for i in range(1, 17)] * 4
    barrier = threading.Barrier(8)

    def worker(chunk):
        with flask_app.app_context():
            barrier.wait()
            for roll in chunk:
                assembler.submit(roll)

    threads = [threading.Thread(target=worker, args=(rolls[i::8],)) for i in range(8)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    for record in catalog.records:
        ids = [player_id(p) for p in record.team_one + record.team_two]
        assert len(ids) == len(set(ids)) == 8
    state = assembler.snapshot()
    lobby_ids = [player_id(p) for p in state['team_a'] + state['team_b']]
    assert len(lobby_ids) == len(set(lobby_ids))
    assert [r.game_no for r in catalog.records] == list(range(1, len(catalog.records) + 1))


def test_guest_key_prefers_roll_number_then_roll():
    assert guest_player({'rollNumber': 'G7', 'roll': '1'}, '1')['id'] == 'G7'
    assert guest_player({'roll': '1', 'email': 'a@x.io'}, '1')['id'] == '1'
    assert guest_player({'id': 'x9'}, '1')['id'] == 'x9'
    assert guest_player({}, '1')['id'] == '1'
