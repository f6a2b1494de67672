"""Game domain services: team assembly, scheduling and live handoff.

This package contains the stateful core that HTTP routes and socket
handlers call into, keeping transport concerns separated from the
lobby, schedule and handoff state.
"""

from dataclasses import dataclass

from .assembler import TeamAssembler
from .catalog import GameCatalog
from .directory import StudentDirectory
from .handoff import LiveHandoffBuffer
from .scheduler import SchedulingClock


@dataclass
class ArenaServices:
    directory: StudentDirectory
    catalog: GameCatalog
    clock: SchedulingClock
    assembler: TeamAssembler
    handoff: LiveHandoffBuffer


def build_services(config, now=None) -> ArenaServices:
    directory = StudentDirectory()
    catalog = GameCatalog()
    clock = SchedulingClock(gap_minutes=int(config.get('SLOT_GAP_MIN', 30)), now=now)
    assembler = TeamAssembler(
        directory.resolve,
        clock,
        catalog,
        team_size=int(config.get('TEAM_SIZE', 4)),
        guest_roll=str(config.get('GUEST_ROLL', '1')),
    )
    return ArenaServices(directory, catalog, clock, assembler, LiveHandoffBuffer(catalog))
