"""
Character components - jobs, stats, equipped ability slots.
"""

from __future__ import annotations

from enum import Enum
from typing import Optional

from pydantic import Field

from tactics_engine.core.component import Component


class Job(Enum):
    """Unit job archetypes."""
    KNIGHT = "Knight"
    ARCHER = "Archer"
    MAGE = "Mage"
    PRIEST = "Priest"
    ROGUE = "Rogue"
    ENGINEER = "Engineer"


class UnitStats(Component):
    """
    Battle statistics of a unit.

    Attributes:
        hp / max_hp: Hit points
        atk: Physical attack power
        def_: Physical defense (serialized as "def")
        mag: Magic power
        res: Magic resistance
        spd: Charge time gained per scheduler tick
        mov: Movement budget in steps
        jmp: Largest height difference a single step may climb or drop
        mp / max_mp: Magic points
        ct: Charge time; the unit becomes ready at the CT threshold
    """
    hp: int = Field(ge=0)
    max_hp: int = Field(gt=0)
    atk: int = 0
    def_: int = Field(default=0, alias="def")
    mag: int = 0
    res: int = 0
    spd: int = Field(default=0, ge=0)
    mov: int = Field(default=0, ge=0)
    jmp: int = Field(default=0, ge=0)
    mp: int = Field(default=0, ge=0)
    max_mp: int = Field(default=0, ge=0)
    ct: int = Field(default=0, ge=0)

    @property
    def is_alive(self) -> bool:
        return self.hp > 0

    def as_dict(self) -> dict[str, int]:
        """Stat values keyed by their public names (def, not def_)."""
        return self.model_dump(by_alias=True)


class EquippedAbilities(Component):
    """
    Ability slots of a unit.

    Attributes:
        weapon: Weapon ability id
        magic: Equipped spell ids
        support: Passive support ability id
        item: Item ability ids the unit may use
    """
    weapon: Optional[str] = None
    magic: tuple[str, ...] = ()
    support: Optional[str] = None
    item: tuple[str, ...] = ()

    def ability_ids(self) -> list[str]:
        """All equipped ids, weapon first."""
        ids = [self.weapon] if self.weapon else []
        ids.extend(self.magic)
        if self.support:
            ids.append(self.support)
        ids.extend(self.item)
        return ids


def _stats(hp: int, atk: int, def_: int, mag: int, res: int, spd: int,
           mov: int, jmp: int, mp: int) -> UnitStats:
    return UnitStats(
        hp=hp, max_hp=hp, atk=atk, def_=def_, mag=mag, res=res,
        spd=spd, mov=mov, jmp=jmp, mp=mp, max_mp=mp, ct=0,
    )


# Base stat template per job
JOB_STATS: dict[Job, UnitStats] = {
    Job.KNIGHT: _stats(hp=100, atk=25, def_=20, mag=5, res=15, spd=8, mov=3, jmp=2, mp=20),
    Job.ARCHER: _stats(hp=80, atk=20, def_=10, mag=10, res=10, spd=10, mov=4, jmp=3, mp=30),
    Job.MAGE: _stats(hp=70, atk=8, def_=5, mag=30, res=20, spd=7, mov=3, jmp=2, mp=60),
    Job.PRIEST: _stats(hp=75, atk=7, def_=10, mag=25, res=25, spd=9, mov=3, jmp=2, mp=70),
    Job.ROGUE: _stats(hp=85, atk=22, def_=8, mag=8, res=5, spd=12, mov=5, jmp=4, mp=25),
    Job.ENGINEER: _stats(hp=90, atk=18, def_=15, mag=15, res=15, spd=9, mov=3, jmp=2, mp=40),
}

# Default equipment per job
JOB_EQUIPMENT: dict[Job, EquippedAbilities] = {
    Job.KNIGHT: EquippedAbilities(weapon="iron_sword", support="counter"),
    Job.ARCHER: EquippedAbilities(weapon="short_bow", support="concentrate"),
    Job.MAGE: EquippedAbilities(weapon="rod", magic=("fire",), support="magic_power_up"),
    Job.PRIEST: EquippedAbilities(weapon="staff", magic=("cure",), support="mp_recovery"),
    Job.ROGUE: EquippedAbilities(weapon="dagger", support="evade"),
    Job.ENGINEER: EquippedAbilities(weapon="hammer", support="repair"),
}

# Every unit enters battle with this inventory
DEFAULT_INVENTORY: dict[str, int] = {"potion": 2}
