"""Unit data model for NextEra."""

from enum import StrEnum
from typing import Optional

from pydantic import BaseModel, Field


class Role(StrEnum):
    """Unit combat role."""
    TANK = "Tank"
    DPS = "DPS"
    SUPPORT = "Support"
    SPECIALIST = "Specialist"


class Rank(StrEnum):
    """Unit power tier."""
    C = "C"
    B = "B"
    A = "A"
    S = "S"


class Element(StrEnum):
    """Elemental affinity."""
    MARS = "Mars"
    VENUS = "Venus"
    JUPITER = "Jupiter"
    MERCURY = "Mercury"
    MOON = "Moon"
    SUN = "Sun"


class GemState(StrEnum):
    """Per-unit gem state; inactive after its battle effect is used."""
    ACTIVE = "active"
    INACTIVE = "inactive"


class StatBonus(BaseModel):
    """Flat stat additions (equipment, gem passives)."""
    hp: int = 0
    attack: int = 0
    defense: int = 0
    speed: int = 0

    model_config = {"frozen": True}

    def __add__(self, other: "StatBonus") -> "StatBonus":
        return StatBonus(
            hp=self.hp + other.hp,
            attack=self.attack + other.attack,
            defense=self.defense + other.defense,
            speed=self.speed + other.speed,
        )


class EquipmentSlot(StrEnum):
    """Equipment slots; each raises one stat."""
    WEAPON = "weapon"
    ARMOR = "armor"
    ACCESSORY = "accessory"


class Rarity(StrEnum):
    """Loot rarity tiers."""
    COMMON = "common"
    UNCOMMON = "uncommon"
    RARE = "rare"
    EPIC = "epic"


class Equipment(BaseModel):
    """An equippable piece of gear with flat stat bonuses."""
    id: str
    name: str
    slot: EquipmentSlot
    rarity: Rarity = Rarity.COMMON
    stats: StatBonus = Field(default_factory=StatBonus)

    model_config = {"frozen": True}


class EquipmentLoadout(BaseModel):
    """Gear currently worn by a unit (stat layer 4)."""
    weapon: Optional[Equipment] = None
    armor: Optional[Equipment] = None
    accessory: Optional[Equipment] = None

    model_config = {"frozen": True}

    def pieces(self) -> list[Equipment]:
        return [e for e in (self.weapon, self.armor, self.accessory) if e is not None]


class EquippedGem(BaseModel):
    """A per-unit gem and its battle state."""
    gem_id: str
    state: GemState = GemState.ACTIVE

    model_config = {"frozen": True}


class Unit(BaseModel):
    """A player or recruited unit.

    ``hp``/``atk``/``defense``/``speed`` are base stats (stat layer 1); use
    ``compute_stats`` for effective values. ``luck`` is stored as given and
    only validated when a critical roll is requested.
    """
    id: str = Field(..., description="Unique identifier")
    name: str = Field(..., description="Display name")
    role: Role
    tags: tuple[str, ...] = ()
    hp: int = Field(..., ge=1)
    atk: int = Field(..., ge=0)
    defense: int = Field(..., ge=0)
    speed: int = Field(..., ge=0)
    level: int = Field(default=1, ge=1)
    experience: int = Field(default=0, ge=0)
    rank: Rank = Rank.C
    subclass: Optional[str] = None
    element: Optional[Element] = None
    current_mp: int = Field(default=50, ge=0, description="Restored to max MP at battle start")
    luck: int = 5
    equipped_gem: Optional[EquippedGem] = None
    equipment: EquipmentLoadout = Field(default_factory=EquipmentLoadout)
    current_hp: Optional[int] = Field(default=None, ge=0, description="Battle HP; None means full")

    model_config = {"frozen": True}

    @property
    def is_defeated(self) -> bool:
        return self.current_hp is not None and self.current_hp <= 0


class BaseStats(BaseModel):
    """Base stats of an enemy template."""
    hp: int = Field(..., ge=1)
    atk: int = Field(..., ge=0)
    defense: int = Field(..., ge=0)
    speed: int = Field(..., ge=0)

    model_config = {"frozen": True}


class EnemyUnitTemplate(BaseModel):
    """Catalog template for an opponent's unit; recruitable once defeated."""
    id: str
    name: str
    role: Role
    tags: tuple[str, ...] = ()
    element: Optional[Element] = None
    base_stats: BaseStats

    model_config = {"frozen": True}

    def to_unit(self, unit_id: Optional[str] = None) -> Unit:
        """Build a battle-ready unit from this template."""
        return Unit(
            id=unit_id or self.id,
            name=self.name,
            role=self.role,
            tags=self.tags,
            element=self.element,
            hp=self.base_stats.hp,
            atk=self.base_stats.atk,
            defense=self.base_stats.defense,
            speed=self.base_stats.speed,
        )
