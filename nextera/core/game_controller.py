"""Game Controller for NextEra.

The progression orchestrator. It owns the single ``RunContext`` of a run and
the root random stream, and is the only place either is created or replaced.
Every operation returns a ``Result``; a failed operation leaves the context
exactly as it was.

Run loop:
    start_run -> generate_opponent_choices -> select_opponent -> start_battle
    -> (battle layer resolves actions) -> complete_battle -> recruit?
    -> advance_to_next_battle -> generate_opponent_choices ...

Random streams are derived from the root by label only:
    choices:  root / "choice" / battle_index
    rewards:  root / "rewards" / battle_index
    battle:   root / "battle" / battle_index / purpose
"""

import logging
import time
from typing import Iterable, Optional

from nextera.combat.ability import restore_all_mp
from nextera.config import settings
from nextera.core.choice_system import ChoiceSystem, choice_stream
from nextera.core.element_system import activate_gem as activate_alignment_gem
from nextera.core.element_system import set_active_gem as choose_alignment_gem
from nextera.core.equipment import equip_item as put_on_equipment
from nextera.core.gem_system import activate_all_gems, equip_gem as put_on_gem
from nextera.core.result import ErrorCode, Ok, Result, err
from nextera.core.reward_system import RewardSystem
from nextera.core.rng import RngStream, make_stream
from nextera.core.roster_manager import RosterManager, recruit_from_template
from nextera.core.save_system import SaveSystem
from nextera.data.loaders.catalog import Catalog, load_catalog
from nextera.data.models.battle import BattleResult, BattleReward, Winner
from nextera.data.models.gem import ActiveGemState
from nextera.data.models.item import Item
from nextera.data.models.opponent import OpponentPreview
from nextera.data.models.progression import ProgressionCounters, RunContext
from nextera.data.models.unit import Unit
from nextera.exceptions import SaveFormatError

logger = logging.getLogger(__name__)

STARTER_ITEM_ID = "health_potion"
STARTER_ITEM_COUNT = 3


class GameController:
    """
    Orchestrates one run at a time.

    Progression counters carry over from one run to the next on the same
    controller; everything else is reset by ``start_run``.
    """

    def __init__(
        self,
        save_system: Optional[SaveSystem] = None,
        catalog: Optional[Catalog] = None,
    ):
        self.catalog = catalog if catalog is not None else load_catalog()
        self.save_system = save_system if save_system is not None else SaveSystem()
        self.reward_system = RewardSystem(self.catalog)
        self.choice_system = ChoiceSystem(self.catalog)
        self.roster_manager = RosterManager()

        self._context: Optional[RunContext] = None
        self._root: Optional[RngStream] = None

    # =========================================================================
    # STATE
    # =========================================================================

    @property
    def context(self) -> Optional[RunContext]:
        """Current run snapshot (immutable), or None before the first run."""
        return self._context

    def _require_run(self) -> Result[RunContext]:
        if self._context is None or self._root is None:
            logger.warning("Rejected: no run in progress")
            return err(ErrorCode.INVALID_STATE, "No run in progress - call start_run first")
        return Ok(self._context)

    def _replace(self, context: RunContext) -> RunContext:
        self._context = context
        return context

    # =========================================================================
    # RUN LIFECYCLE
    # =========================================================================

    def start_run(self, starter_team: Iterable[Unit], seed: Optional[int] = None) -> Result[RunContext]:
        """
        Start a new run.

        Args:
            starter_team: Units to start with; the first four form the party
            seed: Run seed; falls back to ``settings.DEFAULT_SEED``, then the clock

        Returns:
            Ok with the fresh context, or Err(INVALID_ROSTER)
        """
        roster = self.roster_manager.create_roster_from_team(starter_team)
        valid = self.roster_manager.validate_roster(roster)
        if not valid.ok:
            logger.warning("Rejected start_run: %s", valid.error.message)
            return valid

        if seed is None:
            seed = settings.DEFAULT_SEED if settings.DEFAULT_SEED is not None else time.time_ns() // 1_000_000

        previous = self._context.progression if self._context is not None else ProgressionCounters()
        potion = self.catalog.get_item(STARTER_ITEM_ID)
        inventory = (potion,) * STARTER_ITEM_COUNT if potion is not None else ()

        self._root = make_stream(seed)
        context = self._replace(RunContext(
            run_seed=seed,
            battle_index=0,
            roster=roster,
            inventory=inventory,
            progression=previous.model_copy(update={"runs_attempted": previous.runs_attempted + 1}),
        ))

        logger.info("Run started: seed=%d party=%d bench=%d", seed, len(roster.active_party), len(roster.bench))
        return Ok(context)

    def generate_opponent_choices(self) -> Result[tuple[OpponentPreview, ...]]:
        """Draw this battle's opponents from the ``choice`` stream."""
        current = self._require_run()
        if not current.ok:
            return current
        context = current.value

        if context.last_battle_result is not None:
            logger.warning("Rejected choices: battle %d already completed", context.battle_index)
            return err(ErrorCode.INVALID_STATE, "Battle already completed - advance to the next battle")

        choices = self.choice_system.generate_choices(
            choice_stream(self._root, context.battle_index),
            context.battle_index,
        )
        if not choices.ok:
            return choices

        self._replace(context.model_copy(update={
            "current_choices": choices.value,
            "selected_opponent_id": None,
        }))
        return choices

    def select_opponent(self, opponent_id: str) -> Result[OpponentPreview]:
        current = self._require_run()
        if not current.ok:
            return current
        context = current.value

        if not context.current_choices:
            return err(ErrorCode.NO_CHOICES, "No choices available - call generate_opponent_choices first")
        if context.last_battle_result is not None:
            return err(ErrorCode.INVALID_STATE, "Battle already completed - advance to the next battle")

        selected = next((c for c in context.current_choices if c.spec.id == opponent_id), None)
        if selected is None:
            return err(ErrorCode.UNKNOWN_OPPONENT, f"Opponent {opponent_id} not found in current choices")

        self._replace(context.model_copy(update={"selected_opponent_id": opponent_id}))
        logger.info(
            "Opponent selected: battle=%d id=%s difficulty=%s",
            context.battle_index, opponent_id, selected.spec.difficulty,
        )
        return Ok(selected)

    def start_battle(self) -> Result[tuple[Unit, ...]]:
        """
        Prepare the party for battle.

        Refills MP, reactivates every equipped gem and restores full HP. The
        alignment gem's activation is run scoped and is left alone.

        Returns:
            Ok with the battle-ready active party
        """
        current = self._require_run()
        if not current.ok:
            return current
        context = current.value

        if context.get_selected_opponent() is None:
            logger.warning("Rejected start_battle: no opponent selected")
            return err(ErrorCode.INVALID_STATE, "Select an opponent before starting the battle")
        if context.last_battle_result is not None:
            return err(ErrorCode.INVALID_STATE, "Battle already completed - advance to the next battle")

        party = activate_all_gems(restore_all_mp(context.roster.active_party))
        party = tuple(u.model_copy(update={"current_hp": None}) for u in party)
        roster = self.roster_manager.update_units(context.roster, party)
        self._replace(context.model_copy(update={"roster": roster}))

        logger.info("Battle %d started: opponent=%s", context.battle_index, context.selected_opponent_id)
        return Ok(party)

    def battle_stream(self, purpose: str = "actions") -> Result[RngStream]:
        """Stream for in-battle draws (variance, critical rolls) of the current battle."""
        current = self._require_run()
        if not current.ok:
            return current
        return Ok(self._root.fork("battle").fork(current.value.battle_index).fork(purpose))

    def complete_battle(self, result: BattleResult) -> Result[BattleReward]:
        """
        Record a finished battle and hand out its reward.

        Rewards are drawn only for a win; a loss or draw yields an empty
        reward. Experience goes to every unit in the active party.
        """
        current = self._require_run()
        if not current.ok:
            return current
        context = current.value

        preview = context.get_selected_opponent()
        if preview is None:
            return err(ErrorCode.INVALID_STATE, "No opponent selected for this battle")
        if context.last_battle_result is not None:
            return err(ErrorCode.INVALID_STATE, "Battle already completed")

        progression = context.progression
        if result.winner == Winner.PLAYER:
            stream = self._root.fork("rewards").fork(context.battle_index)
            reward = self.reward_system.generate_rewards(preview.spec, result, stream)
            progression = progression.model_copy(update={"battles_won": progression.battles_won + 1})
        else:
            reward = BattleReward()
            if result.winner == Winner.ENEMY:
                progression = progression.model_copy(update={"battles_lost": progression.battles_lost + 1})

        party = tuple(
            u.model_copy(update={"experience": u.experience + reward.experience})
            for u in context.roster.active_party
        )
        self._replace(context.model_copy(update={
            "roster": self.roster_manager.update_units(context.roster, party),
            "inventory": context.inventory + reward.items,
            "equipment_inventory": context.equipment_inventory + reward.equipment,
            "gems": context.gems + reward.gems,
            "progression": progression,
            "last_battle_result": result,
            "last_reward": reward,
        }))

        logger.info(
            "Battle %d completed: winner=%s turns=%d exp=%d",
            context.battle_index, result.winner, result.turns_taken, reward.experience,
        )
        return Ok(reward)

    def recruit(self, template_id: str, replace_unit_id: Optional[str] = None) -> Result[Unit]:
        """
        Recruit an enemy defeated in the last battle.

        Without ``replace_unit_id`` the recruit joins the party if there is
        room, otherwise the bench.
        """
        current = self._require_run()
        if not current.ok:
            return current
        context = current.value

        if context.last_reward is None:
            return err(ErrorCode.INVALID_STATE, "No completed battle to recruit from")
        template = next((t for t in context.last_reward.defeated_enemies if t.id == template_id), None)
        if template is None:
            return err(ErrorCode.UNKNOWN_UNIT, f"{template_id} was not defeated in the last battle")

        counters = context.progression
        unit = recruit_from_template(template, counters.units_recruited + 1)

        if replace_unit_id is not None:
            replaced = self.roster_manager.replace_unit(context.roster, replace_unit_id, unit)
            if not replaced.ok:
                return replaced
            roster = replaced.value
        else:
            roster = self.roster_manager.add_recruited_unit(context.roster, unit)

        self._replace(context.model_copy(update={
            "roster": roster,
            "progression": counters.model_copy(update={"units_recruited": counters.units_recruited + 1}),
        }))
        logger.info("Recruited %s as %s", template_id, unit.id)
        return Ok(unit)

    def advance_to_next_battle(self) -> Result[int]:
        """Move on to the next battle index, clearing per-battle state."""
        current = self._require_run()
        if not current.ok:
            return current
        context = current.value

        if context.last_battle_result is None:
            logger.warning("Rejected advance: battle %d not completed", context.battle_index)
            return err(ErrorCode.INVALID_STATE, "Complete the current battle before advancing")

        next_index = context.battle_index + 1
        self._replace(context.model_copy(update={
            "battle_index": next_index,
            "current_choices": (),
            "selected_opponent_id": None,
            "last_battle_result": None,
            "last_reward": None,
        }))
        return Ok(next_index)

    # =========================================================================
    # ALIGNMENT GEM
    # =========================================================================

    def set_active_gem(self, gem_id: str) -> Result[ActiveGemState]:
        current = self._require_run()
        if not current.ok:
            return current
        context = current.value

        gem = self.catalog.get_elemental_gem(gem_id)
        if gem is None:
            return err(ErrorCode.UNKNOWN_GEM, f"Elemental gem not found: {gem_id}")
        if context.active_gem_state.is_activated:
            return err(ErrorCode.GEM_ALREADY_ACTIVATED, "The alignment gem was already activated this run")

        state = choose_alignment_gem(gem)
        self._replace(context.model_copy(update={"active_gem_state": state}))
        return Ok(state)

    def activate_gem(self) -> Result[ActiveGemState]:
        """Spend the alignment gem's activation; the battle layer fires its effect."""
        current = self._require_run()
        if not current.ok:
            return current
        context = current.value

        activated = activate_alignment_gem(context.active_gem_state)
        if not activated.ok:
            return activated

        self._replace(context.model_copy(update={"active_gem_state": activated.value}))
        logger.info("Alignment gem activated: %s", activated.value.active_gem.name)
        return activated

    # =========================================================================
    # INVENTORY
    # =========================================================================

    def add_gem(self, gem_id: str) -> Result[tuple[str, ...]]:
        current = self._require_run()
        if not current.ok:
            return current
        context = current.value

        if self.catalog.get_gem(gem_id) is None:
            return err(ErrorCode.UNKNOWN_GEM, f"Gem not found: {gem_id}")

        gems = context.gems + (gem_id,)
        self._replace(context.model_copy(update={"gems": gems}))
        return Ok(gems)

    def add_items(self, items: Iterable[Item]) -> Result[tuple[Item, ...]]:
        current = self._require_run()
        if not current.ok:
            return current
        context = current.value

        items = tuple(items)
        for item in items:
            if self.catalog.get_item(item.id) is None:
                return err(ErrorCode.UNKNOWN_ITEM, f"Item not found: {item.id}")

        inventory = context.inventory + items
        self._replace(context.model_copy(update={"inventory": inventory}))
        return Ok(inventory)

    def remove_item(self, item_id: str) -> Result[Item]:
        """Take one item with ``item_id`` out of the inventory."""
        current = self._require_run()
        if not current.ok:
            return current
        context = current.value

        for index, item in enumerate(context.inventory):
            if item.id == item_id:
                inventory = context.inventory[:index] + context.inventory[index + 1:]
                self._replace(context.model_copy(update={"inventory": inventory}))
                return Ok(item)
        return err(ErrorCode.UNKNOWN_ITEM, f"Item {item_id} not in inventory")

    def equip_gem(self, unit_id: str, gem_id: str) -> Result[Unit]:
        """Equip an owned gem; a previously equipped gem returns to the pool."""
        current = self._require_run()
        if not current.ok:
            return current
        context = current.value

        if gem_id not in context.gems:
            return err(ErrorCode.UNKNOWN_GEM, f"Gem {gem_id} not owned")
        unit = self.roster_manager.get_unit(context.roster, unit_id)
        if unit is None:
            return err(ErrorCode.UNKNOWN_UNIT, f"Unit {unit_id} not found in roster")

        equipped = put_on_gem(unit, gem_id, self.catalog)
        if not equipped.ok:
            return equipped

        gems = list(context.gems)
        gems.remove(gem_id)
        if unit.equipped_gem is not None:
            gems.append(unit.equipped_gem.gem_id)

        self._replace(context.model_copy(update={
            "roster": self.roster_manager.update_units(context.roster, (equipped.value,)),
            "gems": tuple(gems),
        }))
        return equipped

    def equip_item(self, unit_id: str, equipment_id: str) -> Result[Unit]:
        """Equip a piece from the equipment inventory; the replaced piece goes back."""
        current = self._require_run()
        if not current.ok:
            return current
        context = current.value

        index = next((i for i, e in enumerate(context.equipment_inventory) if e.id == equipment_id), None)
        if index is None:
            return err(ErrorCode.UNKNOWN_EQUIPMENT, f"Equipment {equipment_id} not in inventory")
        unit = self.roster_manager.get_unit(context.roster, unit_id)
        if unit is None:
            return err(ErrorCode.UNKNOWN_UNIT, f"Unit {unit_id} not found in roster")

        piece = context.equipment_inventory[index]
        updated, previous = put_on_equipment(unit, piece)
        remaining = context.equipment_inventory[:index] + context.equipment_inventory[index + 1:]
        if previous is not None:
            remaining = remaining + (previous,)

        self._replace(context.model_copy(update={
            "roster": self.roster_manager.update_units(context.roster, (updated,)),
            "equipment_inventory": remaining,
        }))
        return Ok(updated)

    # =========================================================================
    # PERSISTENCE
    # =========================================================================

    def save_game(self, slot: str) -> Result[None]:
        current = self._require_run()
        if not current.ok:
            return current
        return self.save_system.save(slot, current.value)

    def load_game(self, slot: str) -> Result[RunContext]:
        """
        Replace the current run with a saved one.

        The root stream is rebuilt from the saved seed alone. On any failure
        the in-memory run is kept untouched.
        """
        try:
            loaded = self.save_system.load(slot)
        except SaveFormatError as e:
            logger.error("Corrupted save in slot %s: %s", slot, e)
            return err(ErrorCode.SAVE_CORRUPTED, str(e))
        if not loaded.ok:
            return loaded

        context = loaded.value.to_context()
        self._root = make_stream(context.run_seed)
        self._replace(context)
        logger.info("Run loaded: slot=%s seed=%d battle_index=%d", slot, context.run_seed, context.battle_index)
        return Ok(context)
