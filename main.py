import asyncio
import logging

from compact_sheet import AsyncioScheduler, CharacterSheet, LockRegistry, load_settings
from compact_sheet.models import ActorData, FilterRow
from compact_sheet.utils.logger_config import setup_logging

logger = logging.getLogger(__name__)

SAMPLE_ACTOR = {
    "_id": "demo-wizard",
    "name": "Elara",
    "abilities": {"int": {"mod": 4}, "wis": {"mod": 1}},
    "attributes": {"prof": 3, "spellcasting": "int", "spelldc": 15},
    "bonuses": {
        "msak": {"attack": "2"},
        "rsak": {"attack": "1"},
        "spell": {"dc": ""},
    },
    "details": {"level": 7},
    "spells": {
        "spell1": {"max": 4, "value": 2},
        "spell2": {"max": 3, "value": 3},
        "spell3": {"max": 3, "value": 0},
        "spell4": {"max": 1, "value": 1},
    },
}

SPELLBOOK = [
    FilterRow(id="s1", text="Magic Missile"),
    FilterRow(id="s2", text="Misty Step"),
    FilterRow(id="s3", text="Fireball"),
    FilterRow(id="s4"),
]


async def run():
    settings = load_settings()
    setup_logging(settings.debug)

    record = dict(SAMPLE_ACTOR)
    sheet = None

    def render():
        data = sheet.get_data()
        logger.info(
            f"{sheet.actor.name}: attack {data.spell_attack_mod}, DC {data.spell_save_dc}, "
            f"next level {data.next_level}, lock {sheet.lock_label()}"
        )
        for key, pips in data.spell_slots.items():
            logger.info(f"  {key}: " + "".join("●" if p.filled else "○" for p in pips))

    async def commit(path, value):
        # In-memory stand-in for the host store
        slot = path.split(".")[2]
        spells = dict(record["spells"])
        spells[slot] = {**spells[slot], "value": value}
        record["spells"] = spells
        logger.info(f"Stored {path} = {value}")
        sheet.update_actor(ActorData.model_validate(record))

    def on_filtered(section, visibility):
        shown = [row_id for row_id, visible in visibility.items() if visible]
        logger.info(f"Filter {section}: showing {shown}")

    sheet = CharacterSheet(
        ActorData.model_validate(record),
        settings,
        LockRegistry(),
        AsyncioScheduler(),
        commit,
        render,
        row_sources={"spellbook": lambda: SPELLBOOK},
        on_filtered=on_filtered,
    )
    render()

    await sheet.slot_control("spell1").click(3)

    for query in ("m", "mi", "mis"):
        sheet.on_search("spellbook", query)
    await asyncio.sleep(settings.search_debounce_ms / 1000 + 0.05)

    sheet.destroy()


# Allow __mp_main__ for multiprocessing spawn on Windows
if __name__ in {"__main__", "__mp_main__"}:
    asyncio.run(run())
