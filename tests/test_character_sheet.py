import asyncio

import pytest

from compact_sheet.config import SheetSettings
from compact_sheet.errors import UnknownEntityError
from compact_sheet.models.actor import ActorData
from compact_sheet.models.sheet import FilterRow
from compact_sheet.services.character_sheet import CharacterSheet
from compact_sheet.services.sheet_data import FULL_TEMPLATE, LIMITED_TEMPLATE, select_template


@pytest.fixture
def make_sheet(actor, registry, scheduler, commit, view):
    def factory(**overrides):
        settings = SheetSettings(**overrides.pop("settings", {}))
        return CharacterSheet(
            overrides.pop("actor", actor),
            settings,
            registry,
            scheduler,
            commit,
            view.render,
            close=view.close,
            **overrides,
        )

    return factory


def test_sheet_data_derived_values(make_sheet):
    data = make_sheet().get_data()
    assert data.actor_id == "actor-1"
    assert data.template == FULL_TEMPLATE
    assert data.next_level == 6
    assert data.spell_attack_mod == "+7"
    assert data.spell_save_dc == 15
    assert data.dark_mode_class is None


def test_locking_disabled_never_binds(make_sheet, registry):
    sheet = make_sheet()
    assert sheet.get_data().locked is False
    assert sheet.lock_label() is None
    assert len(registry) == 0


def test_locking_enabled_binds_locked(make_sheet, registry):
    sheet = make_sheet(settings={"lock_sheets": True})
    assert sheet.get_data().locked is True
    assert registry.is_locked("actor-1") is True
    assert sheet.lock_label() == "Locked"


def test_toggle_closes_then_rerenders_after_delay(make_sheet, scheduler, view):
    sheet = make_sheet(settings={"lock_sheets": True})
    sheet.get_data()

    assert sheet.toggle_lock() is False
    assert view.closes == 1
    assert view.renders == 0

    scheduler.advance(0.2)
    assert view.renders == 0
    scheduler.advance(0.1)
    assert view.renders == 1
    assert sheet.get_data().locked is False
    assert sheet.lock_label() == "Unlocked"


def test_repeated_toggles_render_once(make_sheet, scheduler, view):
    sheet = make_sheet(settings={"lock_sheets": True})
    sheet.get_data()
    sheet.toggle_lock()
    sheet.toggle_lock()
    scheduler.advance(1)
    assert view.renders == 1
    assert sheet.get_data().locked is True


def test_destroy_cancels_pending_render(make_sheet, scheduler, view):
    sheet = make_sheet(settings={"lock_sheets": True})
    sheet.get_data()
    sheet.toggle_lock()
    sheet.destroy()
    scheduler.advance(1)
    assert view.renders == 0


def test_failing_render_is_swallowed(actor, registry, scheduler, commit):
    def render():
        raise RuntimeError("application closed")

    sheet = CharacterSheet(actor, SheetSettings(lock_sheets=True), registry, scheduler, commit, render)
    sheet.lock_label()
    sheet.toggle_lock()
    scheduler.advance(1)
    assert registry.is_locked(actor.id) is False


def test_failing_close_still_rerenders(actor, registry, scheduler, commit, view):
    def close():
        raise RuntimeError("window already gone")

    sheet = CharacterSheet(
        actor, SheetSettings(lock_sheets=True), registry, scheduler, commit, view.render, close=close
    )
    sheet.lock_label()
    with pytest.raises(RuntimeError):
        sheet.toggle_lock()
    assert registry.is_locked(actor.id) is False

    scheduler.advance(1)
    assert view.renders == 1


def test_toggle_before_bind_raises(make_sheet, view):
    sheet = make_sheet(settings={"lock_sheets": True})
    with pytest.raises(UnknownEntityError):
        sheet.toggle_lock()
    assert view.closes == 0


def test_spell_slot_tracks(make_sheet):
    data = make_sheet().get_data()
    assert list(data.spell_slots) == ["spell1", "spell2", "spell3"]
    assert [p.filled for p in data.spell_slots["spell1"]] == [True, True, False, False]
    assert [p.filled for p in data.spell_slots["spell3"]] == [False, False]


def test_spell_slot_tracks_can_be_disabled(make_sheet):
    sheet = make_sheet(settings={"show_spell_slot_bubbles": False})
    assert sheet.get_data().spell_slots == {}
    assert sheet.slot_control("spell1") is None


def test_slot_click_commits_slot_path(make_sheet, commit):
    sheet = make_sheet()
    sheet.get_data()
    assert asyncio.run(sheet.slot_control("spell2").click(0)) is True
    assert commit.calls == [("data.spells.spell2.value", 0)]


def test_update_actor_rerenders_with_new_state(make_sheet, actor_record, view):
    sheet = make_sheet()
    actor_record["spells"]["spell1"]["value"] = 4
    sheet.update_actor(ActorData.model_validate(actor_record))
    assert view.renders == 1
    assert all(p.filled for p in sheet.get_data().spell_slots["spell1"])


def test_search_routes_to_section(actor, registry, scheduler, commit, view):
    passes = []
    sheet = CharacterSheet(
        actor,
        SheetSettings(),
        registry,
        scheduler,
        commit,
        view.render,
        row_sources={"inventory": lambda: [FilterRow(id="i1", text="Rope"), FilterRow(id="i2", text="Torch")]},
        on_filtered=lambda section, visibility: passes.append((section, visibility)),
    )
    sheet.on_search("inventory", "rope")
    sheet.on_search("spellbook", "fire")
    scheduler.advance(0.3)
    assert ("inventory", {"i1": True, "i2": False}) in passes
    assert ("spellbook", {}) in passes

    with pytest.raises(KeyError):
        sheet.on_search("journal", "x")


def test_custom_debounce_window(make_sheet, scheduler):
    sheet = make_sheet(settings={"search_debounce_ms": 500})
    sheet.on_search("features", "rage")
    scheduler.advance(0.4)
    assert sheet.filters["features"].passes == 0
    scheduler.advance(0.2)
    assert sheet.filters["features"].passes == 1


def test_dark_mode_class(make_sheet):
    assert make_sheet(settings={"dark_mode": "dark"}).get_data().dark_mode_class == "cb5es-dark-mode"


def test_currency_labels(make_sheet):
    currencies = {"gp": {"label": "Gold", "abbreviation": "GP"}, "sp": {"label": "Silver", "abbreviation": "SP"}}
    assert make_sheet().currency_labels(currencies) == {"gp": "GP", "sp": "SP"}
    full = make_sheet(settings={"show_full_currency_names": True})
    assert full.currency_labels(currencies) == {"gp": "Gold", "sp": "Silver"}


@pytest.mark.parametrize(
    "is_gm, limited, expanded, expected",
    [
        (False, True, False, LIMITED_TEMPLATE),
        (False, True, True, FULL_TEMPLATE),
        (True, True, False, FULL_TEMPLATE),
        (False, False, False, FULL_TEMPLATE),
    ],
)
def test_select_template(is_gm, limited, expanded, expected):
    assert select_template(is_gm, limited, expanded) == expected


def test_limited_actor_gets_limited_template(make_sheet, actor_record):
    actor_record["limited"] = True
    sheet = make_sheet(actor=ActorData.model_validate(actor_record))
    assert sheet.get_data().template == LIMITED_TEMPLATE
