import pytest

from compact_sheet.dice.formula import FormulaValue
from compact_sheet.errors import FormulaParseError
from compact_sheet.models.actor import ActorData
from compact_sheet.services.attack_modifier import AttackModifierResolver, resolve_spell_save_dc


@pytest.fixture
def resolver():
    return AttackModifierResolver()


def bonus(raw):
    return FormulaValue.parse(raw)


@pytest.mark.parametrize("mod", range(-5, 6))
@pytest.mark.parametrize("prof", [0, 2, 6])
def test_no_bonus_is_signed_base(resolver, mod, prof):
    total = mod + prof
    expected = f"+{total}" if total >= 0 else str(total)
    assert resolver.resolve(mod, prof, None, None) == expected


@pytest.mark.parametrize("raw", [2, "2", "1d4", "1d4 + 1", "-1"])
def test_equal_bonuses_collapse_to_one(resolver, raw):
    assert resolver.resolve(2, 3, bonus(raw), bonus(raw)) == resolver.resolve(2, 3, bonus(raw), None)


def test_unequal_deterministic_bonuses_use_minimum(resolver):
    assert resolver.resolve(0, 0, bonus(5), bonus(3)) == "+3"
    assert resolver.resolve(0, 0, bonus(3), bonus(5)) == "+3"
    assert resolver.resolve(2, 3, bonus("2"), bonus("1 + 3")) == "+7"


def test_unequal_random_bonuses_are_dropped(resolver):
    assert resolver.resolve(2, 3, bonus(2), bonus("1d4")) == "+5"
    assert resolver.resolve(2, 3, bonus("1d6"), bonus("1d4")) == "+5"


def test_equivalent_random_bonuses_are_kept(resolver):
    assert resolver.resolve(1, 2, bonus("1d4+1"), bonus("1 + 1d4")) == "+4 + 1d4"


def test_single_bonus_is_appended(resolver):
    assert resolver.resolve(2, 3, None, bonus("1d4")) == "+5 + 1d4"
    assert resolver.resolve(2, 3, bonus("1d4"), None) == "+5 + 1d4"
    assert resolver.resolve(2, 3, bonus(-2), None) == "+3"


def test_zero_bonus_is_removed(resolver):
    assert resolver.resolve(-2, 2, bonus(0), None) == "+0"
    assert resolver.resolve(0, 0, bonus("1d4 + 0"), None) == "+1d4"


def test_spell_attack_from_actor(resolver, actor):
    assert resolver.resolve_spell_attack(actor) == "+7"


def test_spell_attack_applies_lesser_bonus(resolver, actor_record):
    actor_record["bonuses"]["msak"]["attack"] = "2"
    actor_record["bonuses"]["rsak"]["attack"] = "1"
    assert resolver.resolve_spell_attack(ActorData.model_validate(actor_record)) == "+8"


def test_spell_attack_resolves_references(resolver, actor_record):
    actor_record["bonuses"]["msak"]["attack"] = "@abilities.wis.mod"
    actor_record["bonuses"]["rsak"]["attack"] = "@abilities.wis.mod"
    assert resolver.resolve_spell_attack(ActorData.model_validate(actor_record)) == "+9"


def test_spell_attack_defaults_to_intelligence(resolver, actor_record):
    actor_record["attributes"]["spellcasting"] = None
    assert resolver.resolve_spell_attack(ActorData.model_validate(actor_record)) == "+7"


def test_missing_spellcasting_ability_counts_as_zero(resolver, actor_record):
    actor_record["attributes"]["spellcasting"] = "cha"
    assert resolver.resolve_spell_attack(ActorData.model_validate(actor_record)) == "+3"


def test_malformed_bonus_propagates(resolver, actor_record):
    actor_record["bonuses"]["msak"]["attack"] = "1d"
    with pytest.raises(FormulaParseError):
        resolver.resolve_spell_attack(ActorData.model_validate(actor_record))


@pytest.mark.parametrize(
    "dc_bonus, expected",
    [(None, 15), ("", 15), ("2", 17), (1, 16), ("1d4", "15 + 1d4"), ("1 + 1d4", "16 + 1d4")],
)
def test_spell_save_dc(dc_bonus, expected):
    assert resolve_spell_save_dc(15, dc_bonus) == expected
