from poketools.models.team import CoverageMember, Team
from poketools.services.coverage import classify_member, display_reasons, team_coverage


def _team(*members):
    slots = list(members) + [None] * (6 - len(members))
    return Team(slots=slots)


def test_strong_when_super_effective_and_resistant(chart, mon):
    level, reasons = classify_member(chart, mon("charmander", "fire"), "grass")
    assert level == "strong"
    assert reasons == ["fire attacks are super effective vs grass", "Resists grass (½×)"]


def test_strong_when_immune(chart, mon):
    level, reasons = classify_member(chart, mon("gengar", "ghost", "poison"), "normal")
    assert level == "strong"
    assert reasons[0] == "Immune to normal"
    assert "ghost attacks have no effect on normal" in reasons


def test_normal_and_weak_levels(chart, mon):
    assert classify_member(chart, mon("pikachu", "electric"), "water")[0] == "normal"
    level, reasons = classify_member(chart, mon("charmander", "fire"), "water")
    assert level == "weak"
    assert reasons == ["Weak to water (2×)", "fire attacks are not very effective vs water"]


def test_irrelevant_member_excluded(chart, mon):
    assert classify_member(chart, mon("rattata", "normal"), "fire") == (None, [])
    cov = team_coverage(_team(mon("rattata", "normal")), 8, chart)
    assert cov["fire"].effectiveness == "none"
    assert cov["fire"].label == "None"
    assert cov["fire"].members == []


def test_upgrade_discards_lower_members(chart, mon):
    charmander = mon("charmander", "fire", id=4)
    pikachu = mon("pikachu", "electric", id=25)
    bulbasaur = mon("bulbasaur", "grass", "poison", id=1)

    cov = team_coverage(_team(charmander, pikachu), 8, chart)
    assert cov["water"].effectiveness == "normal"
    assert cov["water"].pokemon == [pikachu]

    cov = team_coverage(_team(charmander, pikachu, bulbasaur), 8, chart)
    assert cov["water"].effectiveness == "strong"
    assert cov["water"].label == "Strong"
    assert cov["water"].pokemon == [bulbasaur]


def test_lower_members_after_strong_are_skipped(chart, mon):
    bulbasaur = mon("bulbasaur", "grass", "poison", id=1)
    pikachu = mon("pikachu", "electric", id=25)
    cov = team_coverage(_team(bulbasaur, pikachu), 8, chart)
    assert cov["water"].pokemon == [bulbasaur]


def test_same_level_members_accumulate(chart, mon):
    pikachu = mon("pikachu", "electric", id=25)
    squirtle = mon("squirtle", "water", id=7)
    cov = team_coverage(_team(pikachu, squirtle), 8, chart)
    assert cov["water"].effectiveness == "normal"
    assert cov["water"].pokemon == [pikachu, squirtle]


def test_empty_slots_ignored_and_types_follow_generation(chart, mon):
    team = Team(slots=[None, mon("pikachu", "electric"), None, None, None, None])
    cov = team_coverage(team, 1, chart)
    assert len(cov) == 15
    assert "fairy" not in cov and "dark" not in cov
    assert len(team_coverage(team, 8, chart)) == 18


def test_display_caps_reasons_at_two(chart, mon):
    swampert = mon("swampert", "water", "ground")
    level, reasons = classify_member(chart, swampert, "fire")
    assert level == "strong"
    assert len(reasons) == 3
    member = CoverageMember(swampert, level, reasons)
    assert display_reasons(member) == reasons[:2]
    assert len(member.reasons) == 3
