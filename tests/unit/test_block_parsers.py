"""Tests for block parsers."""

from kolviz.core.models import (
    AscensionPath,
    CharacterClass,
    ConsumableVersion,
    GameMode,
    PlayerSnapshot,
    Statgain,
    TurnVersion,
)
from kolviz.parser.block_parsers import (
    AscensionDataBlockParser,
    ConsumableBlockParser,
    EncounterBlockParser,
    HybridBlockParser,
    PlayerSnapshotBlockParser,
    ServiceBlockParser,
    snapshot_equipment_name,
)
from kolviz.parser.patterns import PLAYER_SNAPSHOT_DELIMITER


class TestEncounterBlockParser:
    """Tests for adventure blocks."""

    def test_parses_combat(self, ctx):
        EncounterBlockParser().parse(
            [
                "[5] Spooky Forest",
                "Encounter: spooky vampire",
                "Round 0: Hero wins initiative!",
                "Round 1: Hero wins the fight!",
                "After Battle: You gain 10 Strongness",
                "You acquire an item: spooky sapling",
            ],
            ctx,
        )

        turn = ctx.log_data.last_turn_spent()
        assert turn.turn_number == 5
        assert turn.area_name == "The Spooky Forest"
        assert turn.encounter_name == "spooky vampire"
        assert turn.turn_version == TurnVersion.COMBAT
        assert turn.stat_gain == Statgain(mus=10)
        assert turn.dropped_items["spooky sapling"].amount == 1

    def test_noncombat_without_rounds(self, ctx):
        EncounterBlockParser().parse(["[2] The Haunted Pantry", "Encounter: Trick or Treat!"], ctx)

        assert ctx.log_data.last_turn_spent().turn_version == TurnVersion.NONCOMBAT

    def test_empty_encounter_is_not_a_turn(self, ctx):
        EncounterBlockParser().parse(["[3] The Haunted Pantry", "Encounter: "], ctx)

        assert len(ctx.log_data.turns) == 1

    def test_block_without_turn_line_is_parsed_loosely(self, ctx):
        EncounterBlockParser().parse(["cast 1 Rain Man"], ctx)

        assert len(ctx.log_data.turns) == 1
        assert "rain man" in ctx.log_data.last_turn_spent().skills_cast

    def test_crafting_is_logged_one_turn_ahead(self, ctx):
        EncounterBlockParser().parse(["[7] Cook 3 painful penne pasta"], ctx)

        turn = ctx.log_data.last_turn_spent()
        assert turn.turn_number == 6
        assert turn.turn_version == TurnVersion.OTHER

    def test_shore_takes_three_turns_and_500_meat(self, ctx):
        EncounterBlockParser().parse(["[10] Moxie Vacation", "You gain 20 Cheek"], ctx)

        shore = ctx.log_data.turns[1:]
        assert [t.turn_number for t in shore] == [10, 11, 12]
        assert all(t.turn_version == TurnVersion.OTHER for t in shore)
        assert sum(t.meat_gain.spent for t in shore) == 500
        assert ctx.log_data.last_turn_spent().stat_gain == Statgain(mox=20)

    def test_shore_in_surprising_fist_is_free_and_longer(self, ctx):
        ctx.log_data.ascension_path = AscensionPath.WAY_OF_THE_SURPRISING_FIST
        EncounterBlockParser().parse(["[10] Moxie Vacation"], ctx)

        shore = ctx.log_data.turns[1:]
        assert len(shore) == 5
        assert sum(t.meat_gain.spent for t in shore) == 0

    def test_game_grid_game_takes_five_turns(self, ctx):
        EncounterBlockParser().parse(["[20] DemonStar"], ctx)

        assert [t.turn_number for t in ctx.log_data.turns[1:]] == [20, 21, 22, 23, 24]

    def test_boss_logged_twice_becomes_two_turns(self, ctx):
        EncounterBlockParser().parse(
            [
                "[30] The Haunted Ballroom",
                "Encounter: Lord Spookyraven",
                "Round 0: Hero wins initiative!",
                "Round 1: Hero wins the fight!",
                "Encounter: Lord Spookyraven",
                "Round 0: Hero wins initiative!",
                "Round 1: Hero wins the fight!",
            ],
            ctx,
        )

        bosses = ctx.log_data.turns[1:]
        assert [t.turn_number for t in bosses] == [30, 31]
        assert all(t.area_name == "Lord Spookyraven" for t in bosses)
        assert all(t.is_combat for t in bosses)

    def test_lost_combat(self, ctx):
        EncounterBlockParser().parse(
            [
                "[4] The Haunted Pantry",
                "Encounter: overdone flame-broiled meat blob",
                "Round 0: Hero loses initiative!",
                "Round 1: overdone flame-broiled meat blob hits you.",
                "You lose 12 hit points",
            ],
            ctx,
        )

        lost = ctx.log_data.lost_combats
        assert [(c.name, c.turn_number) for c in lost] == [("overdone flame-broiled meat blob", 4)]

    def test_won_combat_is_not_lost(self, ctx):
        EncounterBlockParser().parse(
            [
                "[4] The Haunted Pantry",
                "Encounter: overdone flame-broiled meat blob",
                "Round 0: Hero loses initiative!",
                "Round 1: Hero wins the fight!",
                "You lose 3 hit points",
            ],
            ctx,
        )

        assert ctx.log_data.lost_combats == []

    def test_notes_are_optional(self, ctx):
        lines = ["[2] The Haunted Pantry", "Encounter: Trick or Treat!", " > Note: skipped"]
        EncounterBlockParser(include_notes=False).parse(lines, ctx)

        assert ctx.log_data.last_turn_spent().notes == ""


class TestConsumableBlockParser:
    """Tests for consumable usage blocks."""

    def test_food(self, ctx):
        ConsumableBlockParser().parse(
            ["eat 2 hot hi mein", "You gain 24 Adventures", "You gain 10 Enchantedness"], ctx
        )

        consumable = ctx.last_turn.consumables_used["hot hi mein"]
        assert consumable.version == ConsumableVersion.FOOD
        assert consumable.amount == 2
        assert consumable.adventure_gain == 24
        assert consumable.stat_gain == Statgain(myst=10)

    def test_bought_booze(self, ctx):
        ConsumableBlockParser().parse(
            ["Buy and drink 1 shot of rotgut for 56 Meat", "You gain 2 Adventures"], ctx
        )

        consumable = ctx.last_turn.consumables_used["shot of rotgut"]
        assert consumable.version == ConsumableVersion.BOOZE
        assert consumable.adventure_gain == 2

    def test_used_spleen_item(self, ctx):
        ConsumableBlockParser().parse(["use 1 agua de vida", "You gain 5 Adventures"], ctx)

        assert ctx.last_turn.consumables_used["agua de vida"].version == ConsumableVersion.SPLEEN

    def test_usage_without_gain_is_dropped(self, ctx):
        ConsumableBlockParser().parse(
            ["use 1 tiny house", "You acquire an effect: Covered in the Rainbow (duration: 5 Adventures)"],
            ctx,
        )

        assert ctx.last_turn.consumables_used == {}

    def test_special_consumable_is_kept_without_gain(self, ctx):
        ConsumableBlockParser().parse(["drink 1 steel margarita"], ctx)

        assert "steel margarita" in ctx.last_turn.consumables_used

    def test_item_name_is_unescaped(self, ctx):
        ConsumableBlockParser().parse(["eat 1 Boris&#39;s key lime pie", "You gain 5 Adventures"], ctx)

        assert "Boris's key lime pie" in ctx.last_turn.consumables_used

    def test_mp_gain_counts_as_consumable_mp(self, ctx):
        ConsumableBlockParser().parse(["use 1 magical mystery juice", "You gain 18 Mana Points"], ctx)

        assert ctx.last_turn.mp_gain.consumable == 18


class TestPlayerSnapshotBlockParser:
    """Tests for character status dumps."""

    SNAPSHOT = [
        PLAYER_SNAPSHOT_DELIMITER,
        "\tPlayer Snapshot",
        PLAYER_SNAPSHOT_DELIMITER,
        "",
        "Class: Sauceror",
        "",
        "Mus: 4 (3), tnp = 2",
        "Mys: 12",
        "Mox: 5, tnp = 3",
        "",
        "Advs: 120",
        "Meat: 1,000",
        "",
        "Hat: Helmet Turtle (+1)",
        "Weapon: (none)",
        "Pet: Mosquito (1 lbs)",
        "Item: lead necklace",
    ]

    def test_reads_stats_and_state(self, ctx):
        PlayerSnapshotBlockParser().parse(self.SNAPSHOT, ctx)

        log_data = ctx.log_data
        assert log_data.player_snapshots == [PlayerSnapshot(3, 12, 5, 120, 1000, 0)]
        assert log_data.character_class == CharacterClass.SAUCEROR
        assert log_data.last_familiar_change().familiar_name == "Mosquito"

    def test_reads_equipment(self, ctx):
        PlayerSnapshotBlockParser().parse(self.SNAPSHOT, ctx)

        equipment = ctx.current_equipment()
        assert equipment.hat == "helmet turtle"
        assert equipment.weapon == "none"
        assert equipment.fam_equip == "lead necklace"
        assert ctx.familiar_equipment["Mosquito"] == "lead necklace"

    def test_day_change_inside_snapshot(self, ctx):
        PlayerSnapshotBlockParser().parse(["Day change occurred"], ctx)

        assert ctx.log_data.last_day_change().day_number == 2

    def test_equipment_name_annotations(self):
        assert snapshot_equipment_name("Hat: Helmet Turtle (+1)") == "helmet turtle"
        assert snapshot_equipment_name("Acc. 1: (plexiglass pocketwatch)") == "plexiglass pocketwatch"
        assert snapshot_equipment_name("Pants: (none)") == "none"


class TestAscensionDataBlockParser:
    """Tests for the ascension header."""

    def test_reads_class_mode_and_path(self, ctx):
        AscensionDataBlockParser().parse(
            ["Ascension #42:", "Normal Sauceror", "Hardcore Way of the Surprising Fist"], ctx
        )

        log_data = ctx.log_data
        assert log_data.character_class == CharacterClass.SAUCEROR
        assert log_data.game_mode == GameMode.HARDCORE
        assert log_data.ascension_path == AscensionPath.WAY_OF_THE_SURPRISING_FIST


class TestHybridBlockParser:
    """Tests for DNA lab blocks."""

    def test_repeated_hybridizing_is_counted(self, ctx):
        lines = ["Hybridizing yourself", "You acquire an intrinsic: Human-Fish Hybrid"]
        HybridBlockParser().parse(lines, ctx)
        HybridBlockParser().parse(lines, ctx)

        assert [h.name for h in ctx.log_data.hybrid_content] == ["Hybridizing Human-Fish Hybrid (2)"]


class TestServiceBlockParser:
    """Tests for Community Service quests."""

    def test_service_spends_its_turns(self, ctx):
        ServiceBlockParser().parse(
            [
                "Took choice 1089/1: Donate Blood",
                "choice.php?whichchoice=1089&option=1",
                "You lose 3 Adventures",
                "You acquire an item: blood-drive sticker",
            ],
            ctx,
        )

        service = ctx.log_data.turns[1:]
        assert [t.turn_number for t in service] == [1, 2, 3]
        assert all(t.area_name == "Community Service: Donate Blood" for t in service)
        assert "blood-drive sticker" in service[-1].dropped_items

    def test_missing_adventure_count_spends_nothing(self, ctx):
        ServiceBlockParser().parse(
            ["Took choice 1089/1: Donate Blood", "choice.php?whichchoice=1089&option=1", "Done."], ctx
        )

        assert len(ctx.log_data.turns) == 1
