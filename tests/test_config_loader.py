"""
Testy dla ConfigLoader (YAML + merge defaults).
"""

import pytest
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

from lighthouse.board.board import Board
from lighthouse.core.config_loader import ConfigLoader


@pytest.fixture
def loader():
    return ConfigLoader()


def test_default_economy(loader):
    economy = loader.load_game_config().economy
    assert economy.max_resources == {"oil": 20, "food": 15}
    assert economy.initial_resources == {"oil": 12, "food": 8}
    assert economy.oil_cost_per_night == [3, 3, 4, 4, 5]
    assert (economy.penalty_dark_night, economy.penalty_hunger, economy.penalty_dark_late) == (15, 10, 5)


def test_default_cycle(loader):
    cycle = loader.load_game_config().cycle
    assert cycle.max_act == 5
    assert cycle.moves_per_act == [6, 6, 7, 7, 8]
    assert cycle.transition_duration_ms == 2500
    assert cycle.dusk_delay_ms == 1000


def test_default_persistence(loader):
    persistence = loader.load_game_config().persistence
    assert persistence.namespace == "lastlighthouse_"
    assert persistence.manual_slots == ["save_1", "save_2", "save_3"]


def test_overrides_deep_merge(loader):
    config = loader.load_game_config({"resources": {"initial": {"oil": 3}}})
    assert config.economy.initial_resources == {"oil": 3, "food": 8}
    assert config.economy.max_resources == {"oil": 20, "food": 15}


def test_overrides_do_not_touch_cache(loader):
    loader.load_game_config({"cycle": {"max_act": 2}})
    assert loader.load_game_config().cycle.max_act == 5


def test_island_map_builds_board(loader):
    tiles = loader.load_tiles()
    assert len(tiles) == 33
    assert Board(tiles).tile_count == 33


def test_npc_spawns(loader):
    spawns = loader.load_npc_spawns()
    assert spawns["sailor"] == {"q": 0, "r": 1, "act": 1}
    assert set(spawns) == {"sailor", "child", "elise", "priest", "nadia", "captain"}


def test_missing_data_dir(tmp_path):
    with pytest.raises(FileNotFoundError):
        ConfigLoader(str(tmp_path)).load_game_config()


def test_custom_data_dir(tmp_path):
    (tmp_path / "defaults.yaml").write_text("cycle:\n  max_act: 3\n", encoding="utf-8")
    (tmp_path / "island.yaml").write_text(
        "tiles:\n  - {q: 0, r: 0, type: lighthouse, name: Tower}\n", encoding="utf-8"
    )

    config = ConfigLoader(str(tmp_path)).load_game_config()

    assert config.cycle.max_act == 3
    assert config.cycle.moves_per_act == [6, 6, 7, 7, 8]
    assert [t["name"] for t in config.tiles] == ["Tower"]
    assert config.npc_spawns == {}


def test_reload_clears_cache(tmp_path):
    (tmp_path / "defaults.yaml").write_text("cycle:\n  max_act: 3\n", encoding="utf-8")
    (tmp_path / "island.yaml").write_text("tiles: []\n", encoding="utf-8")
    loader = ConfigLoader(str(tmp_path))
    assert loader.load_game_config().cycle.max_act == 3

    (tmp_path / "defaults.yaml").write_text("cycle:\n  max_act: 4\n", encoding="utf-8")
    assert loader.load_game_config().cycle.max_act == 3
    loader.reload()
    assert loader.load_game_config().cycle.max_act == 4
