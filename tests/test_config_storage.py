"""
Tests for configuration loading and YAML write-through persistence.
"""

from pathlib import Path

import pydantic
import pytest
import yaml

from chuk_mcp_chordify.config import CONFIG_ENV_VAR, ChordifyConfig
from chuk_mcp_chordify.constants import Genre, Instrument
from chuk_mcp_chordify.progression import ProgressionManager
from chuk_mcp_chordify.settings import PlaybackSettingsStore, SuggestionPreferencesStore
from chuk_mcp_chordify.storage import YamlRecordStore


class TestChordifyConfig:
    def test_defaults(self) -> None:
        config = ChordifyConfig()
        assert config.data_dir is None
        assert config.default_instrument == Instrument.PIANO
        assert config.default_seconds_per_chord == 2.0
        assert config.default_genre == Genre.POP
        assert config.default_key == "C"
        assert config.log_level == "INFO"

    def test_load_yaml(self, temp_dir: Path) -> None:
        path = temp_dir / "config.yaml"
        path.write_text(
            yaml.safe_dump(
                {
                    "data_dir": str(temp_dir / "data"),
                    "log_level": "debug",
                    "default_instrument": "guitar",
                    "default_key": "Am",
                }
            )
        )
        config = ChordifyConfig.load(path)
        assert config.data_dir == temp_dir / "data"
        assert config.log_level == "DEBUG"
        assert config.default_instrument == Instrument.GUITAR
        assert config.default_key == "Am"

    def test_empty_file_gives_defaults(self, temp_dir: Path) -> None:
        path = temp_dir / "empty.yaml"
        path.write_text("")
        assert ChordifyConfig.load(path) == ChordifyConfig()

    def test_missing_file(self, temp_dir: Path) -> None:
        with pytest.raises(FileNotFoundError):
            ChordifyConfig.load(temp_dir / "nope.yaml")

    @pytest.mark.parametrize(
        "data",
        [
            {"default_key": "H"},
            {"default_seconds_per_chord": 0.5},
            {"default_genre": "Polka"},
            {"log_level": "LOUD"},
            {"unknown_field": 1},
        ],
    )
    def test_invalid_values(self, data: dict) -> None:
        with pytest.raises(pydantic.ValidationError):
            ChordifyConfig.model_validate(data)

    def test_from_env(self, temp_dir: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        path = temp_dir / "config.yaml"
        path.write_text(yaml.safe_dump({"default_genre": "Jazz"}))
        monkeypatch.setenv(CONFIG_ENV_VAR, str(path))
        assert ChordifyConfig.from_env().default_genre == Genre.JAZZ

    def test_from_env_unset(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.delenv(CONFIG_ENV_VAR, raising=False)
        assert ChordifyConfig.from_env() == ChordifyConfig()


class TestYamlRecordStore:
    def test_write_load_remove(self, temp_dir: Path) -> None:
        store = YamlRecordStore(temp_dir, ".record.yaml")
        store.write("a", {"value": 1})
        store.write("b", {"value": 2})
        assert store.load_all() == {"a": {"value": 1}, "b": {"value": 2}}

        assert store.remove("a")
        assert not store.remove("a")
        assert store.load_all() == {"b": {"value": 2}}

    def test_skips_malformed_files(self, temp_dir: Path) -> None:
        store = YamlRecordStore(temp_dir, ".record.yaml")
        store.write("good", {"value": 1})
        (temp_dir / "list.record.yaml").write_text("- 1\n- 2\n")
        (temp_dir / "broken.record.yaml").write_text("key: [unclosed\n")
        assert store.load_all() == {"good": {"value": 1}}

    def test_missing_directory(self, temp_dir: Path) -> None:
        assert YamlRecordStore(temp_dir / "absent", ".x.yaml").load_all() == {}


def _stores(data_dir: Path):
    manager = ProgressionManager(YamlRecordStore(data_dir / "progressions", ".progression.yaml"))
    playback = PlaybackSettingsStore(
        manager, YamlRecordStore(data_dir / "playback", ".playback.yaml")
    )
    preferences = SuggestionPreferencesStore(
        manager, YamlRecordStore(data_dir / "preferences", ".preferences.yaml")
    )
    return manager, playback, preferences


class TestPersistence:
    @pytest.mark.asyncio
    async def test_reload(self, temp_dir: Path) -> None:
        manager, playback, preferences = _stores(temp_dir)
        progression = await manager.create("Saved")
        await manager.add_slot(progression.id)
        await manager.add_slot(progression.id)
        await manager.set_chord(progression.id, 1, "Bbmaj7")
        await playback.initialize(progression.id)
        await playback.set_instrument(progression.id, "Synthesizer")
        await preferences.initialize(progression.id)
        await preferences.set_key(progression.id, "F")

        manager2, playback2, preferences2 = _stores(temp_dir)
        assert manager2.load() == 1
        assert playback2.load() == 1
        assert preferences2.load() == 1

        restored = await manager2.get(progression.id)
        assert restored.name == "Saved"
        assert restored.chords() == [None, "Bbmaj7"]
        assert (await playback2.get(progression.id)).instrument == Instrument.SYNTHESIZER
        assert (await preferences2.get(progression.id)).key == "F"

    @pytest.mark.asyncio
    async def test_delete_removes_files(self, temp_dir: Path) -> None:
        manager, playback, _ = _stores(temp_dir)
        progression = await manager.create("Gone")
        await playback.initialize(progression.id)
        await manager.delete(progression.id)

        manager2, playback2, _ = _stores(temp_dir)
        assert manager2.load() == 0
        assert playback2.load() == 0
        assert list((temp_dir / "playback").glob("*.yaml")) == []

    @pytest.mark.asyncio
    async def test_orphaned_settings_dropped(self, temp_dir: Path) -> None:
        YamlRecordStore(temp_dir / "playback", ".playback.yaml").write(
            "ghost", {"progression_id": "ghost", "instrument": "Piano", "seconds_per_chord": 2.0}
        )
        manager, playback, _ = _stores(temp_dir)
        manager.load()
        assert playback.load() == 0
        assert not (temp_dir / "playback" / "ghost.playback.yaml").exists()

    @pytest.mark.asyncio
    async def test_reload_keeps_creation_order(self, temp_dir: Path) -> None:
        manager, _, _ = _stores(temp_dir)
        names = [f"P{index}" for index in range(8)]
        for name in names:
            await manager.create(name)

        manager2, _, _ = _stores(temp_dir)
        manager2.load()
        assert [s.name for s in await manager2.list_progressions()] == names

    @pytest.mark.asyncio
    async def test_failed_cascade_removal_keeps_records(
        self, temp_dir: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        manager, playback, preferences = _stores(temp_dir)
        progression = await manager.create("Kept")
        await playback.initialize(progression.id)
        await preferences.initialize(progression.id)

        def fail(key: str) -> bool:
            raise OSError("read-only file system")

        monkeypatch.setattr(preferences._storage, "remove", fail)
        with pytest.raises(OSError):
            await manager.delete(progression.id)

        assert (await manager.get(progression.id)).name == "Kept"
        assert (await playback.get(progression.id)).progression_id == progression.id
        assert (await preferences.get(progression.id)).progression_id == progression.id
