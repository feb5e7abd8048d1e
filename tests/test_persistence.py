"""Tests for saving and loading the registry file."""

import json
from datetime import date

import pytest

from animal_registry.db.persistence import load_registry, save_registry
from animal_registry.errors import CorruptData, IOFailure
from animal_registry.models.animal import AnimalKind, AnimalRecord
from animal_registry.services.registry_service import RegistryService

BIRTH = date(2020, 1, 1)


@pytest.fixture
def registry_file(tmp_path):
    return tmp_path / "animals.json"


@pytest.fixture
def registry(registry_file) -> RegistryService:
    registry = RegistryService(registry_file)
    registry.add_animal("dog", "Rex", BIRTH, ["sit", "stay"])
    registry.add_animal("camel", "Sahara", date(2015, 7, 3), ["kneel"])
    registry.add_animal("hamster", "Хома", date(2023, 2, 14), [])
    return registry


def _write(path, content: str) -> None:
    path.write_text(content, encoding="utf-8")


class TestCodec:
    """save_registry / load_registry."""

    def test_round_trip(self, registry_file):
        animals = [
            AnimalRecord(id=2, kind="donkey", name="Eeyore", birth_date=BIRTH, commands=["Carry", "stop"]),
            AnimalRecord(id=5, kind="cat", name="Tom", birth_date=date(2019, 12, 31)),
        ]
        save_registry(animals, registry_file)
        assert load_registry(registry_file) == animals

    def test_file_format(self, registry_file):
        save_registry([AnimalRecord(id=1, kind="dog", name="Rex", birth_date=BIRTH, commands=["sit"])], registry_file)
        data = json.loads(registry_file.read_text(encoding="utf-8"))
        assert data == {
            "animals": [
                {"kind": "dog", "name": "Rex", "birth_date": "2020-01-01", "commands": ["sit"], "id": 1}
            ]
        }

    def test_save_leaves_no_temp_files(self, registry_file):
        save_registry([], registry_file)
        assert [p.name for p in registry_file.parent.iterdir()] == ["animals.json"]

    def test_save_to_missing_directory(self, tmp_path):
        with pytest.raises(IOFailure):
            save_registry([], tmp_path / "missing" / "animals.json")

    def test_load_missing_file(self, registry_file):
        with pytest.raises(IOFailure):
            load_registry(registry_file)

    @pytest.mark.parametrize(
        "content",
        [
            "not json",
            "[]",
            '{"animals": {}}',
            '{"animals": [{"id": 1, "kind": "unicorn", "name": "X", "birth_date": "2020-01-01"}]}',
            '{"animals": [{"id": 1, "kind": "dog", "name": "X", "birth_date": "2020-02-30"}]}',
            '{"animals": [{"id": 1, "kind": "dog", "birth_date": "2020-01-01"}]}',
            '{"animals": [{"id": ' + "1" * 5000 + ', "kind": "dog", "name": "X", "birth_date": "2020-01-01"}]}',
            "[" * 100000,
            '{"animals": [{"id": 0, "kind": "dog", "name": "X", "birth_date": "2020-01-01"}]}',
        ],
    )
    def test_load_corrupt(self, registry_file, content):
        _write(registry_file, content)
        with pytest.raises(CorruptData):
            load_registry(registry_file)

    def test_load_binary_garbage(self, registry_file):
        registry_file.write_bytes(b"\xff\xfe\x00\x81")
        with pytest.raises(CorruptData):
            load_registry(registry_file)


class TestServiceSaveLoad:
    """Whole-registry save/load through the service."""

    def test_load_reproduces_registry(self, registry, registry_file):
        before = registry.list_animals()
        assert registry.save() == 3

        restored = RegistryService(registry_file)
        assert restored.load() == 3
        assert restored.list_animals() == before
        assert restored.next_id == 4

    def test_next_id_after_load_skips_deleted(self, registry, registry_file):
        registry.remove(1)
        registry.save()

        restored = RegistryService(registry_file)
        restored.load()
        assert [a.id for a in restored.list_animals()] == [2, 3]
        assert restored.add_animal("horse", "Bolt", BIRTH).id == 4

    def test_load_replaces_existing_records(self, registry, registry_file):
        registry.save()
        registry.add_animal("cat", "Tom", BIRTH)
        registry.remove(1)
        registry.load()
        assert [a.name for a in registry.list_animals()] == ["Rex", "Sahara", "Хома"]
        assert registry.next_id == 4

    def test_load_lowers_next_id(self, registry, registry_file):
        save_registry([AnimalRecord(id=1, kind="dog", name="Rex", birth_date=BIRTH)], registry_file)
        registry.load()
        assert registry.next_id == 2

    def test_load_empty_file_resets_ids(self, registry, registry_file):
        save_registry([], registry_file)
        assert registry.load() == 0
        assert registry.list_animals() == []
        assert registry.next_id == 1

    def test_failed_load_keeps_registry(self, registry, registry_file):
        before = registry.list_animals()
        with pytest.raises(IOFailure):
            registry.load()
        _write(registry_file, '{"animals": [1, 2, 3]}')
        with pytest.raises(CorruptData):
            registry.load()
        assert registry.list_animals() == before
        assert registry.next_id == 4

    def test_duplicate_ids_in_file(self, registry, registry_file):
        record = {"id": 1, "kind": "dog", "name": "Rex", "birth_date": "2020-01-01", "commands": []}
        _write(registry_file, json.dumps({"animals": [record, record]}))
        with pytest.raises(CorruptData):
            registry.load()
        assert len(registry.list_animals()) == 3

    def test_failed_save_keeps_previous_file(self, registry, registry_file, monkeypatch):
        registry.save()
        original = registry_file.read_text(encoding="utf-8")
        registry.add_animal("cat", "Tom", BIRTH)

        def fail_replace(src, dst):
            raise OSError("disk full")

        monkeypatch.setattr("animal_registry.db.persistence.os.replace", fail_replace)
        with pytest.raises(IOFailure):
            registry.save()
        assert registry_file.read_text(encoding="utf-8") == original
        assert [p.name for p in registry_file.parent.iterdir()] == ["animals.json"]
        assert {a.kind for a in registry.list_animals()} >= {AnimalKind.CAT}
