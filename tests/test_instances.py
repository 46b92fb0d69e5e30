import gc
import json
from datetime import timedelta
from uuid import uuid4

import pytest
from pydantic import ValidationError

from instances import (
    InstanceError,
    InstanceModel,
    InstanceNotFoundError,
    InstanceStore,
    ModLoaders,
    ModModel,
    RAMInfo,
    sanitize_directory_name,
)


@pytest.fixture
def store(tmp_path):
    return InstanceStore(tmp_path / "instances")


def test_create_disambiguates_directories(store):
    created = [store.create(InstanceModel(name="Test")) for _ in range(3)]

    assert [i.path.name for i in created] == ["Test", "Test (1)", "Test (2)"]
    assert len({i.id for i in created}) == 3
    for instance in created:
        assert (instance.path / "instance.json").is_file()
        assert instance.path.parent == store.root


def test_directory_collision_is_case_insensitive(store):
    (store.root / "test").mkdir()

    instance = store.create(InstanceModel(name="TEST"))

    assert instance.path.name == "TEST (1)"


def test_create_never_reuses_a_plain_file_name(store):
    (store.root / "Pack").write_text("not a directory")

    assert store.create(InstanceModel(name="Pack")).path.name == "Pack (1)"


def test_illegal_characters_are_replaced(store):
    instance = store.create(InstanceModel(name='My: "Pack"/1.20?'))

    assert instance.path.name == "My- -Pack--1.20-"
    assert instance.name == 'My: "Pack"/1.20?'


@pytest.mark.parametrize("name, expected", [("", "instance"), ("..", "instance"), ("Pack.", "Pack"), ("a\tb", "a-b")])
def test_sanitize_directory_name(name, expected):
    assert sanitize_directory_name(name) == expected


def test_create_rejects_registered_id(store):
    instance = store.create(InstanceModel(name="Once"))

    with pytest.raises(InstanceError):
        store.create(instance)


def test_save_bumps_last_modified_and_persists(store):
    instance = store.create(InstanceModel(name="Vanilla"))
    previous = instance.last_modified

    instance.description = "updated"
    saved = store.save(instance.id, instance)

    assert saved.last_modified >= previous
    on_disk = json.loads((instance.path / "instance.json").read_text())
    assert on_disk["description"] == "updated"
    assert InstanceModel.model_validate(on_disk).last_modified == saved.last_modified


def test_last_modified_never_goes_backwards(store):
    instance = store.create(InstanceModel(name="Future"))
    future = instance.last_modified + timedelta(days=1)
    instance.last_modified = future

    store.save(instance.id, instance)

    assert instance.last_modified == future


def test_save_requires_created_instance(store):
    instance = InstanceModel(name="Loose")

    with pytest.raises(InstanceError):
        store.save(instance.id, instance)


def test_save_rejects_mismatched_id(store):
    instance = store.create(InstanceModel(name="Mismatch"))

    with pytest.raises(InstanceError):
        store.save(uuid4(), instance)


def test_load_all_skips_malformed_files(tmp_path):
    root = tmp_path / "instances"
    first = InstanceStore(root)
    ids = {first.create(InstanceModel(name=f"Pack {n}")).id for n in range(3)}
    broken = root / "Broken"
    broken.mkdir()
    (broken / "instance.json").write_text("{ not json")

    second = InstanceStore(root)

    assert set(second.instances) == ids
    assert len(second) == 3


def test_load_all_skips_files_that_are_not_utf8(tmp_path):
    root = tmp_path / "instances"
    good = InstanceStore(root).create(InstanceModel(name="Good"))
    bad = root / "Bad"
    bad.mkdir()
    (bad / "instance.json").write_bytes(b'{"name": "\xff\xfe"}')

    store = InstanceStore(root)

    assert list(store.instances) == [good.id]
    with pytest.raises(InstanceError):
        store.load_one(bad)


def test_load_all_finds_nested_files(store):
    instance = InstanceModel(name="Nested")
    nested = store.root / "group" / "Nested"
    nested.mkdir(parents=True)
    (nested / "instance.json").write_text(instance.model_dump_json())

    store.load_all()

    assert store.by_id(instance.id).path == nested


def test_round_trip_keeps_fields(tmp_path):
    root = tmp_path / "instances"
    instance = InstanceStore(root).create(InstanceModel(
        name="Modded",
        minecraft_version="1.20.1",
        java_path="/usr/lib/jvm/java-17/bin/java",
        window_width=1280,
        window_height=720,
        ram=RAMInfo(minimum_ram_mb=2048, maximum_ram_mb=8192),
        mod_loader={"modloader": "fabric", "version": "0.15.11"},
    ))

    loaded = InstanceStore(root).by_id(instance.id)

    assert loaded.ram.maximum_ram_mb == 8192
    assert loaded.mod_loader.modloader is ModLoaders.FABRIC
    assert loaded.window_width == 1280
    assert loaded.last_modified == instance.last_modified


def test_load_one(store, tmp_path):
    other = InstanceStore(tmp_path / "elsewhere")
    instance = other.create(InstanceModel(name="Imported"))

    loaded = store.load_one(instance.path)

    assert loaded.id == instance.id
    assert store.by_id(instance.id) is loaded
    assert loaded.store is store
    assert store.load_one(tmp_path) is None


def test_load_one_malformed(store):
    directory = store.root / "bad"
    directory.mkdir()
    (directory / "instance.json").write_text('{"name": 3}')

    with pytest.raises(InstanceError):
        store.load_one(directory)


def test_add_mod_appends_and_saves(tmp_path):
    root = tmp_path / "instances"
    store = InstanceStore(root)
    instance = store.create(InstanceModel(name="Mods"))

    store.add_mod(instance, ModModel(name="Sodium", version="0.5.8", file_name="sodium.jar"))
    store.add_mod(instance, ModModel(name="Lithium"))

    reloaded = InstanceStore(root).by_id(instance.id)
    assert [m.name for m in reloaded.mods] == ["Sodium", "Lithium"]
    assert reloaded.mods[0].file_name == "sodium.jar"


def test_lookups(store):
    a = store.create(InstanceModel(name="Alpha"))
    b = store.create(InstanceModel(name="Alpha"))
    store.create(InstanceModel(name="Beta"))

    assert store.by_name("Alpha") == [a, b]
    assert store.by_name("alpha") == []
    assert store.first_by_name("Alpha") is a
    assert store.by_id(b.id) is b
    assert store.exists("Beta")
    assert not store.exists("Gamma")
    assert a.id in store


def test_by_id_unknown_raises(store):
    missing = uuid4()

    with pytest.raises(InstanceNotFoundError) as err:
        store.by_id(missing)
    assert err.value.key == missing

    with pytest.raises(KeyError):
        store.by_id(missing)


def test_first_by_name_unknown_raises(store):
    with pytest.raises(InstanceNotFoundError):
        store.first_by_name("nope")


def test_id_is_immutable(store):
    instance = store.create(InstanceModel(name="Fixed"))

    with pytest.raises(ValidationError):
        instance.id = uuid4()


def test_ram_bounds():
    with pytest.raises(ValidationError):
        RAMInfo(minimum_ram_mb=8192, maximum_ram_mb=1024)


def test_store_reference_is_not_owning(tmp_path):
    store = InstanceStore(tmp_path / "instances")
    instance = store.create(InstanceModel(name="Orphan"))
    assert instance.store is store

    del store
    gc.collect()

    assert instance.store is None
    assert "_store" not in instance.model_dump()
