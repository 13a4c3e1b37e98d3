import pytest
import yaml

from rolegate.infra.documents import read_collection, write_collection


def test_missing_file_is_an_empty_collection(tmp_path):
    assert read_collection(tmp_path / "nope.yml", "users") == {}


def test_non_mapping_content_is_skipped(tmp_path):
    path = tmp_path / "users.yml"
    path.write_text("- just\n- a list\n", encoding="utf-8")
    assert read_collection(path, "users") == {}

    path.write_text("users:\n  a: {name: Ann}\n  b: not-a-mapping\n", encoding="utf-8")
    assert read_collection(path, "users") == {"a": {"name": "Ann"}}


def test_unparseable_yaml_raises(tmp_path):
    path = tmp_path / "users.yml"
    path.write_text("users: {a: {name: Ann", encoding="utf-8")
    with pytest.raises(yaml.YAMLError):
        read_collection(path, "users")


def test_write_replaces_the_document(tmp_path):
    path = tmp_path / "data" / "users.yml"
    write_collection(path, "users", {"a": {"name": "Ann"}})
    write_collection(path, "users", {"b": {"name": "Bob"}})
    assert read_collection(path, "users") == {"b": {"name": "Bob"}}
    assert [p.name for p in path.parent.iterdir()] == ["users.yml"]
