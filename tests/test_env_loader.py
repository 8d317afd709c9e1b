"""Tests for envcfg.config.env_loader: .env file + environment binding."""

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional
from unittest.mock import patch

import pytest

from envcfg import (
    EnvLoader,
    Float32,
    InvalidTargetError,
    MalformedLineError,
    SourceReadError,
    TypeCoercionError,
    UInt,
    UnsupportedFieldTypeError,
    env_field,
    load,
    load_file,
)

ENV = {
    "BOOL_FIELD": "true",
    "INT_FIELD": "-8",
    "UINT_FIELD": "7",
    "FLOAT_FIELD": "16.5",
    "STRING_FIELD": "32",
}

ENV_FILE_CONTENT = """
BOOL_FIELD=true
 INT_FIELD = 4
UINT_FIELD= 11
 # FLOAT_FIELD=8.25
STRING_FIELD=ABC"""


@dataclass
class Cfg:
    bool_field: bool = env_field("BOOL_FIELD", default=False)
    int_field: int = env_field("INT_FIELD", default=0)
    uint_field: UInt = env_field("UINT_FIELD", default=0)
    float_field: Float32 = env_field("FLOAT_FIELD", default=0.0)
    string_field: str = env_field("STRING_FIELD", default="")


@pytest.fixture
def env_file(tmp_path: Path) -> Path:
    path = tmp_path / "settings.env"
    path.write_text(ENV_FILE_CONTENT)
    return path


@pytest.fixture
def workdir(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Empty working directory, so load() finds no .env."""
    cwd = tmp_path / "cwd"
    cwd.mkdir()
    monkeypatch.chdir(cwd)
    return cwd


def test_field_visibility(workdir: Path) -> None:
    @dataclass
    class VisibilityCfg:
        bool_field: bool = False
        int_field: int = env_field("", default=0)
        _float_field: float = env_field("FLOAT_FIELD", default=0.0)
        string_field: str = env_field("STRING_FIELD", default="")

    with patch.dict(os.environ, ENV, clear=True):
        cfg = load(VisibilityCfg())

    assert cfg == VisibilityCfg(string_field="32")


def test_override_from_env(workdir: Path) -> None:
    with patch.dict(os.environ, ENV, clear=True):
        cfg = load(Cfg())

    assert cfg == Cfg(
        bool_field=True,
        int_field=-8,
        uint_field=7,
        float_field=16.5,
        string_field="32",
    )


def test_override_from_file(env_file: Path) -> None:
    with patch.dict(os.environ, {}, clear=True):
        cfg = load_file(env_file, Cfg())

    assert cfg == Cfg(
        bool_field=True,
        int_field=4,
        uint_field=11,
        float_field=0.0,
        string_field="ABC",
    )


def test_override_all(env_file: Path) -> None:
    with patch.dict(os.environ, ENV, clear=True):
        cfg = load_file(env_file, Cfg())

    assert cfg == Cfg(
        bool_field=True,
        int_field=-8,
        uint_field=7,
        float_field=16.5,
        string_field="32",
    )


def test_nested_struct(workdir: Path) -> None:
    @dataclass
    class Nested:
        value: int = env_field("INT_FIELD", default=0)

    @dataclass
    class NestedCfg:
        flag: bool = env_field("BOOL_FIELD", default=False)
        more: Nested = field(default_factory=Nested)

    with patch.dict(os.environ, ENV, clear=True):
        cfg = load(NestedCfg())

    assert cfg == NestedCfg(flag=True, more=Nested(value=-8))


class TestDefaults:
    """Fields untouched by every source keep their defaults."""

    def test_no_sources_keeps_defaults(self, workdir: Path) -> None:
        defaults = Cfg(bool_field=True, int_field=3, uint_field=5, float_field=1.5, string_field="x")

        with patch.dict(os.environ, {}, clear=True):
            cfg = load(Cfg(bool_field=True, int_field=3, uint_field=5, float_field=1.5, string_field="x"))

        assert cfg == defaults

    def test_load_returns_same_instance(self, workdir: Path) -> None:
        target = Cfg()
        with patch.dict(os.environ, ENV, clear=True):
            assert load(target) is target

    def test_unrelated_environment_is_ignored(self, workdir: Path) -> None:
        with patch.dict(os.environ, {"OTHER": "value", "HOME": "/root"}, clear=True):
            cfg = load(Cfg(string_field="default"))

        assert cfg.string_field == "default"


class TestEnvFile:
    """Behaviour of the .env file pass."""

    def test_load_reads_dotenv_in_working_directory(self, workdir: Path) -> None:
        (workdir / ".env").write_text("STRING_FIELD=from-dotenv\n")

        with patch.dict(os.environ, {}, clear=True):
            cfg = load(Cfg())

        assert cfg.string_field == "from-dotenv"

    def test_missing_file_is_not_an_error(self, tmp_path: Path) -> None:
        with patch.dict(os.environ, {"STRING_FIELD": "env"}, clear=True):
            cfg = load_file(tmp_path / "does-not-exist.env", Cfg())

        assert cfg.string_field == "env"

    def test_round_trip_string(self, tmp_path: Path) -> None:
        path = tmp_path / ".env"
        path.write_text("STRING_FIELD=value")

        with patch.dict(os.environ, {}, clear=True):
            cfg = load_file(path, Cfg())

        assert cfg.string_field == "value"

    def test_malformed_file_raises(self, tmp_path: Path) -> None:
        path = tmp_path / ".env"
        path.write_text("STRING_FIELD=ok\nNOT A PAIR\n")

        with patch.dict(os.environ, {}, clear=True):
            with pytest.raises(MalformedLineError) as exc_info:
                load_file(path, Cfg())

        assert exc_info.value.line == "NOT A PAIR"

    def test_malformed_file_skips_environment_pass(self, tmp_path: Path) -> None:
        path = tmp_path / ".env"
        path.write_text("broken\n")
        cfg = Cfg()

        with patch.dict(os.environ, {"STRING_FIELD": "env"}, clear=True):
            with pytest.raises(MalformedLineError):
                load_file(path, cfg)

        assert cfg.string_field == ""

    def test_directory_path_raises_source_read_error(self, tmp_path: Path) -> None:
        with patch.dict(os.environ, {"STRING_FIELD": "env"}, clear=True):
            with pytest.raises(SourceReadError) as exc_info:
                load_file(tmp_path, Cfg())

        assert exc_info.value.path == str(tmp_path)

    def test_invalid_utf8_raises_source_read_error(self, tmp_path: Path) -> None:
        path = tmp_path / ".env"
        path.write_bytes(b"STRING_FIELD=\xff\xfe\n")

        with patch.dict(os.environ, {}, clear=True):
            with pytest.raises(SourceReadError):
                load_file(path, Cfg())

    def test_inner_whitespace_preserved(self, tmp_path: Path) -> None:
        path = tmp_path / ".env"
        path.write_text(" STRING_FIELD = value with internal spaces \n")

        with patch.dict(os.environ, {}, clear=True):
            cfg = load_file(path, Cfg())

        assert cfg.string_field == "value with internal spaces"

    def test_empty_path_is_a_missing_file(self, workdir: Path) -> None:
        (workdir / ".env").write_text("STRING_FIELD=from-cwd-dotenv\n")

        with patch.dict(os.environ, {}, clear=True):
            cfg = load_file("", Cfg(string_field="default"))

        assert cfg.string_field == "default"

    @pytest.mark.skipif(
        not hasattr(os, "geteuid") or os.geteuid() == 0,
        reason="root ignores file permissions",
    )
    def test_unreadable_file_skips_environment_pass(self, tmp_path: Path) -> None:
        path = tmp_path / ".env"
        path.write_text("STRING_FIELD=file\n")
        path.chmod(0)
        cfg = Cfg()

        try:
            with patch.dict(os.environ, {"STRING_FIELD": "env"}, clear=True):
                with pytest.raises(SourceReadError) as exc_info:
                    load_file(path, cfg)
        finally:
            path.chmod(0o600)

        assert exc_info.value.path == str(path)
        assert cfg.string_field == ""

    def test_removed_working_directory(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        gone = tmp_path / "gone"
        gone.mkdir()
        monkeypatch.chdir(gone)
        gone.rmdir()

        with patch.dict(os.environ, {"STRING_FIELD": "env"}, clear=True):
            with pytest.raises(SourceReadError) as exc_info:
                load(Cfg())

        assert exc_info.value.code == "SOURCE_READ"

    def test_last_duplicate_wins(self, tmp_path: Path) -> None:
        path = tmp_path / ".env"
        path.write_text("INT_FIELD=1\nINT_FIELD=2\n")

        with patch.dict(os.environ, {}, clear=True):
            cfg = load_file(path, Cfg())

        assert cfg.int_field == 2


class TestErrors:
    """Errors raised by load and load_file."""

    @pytest.mark.parametrize("target", [None, Cfg, object(), {"STRING_FIELD": "x"}, 42])
    def test_invalid_target(self, workdir: Path, target) -> None:
        with pytest.raises(InvalidTargetError) as exc_info:
            load(target)

        assert exc_info.value.code == "INVALID_TARGET"

    def test_frozen_target_rejected(self, workdir: Path) -> None:
        @dataclass(frozen=True)
        class Frozen:
            name: str = env_field("STRING_FIELD", default="")

        with patch.dict(os.environ, ENV, clear=True):
            with pytest.raises(InvalidTargetError):
                load(Frozen())

    def test_type_coercion_error_carries_key_and_value(self, workdir: Path) -> None:
        with patch.dict(os.environ, {"INT_FIELD": "four"}, clear=True):
            with pytest.raises(TypeCoercionError) as exc_info:
                load(Cfg())

        assert exc_info.value.key == "INT_FIELD"
        assert exc_info.value.value == "four"
        assert exc_info.value.kind == "int64"

    def test_coercion_failure_stops_later_fields(self, workdir: Path) -> None:
        cfg = Cfg()
        env = {"BOOL_FIELD": "true", "INT_FIELD": "x", "STRING_FIELD": "later"}

        with patch.dict(os.environ, env, clear=True):
            with pytest.raises(TypeCoercionError):
                load(cfg)

        assert cfg.bool_field is True
        assert cfg.string_field == ""

    def test_negative_unsigned_rejected(self, workdir: Path) -> None:
        with patch.dict(os.environ, {"UINT_FIELD": "-1"}, clear=True):
            with pytest.raises(TypeCoercionError):
                load(Cfg())

    def test_unsupported_type_when_key_present(self, workdir: Path) -> None:
        @dataclass
        class ListCfg:
            items: List[str] = env_field("ITEMS", default_factory=list)

        with patch.dict(os.environ, {"ITEMS": "a,b"}, clear=True):
            with pytest.raises(UnsupportedFieldTypeError) as exc_info:
                load(ListCfg())

        assert exc_info.value.key == "ITEMS"

    def test_unsupported_type_ignored_when_key_absent(self, workdir: Path) -> None:
        @dataclass
        class OptionalCfg:
            name: Optional[str] = env_field("NAME", default=None)

        with patch.dict(os.environ, {}, clear=True):
            cfg = load(OptionalCfg())

        assert cfg.name is None


class TestOverridesAndInjection:
    """Explicit overrides and injected environments."""

    def test_overrides_take_precedence(self, env_file: Path) -> None:
        with patch.dict(os.environ, ENV, clear=True):
            cfg = load_file(env_file, Cfg(), overrides={"INT_FIELD": 99, "BOOL_FIELD": False})

        assert cfg.int_field == 99
        assert cfg.bool_field is False
        assert cfg.string_field == "32"

    def test_overrides_applied_verbatim(self, workdir: Path) -> None:
        @dataclass
        class OddKeys:
            hashed: str = env_field("#HASHED", default="")
            with_equals: str = env_field("A=B", default="")
            padded: str = env_field("PADDED", default="")

        with patch.dict(os.environ, {}, clear=True):
            cfg = load(OddKeys(), overrides={"#HASHED": "kept", "A=B": "c", "PADDED": "  spaced  "})

        assert cfg.hashed == "kept"
        assert cfg.with_equals == "c"
        assert cfg.padded == "  spaced  "

    def test_injected_environ_replaces_os_environ(self, env_file: Path) -> None:
        with patch.dict(os.environ, {"STRING_FIELD": "os"}, clear=True):
            cfg = load_file(env_file, Cfg(), environ={"UINT_FIELD": "3"})

        assert cfg.uint_field == 3
        assert cfg.string_field == "ABC"

    def test_env_loader_object_form(self, env_file: Path) -> None:
        loader = EnvLoader(env_file, environ={"INT_FIELD": "-1"})

        cfg = loader.load(Cfg())

        assert cfg.int_field == -1
        assert cfg.string_field == "ABC"

    def test_env_loader_defaults_to_cwd_dotenv(self, workdir: Path) -> None:
        assert EnvLoader().resolve_env_file() == Path.cwd() / ".env"

    def test_duplicate_keys_fan_out(self, workdir: Path) -> None:
        @dataclass
        class Inner:
            port: int = env_field("PORT", default=0)

        @dataclass
        class FanOutCfg:
            port: int = env_field("PORT", default=0)
            inner: Inner = field(default_factory=Inner)

        with patch.dict(os.environ, {"PORT": "8080"}, clear=True):
            cfg = load(FanOutCfg())

        assert cfg.port == 8080
        assert cfg.inner.port == 8080

    def test_unassigned_init_false_field_is_bound(self, workdir: Path) -> None:
        @dataclass
        class LateCfg:
            port: int = env_field("PORT", init=False)

        with patch.dict(os.environ, {"PORT": "80"}, clear=True):
            cfg = load(LateCfg())

        assert cfg.port == 80

    def test_float32_overflow_rejected(self, workdir: Path) -> None:
        with patch.dict(os.environ, {"FLOAT_FIELD": "1e39"}, clear=True):
            with pytest.raises(TypeCoercionError) as exc_info:
                load(Cfg())

        assert exc_info.value.kind == "float32"


class _RecordingLogger:
    def __init__(self) -> None:
        self.records = []

    def debug(self, message, **kwargs):
        self.records.append((message, kwargs))


def test_loader_logs_bound_counts(env_file: Path) -> None:
    logger = _RecordingLogger()

    with patch.dict(os.environ, {"INT_FIELD": "1"}, clear=True):
        load_file(env_file, Cfg(), logger=logger)  # type: ignore[arg-type]

    messages = [message for message, _ in logger.records]
    assert messages[0] == "Collected bindable fields"
    bound = [kwargs["bound"] for message, kwargs in logger.records if message == "Bound fields from source"]
    assert bound == [4, 1]
    assert "Env file not found, skipping" not in messages


def test_loader_logs_missing_file(tmp_path: Path) -> None:
    logger = _RecordingLogger()
    missing = tmp_path / "missing.env"

    with patch.dict(os.environ, {}, clear=True):
        load_file(missing, Cfg(), logger=logger)  # type: ignore[arg-type]

    assert ("Env file not found, skipping", {"path": str(missing)}) in logger.records
