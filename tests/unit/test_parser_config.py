import json

from app.config import (
    ParserConfig,
    get_parser_config,
    load_parser_config,
    reset_parser_config_cache,
)


def test_default_config_matches_bundled_resource() -> None:
    config = load_parser_config()
    assert isinstance(config, ParserConfig)
    assert config == ParserConfig(
        mode="strict",
        max_vlq_bytes=4,
        text_encoding="latin-1",
        default_tempo_us=500_000,
    )


def test_get_parser_config_is_cached() -> None:
    first = get_parser_config()
    assert get_parser_config() is first
    reset_parser_config_cache()
    assert get_parser_config() == first


def test_load_parser_config_from_custom_path(tmp_path) -> None:
    custom_config = {
        "parser": {"mode": "Lenient", "max_vlq_bytes": 3, "text_encoding": "utf-8"},
        "playback": {"default_tempo_us": 750000},
    }
    config_path = tmp_path / "smf.json"
    config_path.write_text(json.dumps(custom_config), encoding="utf-8")

    config = load_parser_config(config_path)

    assert config.mode == "lenient"
    assert config.max_vlq_bytes == 3
    assert config.text_encoding == "utf-8"
    assert config.default_tempo_us == 750_000


def test_invalid_config_values_fall_back_to_defaults(tmp_path) -> None:
    config_path = tmp_path / "smf.json"
    config_path.write_text(
        json.dumps(
            {
                "parser": {"mode": "turbo", "max_vlq_bytes": 12, "text_encoding": "klingon"},
                "playback": {"default_tempo_us": -5},
            }
        ),
        encoding="utf-8",
    )

    config = load_parser_config(config_path)

    assert config.mode == "strict"
    assert config.max_vlq_bytes == 4
    assert config.text_encoding == "latin-1"
    assert config.default_tempo_us == 500_000


def test_malformed_or_missing_files_use_defaults(tmp_path) -> None:
    broken = tmp_path / "broken.json"
    broken.write_text("{not json", encoding="utf-8")

    assert load_parser_config(broken) == ParserConfig()
    assert load_parser_config(tmp_path / "absent.json") == ParserConfig()
