import json

import pytest

from lsystem_fractal.config import (
    ConfigManager,
    EnvironmentConfig,
    RenderConfig,
    load_config_from_args,
)


class TestRenderConfig:
    def test_defaults_valid(self) -> None:
        RenderConfig().validate()

    @pytest.mark.parametrize("overrides", [
        {'width': 0},
        {'height': -1},
        {'margin': -1},
        {'margin': 600},
        {'line_width': 0},
        {'background': (0, 0, 0)},
        {'gradient_end': (0, 0, 0, 256)},
        {'gradient_count': 1},
        {'max_symbols': 0},
        {'jpeg_quality': 101},
    ])
    def test_invalid(self, overrides) -> None:
        config = RenderConfig(**overrides)
        with pytest.raises(ValueError):
            config.validate()

    def test_dict_round_trip(self) -> None:
        config = RenderConfig(width=300, background=(1, 2, 3, 4))
        data = config.to_dict()
        assert data['background'] == [1, 2, 3, 4]
        assert RenderConfig.from_dict(json.loads(json.dumps(data))) == config

    def test_unknown_keys_rejected(self) -> None:
        with pytest.raises(ValueError, match="Unknown render settings: colour"):
            RenderConfig.from_dict({'colour': 'red'})


class TestEnvironmentConfig:
    def test_overrides(self) -> None:
        env = {
            'LSYSTEM_FRACTAL_WIDTH': '640',
            'LSYSTEM_FRACTAL_SAVE_METADATA': 'no',
            'LSYSTEM_FRACTAL_BACKGROUND': '10,20,30,255',
            'UNRELATED': 'x',
        }
        overrides = EnvironmentConfig(env).overrides()
        assert overrides == {
            'width': 640,
            'save_metadata': False,
            'background': (10, 20, 30, 255),
        }

    def test_apply(self) -> None:
        config = EnvironmentConfig({'LSYSTEM_FRACTAL_MAX_SYMBOLS': '10'}).apply(RenderConfig())
        assert config.max_symbols == 10

    def test_invalid_value(self) -> None:
        with pytest.raises(ValueError, match="Invalid value for height"):
            EnvironmentConfig({'LSYSTEM_FRACTAL_HEIGHT': 'tall'}).overrides()


class TestConfigManager:
    def test_save_and_load(self, tmp_path) -> None:
        manager = ConfigManager()
        path = tmp_path / "nested" / "config.json"
        manager.save_config(RenderConfig(height=200), path)

        data = manager.load_config(path)
        assert data['render']['height'] == 200
        assert manager.create_render_config(data) == RenderConfig(height=200)

    def test_malformed_json(self, tmp_path) -> None:
        path = tmp_path / "bad.json"
        path.write_text("{ not valid json }")
        with pytest.raises(ValueError, match="Invalid JSON"):
            ConfigManager().load_config(path)

    def test_non_object(self, tmp_path) -> None:
        path = tmp_path / "list.json"
        path.write_text("[1, 2]")
        with pytest.raises(ValueError, match="must be a JSON object"):
            ConfigManager().load_config(path)

    def test_missing_render_section_uses_defaults(self) -> None:
        assert ConfigManager().create_render_config({}) == RenderConfig()

    def test_load_config_from_args(self, tmp_path) -> None:
        path = tmp_path / "config.json"
        path.write_text(json.dumps({'render': {'width': 400, 'height': 300}}))
        config = load_config_from_args(path, environ={'LSYSTEM_FRACTAL_WIDTH': '500'})
        assert (config.width, config.height) == (500, 300)

    def test_load_config_from_args_without_file(self) -> None:
        assert load_config_from_args(None, environ={}) == RenderConfig()
