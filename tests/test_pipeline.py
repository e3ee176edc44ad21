import numpy as np

from twist_tower import TowerParams, generate_tower
from twist_tower.config import AppConfig, DetailSettings
from twist_tower.params import FacadeParams, PinchSpreadField


def test_generate_tower_builds_every_buffer():
    geometry = generate_tower(TowerParams(floor_count=5, facade=FacadeParams(tween_count=2)))
    assert len(geometry.layout) == 5
    assert geometry.tower.kind == 'triangles'
    assert geometry.rails.kind == 'triangles'
    assert geometry.tweens.kind == 'lines'
    assert geometry.floor_loops.kind == 'lines'


def test_no_floors_means_no_buffers():
    geometry = generate_tower(TowerParams(floor_count=0))
    assert len(geometry.layout) == 0
    assert geometry.tower is None
    assert geometry.rails is None and geometry.tweens is None and geometry.floor_loops is None
    assert geometry.export_buffer() is None


def test_single_floor_has_tower_but_no_facade():
    geometry = generate_tower(TowerParams(floor_count=1))
    assert geometry.tower is not None
    assert geometry.rails is None
    assert geometry.export_buffer().primitive_count == geometry.tower.primitive_count


def test_regeneration_is_pure():
    """Two passes over the same parameters give identical buffers."""
    params = TowerParams(
        floor_count=6, max_twist=180.0,
        facade=FacadeParams(tween_count=2, pinch=PinchSpreadField(enabled=True, strength=0.8)),
    )
    a, b = generate_tower(params), generate_tower(params)
    for name in ('tower', 'rails', 'tweens', 'floor_loops'):
        np.testing.assert_array_equal(getattr(a, name).positions, getattr(b, name).positions)


def test_detail_settings_control_sampling():
    params = TowerParams(
        floor_count=3,
        facade=FacadeParams(tween_count=1, pinch=PinchSpreadField(enabled=True, strength=-1.0)),
    )
    coarse = DetailSettings(tween_base_samples=1, loop_base_samples=1, spline_max_detail=8)
    fine = generate_tower(params)
    rough = generate_tower(params, detail=coarse)
    assert rough.tweens.primitive_count < fine.tweens.primitive_count


def test_app_config_from_env(monkeypatch):
    monkeypatch.setenv("TWIST_TOWER_LOG_LEVEL", "debug")
    monkeypatch.setenv("TWIST_TOWER_CORS_ORIGINS", "http://a.test, http://b.test")
    config = AppConfig.from_env()
    assert config.log_level == "DEBUG"
    assert config.cors_origins == ["http://a.test", "http://b.test"]

    monkeypatch.delenv("TWIST_TOWER_CORS_ORIGINS")
    assert AppConfig.from_env().cors_origins == ["http://localhost:3000", "http://127.0.0.1:3000"]
