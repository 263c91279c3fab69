"""
Tests for panel configuration.

Tests:
- Defaults
- Environment variable overrides
- Global config caching
"""

from panelscore.config import PanelConfig, get_panel_config, reset_panel_config


class TestPanelConfig:
    """Tests for PanelConfig."""
    
    def test_defaults(self):
        """Test default settings."""
        config = PanelConfig()
        
        assert config.weight_tolerance == 0.001
        assert config.changed_threshold == 0.01
        assert config.convergence_dimension == "code_quality"
        assert config.history_base_dir == ".evaluated-commits"
        assert config.input_price_per_million == 3.0
        assert config.output_price_per_million == 15.0
    
    def test_from_env(self, monkeypatch):
        """Test that environment variables override defaults."""
        monkeypatch.setenv("PANELSCORE_HISTORY_DIR", "/tmp/history")
        monkeypatch.setenv("PANELSCORE_CONVERGENCE_MIN_PANEL_SIZE", "5")
        monkeypatch.setenv("PANELSCORE_CHANGED_THRESHOLD", "0.5")
        
        config = PanelConfig.from_env()
        
        assert config.history_base_dir == "/tmp/history"
        assert config.convergence_min_panel_size == 5
        assert config.changed_threshold == 0.5
    
    def test_invalid_env_value_uses_default(self, monkeypatch):
        """Test that unparseable numbers fall back to defaults."""
        monkeypatch.setenv("PANELSCORE_BATCH_MAX_WORKERS", "many")
        
        assert PanelConfig.from_env().batch_max_workers == 4
    
    def test_to_dict(self):
        """Test serialization."""
        data = PanelConfig().to_dict()
        
        assert data["history_filename"] == "history.json"
        assert data["weights_path"] is None


class TestGlobalConfig:
    """Tests for the global config accessor."""
    
    def test_cached(self):
        """Test that the global config is loaded once."""
        assert get_panel_config() is get_panel_config()
    
    def test_force_reload(self, monkeypatch):
        """Test that force_reload picks up new environment values."""
        get_panel_config()
        monkeypatch.setenv("PANELSCORE_TREND_THRESHOLD", "0.7")
        
        assert get_panel_config(force_reload=True).trend_threshold == 0.7
    
    def test_reset(self):
        """Test that reset drops the cached instance."""
        first = get_panel_config()
        reset_panel_config()
        
        assert get_panel_config() is not first
