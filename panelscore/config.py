"""
Panel Configuration for panelscore.

Centralized configuration for the consensus core:
- Weight table validation tolerance and optional override file
- Evolution "changed" threshold
- Convergence reference dimension and minimum panel size
- History storage location and trend threshold
- Token pricing for cost snapshots
- Batch evaluation parallelism

Supports environment variable overrides.
"""

import os
import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional

logger = logging.getLogger(__name__)


@dataclass
class PanelConfig:
    """
    Centralized configuration for the consensus core.
    
    All settings are configurable via environment variables.
    
    Attributes:
        weight_tolerance: Allowed deviation of a dimension's weight sum from 1.0
        weights_path: Optional JSON file overriding the default weight table
        
        changed_threshold: Minimum |latest - first| for a series to count as changed
        
        convergence_dimension: Reference dimension for the convergence score
        convergence_min_panel_size: Minimum raters in the evaluation before
            convergence is computed at all
        
        history_base_dir: Root directory of per-subject history documents
        history_filename: File name of the history document inside a subject dir
        trend_threshold: Minimum |last - first| for a history trend to be directional
        
        input_price_per_million: USD per one million input tokens
        output_price_per_million: USD per one million output tokens
        
        batch_max_workers: Thread pool size for batch evaluation
    """
    
    # Weights
    weight_tolerance: float = 0.001
    weights_path: Optional[str] = None
    
    # Evolution
    changed_threshold: float = 0.01
    
    # Convergence
    convergence_dimension: str = "code_quality"
    convergence_min_panel_size: int = 2
    
    # History
    history_base_dir: str = ".evaluated-commits"
    history_filename: str = "history.json"
    trend_threshold: float = 0.1
    
    # Token pricing (USD per 1M tokens)
    input_price_per_million: float = 3.0
    output_price_per_million: float = 15.0
    
    # Batch
    batch_max_workers: int = 4
    
    @classmethod
    def from_env(cls) -> "PanelConfig":
        """
        Create configuration from environment variables.
        
        Environment variables:
            PANELSCORE_WEIGHT_TOLERANCE: float
            PANELSCORE_WEIGHTS_PATH: path to a JSON weight table
            
            PANELSCORE_CHANGED_THRESHOLD: float
            
            PANELSCORE_CONVERGENCE_DIMENSION: dimension name
            PANELSCORE_CONVERGENCE_MIN_PANEL_SIZE: int
            
            PANELSCORE_HISTORY_DIR: directory path
            PANELSCORE_HISTORY_FILENAME: file name
            PANELSCORE_TREND_THRESHOLD: float
            
            PANELSCORE_INPUT_PRICE_PER_MILLION: float
            PANELSCORE_OUTPUT_PRICE_PER_MILLION: float
            
            PANELSCORE_BATCH_MAX_WORKERS: int
        """
        def get_float(key: str, default: float) -> float:
            try:
                return float(os.environ.get(key, default))
            except (ValueError, TypeError):
                return default
        
        def get_int(key: str, default: int) -> int:
            try:
                return int(os.environ.get(key, default))
            except (ValueError, TypeError):
                return default
        
        return cls(
            # Weights
            weight_tolerance=get_float("PANELSCORE_WEIGHT_TOLERANCE", 0.001),
            weights_path=os.environ.get("PANELSCORE_WEIGHTS_PATH") or None,
            
            # Evolution
            changed_threshold=get_float("PANELSCORE_CHANGED_THRESHOLD", 0.01),
            
            # Convergence
            convergence_dimension=os.environ.get(
                "PANELSCORE_CONVERGENCE_DIMENSION", "code_quality"
            ),
            convergence_min_panel_size=get_int("PANELSCORE_CONVERGENCE_MIN_PANEL_SIZE", 2),
            
            # History
            history_base_dir=os.environ.get("PANELSCORE_HISTORY_DIR", ".evaluated-commits"),
            history_filename=os.environ.get("PANELSCORE_HISTORY_FILENAME", "history.json"),
            trend_threshold=get_float("PANELSCORE_TREND_THRESHOLD", 0.1),
            
            # Pricing
            input_price_per_million=get_float("PANELSCORE_INPUT_PRICE_PER_MILLION", 3.0),
            output_price_per_million=get_float("PANELSCORE_OUTPUT_PRICE_PER_MILLION", 15.0),
            
            # Batch
            batch_max_workers=get_int("PANELSCORE_BATCH_MAX_WORKERS", 4),
        )
    
    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "weight_tolerance": self.weight_tolerance,
            "weights_path": self.weights_path,
            "changed_threshold": self.changed_threshold,
            "convergence_dimension": self.convergence_dimension,
            "convergence_min_panel_size": self.convergence_min_panel_size,
            "history_base_dir": self.history_base_dir,
            "history_filename": self.history_filename,
            "trend_threshold": self.trend_threshold,
            "input_price_per_million": self.input_price_per_million,
            "output_price_per_million": self.output_price_per_million,
            "batch_max_workers": self.batch_max_workers,
        }


# Global config instance (lazy-loaded)
_config: Optional[PanelConfig] = None


def get_panel_config(force_reload: bool = False) -> PanelConfig:
    """
    Get the global panel configuration.
    
    Lazy-loads configuration from environment variables.
    
    Args:
        force_reload: Force reload from environment
    
    Returns:
        PanelConfig instance
    """
    global _config
    
    if _config is None or force_reload:
        _config = PanelConfig.from_env()
        logger.debug(
            f"[CONFIG] Loaded panel config: "
            f"history_dir={_config.history_base_dir}, "
            f"convergence={_config.convergence_dimension}, "
            f"weights_path={_config.weights_path}"
        )
    
    return _config


def reset_panel_config() -> None:
    """Reset global config (mainly for testing)."""
    global _config
    _config = None
