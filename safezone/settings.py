# safezone/settings.py
from __future__ import annotations
from typing import Dict, Optional
from pydantic import BaseModel, Field, model_validator

class RegionSettings(BaseModel):
    # 관할 구역 (Northeast India: 23°N-29°N, 88°E-97°E)
    name: str = "Northeast India"
    north: float = 29.0
    south: float = 23.0
    east: float = 97.0
    west: float = 88.0
    dataset_dir: Optional[str] = None         # cities.csv / forests.csv / restricted.csv (또는 .xlsx)

class ClassifierSettings(BaseModel):
    restricted_radius_km: float = 10.0
    forest_radius_km: float = 5.0
    city_radius_km: float = 20.0
    moderate_radius_km: float = 50.0

class ScoringWeights(BaseModel):
    incidents: float = 0.30
    news: float = 0.20
    police_proximity: float = 0.20
    density: float = 0.15
    terrain: float = 0.10
    time_of_day: float = 0.05

    @model_validator(mode="after")
    def _check_sum(self) -> "ScoringWeights":
        total = (self.incidents + self.news + self.police_proximity
                 + self.density + self.terrain + self.time_of_day)
        if abs(total - 1.0) > 1e-6:
            raise ValueError(f"scoring weights must sum to 1.0 (got {total:.4f})")
        return self

class ScoringSettings(BaseModel):
    weights: ScoringWeights = Field(default_factory=ScoringWeights)
    time_half_life_hours: float = 24.0
    spatial_half_life_km: float = 5.0
    incident_lookback_hours: float = 7 * 24
    news_lookback_hours: float = 7 * 24
    density_lookback_hours: float = 24
    density_radius_km: float = 2.0
    police_sentinel_km: float = 50.0
    # 정규화 범위 (min, max)
    ranges: Dict[str, tuple[float, float]] = Field(default_factory=lambda: {
        "incidents": (0.0, 5.0),
        "news": (0.0, 10.0),
        "police_distance": (0.0, 20.0),
        "density": (0.0, 20.0),
    })
    timezone: str = "Asia/Kolkata"

class SchedulerSettings(BaseModel):
    refresh_interval_sec: float = 300.0
    run_on_start: bool = True
    read_max_retries: int = 2
    read_backoff_initial_sec: float = 0.5
    read_backoff_max_sec: float = 5.0

class StorageSettings(BaseModel):
    records_db_path: str = "/data/safezone.db"
    seed_zones: bool = True

class Observability(BaseModel):
    http_port: int = 8099
    metrics_enabled: bool = True
    service_name: str = "SafeZone"
    build_version: str = "0.2.0"
    build_date: str = "2025-01-01"
    log_level: str = "INFO"
    json_logs: bool = False

class Settings(BaseModel):
    dry_run: bool = False

    # 하위 섹션 (기본값/팩토리로 누락 방지)
    region: RegionSettings = Field(default_factory=RegionSettings)
    classifier: ClassifierSettings = Field(default_factory=ClassifierSettings)
    scoring: ScoringSettings = Field(default_factory=ScoringSettings)
    scheduler: SchedulerSettings = Field(default_factory=SchedulerSettings)
    storage: StorageSettings = Field(default_factory=StorageSettings)
    observability: Observability = Field(default_factory=Observability)
