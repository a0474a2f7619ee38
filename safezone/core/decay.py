"""
Decay and normalization functions for SafeZone.

This module contains pure functions shared by incident, news and
density aggregation: half-life decay over elapsed time or distance,
and linear normalization into [0, 1].
"""

import math

DEFAULT_TIME_HALF_LIFE_HOURS = 24.0
DEFAULT_SPATIAL_HALF_LIFE_KM = 5.0

def _half_life_decay(value: float, elapsed: float, half_life: float) -> float:
    # 음수 경과량은 0으로 취급 (미래 타임스탬프가 신호를 증폭하지 않도록)
    elapsed = max(0.0, elapsed)
    rate = math.log(0.5) / half_life
    return value * math.exp(rate * elapsed)

def temporal_decay(value: float, hours_elapsed: float,
                   half_life_hours: float = DEFAULT_TIME_HALF_LIFE_HOURS) -> float:
    """
    시간 경과에 따른 반감기 감쇠를 적용합니다.

    Args:
        value: 원래 값
        hours_elapsed: 경과 시간 (시간)
        half_life_hours: 반감기 (시간)

    Returns:
        감쇠된 값 (|결과| <= |value|)
    """
    return _half_life_decay(value, hours_elapsed, half_life_hours)

def spatial_decay(value: float, distance_km: float,
                  half_life_km: float = DEFAULT_SPATIAL_HALF_LIFE_KM) -> float:
    """
    거리에 따른 반감기 감쇠를 적용합니다.

    Args:
        value: 원래 값
        distance_km: 거리 (킬로미터)
        half_life_km: 반감 거리 (킬로미터)

    Returns:
        감쇠된 값 (|결과| <= |value|)
    """
    return _half_life_decay(value, distance_km, half_life_km)

def clamp(value: float, low: float, high: float) -> float:
    """값을 [low, high] 범위로 제한합니다. NaN은 low로 처리합니다."""
    if math.isnan(value):
        return low
    return max(low, min(high, value))

def normalize(value: float, min_value: float, max_value: float) -> float:
    """
    값을 선형으로 [0, 1] 범위에 매핑합니다.

    Args:
        value: 원래 값
        min_value: 범위 하한
        max_value: 범위 상한

    Returns:
        정규화된 값, 범위 폭이 0이면 0.5
    """
    if max_value == min_value:
        return 0.5
    return clamp((value - min_value) / (max_value - min_value), 0.0, 1.0)
